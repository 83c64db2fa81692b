from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from pymongo.database import Database

from potion_api import __version__
from potion_api.auth import get_current_user
from potion_api.auth.crud import public_user, register, verify_user_credentials
from potion_api.auth.session import clear_session_cookie, issue_session, set_session_cookie
from potion_api.config import Config, load_config
from potion_api.db import get_database, get_db, init_db
from potion_api.errors import AuthenticationError, install_error_handlers

from . import analytics, potions


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


class Credentials(BaseModel):
    username: str = ""
    password: str = ""


def create_app(cfg: Optional[Config] = None, db: Optional[Database] = None) -> FastAPI:
    """Build the application.

    The database handle is created here (or injected, e.g. by tests) and
    shared through `app.state.db`.
    """

    cfg = cfg or load_config()
    db = db if db is not None else get_database(cfg)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        init_db(app.state.db)
        _debug(f"Potion API {__version__} ready (db={cfg.MONGO_DB_NAME})")
        yield

    app = FastAPI(
        title="Potion API",
        version=__version__,
        description="CRUD and analytics over potions, with cookie-based sessions.",
        lifespan=lifespan,
    )
    app.state.cfg = cfg
    app.state.db = db

    _cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
    if _cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    install_error_handlers(app)

    # -----------------------------
    # Health
    # -----------------------------

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    # -----------------------------
    # Auth
    # -----------------------------

    @app.post("/auth/register", status_code=201, tags=["Auth"])
    def auth_register(payload: Credentials, db: Database = Depends(get_db)) -> Dict[str, Any]:
        u = register(
            db,
            username=payload.username,
            password=payload.password,
            rounds=cfg.AUTH_PASSWORD_ROUNDS,
        )
        return {"message": "User created", "user": u}

    @app.post("/auth/login", tags=["Auth"])
    def auth_login(payload: Credentials, response: Response, db: Database = Depends(get_db)) -> Dict[str, Any]:
        try:
            user_doc = verify_user_credentials(db, payload.username, payload.password)
        except AuthenticationError:
            _debug("login rejected")
            raise

        u = public_user(user_doc)
        token = issue_session(cfg, u)
        set_session_cookie(response, token=token, cfg=cfg)
        return {"message": "Logged in", "user": u}

    @app.get("/auth/logout", tags=["Auth"])
    def auth_logout(response: Response) -> Dict[str, Any]:
        """Clear the session cookie."""
        clear_session_cookie(response, cfg)
        return {"message": "Logged out"}

    @app.get("/auth/me", tags=["Auth"])
    def auth_me(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        return {"user": user}

    app.include_router(potions.router)
    app.include_router(analytics.router)

    return app
