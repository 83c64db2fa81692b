from __future__ import annotations

from typing import Any, Dict

from fastapi import Response

from potion_api.config import Config

from .security import create_access_token


def _cookie_secure(cfg: Config) -> bool:
    """Return whether the session cookie should be marked Secure."""
    samesite = str(cfg.AUTH_COOKIE_SAMESITE or "strict").lower()
    # Browsers require Secure when SameSite=None
    if samesite == "none":
        return True
    return bool(cfg.AUTH_COOKIE_SECURE)


def issue_session(cfg: Config, user: Dict[str, Any]) -> str:
    """Sign a session token for a verified user. Expiry is absolute."""
    return create_access_token(
        secret=cfg.AUTH_JWT_SECRET,
        user_id=str(user.get("user_id") or user.get("_id")),
        username=str(user["username"]),
        expires_minutes=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES),
    )


def set_session_cookie(response: Response, *, token: str, cfg: Config) -> None:
    response.set_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        value=str(token),
        httponly=True,
        samesite=str(cfg.AUTH_COOKIE_SAMESITE or "strict").lower(),
        secure=_cookie_secure(cfg),
        max_age=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES) * 60,
        path=cfg.AUTH_COOKIE_PATH or "/",
    )


def clear_session_cookie(response: Response, cfg: Config) -> None:
    """Client-side logout only. The token stays valid until it expires."""
    response.delete_cookie(
        key=cfg.AUTH_COOKIE_NAME,
        path=cfg.AUTH_COOKIE_PATH or "/",
        httponly=True,
        samesite=str(cfg.AUTH_COOKIE_SAMESITE or "strict").lower(),
        secure=_cookie_secure(cfg),
    )
