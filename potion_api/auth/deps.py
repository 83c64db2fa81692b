from __future__ import annotations

from typing import Any, Dict

import jwt
from fastapi import Request

from potion_api.errors import ApiError, AuthenticationError

from .security import decode_access_token


def get_current_user(request: Request) -> Dict[str, Any]:
    """Authenticate a request from its session cookie.

    The decoded identity is attached to `request.state.user`. The store is
    never consulted, so an unauthenticated call cannot reach it.
    """

    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise ApiError("server_config_missing")

    token = request.cookies.get(cfg.AUTH_COOKIE_NAME)
    if not token:
        raise AuthenticationError("missing_token")

    try:
        payload = decode_access_token(token=token, secret=cfg.AUTH_JWT_SECRET)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("token_expired")
    except (jwt.InvalidTokenError, ValueError):
        raise AuthenticationError("token_invalid")

    sub = payload.get("sub")
    if not sub:
        raise AuthenticationError("token_missing_sub")

    user = {"user_id": str(sub), "username": payload.get("username")}
    request.state.user = user
    return user
