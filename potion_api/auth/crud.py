from __future__ import annotations

import html
from typing import Any, Dict, List, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from potion_api.db import users_col
from potion_api.errors import AuthenticationError, ConflictError, ValidationError
from potion_api.util.time import utcnow_iso

from .security import hash_password, verify_password


USERNAME_MIN = 3
USERNAME_MAX = 30
PASSWORD_MIN = 6


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def clean_input(value: Any) -> str:
    """Trim and HTML-escape a submitted credential."""
    return html.escape(str(value or "").strip())


def public_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    d = dict(doc)
    d.pop("password_hash", None)
    if "_id" in d:
        d["user_id"] = str(d.pop("_id"))
    return d


def get_user_by_username(db: Database, username: str) -> Optional[Dict[str, Any]]:
    u = clean_input(username)
    if not u:
        return None
    return users_col(db).find_one({"username": u})


def _registration_errors(username: str, password: str) -> List[Dict[str, Any]]:
    errors: List[Dict[str, Any]] = []
    if not username:
        errors.append({"field": "username", "msg": "username_required"})
    elif not (USERNAME_MIN <= len(username) <= USERNAME_MAX):
        errors.append({"field": "username", "msg": f"must be between {USERNAME_MIN} and {USERNAME_MAX} characters"})
    if not password:
        errors.append({"field": "password", "msg": "password_required"})
    elif len(password) < PASSWORD_MIN:
        errors.append({"field": "password", "msg": f"must be at least {PASSWORD_MIN} characters"})
    return errors


def register(
    db: Database,
    *,
    username: str,
    password: str,
    rounds: Optional[int] = None,
) -> Dict[str, Any]:
    """Create a user. The password is hashed before anything is written."""
    u = clean_input(username)
    p = clean_input(password)

    errors = _registration_errors(u, p)
    if errors:
        raise ValidationError("invalid_registration", errors=errors)

    if users_col(db).find_one({"username": u}, {"_id": 1}) is not None:
        raise ConflictError("username_exists")

    doc = {
        "username": u,
        "password_hash": hash_password(p, rounds=rounds),
        "created_at": utcnow_iso(),
    }
    try:
        res = users_col(db).insert_one(doc)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration.
        raise ConflictError("username_exists")

    doc["_id"] = res.inserted_id
    _debug(f"registered user username={u}")
    return public_user(doc)


def verify_user_credentials(db: Database, username: str, password: str) -> Dict[str, Any]:
    """Return the user doc, or raise the same error for unknown user and bad password."""
    user = get_user_by_username(db, username)
    if user is None or not verify_password(clean_input(password), str(user.get("password_hash") or "")):
        raise AuthenticationError("invalid_credentials")
    return user
