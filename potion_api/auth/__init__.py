"""Authentication helpers.

Auth is deliberately small:

- Users collection (username + pbkdf2 password hash)
- JWT session token carried in an httpOnly, SameSite=Strict cookie

Logout only clears the cookie; there is no server-side revocation, so a
captured token stays valid until its expiry.
"""

from .crud import register, verify_user_credentials
from .deps import get_current_user

__all__ = [
    "get_current_user",
    "register",
    "verify_user_credentials",
]
