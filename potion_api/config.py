import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load a local .env file if present.
load_dotenv()


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Every value has a local-development default. In production, set at least
    MONGO_URI and AUTH_JWT_SECRET.
    """

    # -----------------
    # Store (MongoDB)
    # -----------------
    MONGO_URI: str = os.environ.get("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB_NAME: str = os.environ.get("MONGO_DB_NAME", "potions")

    # Applied to server selection, connect and socket operations.
    MONGO_TIMEOUT_MS: int = int(os.environ.get("MONGO_TIMEOUT_MS", "5000"))

    # -----------------
    # Auth (JWT session cookie)
    # -----------------
    # NOTE: In dev, this defaults to a fixed string so you can get started.
    # In production, you MUST set AUTH_JWT_SECRET to a strong random value.
    AUTH_JWT_SECRET: str = (
        os.environ.get("AUTH_JWT_SECRET")
        or os.environ.get("JWT_SECRET")
        or "dev_secret"
    )
    AUTH_TOKEN_EXPIRE_MINUTES: int = int(os.environ.get("AUTH_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

    # pbkdf2_sha256 work factor
    AUTH_PASSWORD_ROUNDS: int = int(os.environ.get("AUTH_PASSWORD_ROUNDS", "29000"))

    AUTH_COOKIE_NAME: str = (
        os.environ.get("AUTH_COOKIE_NAME")
        or os.environ.get("COOKIE_NAME")
        or "potion_token"
    )
    AUTH_COOKIE_PATH: str = os.environ.get("AUTH_COOKIE_PATH", "/")
    AUTH_COOKIE_SAMESITE: str = os.environ.get("AUTH_COOKIE_SAMESITE", "strict")  # lax|strict|none

    # Off by default; enable behind HTTPS.
    AUTH_COOKIE_SECURE: bool = _env_bool("AUTH_COOKIE_SECURE", False) is True

    # -----------------
    # HTTP
    # -----------------
    API_HOST: str = os.environ.get("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.environ.get("API_PORT") or os.environ.get("PORT") or "3000")

    CORS_ALLOW_ORIGINS: str = os.environ.get("CORS_ALLOW_ORIGINS", "*")


def load_config() -> Config:
    return Config()
