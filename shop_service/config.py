# shop_service/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

IMAGEKIT_UPLOAD_URL = "https://upload.imagekit.io/api/v1/files/upload"


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int | None = None) -> int | None:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return int(v)


def _get_bool(*keys: str, default: bool = False) -> bool:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


def _database_url() -> str:
    url = _get_env("DATABASE_URL")
    if url:
        return url
    return (
        f"postgresql+asyncpg://{_get_env('SHOP_DB_USER', default='postgres')}"
        f":{_get_env('SHOP_DB_PASSWORD', default='postgres')}"
        f"@{_get_env('SHOP_DB_HOST', default='localhost')}"
        f":{_get_env('SHOP_DB_PORT', default='5432')}"
        f"/{_get_env('SHOP_DB_NAME', default='shop')}"
    )


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    database_url: str
    db_echo: bool = False
    jwt_algorithm: str = "HS256"
    # None keeps tokens valid forever, matching the deployed clients
    jwt_expire_minutes: Optional[int] = None
    imagekit_private_key: Optional[str] = None
    imagekit_upload_url: str = IMAGEKIT_UPLOAD_URL
    imagekit_folder: str = "/"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build settings from the process environment (and .env, if present)."""
    secret = _get_env("JWT_SECRET_KEY")
    if not secret:
        raise RuntimeError("JWT_SECRET_KEY is not set")

    origins = _get_env("CORS_ORIGINS", default="*")
    return Settings(
        jwt_secret_key=secret,
        database_url=_database_url(),
        db_echo=_get_bool("SHOP_DB_ECHO"),
        jwt_algorithm=_get_env("JWT_ALGORITHM", default="HS256"),
        jwt_expire_minutes=_get_int("JWT_EXPIRE_MINUTES"),
        imagekit_private_key=_get_env("IMAGEKIT_PRIVATE_KEY"),
        imagekit_upload_url=_get_env("IMAGEKIT_UPLOAD_URL", default=IMAGEKIT_UPLOAD_URL),
        imagekit_folder=_get_env("IMAGEKIT_FOLDER", default="/"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        host=_get_env("SHOP_HOST", default="0.0.0.0"),
        port=_get_int("SHOP_PORT", default=3000),
        log_level=_get_env("SHOP_LOG_LEVEL", default="INFO").upper(),
    )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, loaded once. Also used as a FastAPI dependency."""
    return load_settings()
