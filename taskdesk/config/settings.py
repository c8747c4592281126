# taskdesk/config/settings.py
# Application configuration read from the environment

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime settings for the API server and the bundled client"""

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskdesk.db")
    DB_SSLMODE = os.getenv("DB_SSLMODE", "")

    # Tokens
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
    ALGORITHM = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_DAYS = int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", 30))

    # HTTP
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
        ).split(",")
        if origin.strip()
    ]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # First administrator created through /auth/create-admin
    BOOTSTRAP_ADMIN_EMAIL = os.getenv("BOOTSTRAP_ADMIN_EMAIL", "admin@example.com")
    BOOTSTRAP_ADMIN_PASSWORD = os.getenv("BOOTSTRAP_ADMIN_PASSWORD", "admin123")
    BOOTSTRAP_ADMIN_NAME = os.getenv("BOOTSTRAP_ADMIN_NAME", "مدير النظام")

    # Public registration honours a requested "admin" role while this is on
    ALLOW_ADMIN_SELF_REGISTRATION = _as_bool(os.getenv("ALLOW_ADMIN_SELF_REGISTRATION", "true"))

    # Server (start_server.py)
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", 8000))
    RELOAD = _as_bool(os.getenv("RELOAD", "true"))

    # Client
    NOTIFICATION_POLL_SECONDS = int(os.getenv("NOTIFICATION_POLL_SECONDS", 60))

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE_URL.lower().startswith("sqlite")

    @classmethod
    def connect_args(cls) -> dict:
        """Driver arguments for create_engine"""
        if cls.is_sqlite():
            return {"check_same_thread": False}
        if cls.DB_SSLMODE:
            return {"sslmode": cls.DB_SSLMODE}
        return {}


settings = Settings()
