"""Configuration loaded from environment variables."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SQLADMIN_BASE_URL = "https://sqladmin.googleapis.com/sql/v1beta4"


class Settings:
    """Process-wide configuration, fixed at startup and passed explicitly."""

    def __init__(
        self,
        PROJECT_ID: str = "",
        INSTANCE_ID: str = "",
        PORT: int = 80,
        HOST: str = "0.0.0.0",
        CREDENTIALS_FILE: str = "service_account.json",
        SQLADMIN_BASE_URL: str = DEFAULT_SQLADMIN_BASE_URL,
        SQLADMIN_TIMEOUT: Optional[float] = None,
        LOG_LEVEL: str = "info",
    ):
        # Target instance
        self.PROJECT_ID = PROJECT_ID
        self.INSTANCE_ID = INSTANCE_ID

        # Server
        self.PORT = PORT
        self.HOST = HOST

        # Provider
        self.CREDENTIALS_FILE = CREDENTIALS_FILE
        self.SQLADMIN_BASE_URL = SQLADMIN_BASE_URL.rstrip("/")
        self.SQLADMIN_TIMEOUT = SQLADMIN_TIMEOUT

        # App
        self.LOG_LEVEL = LOG_LEVEL

    def __repr__(self) -> str:
        return (
            f"Settings(PROJECT_ID={self.PROJECT_ID!r}, INSTANCE_ID={self.INSTANCE_ID!r}, "
            f"PORT={self.PORT!r})"
        )


def load_settings(env_file: str = ".env") -> Settings:
    """
    Build Settings from the environment.

    With ENV=local the variables are first loaded from ``env_file``.
    """
    if os.getenv("ENV") == "local":
        if os.path.isfile(env_file):
            load_dotenv(env_file)
        else:
            logger.warning(f"Error loading {env_file} file")

    timeout = os.getenv("SQLADMIN_TIMEOUT")

    return Settings(
        PROJECT_ID=os.getenv("PROJECT_ID", ""),
        INSTANCE_ID=os.getenv("INSTANCE_ID", ""),
        PORT=int(os.getenv("PORT") or 80),
        HOST=os.getenv("HOST") or "0.0.0.0",
        CREDENTIALS_FILE=os.getenv("CREDENTIALS_FILE") or "service_account.json",
        SQLADMIN_BASE_URL=os.getenv("SQLADMIN_BASE_URL") or DEFAULT_SQLADMIN_BASE_URL,
        SQLADMIN_TIMEOUT=float(timeout) if timeout else None,
        LOG_LEVEL=os.getenv("LOG_LEVEL", "info"),
    )
