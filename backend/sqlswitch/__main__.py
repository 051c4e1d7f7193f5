"""Entry point: ``python -m sqlswitch``."""

import logging

import uvicorn

from .config import load_settings
from .main import create_app

logger = logging.getLogger("sqlswitch")

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def resolve_log_level(name: str) -> str:
    """Lower-case level name understood by both logging and uvicorn; unknown names mean info."""
    name = (name or "").lower()
    return name if name in LOG_LEVELS else "info"


def main():
    settings = load_settings()
    log_level = resolve_log_level(settings.LOG_LEVEL)
    logging.basicConfig(level=getattr(logging, log_level.upper()))

    app = create_app(settings)

    logger.info(f"Server running at http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=log_level)


if __name__ == "__main__":
    main()
