import logging

from .config import settings

# Loggers that flood DEBUG output during normal page rendering
_QUIET_LOGGERS = ("uvicorn.access", "aiosqlite", "asyncio", "multipart")


def setup_logging() -> None:
    """Configure the root logger once from ``settings.logging``.

    Calling it again only re-applies the level. SQL statement logging is left
    to SQLAlchemy's ``echo`` flag, so ``sqlalchemy.engine`` is pinned to WARNING
    unless echo is enabled.
    """
    level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        return

    logging.basicConfig(level=level, format=settings.logging.format)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))

    echo = settings.database is not None and settings.database.echo
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if echo else logging.WARNING)


__all__ = ["setup_logging"]
