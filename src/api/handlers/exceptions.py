from __future__ import annotations

from datetime import UTC, datetime
import logging
from typing import TYPE_CHECKING

from fastapi.responses import JSONResponse

from core.exceptions import BoardException, map_exception_to_http

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers."""

    @app.exception_handler(BoardException)
    async def board_exception_handler(request: Request, exc: BoardException) -> JSONResponse:  # noqa: D401
        http_exc = map_exception_to_http(exc)
        logger.info("%s %s -> %s: %s", request.method, request.url.path, http_exc.status_code, exc.message)
        return JSONResponse(
            status_code=http_exc.status_code,
            content={
                "success": False,
                "message": http_exc.detail,
                "timestamp": datetime.now(UTC).isoformat(),
                "error": {"type": exc.__class__.__name__, "code": exc.code, **(exc.details or {})},
            },
        )
