from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from db.database import check_db_connection, get_db_info

router = APIRouter(tags=["System"])


@router.get("/health", tags=["Health"])
async def health() -> dict[str, Any]:
    ok = await check_db_connection()
    return {
        "success": ok,
        "status": "ok" if ok else "degraded",
        "database": await get_db_info(),
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/", tags=["Root"], include_in_schema=False)
async def root() -> RedirectResponse:
    return RedirectResponse(url="/posts")
