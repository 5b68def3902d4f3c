from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from formbuilder.utils import now_utc, to_iso

router = APIRouter(tags=["system"])


@router.get("/health")
async def health() -> dict[str, Any]:
    return {
        "success": True,
        "message": "Form Builder API is running",
        "timestamp": to_iso(now_utc()),
    }
