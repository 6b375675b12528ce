# app/api/v1/routers/system.py
from fastapi import APIRouter

from app.config import settings
from app.core.db import ping_db
from app.schemas.system import HealthOut, StatusOut

router = APIRouter(tags=["system"])

@router.get("/", response_model=StatusOut)
async def root():
    """Report that the service process is up."""
    return StatusOut(message=settings.APP_NAME)

@router.get("/health", response_model=HealthOut)
async def health():
    """
    Report process and database liveness.

    Returns:
        dict: {"success": True, "database": "connected" | "disconnected"}
    """
    alive = await ping_db()
    return HealthOut(database="connected" if alive else "disconnected")
