# app/schemas/system.py
"""
Pydantic schemas for the system (status and health) endpoints.
"""
from pydantic import BaseModel

__all__ = ["StatusOut", "HealthOut", "ErrorOut"]


class StatusOut(BaseModel):
    """Response of `GET /`."""
    success: bool = True
    message: str
    status: str = "running"


class HealthOut(BaseModel):
    """Response of `GET /health`; database is "connected" or "disconnected"."""
    success: bool = True
    database: str


class ErrorOut(BaseModel):
    """Body returned for unknown routes and unhandled errors."""
    success: bool = False
    error: str
