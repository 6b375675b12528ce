# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.db import init_db, close_db
from app.core.lifecycle import RealtimeHub
from app.schemas.system import ErrorOut
from app.services.group_lookup import group_exists

from app.api.v1.routers import system
from app.api.v1.routers.ws_groups import router as ws_groups_router

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    # Realtime state lives for the whole process and is injected into WS routes
    app.state.hub = RealtimeHub.from_settings(settings, group_lookup=group_exists)
    # Database failure is fatal: init_db logs and re-raises, aborting startup
    await init_db()
    logger.info("[startup] %s listening on %s:%s", settings.APP_NAME, settings.host, settings.port)

@app.on_event("shutdown")
async def on_shutdown():
    hub = getattr(app.state, "hub", None)
    if hub is not None:
        hub.shutdown()
    await close_db()

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    error = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content=ErrorOut(error=error).model_dump())

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("[http] unhandled error on %s: %r", request.url.path, exc)
    return JSONResponse(status_code=500, content=ErrorOut(error=str(exc)).model_dump())

# REST
app.include_router(system.router)

# WebSocket
app.include_router(ws_groups_router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
