# app/api/v1/deps.py
from fastapi import WebSocket
from app.core.lifecycle import RealtimeHub

async def get_hub(websocket: WebSocket) -> RealtimeHub:
    """
    FastAPI dependency returning the process-wide RealtimeHub.

    The hub is created by the startup hook in `app.main` and stored on
    `app.state.hub`, so WebSocket routes receive it explicitly instead of
    importing module-level state.

    Usage:
        @router.websocket("/ws/groups")
        async def ws_groups(ws: WebSocket, hub: RealtimeHub = Depends(get_hub)):
            ...
    """
    return websocket.app.state.hub
