# backend/app/api/v1/routers/ws_groups.py
import logging
import uuid

from fastapi import APIRouter, Depends, WebSocket
from starlette.websockets import WebSocketDisconnect, WebSocketState

from app.api.v1.deps import get_hub
from app.core.exceptions import DuplicateConnection, MalformedEvent
from app.core.lifecycle import RealtimeHub

logger = logging.getLogger("uvicorn.error")

router = APIRouter()

@router.websocket("/ws/groups")
async def ws_groups(ws: WebSocket, hub: RealtimeHub = Depends(get_hub)):
    """
    WebSocket endpoint for study-group presence, timers and chat.

    Message flow:
    1. Client connects; server sends {"event": "connected", "data": {"connectionId": "..."}}
    2. Client sends {"event": "join-group", "data": "<groupId>"}
    3. Other members receive {"event": "user-joined", "data": "<connectionId>"}
    4. Client sends "timer-start" / "send-message" with {"groupId": ..., ...};
       members receive "timer-started" / "new-message" with the same payload
    5. Client sends "leave-group" or disconnects; remaining members receive "user-left"

    Rejected frames (invalid JSON, unknown events, binary frames) are answered with
    {"event": "error", "data": {"code": ..., "message": ...}}
    and never close the connection.

    Args:
        ws: WebSocket connection object
        hub: Process-wide realtime coordinator (injected)
    """
    await ws.accept()  # Router handles accept; the hub only does bookkeeping and routing
    connection_id = uuid.uuid4().hex
    try:
        await hub.connect(connection_id, ws)
    except DuplicateConnection as e:
        logger.error("[ws_groups] rejected connection: %s", e.message)
        await ws.close(code=1011)
        return
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") is not None:
                await hub.dispatch(connection_id, message["text"])
            else:
                # Only JSON text frames carry events
                await hub.reject(connection_id, MalformedEvent("binary frames are not supported"))
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning("[ws_groups] error on %s: %r", connection_id, e)
        if ws.client_state == WebSocketState.CONNECTED:
            await ws.close(code=1011)
    finally:
        await hub.disconnect(connection_id)
