# app/core/lifecycle.py
"""
Connection lifecycle and the realtime coordinator.

`LifecycleManager` owns the connect/disconnect hooks. `RealtimeHub` bundles
the registry, router, lifecycle manager and handler policy into one
process-scoped object: it is created on application startup, stored on
`app.state.hub`, injected into the WebSocket route and cleared on shutdown.
"""
import json
import logging
from typing import Any, Awaitable, Callable, Optional, Set

from pydantic import ValidationError

from app.core.exceptions import MalformedEvent, RealtimeError
from app.core.handlers import EVENT_HANDLERS
from app.core.pubsub import USER_LEFT, ChannelRouter
from app.core.registry import Connection, ConnectionRegistry
from app.schemas.realtime import InboundFrame

logger = logging.getLogger("uvicorn.error")

CONNECTED = "connected"
ERROR = "error"

GroupLookup = Callable[[str], Awaitable[bool]]


class LifecycleManager:
    """Registers connections on open and tears down all their memberships on close."""

    def __init__(self, registry: ConnectionRegistry, router: ChannelRouter):
        self.registry = registry
        self.router = router

    def on_connect(self, connection_id: str, ws: Optional[Any] = None) -> Connection:
        conn = self.registry.register(connection_id, ws)
        logger.info("[realtime] client connected: %s (total=%d)", connection_id, len(self.registry))
        return conn

    async def on_disconnect(self, connection_id: str) -> Set[str]:
        """
        Deregister a connection and leave every channel it had joined.

        Returns:
            Set[str]: Channel ids the connection was removed from
        """
        channels = self.registry.deregister(connection_id)
        # All memberships are dropped before any notification is awaited
        for channel_id in channels:
            self.router.detach(channel_id, connection_id)
        for channel_id in channels:
            await self.router.broadcast(channel_id, USER_LEFT, connection_id)
        logger.info("[realtime] client disconnected: %s (left %d channels, total=%d)",
                    connection_id, len(channels), len(self.registry))
        return channels


class RealtimeHub:
    """
    Process-scoped realtime coordinator.

    Args:
        reflect_to_sender: Whether `send-message` is echoed back to its sender
        notify_malformed: Whether rejected events are answered with an `error` event
        enforce_group_lookup: Whether `join-group` must name an existing study group
        group_lookup: Async callable returning True if a group id exists
    """
    def __init__(
        self,
        reflect_to_sender: bool = True,
        notify_malformed: bool = True,
        enforce_group_lookup: bool = False,
        group_lookup: Optional[GroupLookup] = None,
    ):
        self.reflect_to_sender = reflect_to_sender
        self.notify_malformed = notify_malformed
        self.enforce_group_lookup = enforce_group_lookup
        self.group_lookup = group_lookup
        self.registry = ConnectionRegistry()
        self.router = ChannelRouter(self.registry)
        self.lifecycle = LifecycleManager(self.registry, self.router)

    @classmethod
    def from_settings(cls, settings, group_lookup: Optional[GroupLookup] = None) -> "RealtimeHub":
        return cls(
            reflect_to_sender=settings.reflect_to_sender,
            notify_malformed=settings.notify_malformed,
            enforce_group_lookup=settings.enforce_group_lookup,
            group_lookup=group_lookup,
        )

    async def connect(self, connection_id: str, ws: Optional[Any] = None) -> Connection:
        """Register a connection and greet it with its assigned id."""
        conn = self.lifecycle.on_connect(connection_id, ws)
        await self.router.send_to(connection_id, CONNECTED, {"connectionId": connection_id})
        return conn

    async def disconnect(self, connection_id: str) -> Set[str]:
        return await self.lifecycle.on_disconnect(connection_id)

    async def dispatch(self, connection_id: str, raw: str) -> bool:
        """
        Decode one inbound frame and run its handler.

        Errors are contained here: a bad frame from one client is logged (and
        reported back to that client if enabled) and never propagates into the
        connection loop.

        Returns:
            bool: True if the event was handled, False if it was dropped
        """
        try:
            frame = self.decode(raw)
            handler = EVENT_HANDLERS.get(frame.event)
            if handler is None:
                raise MalformedEvent(f"unknown event '{frame.event}'")
            await handler(self, connection_id, frame.data)
            return True
        except RealtimeError as e:
            await self.reject(connection_id, e)
            return False

    async def reject(self, connection_id: str, error: RealtimeError) -> None:
        """Log a dropped event and, if enabled, report it to its sender as an `error` event."""
        logger.warning("[realtime] dropped event from %s: %s %s", connection_id, error.code, error.message)
        if self.notify_malformed:
            await self.router.send_to(connection_id, ERROR, error.to_payload())

    @staticmethod
    def decode(raw: str) -> InboundFrame:
        try:
            return InboundFrame.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            raise MalformedEvent(f"invalid frame: {e.__class__.__name__}") from e

    def shutdown(self) -> None:
        """Drop all in-memory state (called on application shutdown)."""
        self.router.clear()
        self.registry.clear()
