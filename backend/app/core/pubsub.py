# backend/app/core/pubsub.py
"""
PubSub (Publish-Subscribe) module for study-group realtime broadcasting.
Maps each study group id to the set of connections subscribed to it and fans
events out to those connections over their WebSocket.

Every outbound frame has the same envelope:
    {"event": "<event name>", "data": <payload>}
"""
import json
import logging
from typing import Any, Dict, List, Optional, Set

from app.core.exceptions import UnknownChannel
from app.core.registry import ConnectionRegistry

logger = logging.getLogger("uvicorn.error")

USER_JOINED = "user-joined"
USER_LEFT = "user-left"


def encode_frame(event: str, data: Any) -> str:
    """Serialize an outbound event into the wire envelope."""
    return json.dumps({"event": event, "data": data}, default=str)


class ChannelRouter:
    """
    Channel-based message router for group sessions.

    Architecture:
    - The WebSocket router accepts sockets; this module only does membership
      bookkeeping and message routing
    - Channels are created on first join and pruned when their last member leaves
    - Membership is stored on both sides: here (channel -> connection ids) and
      on each `Connection.channels` in the registry

    Data structure:
    - _channels: Dict[group_id, Set[connection_id]]
      Example: {"g1": {"c-1", "c-2"}, "g2": {"c-3"}}
    """
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self._channels: Dict[str, Set[str]] = {}

    # -------- membership --------
    async def join(self, channel_id: str, connection_id: str) -> bool:
        """
        Subscribe a connection to a group channel and announce it to the others.

        Args:
            channel_id: Study group id
            connection_id: Registered connection id

        Returns:
            bool: True if the connection was newly added, False if it was
            already a member (repeat joins send no notification)

        Raises:
            UnknownConnection: If the connection is not registered
        """
        conn = self.registry.get(connection_id)
        members = self._channels.setdefault(channel_id, set())
        if connection_id in members:
            return False
        members.add(connection_id)
        conn.channels.add(channel_id)
        await self.broadcast(channel_id, USER_JOINED, connection_id, exclude=connection_id)
        return True

    async def leave(self, channel_id: str, connection_id: str) -> bool:
        """
        Remove a connection from a group channel and tell the remaining members.
        Idempotent: leaving a channel the connection is not in does nothing.

        Returns:
            bool: True if a membership was actually removed
        """
        removed = self.detach(channel_id, connection_id)
        if removed:
            await self.broadcast(channel_id, USER_LEFT, connection_id)
        return removed

    def detach(self, channel_id: str, connection_id: str) -> bool:
        """Drop both sides of a membership without notifying anyone."""
        members = self._channels.get(channel_id)
        removed = members is not None and connection_id in members
        if members is not None:
            members.discard(connection_id)
            if not members:
                # Empty channels are pruned so long-running processes don't accumulate them
                del self._channels[channel_id]
        conn = self.registry.find(connection_id)
        if conn is not None:
            removed = removed or channel_id in conn.channels
            conn.channels.discard(channel_id)
        return removed

    # -------- queries --------
    def members(self, channel_id: str) -> Set[str]:
        """Copy of a channel's member ids (empty set for unknown channels)."""
        return set(self._channels.get(channel_id, set()))

    def require_channel(self, channel_id: str) -> Set[str]:
        """Like `members`, but the channel must already exist."""
        if channel_id not in self._channels:
            raise UnknownChannel(f"channel {channel_id} does not exist")
        return self.members(channel_id)

    def channel_ids(self) -> List[str]:
        return list(self._channels)

    # -------- publish --------
    async def broadcast(
        self,
        channel_id: str,
        event: str,
        payload: Any,
        exclude: Optional[str] = None,
    ) -> int:
        """
        Send an event to every member of a channel except `exclude`.

        Args:
            channel_id: Study group id to publish to
            event: Outbound event name
            payload: JSON-serializable payload
            exclude: Connection id that should not receive the event (usually the sender)

        Returns:
            int: Number of connections the frame was delivered to

        Note: Broadcasting to an empty or unknown channel is a no-op. Delivery is
        best-effort; a failed send is logged and skipped.
        """
        targets = [cid for cid in self._channels.get(channel_id, ()) if cid != exclude]  # Snapshot before awaiting
        if not targets:
            return 0
        msg = encode_frame(event, payload)
        delivered = 0
        for cid in targets:
            conn = self.registry.find(cid)
            if conn is None or conn.ws is None:
                continue
            try:
                await conn.ws.send_text(msg)
                delivered += 1
            except Exception as e:
                logger.warning("[pubsub] send of %s to %s failed: %r", event, cid, e)
        return delivered

    async def broadcast_including_self(self, channel_id: str, event: str, payload: Any) -> int:
        """Send an event to every member of a channel, the origin included."""
        return await self.broadcast(channel_id, event, payload)

    async def send_to(self, connection_id: str, event: str, payload: Any) -> bool:
        """Send an event to a single connection (used for greetings and error replies)."""
        conn = self.registry.find(connection_id)
        if conn is None or conn.ws is None:
            return False
        try:
            await conn.ws.send_text(encode_frame(event, payload))
        except Exception as e:
            logger.warning("[pubsub] direct send of %s to %s failed: %r", event, connection_id, e)
            return False
        return True

    def clear(self) -> None:
        self._channels.clear()
