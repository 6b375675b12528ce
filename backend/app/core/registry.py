# app/core/registry.py
"""
Connection registry for the realtime layer.
Tracks every live WebSocket connection by its id together with the set of
group channels it has joined. The channel side of the membership lives in
`app.core.pubsub.ChannelRouter`; both sides are kept in sync by the router
and the lifecycle manager.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from app.core.exceptions import DuplicateConnection, UnknownConnection


@dataclass
class Connection:
    """
    One live realtime client session.

    Attributes:
        id: Opaque connection identifier, unique among live connections
        ws: Transport handle used for outbound frames (anything with an async
            `send_text`); None for connections registered without a socket
        channels: Group channel ids this connection has joined
    """
    id: str
    ws: Optional[Any] = None
    channels: Set[str] = field(default_factory=set)


class ConnectionRegistry:
    """In-memory map of connection id -> Connection."""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}

    def register(self, connection_id: str, ws: Optional[Any] = None) -> Connection:
        """
        Create a connection record with an empty channel set.

        Raises:
            DuplicateConnection: If the id is already registered. The existing
                record is left untouched (duplicates are rejected, not overwritten).
        """
        if connection_id in self._connections:
            raise DuplicateConnection(f"connection {connection_id} is already registered")
        conn = Connection(id=connection_id, ws=ws)
        self._connections[connection_id] = conn
        return conn

    def deregister(self, connection_id: str) -> Set[str]:
        """
        Remove a connection record and return the channels it was subscribed to.
        Unknown ids are a no-op and return an empty set.
        """
        conn = self._connections.pop(connection_id, None)
        if conn is None:
            return set()
        return set(conn.channels)

    def get(self, connection_id: str) -> Connection:
        conn = self._connections.get(connection_id)
        if conn is None:
            raise UnknownConnection(f"connection {connection_id} is not registered")
        return conn

    def find(self, connection_id: str) -> Optional[Connection]:
        """Like `get`, but returns None for unknown ids."""
        return self._connections.get(connection_id)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def clear(self) -> None:
        self._connections.clear()
