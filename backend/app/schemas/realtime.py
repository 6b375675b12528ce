# app/schemas/realtime.py
"""
Pydantic schemas for the study-group WebSocket protocol.
Every frame in both directions is an envelope of an event name and its data;
outbound frames are built by `app.core.pubsub.encode_frame`.
"""
from typing import Any

from pydantic import BaseModel, Field

__all__ = ["InboundFrame"]


class InboundFrame(BaseModel):
    """
    Frame sent by a client.
    Example: {"event": "timer-start", "data": {"groupId": "g1", "action": "start"}}
    """
    event: str = Field(min_length=1)  # Inbound event name, e.g. "join-group"
    data: Any = None  # Event payload; shape depends on the event
