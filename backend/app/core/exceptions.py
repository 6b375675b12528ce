# app/core/exceptions.py
"""
Error types raised by the realtime coordination layer.
Every error carries a stable `code` that is reported to the client in
`error` events, so the frontend can branch on it without parsing messages.
"""


class RealtimeError(Exception):
    """Base class for all realtime coordination errors."""

    code = "REALTIME_ERROR"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def to_payload(self) -> dict:
        return {"code": self.code, "message": self.message}


class MalformedEvent(RealtimeError):
    """Inbound frame or payload is missing a required field or is not valid JSON."""

    code = "MALFORMED_EVENT"


class UnknownConnection(RealtimeError):
    """Operation requires a registered connection that does not exist."""

    code = "UNKNOWN_CONNECTION"


class UnknownChannel(RealtimeError):
    """Operation requires a channel (study group) that does not exist."""

    code = "UNKNOWN_CHANNEL"


class DuplicateConnection(RealtimeError):
    """A connection id was registered twice. Indicates a transport bug."""

    code = "DUPLICATE_CONNECTION"


class GroupLookupFailed(RealtimeError):
    """The study-group lookup could not be completed (e.g. the database is down)."""

    code = "GROUP_LOOKUP_FAILED"
