# app/core/handlers.py
"""
Session event handlers for study-group realtime traffic.

Each handler is stateless: it validates the inbound payload and delegates to
the ChannelRouter owned by the hub it is given. `EVENT_HANDLERS` maps the
inbound wire event name to its handler.
"""
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict

from app.core.exceptions import GroupLookupFailed, MalformedEvent, UnknownChannel

if TYPE_CHECKING:
    from app.core.lifecycle import RealtimeHub

logger = logging.getLogger("uvicorn.error")

JOIN_GROUP = "join-group"
LEAVE_GROUP = "leave-group"
TIMER_START = "timer-start"
SEND_MESSAGE = "send-message"

TIMER_STARTED = "timer-started"
NEW_MESSAGE = "new-message"


def extract_group_id(payload: Any) -> str:
    """
    Pull a non-empty group id out of an inbound payload.
    `join-group` may send the bare id string; all other events send an
    object carrying `groupId`.

    Raises:
        MalformedEvent: If no non-empty string group id is present
    """
    group_id = payload.get("groupId") if isinstance(payload, dict) else payload
    if not isinstance(group_id, str) or not group_id.strip():
        raise MalformedEvent("groupId must be a non-empty string")
    return group_id


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise MalformedEvent("payload must be an object carrying groupId")
    return payload


async def on_join_group(hub: "RealtimeHub", connection_id: str, payload: Any) -> None:
    """
    Subscribe the sender to a study group's channel.

    Args:
        hub: Realtime coordinator holding the router and join policy
        connection_id: Sender connection id
        payload: Bare group id string or an object carrying `groupId`

    Raises:
        MalformedEvent: If the group id is missing or empty
        UnknownChannel: If group lookup is enforced and the group does not exist
        GroupLookupFailed: If group lookup is enforced and the lookup itself errored
    """
    group_id = extract_group_id(payload)
    if hub.enforce_group_lookup and hub.group_lookup is not None:
        try:
            exists = await hub.group_lookup(group_id)
        except Exception as e:
            logger.error("[handlers] group lookup for %s failed: %r", group_id, e)
            raise GroupLookupFailed(f"could not look up study group {group_id}") from e
        if not exists:
            raise UnknownChannel(f"study group {group_id} does not exist")
    # join announces `user-joined` to everyone else in the channel
    await hub.router.join(group_id, connection_id)


async def on_leave_group(hub: "RealtimeHub", connection_id: str, payload: Any) -> None:
    """
    Unsubscribe the sender from a study group's channel; a no-op if it was not a member.

    Raises:
        MalformedEvent: If the group id is missing or empty
    """
    group_id = extract_group_id(payload)
    await hub.router.leave(group_id, connection_id)


async def on_timer_start(hub: "RealtimeHub", connection_id: str, payload: Any) -> None:
    """
    Relay a timer transition as `timer-started` to the whole channel.
    The origin gets the echo too since its UI waits for it.

    Args:
        payload: Object with `groupId` plus timer fields (action, duration, ...), relayed as-is

    Raises:
        MalformedEvent: If the payload is not an object or lacks a group id
    """
    data = _require_object(payload)
    group_id = extract_group_id(data)
    await hub.router.broadcast_including_self(group_id, TIMER_STARTED, data)


async def on_send_message(hub: "RealtimeHub", connection_id: str, payload: Any) -> None:
    """
    Relay a chat message as `new-message`; the sender is skipped unless
    `hub.reflect_to_sender` is on.

    Raises:
        MalformedEvent: If the payload is not an object or lacks a group id
    """
    data = _require_object(payload)
    group_id = extract_group_id(data)
    exclude = None if hub.reflect_to_sender else connection_id
    await hub.router.broadcast(group_id, NEW_MESSAGE, data, exclude=exclude)


Handler = Callable[["RealtimeHub", str, Any], Awaitable[None]]

EVENT_HANDLERS: Dict[str, Handler] = {
    JOIN_GROUP: on_join_group,
    LEAVE_GROUP: on_leave_group,
    TIMER_START: on_timer_start,
    SEND_MESSAGE: on_send_message,
}
