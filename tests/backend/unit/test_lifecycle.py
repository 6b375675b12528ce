"""
Unit tests for core.lifecycle module.
Tests connect/disconnect hooks and RealtimeHub state ownership.
"""
import json

import pytest

from app.config import Settings
from app.core.exceptions import DuplicateConnection, UnknownConnection
from app.core.lifecycle import RealtimeHub


class TestConnect:
    """Tests for connection open."""

    @pytest.mark.asyncio
    async def test_connect_registers_and_greets(self, hub, ws_factory):
        ws = ws_factory()

        conn = await hub.connect("a", ws)

        assert hub.registry.get("a") is conn
        assert ws.frames() == [{"event": "connected", "data": {"connectionId": "a"}}]

    @pytest.mark.asyncio
    async def test_connect_duplicate_id_rejected(self, hub, ws_factory):
        first = ws_factory()
        await hub.connect("a", first)

        with pytest.raises(DuplicateConnection):
            await hub.connect("a", ws_factory())

        assert hub.registry.get("a").ws is first


class TestDisconnect:
    """Tests for connection close and cleanup."""

    @pytest.mark.asyncio
    async def test_disconnect_leaves_every_joined_channel(self, hub, connect):
        await connect("a")
        groups = ["g1", "g2", "g3", "g4"]
        for g in groups:
            await hub.router.join(g, "a")

        left = await hub.disconnect("a")

        assert left == set(groups)
        for g in groups:
            assert "a" not in hub.router.members(g)
        with pytest.raises(UnknownConnection):
            hub.registry.get("a")

    @pytest.mark.asyncio
    async def test_disconnect_notifies_and_later_broadcasts_skip_the_gone(self, hub, connect):
        ws_a = await connect("a")
        ws_b = await connect("b")
        await hub.router.join("g1", "a")
        await hub.router.join("g1", "b")
        ws_b.reset()

        await hub.disconnect("a")
        ws_a.reset()
        delivered = await hub.router.broadcast("g1", "new-message", {"groupId": "g1", "text": "hi"})

        assert delivered == 1
        assert ws_a.frames() == []
        assert ws_b.events("user-left") == [{"event": "user-left", "data": "a"}]
        assert len(ws_b.events("new-message")) == 1
        assert hub.router.members("g1") == {"b"}

    @pytest.mark.asyncio
    async def test_disconnect_last_member_prunes_channel(self, hub, connect):
        await connect("a")
        await hub.router.join("g1", "a")

        await hub.disconnect("a")

        assert hub.router.channel_ids() == []

    @pytest.mark.asyncio
    async def test_disconnect_unknown_is_noop(self, hub):
        assert await hub.disconnect("ghost") == set()


class TestHub:
    """Tests for hub construction and shutdown."""

    def test_from_settings_copies_policy(self):
        settings = Settings(reflect_to_sender=False, notify_malformed=False, enforce_group_lookup=True)

        async def lookup(group_id):
            return True

        hub = RealtimeHub.from_settings(settings, group_lookup=lookup)

        assert hub.reflect_to_sender is False
        assert hub.notify_malformed is False
        assert hub.enforce_group_lookup is True
        assert hub.group_lookup is lookup

    @pytest.mark.asyncio
    async def test_shutdown_clears_state(self, hub, connect):
        await connect("a")
        await hub.router.join("g1", "a")

        hub.shutdown()

        assert len(hub.registry) == 0
        assert hub.router.channel_ids() == []

    def test_decode_valid_frame(self):
        frame = RealtimeHub.decode(json.dumps({"event": "join-group", "data": "g1"}))
        assert frame.event == "join-group"
        assert frame.data == "g1"
