"""
Unit tests for core.db liveness checks and the group lookup service.
"""
import logging
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.core import db as db_module
from app.models.study_group import StudyGroup
from app.models.user import User
from app.services.group_lookup import group_exists


class TestPingDb:
    """Tests for ping_db()."""

    @pytest.mark.asyncio
    async def test_ping_db_true_when_connected(self, db):
        assert await db_module.ping_db() is True

    @pytest.mark.asyncio
    async def test_ping_db_false_when_query_fails(self):
        conn = MagicMock()
        conn.execute_query = AsyncMock(side_effect=ConnectionError("down"))
        fake_connections = MagicMock()
        fake_connections.get.return_value = conn

        with patch.object(db_module, "connections", fake_connections):
            assert await db_module.ping_db() is False


class TestGroupLookup:
    """Tests for group_exists()."""

    @pytest.mark.asyncio
    async def test_existing_group(self, db):
        owner = await User.create(username="ada", email="ada@example.com", password_hash="x")
        group = await StudyGroup.create(name="Algorithms", subject="CS", created_by=owner)

        assert await group_exists(str(group.id)) is True

    @pytest.mark.asyncio
    async def test_missing_group(self, db):
        assert await group_exists(str(uuid.uuid4())) is False

    @pytest.mark.asyncio
    async def test_non_uuid_id(self, db):
        assert await group_exists("not-a-uuid") is False

    @pytest.mark.asyncio
    async def test_study_group_defaults(self, db):
        group = await StudyGroup.create(name="Physics")
        assert group.members == []
        assert group.timer == {}
        assert group.is_private is False
        assert group.updated_at is not None


class TestInitDb:
    """Tests for init_db() failure handling."""

    @pytest.mark.asyncio
    async def test_init_db_logs_and_reraises_on_failure(self, caplog):
        failing_init = AsyncMock(side_effect=ConnectionError("db unreachable"))

        with patch.object(db_module.Tortoise, "init", failing_init):
            with caplog.at_level(logging.ERROR, logger="uvicorn.error"):
                with pytest.raises(ConnectionError):
                    await db_module.init_db()

        failing_init.assert_awaited_once()
        assert "connection failed" in caplog.text
