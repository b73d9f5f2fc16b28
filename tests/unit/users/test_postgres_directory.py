"""Tests for PostgresUserDirectory query behaviour."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID, uuid4

import pytest

from leadbook.users.models import UserRole
from leadbook.users.stores.postgres import PostgresUserDirectory
from leadbook.utils.time import utc_now


def user_row(user_id: UUID, full_name: str = "Neha") -> dict[str, Any]:
    now = utc_now()
    return {
        "id": user_id,
        "email": "neha@example.com",
        "full_name": full_name,
        "role": UserRole.USER.value,
        "created_at": now,
        "updated_at": now,
    }


class RecordingConnection:
    """Answers fetchrow calls from a queue and records the SQL."""

    def __init__(self, rows: list[dict[str, Any] | None]) -> None:
        self.rows = rows
        self.queries: list[str] = []

    async def fetchrow(self, query: str, *args: Any) -> dict[str, Any] | None:
        self.queries.append(" ".join(query.split()))
        return self.rows.pop(0)


class RecordingPool:
    def __init__(self, conn: RecordingConnection) -> None:
        self.conn = conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[RecordingConnection]:
        yield self.conn


class TestEnsureUser:
    """Tests for get-or-create provisioning."""

    @pytest.mark.asyncio
    async def test_existing_user_is_not_written(self) -> None:
        user_id = uuid4()
        conn = RecordingConnection([user_row(user_id)])
        directory = PostgresUserDirectory(RecordingPool(conn))

        user = await directory.ensure_user(user_id, "neha@example.com", "Neha Rao")

        assert user.full_name == "Neha"
        assert len(conn.queries) == 1
        assert conn.queries[0].startswith("SELECT")

    @pytest.mark.asyncio
    async def test_missing_user_is_inserted(self) -> None:
        user_id = uuid4()
        conn = RecordingConnection([None, user_row(user_id)])
        directory = PostgresUserDirectory(RecordingPool(conn))

        user = await directory.ensure_user(user_id, "neha@example.com", "Neha")

        assert user.id == user_id
        assert "ON CONFLICT (id) DO NOTHING" in conn.queries[1]

    @pytest.mark.asyncio
    async def test_concurrent_insert_falls_back_to_select(self) -> None:
        user_id = uuid4()
        conn = RecordingConnection([None, None, user_row(user_id)])
        directory = PostgresUserDirectory(RecordingPool(conn))

        user = await directory.ensure_user(user_id, "neha@example.com")

        assert user.id == user_id
        assert [q.split()[0] for q in conn.queries] == ["SELECT", "INSERT", "SELECT"]
