"""Pytest fixtures for tests that need a real database.

Each test gets a fresh SQLite file, installed as the module-level engine so
code using get_connection()/get_transaction() talks to it.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest_asyncio
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from livestatz.calendar import to_utc
from livestatz.database import set_engine
from livestatz.tables import events, fan_events, fans, influencers, metadata, rsvps


class Seeder:
    """Inserts rows for tests, committing each one."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _insert(self, table, **values) -> UUID:
        values.setdefault("id", uuid4())
        # SQLite drops the offset, so instants are stored as UTC
        values = {
            key: to_utc(value) if isinstance(value, datetime) else value
            for key, value in values.items()
        }
        async with self.engine.begin() as conn:
            await conn.execute(insert(table).values(**values))
        return values["id"]

    async def influencer(self, email: str = "creator@example.com") -> UUID:
        return await self._insert(influencers, name="Creator", email=email)

    async def event(self, influencer_id: UUID, title: str = "Live Q&A") -> UUID:
        return await self._insert(
            events,
            influencer_id=influencer_id,
            title=title,
            starts_at=datetime(2024, 3, 4, 18, 0, tzinfo=timezone.utc),
        )

    async def fan(self, user_id: UUID, created_at: datetime | None = None) -> UUID:
        values = {"user_id": user_id, "name": "Fan", "email": "fan@example.com"}
        if created_at is not None:
            values["created_at"] = created_at
        return await self._insert(fans, **values)

    async def attendance(
        self, fan_id: UUID, event_id: UUID, attended_at: datetime
    ) -> UUID:
        return await self._insert(
            fan_events,
            fan_id=fan_id,
            event_id=event_id,
            event_name="Live Q&A",
            attendance_status="attended",
            attended_at=attended_at,
        )

    async def rsvp(
        self,
        event_id: UUID,
        fan_id: UUID,
        created_at: datetime | None = None,
        status: str = "confirmed",
    ) -> UUID:
        values = {"event_id": event_id, "fan_id": fan_id, "status": status}
        if created_at is not None:
            values["created_at"] = created_at
        return await self._insert(rsvps, **values)


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
    set_engine(engine)
    try:
        yield engine
    finally:
        set_engine(None)
        await engine.dispose()


@pytest_asyncio.fixture
async def db_conn(db_engine):
    async with db_engine.connect() as conn:
        yield conn


@pytest_asyncio.fixture
async def seed(db_engine) -> Seeder:
    return Seeder(db_engine)
