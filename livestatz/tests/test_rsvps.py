"""Tests for RsvpStore and its in-memory mirror."""

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import patch
from uuid import uuid4

import pytest
import pytest_asyncio

from livestatz.rsvps import RsvpCache, RsvpStore
from livestatz.users import CurrentUser

OWNER = CurrentUser(id=uuid4(), email="creator@example.com")
T0 = datetime(2024, 3, 4, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@asynccontextmanager
async def _broken_connection():
    raise ConnectionError("database unreachable")
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return RsvpStore(OWNER, cache=RsvpCache(max_age=timedelta(seconds=30), clock=clock))


@pytest_asyncio.fixture
async def event_and_fan(seed):
    event_id = await seed.event(await seed.influencer(OWNER.email))
    fan_id = await seed.fan(OWNER.id)
    return event_id, fan_id


class TestRsvpCache:
    def test_starts_stale(self, clock):
        assert RsvpCache(max_age=timedelta(seconds=30), clock=clock).is_fresh() is False

    def test_fresh_within_max_age(self, clock):
        cache = RsvpCache(max_age=timedelta(seconds=30), clock=clock)
        cache.replace_all([{"id": 1}])

        clock.now = T0 + timedelta(seconds=30)
        assert cache.is_fresh() is True

        clock.now = T0 + timedelta(seconds=31)
        assert cache.is_fresh() is False

    def test_writes_update_rows_and_invalidate(self, clock):
        cache = RsvpCache(max_age=timedelta(seconds=30), clock=clock)
        cache.replace_all([{"id": 1, "status": "pending"}])

        cache.prepend({"id": 2, "status": "confirmed"})
        assert [r["id"] for r in cache.rows] == [2, 1]
        assert cache.is_fresh() is False

        cache.replace_all(cache.rows)
        cache.replace({"id": 1, "status": "confirmed"})
        assert cache.rows[1]["status"] == "confirmed"
        assert cache.is_fresh() is False

        cache.remove(2)
        assert [r["id"] for r in cache.rows] == [1]

    def test_max_age_from_env(self):
        with patch.dict("os.environ", {"RSVP_CACHE_MAX_AGE_SECONDS": "5"}):
            cache = RsvpCache()
        assert cache.max_age == timedelta(seconds=5)


class TestCreateRsvp:
    @pytest.mark.asyncio
    async def test_create_then_lookup(self, store, event_and_fan):
        event_id, fan_id = event_and_fan

        created = await store.create_rsvp(event_id, fan_id)

        assert created.ok
        assert created.data["status"] == "confirmed"
        assert store.rsvps[0]["id"] == created.data["id"]

        found = await store.get_rsvp_by_event_and_fan(event_id, fan_id)
        assert found.ok
        assert found.data["id"] == created.data["id"]

    @pytest.mark.asyncio
    async def test_lookup_without_rsvp_is_not_an_error(self, store, event_and_fan):
        event_id, fan_id = event_and_fan

        found = await store.get_rsvp_by_event_and_fan(event_id, fan_id)

        assert found.ok
        assert found.data is None

    @pytest.mark.asyncio
    async def test_duplicate_is_a_conflict(self, store, event_and_fan):
        event_id, fan_id = event_and_fan
        await store.create_rsvp(event_id, fan_id)

        second = await store.create_rsvp(event_id, fan_id, status="pending")

        assert second.error == "RSVP already exists for this event and fan"
        assert store.error == second.error
        assert len(store.rsvps) == 1

    @pytest.mark.asyncio
    async def test_requires_user(self, db_engine):
        store = RsvpStore(None)

        result = await store.create_rsvp(uuid4(), uuid4())

        assert result.error == "User not authenticated"

    @pytest.mark.asyncio
    async def test_database_failure_is_stored(self, store):
        with patch("livestatz.rsvps.get_transaction", _broken_connection):
            result = await store.create_rsvp(uuid4(), uuid4())

        assert result.ok is False
        assert result.error == "database unreachable"
        assert store.error == "database unreachable"


class TestListRsvps:
    @pytest.mark.asyncio
    async def test_without_user_is_empty(self, db_engine):
        store = RsvpStore(None)

        result = await store.list_rsvps()

        assert result.ok
        assert result.data == []

    @pytest.mark.asyncio
    async def test_serves_fresh_mirror(self, store, seed, event_and_fan):
        event_id, fan_id = event_and_fan
        await seed.rsvp(event_id, fan_id)

        first = await store.list_rsvps()
        assert len(first.data) == 1

        # Written by another session; not visible until the mirror goes stale
        await seed.rsvp(event_id, await seed.fan(OWNER.id))
        assert len((await store.list_rsvps()).data) == 1
        assert len((await store.list_rsvps(refresh=True)).data) == 2

    @pytest.mark.asyncio
    async def test_refetches_when_stale(self, store, seed, clock, event_and_fan):
        event_id, fan_id = event_and_fan
        await store.list_rsvps()
        await seed.rsvp(event_id, fan_id)

        clock.now = T0 + timedelta(minutes=5)
        result = await store.list_rsvps()

        assert len(result.data) == 1

    @pytest.mark.asyncio
    async def test_refetches_after_own_write(self, store, seed, event_and_fan):
        event_id, fan_id = event_and_fan
        await store.list_rsvps()
        await store.create_rsvp(event_id, fan_id)
        await seed.rsvp(event_id, await seed.fan(OWNER.id))

        result = await store.list_rsvps()

        assert len(result.data) == 2

    @pytest.mark.asyncio
    async def test_filter_by_event(self, store, seed, event_and_fan):
        event_id, fan_id = event_and_fan
        other_event = await seed.event(await seed.influencer("other@example.com"))
        await seed.rsvp(event_id, fan_id)
        await seed.rsvp(other_event, fan_id)

        result = await store.list_rsvps(event_id=event_id)

        assert [row["event_id"] for row in result.data] == [event_id]

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_mirror(self, store, seed, clock, event_and_fan):
        event_id, fan_id = event_and_fan
        await seed.rsvp(event_id, fan_id)
        await store.list_rsvps()

        clock.now = T0 + timedelta(minutes=5)
        with patch("livestatz.rsvps.get_connection", _broken_connection):
            result = await store.list_rsvps()

        assert result.error == "database unreachable"
        assert len(store.rsvps) == 1


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_update(self, store, event_and_fan):
        event_id, fan_id = event_and_fan
        created = (await store.create_rsvp(event_id, fan_id, status="pending")).data

        updated = await store.update_rsvp(created["id"], status="confirmed")

        assert updated.data["status"] == "confirmed"
        assert store.rsvps[0]["status"] == "confirmed"

    @pytest.mark.asyncio
    async def test_update_missing(self, store, db_engine):
        result = await store.update_rsvp(uuid4(), status="confirmed")
        assert result.error == "RSVP not found"

    @pytest.mark.asyncio
    async def test_mark_added_to_calendar(self, store, event_and_fan):
        created = (await store.create_rsvp(*event_and_fan)).data

        result = await store.mark_added_to_calendar(created["id"])

        assert result.data["added_to_calendar"] is True

    @pytest.mark.asyncio
    async def test_mark_reminder_sent(self, store, event_and_fan):
        created = (await store.create_rsvp(*event_and_fan)).data

        result = await store.mark_reminder_sent(created["id"], 10)

        assert result.data["reminder_sent_10"] is True
        assert result.data["reminder_sent_30"] is False

    @pytest.mark.asyncio
    async def test_mark_reminder_sent_rejects_unknown_milestone(self, store):
        with patch("livestatz.rsvps.get_transaction") as mock_txn:
            result = await store.mark_reminder_sent(uuid4(), 15)

        assert result.error == "No reminder milestone for 15 minutes"
        assert store.error == result.error
        mock_txn.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete(self, store, event_and_fan):
        created = (await store.create_rsvp(*event_and_fan)).data

        result = await store.delete_rsvp(created["id"])

        assert result.data is True
        assert store.rsvps == []
        lookup = await store.get_rsvp_by_event_and_fan(*event_and_fan)
        assert lookup.data is None


class TestCountRsvpsForMyEvents:
    @pytest.mark.asyncio
    async def test_counts_owned_events(self, store, seed, event_and_fan):
        event_id, fan_id = event_and_fan
        await seed.rsvp(event_id, fan_id)
        other_event = await seed.event(await seed.influencer("other@example.com"))
        await seed.rsvp(other_event, fan_id)

        result = await store.count_rsvps_for_my_events()

        assert result.data == 1

    @pytest.mark.asyncio
    async def test_without_email_is_zero(self, db_engine):
        store = RsvpStore(CurrentUser(id=uuid4()))

        result = await store.count_rsvps_for_my_events()

        assert result.data == 0
