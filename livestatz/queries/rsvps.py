"""Database queries for RSVPs."""

from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import events, influencers, rsvps

# Columns callers may change through update_rsvp
UPDATABLE_COLUMNS = frozenset(
    {
        "event_id",
        "fan_id",
        "status",
        "added_to_calendar",
        "reminder_sent_30",
        "reminder_sent_10",
    }
)


async def list_rsvps(
    conn: AsyncConnection,
    event_id: UUID | None = None,
) -> list[dict]:
    """Get RSVPs, newest first, optionally for a single event."""
    query = select(rsvps).order_by(rsvps.c.created_at.desc())
    if event_id is not None:
        query = query.where(rsvps.c.event_id == event_id)
    result = await conn.execute(query)
    return [dict(row) for row in result.mappings()]


async def get_rsvp_by_event_and_fan(
    conn: AsyncConnection,
    event_id: UUID,
    fan_id: UUID,
) -> dict | None:
    """Get the RSVP for an (event, fan) pair, or None if there isn't one."""
    result = await conn.execute(
        select(rsvps)
        .where(rsvps.c.event_id == event_id)
        .where(rsvps.c.fan_id == fan_id)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def create_rsvp(
    conn: AsyncConnection,
    event_id: UUID,
    fan_id: UUID,
    status: str,
    added_to_calendar: bool = False,
) -> dict:
    """
    Insert an RSVP and return the new row.

    Raises IntegrityError if the (event, fan) pair already has one
    (rsvps_event_fan_unique).
    """
    result = await conn.execute(
        insert(rsvps)
        .values(
            event_id=event_id,
            fan_id=fan_id,
            status=status,
            added_to_calendar=added_to_calendar,
            reminder_sent_30=False,
            reminder_sent_10=False,
        )
        .returning(*rsvps.c)
    )
    return dict(result.mappings().one())


async def update_rsvp(
    conn: AsyncConnection,
    rsvp_id: UUID,
    **updates,
) -> dict | None:
    """Update an RSVP and return the new row, or None if it doesn't exist."""
    unknown = set(updates) - UPDATABLE_COLUMNS
    if unknown:
        raise ValueError(f"Cannot update RSVP columns: {', '.join(sorted(unknown))}")

    result = await conn.execute(
        update(rsvps)
        .where(rsvps.c.id == rsvp_id)
        .values(**updates, updated_at=func.now())
        .returning(*rsvps.c)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def delete_rsvp(conn: AsyncConnection, rsvp_id: UUID) -> int:
    """Delete an RSVP. Returns the number of rows removed."""
    result = await conn.execute(delete(rsvps).where(rsvps.c.id == rsvp_id))
    return result.rowcount


async def count_rsvps_for_owner(conn: AsyncConnection, owner_email: str) -> int:
    """Count RSVPs across all events owned by the influencer with this email."""
    result = await conn.execute(
        select(func.count())
        .select_from(
            rsvps.join(events, rsvps.c.event_id == events.c.id).join(
                influencers, events.c.influencer_id == influencers.c.id
            )
        )
        .where(influencers.c.email == owner_email)
    )
    return result.scalar_one()
