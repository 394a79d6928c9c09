"""Database queries for the weekly fan report. Window bounds are inclusive."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import events, fan_events, fans, influencers, rsvps


async def count_new_fans(
    conn: AsyncConnection,
    user_id: UUID,
    start: datetime,
    end: datetime,
) -> int:
    """Fans owned by the user created within [start, end]."""
    result = await conn.execute(
        select(func.count())
        .select_from(fans)
        .where(fans.c.user_id == user_id)
        .where(fans.c.created_at >= start)
        .where(fans.c.created_at <= end)
    )
    return result.scalar_one()


async def count_fans_attended(
    conn: AsyncConnection,
    user_id: UUID,
    start: datetime,
    end: datetime,
) -> int:
    """Distinct fans of the user with an attendance within [start, end]."""
    result = await conn.execute(
        select(func.count(distinct(fan_events.c.fan_id)))
        .select_from(fan_events.join(fans, fan_events.c.fan_id == fans.c.id))
        .where(fans.c.user_id == user_id)
        .where(fan_events.c.attended_at >= start)
        .where(fan_events.c.attended_at <= end)
    )
    return result.scalar_one()


async def count_rsvps_created(
    conn: AsyncConnection,
    owner_email: str,
    start: datetime,
    end: datetime,
) -> int:
    """RSVPs created within [start, end] for events owned by this email."""
    result = await conn.execute(
        select(func.count())
        .select_from(
            rsvps.join(events, rsvps.c.event_id == events.c.id).join(
                influencers, events.c.influencer_id == influencers.c.id
            )
        )
        .where(influencers.c.email == owner_email)
        .where(rsvps.c.created_at >= start)
        .where(rsvps.c.created_at <= end)
    )
    return result.scalar_one()
