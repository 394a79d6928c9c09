"""SQLAlchemy Core table definitions for the database schema."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    MetaData,
    Numeric,
    Table,
    Text,
    UniqueConstraint,
    Uuid,
    false,
    func,
)

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. INFLUENCERS
# =====================================================
# Event owners. Matched to the signed-in account by email.
influencers = Table(
    "influencers",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_influencers_email", "email"),
)


# =====================================================
# 2. EVENTS
# =====================================================
events = Table(
    "events",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "influencer_id",
        Uuid,
        ForeignKey("influencers.id", ondelete="CASCADE"),
    ),
    Column("title", Text, nullable=False),
    Column("description", Text),
    Column("location", Text),
    Column("link", Text),
    Column("starts_at", DateTime(timezone=True), nullable=False),
    Column("ends_at", DateTime(timezone=True)),
    Column("calendar_option", Text, server_default="ask"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_events_influencer_id", "influencer_id"),
)


# =====================================================
# 3. FANS
# =====================================================
fans = Table(
    "fans",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column("user_id", Uuid, nullable=False),  # owning creator account
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False),
    Column("phone", Text),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_fans_user_id", "user_id"),
    Index("idx_fans_created_at", "created_at"),
)


# =====================================================
# 4. FAN_EVENTS
# =====================================================
# Historical attendance / ticket records, independent of RSVPs.
fan_events = Table(
    "fan_events",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "fan_id",
        Uuid,
        ForeignKey("fans.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("event_id", Uuid, nullable=False),
    Column("event_name", Text, nullable=False),
    Column("ticket_price", Numeric(10, 2)),
    Column("attendance_status", Text),
    Column("attended_at", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_fan_events_fan_id", "fan_id"),
    Index("idx_fan_events_attended_at", "attended_at"),
)


# =====================================================
# 5. RSVPS
# =====================================================
rsvps = Table(
    "rsvps",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "event_id",
        Uuid,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "fan_id",
        Uuid,
        ForeignKey("fans.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("status", Text, nullable=False, server_default="pending"),
    Column("added_to_calendar", Boolean, default=False, server_default=false()),
    Column("reminder_sent_30", Boolean, default=False, server_default=false()),
    Column("reminder_sent_10", Boolean, default=False, server_default=false()),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
    Index("idx_rsvps_event_id", "event_id"),
    Index("idx_rsvps_created_at", "created_at"),
    UniqueConstraint("event_id", "fan_id", name="rsvps_event_fan_unique"),
)
