"""add rsvps unique constraint

Revision ID: 002
Revises: 001
Create Date: 2026-10-12

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Remove duplicate RSVPs, keeping the earliest per (event, fan)
    op.execute("""
        DELETE FROM rsvps
        WHERE id IN (
            SELECT id FROM (
                SELECT id, ROW_NUMBER() OVER (
                    PARTITION BY event_id, fan_id
                    ORDER BY created_at, id
                ) AS rn
                FROM rsvps
            ) ranked
            WHERE rn > 1
        )
    """)
    with op.batch_alter_table("rsvps") as batch_op:
        batch_op.create_unique_constraint(
            "rsvps_event_fan_unique", ["event_id", "fan_id"]
        )


def downgrade() -> None:
    with op.batch_alter_table("rsvps") as batch_op:
        batch_op.drop_constraint("rsvps_event_fan_unique", type_="unique")
