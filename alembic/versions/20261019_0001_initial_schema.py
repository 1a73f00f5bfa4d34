"""Initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


role_enum = sa.Enum("user", "admin", name="role_enum", native_enum=False)


def _id_col() -> sa.Column:
    return sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False)


def _created_col() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _updated_col() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False)


def upgrade() -> None:
    op.create_table(
        "roles",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("name", role_enum, nullable=False),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    op.create_table(
        "users",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column("mobile", sa.String(length=32), nullable=True),
        sa.Column("device_token", sa.String(length=512), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column(
            "role_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("roles.id", name="fk_users_role_id_roles", ondelete="RESTRICT"),
            nullable=False,
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "day_slot_sets",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("opens_at", sa.String(length=5), nullable=False),
        sa.Column("closes_at", sa.String(length=5), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column(
            "created_by_admin_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", name="fk_day_slot_sets_created_by_admin_id_users", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index("ix_day_slot_sets_date", "day_slot_sets", ["date"], unique=True)

    op.create_table(
        "time_slots",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column(
            "day_slot_set_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("day_slot_sets.id", name="fk_time_slots_day_slot_set_id_day_slot_sets", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("is_booked", sa.Boolean(), nullable=False),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column(
            "booked_by_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", name="fk_time_slots_booked_by_id_users", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.UniqueConstraint("day_slot_set_id", "position", name="uq_time_slots_day_position"),
    )
    op.create_index("ix_time_slots_day_slot_set_id", "time_slots", ["day_slot_set_id"])

    op.create_table(
        "pair_bookings",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("slot_index", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column(
            "requested_by_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", name="fk_pair_bookings_requested_by_id_users", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_approved", sa.Boolean(), nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_pair_bookings_date", "pair_bookings", ["date"])
    op.create_index("ix_pair_bookings_requested_by_id", "pair_bookings", ["requested_by_id"])
    op.create_index("ix_pair_bookings_is_approved", "pair_bookings", ["is_approved"])

    op.create_table(
        "pair_booking_participants",
        _id_col(),
        _created_col(),
        _updated_col(),
        sa.Column(
            "booking_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey(
                "pair_bookings.id",
                name="fk_pair_booking_participants_booking_id_pair_bookings",
                ondelete="CASCADE",
            ),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", name="fk_pair_booking_participants_user_id_users", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.UniqueConstraint(
            "user_id",
            "date",
            "start_time",
            "end_time",
            name="uq_pair_booking_participants_user_slot",
        ),
    )
    op.create_index("ix_pair_booking_participants_booking_id", "pair_booking_participants", ["booking_id"])
    op.create_index("ix_pair_booking_participants_user_id", "pair_booking_participants", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_pair_booking_participants_user_id", table_name="pair_booking_participants")
    op.drop_index("ix_pair_booking_participants_booking_id", table_name="pair_booking_participants")
    op.drop_table("pair_booking_participants")

    op.drop_index("ix_pair_bookings_is_approved", table_name="pair_bookings")
    op.drop_index("ix_pair_bookings_requested_by_id", table_name="pair_bookings")
    op.drop_index("ix_pair_bookings_date", table_name="pair_bookings")
    op.drop_table("pair_bookings")

    op.drop_index("ix_time_slots_day_slot_set_id", table_name="time_slots")
    op.drop_table("time_slots")

    op.drop_index("ix_day_slot_sets_date", table_name="day_slot_sets")
    op.drop_table("day_slot_sets")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("roles")
