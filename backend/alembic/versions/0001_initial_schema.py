"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for Meatup.Club:
users, events, restaurant_suggestions, date_suggestions,
restaurant_votes, date_votes, rsvps, polls, activity_log.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("picture", sa.String(1024), nullable=True),
        sa.Column("is_admin", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False, server_default="invited"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- events ---
    op.create_table(
        "events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("restaurant_name", sa.String(255), nullable=False),
        sa.Column("restaurant_address", sa.String(500), nullable=True),
        sa.Column("event_date", sa.Date, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="upcoming"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_events_event_date", "events", ["event_date"])

    # --- restaurant_suggestions ---
    op.create_table(
        "restaurant_suggestions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("cuisine", sa.String(100), nullable=True),
        sa.Column("url", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_restaurant_suggestions_event_id", "restaurant_suggestions", ["event_id"])

    # --- date_suggestions ---
    op.create_table(
        "date_suggestions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("suggested_date", sa.Date, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "event_id", "suggested_date", name="uq_date_suggestions_user_event_date"),
    )
    op.create_index("ix_date_suggestions_event_id", "date_suggestions", ["event_id"])

    # --- restaurant_votes ---
    op.create_table(
        "restaurant_votes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "suggestion_id", sa.Integer,
            sa.ForeignKey("restaurant_suggestions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("suggestion_id", "user_id", name="uq_restaurant_votes_suggestion_user"),
    )
    op.create_index("ix_restaurant_votes_suggestion_id", "restaurant_votes", ["suggestion_id"])

    # --- date_votes ---
    op.create_table(
        "date_votes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "date_suggestion_id", sa.Integer,
            sa.ForeignKey("date_suggestions.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("date_suggestion_id", "user_id", name="uq_date_votes_suggestion_user"),
    )
    op.create_index("ix_date_votes_date_suggestion_id", "date_votes", ["date_suggestion_id"])

    # --- rsvps ---
    op.create_table(
        "rsvps",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("dietary_restrictions", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("event_id", "user_id", name="uq_rsvps_event_user"),
    )
    op.create_index("ix_rsvps_event_id", "rsvps", ["event_id"])

    # --- polls ---
    op.create_table(
        "polls",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default="open"),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_by", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("closed_by", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "winning_restaurant_id", sa.Integer,
            sa.ForeignKey("restaurant_suggestions.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column(
            "winning_date_id", sa.Integer,
            sa.ForeignKey("date_suggestions.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("created_event_id", sa.Integer, sa.ForeignKey("events.id", ondelete="SET NULL"), nullable=True),
    )
    # At most one open poll
    op.create_index(
        "uq_polls_single_open", "polls", ["status"], unique=True,
        sqlite_where=sa.text("status = 'open'"),
        postgresql_where=sa.text("status = 'open'"),
    )

    # --- activity_log ---
    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("action_type", sa.String(30), nullable=False),
        sa.Column("action_details", sa.JSON, nullable=True),
        sa.Column("route", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_activity_log_user_id", "activity_log", ["user_id"])


def downgrade() -> None:
    op.drop_table("activity_log")
    op.drop_index("uq_polls_single_open", table_name="polls")
    op.drop_table("polls")
    op.drop_table("rsvps")
    op.drop_table("date_votes")
    op.drop_table("restaurant_votes")
    op.drop_table("date_suggestions")
    op.drop_table("restaurant_suggestions")
    op.drop_table("events")
    op.drop_table("users")
