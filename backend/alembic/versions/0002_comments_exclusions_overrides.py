"""comments, poll exclusions and admin RSVP overrides

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-20

Adds:
- comments (threaded, on polls and events)
- poll_excluded_restaurants
- rsvps.admin_override / admin_override_by / admin_override_at
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- comments ---
    op.create_table(
        "comments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("commentable_type", sa.String(10), nullable=False),
        sa.Column("commentable_id", sa.Integer, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("parent_id", sa.Integer, sa.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_comments_target", "comments", ["commentable_type", "commentable_id"])
    op.create_index("ix_comments_parent_id", "comments", ["parent_id"])

    # --- poll_excluded_restaurants ---
    op.create_table(
        "poll_excluded_restaurants",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("poll_id", sa.Integer, sa.ForeignKey("polls.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "restaurant_id",
            sa.Integer,
            sa.ForeignKey("restaurant_suggestions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("excluded_by", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("poll_id", "restaurant_id", name="uq_poll_excluded_restaurant"),
    )
    op.create_index("ix_poll_excluded_restaurants_poll_id", "poll_excluded_restaurants", ["poll_id"])

    # --- rsvps: admin override ---
    with op.batch_alter_table("rsvps") as batch:
        batch.add_column(sa.Column("admin_override", sa.Boolean, nullable=False, server_default=sa.false()))
        batch.add_column(sa.Column("admin_override_by", sa.Integer, nullable=True))
        batch.add_column(sa.Column("admin_override_at", sa.DateTime(timezone=True), nullable=True))
        batch.create_foreign_key(
            "fk_rsvps_admin_override_by", "users", ["admin_override_by"], ["id"], ondelete="SET NULL"
        )


def downgrade() -> None:
    with op.batch_alter_table("rsvps") as batch:
        batch.drop_constraint("fk_rsvps_admin_override_by", type_="foreignkey")
        batch.drop_column("admin_override_at")
        batch.drop_column("admin_override_by")
        batch.drop_column("admin_override")
    op.drop_index("ix_poll_excluded_restaurants_poll_id", table_name="poll_excluded_restaurants")
    op.drop_table("poll_excluded_restaurants")
    op.drop_index("ix_comments_parent_id", table_name="comments")
    op.drop_index("ix_comments_target", table_name="comments")
    op.drop_table("comments")
