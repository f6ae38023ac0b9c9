"""deal negotiation schema: users, tracks, deals, history and chat

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None

USER_ROLE = sa.Enum("ARTIST", "EXEC", "REP", "ADMIN", name="userrole")
DEAL_STATE = sa.Enum(
    "PENDING", "COUNTERED", "ACCEPTED", "DECLINED", "AWAITING_RESPONSE", "CANCELLED", name="dealstate"
)
DEAL_ACTION = sa.Enum("COUNTER", "ACCEPT", "ACCEPT_COUNTER", "DECLINE", "CANCEL", name="dealaction")
USAGE_TYPE = sa.Enum("SYNC", "MASTER", name="usagetype")
RIGHTS_TYPE = sa.Enum("EXCLUSIVE", "NON_EXCLUSIVE", name="rightstype")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("idx_users_role", "users", ["role"])

    op.create_table(
        "tracks",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("artist_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["artist_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_tracks_artist", "tracks", ["artist_id"])

    op.create_table(
        "deals",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("track_id", sa.String(length=36), nullable=False),
        sa.Column("artist_id", sa.String(length=36), nullable=False),
        sa.Column("exec_id", sa.String(length=36), nullable=False),
        sa.Column("state", DEAL_STATE, nullable=False),
        sa.Column("usage_type", USAGE_TYPE, nullable=False),
        sa.Column("rights", RIGHTS_TYPE, nullable=False),
        sa.Column("duration_months", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_by_id", sa.String(length=36), nullable=False),
        sa.Column("created_by_role", USER_ROLE, nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["track_id"], ["tracks.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["artist_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["exec_id"], ["users.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_deals_artist_updated", "deals", ["artist_id", "updated_at"])
    op.create_index("idx_deals_exec_updated", "deals", ["exec_id", "updated_at"])
    op.create_index("idx_deals_track", "deals", ["track_id"])

    op.create_table(
        "deal_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("deal_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("user_role", USER_ROLE, nullable=False),
        sa.Column("action", DEAL_ACTION, nullable=False),
        sa.Column("previous_state", DEAL_STATE, nullable=False),
        sa.Column("new_state", DEAL_STATE, nullable=False),
        sa.Column("changes", sa.JSON(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["deal_id"], ["deals.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_deal_history_deal", "deal_history", ["deal_id", "id"])

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("deal_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["deal_id"], ["deals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_chat_messages_deal_created", "chat_messages", ["deal_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_chat_messages_deal_created", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("idx_deal_history_deal", table_name="deal_history")
    op.drop_table("deal_history")
    op.drop_index("idx_deals_track", table_name="deals")
    op.drop_index("idx_deals_exec_updated", table_name="deals")
    op.drop_index("idx_deals_artist_updated", table_name="deals")
    op.drop_table("deals")
    op.drop_index("idx_tracks_artist", table_name="tracks")
    op.drop_table("tracks")
    op.drop_index("idx_users_role", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (RIGHTS_TYPE, USAGE_TYPE, DEAL_ACTION, DEAL_STATE, USER_ROLE):
        enum_type.drop(bind, checkfirst=True)
