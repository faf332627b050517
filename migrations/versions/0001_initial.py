"""Initial schema: projects, batch videos, deliveries and money ledgers

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Projects (orders)
    op.create_table(
        "projects",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("creator_id", sa.UUID(), nullable=False),
        sa.Column("editor_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_batch", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("batch_quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column(
            "batch_delivery_mode", sa.String(20), nullable=False, server_default="sequential"
        ),
        sa.Column("batch_discount_percent", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(50), nullable=False, server_default="draft"),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total_paid_by_creator", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("editor_earnings_per_video", sa.Numeric(10, 2), nullable=True),
        sa.Column(
            "editor_earnings_released", sa.Numeric(10, 2), nullable=False, server_default="0"
        ),
        sa.Column("videos_approved", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_revisions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_revisions", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("estimated_delivery_days", sa.Integer(), nullable=True),
        sa.Column("stripe_customer_id", sa.String(255), nullable=True),
        sa.Column("stripe_payment_method_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_creator_id", "projects", ["creator_id"])
    op.create_index("ix_projects_editor_id", "projects", ["editor_id"])
    op.create_index("ix_projects_status", "projects", ["status"])

    # Batch videos
    op.create_table(
        "batch_videos",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("project_id", sa.UUID(), nullable=False),
        sa.Column("sequence_order", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("instructions", sa.Text(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("delivery_url", sa.String(2048), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("payment_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("revision_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("extra_revisions_purchased", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("project_id", "sequence_order", name="uq_batch_video_sequence"),
    )
    op.create_index("ix_batch_videos_project_id", "batch_videos", ["project_id"])
    op.create_index("ix_batch_videos_status", "batch_videos", ["status"])

    # Delivered versions
    op.create_table(
        "project_deliveries",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("project_id", sa.UUID(), nullable=False),
        sa.Column("batch_video_id", sa.UUID(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("video_url", sa.String(2048), nullable=False),
        sa.Column("video_type", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending_review"),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("revision_notes", sa.Text(), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["batch_video_id"], ["batch_videos.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("batch_video_id", "version", name="uq_delivery_version"),
    )
    op.create_index("ix_project_deliveries_project_id", "project_deliveries", ["project_id"])
    op.create_index(
        "ix_project_deliveries_batch_video_id", "project_deliveries", ["batch_video_id"]
    )

    # Earnings ledger (one release per approved video)
    op.create_table(
        "earnings_releases",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("project_id", sa.UUID(), nullable=False),
        sa.Column("batch_video_id", sa.UUID(), nullable=False),
        sa.Column("editor_id", sa.UUID(), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("released_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["batch_video_id"], ["batch_videos.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("batch_video_id"),
    )
    op.create_index("ix_earnings_releases_project_id", "earnings_releases", ["project_id"])
    op.create_index("ix_earnings_releases_editor_id", "earnings_releases", ["editor_id"])

    # Extra-revision charge attempts
    op.create_table(
        "revision_payments",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("project_id", sa.UUID(), nullable=False),
        sa.Column("batch_video_id", sa.UUID(), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_charged", sa.Numeric(10, 2), nullable=False),
        sa.Column("revisions_granted", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("provider", sa.String(50), nullable=False),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["batch_video_id"], ["batch_videos.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_revision_payments_project_id", "revision_payments", ["project_id"])
    op.create_index(
        "ix_revision_payments_batch_video_id", "revision_payments", ["batch_video_id"]
    )
    op.create_index(
        "ix_revision_payments_transaction_id", "revision_payments", ["transaction_id"]
    )
    op.create_index("ix_revision_payments_status", "revision_payments", ["status"])

    # In-app notifications
    op.create_table(
        "notifications",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("project_id", sa.UUID(), nullable=True),
        sa.Column("data", JSONB(), nullable=True),
        sa.Column("read", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_project_id", "notifications", ["project_id"])


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("revision_payments")
    op.drop_table("earnings_releases")
    op.drop_table("project_deliveries")
    op.drop_table("batch_videos")
    op.drop_table("projects")
