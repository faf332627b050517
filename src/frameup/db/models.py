"""SQLAlchemy ORM models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID as PyUUID
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite for tests and local runs)
JSONType = JSON().with_variant(JSONB(), "postgresql")
Money = Numeric(10, 2)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# =============================================================================
# Orders
# =============================================================================


class ProjectModel(Base):
    """Project (order) ORM model. Owns 1..N batch videos."""

    __tablename__ = "projects"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    creator_id: Mapped[PyUUID] = mapped_column(Uuid, nullable=False, index=True)
    editor_id: Mapped[PyUUID | None] = mapped_column(Uuid, nullable=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Batch
    is_batch: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    batch_quantity: Mapped[int] = mapped_column(Integer, default=1, server_default="1")
    batch_delivery_mode: Mapped[str] = mapped_column(
        String(20), default="sequential", server_default="sequential"
    )
    batch_discount_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), default=Decimal("0"), server_default="0"
    )

    # Derived from batch videos; written in the same transaction as each video change
    status: Mapped[str] = mapped_column(
        String(50), default="draft", server_default="draft", index=True
    )

    # Money
    base_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(Money, default=Decimal("0"), server_default="0")
    total_paid_by_creator: Mapped[Decimal] = mapped_column(
        Money, default=Decimal("0"), server_default="0"
    )
    editor_earnings_per_video: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    editor_earnings_released: Mapped[Decimal] = mapped_column(
        Money, default=Decimal("0"), server_default="0"
    )
    videos_approved: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    # Revisions
    current_revisions: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    max_revisions: Mapped[int] = mapped_column(Integer, default=2, server_default="2")

    estimated_delivery_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    stripe_customer_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_payment_method_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    # Relationships
    batch_videos: Mapped[list["BatchVideoModel"]] = relationship(
        "BatchVideoModel",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="BatchVideoModel.sequence_order",
    )


class BatchVideoModel(Base):
    """Batch video (one deliverable per row, ordered within the project) ORM model."""

    __tablename__ = "batch_videos"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    project_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    sequence_order: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), default="pending", server_default="pending", index=True
    )
    delivery_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    released_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    payment_amount: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    revision_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    extra_revisions_purchased: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("project_id", "sequence_order", name="uq_batch_video_sequence"),
    )

    # Relationships
    project: Mapped["ProjectModel"] = relationship("ProjectModel", back_populates="batch_videos")
    deliveries: Mapped[list["DeliveryModel"]] = relationship(
        "DeliveryModel",
        back_populates="batch_video",
        cascade="all, delete-orphan",
        order_by="DeliveryModel.version",
    )


class DeliveryModel(Base):
    """A submitted version of a batch video."""

    __tablename__ = "project_deliveries"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    project_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    batch_video_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("batch_videos.id", ondelete="CASCADE"), index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    video_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    video_type: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), default="pending_review", server_default="pending_review"
    )
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    revision_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivered_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("batch_video_id", "version", name="uq_delivery_version"),
    )

    batch_video: Mapped["BatchVideoModel"] = relationship(
        "BatchVideoModel", back_populates="deliveries"
    )


# =============================================================================
# Money movements
# =============================================================================


class EarningsReleaseModel(Base):
    """Editor earnings released for one approved video. At most one per video."""

    __tablename__ = "earnings_releases"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    project_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    batch_video_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("batch_videos.id", ondelete="CASCADE"), unique=True
    )
    editor_id: Mapped[PyUUID | None] = mapped_column(Uuid, nullable=True, index=True)
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    released_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class RevisionPaymentModel(Base):
    """A charge attempt for an extra-revision package."""

    __tablename__ = "revision_payments"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    project_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    batch_video_id: Mapped[PyUUID] = mapped_column(
        Uuid, ForeignKey("batch_videos.id", ondelete="CASCADE"), index=True
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    platform_fee: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_charged: Mapped[Decimal] = mapped_column(Money, nullable=False)
    revisions_granted: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    provider: Mapped[str] = mapped_column(String(50), nullable=False)
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


# =============================================================================
# Notifications
# =============================================================================


class NotificationModel(Base):
    """In-app notification ORM model."""

    __tablename__ = "notifications"

    id: Mapped[PyUUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[PyUUID] = mapped_column(Uuid, nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    project_id: Mapped[PyUUID | None] = mapped_column(
        Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True
    )
    data: Mapped[dict[str, Any] | None] = mapped_column(JSONType, nullable=True)
    read: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
