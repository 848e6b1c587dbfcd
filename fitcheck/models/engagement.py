from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fitcheck.models.base import Base


class EngagementSettings(Base):
    """Singleton row: decay half-life and temperature thresholds."""

    __tablename__ = "engagement_settings"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    engagement_enabled = Column(Boolean, nullable=False, server_default=text("false"))
    decay_period_days = Column(Integer, nullable=False, server_default=text("30"))
    cold_threshold = Column(Integer, nullable=False, server_default=text("20"))
    warm_threshold = Column(Integer, nullable=False, server_default=text("50"))
    hot_threshold = Column(Integer, nullable=False, server_default=text("80"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class EngagementType(Base):
    __tablename__ = "engagement_types"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name = Column(String(100), nullable=False)
    category = Column(String(20), nullable=False)
    default_points = Column(Integer, nullable=False)
    current_points = Column(Integer, nullable=False)
    description = Column(Text)
    enabled = Column(Boolean, nullable=False, server_default=text("true"))
    sort_order = Column(Integer, nullable=False, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class EngagementEvent(Base):
    """Append-only engagement log entry.

    The engagement score is always derived from these rows at read
    time; nothing about the score itself is stored.
    """

    __tablename__ = "engagement_events"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    lead_id = Column(String(255), nullable=False)
    engagement_type_id = Column(
        UUID(as_uuid=True),
        ForeignKey("engagement_types.id", ondelete="CASCADE"),
        nullable=False,
    )
    points_earned = Column(Integer, nullable=False)
    metadata_ = Column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    occurred_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    engagement_type = relationship("EngagementType", lazy="joined")

    __table_args__ = (
        Index("idx_engagement_events_lead_occurred", "lead_id", "occurred_at"),
    )
