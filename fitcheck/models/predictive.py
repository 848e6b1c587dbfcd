from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.sql import func

from fitcheck.models.base import Base


class HistoricalDeal(Base):
    """Closed won/lost deal used as training data for the predictive model."""

    __tablename__ = "historical_deals"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    company_name = Column(String(255), nullable=False)
    industry = Column(String(100))
    company_size = Column(String(100))
    job_title = Column(String(255))
    source_channel = Column(String(100))
    engagement_score = Column(Integer, nullable=False, server_default=text("0"))
    funding_stage = Column(String(100))
    region = Column(String(100))
    deal_value = Column(Numeric(15, 2))
    days_to_close = Column(Integer)
    outcome = Column(String(10), nullable=False)
    closed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("outcome IN ('won', 'lost')", name="ck_historical_deal_outcome"),
    )


class PredictiveSettings(Base):
    __tablename__ = "predictive_settings"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    predictive_enabled = Column(Boolean, nullable=False, server_default=text("false"))
    min_deals_threshold = Column(Integer, nullable=False, server_default=text("50"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class PredictiveModelState(Base):
    """Singleton row holding the trained per-bucket win-rate table."""

    __tablename__ = "predictive_model_state"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    feature_weights = Column(JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    total_records = Column(Integer, nullable=False, server_default=text("0"))
    won_records = Column(Integer, nullable=False, server_default=text("0"))
    lost_records = Column(Integer, nullable=False, server_default=text("0"))
    accuracy_score = Column(Float)
    last_trained_at = Column(DateTime(timezone=True))
    training_status = Column(String(20), nullable=False, server_default="untrained")
    error_message = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "training_status IN ('untrained', 'training', 'trained', 'error')",
            name="ck_model_training_status",
        ),
    )
