from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.sql import func

from fitcheck.models.base import Base


class IntentSettings(Base):
    """Singleton row: intent weights, category blend and in-market cut-off."""

    __tablename__ = "intent_settings"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    intent_enabled = Column(Boolean, nullable=False, server_default=text("false"))
    in_market_threshold = Column(Integer, nullable=False, server_default=text("50"))
    first_party_weight = Column(Float, nullable=False, server_default=text("0.6"))
    third_party_weight = Column(Float, nullable=False, server_default=text("0.4"))

    # First-party weights
    pricing_page_weight = Column(Integer, nullable=False, server_default=text("25"))
    demo_page_weight = Column(Integer, nullable=False, server_default=text("30"))
    product_page_weight = Column(Integer, nullable=False, server_default=text("15"))
    email_open_weight = Column(Integer, nullable=False, server_default=text("5"))
    email_click_weight = Column(Integer, nullable=False, server_default=text("10"))
    email_reply_weight = Column(Integer, nullable=False, server_default=text("20"))
    trial_signup_weight = Column(Integer, nullable=False, server_default=text("35"))

    # Third-party weights
    g2_research_weight = Column(Integer, nullable=False, server_default=text("25"))
    trustradius_weight = Column(Integer, nullable=False, server_default=text("20"))
    competitor_research_weight = Column(Integer, nullable=False, server_default=text("30"))
    intent_provider_weight = Column(Integer, nullable=False, server_default=text("20"))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class FirstPartySignal(Base):
    __tablename__ = "first_party_signals"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    lead_id = Column(String(255), nullable=False)
    signal_type = Column(String(50), nullable=False)
    page_url = Column(Text)
    visit_count = Column(Integer, nullable=False, server_default=text("1"))
    metadata_ = Column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    observed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("visit_count >= 1", name="ck_first_party_visit_count"),
        Index("idx_first_party_signals_lead", "lead_id", "signal_type"),
    )


class ThirdPartySignal(Base):
    __tablename__ = "third_party_signals"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    lead_id = Column(String(255), nullable=False)
    source_name = Column(String(100), nullable=False)
    signal_type = Column(String(50), nullable=False)
    confidence_level = Column(String(10), nullable=False, server_default="medium")
    notes = Column(Text)
    observed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "confidence_level IN ('low', 'medium', 'high')",
            name="ck_third_party_confidence",
        ),
        Index("idx_third_party_signals_lead", "lead_id"),
    )
