from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.sql import func

from fitcheck.models.base import Base


class NegativeScoringSettings(Base):
    __tablename__ = "negative_scoring_settings"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    negative_enabled = Column(Boolean, nullable=False, server_default=text("false"))
    disqualification_threshold = Column(
        Integer, nullable=False, server_default=text("-25")
    )
    subtract_from_other_models = Column(
        Boolean, nullable=False, server_default=text("true")
    )
    auto_disqualify = Column(Boolean, nullable=False, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class NegativeScoringRule(Base):
    """Disqualifying rule; ``points`` are negative by convention only."""

    __tablename__ = "negative_scoring_rules"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name = Column(String(200), nullable=False)
    condition_type = Column(String(50), nullable=False)
    condition_value = Column(Text, nullable=False, server_default="")
    points = Column(Integer, nullable=False)
    reason_label = Column(String(255), nullable=False)
    description = Column(Text)
    enabled = Column(Boolean, nullable=False, server_default=text("true"))
    sort_order = Column(Integer, nullable=False, server_default=text("0"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class DisqualifiedLead(Base):
    """Persisted disqualification outcome, one row per lead.

    An override suppresses the disqualified state downstream but keeps
    the triggered-rule record for audit.
    """

    __tablename__ = "disqualified_leads"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    lead_id = Column(String(255), nullable=False)
    total_negative_score = Column(Integer, nullable=False)
    triggered_rules = Column(JSONB, nullable=False, server_default=text("'[]'::jsonb"))
    disqualified_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    is_overridden = Column(Boolean, nullable=False, server_default=text("false"))
    override_reason = Column(Text)
    overridden_at = Column(DateTime(timezone=True))
    overridden_by = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("lead_id", name="uq_disqualified_leads_lead_id"),
    )
