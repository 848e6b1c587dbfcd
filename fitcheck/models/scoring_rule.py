from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from fitcheck.models.base import Base


class ScoringRule(Base):
    """User-defined deterministic scoring rule.

    ``condition_value`` is a comma-separated candidate list whose meaning
    depends on ``condition_type``.  ``points`` is signed: negative values
    act as penalties.  Rules are evaluated in ``sort_order``.
    """

    __tablename__ = "scoring_rules"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name = Column(String(200), nullable=False)
    description = Column(Text)
    condition_type = Column(String(50), nullable=False)
    condition_value = Column(Text, nullable=False, server_default="")
    points = Column(Integer, nullable=False)
    category = Column(String(20), nullable=False)
    sort_order = Column(Integer, nullable=False, server_default=text("0"))
    enabled = Column(Boolean, nullable=False, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint(
            "category IN ('demographic', 'firmographic', 'behavioral')",
            name="ck_scoring_rule_category",
        ),
    )


class ScoringSettings(Base):
    """Singleton row: rule-based scoring switch and qualification threshold."""

    __tablename__ = "scoring_settings"
    id = Column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    rule_based_enabled = Column(Boolean, nullable=False, server_default=text("false"))
    qualification_threshold = Column(Integer, nullable=False, server_default=text("50"))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
