"""initial scoring schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00.000000

Creates the tables for all five lead scoring models and seeds the
default positive rules, engagement types and negative rules.  Seeding
uses INSERT … WHERE NOT EXISTS so re-running is harmless.

The seeded values come from ``fitcheck.core.default_scoring_rules``;
update them there rather than here.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

from fitcheck.core.default_scoring_rules import (  # noqa: E402
    DEFAULT_ENGAGEMENT_TYPES,
    DEFAULT_NEGATIVE_RULES,
    DEFAULT_SCORING_RULES,
)


def _id_column() -> sa.Column:
    return sa.Column(
        "id", sa.UUID(), primary_key=True, server_default=sa.text("gen_random_uuid()")
    )


def _timestamps(updated: bool = True) -> list:
    columns = [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"))
    ]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"))
        )
    return columns


def _quote(value) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, (int, float)):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"


def _seed(table: str, rows: list, columns: Sequence[str]) -> None:
    for row in rows:
        values = ", ".join(_quote(row.get(column)) for column in columns)
        op.execute(
            f"""
            INSERT INTO {table} ({", ".join(columns)})
            SELECT {values}
            WHERE NOT EXISTS (
                SELECT 1 FROM {table} WHERE name = {_quote(row["name"])}
            );
            """
        )


def upgrade() -> None:
    # --- Rule-based ---------------------------------------------------------
    op.create_table(
        "scoring_rules",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("condition_type", sa.String(50), nullable=False),
        sa.Column("condition_value", sa.Text(), nullable=False, server_default=""),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint(
            "category IN ('demographic', 'firmographic', 'behavioral')",
            name="ck_scoring_rule_category",
        ),
    )
    op.create_table(
        "scoring_settings",
        _id_column(),
        sa.Column("rule_based_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("qualification_threshold", sa.Integer(), nullable=False, server_default=sa.text("50")),
        *_timestamps(),
    )

    # --- Engagement ---------------------------------------------------------
    op.create_table(
        "engagement_settings",
        _id_column(),
        sa.Column("engagement_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("decay_period_days", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("cold_threshold", sa.Integer(), nullable=False, server_default=sa.text("20")),
        sa.Column("warm_threshold", sa.Integer(), nullable=False, server_default=sa.text("50")),
        sa.Column("hot_threshold", sa.Integer(), nullable=False, server_default=sa.text("80")),
        *_timestamps(),
    )
    op.create_table(
        "engagement_types",
        _id_column(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("default_points", sa.Integer(), nullable=False),
        sa.Column("current_points", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(updated=False),
    )
    op.create_table(
        "engagement_events",
        _id_column(),
        sa.Column("lead_id", sa.String(255), nullable=False),
        sa.Column(
            "engagement_type_id",
            sa.UUID(),
            sa.ForeignKey("engagement_types.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("points_earned", sa.Integer(), nullable=False),
        sa.Column(
            "metadata",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        *_timestamps(updated=False),
    )
    op.create_index(
        "idx_engagement_events_lead_occurred",
        "engagement_events",
        ["lead_id", "occurred_at"],
    )

    # --- Intent -------------------------------------------------------------
    op.create_table(
        "intent_settings",
        _id_column(),
        sa.Column("intent_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("in_market_threshold", sa.Integer(), nullable=False, server_default=sa.text("50")),
        sa.Column("first_party_weight", sa.Float(), nullable=False, server_default=sa.text("0.6")),
        sa.Column("third_party_weight", sa.Float(), nullable=False, server_default=sa.text("0.4")),
        sa.Column("pricing_page_weight", sa.Integer(), nullable=False, server_default=sa.text("25")),
        sa.Column("demo_page_weight", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("product_page_weight", sa.Integer(), nullable=False, server_default=sa.text("15")),
        sa.Column("email_open_weight", sa.Integer(), nullable=False, server_default=sa.text("5")),
        sa.Column("email_click_weight", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column("email_reply_weight", sa.Integer(), nullable=False, server_default=sa.text("20")),
        sa.Column("trial_signup_weight", sa.Integer(), nullable=False, server_default=sa.text("35")),
        sa.Column("g2_research_weight", sa.Integer(), nullable=False, server_default=sa.text("25")),
        sa.Column("trustradius_weight", sa.Integer(), nullable=False, server_default=sa.text("20")),
        sa.Column("competitor_research_weight", sa.Integer(), nullable=False, server_default=sa.text("30")),
        sa.Column("intent_provider_weight", sa.Integer(), nullable=False, server_default=sa.text("20")),
        *_timestamps(),
    )
    op.create_table(
        "first_party_signals",
        _id_column(),
        sa.Column("lead_id", sa.String(255), nullable=False),
        sa.Column("signal_type", sa.String(50), nullable=False),
        sa.Column("page_url", sa.Text()),
        sa.Column("visit_count", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "metadata",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        *_timestamps(updated=False),
        sa.CheckConstraint("visit_count >= 1", name="ck_first_party_visit_count"),
    )
    op.create_index(
        "idx_first_party_signals_lead", "first_party_signals", ["lead_id", "signal_type"]
    )
    op.create_table(
        "third_party_signals",
        _id_column(),
        sa.Column("lead_id", sa.String(255), nullable=False),
        sa.Column("source_name", sa.String(100), nullable=False),
        sa.Column("signal_type", sa.String(50), nullable=False),
        sa.Column("confidence_level", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("notes", sa.Text()),
        sa.Column("observed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        *_timestamps(updated=False),
        sa.CheckConstraint(
            "confidence_level IN ('low', 'medium', 'high')",
            name="ck_third_party_confidence",
        ),
    )
    op.create_index("idx_third_party_signals_lead", "third_party_signals", ["lead_id"])

    # --- Negative -----------------------------------------------------------
    op.create_table(
        "negative_scoring_settings",
        _id_column(),
        sa.Column("negative_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("disqualification_threshold", sa.Integer(), nullable=False, server_default=sa.text("-25")),
        sa.Column("subtract_from_other_models", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("auto_disqualify", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_table(
        "negative_scoring_rules",
        _id_column(),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("condition_type", sa.String(50), nullable=False),
        sa.Column("condition_value", sa.Text(), nullable=False, server_default=""),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("reason_label", sa.String(255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
    )
    op.create_table(
        "disqualified_leads",
        _id_column(),
        sa.Column("lead_id", sa.String(255), nullable=False),
        sa.Column("total_negative_score", sa.Integer(), nullable=False),
        sa.Column(
            "triggered_rules",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("disqualified_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("is_overridden", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("override_reason", sa.Text()),
        sa.Column("overridden_at", sa.DateTime(timezone=True)),
        sa.Column("overridden_by", sa.String(255)),
        *_timestamps(),
        sa.UniqueConstraint("lead_id", name="uq_disqualified_leads_lead_id"),
    )

    # --- Predictive ---------------------------------------------------------
    op.create_table(
        "historical_deals",
        _id_column(),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("industry", sa.String(100)),
        sa.Column("company_size", sa.String(100)),
        sa.Column("job_title", sa.String(255)),
        sa.Column("source_channel", sa.String(100)),
        sa.Column("engagement_score", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("funding_stage", sa.String(100)),
        sa.Column("region", sa.String(100)),
        sa.Column("deal_value", sa.Numeric(15, 2)),
        sa.Column("days_to_close", sa.Integer()),
        sa.Column("outcome", sa.String(10), nullable=False),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        *_timestamps(updated=False),
        sa.CheckConstraint("outcome IN ('won', 'lost')", name="ck_historical_deal_outcome"),
    )
    op.create_table(
        "predictive_settings",
        _id_column(),
        sa.Column("predictive_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("min_deals_threshold", sa.Integer(), nullable=False, server_default=sa.text("50")),
        *_timestamps(),
    )
    op.create_table(
        "predictive_model_state",
        _id_column(),
        sa.Column(
            "feature_weights",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("total_records", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("won_records", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("lost_records", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("accuracy_score", sa.Float()),
        sa.Column("last_trained_at", sa.DateTime(timezone=True)),
        sa.Column("training_status", sa.String(20), nullable=False, server_default="untrained"),
        sa.Column("error_message", sa.Text()),
        *_timestamps(),
        sa.CheckConstraint(
            "training_status IN ('untrained', 'training', 'trained', 'error')",
            name="ck_model_training_status",
        ),
    )

    # --- Seed defaults ------------------------------------------------------
    _seed(
        "scoring_rules",
        DEFAULT_SCORING_RULES,
        ("name", "description", "condition_type", "condition_value", "points", "category", "sort_order"),
    )
    _seed(
        "engagement_types",
        [{**t, "current_points": t["default_points"]} for t in DEFAULT_ENGAGEMENT_TYPES],
        ("name", "category", "default_points", "current_points", "sort_order"),
    )
    _seed(
        "negative_scoring_rules",
        DEFAULT_NEGATIVE_RULES,
        ("name", "condition_type", "condition_value", "points", "reason_label", "sort_order"),
    )


def downgrade() -> None:
    op.drop_table("predictive_model_state")
    op.drop_table("predictive_settings")
    op.drop_table("historical_deals")
    op.drop_table("disqualified_leads")
    op.drop_table("negative_scoring_rules")
    op.drop_table("negative_scoring_settings")
    op.drop_index("idx_third_party_signals_lead", table_name="third_party_signals")
    op.drop_table("third_party_signals")
    op.drop_index("idx_first_party_signals_lead", table_name="first_party_signals")
    op.drop_table("first_party_signals")
    op.drop_table("intent_settings")
    op.drop_index("idx_engagement_events_lead_occurred", table_name="engagement_events")
    op.drop_table("engagement_events")
    op.drop_table("engagement_types")
    op.drop_table("engagement_settings")
    op.drop_table("scoring_settings")
    op.drop_table("scoring_rules")
