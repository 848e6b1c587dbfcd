import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fitcheck.core.default_scoring_rules import DEFAULT_SCORING_RULES
from fitcheck.core.exceptions import ConfirmationRequiredError, RuleNotFoundError
from fitcheck.schemas.scoring_rules import (
    BehavioralSignals,
    EnrichedFirmographics,
    LeadProfile,
)
from fitcheck.services.rule_scoring import (
    RuleScoringService,
    evaluate_lead_against_rules,
    evaluate_rule,
    format_points,
    get_qualification_label,
)


def _rule(condition_type, condition_value="", points=10, enabled=True, name="Rule"):
    return SimpleNamespace(
        id=uuid.uuid4(),
        name=name,
        condition_type=condition_type,
        condition_value=condition_value,
        points=points,
        enabled=enabled,
    )


def _default_rules():
    return [
        SimpleNamespace(id=uuid.uuid4(), enabled=True, **rd)
        for rd in DEFAULT_SCORING_RULES
    ]


class TestFormatPoints:
    def test_positive_is_prefixed(self):
        assert format_points(15) == "+15"

    def test_zero_is_prefixed(self):
        assert format_points(0) == "+0"

    def test_negative_keeps_sign(self):
        assert format_points(-10) == "-10"

    def test_qualification_labels(self):
        assert get_qualification_label(True) == "Sales Qualified"
        assert get_qualification_label(False) == "Marketing Qualified"


class TestEvaluateRule:
    """Each condition type matches on the lead field it names."""

    def test_job_title_contains_vp(self):
        rule = _rule("job_title_contains", "VP,CEO", points=15)
        result = evaluate_rule(rule, LeadProfile(job_title="VP of Sales"))
        assert result["matched"] is True
        assert result["reason"] == 'Job title "VP of Sales" matches criteria'

    def test_job_title_missing_does_not_raise(self):
        rule = _rule("job_title_contains", "VP,CEO")
        result = evaluate_rule(rule, LeadProfile())
        assert result["matched"] is False
        assert result["reason"] == "Job title doesn't match any of: vp, ceo"

    def test_personal_email_domain(self):
        rule = _rule("email_domain_personal", "gmail.com,yahoo.com")
        assert evaluate_rule(rule, LeadProfile(email="a@gmail.com"))["matched"] is True
        assert evaluate_rule(rule, LeadProfile(email="a@company.com"))["matched"] is False

    def test_personal_email_subdomain(self):
        rule = _rule("email_domain_personal", "yahoo.com")
        assert evaluate_rule(rule, LeadProfile(email="a@mail.yahoo.com"))["matched"] is True

    def test_business_email_domain(self):
        rule = _rule("email_domain_business")
        assert evaluate_rule(rule, LeadProfile(email="a@company.com"))["matched"] is True
        assert evaluate_rule(rule, LeadProfile(email="a@gmail.com"))["matched"] is False
        assert evaluate_rule(rule, LeadProfile(email=None))["matched"] is False

    def test_firmographic_conditions(self):
        lead = LeadProfile(
            enriched_data=EnrichedFirmographics(
                company_size="50-200 employees",
                industry="B2B SaaS",
                funding_stage="Series B",
                region="United States",
            )
        )
        assert evaluate_rule(_rule("company_size_range", "50-200"), lead)["matched"]
        assert evaluate_rule(_rule("industry_matches", "SaaS"), lead)["matched"]
        assert evaluate_rule(_rule("funding_stage", "Series A,Series B"), lead)["matched"]
        assert evaluate_rule(_rule("region_matches", "USA,United States"), lead)["matched"]
        assert not evaluate_rule(_rule("industry_matches", "Healthcare"), lead)["matched"]

    def test_pricing_page_once_and_multiple(self):
        once = LeadProfile(
            behavioral_signals=BehavioralSignals(
                visited_pricing_page=True, pricing_page_visits=1
            )
        )
        repeat = LeadProfile(
            behavioral_signals=BehavioralSignals(
                visited_pricing_page=True, pricing_page_visits=3
            )
        )
        multiple_rule = _rule("visited_pricing_page", "multiple")
        once_rule = _rule("visited_pricing_page", "once")

        assert evaluate_rule(once_rule, once)["reason"] == "Visited pricing page"
        assert evaluate_rule(multiple_rule, once)["matched"] is False
        result = evaluate_rule(multiple_rule, repeat)
        assert result["matched"] is True
        assert result["reason"] == "Visited pricing page multiple times"

    def test_behavioral_flags(self):
        lead = LeadProfile(
            behavioral_signals=BehavioralSignals(
                visited_product_page=True, blog_engagement_only=True
            )
        )
        assert evaluate_rule(_rule("visited_product_page"), lead)["matched"]
        assert evaluate_rule(_rule("blog_only_engagement"), lead)["matched"]
        assert not evaluate_rule(_rule("visited_product_page"), LeadProfile())["matched"]

    def test_custom_never_matches(self):
        result = evaluate_rule(_rule("custom", "anything"), LeadProfile(job_title="anything"))
        assert result["matched"] is False
        assert result["reason"] == "Custom rule - requires manual evaluation"

    def test_empty_condition_value_matches_nothing(self):
        rule = _rule("job_title_contains", "")
        assert evaluate_rule(rule, LeadProfile(job_title="CEO"))["matched"] is False

    def test_trailing_comma_does_not_match_everything(self):
        rule = _rule("job_title_contains", "VP,")
        assert evaluate_rule(rule, LeadProfile(job_title="Analyst"))["matched"] is False
        assert evaluate_rule(rule, LeadProfile(job_title="VP Sales"))["matched"] is True


class TestEvaluateLeadAgainstRules:
    """Totals, qualification and ordering across a rule set."""

    def test_vp_scenario_qualifies_with_single_rule(self):
        rules = [_rule("job_title_contains", "VP,CEO", points=15)]
        result = evaluate_lead_against_rules(
            LeadProfile(job_title="VP of Sales"), rules, qualification_threshold=10
        )
        assert result["total_points"] == 15
        assert result["is_qualified"] is True
        assert result["matched_rules"][0]["points_label"] == "+15"

    def test_disabled_rules_are_excluded(self):
        rules = [
            _rule("job_title_contains", "VP", points=15),
            _rule("job_title_contains", "Sales", points=50, enabled=False),
        ]
        result = evaluate_lead_against_rules(
            LeadProfile(job_title="VP of Sales"), rules, qualification_threshold=50
        )
        assert result["total_points"] == 15
        assert len(result["matched_rules"]) == 1
        assert result["is_qualified"] is False

    def test_order_is_preserved_and_deterministic(self):
        rules = _default_rules()
        lead = LeadProfile(
            job_title="CEO",
            email="ceo@acme.io",
            enriched_data=EnrichedFirmographics(industry="Software"),
        )
        first = evaluate_lead_against_rules(lead, rules, 50)
        second = evaluate_lead_against_rules(lead, rules, 50)

        assert [m["rule"].name for m in first["matched_rules"]] == [r.name for r in rules]
        assert [(m["matched"], m["reason"]) for m in first["matched_rules"]] == [
            (m["matched"], m["reason"]) for m in second["matched_rules"]
        ]
        # decision maker(15) + business email(10) + industry(15)
        assert first["total_points"] == 40

    def test_negative_points_reduce_total(self):
        rules = [
            _rule("email_domain_personal", "gmail.com", points=-10),
            _rule("job_title_contains", "Director", points=10),
        ]
        result = evaluate_lead_against_rules(
            LeadProfile(job_title="Director", email="d@gmail.com"), rules, 1
        )
        assert result["total_points"] == 0
        assert result["is_qualified"] is False


def _mock_rule_repo(rules=None, threshold=50):
    repo = AsyncMock()
    repo.list_rules = AsyncMock(return_value=rules or [])
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_settings = AsyncMock(
        return_value=SimpleNamespace(qualification_threshold=threshold)
    )
    return repo


class TestRuleScoringService:
    @pytest.mark.asyncio
    async def test_evaluate_adds_label(self):
        repo = _mock_rule_repo([_rule("job_title_contains", "CEO", points=60)])
        service = RuleScoringService(rule_repo=repo)

        result = await service.evaluate(LeadProfile(job_title="CEO"))

        assert result["total_points"] == 60
        assert result["qualification_label"] == "Sales Qualified"

    @pytest.mark.asyncio
    async def test_delete_requires_confirmation(self):
        repo = _mock_rule_repo()
        service = RuleScoringService(rule_repo=repo)

        with pytest.raises(ConfirmationRequiredError):
            await service.delete_rule(uuid.uuid4())
        repo.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_unknown_rule(self):
        service = RuleScoringService(rule_repo=_mock_rule_repo())
        with pytest.raises(RuleNotFoundError):
            await service.delete_rule(uuid.uuid4(), confirm=True)

    @pytest.mark.asyncio
    async def test_toggle_commits(self):
        rule = _rule("custom")
        repo = _mock_rule_repo()
        repo.get_by_id = AsyncMock(return_value=rule)
        repo.update = AsyncMock(return_value=rule)
        service = RuleScoringService(rule_repo=repo)

        await service.toggle_rule(rule.id, False)

        repo.update.assert_awaited_once_with(rule, enabled=False)
        repo.commit.assert_awaited_once()
