import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from fitcheck.api.deps import (
    get_predictive_service,
    get_prospect_scoring_service,
    get_rule_scoring_service,
    get_signal_logging_service,
    get_workspace_dep,
)
from fitcheck.core.exceptions import (
    AICreditsExhaustedError,
    AIRateLimitError,
    ConfirmationRequiredError,
    InvalidSignalError,
    RuleNotFoundError,
    ScoringDisabledError,
)
from fitcheck.main import app
from fitcheck.schemas.common import OutreachTone, ScoreCategory, ScoringMode, Tier
from fitcheck.schemas.prospect import OutreachBlock, ProspectScore
from fitcheck.services.workspace import Workspace

API = "/api/v1"


def _rule_row(make_row, **fields):
    defaults = {
        "name": "VP or Director",
        "description": None,
        "condition_type": "job_title_contains",
        "condition_value": "vp,director",
        "points": 20,
        "category": "demographic",
        "sort_order": 1,
        "enabled": True,
    }
    defaults.update(fields)
    return make_row(**defaults)


def _prospect(pid: str, name: str, score: float, tier: Tier) -> ProspectScore:
    return ProspectScore(
        id=pid,
        company_name=name,
        company_description=f"{name} description",
        total_score=score,
        tier=tier,
        score_category=ScoreCategory.strong,
        criteria_breakdown=[],
        outreach=OutreachBlock(opening_line="Hi"),
        scoring_mode=ScoringMode.simple,
        outreach_tone=OutreachTone.casual,
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def workspace() -> Workspace:
    ws = Workspace()
    for index, (name, score, tier) in enumerate(
        [("Acme", 85, Tier.A), ("Beta", 45, Tier.C), ("Gamma", 65, Tier.B), ("Delta", 10, Tier.D)]
    ):
        ws.add_prospect(_prospect(str(index), name, score, tier))
    app.dependency_overrides[get_workspace_dep] = lambda: ws
    return ws


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, async_client):
        response = await async_client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_cors_preflight(self, async_client):
        response = await async_client.options(
            f"{API}/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


class TestScoringRulesApi:
    """Rule endpoints with the service replaced by an ``AsyncMock``."""

    @pytest.mark.asyncio
    async def test_evaluate(self, async_client, make_row):
        rule = _rule_row(make_row)
        service = AsyncMock()
        service.evaluate = AsyncMock(
            return_value={
                "total_points": 20,
                "matched_rules": [
                    {"rule": rule, "matched": True, "reason": "matches", "points_label": "+20"}
                ],
                "is_qualified": False,
                "qualification_threshold": 50,
                "qualification_label": "Marketing Qualified",
            }
        )
        app.dependency_overrides[get_rule_scoring_service] = lambda: service

        response = await async_client.post(
            f"{API}/scoring-rules/evaluate", json={"job_title": "VP Sales"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["total_points"] == 20
        assert body["matched_rules"][0]["rule"]["name"] == "VP or Director"
        assert body["matched_rules"][0]["points_label"] == "+20"
        service.evaluate.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_without_confirm(self, async_client):
        service = AsyncMock()
        service.delete_rule = AsyncMock(side_effect=ConfirmationRequiredError())
        app.dependency_overrides[get_rule_scoring_service] = lambda: service

        response = await async_client.delete(f"{API}/scoring-rules/{uuid.uuid4()}")

        assert response.status_code == 409
        assert response.json()["type"] == "confirmation_required"

    @pytest.mark.asyncio
    async def test_update_missing_rule(self, async_client):
        service = AsyncMock()
        service.update_rule = AsyncMock(side_effect=RuleNotFoundError())
        app.dependency_overrides[get_rule_scoring_service] = lambda: service

        response = await async_client.patch(
            f"{API}/scoring-rules/{uuid.uuid4()}", json={"points": 5}
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Scoring rule not found", "type": "rule_not_found"}

    @pytest.mark.asyncio
    async def test_settings_route_is_not_a_rule_id(self, async_client, make_row):
        service = AsyncMock()
        service.get_settings = AsyncMock(
            return_value=make_row(qualification_threshold=50, rule_based_enabled=True)
        )
        app.dependency_overrides[get_rule_scoring_service] = lambda: service

        response = await async_client.get(f"{API}/scoring-rules/settings")

        assert response.status_code == 200
        assert response.json()["qualification_threshold"] == 50

    @pytest.mark.asyncio
    async def test_validation_error_format(self, async_client):
        app.dependency_overrides[get_rule_scoring_service] = lambda: AsyncMock()

        response = await async_client.post(
            f"{API}/scoring-rules", json={"name": "", "points": 500}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["type"] == "validation_error"
        fields = {tuple(error["loc"])[-1] for error in body["errors"]}
        assert {"name", "points", "condition_type", "category"} <= fields


class TestIntentApi:
    @pytest.mark.asyncio
    async def test_log_signal_reports_every_error(self, async_client):
        service = AsyncMock()
        service.log_signal = AsyncMock(
            side_effect=InvalidSignalError(
                "Validation failed", errors=["lead_id is required", "signal_type is invalid"]
            )
        )
        app.dependency_overrides[get_signal_logging_service] = lambda: service

        response = await async_client.post(f"{API}/intent/log-signal", json={})

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "invalid_request"
        assert body["errors"] == ["lead_id is required", "signal_type is invalid"]


class TestPredictiveApi:
    @pytest.mark.asyncio
    async def test_predict_disabled(self, async_client):
        service = AsyncMock()
        service.predict = AsyncMock(
            side_effect=ScoringDisabledError("Predictive scoring is not enabled")
        )
        app.dependency_overrides[get_predictive_service] = lambda: service

        response = await async_client.post(f"{API}/predictive/predict", json={"industry": "SaaS"})

        assert response.status_code == 400
        assert response.json()["type"] == "scoring_disabled"


class TestProspectsApi:
    @pytest.mark.asyncio
    async def test_tiers(self, async_client):
        response = await async_client.get(f"{API}/prospects/tiers")
        assert response.status_code == 200
        assert [t["tier"] for t in response.json()] == ["A", "B", "C", "D"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,status,error_type",
        [
            (AIRateLimitError(), 429, "ai_rate_limited"),
            (AICreditsExhaustedError(), 402, "ai_credits_exhausted"),
        ],
    )
    async def test_gateway_errors(self, async_client, error, status, error_type):
        service = AsyncMock()
        service.score_prospect = AsyncMock(side_effect=error)
        app.dependency_overrides[get_prospect_scoring_service] = lambda: service

        response = await async_client.post(
            f"{API}/prospects/score",
            json={
                "company_info": "Acme",
                "criteria": [{"id": "size", "name": "Size", "weight": 50}],
            },
        )

        assert response.status_code == status
        assert response.json()["type"] == error_type

    @pytest.mark.asyncio
    async def test_score_requires_criteria(self, async_client):
        app.dependency_overrides[get_prospect_scoring_service] = lambda: AsyncMock()
        response = await async_client.post(
            f"{API}/prospects/score", json={"company_info": "Acme", "criteria": []}
        )
        assert response.status_code == 422


class TestWorkspaceApi:
    """Workspace endpoints against an in-memory workspace."""

    @pytest.mark.asyncio
    async def test_list_sorted_by_score(self, async_client, workspace):
        response = await async_client.get(
            f"{API}/workspace/prospects", params={"sort_by": "score", "order": "desc"}
        )
        assert response.status_code == 200
        assert [p["company_name"] for p in response.json()] == ["Acme", "Gamma", "Beta", "Delta"]

    @pytest.mark.asyncio
    async def test_compare_limit(self, async_client, workspace):
        response = await async_client.post(
            f"{API}/workspace/compare", json={"prospect_ids": ["0", "1", "2", "3"]}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "You can compare up to 3 prospects at a time."

    @pytest.mark.asyncio
    async def test_clear_requires_confirm(self, async_client, workspace):
        response = await async_client.delete(f"{API}/workspace/prospects")
        assert response.status_code == 409
        assert len(workspace.prospects) == 4

        response = await async_client.delete(
            f"{API}/workspace/prospects", params={"confirm": "true"}
        )
        assert response.status_code == 200
        assert workspace.prospects == []

    @pytest.mark.asyncio
    async def test_missing_prospect(self, async_client, workspace):
        response = await async_client.get(f"{API}/workspace/prospects/nope")
        assert response.status_code == 404
        assert response.json()["type"] == "prospect_not_found"

    @pytest.mark.asyncio
    async def test_update_criteria_weight(self, async_client, workspace):
        response = await async_client.patch(
            f"{API}/workspace/criteria/industry", json={"weight": 40}
        )
        assert response.status_code == 200
        assert response.json()["weight"] == 40

    @pytest.mark.asyncio
    async def test_add_prospect_uses_workspace_settings(self, async_client, workspace):
        prospect = _prospect("new", "Newco", 70, Tier.B).model_dump()
        service = AsyncMock()
        service.build_prospect = AsyncMock(return_value=prospect)
        app.dependency_overrides[get_prospect_scoring_service] = lambda: service

        response = await async_client.post(
            f"{API}/workspace/prospects", json={"company_info": "Newco, 80 people"}
        )

        assert response.status_code == 201
        assert workspace.prospects[0].id == "new"
        args = service.build_prospect.call_args.args
        assert args[0] == "Newco, 80 people"
        assert args[2] == ScoringMode.simple


class TestUnhandledErrors:
    """Unexpected exceptions must not leak details to the client."""

    @pytest.mark.asyncio
    async def test_unexpected_error_is_hidden(self):
        service = AsyncMock()
        service.list_rules = AsyncMock(side_effect=RuntimeError("db exploded"))
        app.dependency_overrides[get_rule_scoring_service] = lambda: service
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get(f"{API}/scoring-rules")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["type"] == "internal_server_error"
        assert "db exploded" not in response.text
