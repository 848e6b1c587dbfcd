"""Prospect workspace: the ICP criteria and scored prospects a user works with.

State lives on an explicit :class:`Workspace` object and is written to
disk only through :meth:`Workspace.save` / :meth:`Workspace.load`.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from fitcheck.core.constants import MAX_COMPARE_PROSPECTS, TIER_ORDER
from fitcheck.core.default_scoring_rules import DEFAULT_ICP_CRITERIA
from fitcheck.core.exceptions import (
    CompareLimitError,
    ConfirmationRequiredError,
    InvalidRequestError,
    ProspectNotFoundError,
)
from fitcheck.schemas.common import (
    OutreachTone,
    ProspectSortField,
    ScoringMode,
    SortOrder,
)
from fitcheck.schemas.prospect import ICPCriteria, ProspectScore, WorkspaceOut

logger = logging.getLogger(__name__)

# Tier sorting breaks ties by score, highest first
_SORT_KEYS: Dict[ProspectSortField, Callable[[ProspectScore], Any]] = {
    ProspectSortField.tier: lambda p: (TIER_ORDER[p.tier], -p.total_score),
    ProspectSortField.score: lambda p: p.total_score,
    ProspectSortField.date: lambda p: p.created_at,
    ProspectSortField.name: lambda p: p.company_name.lower(),
}


def default_criteria() -> List[ICPCriteria]:
    return [ICPCriteria(**c) for c in DEFAULT_ICP_CRITERIA]


class Workspace:
    def __init__(
        self,
        criteria: Optional[List[ICPCriteria]] = None,
        prospects: Optional[List[ProspectScore]] = None,
        scoring_mode: ScoringMode = ScoringMode.simple,
        outreach_tone: OutreachTone = OutreachTone.casual,
        path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.path = Path(path) if path else None
        self.criteria: List[ICPCriteria] = list(criteria) if criteria else default_criteria()
        self.prospects: List[ProspectScore] = list(prospects or [])
        self.scoring_mode = scoring_mode
        self.outreach_tone = outreach_tone

    # ------------------------------------------------------------------
    # Criteria
    # ------------------------------------------------------------------

    def set_criteria(self, criteria: List[ICPCriteria]) -> None:
        if not criteria:
            raise InvalidRequestError("At least one ICP criterion is required")
        self.criteria = list(criteria)

    def update_criteria_weight(self, criteria_id: str, weight: int) -> ICPCriteria:
        for index, criterion in enumerate(self.criteria):
            if criterion.id == criteria_id:
                updated = criterion.model_copy(update={"weight": weight})
                self.criteria[index] = updated
                return updated
        raise InvalidRequestError(f"Unknown criterion {criteria_id}")

    def reset_criteria(self) -> None:
        self.criteria = default_criteria()

    def update_settings(
        self,
        scoring_mode: Optional[ScoringMode] = None,
        outreach_tone: Optional[OutreachTone] = None,
    ) -> None:
        if scoring_mode is not None:
            self.scoring_mode = scoring_mode
        if outreach_tone is not None:
            self.outreach_tone = outreach_tone

    # ------------------------------------------------------------------
    # Prospects
    # ------------------------------------------------------------------

    def add_prospect(self, prospect: ProspectScore) -> None:
        """Newest prospects are kept first."""
        self.prospects.insert(0, prospect)

    def get_prospect(self, prospect_id: str) -> ProspectScore:
        for prospect in self.prospects:
            if prospect.id == prospect_id:
                return prospect
        raise ProspectNotFoundError(f"Prospect {prospect_id} not found")

    def remove_prospect(self, prospect_id: str) -> None:
        self.get_prospect(prospect_id)
        self.prospects = [p for p in self.prospects if p.id != prospect_id]

    def clear_prospects(self, confirm: bool = False) -> None:
        if not confirm:
            raise ConfirmationRequiredError("Clearing all prospects requires confirm=true")
        self.prospects = []

    def query(
        self,
        search: Optional[str] = None,
        sort_by: ProspectSortField = ProspectSortField.tier,
        order: SortOrder = SortOrder.asc,
    ) -> List[ProspectScore]:
        """Filter by name/description substring, then sort."""
        needle = (search or "").lower()
        matches = [
            p
            for p in self.prospects
            if needle in p.company_name.lower() or needle in p.company_description.lower()
        ]
        return sorted(matches, key=_SORT_KEYS[sort_by], reverse=order == SortOrder.desc)

    def compare(self, prospect_ids: List[str]) -> List[ProspectScore]:
        unique_ids = list(dict.fromkeys(prospect_ids))
        if len(unique_ids) > MAX_COMPARE_PROSPECTS:
            raise CompareLimitError()
        return [self.get_prospect(prospect_id) for prospect_id in unique_ids]

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> WorkspaceOut:
        return WorkspaceOut(
            criteria=self.criteria,
            prospects=self.prospects,
            scoring_mode=self.scoring_mode,
            outreach_tone=self.outreach_tone,
        )

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.snapshot().model_dump_json(indent=2), encoding="utf-8")
        logger.debug("Workspace saved to %s", path)

    def persist(self) -> None:
        """Write to the file this workspace was loaded from, if any."""
        if self.path is not None:
            self.save(self.path)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Workspace":
        """Load a saved workspace; a missing or corrupt file yields a fresh one."""
        path = Path(path)
        if not path.exists():
            return cls(path=path)
        try:
            state = WorkspaceOut.model_validate_json(path.read_text(encoding="utf-8"))
        except (ValidationError, OSError):
            logger.warning("Could not read workspace file %s, starting fresh", path, exc_info=True)
            return cls(path=path)
        return cls(
            criteria=state.criteria,
            prospects=state.prospects,
            scoring_mode=state.scoring_mode,
            outreach_tone=state.outreach_tone,
            path=path,
        )


_workspace: Optional[Workspace] = None


def get_workspace() -> Workspace:
    """Process-wide workspace, loaded lazily from ``WORKSPACE_PATH``."""
    global _workspace
    if _workspace is None:
        from fitcheck.core.config import settings

        _workspace = Workspace.load(settings.WORKSPACE_PATH)
    return _workspace
