"""
Scoring service for batch lead score recalculation.

Scores are not updated continuously; this is the explicit "recalculate scores"
action. Recomputation is idempotent: running it twice writes the same scores.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict
from uuid import UUID

from domain.lead_score import score_lead
from repositories.lead_repository import list_leads, update_lead_scores

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RescoreResult:
    """
    total: leads examined
    updated: leads whose stored score changed and was written back
    """
    total: int
    updated: int


def recalculate_scores(dry_run: bool = False) -> RescoreResult:
    """
    Recompute every lead's score and persist the ones that changed.

    Args:
        dry_run: Compute only; write nothing

    Returns:
        RescoreResult with counts
    """
    leads = list_leads()

    changed: Dict[UUID, int] = {}
    for lead in leads:
        new_score = score_lead(lead)
        if new_score != lead.lead_score:
            changed[lead.lead_id] = new_score

    if dry_run:
        logger.info("Dry run: %d of %d lead scores would change", len(changed), len(leads))
        return RescoreResult(total=len(leads), updated=0)

    updated = update_lead_scores(changed)
    logger.info("Recalculated scores for %d leads, %d changed", len(leads), updated)
    return RescoreResult(total=len(leads), updated=updated)


__all__ = ["RescoreResult", "recalculate_scores"]
