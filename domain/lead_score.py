"""
Domain: Lead quality score.

Scores are integers in [0, 100], recomputed on demand (at creation and by the
batch recalculation action), never continuously.

Banding for display:
- HIGH:   score >= 80
- GOOD:   60 <= score <= 79
- MEDIUM: 40 <= score <= 59
- LOW:    score < 40

Score computation starts from a base of 50 and adds:
- service type: high-value +25, medium-value +15, low-value +5 (substring match)
- source quality: Direct/Referral/Website +15, eLocal/Networx +10,
  Thumbtack/Angi/HomeAdvisor/Inquirly +5
- priority: urgent +20, high +10, low -10
- zip code inside the Chicago service area +10
The result is clamped to [0, 100].
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .lead import Lead, LeadPriority

BASE_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100

HIGH_VALUE_SERVICES = (
    "Sewer Main - Replace",
    "Sewer Main - Repair",
    "Water Heater - Replace",
    "Pipe Replacement",
)
MEDIUM_VALUE_SERVICES = (
    "Sewer Main - Clear",
    "Water Heater - Repair",
    "Hydro Jetting",
    "Camera Inspection",
    "Ejector Pump",
    "Sump Pump",
)
LOW_VALUE_SERVICES = (
    "Drain Cleaning",
    "Toilet Repair",
    "Faucet Repair",
)

HIGH_QUALITY_SOURCES = frozenset({"Direct", "Referral", "Website"})
MEDIUM_QUALITY_SOURCES = frozenset({"eLocal", "Networx"})
LOW_QUALITY_SOURCES = frozenset({"Thumbtack", "Angi", "HomeAdvisor", "Inquirly"})

_PRIORITY_ADJUSTMENTS = {
    LeadPriority.URGENT: 20,
    LeadPriority.HIGH: 10,
    LeadPriority.NORMAL: 0,
    LeadPriority.LOW: -10,
}

IN_SERVICE_AREA_BONUS = 10

# Chicago zip codes served without a travel surcharge.
SERVICE_AREA_ZIP_CODES = frozenset(
    f"606{suffix:02d}"
    for suffix in range(1, 62)
    if suffix not in (27, 35, 48, 50, 58)
)


class ScoreTier(str, Enum):
    HIGH = "high"
    GOOD = "good"
    MEDIUM = "medium"
    LOW = "low"

    @staticmethod
    def for_score(score: int) -> "ScoreTier":
        """Resolve the display tier for a score in [0, 100]."""

        if not MIN_SCORE <= score <= MAX_SCORE:
            raise ValueError(f"lead score must be between {MIN_SCORE} and {MAX_SCORE}, got {score}")

        if score >= 80:
            return ScoreTier.HIGH
        if score >= 60:
            return ScoreTier.GOOD
        if score >= 40:
            return ScoreTier.MEDIUM
        return ScoreTier.LOW


def _service_type_points(service_type: Optional[str]) -> int:
    if not service_type:
        return 0
    if any(s in service_type for s in HIGH_VALUE_SERVICES):
        return 25
    if any(s in service_type for s in MEDIUM_VALUE_SERVICES):
        return 15
    if any(s in service_type for s in LOW_VALUE_SERVICES):
        return 5
    return 0


def _source_points(source: Optional[str]) -> int:
    if source in HIGH_QUALITY_SOURCES:
        return 15
    if source in MEDIUM_QUALITY_SOURCES:
        return 10
    if source in LOW_QUALITY_SOURCES:
        return 5
    return 0


def compute_lead_score(
    *,
    source: Optional[str],
    service_type: Optional[str],
    priority: LeadPriority,
    zip_code: Optional[str],
) -> int:
    score = BASE_SCORE
    score += _service_type_points(service_type)
    score += _source_points(source)
    score += _PRIORITY_ADJUSTMENTS[priority]
    if zip_code and zip_code in SERVICE_AREA_ZIP_CODES:
        score += IN_SERVICE_AREA_BONUS
    return max(MIN_SCORE, min(MAX_SCORE, score))


def score_lead(lead: Lead) -> int:
    """Compute the score for an existing lead from its stored attributes."""

    return compute_lead_score(
        source=lead.source,
        service_type=lead.service_type,
        priority=lead.priority,
        zip_code=lead.zip_code,
    )


__all__ = [
    "ScoreTier",
    "compute_lead_score",
    "score_lead",
    "SERVICE_AREA_ZIP_CODES",
]
