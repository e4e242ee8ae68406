"""
Domain: Lead response SLA.

Rules implemented here:
- Each lead gets a response deadline at creation: created_at + N minutes, where N
  depends on the lead priority (urgent 15, high 30, everything else 60 unless the
  active SLA settings say otherwise).
- SLA status is evaluated in order, first match wins:
  1. contacted_at is set        -> CONTACTED (frozen, no further transitions)
  2. sla_deadline is not set    -> NO_SLA
  3. remaining_minutes = ceil((sla_deadline - now) / 1 minute)
     remaining_minutes <= 0     -> BREACHED
     remaining_minutes <= 5     -> WARNING
     otherwise                  -> OK

Classification is pure. Callers own the polling interval and must pass
timezone-aware UTC datetimes; malformed timestamps are rejected at the boundary
(see domain.time), not here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Mapping, Optional

from .lead import Lead, LeadPriority

WARNING_THRESHOLD_MINUTES = 5

_MICROSECONDS_PER_MINUTE = 60 * 1_000_000

DEFAULT_RESPONSE_MINUTES: Mapping[LeadPriority, int] = {
    LeadPriority.URGENT: 15,
    LeadPriority.HIGH: 30,
    LeadPriority.NORMAL: 60,
    LeadPriority.LOW: 60,
}


class SlaStatus(str, Enum):
    OK = "ok"
    WARNING = "warning"
    BREACHED = "breached"
    CONTACTED = "contacted"
    NO_SLA = "no_sla"


@dataclass(frozen=True, slots=True)
class SlaEvaluation:
    """
    Result of classifying a lead against its SLA deadline.

    remaining_minutes is None for CONTACTED and NO_SLA.
    """

    status: SlaStatus
    remaining_minutes: Optional[int] = None

    @property
    def label(self) -> str:
        if self.status == SlaStatus.CONTACTED:
            return "Contacted"
        if self.status == SlaStatus.NO_SLA:
            return "No SLA"
        if self.remaining_minutes is None:
            raise ValueError(f"SLA status {self.status.value} requires remaining_minutes")
        return format_time_remaining(self.remaining_minutes)


def _ceil_minutes(delta: timedelta) -> int:
    # Integer arithmetic keeps exact minute boundaries exact.
    micros = delta // timedelta(microseconds=1)
    return -((-micros) // _MICROSECONDS_PER_MINUTE)


def classify_sla(
    now: datetime,
    sla_deadline: Optional[datetime],
    contacted_at: Optional[datetime],
) -> SlaEvaluation:
    """Classify SLA state for a lead at time `now`."""

    if contacted_at is not None:
        return SlaEvaluation(SlaStatus.CONTACTED)
    if sla_deadline is None:
        return SlaEvaluation(SlaStatus.NO_SLA)

    remaining = _ceil_minutes(sla_deadline - now)
    if remaining <= 0:
        status = SlaStatus.BREACHED
    elif remaining <= WARNING_THRESHOLD_MINUTES:
        status = SlaStatus.WARNING
    else:
        status = SlaStatus.OK
    return SlaEvaluation(status, remaining)


def classify_lead_sla(lead: Lead, now: datetime) -> SlaEvaluation:
    return classify_sla(now, lead.sla_deadline, lead.contacted_at)


def format_time_remaining(minutes: int) -> str:
    """
    Human-readable remaining time.

    Examples: -3 -> "Breached", 45 -> "45m", 60 -> "1h", 95 -> "1h 35m"
    """

    if minutes <= 0:
        return "Breached"
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def response_time_minutes(created_at: datetime, contacted_at: datetime) -> int:
    """Minutes between creation and first contact, rounded half up."""

    micros = (contacted_at - created_at) // timedelta(microseconds=1)
    return (micros + _MICROSECONDS_PER_MINUTE // 2) // _MICROSECONDS_PER_MINUTE


@dataclass(frozen=True, slots=True)
class SlaPolicy:
    """
    Response-time policy keyed by lead priority.

    Priorities missing from `response_minutes` fall back to the defaults.
    """

    response_minutes: Mapping[LeadPriority, int] = field(
        default_factory=lambda: dict(DEFAULT_RESPONSE_MINUTES)
    )

    def __post_init__(self) -> None:
        for priority, minutes in self.response_minutes.items():
            if minutes <= 0:
                raise ValueError(
                    f"response time for {priority.value} must be > 0 minutes, got {minutes}"
                )

    def minutes_for(self, priority: LeadPriority) -> int:
        if priority in self.response_minutes:
            return self.response_minutes[priority]
        return DEFAULT_RESPONSE_MINUTES[priority]

    def deadline_for(self, created_at: datetime, priority: LeadPriority) -> datetime:
        return created_at + timedelta(minutes=self.minutes_for(priority))


__all__ = [
    "DEFAULT_RESPONSE_MINUTES",
    "SlaEvaluation",
    "SlaPolicy",
    "SlaStatus",
    "WARNING_THRESHOLD_MINUTES",
    "classify_lead_sla",
    "classify_sla",
    "format_time_remaining",
    "response_time_minutes",
]
