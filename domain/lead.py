"""
Domain: Lead entity.

Rules implemented here:
- A Lead represents a single service inquiry and is uniquely identified by lead_id (UUID).
- created_at is a UTC timestamp, set once at creation and never changed.
- sla_deadline is assigned at creation from the SLA policy and never changed.
- contacted_at is set exactly once, the first time the lead is contacted. Once set,
  SLA evaluation for the lead is frozen.
- Duplicate flags are set at ingestion time by the phone-number check.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from .time import require_optional_utc_timestamp, require_utc_timestamp


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    SCHEDULED = "scheduled"
    CONVERTED = "converted"
    LOST = "lost"
    SPAM = "spam"
    DUPLICATE = "duplicate"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {LeadStatus.CONVERTED, LeadStatus.LOST, LeadStatus.SPAM, LeadStatus.DUPLICATE}
)


class LeadPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


DEFAULT_LEAD_SCORE = 50


class InvalidStatusTransitionError(ValueError):
    """Raised when a terminal lead would be moved to another status."""


class LeadAlreadyContactedError(ValueError):
    """Raised when contacted_at would be set a second time."""


@dataclass(frozen=True, slots=True)
class Lead:
    """
    Pure domain entity for a Lead.

    Immutability:
    - This entity is frozen; state changes (contact, rescoring) return new instances
      so that created_at, sla_deadline and contacted_at cannot be rewritten in place.
    """

    lead_id: UUID
    source: str
    customer_name: str
    customer_phone: str
    created_at: datetime
    status: LeadStatus = LeadStatus.NEW
    priority: LeadPriority = LeadPriority.NORMAL
    sla_deadline: Optional[datetime] = None
    contacted_at: Optional[datetime] = None
    sla_breach: bool = False
    lead_score: int = DEFAULT_LEAD_SCORE
    is_duplicate: bool = False
    duplicate_of_id: Optional[UUID] = None

    customer_email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    service_type: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[str] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        require_optional_utc_timestamp("sla_deadline", self.sla_deadline)
        require_optional_utc_timestamp("contacted_at", self.contacted_at)
        if not 0 <= self.lead_score <= 100:
            raise ValueError("lead_score must be between 0 and 100")
        if self.duplicate_of_id is not None and not self.is_duplicate:
            raise ValueError("duplicate_of_id requires is_duplicate")

    @property
    def is_contacted(self) -> bool:
        return self.contacted_at is not None

    def mark_contacted(self, contacted_at: datetime) -> "Lead":
        """
        Return a new Lead with contacted_at set.

        - A new lead moves to `contacted`; any other status is kept.
        - sla_breach records whether contact happened after the deadline.
        """

        require_utc_timestamp("contacted_at", contacted_at)
        if self.contacted_at is not None:
            raise LeadAlreadyContactedError(
                f"Lead {self.lead_id} was already contacted at {self.contacted_at.isoformat()}"
            )

        breached = self.sla_deadline is not None and contacted_at > self.sla_deadline
        status = LeadStatus.CONTACTED if self.status == LeadStatus.NEW else self.status
        return replace(self, contacted_at=contacted_at, status=status, sla_breach=breached)

    def with_score(self, lead_score: int) -> "Lead":
        return replace(self, lead_score=lead_score)

    def with_status(self, status: LeadStatus, assigned_to: Optional[str] = None) -> "Lead":
        """
        Return a new Lead with a user-driven status change.

        - A lead in a terminal status (converted, lost, spam, duplicate) cannot move
          to a different status.
        - assigned_to is replaced only when given.
        - created_at, sla_deadline and contacted_at are never changed here.
        """

        if self.status.is_terminal and status != self.status:
            raise InvalidStatusTransitionError(
                f"Lead {self.lead_id} is {self.status.value}; cannot change to {status.value}"
            )

        return replace(
            self,
            status=status,
            assigned_to=assigned_to if assigned_to is not None else self.assigned_to,
        )
