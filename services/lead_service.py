"""
Lead service for ingestion and first contact.

Handles:
- Scoring new leads at creation
- Duplicate detection by phone number (oldest non-duplicate lead is the original)
- SLA deadline assignment from the active SLA policy
- Recording first contact, SLA breach and response time
- Status changes and status-filtered listing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from domain.duplicates import DuplicateCheck
from domain.lead import Lead, LeadAlreadyContactedError, LeadPriority, LeadStatus
from domain.lead_score import compute_lead_score
from domain.sla import response_time_minutes
from domain.time import require_utc_timestamp, utc_now
from repositories.lead_repository import (
    find_leads_by_phone,
    get_lead_by_id,
    insert_lead,
    list_duplicate_leads,
    list_leads,
    record_contact,
    update_lead_status,
)
from repositories.sla_settings_repository import get_active_sla_policy

logger = logging.getLogger(__name__)


class LeadNotFoundError(LookupError):
    """Raised when a lead id does not exist."""


@dataclass(frozen=True, slots=True)
class NewLead:
    """
    Inbound lead data from a form or API submission.
    """
    source: str
    customer_name: str
    customer_phone: str
    priority: LeadPriority = LeadPriority.NORMAL
    status: LeadStatus = LeadStatus.NEW
    customer_email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None
    service_type: Optional[str] = None
    description: Optional[str] = None
    assigned_to: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ContactResult:
    """
    Result of marking a lead as contacted.

    lead: the updated lead (contacted_at set)
    sla_breached: True if contact happened after the SLA deadline
    response_time_minutes: minutes from creation to first contact
    """
    lead: Lead
    sla_breached: bool
    response_time_minutes: int


def get_lead(lead_id: UUID) -> Lead:
    lead = get_lead_by_id(lead_id)
    if lead is None:
        raise LeadNotFoundError(f"Lead {lead_id} not found")
    return lead


def check_duplicate(phone: str) -> DuplicateCheck:
    """Look up existing leads with this phone number."""

    return DuplicateCheck.from_matches(find_leads_by_phone(phone))


def create_lead(new_lead: NewLead, now: Optional[datetime] = None) -> Lead:
    """
    Create and persist a lead.

    Steps:
    1. Score the lead from its source, service type, priority and zip code
    2. Flag it as a duplicate if an original lead with the same phone exists
    3. Assign the SLA deadline from the active policy
    4. Insert it

    Args:
        new_lead: Inbound lead data
        now: Creation timestamp (defaults to the current UTC time)

    Returns:
        The persisted Lead

    Raises:
        RuntimeError: If the database rejects the insert
    """
    created_at = now if now is not None else utc_now()
    require_utc_timestamp("now", created_at)

    score = compute_lead_score(
        source=new_lead.source,
        service_type=new_lead.service_type,
        priority=new_lead.priority,
        zip_code=new_lead.zip_code,
    )

    duplicate = check_duplicate(new_lead.customer_phone)
    original = duplicate.original_lead

    policy = get_active_sla_policy()

    lead = Lead(
        lead_id=uuid4(),
        source=new_lead.source,
        customer_name=new_lead.customer_name,
        customer_phone=new_lead.customer_phone,
        created_at=created_at,
        status=LeadStatus.DUPLICATE if original is not None else new_lead.status,
        priority=new_lead.priority,
        sla_deadline=policy.deadline_for(created_at, new_lead.priority),
        lead_score=score,
        is_duplicate=original is not None,
        duplicate_of_id=original.lead_id if original is not None else None,
        customer_email=new_lead.customer_email,
        address=new_lead.address,
        city=new_lead.city,
        zip_code=new_lead.zip_code,
        service_type=new_lead.service_type,
        description=new_lead.description,
        assigned_to=new_lead.assigned_to,
    )

    insert_lead(lead)

    if original is not None:
        logger.info(
            "Lead %s flagged as duplicate of %s (%d phone matches)",
            lead.lead_id,
            original.lead_id,
            duplicate.match_count,
        )
    else:
        logger.info(
            "Created lead %s from %s, score=%d, SLA deadline %s",
            lead.lead_id,
            lead.source,
            lead.lead_score,
            lead.sla_deadline.isoformat() if lead.sla_deadline else "none",
        )

    return lead


def mark_lead_contacted(lead_id: UUID, now: Optional[datetime] = None) -> ContactResult:
    """
    Record the first contact with a lead.

    The write only lands if the stored lead is still uncontacted, so a concurrent
    contact that slipped in after the read is reported instead of overwritten.

    Raises:
        LeadNotFoundError: If the lead does not exist
        LeadAlreadyContactedError: If contacted_at is already set
    """
    contacted_at = now if now is not None else utc_now()

    lead = get_lead(lead_id)
    updated = lead.mark_contacted(contacted_at)
    if not record_contact(updated):
        raise LeadAlreadyContactedError(f"Lead {lead_id} was already contacted")

    minutes = response_time_minutes(lead.created_at, contacted_at)
    if updated.sla_breach:
        logger.warning("Lead %s contacted after SLA deadline (%d min response)", lead_id, minutes)
    else:
        logger.info("Lead %s contacted within SLA (%d min response)", lead_id, minutes)

    return ContactResult(
        lead=updated,
        sla_breached=updated.sla_breach,
        response_time_minutes=minutes,
    )


def update_status(lead_id: UUID, status: LeadStatus, assigned_to: Optional[str] = None) -> Lead:
    """
    Apply a user-driven status change.

    Raises:
        LeadNotFoundError: If the lead does not exist
        InvalidStatusTransitionError: If the lead is already in a terminal status
    """
    lead = get_lead(lead_id)
    updated = lead.with_status(status, assigned_to=assigned_to)
    update_lead_status(updated)

    logger.info("Lead %s status %s -> %s", lead_id, lead.status.value, updated.status.value)
    return updated


def get_leads(status: Optional[LeadStatus] = None) -> List[Lead]:
    return list_leads(status)


def get_duplicate_leads() -> List[Lead]:
    return list_duplicate_leads()


__all__ = [
    "ContactResult",
    "LeadNotFoundError",
    "NewLead",
    "check_duplicate",
    "create_lead",
    "get_duplicate_leads",
    "get_lead",
    "get_leads",
    "mark_lead_contacted",
    "update_status",
]
