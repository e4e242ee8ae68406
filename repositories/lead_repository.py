"""
Lead repository (persistence).

This module provides *only* persistence operations for the Lead domain entity.
No business rules (scoring, SLA classification, duplicate detection) belong here.
"""

from __future__ import annotations

from typing import Any, List, Mapping
from uuid import UUID

from domain.lead import DEFAULT_LEAD_SCORE, Lead, LeadPriority, LeadStatus
from domain.time import parse_optional_utc_timestamp, parse_utc_timestamp, to_iso_utc
from repositories.client import get_supabase, raise_for_error

# Supabase table name for Lead records.
# Keep this aligned with your database schema.
_LEADS_TABLE: str = "leads"

_OPTIONAL_TEXT_FIELDS = (
    "customer_email",
    "address",
    "city",
    "zip_code",
    "service_type",
    "description",
    "assigned_to",
)


def _optional_iso(name: str, value: Any) -> str | None:
    return None if value is None else to_iso_utc(name, value)


def _lead_to_row(lead: Lead) -> dict[str, Any]:
    """Convert a domain Lead to a Supabase row payload."""

    row: dict[str, Any] = {
        "id": str(lead.lead_id),
        "source": lead.source,
        "customer_name": lead.customer_name,
        "customer_phone": lead.customer_phone,
        "status": lead.status.value,
        "priority": lead.priority.value,
        "created_at": to_iso_utc("created_at", lead.created_at),
        "sla_deadline": _optional_iso("sla_deadline", lead.sla_deadline),
        "contacted_at": _optional_iso("contacted_at", lead.contacted_at),
        "sla_breach": lead.sla_breach,
        "lead_score": lead.lead_score,
        "is_duplicate": lead.is_duplicate,
        "duplicate_of_id": str(lead.duplicate_of_id) if lead.duplicate_of_id else None,
    }
    for name in _OPTIONAL_TEXT_FIELDS:
        row[name] = getattr(lead, name)
    return row


def _row_to_lead(row: Mapping[str, Any]) -> Lead:
    """Convert a Supabase row into a domain Lead."""

    # Helper to convert empty strings to None
    def get_optional(key: str) -> str | None:
        value = row.get(key)
        return str(value) if value else None

    duplicate_of = row.get("duplicate_of_id")
    lead_score = row.get("lead_score")

    return Lead(
        lead_id=UUID(str(row["id"])),
        source=str(row["source"]),
        customer_name=str(row["customer_name"]),
        customer_phone=str(row["customer_phone"]),
        created_at=parse_utc_timestamp(row["created_at"]),
        status=LeadStatus(str(row.get("status") or LeadStatus.NEW.value)),
        priority=LeadPriority(str(row.get("priority") or LeadPriority.NORMAL.value)),
        sla_deadline=parse_optional_utc_timestamp(row.get("sla_deadline")),
        contacted_at=parse_optional_utc_timestamp(row.get("contacted_at")),
        sla_breach=bool(row.get("sla_breach")),
        lead_score=DEFAULT_LEAD_SCORE if lead_score is None else int(lead_score),
        is_duplicate=bool(row.get("is_duplicate")),
        duplicate_of_id=UUID(str(duplicate_of)) if duplicate_of else None,
        **{name: get_optional(name) for name in _OPTIONAL_TEXT_FIELDS},
    )


def insert_lead(lead: Lead) -> None:
    """
    Insert a Lead into Supabase.

    Raises:
    - RuntimeError if Supabase returns an error response.
    - ValueError/TypeError for invalid domain values (e.g., timestamps).
    """

    payload = _lead_to_row(lead)
    response = get_supabase().table(_LEADS_TABLE).insert(payload).execute()
    raise_for_error(response, "insert lead")


def record_contact(lead: Lead) -> bool:
    """
    Write first-contact fields only if the stored lead is still uncontacted.

    The `contacted_at IS NULL` condition makes the write conditional, so of two
    concurrent contacts only one lands.

    Returns:
    - True if the row was updated
    - False if contacted_at was already set (or the lead no longer exists)
    """

    if lead.contacted_at is None:
        raise ValueError("record_contact requires contacted_at")

    response = (
        get_supabase()
        .table(_LEADS_TABLE)
        .update({
            "contacted_at": to_iso_utc("contacted_at", lead.contacted_at),
            "status": lead.status.value,
            "sla_breach": lead.sla_breach,
        })
        .eq("id", str(lead.lead_id))
        .is_("contacted_at", "null")
        .execute()
    )
    raise_for_error(response, f"record contact for lead {lead.lead_id}")

    rows = getattr(response, "data", None) or []
    return bool(rows)


def update_lead_status(lead: Lead) -> None:
    """
    Persist a status change.

    Only the status and assignment columns are written; created_at, sla_deadline
    and contacted_at are never touched here.
    """

    response = (
        get_supabase()
        .table(_LEADS_TABLE)
        .update({"status": lead.status.value, "assigned_to": lead.assigned_to})
        .eq("id", str(lead.lead_id))
        .execute()
    )
    raise_for_error(response, f"update status for lead {lead.lead_id}")


def update_lead_scores(scores: Mapping[UUID, int]) -> int:
    """
    Write recomputed scores back, one row per lead.

    Returns the number of rows written. Empty input is a no-op.
    """

    client = get_supabase()
    for lead_id, score in scores.items():
        response = (
            client.table(_LEADS_TABLE)
            .update({"lead_score": score})
            .eq("id", str(lead_id))
            .execute()
        )
        raise_for_error(response, f"update score for lead {lead_id}")
    return len(scores)


def get_lead_by_id(lead_id: UUID) -> Lead | None:
    """
    Fetch a Lead by ID.

    Returns:
    - Lead if found
    - None if no record exists for the given ID
    """

    response = (
        get_supabase()
        .table(_LEADS_TABLE)
        .select("*")
        .eq("id", str(lead_id))
        .limit(1)
        .execute()
    )
    raise_for_error(response, "fetch lead")

    rows = getattr(response, "data", None) or []
    if not rows:
        return None
    return _row_to_lead(rows[0])


def list_leads(status: LeadStatus | None = None) -> List[Lead]:
    """List Leads, newest first, optionally filtered by status."""

    query = get_supabase().table(_LEADS_TABLE).select("*")
    if status is not None:
        query = query.eq("status", status.value)

    response = query.order("created_at", desc=True).execute()
    raise_for_error(response, "list leads")

    rows = getattr(response, "data", None) or []
    return [_row_to_lead(row) for row in rows]


def list_duplicate_leads() -> List[Lead]:
    response = (
        get_supabase()
        .table(_LEADS_TABLE)
        .select("*")
        .eq("is_duplicate", True)
        .order("created_at", desc=True)
        .execute()
    )
    raise_for_error(response, "list duplicate leads")

    rows = getattr(response, "data", None) or []
    return [_row_to_lead(row) for row in rows]


def find_leads_by_phone(phone: str) -> List[Lead]:
    """All leads with exactly this customer phone, oldest first."""

    response = (
        get_supabase()
        .table(_LEADS_TABLE)
        .select("*")
        .eq("customer_phone", phone)
        .order("created_at")
        .execute()
    )
    raise_for_error(response, "find leads by phone")

    rows = getattr(response, "data", None) or []
    return [_row_to_lead(row) for row in rows]


__all__ = [
    "insert_lead",
    "record_contact",
    "update_lead_status",
    "update_lead_scores",
    "get_lead_by_id",
    "list_leads",
    "list_duplicate_leads",
    "find_leads_by_phone",
]
