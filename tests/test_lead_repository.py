"""
Tests for row <-> entity conversion in `repositories/lead_repository.py`.

No database access: conversion helpers are exercised directly and the write
queries run against a fake Supabase client.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from domain.lead import LeadPriority, LeadStatus
from repositories import lead_repository
from repositories.lead_repository import _lead_to_row, _row_to_lead

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _row(**overrides):
    row = {
        "id": "00000000-0000-0000-0000-000000000001",
        "source": "eLocal",
        "customer_name": "Jane Doe",
        "customer_phone": "3125550100",
        "status": "new",
        "priority": "urgent",
        "created_at": "2025-01-01T12:00:00Z",
        "sla_deadline": "2025-01-01T12:15:00+00:00",
        "contacted_at": None,
        "sla_breach": False,
        "lead_score": 85,
        "is_duplicate": False,
        "duplicate_of_id": None,
        "zip_code": "60614",
        "city": "",
    }
    row.update(overrides)
    return row


def test_row_to_lead_parses_timestamps_and_enums() -> None:
    lead = _row_to_lead(_row())

    assert lead.lead_id == UUID(int=1)
    assert lead.created_at == T0
    assert lead.sla_deadline == T0 + timedelta(minutes=15)
    assert lead.contacted_at is None
    assert lead.status == LeadStatus.NEW
    assert lead.priority == LeadPriority.URGENT
    assert lead.lead_score == 85
    assert lead.zip_code == "60614"
    assert lead.city is None  # empty strings become None


def test_row_to_lead_treats_naive_timestamps_as_utc() -> None:
    lead = _row_to_lead(_row(created_at="2025-01-01T12:00:00"))

    assert lead.created_at == T0


def test_row_to_lead_defaults_missing_score_and_priority() -> None:
    lead = _row_to_lead(_row(lead_score=None, priority=None))

    assert lead.lead_score == 50
    assert lead.priority == LeadPriority.NORMAL


def test_row_to_lead_reads_duplicate_link() -> None:
    lead = _row_to_lead(
        _row(is_duplicate=True, status="duplicate", duplicate_of_id="00000000-0000-0000-0000-000000000009")
    )

    assert lead.is_duplicate
    assert lead.duplicate_of_id == UUID(int=9)


def test_row_to_lead_rejects_unknown_status() -> None:
    with pytest.raises(ValueError):
        _row_to_lead(_row(status="archived"))


def test_lead_to_row_serializes_utc_iso(make_lead) -> None:
    lead = make_lead(
        created_at=T0,
        sla_deadline=T0 + timedelta(minutes=60),
        contacted_at=T0 + timedelta(minutes=5),
        service_type="Hydro Jetting",
    )
    row = _lead_to_row(lead)

    assert row["created_at"] == "2025-01-01T12:00:00+00:00"
    assert row["sla_deadline"] == "2025-01-01T13:00:00+00:00"
    assert row["contacted_at"] == "2025-01-01T12:05:00+00:00"
    assert row["status"] == "new"
    assert row["priority"] == "normal"
    assert row["duplicate_of_id"] is None
    assert row["service_type"] == "Hydro Jetting"


def test_lead_round_trips_through_row(make_lead) -> None:
    lead = make_lead(
        sla_deadline=T0 + timedelta(minutes=30),
        priority=LeadPriority.HIGH,
        is_duplicate=True,
        duplicate_of_id=UUID(int=7),
        status=LeadStatus.DUPLICATE,
        zip_code="60601",
    )

    assert _row_to_lead(_lead_to_row(lead)) == lead


def test_record_contact_only_updates_uncontacted_row(make_lead, fake_supabase) -> None:
    """Verify the write is conditional on contacted_at still being null."""

    lead = make_lead().mark_contacted(T0 + timedelta(minutes=5))
    client = fake_supabase(lead_repository, rows=[{"id": str(lead.lead_id)}])

    assert lead_repository.record_contact(lead) is True

    calls = client.queries[0].calls
    assert ("eq", ("id", str(lead.lead_id))) in calls
    assert ("is_", ("contacted_at", "null")) in calls
    update_payload = next(args[0] for method, args in calls if method == "update")
    assert update_payload == {
        "contacted_at": (T0 + timedelta(minutes=5)).isoformat(),
        "status": "contacted",
        "sla_breach": False,
    }


def test_record_contact_reports_lost_race(make_lead, fake_supabase) -> None:
    lead = make_lead().mark_contacted(T0 + timedelta(minutes=5))
    fake_supabase(lead_repository, rows=[])

    assert lead_repository.record_contact(lead) is False


def test_record_contact_requires_contacted_at(make_lead, fake_supabase) -> None:
    client = fake_supabase(lead_repository)

    with pytest.raises(ValueError):
        lead_repository.record_contact(make_lead())
    assert client.queries == []


def test_update_lead_status_writes_status_and_assignee_only(make_lead, fake_supabase) -> None:
    lead = make_lead(
        sla_deadline=T0 + timedelta(minutes=60),
    ).with_status(LeadStatus.QUALIFIED, assigned_to="Marcus")
    client = fake_supabase(lead_repository)

    lead_repository.update_lead_status(lead)

    calls = client.queries[0].calls
    update_payload = next(args[0] for method, args in calls if method == "update")
    assert update_payload == {"status": "qualified", "assigned_to": "Marcus"}
    assert ("eq", ("id", str(lead.lead_id))) in calls


def test_list_leads_filters_by_status(fake_supabase) -> None:
    client = fake_supabase(lead_repository, rows=[_row(status="scheduled")])

    leads = lead_repository.list_leads(LeadStatus.SCHEDULED)

    assert [lead.status for lead in leads] == [LeadStatus.SCHEDULED]
    assert ("eq", ("status", "scheduled")) in client.queries[0].calls
