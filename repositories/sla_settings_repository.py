"""
SLA settings repository for querying response-time rules.

Fetches active rows from the sla_settings table and turns them into an SlaPolicy.
Priorities without an active row keep the default response time.
"""

from __future__ import annotations

import logging

from domain.lead import LeadPriority
from domain.sla import SlaPolicy
from repositories.client import get_supabase, raise_for_error

logger = logging.getLogger(__name__)

_SLA_SETTINGS_TABLE: str = "sla_settings"


def get_active_sla_policy() -> SlaPolicy:
    """
    Build the SLA policy from active sla_settings rows.

    Rows with an unknown priority or a non-positive response time are skipped
    with a warning, so that priority keeps its default.
    """

    response = (
        get_supabase()
        .table(_SLA_SETTINGS_TABLE)
        .select("name, priority, response_time_minutes")
        .eq("is_active", True)
        .execute()
    )
    raise_for_error(response, "fetch SLA settings")

    rows = getattr(response, "data", None) or []

    response_minutes: dict[LeadPriority, int] = {}
    for row in rows:
        try:
            priority = LeadPriority(str(row["priority"]))
        except ValueError:
            logger.warning(
                "Skipping SLA setting %r with unknown priority %r",
                row.get("name"),
                row.get("priority"),
            )
            continue
        minutes = int(row["response_time_minutes"])
        if minutes <= 0:
            logger.warning(
                "Skipping SLA setting %r with non-positive response time %r",
                row.get("name"),
                row.get("response_time_minutes"),
            )
            continue
        response_minutes[priority] = minutes

    return SlaPolicy(response_minutes=response_minutes)


__all__ = ["get_active_sla_policy"]
