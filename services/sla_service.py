"""
SLA service for reporting lead response status.

Evaluates every lead against its SLA deadline at a single instant so that the
whole report is consistent. Callers poll this periodically; nothing here is
scheduled.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from domain.lead import Lead
from domain.sla import SlaEvaluation, SlaStatus, classify_lead_sla
from domain.time import require_utc_timestamp, utc_now
from repositories.lead_repository import list_leads


@dataclass(frozen=True, slots=True)
class LeadSlaStatus:
    lead_id: UUID
    evaluation: SlaEvaluation
    sla_deadline: Optional[datetime]
    contacted_at: Optional[datetime]

    @staticmethod
    def for_lead(lead: Lead, now: datetime) -> "LeadSlaStatus":
        return LeadSlaStatus(
            lead_id=lead.lead_id,
            evaluation=classify_lead_sla(lead, now),
            sla_deadline=lead.sla_deadline,
            contacted_at=lead.contacted_at,
        )


@dataclass(frozen=True, slots=True)
class SlaStatusReport:
    evaluated_at: datetime
    leads: List[LeadSlaStatus]

    def counts(self) -> Dict[SlaStatus, int]:
        """Number of leads in each SLA status (every status present, zero if unused)."""

        tally = Counter(item.evaluation.status for item in self.leads)
        return {status: tally.get(status, 0) for status in SlaStatus}


def get_sla_status_report(now: Optional[datetime] = None) -> SlaStatusReport:
    evaluated_at = now if now is not None else utc_now()
    require_utc_timestamp("now", evaluated_at)

    return SlaStatusReport(
        evaluated_at=evaluated_at,
        leads=[LeadSlaStatus.for_lead(lead, evaluated_at) for lead in list_leads()],
    )


__all__ = ["LeadSlaStatus", "SlaStatusReport", "get_sla_status_report"]
