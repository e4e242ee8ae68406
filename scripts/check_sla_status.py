"""
Check SLA status - how many leads are ok, close to breach, breached or contacted.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from domain.sla import SlaStatus
from services.sla_service import get_sla_status_report


def check_sla_status():
    """Print SLA counts and the leads that need attention now."""

    report = get_sla_status_report()
    counts = report.counts()

    print("=" * 50)
    print("LEAD RESPONSE SLA STATUS")
    print(f"Evaluated at: {report.evaluated_at.isoformat()}")
    print("=" * 50)
    print(f"Total leads:               {len(report.leads)}")
    print(f"OK:                        {counts[SlaStatus.OK]}")
    print(f"Warning (<= 5 min left):   {counts[SlaStatus.WARNING]}")
    print(f"Breached:                  {counts[SlaStatus.BREACHED]}")
    print(f"Contacted:                 {counts[SlaStatus.CONTACTED]}")
    print(f"No SLA:                    {counts[SlaStatus.NO_SLA]}")
    print("=" * 50)

    urgent = [
        item for item in report.leads
        if item.evaluation.status in (SlaStatus.WARNING, SlaStatus.BREACHED)
    ]
    if not urgent:
        return

    print("\nUncontacted leads needing attention:")
    print("-" * 50)

    # Most overdue first
    for item in sorted(urgent, key=lambda i: i.evaluation.remaining_minutes or 0):
        print(f"{item.lead_id}  {item.evaluation.status.value:<9} {item.evaluation.label}")

    print("-" * 50)


if __name__ == "__main__":
    check_sla_status()
