#!/usr/bin/env python3
"""
Lead Score Recalculation Script

Recomputes the quality score of every lead and writes back the ones that changed.
Same operation as POST /api/v1/leads/recalculate-scores, for use from cron or a shell.

Usage:
    python recalculate_lead_scores.py
    python recalculate_lead_scores.py --dry-run
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.scoring_service import recalculate_scores


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Recalculate lead quality scores",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Recalculate and save
  python recalculate_lead_scores.py

  # Show how many scores would change without writing
  python recalculate_lead_scores.py --dry-run
        """
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute scores without writing them"
    )

    args = parser.parse_args()

    try:
        print("Recalculating lead scores...")
        result = recalculate_scores(dry_run=args.dry_run)

        print()
        print("=" * 60)
        print("RESCORE SUMMARY" + (" (dry run)" if args.dry_run else ""))
        print("=" * 60)
        print(f"Leads examined: {result.total}")
        print(f"Scores updated: {result.updated}")
        print("=" * 60)

        return 0

    except KeyboardInterrupt:
        print("\n\nRecalculation interrupted by user")
        return 130

    except Exception as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
