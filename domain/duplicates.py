"""
Domain: Duplicate lead detection by phone number.

The original of a set of leads sharing a phone number is the oldest lead that is
not itself flagged as a duplicate. A new lead is a duplicate iff such an original
exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .lead import Lead


def find_original_lead(candidates: Iterable[Lead]) -> Optional[Lead]:
    originals = [lead for lead in candidates if not lead.is_duplicate]
    if not originals:
        return None
    return min(originals, key=lambda lead: lead.created_at)


@dataclass(frozen=True, slots=True)
class DuplicateCheck:
    """Outcome of checking a phone number against existing leads."""

    original_lead: Optional[Lead]
    match_count: int

    @property
    def is_duplicate(self) -> bool:
        return self.original_lead is not None

    @staticmethod
    def from_matches(matches: Sequence[Lead]) -> "DuplicateCheck":
        return DuplicateCheck(original_lead=find_original_lead(matches), match_count=len(matches))
