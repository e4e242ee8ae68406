"""
Tests for `domain/duplicates.py`.

Covers rules:
- The original is the oldest lead not itself flagged as a duplicate.
- No original -> not a duplicate, even when matches exist.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

from domain.duplicates import DuplicateCheck, find_original_lead

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_no_matches_is_not_duplicate() -> None:
    check = DuplicateCheck.from_matches([])

    assert not check.is_duplicate
    assert check.original_lead is None
    assert check.match_count == 0


def test_oldest_non_duplicate_is_original(make_lead) -> None:
    older = make_lead(created_at=T0 - timedelta(days=2))
    newer = make_lead(created_at=T0 - timedelta(days=1))
    oldest_but_duplicate = make_lead(
        created_at=T0 - timedelta(days=5), is_duplicate=True, duplicate_of_id=UUID(int=500)
    )

    assert find_original_lead([newer, oldest_but_duplicate, older]) is older


def test_only_duplicates_matched(make_lead) -> None:
    dup = make_lead(is_duplicate=True, duplicate_of_id=UUID(int=500))
    check = DuplicateCheck.from_matches([dup])

    assert not check.is_duplicate
    assert check.match_count == 1
