"""
Pytest configuration for the test suite.

This file adds the project root to the Python path so that tests can import
the domain, repositories, services and api packages. It provides a factory
for Lead entities and a fake Supabase client for repository tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from uuid import UUID

import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.lead import Lead  # noqa: E402

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_lead():
    """Build a Lead with sensible defaults; keyword arguments override fields."""

    counter = iter(range(1, 10_000))

    def _make(**overrides) -> Lead:
        fields = {
            "lead_id": UUID(int=next(counter)),
            "source": "Direct",
            "customer_name": "Jane Doe",
            "customer_phone": "3125550100",
            "created_at": T0,
        }
        fields.update(overrides)
        return Lead(**fields)

    return _make


class FakeQuery:
    """Chainable stand-in for a Supabase query builder; records every call."""

    def __init__(self, table: str, rows: list) -> None:
        self.table = table
        self.rows = rows
        self.calls: list = []

    def __getattr__(self, method: str):
        def _record(*args, **kwargs):
            self.calls.append((method, args))
            return self

        return _record

    def execute(self):
        return SimpleNamespace(data=self.rows, error=None)


class FakeSupabase:
    """Returns the same canned rows for every query and keeps the queries made."""

    def __init__(self, rows: list | None = None) -> None:
        self.rows = rows if rows is not None else []
        self.queries: list = []

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self.rows)
        self.queries.append(query)
        return query


@pytest.fixture
def fake_supabase(monkeypatch: pytest.MonkeyPatch):
    """Factory: fake_supabase(module, rows) patches module.get_supabase."""

    def _install(module, rows: list | None = None) -> FakeSupabase:
        client = FakeSupabase(rows)
        monkeypatch.setattr(module, "get_supabase", lambda: client)
        return client

    return _install
