"""
Pytest configuration and fixtures for the FEDV ranking tests
"""

import copy
import itertools
import os
from types import SimpleNamespace

import pytest

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-the-ranking-api-0123")

import jwt  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.config import get_current_season, settings  # noqa: E402
from app.db.supabase import get_supabase  # noqa: E402
from app.main import app  # noqa: E402

CURRENT_SEASON = 2025


class FakeQuery:
    """Chainable stand-in for a PostgREST query; only top-level eq filters apply."""

    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.payload = None
        self.on_conflict = None
        self.filters = []

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def in_(self, column, values):
        return self

    def order(self, *args, **kwargs):
        return self

    def limit(self, *args, **kwargs):
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict=None):
        self.operation = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def _matches(self, row):
        return all(
            row.get(column) == value
            for column, value in self.filters
            if "." not in column
        )

    def execute(self):
        if self.db.fail:
            raise ConnectionError("connection refused")

        self.db.calls.append((self.table_name, self.operation, self.payload))
        rows = self.db.tables.setdefault(self.table_name, [])

        if self.operation == "select":
            return SimpleNamespace(data=[r for r in rows if self._matches(r)], count=None)

        if self.operation in ("insert", "upsert"):
            records = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for record in records:
                record = dict(record)
                if self.on_conflict:
                    rows[:] = [
                        r for r in rows if r.get(self.on_conflict) != record.get(self.on_conflict)
                    ]
                record.setdefault("id", f"generated-{next(self.db.ids)}")
                rows.append(record)
                created.append(record)
            return SimpleNamespace(data=created, count=None)

        matched = [r for r in rows if self._matches(r)]
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)
        elif self.operation == "delete":
            rows[:] = [r for r in rows if not self._matches(r)]
        return SimpleNamespace(data=matched, count=None)


class FakeSupabase:
    """In-memory Supabase client holding one list of rows per table."""

    def __init__(self, tables=None, fail=False):
        self.tables = copy.deepcopy(tables or {})
        self.fail = fail
        self.calls = []
        self.ids = itertools.count(1)

    def table(self, name):
        return FakeQuery(self, name)


def _region(region_id, name, code, coefficient):
    return {"id": region_id, "name": name, "code": code, "coefficient": coefficient}


def _position(position_id, team, tournament, position):
    return {
        "id": position_id,
        "team_id": team["id"],
        "tournament_id": tournament["id"],
        "position": position,
        "points": 0.0,
        "tournaments": {"type": tournament["type"], "year": tournament["year"]},
        "teams": {"region_id": team["region_id"], "regions": team["regions"]},
    }


@pytest.fixture
def sample_tables():
    """
    Four teams in two regions, season 2025:

    - alpha (Madrid): CE1 1st in 2025, regional 1st in 2020 (too old)
    - beta (Madrid): CE2 2nd in 2025
    - gamma (Andalucia): regional 1st in 2025, CE1 3rd in 2024
    - delta (Andalucia): no results
    """
    madrid = _region("r-mad", "Madrid", "MAD", 1.5)
    andalucia = _region("r-and", "Andalucia", "AND", 1.0)

    def team(team_id, name, region):
        return {
            "id": team_id,
            "name": name,
            "club": f"Club {name}",
            "region_id": region["id"],
            "regions": region,
        }

    alpha = team("t-alpha", "Alpha", madrid)
    beta = team("t-beta", "Beta", madrid)
    gamma = team("t-gamma", "Gamma", andalucia)
    delta = team("t-delta", "Delta", andalucia)

    ce1_2025 = {"id": "tour-ce1-2025", "type": "CE1", "year": 2025}
    ce2_2025 = {"id": "tour-ce2-2025", "type": "CE2", "year": 2025}
    reg_2025 = {"id": "tour-reg-2025", "type": "REGIONAL", "year": 2025}
    ce1_2024 = {"id": "tour-ce1-2024", "type": "CE1", "year": 2024}
    reg_2020 = {"id": "tour-reg-2020", "type": "REGIONAL", "year": 2020}

    return {
        "regions": [madrid, andalucia],
        "teams": [alpha, beta, gamma, delta],
        "tournaments": [ce1_2025, ce2_2025, reg_2025, ce1_2024, reg_2020],
        "positions": [
            _position("p-1", alpha, ce1_2025, 1),
            _position("p-2", alpha, reg_2020, 1),
            _position("p-3", beta, ce2_2025, 2),
            _position("p-4", gamma, reg_2025, 1),
            _position("p-5", gamma, ce1_2024, 3),
        ],
    }


@pytest.fixture
def fake_db(sample_tables):
    return FakeSupabase(sample_tables)


@pytest.fixture
def client(fake_db):
    """API client wired to the in-memory database and a fixed season."""
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_current_season] = lambda: CURRENT_SEASON
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = jwt.encode(
        {"sub": "admin-user"}, settings.JWT_SECRET or "unverified", algorithm="HS256"
    )
    return {"Authorization": f"Bearer {token}"}
