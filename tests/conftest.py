"""
Shared fixtures: an in-memory stand-in for the PostgreSQL record store, an
API client wired to it, and signed-in member / admin users.
"""

import uuid
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from wellness.auth.auth_routes import create_jwt
from wellness.db.record_store import get_database
from wellness.db.seed import seed_reference_data
from wellness.main import app

# column defaults the real tables fill in on insert
TABLE_DEFAULTS = {
    "users": {"full_name": "", "is_admin": False, "medical_conditions": [], "allergies": [],
              "age": None, "gender": None, "height": None, "weight": None},
    "follow_ups": {"completed": False, "completed_at": None, "follow_up_type": "reminder",
                   "description": None, "notes": None, "created_by": None},
}
TIMESTAMP_COLUMNS = {
    "users": ("created_at", "updated_at"),
    "prakriti_assessments": ("assessed_at",),
    "follow_ups": ("created_at",),
    "progress_tracking": ("created_at",),
}


class InMemoryRecordStore:
    def __init__(self, db, table):
        self.db = db
        self.table = table

    @property
    def rows(self):
        return self.db.tables.setdefault(self.table, [])

    def _matches(self, row, filters):
        return all(row.get(k) == v for k, v in (filters or {}).items())

    def find_all(self, filters=None, order_by=None, descending=False, limit=None):
        self.db.check_failure()
        rows = [dict(r) for r in self.rows if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: r[order_by], reverse=descending)
        return rows[:limit] if limit is not None else rows

    def find_one(self, filters=None, order_by=None, descending=False):
        rows = self.find_all(filters, order_by=order_by, descending=descending, limit=1)
        return rows[0] if rows else None

    def _build(self, record):
        self.db.check_insert()
        row = {"id": str(uuid.uuid4()), **TABLE_DEFAULTS.get(self.table, {}), **record}
        for column in TIMESTAMP_COLUMNS.get(self.table, ()):
            row.setdefault(column, self.db.tick())
        return row

    def insert(self, record):
        row = self._build(record)
        self.db.inserts.append((self.table, dict(record)))
        self.rows.append(row)
        return dict(row)

    def insert_many(self, records):
        # build every row first so a failure part-way stores nothing
        built = [self._build(record) for record in records]
        self.db.inserts.extend((self.table, dict(record)) for record in records)
        self.rows.extend(built)
        return [dict(row) for row in built]

    def update(self, record_id, fields):
        self.db.check_failure()
        for row in self.rows:
            if row["id"] == record_id:
                row.update(fields)
                return True
        return False

    def delete(self, record_id):
        self.db.check_failure()
        before = len(self.rows)
        self.db.tables[self.table] = [r for r in self.rows if r["id"] != record_id]
        return len(self.rows) < before


class InMemoryDatabase:
    """Same interface as wellness.db.record_store.Database."""

    def __init__(self):
        self.tables = {}
        self.inserts = []
        self.fail_with = None
        # writes only: raise fail_inserts_with from the Nth row written onwards
        self.fail_inserts_with = None
        self.fail_inserts_from = 1
        self.rows_written = 0
        self._clock = datetime(2026, 1, 1, 8, 0, 0)

    def table(self, name):
        return InMemoryRecordStore(self, name)

    def tick(self):
        # strictly increasing timestamps so "newest" is unambiguous
        self._clock += timedelta(seconds=1)
        return self._clock

    def check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    def check_insert(self):
        self.check_failure()
        self.rows_written += 1
        if self.fail_inserts_with is not None and self.rows_written >= self.fail_inserts_from:
            raise self.fail_inserts_with

    def inserts_into(self, table):
        return [record for name, record in self.inserts if name == table]


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def seeded_db(db):
    seed_reference_data(db)
    db.inserts.clear()
    return db


@pytest.fixture
def client(seeded_db):
    app.dependency_overrides[get_database] = lambda: seeded_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(db, email, full_name, is_admin=False):
    return db.table("users").insert({
        "email": email,
        "hashed_password": "not-used",
        "full_name": full_name,
        "is_admin": is_admin,
    })


def _headers(user):
    return {"Authorization": f"Bearer {create_jwt(str(user['id']), user['email'])}"}


@pytest.fixture
def member(seeded_db):
    return _make_user(seeded_db, "asha@example.com", "Asha Rao")


@pytest.fixture
def admin(seeded_db):
    return _make_user(seeded_db, "admin@example.com", "Clinic Admin", is_admin=True)


@pytest.fixture
def member_headers(member):
    return _headers(member)


@pytest.fixture
def admin_headers(admin):
    return _headers(admin)


@pytest.fixture
def question_ids(seeded_db):
    rows = seeded_db.table("prakriti_questions").find_all(order_by="display_order")
    return [r["id"] for r in rows]
