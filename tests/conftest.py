"""Pytest configuration and fixtures"""
import asyncio
import os
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from bizhub.services.database import Database  # noqa: E402
from bizhub.services.models import Session  # noqa: E402

OWNER_ID = "owner-1"
CUSTOMER_ID = "customer-1"
STRANGER_ID = "stranger-1"

OWNER_HEADERS = {"Authorization": "Bearer token-owner"}
CUSTOMER_HEADERS = {"Authorization": "Bearer token-customer"}
STRANGER_HEADERS = {"Authorization": "Bearer token-stranger"}

_BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def api_error(message: str = "service unavailable", code: str = "500") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


# ==================== IN-MEMORY SUPABASE ====================

def _split_top_level(expr: str) -> list[str]:
    parts, depth, current = [], 0, ""
    for ch in expr:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += ch
    if current:
        parts.append(current)
    return parts


def _parse_or(expr: str):
    """Row predicate for the or=() subset the repositories use: col.eq.val and and(...)."""

    def term(text: str):
        if text.startswith("and(") and text.endswith(")"):
            inner = [term(t) for t in _split_top_level(text[4:-1])]
            return lambda row: all(p(row) for p in inner)
        column, op, value = text.split(".", 2)
        assert op == "eq", f"unsupported operator {op}"
        return lambda row: str(row.get(column)) == value

    predicates = [term(t) for t in _split_top_level(expr)]
    return lambda row: any(p(row) for p in predicates)


class FakeQuery:
    """Chainable stand-in for the postgrest request builder."""

    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.op = "select"
        self.payload = None
        self.columns = "*"
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, columns="*", **kwargs):
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        assert value in ("null", None)
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def or_(self, expr):
        self.filters.append(_parse_or(expr))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    async def execute(self):
        self.store.calls.append((self.table, self.op))
        failure = self.store.failures.get((self.table, self.op))
        if failure is not None:
            raise failure

        rows = self.store.tables.setdefault(self.table, [])

        if self.op == "select":
            # Snapshot first, then yield: concurrent callers see the same state
            data = [dict(r) for r in rows if self._matches(r)]
            if self.order_by:
                column, desc = self.order_by
                data.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
            if self.columns != "*":
                wanted = [c.strip() for c in self.columns.split(",")]
                data = [{c: r.get(c) for c in wanted} for r in data]
            if self.limit_n is not None:
                data = data[: self.limit_n]
            await asyncio.sleep(0)
            return SimpleNamespace(data=data, count=len(data))

        await asyncio.sleep(0)

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in payload:
                row = dict(item)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", self.store.next_timestamp())
                self.store.check_unique(self.table, row)
                rows.append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted, count=len(inserted))

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated, count=len(updated))

        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.store.tables[self.table] = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=removed, count=len(removed))

        raise AssertionError(f"unsupported op {self.op}")


class FakeBucket:
    def __init__(self, store: "FakeSupabase", bucket: str):
        self.store = store
        self.bucket = bucket

    async def upload(self, path, content, options=None):
        if self.store.fail_uploads:
            raise RuntimeError("storage unavailable")
        self.store.uploads[f"{self.bucket}/{path}"] = content
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://test.supabase.co/storage/v1/object/public/{self.bucket}/{path}"


class FakeAuth:
    def __init__(self, store: "FakeSupabase"):
        self.store = store

    async def get_user(self, jwt=None):
        if jwt not in self.store.tokens:
            raise RuntimeError("invalid JWT")
        user_id, email = self.store.tokens[jwt]
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))

    async def sign_in_with_password(self, credentials):
        account = self.store.passwords.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise RuntimeError("Invalid login credentials")
        _, user_id, token = account
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=credentials["email"]),
            session=SimpleNamespace(access_token=token),
        )

    async def sign_out(self):
        return None


class FakeSupabase:
    """In-memory Supabase client covering what the repositories call."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.uploads: dict[str, bytes] = {}
        self.fail_uploads = False
        self.unique_conversations = False
        self.tokens: dict[str, tuple[str, str]] = {}
        self.passwords: dict[str, tuple[str, str, str]] = {}
        self._clock = 0
        self.storage = SimpleNamespace(from_=lambda bucket: FakeBucket(self, bucket))
        self.auth = FakeAuth(self)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_timestamp(self) -> str:
        self._clock += 1
        return (_BASE_TIME + timedelta(seconds=self._clock)).isoformat()

    def check_unique(self, table: str, row: dict) -> None:
        if table != "conversations" or not self.unique_conversations:
            return
        key = (frozenset((row["participant1_id"], row["participant2_id"])), row.get("business_id"))
        for existing in self.tables.get("conversations", []):
            other = (
                frozenset((existing["participant1_id"], existing["participant2_id"])),
                existing.get("business_id"),
            )
            if other == key:
                raise api_error("duplicate key value violates unique constraint", code="23505")

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def mutations(self, table: str) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] == table and c[1] != "select"]


# ==================== FIXTURES ====================

@pytest.fixture
def sample_businesses():
    return [
        {
            "id": "biz-1",
            "name": "Spice Route Kitchen",
            "description": "Home-style curries and fresh naan baked every morning. " * 3,
            "phone": "+91 98765 43210",
            "images": ["https://cdn.example.com/spice.jpg"],
            "owner_id": OWNER_ID,
            "status": "approved",
            "category_id": "cat-food",
        },
        {
            "id": "biz-2",
            "name": "Pending Plumbing",
            "description": None,
            "phone": None,
            "images": None,
            "owner_id": OWNER_ID,
            "status": "pending",
            "category_id": "cat-services",
        },
        {
            "id": "biz-3",
            "name": "Fix-It Services",
            "description": "Repairs",
            "phone": None,
            "images": [],
            "owner_id": STRANGER_ID,
            "status": "approved",
            "category_id": "cat-services",
        },
    ]


@pytest.fixture
def sample_categories():
    return [
        {"id": "cat-food", "name": "Food", "description": "Eat local", "icon": "🍛", "order": 2},
        {"id": "cat-services", "name": "Services", "description": None, "icon": None, "order": 1},
    ]


@pytest.fixture
def sample_product():
    return {
        "id": "prod-1",
        "business_id": "biz-1",
        "name": "Butter Chicken",
        "description": "Creamy tomato gravy",
        "price": 300.0,
        "images": [],
        "is_active": True,
        "created_at": "2025-01-01T00:00:00+00:00",
        "updated_at": "2025-01-01T00:00:00+00:00",
    }


@pytest.fixture
def fake_supabase(sample_businesses, sample_categories, sample_product):
    client = FakeSupabase()
    client.tables = {
        "users": [
            {"id": OWNER_ID, "name": "Olivia", "email": "owner@example.com"},
            {"id": CUSTOMER_ID, "name": "Carl", "email": "customer@example.com"},
            {"id": STRANGER_ID, "name": None, "email": "stranger@example.com"},
        ],
        "categories": [dict(c) for c in sample_categories],
        "businesses": [dict(b) for b in sample_businesses],
        "products": [dict(sample_product)],
        "conversations": [],
        "messages": [],
    }
    client.tokens = {
        "token-owner": (OWNER_ID, "owner@example.com"),
        "token-customer": (CUSTOMER_ID, "customer@example.com"),
        "token-stranger": (STRANGER_ID, "stranger@example.com"),
    }
    client.passwords = {"customer@example.com": ("hunter22", CUSTOMER_ID, "token-customer")}
    return client


@pytest.fixture
def database(fake_supabase):
    """Database wired to the in-memory client."""
    return Database(fake_supabase)


@pytest.fixture
def installed_database(monkeypatch, database):
    """Make get_database_async() return the test database."""
    import bizhub.services.database as database_module

    monkeypatch.setattr(database_module, "_db", database)
    return database


@pytest.fixture
def client(installed_database):
    """Test client (lifespan not run; the database is already installed)."""
    from fastapi.testclient import TestClient

    from api.index import app

    return TestClient(app)


@pytest.fixture
def owner_session():
    return Session(user_id=OWNER_ID, email="owner@example.com", access_token="token-owner")


@pytest.fixture
def customer_session():
    return Session(user_id=CUSTOMER_ID, email="customer@example.com", access_token="token-customer")


@pytest.fixture
def stranger_session():
    return Session(user_id=STRANGER_ID, email="stranger@example.com", access_token="token-stranger")
