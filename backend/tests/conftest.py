"""
Shared test fixtures
====================
``FakeSupabase`` is a small in-memory stand-in for the Supabase client.
It supports exactly the chained query patterns SupabaseGateway uses:

  - .table(t).select(...).eq(...)[.eq(...)][.gte(...)][.order(...)][.limit(...)].execute()
  - .table(t).insert(row).execute()
  - .table(t).update(values).eq(...).execute()
  - .table(t).delete().eq(...).execute()
  - .auth.sign_up / sign_in_with_password / get_user

The same fake serves as the shared table client and as every short-lived
auth client, so tokens it issues are visible to get_user.
Set ``fail_tables`` to make every execute() on those tables raise.
"""

from __future__ import annotations

import uuid
from types import SimpleNamespace
from typing import Any, Callable, Optional
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


class _Result:
    def __init__(self, data: Any) -> None:
        self.data = data


class _Query:
    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Optional[dict] = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def select(self, *columns: str, **kwargs: Any) -> "_Query":
        self._op = "select"
        return self

    def insert(self, payload: dict) -> "_Query":
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict) -> "_Query":
        self._op = "update"
        self._payload = payload
        return self

    def delete(self) -> "_Query":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "_Query":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value: Any) -> "_Query":
        self._filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def order(self, column: str, desc: bool = False) -> "_Query":
        self._order = (column, desc)
        return self

    def limit(self, n: int) -> "_Query":
        self._limit = n
        return self

    def execute(self) -> _Result:
        self._db.executed.append((self._table, self._op))
        if self._table in self._db.fail_tables:
            raise RuntimeError("connection reset by peer")

        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            row = {"id": str(uuid.uuid4()), **self._payload}
            rows.append(row)
            return _Result([dict(row)])

        matched = [r for r in rows if all(f(r) for f in self._filters)]

        if self._op == "update":
            for r in matched:
                r.update(self._payload)
            return _Result([dict(r) for r in matched])

        if self._op == "delete":
            self._db.tables[self._table] = [r for r in rows if r not in matched]
            return _Result([dict(r) for r in matched])

        if self._order is not None:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r[column], reverse=desc)
        if self._limit is not None:
            matched = matched[: self._limit]

        return _Result([dict(r) for r in matched])


class _FakeAuth:
    def __init__(self) -> None:
        self.accounts: dict[str, dict] = {}  # email -> {id, password}
        self.tokens: dict[str, str] = {}     # token -> user id
        self.require_confirmation = False

    def _session_for(self, user_id: str) -> Optional[SimpleNamespace]:
        token = f"token-{uuid.uuid4()}"
        self.tokens[token] = user_id
        return SimpleNamespace(access_token=token)

    def sign_up(self, credentials: dict) -> SimpleNamespace:
        email = credentials["email"]
        if email in self.accounts:
            raise Exception("User already registered")
        user_id = str(uuid.uuid4())
        self.accounts[email] = {"id": user_id, "password": credentials["password"]}
        session = None if self.require_confirmation else self._session_for(user_id)
        return SimpleNamespace(user=SimpleNamespace(id=user_id), session=session)

    def sign_in_with_password(self, credentials: dict) -> SimpleNamespace:
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        return SimpleNamespace(
            user=SimpleNamespace(id=account["id"]),
            session=self._session_for(account["id"]),
        )

    def get_user(self, token: str) -> SimpleNamespace:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=SimpleNamespace(id=user_id))


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, list[dict]] = {}
        self.fail_tables: set[str] = set()
        self.executed: list[tuple[str, str]] = []
        self.auth = _FakeAuth()

    def table(self, name: str) -> _Query:
        return _Query(self, name)

    def add_user(
        self,
        name: str = "Amani",
        email: str = "amani@example.com",
        password: str = "s3cret-pass",
    ) -> tuple[str, str]:
        """Register an account + profile directly. Returns (user_id, token)."""
        response = self.auth.sign_up({"email": email, "password": password})
        user_id = response.user.id
        self.tables.setdefault("users", []).append({
            "id": user_id,
            "name": name,
            "email": email,
            "created_at": "2026-01-01T00:00:00+00:00",
            "last_active": "2026-01-01T00:00:00+00:00",
        })
        return user_id, response.session.access_token

    def add_message(
        self,
        user_id: str,
        text: str,
        timestamp: str,
        sender: str = "user",
        mood: Optional[str] = None,
    ) -> None:
        self.tables.setdefault("messages", []).append({
            "id": str(uuid.uuid4()),
            "user_id": user_id,
            "text": text,
            "sender": sender,
            "mood": {"label": mood, "emoji": "", "color": ""} if mood else None,
            "timestamp": timestamp,
        })


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def client(fake_db: FakeSupabase):
    """TestClient wired to ``fake_db`` with a fresh zero-delay reply scheduler."""
    from app.services.conversation import ReplyScheduler

    with (
        patch("app.services.gateway.get_supabase_client", return_value=fake_db),
        patch("app.services.gateway.create_auth_client", return_value=fake_db),
        patch("app.services.conversation._default_scheduler", ReplyScheduler(0.0)),
    ):
        from app.main import app
        yield TestClient(app)


@pytest.fixture
def auth_user(fake_db: FakeSupabase) -> tuple[str, dict]:
    """A registered user. Returns (user_id, Authorization header)."""
    user_id, token = fake_db.add_user()
    return user_id, {"Authorization": f"Bearer {token}"}
