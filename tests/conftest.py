from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from core import db
from main import create_app


class InMemoryDatabase:
    """Stands in for core.db.Database by dispatching on each statement's verb.

    Argument order mirrors the SQL in users/repository.py.
    """

    def __init__(self) -> None:
        self.rows: dict[int, dict[str, Any]] = {}
        self.next_id = 1
        self.connected = False
        self.fail_with: Exception | None = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    def _now(self) -> datetime:
        self._clock += timedelta(milliseconds=1)
        return self._clock

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _email_taken(self, email: str, *, exclude_id: int | None = None) -> bool:
        return any(r["email"] == email and r["id"] != exclude_id for r in self.rows.values())

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self._maybe_fail()
        verb = sql.split()[0].upper()

        if verb == "INSERT":
            name, email = args
            if self._email_taken(email):
                raise db.UniqueViolation(
                    'duplicate key value violates unique constraint "users_email_key"',
                    constraint="users_email_key",
                )
            now = self._now()
            row = {"id": self.next_id, "name": name, "email": email, "created_at": now, "updated_at": now}
            self.rows[self.next_id] = row
            self.next_id += 1
            return dict(row)

        if verb == "SELECT":
            row = self.rows.get(args[0])
            return dict(row) if row is not None else None

        if verb == "UPDATE":
            user_id, name, email = args
            row = self.rows.get(user_id)
            if row is None:
                return None
            if email is not None and self._email_taken(email, exclude_id=user_id):
                raise db.UniqueViolation("duplicate key", constraint="users_email_key")
            if name is not None:
                row["name"] = name
            if email is not None:
                row["email"] = email
            row["updated_at"] = self._now()
            return dict(row)

        if verb == "DELETE":
            row = self.rows.pop(args[0], None)
            return {"id": row["id"]} if row is not None else None

        raise AssertionError(f"unexpected statement: {sql}")

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self._maybe_fail()
        return [dict(self.rows[k]) for k in sorted(self.rows)]


@pytest.fixture()
def database() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture()
def client(database: InMemoryDatabase) -> Iterator[TestClient]:
    app = create_app(database=database)
    with TestClient(app) as test_client:
        yield test_client
