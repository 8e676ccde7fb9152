"""Fake DB-API connection for catalog helper tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

Responder = Callable[[str, Any], tuple[Any, list[tuple[Any, ...]]]]


class FakeCursor:
    def __init__(self, conn: FakeConnection):
        self.conn = conn
        self.description: Any = None
        self._rows: list[tuple[Any, ...]] = []
        self.closed = False

    def execute(self, sql: str, params: Any = None) -> None:
        self.conn.executed.append((sql, params))
        self.description, self._rows = self.conn.respond(sql, params)

    def fetchone(self) -> tuple[Any, ...] | None:
        return self._rows[0] if self._rows else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        return list(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """Answers every statement through ``respond(sql, params) -> (description, rows)``."""

    def __init__(self, respond: Responder | None = None):
        self.respond = respond or (lambda sql, params: (None, []))
        self.executed: list[tuple[str, Any]] = []
        self.cursors: list[FakeCursor] = []
        self.closed = False

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_conn() -> type[FakeConnection]:
    return FakeConnection
