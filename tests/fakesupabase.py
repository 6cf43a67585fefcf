# tests/fakesupabase.py
"""In-memory stand-in for the async Supabase client used by repositories."""

from __future__ import annotations

import copy
import uuid
from datetime import datetime, timedelta, timezone

from postgrest.exceptions import APIError


_EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeResult:
    def __init__(self, data):
        self.data = data
        self.count = len(data)


class FakeQuery:
    def __init__(self, db: "FakeSupabase", name: str):
        self._db = db
        self._name = name
        self._op = "select"
        self._payload = None
        self._on_conflict = ""
        self._filters = []
        self._order = None
        self._limit = None

    # builders
    def select(self, *args, **kwargs):
        return self

    def insert(self, payload):
        self._op, self._payload = "insert", payload
        return self

    def upsert(self, payload, on_conflict: str = ""):
        self._op, self._payload, self._on_conflict = "upsert", payload, on_conflict
        return self

    def update(self, fields):
        self._op, self._payload = "update", fields
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, field, value):
        self._filters.append(lambda r: r.get(field) == value)
        return self

    def in_(self, field, values):
        values_set = set(values or [])
        self._filters.append(lambda r: r.get(field) in values_set)
        return self

    def order(self, field, desc: bool = False):
        self._order = (field, desc)
        return self

    def limit(self, n):
        self._limit = n
        return self

    # execution
    def _matches(self, rows):
        return [row for row in rows if all(f(row) for f in self._filters)]

    async def execute(self):
        if self._name in self._db.failing_tables:
            raise APIError({"message": f"{self._name} unavailable", "code": "500"})
        rows = self._db.tables.setdefault(self._name, [])
        if self._op != "select":
            self._db.writes.append((self._op, self._name))

        if self._op == "select":
            found = self._matches(rows)
            if self._order:
                field, desc = self._order
                found = sorted(found, key=lambda r: str(r.get(field) or ""), reverse=desc)
            if self._limit is not None:
                found = found[: self._limit]
            return FakeResult(copy.deepcopy(found))

        if self._op == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            created = [self._db.new_row(self._name, dict(item)) for item in items]
            return FakeResult(copy.deepcopy(created))

        if self._op == "upsert":
            keys = [k.strip() for k in self._on_conflict.split(",") if k.strip()]
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            out = []
            for item in items:
                existing = next(
                    (r for r in rows if keys and all(r.get(k) == item.get(k) for k in keys)),
                    None,
                )
                if existing is not None:
                    existing.update(item)
                    out.append(existing)
                else:
                    out.append(self._db.new_row(self._name, dict(item)))
            return FakeResult(copy.deepcopy(out))

        if self._op == "update":
            found = self._matches(rows)
            for row in found:
                row.update(self._payload)
            return FakeResult(copy.deepcopy(found))

        if self._op == "delete":
            found = self._matches(rows)
            self._db.tables[self._name] = [r for r in rows if r not in found]
            return FakeResult(copy.deepcopy(found))

        raise AssertionError(f"unsupported op {self._op}")


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.failing_tables = set()
        self.writes = []
        self._seq = 0

    def table(self, name: str):
        return FakeQuery(self, name)

    def new_row(self, name, row):
        self._seq += 1
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", (_EPOCH + timedelta(seconds=self._seq)).isoformat())
        self.tables.setdefault(name, []).append(row)
        return row

    def rows(self, name, **where):
        return [r for r in self.tables.get(name, []) if all(r.get(k) == v for k, v in where.items())]
