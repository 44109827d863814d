from datetime import timezone
import itertools

import pytest


class FakeStore:
    """In-memory stand-in for ``tuklas.store`` keyed by table name."""

    def __init__(self, tables=None):
        self.tables = {name: {r["id"]: dict(r) for r in rows} for name, rows in (tables or {}).items()}
        self._ids = itertools.count(1)
        self.calls = []

    @staticmethod
    def _match(row, filters):
        for field, op, value in filters or ():
            if op == "==" and row.get(field) != value:
                return False
            if op == "in" and row.get(field) not in value:
                return False
        return True

    def select(self, table, filters=None, order_by=None, descending=False, limit=None):
        rows = [dict(r) for r in self.tables.get(table, {}).values() if self._match(r, filters)]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows[:limit] if limit else rows

    def select_in(self, table, field, values, filters=None):
        return self.select(table, [(field, "in", list(values)), *(filters or ())])

    def get(self, table, row_id):
        row = self.tables.get(table, {}).get(row_id)
        return dict(row) if row is not None else None

    def insert(self, table, row, row_id=None):
        row_id = row_id or f"{table}-{next(self._ids)}"
        self.tables.setdefault(table, {})[row_id] = {**row, "id": row_id}
        self.calls.append(("insert", table, row_id))
        return row_id

    def update(self, table, row_id, patch):
        self.tables[table][row_id].update(patch)
        self.calls.append(("update", table, row_id, dict(patch)))

    def compare_and_update(self, table, row_id, field, expected, patch):
        row = self.tables.get(table, {}).get(row_id)
        if row is None:
            return None, False
        before = dict(row)
        if before.get(field) != expected:
            return before, False
        self.update(table, row_id, patch)
        return before, True

    def upsert(self, table, row_id, patch):
        self.tables.setdefault(table, {}).setdefault(row_id, {"id": row_id}).update(patch)
        self.calls.append(("upsert", table, row_id))

    def increment(self, table, row_id, field, delta):
        row = self.tables.setdefault(table, {}).setdefault(row_id, {"id": row_id})
        row[field] = row.get(field, 0) + delta
        self.calls.append(("increment", table, row_id, field, delta))

    def count(self, table, filters=None):
        return len(self.select(table, filters))


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def utc():
    return timezone.utc
