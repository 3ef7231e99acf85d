"""
In-memory row store.

Applies the column defaults and unique keys declared on the SQLAlchemy
tables, so services behave the same as against the database.
"""

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import Table

from dailyfive.core.errors import DuplicateRowError, NotFoundError
from dailyfive.features.store.base import (
    Filters,
    Ranges,
    Row,
    Store,
    get_table,
    parse_order,
    unique_keys,
)


def _matches(row: Row, filters: Filters, ranges: Optional[Ranges]) -> bool:
    for column, value in filters.items():
        if row.get(column) != value:
            return False
    for column, (low, high) in (ranges or {}).items():
        value = row.get(column)
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
    return True


class MemoryStore(Store):
    """Process-local store guarded by a lock."""

    def __init__(self):
        self._rows: Dict[str, List[Row]] = {}
        self._sequences: Dict[str, int] = {}
        self._lock = threading.Lock()

    def query_many(self, table, filters, order_by=None, ranges=None):
        get_table(table)
        with self._lock:
            rows = [dict(row) for row in self._rows.get(table, []) if _matches(row, filters, ranges)]
        column, descending = parse_order(order_by)
        if column:
            rows.sort(key=lambda r: r.get(column), reverse=descending)
        return rows

    def insert(self, table, row):
        schema = get_table(table)
        with self._lock:
            record = self._with_defaults(schema, row)
            existing = self._rows.setdefault(table, [])
            for key in unique_keys(schema):
                candidate = {col: record.get(col) for col in key}
                if None in candidate.values():
                    continue
                if any(all(other.get(col) == val for col, val in candidate.items()) for other in existing):
                    raise DuplicateRowError(table, candidate)
            existing.append(record)
            return dict(record)

    def update(self, table, filters, patch):
        get_table(table)
        changed = 0
        with self._lock:
            for row in self._rows.get(table, []):
                if _matches(row, filters, None):
                    row.update(patch)
                    changed += 1
        return changed

    def increment(self, table, filters, column, delta, floor=0):
        get_table(table)
        with self._lock:
            for row in self._rows.get(table, []):
                if _matches(row, filters, None):
                    new_value = (row.get(column) or 0) + delta
                    if new_value < floor:
                        return None
                    row[column] = new_value
                    return new_value
        raise NotFoundError(f"No row in {table} matching {filters}")

    def delete(self, table, filters):
        get_table(table)
        with self._lock:
            rows = self._rows.get(table, [])
            kept = [row for row in rows if not _matches(row, filters, None)]
            self._rows[table] = kept
            return len(rows) - len(kept)

    def clear(self) -> None:
        """FOR TESTING ONLY."""
        with self._lock:
            self._rows.clear()
            self._sequences.clear()

    def _with_defaults(self, schema: Table, row: Row) -> Row:
        record = dict(row)
        for column in schema.columns:
            serial = column.primary_key and column.type.python_type is int
            if record.get(column.name) is not None:
                if serial:
                    self._sequences[schema.name] = max(self._sequences.get(schema.name, 0), record[column.name])
                continue
            if serial:
                next_id = self._sequences.get(schema.name, 0) + 1
                self._sequences[schema.name] = next_id
                record[column.name] = next_id
            elif column.default is not None and column.default.is_scalar:
                record[column.name] = column.default.arg
            elif column.server_default is not None:
                record[column.name] = datetime.now(timezone.utc)
            else:
                record.setdefault(column.name, None)
        return record
