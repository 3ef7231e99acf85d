"""
Row store contract shared by the in-memory and SQL implementations.

Tables and their unique keys come from ``dailyfive.core.database.metadata``
so both implementations enforce the same invariants.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Table, UniqueConstraint

from dailyfive.core.database import metadata
from dailyfive.core.errors import ValidationError

Row = Dict[str, object]
Filters = Dict[str, object]
Ranges = Dict[str, Tuple[object, object]]


def get_table(name: str) -> Table:
    try:
        return metadata.tables[name]
    except KeyError:
        raise ValidationError(f"Unknown table '{name}'")


def unique_keys(table: Table) -> List[Tuple[str, ...]]:
    """Primary key plus every UNIQUE constraint, as column-name tuples."""
    keys = [tuple(col.name for col in table.primary_key.columns)]
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint) and constraint is not table.primary_key:
            keys.append(tuple(constraint.columns.keys()))
    return keys


def parse_order(order_by: Optional[str]) -> Tuple[Optional[str], bool]:
    """Split ``"-col"`` into ``("col", True)`` (descending)."""
    if not order_by:
        return None, False
    if order_by.startswith("-"):
        return order_by[1:], True
    return order_by, False


class Store:
    """
    Persistence collaborator used by every domain service.

    Implementations:
    - MemoryStore: process-local, for tests and development.
    - SqlStore: SQLAlchemy Core over the configured database.
    """

    def query_one(self, table: str, filters: Filters) -> Optional[Row]:
        """Return the first row matching ``filters`` or None."""
        rows = self.query_many(table, filters)
        return rows[0] if rows else None

    def query_many(
        self,
        table: str,
        filters: Filters,
        order_by: Optional[str] = None,
        ranges: Optional[Ranges] = None,
    ) -> List[Row]:
        """Return rows matching equality ``filters`` and inclusive ``ranges``."""
        raise NotImplementedError

    def insert(self, table: str, row: Row) -> Row:
        """Insert ``row`` and return it with defaults applied.

        Raises DuplicateRowError when a unique key is already taken.
        """
        raise NotImplementedError

    def update(self, table: str, filters: Filters, patch: Row) -> int:
        """Apply ``patch`` to matching rows; return the number of rows changed."""
        raise NotImplementedError

    def increment(
        self,
        table: str,
        filters: Filters,
        column: str,
        delta: int,
        floor: int = 0,
    ) -> Optional[int]:
        """Atomically add ``delta`` to ``column`` on the matching row.

        Returns the new value, or None (row untouched) when the result would
        drop below ``floor``. Raises NotFoundError when no row matches.
        """
        raise NotImplementedError

    def delete(self, table: str, filters: Filters) -> int:
        raise NotImplementedError

    def insert_many(self, table: str, rows: Sequence[Row]) -> List[Row]:
        return [self.insert(table, row) for row in rows]
