"""
SQLAlchemy-backed row store.

Maintains identical interface to MemoryStore. Unique keys are enforced by
the database; IntegrityError on insert surfaces as DuplicateRowError and
any other driver failure as PersistenceError.
"""

from contextlib import contextmanager
from typing import Optional

from sqlalchemy import and_, case, delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from dailyfive.core.database import get_db_session
from dailyfive.core.errors import DuplicateRowError, NotFoundError, PersistenceError
from dailyfive.features.store.base import Store, get_table, parse_order, unique_keys


class SqlStore(Store):
    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _session(self):
        try:
            with get_db_session(self.engine) as session:
                yield session
        except SQLAlchemyError as e:
            raise PersistenceError(f"Database operation failed: {e.__class__.__name__}") from e

    @staticmethod
    def _where(schema, filters, ranges=None):
        clauses = [schema.c[column] == value for column, value in filters.items()]
        for column, (low, high) in (ranges or {}).items():
            if low is not None:
                clauses.append(schema.c[column] >= low)
            if high is not None:
                clauses.append(schema.c[column] <= high)
        return and_(*clauses) if clauses else None

    def query_many(self, table, filters, order_by=None, ranges=None):
        schema = get_table(table)
        query = select(schema)
        where = self._where(schema, filters, ranges)
        if where is not None:
            query = query.where(where)

        column, descending = parse_order(order_by)
        if column:
            query = query.order_by(schema.c[column].desc() if descending else schema.c[column])

        with self._session() as session:
            return [dict(row._mapping) for row in session.execute(query)]

    def insert(self, table, row):
        schema = get_table(table)
        try:
            with get_db_session(self.engine) as session:
                result = session.execute(insert(schema).values(**row))
                pk = dict(zip((col.name for col in schema.primary_key.columns), result.inserted_primary_key))
                created = session.execute(select(schema).where(self._where(schema, pk))).first()
                return dict(created._mapping)
        except IntegrityError as e:
            key = self._conflict_key(schema, row)
            if key is None:
                # NOT NULL, CHECK or foreign key violation, not a taken unique key
                raise PersistenceError(f"Integrity check failed on {table}: {e.orig}") from e
            raise DuplicateRowError(table, key) from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Database operation failed: {e.__class__.__name__}") from e

    def update(self, table, filters, patch):
        schema = get_table(table)
        stmt = update(schema).values(**patch)
        where = self._where(schema, filters)
        if where is not None:
            stmt = stmt.where(where)
        with self._session() as session:
            return session.execute(stmt).rowcount

    def increment(self, table, filters, column, delta, floor=0) -> Optional[int]:
        schema = get_table(table)
        target = schema.c[column]
        where = self._where(schema, filters)
        with self._session() as session:
            # Guard in the WHERE clause so the check and the write are one statement
            stmt = (
                update(schema)
                .where(where)
                .where(case((target.is_(None), 0), else_=target) + delta >= floor)
                .values({column: case((target.is_(None), 0), else_=target) + delta})
            )
            if session.execute(stmt).rowcount:
                return session.execute(select(target).where(where)).scalar_one()
            exists = session.execute(select(target).where(where)).first()
        if exists is None:
            raise NotFoundError(f"No row in {table} matching {filters}")
        return None

    def delete(self, table, filters):
        schema = get_table(table)
        stmt = delete(schema)
        where = self._where(schema, filters)
        if where is not None:
            stmt = stmt.where(where)
        with self._session() as session:
            return session.execute(stmt).rowcount

    def _conflict_key(self, schema, row):
        """The unique key ``row`` collides with, or None when no stored row holds it."""
        for key in unique_keys(schema):
            candidate = {col: row.get(col) for col in key}
            if None in candidate.values():
                continue
            with self._session() as session:
                if session.execute(select(schema).where(self._where(schema, candidate))).first():
                    return candidate
        return None
