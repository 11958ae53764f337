"""
record_store.py
===============
Generic per-table record store over PostgreSQL.

Every feature talks to its tables through the same five calls:

  find_all(filters, order_by, descending, limit)  → [row, ...]
  find_one(filters, order_by, descending)         → row | None
  insert(record)                                  → created row (id + timestamps)
  insert_many(records)                            → created rows, all or none
  update(record_id, fields)                       → True if a row changed
  delete(record_id)                               → True if a row was removed

Filters are plain equality predicates: {"user_id": "...", "completed": False}.
Table and column names go through psycopg2.sql.Identifier, values are always
bound parameters. dict values are stored as JSONB.

Routes receive a Database through FastAPI's Depends(get_database), so tests can
swap in an in-memory store with app.dependency_overrides.
"""

from typing import Any, Optional

import psycopg2
from psycopg2 import sql
from psycopg2.extras import RealDictCursor, Json, execute_values

from wellness.db.connection import StoreError, get_conn


def _adapt(value: Any) -> Any:
    # lists map to Postgres arrays natively; dicts need an explicit JSONB wrapper
    if isinstance(value, dict):
        return Json(value)
    return value


class RecordStore:
    """Filtered read / insert / update / delete for a single table."""

    def __init__(self, table: str, conn_factory=get_conn):
        self.table = table
        self._conn_factory = conn_factory

    # ─────────────────────────────
    # Query building
    # ─────────────────────────────

    def _where(self, filters: Optional[dict]):
        if not filters:
            return sql.SQL(""), []
        clauses = []
        params = []
        for column, value in filters.items():
            if value is None:
                clauses.append(sql.SQL("{} IS NULL").format(sql.Identifier(column)))
            else:
                clauses.append(sql.SQL("{} = %s").format(sql.Identifier(column)))
                params.append(_adapt(value))
        return sql.SQL(" WHERE ") + sql.SQL(" AND ").join(clauses), params

    def _select(self, filters, order_by, descending, limit):
        where, params = self._where(filters)
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(self.table)) + where
        if order_by:
            direction = sql.SQL(" DESC") if descending else sql.SQL(" ASC")
            query += sql.SQL(" ORDER BY {}").format(sql.Identifier(order_by)) + direction
        if limit is not None:
            query += sql.SQL(" LIMIT %s")
            params.append(int(limit))
        return query, params

    # ─────────────────────────────
    # Read
    # ─────────────────────────────

    def find_all(self, filters: Optional[dict] = None, order_by: Optional[str] = None,
                 descending: bool = False, limit: Optional[int] = None) -> list:
        """Return every row matching `filters`, ordered by `order_by`."""
        query, params = self._select(filters, order_by, descending, limit)
        conn = self._conn_factory()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
            return [dict(row) for row in rows]
        except psycopg2.Error as e:
            raise StoreError(f"Failed to read {self.table}: {str(e)}") from e
        finally:
            conn.close()

    def find_one(self, filters: Optional[dict] = None, order_by: Optional[str] = None,
                 descending: bool = False) -> Optional[dict]:
        """Return the first matching row, or None."""
        rows = self.find_all(filters, order_by=order_by, descending=descending, limit=1)
        return rows[0] if rows else None

    # ─────────────────────────────
    # Write
    # ─────────────────────────────

    def insert(self, record: dict) -> dict:
        """
        Insert one row and return it as stored.
        id and timestamp columns are filled in by table defaults.
        """
        columns = list(record.keys())
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            sql.Identifier(self.table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )
        conn = self._conn_factory()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, [_adapt(record[c]) for c in columns])
                row = cur.fetchone()
            conn.commit()
            return dict(row)
        except psycopg2.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to insert into {self.table}: {str(e)}") from e
        finally:
            conn.close()

    def insert_many(self, records: list) -> list:
        """
        Insert several rows in a single transaction.
        Either every row is stored or, on any failure, none is.
        Columns are taken from the first record; missing keys insert NULL.
        """
        if not records:
            return []
        columns = list(records[0].keys())
        query = sql.SQL("INSERT INTO {} ({}) VALUES %s RETURNING *").format(
            sql.Identifier(self.table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
        )
        values = [[_adapt(record.get(c)) for c in columns] for record in records]
        conn = self._conn_factory()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                rows = execute_values(cur, query, values, fetch=True)
            conn.commit()
            return [dict(row) for row in rows]
        except psycopg2.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to insert into {self.table}: {str(e)}") from e
        finally:
            conn.close()

    def update(self, record_id: str, fields: dict) -> bool:
        """Apply a partial update to the row with this id."""
        if not fields:
            return False
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(c)) for c in fields
        )
        query = sql.SQL("UPDATE {} SET {} WHERE id = %s").format(
            sql.Identifier(self.table), assignments
        )
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute(query, [_adapt(v) for v in fields.values()] + [record_id])
                changed = cur.rowcount
            conn.commit()
            return changed > 0
        except psycopg2.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to update {self.table}: {str(e)}") from e
        finally:
            conn.close()

    def delete(self, record_id: str) -> bool:
        """Remove the row with this id."""
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(sql.Identifier(self.table))
        conn = self._conn_factory()
        try:
            with conn.cursor() as cur:
                cur.execute(query, (record_id,))
                removed = cur.rowcount
            conn.commit()
            return removed > 0
        except psycopg2.Error as e:
            conn.rollback()
            raise StoreError(f"Failed to delete from {self.table}: {str(e)}") from e
        finally:
            conn.close()


class Database:
    """Hands out a RecordStore per table, all sharing one connection factory."""

    def __init__(self, conn_factory=get_conn):
        self._conn_factory = conn_factory

    def table(self, name: str) -> RecordStore:
        return RecordStore(name, conn_factory=self._conn_factory)


_database = Database()


def get_database() -> Database:
    """FastAPI dependency: the process-wide Database."""
    return _database
