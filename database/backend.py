"""User-scoped table access over SQLite.

Stands in for a hosted backend with row-level security: every statement is
filtered by the signed-in user's id, and only whitelisted tables/columns can
be touched. sqlite3 errors leave here as PersistenceError.
"""
import logging
import sqlite3
from contextlib import contextmanager
from typing import Callable, Iterable, Optional

from database.db_manager import DatabaseManager
from utils.errors import AuthenticationError, PersistenceError

logger = logging.getLogger(__name__)

TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    "categories": ("id", "user_id", "name", "type", "color", "created_at"),
    "transactions": (
        "id", "user_id", "type", "amount", "description", "transaction_date",
        "due_date", "category_id", "is_paid", "is_fixed", "is_recurring",
        "recurring_interval", "is_installment", "installment_number",
        "installment_count", "parent_transaction_id", "created_at", "updated_at",
    ),
    "profiles": ("user_id", "full_name", "theme", "currency", "updated_at"),
}

_KEY_COLUMN = {"profiles": "user_id"}
_TOUCH_COLUMN = {"transactions": "updated_at", "profiles": "updated_at"}

_OPS = {
    "eq": "=",
    "neq": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}


class Backend:
    def __init__(self, db: DatabaseManager, get_user_id: Callable[[], Optional[int]]):
        self._db = db
        self._get_user_id = get_user_id
        self._in_batch = False

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _columns(self, table: str) -> tuple[str, ...]:
        try:
            return TABLE_COLUMNS[table]
        except KeyError:
            raise PersistenceError(f"Unknown table: {table}") from None

    def _check_columns(self, table: str, names: Iterable[str]):
        allowed = self._columns(table)
        bad = [n for n in names if n not in allowed]
        if bad:
            raise PersistenceError(f"Unknown column(s) for {table}: {', '.join(bad)}")

    def _require_user(self) -> int:
        user_id = self._get_user_id()
        if user_id is None:
            raise AuthenticationError("User not authenticated")
        return user_id

    def _where(self, table: str, user_id: int, filters: dict | None) -> tuple[str, list]:
        clauses = ["user_id = ?"]
        params: list = [user_id]
        for column, cond in (filters or {}).items():
            self._check_columns(table, [column])
            op, value = cond if isinstance(cond, tuple) else ("eq", cond)
            if op == "is":
                if value is None:
                    clauses.append(f"{column} IS NULL")
                else:
                    clauses.append(f"{column} IS NOT NULL")
                continue
            if op not in _OPS:
                raise PersistenceError(f"Unsupported filter operator: {op}")
            clauses.append(f"{column} {_OPS[op]} ?")
            params.append(value)
        return " AND ".join(clauses), params

    def _fetch_by_key(self, conn, table: str, key) -> Optional[dict]:
        key_col = _KEY_COLUMN.get(table, "id")
        row = conn.execute(
            f"SELECT * FROM {table} WHERE {key_col} = ?", (key,)
        ).fetchone()
        return dict(row) if row else None

    @contextmanager
    def atomic(self):
        """Group several writes into one transaction; nested calls join the outer one."""
        conn = self._db.get_connection()
        if self._in_batch:
            yield conn
            return
        self._in_batch = True
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Write rolled back: %s", e)
            raise PersistenceError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            self._in_batch = False

    # ── Operations ───────────────────────────────────────────────────────────

    def query(
        self,
        table: str,
        filters: dict | None = None,
        ordering: list[tuple[str, bool]] | None = None,
    ) -> list[dict]:
        """Rows owned by the current user; [] when nobody is signed in.

        filters: {column: value} or {column: (op, value)}, op in eq/neq/gt/gte/lt/lte/is.
        ordering: [(column, ascending), ...].
        """
        self._columns(table)
        user_id = self._get_user_id()
        if user_id is None:
            return []
        where, params = self._where(table, user_id, filters)
        sql = f"SELECT * FROM {table} WHERE {where}"
        if ordering:
            self._check_columns(table, [c for c, _ in ordering])
            sql += " ORDER BY " + ", ".join(
                f"{c} {'ASC' if asc else 'DESC'}" for c, asc in ordering
            )
        try:
            rows = self._db.get_connection().execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error("Query on %s failed: %s", table, e)
            raise PersistenceError(str(e)) from e
        return [dict(r) for r in rows]

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        """Insert all rows or none of them."""
        user_id = self._require_user()
        if not rows:
            return []
        inserted = []
        with self.atomic() as conn:
            for row in rows:
                data = dict(row, user_id=user_id)
                self._check_columns(table, data.keys())
                cols = list(data.keys())
                cursor = conn.execute(
                    f"INSERT INTO {table} ({', '.join(cols)}) "
                    f"VALUES ({', '.join('?' * len(cols))})",
                    [data[c] for c in cols],
                )
                key = user_id if _KEY_COLUMN.get(table) == "user_id" else cursor.lastrowid
                inserted.append(self._fetch_by_key(conn, table, key))
        return inserted

    def update(self, table: str, row_id, fields: dict) -> dict:
        user_id = self._require_user()
        if not fields:
            raise PersistenceError(f"Nothing to update on {table} {row_id}")
        self._check_columns(table, fields.keys())
        if "user_id" in fields or "id" in fields:
            raise PersistenceError("Row ownership and ids cannot be changed")
        key_col = _KEY_COLUMN.get(table, "id")
        assignments = [f"{c} = ?" for c in fields]
        touch = _TOUCH_COLUMN.get(table)
        if touch and touch not in fields:
            assignments.append(f"{touch} = datetime('now')")
        with self.atomic() as conn:
            cursor = conn.execute(
                f"UPDATE {table} SET {', '.join(assignments)} "
                f"WHERE {key_col} = ? AND user_id = ?",
                [*fields.values(), row_id, user_id],
            )
            if cursor.rowcount == 0:
                raise PersistenceError(f"No {table} row with id {row_id}")
            return self._fetch_by_key(conn, table, row_id)

    def upsert(self, table: str, row: dict) -> dict:
        """Insert, or update the row sharing the table's key column."""
        user_id = self._require_user()
        key_col = _KEY_COLUMN.get(table, "id")
        key = user_id if key_col == "user_id" else row.get(key_col)
        with self.atomic() as conn:
            existing = self._fetch_by_key(conn, table, key) if key is not None else None
            if existing and existing["user_id"] == user_id:
                fields = {k: v for k, v in row.items() if k not in (key_col, "user_id")}
                return self.update(table, key, fields) if fields else existing
            return self.insert(table, [row])[0]

    def delete(self, table: str, row_id) -> None:
        user_id = self._require_user()
        self._columns(table)
        key_col = _KEY_COLUMN.get(table, "id")
        with self.atomic() as conn:
            cursor = conn.execute(
                f"DELETE FROM {table} WHERE {key_col} = ? AND user_id = ?",
                (row_id, user_id),
            )
            if cursor.rowcount == 0:
                raise PersistenceError(f"No {table} row with id {row_id}")
