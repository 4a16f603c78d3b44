from datetime import date
from decimal import Decimal
from typing import Optional

from database.backend import Backend
from models.transaction import Transaction
from utils.constants import RECURRING_INTERVALS, TRANSACTION_TYPES
from utils.currency import to_money
from utils.date_helpers import format_date, parse_date
from utils.errors import PersistenceError


def _to_db(fields: dict) -> dict:
    """Model values to column values: dates as YYYY-MM-DD, money as text, bools as 0/1."""
    out = {}
    for key, value in fields.items():
        if isinstance(value, bool):
            value = 1 if value else 0
        elif isinstance(value, date):
            value = format_date(value)
        elif isinstance(value, Decimal):
            value = str(to_money(value))
        out[key] = value
    return out


class TransactionDAO:
    def __init__(self, backend: Backend):
        self._backend = backend

    def _row_to_model(self, row: dict) -> Transaction:
        """Validate a raw row; anything off is a PersistenceError, not a bad total later."""
        row_id = row.get("id")

        def bad(reason: str):
            return PersistenceError(f"Malformed transaction row id={row_id}: {reason}")

        if row.get("type") not in TRANSACTION_TYPES:
            raise bad(f"type {row.get('type')!r}")
        try:
            amount = to_money(row.get("amount"))
        except ValueError:
            raise bad(f"amount {row.get('amount')!r}") from None
        if amount <= 0:
            raise bad("amount must be positive")
        tx_date = parse_date(row.get("transaction_date") or "")
        if tx_date is None:
            raise bad(f"transaction_date {row.get('transaction_date')!r}")
        due_raw = row.get("due_date")
        due = parse_date(due_raw) if due_raw else None
        if due_raw and due is None:
            raise bad(f"due_date {due_raw!r}")
        interval = row.get("recurring_interval")
        if interval is not None and interval not in RECURRING_INTERVALS:
            raise bad(f"recurring_interval {interval!r}")

        is_installment = bool(row.get("is_installment"))
        number = row.get("installment_number")
        count = row.get("installment_count")
        if is_installment and not (
            isinstance(count, int) and isinstance(number, int) and count >= 2 and 1 <= number <= count
        ):
            raise bad(f"installment {number}/{count}")

        return Transaction(
            id=row_id,
            user_id=row["user_id"],
            type=row["type"],
            amount=amount,
            transaction_date=tx_date,
            description=row.get("description") or "",
            due_date=due,
            category_id=row.get("category_id"),
            is_paid=bool(row.get("is_paid")),
            is_fixed=bool(row.get("is_fixed")),
            is_recurring=bool(row.get("is_recurring")),
            recurring_interval=interval,
            is_installment=is_installment,
            installment_number=number if is_installment else None,
            installment_count=count if is_installment else None,
            parent_transaction_id=row.get("parent_transaction_id"),
            created_at=row.get("created_at") or "",
            updated_at=row.get("updated_at") or "",
        )

    def get_all(self, type_filter: str | None = None) -> list[Transaction]:
        """Newest first."""
        filters = {"type": type_filter} if type_filter else None
        rows = self._backend.query(
            "transactions", filters,
            ordering=[("transaction_date", False), ("id", False)],
        )
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        rows = self._backend.query("transactions", {"id": tx_id})
        return self._row_to_model(rows[0]) if rows else None

    def get_installment_group(self, parent_id: int) -> list[Transaction]:
        rows = self._backend.query(
            "transactions", {"parent_transaction_id": parent_id},
            ordering=[("installment_number", True)],
        )
        return [self._row_to_model(r) for r in rows]

    def create_batch(self, rows: list[dict]) -> list[Transaction]:
        """Insert rows atomically; rows after the first are linked to it as parent."""
        if not rows:
            return []
        with self._backend.atomic():
            first = self._backend.insert("transactions", [_to_db(rows[0])])[0]
            rest = [
                _to_db(dict(r, parent_transaction_id=first["id"])) for r in rows[1:]
            ]
            inserted = [first] + self._backend.insert("transactions", rest)
        return [self._row_to_model(r) for r in inserted]

    def update(self, tx_id: int, fields: dict) -> Transaction:
        return self._row_to_model(
            self._backend.update("transactions", tx_id, _to_db(fields))
        )

    def delete(self, tx_id: int):
        self._backend.delete("transactions", tx_id)
