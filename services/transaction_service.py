from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from database.category_dao import CategoryDAO
from database.transaction_dao import TransactionDAO
from models.transaction import Transaction, TransactionDraft
from services import installments
from services.query_cache import QueryCache
from utils.constants import RECURRING_INTERVALS, TRANSACTION_TYPES
from utils.currency import to_money
from utils.date_helpers import today as current_date
from utils.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

# Installment metadata is fixed at creation.
MUTABLE_FIELDS = (
    "amount", "description", "transaction_date", "due_date", "type",
    "category_id", "is_paid", "is_fixed", "is_recurring", "recurring_interval",
)


class TransactionService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        category_dao: CategoryDAO,
        cache: QueryCache,
        get_user_id,
    ):
        self._dao = tx_dao
        self._category_dao = category_dao
        self._cache = cache
        self._get_user_id = get_user_id

    # ── Reads ────────────────────────────────────────────────────────────────

    def list(self, type_: str | None = None) -> list[Transaction]:
        """Newest first, with .category filled in. [] when nobody is signed in."""
        user_id = self._get_user_id()
        if user_id is None:
            return []
        cached = self._cache.get(user_id, "transactions", type_)
        if cached is not None:
            return list(cached)
        transactions = self._dao.get_all(type_)
        categories = {c.id: c for c in self._category_dao.get_all()}
        for tx in transactions:
            tx.category = categories.get(tx.category_id)
        self._cache.put(user_id, "transactions", type_, transactions)
        return list(transactions)

    def get(self, tx_id: int) -> Optional[Transaction]:
        tx = self._dao.get_by_id(tx_id)
        if tx and tx.category_id is not None:
            tx.category = self._category_dao.get_by_id(tx.category_id)
        return tx

    def get_installment_group(self, tx: Transaction) -> list[Transaction]:
        """All rows created together with tx, first installment first."""
        parent_id = tx.parent_transaction_id or tx.id
        parent = self._dao.get_by_id(parent_id)
        rest = self._dao.get_installment_group(parent_id)
        return ([parent] if parent else []) + rest

    # ── Writes ───────────────────────────────────────────────────────────────

    def create(self, draft: TransactionDraft) -> list[Transaction]:
        """Insert one row, or one row per installment in a single batch."""
        self._require_user()
        draft = self._validate_draft(draft)
        rows = installments.expand(draft)
        created = self._dao.create_batch(rows)
        self._invalidate()
        logger.info(
            "Created %d %s transaction(s), first id %s",
            len(created), draft.type, created[0].id,
        )
        return created

    def update(self, tx_id: int, **fields) -> Transaction:
        """Partial update of any MUTABLE_FIELDS subset."""
        self._require_user()
        unknown = sorted(set(fields) - set(MUTABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(unknown)}")
        if not fields:
            raise ValidationError("Nothing to update.")
        clean = self._validate_fields(fields)
        if clean.get("is_recurring") is False:
            clean["recurring_interval"] = None
        needs_current = (
            "category_id" in clean
            or "type" in clean
            or clean.get("recurring_interval") is not None
        )
        current = self._dao.get_by_id(tx_id) if needs_current else None
        if current is not None:
            if "category_id" in clean or "type" in clean:
                self._check_category(
                    clean.get("category_id", current.category_id),
                    clean.get("type", current.type),
                )
            if not clean.get("is_recurring", current.is_recurring):
                clean["recurring_interval"] = None
        tx = self._dao.update(tx_id, clean)
        self._invalidate()
        logger.info("Updated transaction %s (%s)", tx_id, ", ".join(sorted(clean)))
        return tx

    def delete(self, tx_id: int):
        """Deletes only this row; installment siblings are left alone."""
        self._require_user()
        self._dao.delete(tx_id)
        self._invalidate()
        logger.info("Deleted transaction %s", tx_id)

    def set_paid(self, tx_id: int, is_paid: bool) -> Transaction:
        return self.update(tx_id, is_paid=is_paid)

    def mark_paid(self, tx_id: int, today: date | None = None) -> Transaction:
        """Settle a bill: paid, dated today, nothing else touched."""
        return self.update(
            tx_id, is_paid=True, transaction_date=today or current_date()
        )

    # ── Validation ───────────────────────────────────────────────────────────

    def _require_user(self) -> int:
        user_id = self._get_user_id()
        if user_id is None:
            raise AuthenticationError("User not authenticated")
        return user_id

    def _validate_draft(self, draft: TransactionDraft) -> TransactionDraft:
        clean = self._validate_fields({
            "type": draft.type,
            "amount": draft.amount,
            "transaction_date": draft.transaction_date,
            "description": draft.description,
            "due_date": draft.due_date,
            "category_id": draft.category_id,
            "is_paid": draft.is_paid,
            "is_fixed": draft.is_fixed,
            "is_recurring": draft.is_recurring,
            "recurring_interval": draft.recurring_interval,
        })
        if not clean["is_recurring"]:
            clean["recurring_interval"] = None
        self._check_category(clean["category_id"], clean["type"])
        return replace(draft, **clean)

    def _validate_fields(self, fields: dict) -> dict:
        clean = {}
        for key, value in fields.items():
            if key == "type":
                if value not in TRANSACTION_TYPES:
                    raise ValidationError(f"Invalid type: {value}")
            elif key == "amount":
                try:
                    value = to_money(value)
                except ValueError:
                    raise ValidationError("Amount must be a number.") from None
                if value <= 0:
                    raise ValidationError("Amount must be positive.")
            elif key == "transaction_date":
                if not isinstance(value, date):
                    raise ValidationError("Invalid date.")
            elif key == "due_date":
                if value is not None and not isinstance(value, date):
                    raise ValidationError("Invalid due date.")
            elif key == "description":
                value = (value or "").strip()
            elif key == "category_id":
                if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                    raise ValidationError("Invalid category.")
            elif key == "recurring_interval":
                if value is not None and value not in RECURRING_INTERVALS:
                    raise ValidationError(f"Invalid recurring interval: {value}")
            elif not isinstance(value, bool):
                raise ValidationError(f"{key} must be true or false.")
            clean[key] = value
        return clean

    def _check_category(self, category_id: int | None, type_: str):
        if category_id is None:
            return
        category = self._category_dao.get_by_id(category_id)
        if category is None:
            raise ValidationError("Category not found.")
        if category.type != type_:
            raise ValidationError(
                f"Category '{category.name}' is for {category.type}, not {type_}."
            )

    def _invalidate(self):
        self._cache.invalidate(self._get_user_id(), "transactions")
