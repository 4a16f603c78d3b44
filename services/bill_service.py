"""Overdue / upcoming / paid classification of bills.

Comparisons are by calendar date: a bill due today is upcoming, one due
yesterday is overdue. Only unpaid rows with a due date take part in the
overdue/upcoming split, and no row lands in both.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from models.transaction import Transaction
from utils.constants import UPCOMING_BILL_DAYS
from utils.currency import money_sum
from utils.date_helpers import days_until
from utils.errors import ValidationError


@dataclass
class UpcomingBill:
    transaction: Transaction
    days_until_due: int

    @property
    def due_label(self) -> str:
        if self.days_until_due == 0:
            return "today"
        if self.days_until_due == 1:
            return "tomorrow"
        return f"in {self.days_until_due} days"


@dataclass
class BillOverview:
    overdue: list[Transaction] = field(default_factory=list)
    upcoming: list[UpcomingBill] = field(default_factory=list)
    paid: list[Transaction] = field(default_factory=list)

    @property
    def overdue_amount(self) -> Decimal:
        return money_sum(t.amount for t in self.overdue)

    @property
    def upcoming_amount(self) -> Decimal:
        return money_sum(b.transaction.amount for b in self.upcoming)

    @property
    def paid_amount(self) -> Decimal:
        return money_sum(t.amount for t in self.paid)


def _by_due(tx: Transaction):
    return tx.due_date, tx.id


def overdue_bills(transactions: Iterable[Transaction], today: date) -> list[Transaction]:
    rows = [
        tx for tx in transactions
        if not tx.is_paid and tx.due_date is not None and tx.due_date < today
    ]
    return sorted(rows, key=_by_due)


def upcoming_bills(
    transactions: Iterable[Transaction],
    today: date,
    horizon_days: Optional[int] = UPCOMING_BILL_DAYS,
) -> list[UpcomingBill]:
    """Unpaid rows due between today and today + horizon_days, both inclusive.

    horizon_days=None means no upper bound.
    """
    if horizon_days is not None and horizon_days < 0:
        raise ValidationError("Horizon cannot be negative.")
    last = today + timedelta(days=horizon_days) if horizon_days is not None else None
    rows = [
        tx for tx in transactions
        if not tx.is_paid
        and tx.due_date is not None
        and tx.due_date >= today
        and (last is None or tx.due_date <= last)
    ]
    return [UpcomingBill(tx, days_until(tx.due_date, today)) for tx in sorted(rows, key=_by_due)]


def paid_this_month(transactions: Iterable[Transaction], today: date) -> list[Transaction]:
    """Paid rows dated in today's calendar month, newest first."""
    rows = [
        tx for tx in transactions
        if tx.is_paid
        and tx.transaction_date.year == today.year
        and tx.transaction_date.month == today.month
    ]
    return sorted(rows, key=lambda t: (t.transaction_date, t.id), reverse=True)


def bill_overview(
    transactions: Iterable[Transaction],
    today: date,
    horizon_days: Optional[int] = None,
) -> BillOverview:
    rows = list(transactions)
    return BillOverview(
        overdue=overdue_bills(rows, today),
        upcoming=upcoming_bills(rows, today, horizon_days),
        paid=paid_this_month(rows, today),
    )


def expense_bills_due(
    transactions: Iterable[Transaction],
    today: date,
    horizon_days: Optional[int] = UPCOMING_BILL_DAYS,
) -> tuple[list[Transaction], list[UpcomingBill]]:
    """Overdue and upcoming bills among expenses only; unpaid income is not a bill."""
    expenses = [tx for tx in transactions if tx.type == "expense"]
    return overdue_bills(expenses, today), upcoming_bills(expenses, today, horizon_days)
