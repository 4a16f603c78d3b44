"""Period totals, category breakdowns and CSV rows.

Everything here is a pure function over Transaction models. Windows are
half-open: [start, end). Sums are Decimal, quantized to cents.
"""
import csv
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from models.category import Category
from models.transaction import Transaction
from utils.constants import (
    RECENT_REPORT_ROWS,
    TRANSACTION_TYPES,
    TYPE_LABELS,
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_NAME,
)
from utils.currency import ZERO, money_sum, percentage
from utils.date_helpers import (
    add_months,
    end_inclusive_to_exclusive,
    format_display_date,
)
from utils.errors import ValidationError

CSV_HEADER = ["Date", "Type", "Category", "Description", "Amount"]


@dataclass
class PeriodSummary:
    start: date
    end: date
    total_income: Decimal = ZERO
    total_expenses: Decimal = ZERO
    balance: Decimal = ZERO
    upcoming_bills_count: int = 0
    upcoming_bills_amount: Decimal = ZERO
    savings_rate: Decimal = Decimal("0.0")


@dataclass
class CategoryTotal:
    category_id: Optional[int]
    name: str
    color: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    income_share: Decimal = Decimal("0.0")
    expense_share: Decimal = Decimal("0.0")

    @property
    def total(self) -> Decimal:
        return self.income + self.expense


@dataclass
class ReportFilter:
    start: date
    end: date           # exclusive
    preset: str = "current_month"
    category_id: Optional[int] = None
    type: Optional[str] = None

    @classmethod
    def for_preset(
        cls,
        preset: str,
        today: date,
        custom_start: date | None = None,
        custom_end: date | None = None,
        category_id: int | None = None,
        type_: str | None = None,
    ) -> "ReportFilter":
        """custom_end is the last day the user picked, included in the report."""
        first_of_month = today.replace(day=1)
        if preset == "current_month":
            start, end = first_of_month, add_months(first_of_month, 1)
        elif preset == "last_month":
            start, end = add_months(first_of_month, -1), first_of_month
        elif preset == "custom":
            if custom_start is None or custom_end is None:
                raise ValidationError("Pick both a start and an end date.")
            start, end = custom_start, end_inclusive_to_exclusive(custom_end)
        else:
            raise ValidationError(f"Unknown report period: {preset}")
        if type_ is not None and type_ not in TRANSACTION_TYPES:
            raise ValidationError(f"Invalid type: {type_}")
        _check_window(start, end)
        return cls(start=start, end=end, preset=preset,
                   category_id=category_id, type=type_)


@dataclass
class Report:
    filter: ReportFilter
    summary: PeriodSummary
    breakdown: list[CategoryTotal]
    transactions: list[Transaction] = field(default_factory=list)
    recent: list[Transaction] = field(default_factory=list)

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)


def _check_window(start: date, end: date):
    if start > end:
        raise ValidationError(f"Start date {start} is after end date {end}.")


def _in_window(d: date | None, start: date, end: date) -> bool:
    return d is not None and start <= d < end


def summarize(transactions: Iterable[Transaction], start: date, end: date) -> PeriodSummary:
    """Paid totals in the window plus the unpaid expenses falling due in it."""
    _check_window(start, end)
    income, expenses, bills = [], [], []
    for tx in transactions:
        if tx.is_paid and _in_window(tx.transaction_date, start, end):
            (income if tx.type == "income" else expenses).append(tx.amount)
        elif not tx.is_paid and tx.type == "expense":
            anchor = tx.due_date if tx.due_date is not None else tx.transaction_date
            if _in_window(anchor, start, end):
                bills.append(tx.amount)

    total_income = money_sum(income)
    total_expenses = money_sum(expenses)
    balance = total_income - total_expenses
    return PeriodSummary(
        start=start,
        end=end,
        total_income=total_income,
        total_expenses=total_expenses,
        balance=balance,
        upcoming_bills_count=len(bills),
        upcoming_bills_amount=money_sum(bills),
        savings_rate=percentage(balance, total_income),
    )


def category_breakdown(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> list[CategoryTotal]:
    """Per-category income/expense subtotals, largest first.

    Rows whose category is missing or unknown land in one Uncategorized
    bucket. Categories with no rows are left out.
    """
    known = {c.id: c for c in categories}
    buckets: dict[Optional[int], CategoryTotal] = {}
    for tx in transactions:
        category = known.get(tx.category_id)
        key = category.id if category else None
        bucket = buckets.get(key)
        if bucket is None:
            bucket = CategoryTotal(
                category_id=key,
                name=category.name if category else UNCATEGORIZED_NAME,
                color=category.color if category else UNCATEGORIZED_COLOR,
            )
            buckets[key] = bucket
        if tx.type == "income":
            bucket.income += tx.amount
        else:
            bucket.expense += tx.amount

    totals = list(buckets.values())
    all_income = money_sum(t.income for t in totals)
    all_expense = money_sum(t.expense for t in totals)
    for t in totals:
        t.income_share = percentage(t.income, all_income)
        t.expense_share = percentage(t.expense, all_expense)
    totals.sort(key=lambda t: (-t.total, t.name.lower()))
    return totals


def filter_for_report(
    transactions: Iterable[Transaction], report_filter: ReportFilter
) -> list[Transaction]:
    f = report_filter
    _check_window(f.start, f.end)
    return [
        tx for tx in transactions
        if tx.is_paid
        and _in_window(tx.transaction_date, f.start, f.end)
        and (f.category_id is None or tx.category_id == f.category_id)
        and (f.type is None or tx.type == f.type)
    ]


def report(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    report_filter: ReportFilter,
) -> Report:
    rows = filter_for_report(transactions, report_filter)
    recent = sorted(rows, key=lambda t: (t.transaction_date, t.id), reverse=True)
    return Report(
        filter=report_filter,
        summary=summarize(rows, report_filter.start, report_filter.end),
        breakdown=category_breakdown(rows, categories),
        transactions=rows,
        recent=recent[:RECENT_REPORT_ROWS],
    )


# ── CSV export ──────────────────────────────────────────────────────────────


def export_rows(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    date_format: str = "DD/MM/YYYY",
) -> list[list[str]]:
    """Header plus one row per transaction, in the order given."""
    names = {c.id: c.name for c in categories}
    rows = [list(CSV_HEADER)]
    for tx in transactions:
        rows.append([
            format_display_date(tx.transaction_date, date_format),
            TYPE_LABELS.get(tx.type, tx.type),
            names.get(tx.category_id, UNCATEGORIZED_NAME),
            tx.description,
            f"{tx.amount:.2f}",
        ])
    return rows


def export_filename(today: date) -> str:
    return f"finance-report-{today.isoformat()}.csv"


def write_csv(path: str, rows: list[list[str]]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerows(rows)
