"""Turn one creation request into the rows to insert.

Installment dates step from the anchor date, clamped to the target month's
last day: 2024-01-31 over 3 installments gives Jan 31, Feb 29, Mar 31.
"""
from dataclasses import asdict

from models.transaction import TransactionDraft
from utils.constants import INSTALLMENT_MAX, INSTALLMENT_MIN
from utils.date_helpers import add_months
from utils.errors import ValidationError


def validate_count(count) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError("Installment count must be a whole number.")
    if not INSTALLMENT_MIN <= count <= INSTALLMENT_MAX:
        raise ValidationError(
            f"Installment count must be between {INSTALLMENT_MIN} and {INSTALLMENT_MAX}."
        )
    return count


def expand(draft: TransactionDraft) -> list[dict]:
    """Return the row dicts (without user_id) for a draft.

    A plain draft yields exactly one row with installment fields unset.
    An installment draft yields installment_count monthly rows; only the
    first may be paid, and only if the draft asked for it.
    """
    base = asdict(draft)
    count = base.pop("installment_count")

    if not draft.is_installment:
        if count is not None:
            raise ValidationError("Installment count given for a non-installment transaction.")
        return [dict(base, installment_number=None, installment_count=None)]

    count = validate_count(count)
    rows = []
    for i in range(1, count + 1):
        rows.append(dict(
            base,
            transaction_date=add_months(draft.transaction_date, i - 1),
            installment_number=i,
            installment_count=count,
            is_paid=(i == 1 and draft.is_paid),
        ))
    return rows
