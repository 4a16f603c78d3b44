from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from utils.constants import CURRENCIES, DEFAULT_CURRENCY

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Coerce int/str/float/Decimal to a cent-quantized Decimal.

    Floats go through str() so 0.1 stays 0.10 instead of 0.1000000000000000055...
    Raises ValueError (InvalidOperation is not one) on garbage input.
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a monetary amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a monetary amount: {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"Amount out of range: {value!r}") from None


def money_sum(amounts) -> Decimal:
    return sum((to_money(a) for a in amounts), ZERO)


def percentage(part, whole) -> Decimal:
    """part / whole * 100 rounded to one decimal; 0 when whole is zero."""
    whole = Decimal(whole)
    if whole == 0:
        return Decimal("0.0")
    return (Decimal(part) / whole * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def currency_symbol(code: str) -> str:
    return CURRENCIES.get(code, CURRENCIES[DEFAULT_CURRENCY])


def format_currency(amount, code: str = DEFAULT_CURRENCY) -> str:
    """Format an amount as currency string, e.g. 'R$ 1,234.56'."""
    value = to_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{currency_symbol(code)} {abs(value):,.2f}"


def format_signed(amount, code: str = DEFAULT_CURRENCY) -> str:
    """Format with +/- sign."""
    value = to_money(amount)
    sign = "+" if value >= 0 else "-"
    return f"{sign}{currency_symbol(code)} {abs(value):,.2f}"
