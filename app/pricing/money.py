from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWOPLACES = Decimal("0.01")


def to_amount(value) -> Decimal:
    """Coerce a stored number to a non-negative Decimal.

    Missing, malformed, non-finite or negative values become zero so a bad
    catalog entry degrades to "no discount" instead of raising.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    if not d.is_finite() or d < ZERO:
        return ZERO
    return d


def to_quantity(value) -> int:
    try:
        qty = int(value)
    except (TypeError, ValueError):
        return 0
    return qty if qty > 0 else 0


def to_display(value) -> float:
    """Round for presentation only."""
    return float(to_amount(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP))
