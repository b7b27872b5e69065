"""Fixed-point money helpers shared by the calculators.

All amounts are ``Decimal``. Rounding happens once, at the settlement
boundary, through :func:`settle_amount`.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
EPSILON = Decimal("0.005")
ZERO = Decimal("0.00")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    """Convert a numeric value to ``Decimal`` without binary float noise."""
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_cent(value: Decimal | int | float | str | None) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def settle_amount(value: Decimal | int | float | str | None) -> Decimal:
    """Round an amount for output, treating anything below half a cent as zero.

    Parameters
    ----------
    value : Decimal | int | float | str | None
        Raw amount.

    Returns
    -------
    Decimal
        ``Decimal("0.00")`` when ``|value| < 0.005``, otherwise the value
        rounded half-up to two decimal places.
    """
    amount = to_decimal(value)
    if abs(amount) < EPSILON:
        return ZERO
    return quantize_cent(amount)


def is_zero(value: Decimal | int | float | str | None) -> bool:
    """Whether the amount settles to zero cents."""
    return settle_amount(value) == ZERO
