from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")


def format_units(value: int, decimals: int) -> str:
    """Render a fixed-point integer as a decimal string.

    Trailing zeros of the fraction are trimmed but at least one fraction
    digit is kept, so ``format_units(100000000, 8) == "1.0"`` and
    ``format_units(500000, 8) == "0.005"``.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), 10**decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def parse_units(amount: str, decimals: int) -> int:
    """Convert a human-readable amount into its fixed-point integer.

    Raises:
        ValueError: If ``amount`` is malformed, negative, or carries more
            fraction digits than ``decimals`` allows.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    try:
        parsed = Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not parsed.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if parsed < 0:
        raise ValueError(f"Amount must be non-negative, got {amount!r}")

    scaled = parsed.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount!r} has more than {decimals} decimal places")
    return int(scaled)


def round_half_up(value: float | Decimal, exp: Decimal = CENT) -> Decimal:
    """Round to ``exp`` with ties going away from zero.

    Floats are taken at their shortest ``repr`` form, so ``0.125`` is a tie
    and rounds to ``0.13`` rather than to the even digit.
    """
    if not isinstance(value, Decimal):
        value = Decimal(repr(value))
    return value.quantize(exp, rounding=ROUND_HALF_UP)
