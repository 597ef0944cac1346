from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ..core.exceptions import InvalidAmountError, ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def parse_amount(value: str | int | Decimal, *, allow_zero: bool = False) -> Decimal:
    """Parse a positive, whole currency amount (``1,500`` and ``1500`` are accepted).

    ``allow_zero`` also accepts ``0`` (daily rates).
    """
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(f"Amount must be a number, got {value!r}")

    too_small = amount < 0 if allow_zero else amount <= 0
    if not amount.is_finite() or too_small or amount != amount.to_integral_value():
        raise InvalidAmountError(f"Amount must be a {'non-negative' if allow_zero else 'positive'} whole number, got {value!r}")

    try:
        return amount.quantize(Decimal("1"))
    except InvalidOperation:
        # more digits than the decimal context holds
        raise InvalidAmountError(f"Amount is too large, got {value!r}")


def parse_signed_amount(value: str) -> Decimal:
    """Parse ``+500`` / ``-200`` style debt adjustments."""
    v = (value or "").strip()
    sign = Decimal("-1") if v.startswith("-") else Decimal("1")
    return sign * parse_amount(v.lstrip("+-"))
