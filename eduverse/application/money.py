from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from eduverse.application.errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Largest value a Numeric(10, 2) column holds.
MAX_AMOUNT = Decimal("99999999.99")


def quantize_money(value: Decimal | int | str) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_positive_amount(raw: str | int | float | Decimal | None, *, error_message: str) -> Decimal:
    """Parse user-supplied money into a two-place Decimal in ``(0, MAX_AMOUNT]``.

    Floats go through ``str`` first so ``0.1`` stays ``0.10`` instead of its binary expansion.
    """
    if raw is None or isinstance(raw, bool):
        raise ValidationError(error_message)
    text = str(raw).strip()
    if not text:
        raise ValidationError(error_message)
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise ValidationError(error_message) from exc
    if not value.is_finite() or value <= ZERO or value > MAX_AMOUNT:
        raise ValidationError(error_message)
    try:
        amount = quantize_money(value)
    except InvalidOperation as exc:
        raise ValidationError(error_message) from exc
    if amount <= ZERO or amount > MAX_AMOUNT:
        raise ValidationError(error_message)
    return amount
