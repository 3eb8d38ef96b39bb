from decimal import Decimal

import pytest

from eduverse.application.errors import ValidationError
from eduverse.application.money import MAX_AMOUNT, parse_positive_amount

MESSAGE = "bad amount"


def test_parse_positive_amount_accepts_column_range_edges():
    """
    Validate the accepted amount range.

    1. Parse the smallest positive cent and the largest storable amount.
    2. Validate float input keeps its decimal rendering.
    """
    assert parse_positive_amount("0.01", error_message=MESSAGE) == Decimal("0.01")
    assert parse_positive_amount("99999999.99", error_message=MESSAGE) == MAX_AMOUNT
    assert parse_positive_amount(0.1, error_message=MESSAGE) == Decimal("0.10")


@pytest.mark.parametrize("raw", ["1e30", "100000000", "99999999.999", "1e-30", "NaN", "Infinity", False])
def test_parse_positive_amount_rejects_unstorable_values(raw):
    with pytest.raises(ValidationError) as exc:
        parse_positive_amount(raw, error_message=MESSAGE)
    assert str(exc.value) == MESSAGE
