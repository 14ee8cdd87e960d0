"""Currency helpers: amounts are Decimals rounded to cents only when stored or returned."""
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_decimal(value):
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so floats such as 0.1 do not carry binary noise
    return Decimal(str(value))


def quantize(value):
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
