# greenshop/utils/money.py

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

Money = Decimal


def D(x) -> Money:
    """Coerce to Decimal without passing through binary floats."""
    if isinstance(x, Decimal):
        return x
    try:
        return Decimal(str(x if x is not None else "0"))
    except InvalidOperation:
        raise ValueError(f"not a decimal amount: {x!r}")


def round_money(x: Money) -> Money:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def to_string_money(x) -> str:
    return str(round_money(x))
