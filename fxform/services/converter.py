"""Currency conversion and amount formatting.

Rates are relative to the provider's base currency, so converting between any
two currencies is ``amount * rates[to] / rates[from]``. Results are returned as
strings with a fixed number of decimals so trailing zeros survive display.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping, Union

from fxform.core.errors import InvalidAmountError, InvalidRateError, UnknownCurrencyError

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as e:
            raise InvalidAmountError(value) from e
    if not d.is_finite():
        raise InvalidAmountError(value)
    return d


def quantize(value: Decimal, decimals: int) -> str:
    if not isinstance(decimals, int) or decimals < 0:
        raise ValueError("decimals must be a non-negative integer")
    try:
        q = value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        # more digits than the decimal context can hold
        raise InvalidAmountError(value) from e
    # "-0.00" reads oddly next to a currency name
    if q.is_zero():
        q = q.copy_abs()
    return f"{q:f}"


def rate_of(rates: Mapping[str, float], code: str) -> Decimal:
    """Look up a rate as a positive finite Decimal."""
    try:
        raw = rates[code]
    except KeyError:
        raise UnknownCurrencyError(code) from None
    try:
        rate = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise InvalidRateError(code, raw) from None
    if not rate.is_finite() or rate <= 0:
        raise InvalidRateError(code, raw)
    return rate


def convert(
    amount: Number,
    rates: Mapping[str, float],
    from_code: str,
    to_code: str,
    decimals: int = 2,
) -> str:
    """Convert ``amount`` of ``from_code`` into ``to_code``.

    Raises UnknownCurrencyError if either code is missing from ``rates``,
    InvalidRateError if its rate is not a positive finite number and
    InvalidAmountError if ``amount`` is not a finite number.
    """
    value = to_decimal(amount)
    from_rate = rate_of(rates, from_code)
    to_rate = rate_of(rates, to_code)
    return quantize(value * (to_rate / from_rate), decimals)


def format_amount(value: Number, decimals: int = 2) -> str:
    """Normalize user input to ``decimals`` places (e.g. "4" -> "4.00")."""
    return quantize(to_decimal(value), decimals)
