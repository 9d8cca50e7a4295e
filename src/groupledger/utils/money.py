"""Integer-cent arithmetic shared by every service.

Money never passes through binary floating point: user amounts are converted
with :func:`to_cents` and every proportional calculation goes through
:class:`fractions.Fraction`.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from fractions import Fraction
from typing import Sequence, Union

from groupledger.models import BalanceStatus

Number = Union[int, float, str, Decimal, Fraction]

CENT = Decimal("0.01")


def to_cents(value: Number) -> int:
    """Convert an amount in major units (``"12.34"``, ``Decimal``, ``float``) to cents."""
    if isinstance(value, Fraction):
        return round_half_up(value * 100)
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"not a monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"not a monetary amount: {value!r}")
    return int((amount / CENT).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return Decimal(cents).scaleb(-2)


def as_fraction(value: Number) -> Fraction:
    if isinstance(value, float):
        return Fraction(Decimal(str(value)))
    if isinstance(value, str):
        return Fraction(Decimal(value))
    return Fraction(value)


def round_half_up(value: Fraction) -> int:
    if value >= 0:
        return math.floor(value + Fraction(1, 2))
    return -math.floor(-value + Fraction(1, 2))


def percent_of(cents: int, pct: Number) -> int:
    return round_half_up(Fraction(cents) * as_fraction(pct) / 100)


def apportion(total: int, weights: Sequence[Number]) -> list[int]:
    """Split ``total`` cents proportionally to ``weights``.

    Each part gets the floor of its exact share; leftover cents go one by one
    to the largest fractional remainders, earlier positions winning ties. The
    result always sums to ``total``.
    """
    if total < 0:
        raise ValueError("total must be non-negative")
    if not weights:
        raise ValueError("weights must not be empty")

    fractions_ = [as_fraction(w) for w in weights]
    if any(w < 0 for w in fractions_):
        raise ValueError("weights must be non-negative")
    weight_sum = sum(fractions_, Fraction(0))
    if weight_sum == 0:
        raise ValueError("weights must not all be zero")

    exact = [Fraction(total) * w / weight_sum for w in fractions_]
    parts = [math.floor(x) for x in exact]
    leftover = total - sum(parts)

    order = sorted(range(len(parts)), key=lambda i: (-(exact[i] - parts[i]), i))
    for idx in order[:leftover]:
        parts[idx] += 1
    return parts


def classify(cents: int) -> BalanceStatus:
    if cents > 0:
        return BalanceStatus.OWED
    if cents < 0:
        return BalanceStatus.OWES
    return BalanceStatus.SETTLED
