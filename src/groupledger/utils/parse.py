from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from groupledger.errors import InvalidInput
from groupledger.utils.money import to_cents

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹\s]")


def _clean(text: str | None) -> str:
    if text is None:
        return ""
    return _CURRENCY_SYMBOLS.sub("", text).replace(",", "")


def _decimal(text: str, what: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise InvalidInput(f"Invalid {what}: {text!r}") from exc
    if not value.is_finite():
        raise InvalidInput(f"Invalid {what}: {text!r}")
    return value


def parse_amount(text: str | None) -> int:
    """
    Parse a user-entered amount into cents.

    Supported formats:
    - 12.5
    - 1,234.56
    - $3
    An empty field means 0.
    """
    cleaned = _clean(text)
    if not cleaned:
        return 0
    return to_cents(_decimal(cleaned, "amount"))


def parse_percent(text: str | None) -> Decimal:
    cleaned = _clean(text).rstrip("%")
    if not cleaned:
        return Decimal(0)
    return _decimal(cleaned, "percentage")


def parse_weight(text: str | None) -> Decimal:
    cleaned = _clean(text)
    if not cleaned:
        return Decimal(1)
    value = _decimal(cleaned, "weight")
    if value < 0:
        raise InvalidInput("Weight must not be negative")
    return value
