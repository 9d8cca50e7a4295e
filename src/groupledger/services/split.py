from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Mapping, Optional, Sequence

from groupledger.errors import InvalidSplitInput
from groupledger.models import Adjustment, AdjustmentMode, MemberId, Numeric, Split, SplitStrategy
from groupledger.utils.money import apportion, as_fraction, percent_of

PCT_PLACES = Decimal("0.0001")


@dataclass(slots=True)
class SplitResult:
    amount_cents: int
    tax_cents: int
    discount_cents: int
    final_cents: int
    splits: list[Split]
    tax_mode: Optional[AdjustmentMode] = None
    tax: Optional[Numeric] = None


def split_amount(amount_cents: int, consumers: Sequence[MemberId]) -> dict[MemberId, int]:
    """Equal split; remainder cents go to the first consumers in input order."""
    if amount_cents < 0:
        raise InvalidSplitInput("amount_cents must be non-negative")
    if not consumers:
        raise InvalidSplitInput("consumers must not be empty")

    shares = apportion(amount_cents, [1] * len(consumers))
    return {consumer: share for consumer, share in zip(consumers, shares)}


def adjustment_cents(amount_cents: int, adjustment: Optional[Adjustment], what: str) -> int:
    if adjustment is None:
        return 0
    value = as_fraction(adjustment.value)
    if value < 0:
        raise InvalidSplitInput(f"{what} must not be negative")
    if adjustment.mode == AdjustmentMode.PCT:
        return percent_of(amount_cents, value)
    if value.denominator != 1:
        raise InvalidSplitInput(f"absolute {what} must be a whole number of cents")
    return int(value)


def _validate(
    amount_cents: int,
    participants: Sequence[MemberId],
    strategy_input: Optional[Mapping[MemberId, Numeric]],
) -> None:
    if not participants:
        raise InvalidSplitInput("Select at least one participant")
    if len(set(participants)) != len(participants):
        raise InvalidSplitInput("Participants must be unique")
    if amount_cents <= 0:
        raise InvalidSplitInput("Amount must be greater than 0")
    if strategy_input:
        unknown = [member_id for member_id in strategy_input if member_id not in participants]
        if unknown:
            raise InvalidSplitInput(f"Not a participant: {', '.join(map(str, unknown))}")


def _entered_cents(
    participants: Sequence[MemberId],
    strategy_input: Optional[Mapping[MemberId, Numeric]],
) -> list[int]:
    entered: list[int] = []
    for member_id in participants:
        value = as_fraction((strategy_input or {}).get(member_id, 0))
        if value < 0:
            raise InvalidSplitInput("Amounts must not be negative")
        if value.denominator != 1:
            raise InvalidSplitInput("Amounts must be whole cents")
        entered.append(int(value))
    if sum(entered) <= 0:
        raise InvalidSplitInput("Enter at least one amount")
    return entered


def _weights(
    participants: Sequence[MemberId],
    strategy_input: Optional[Mapping[MemberId, Numeric]],
) -> list[Fraction]:
    weights = [as_fraction((strategy_input or {}).get(member_id, 1)) for member_id in participants]
    if any(w < 0 for w in weights):
        raise InvalidSplitInput("Weights must not be negative")
    if sum(weights) == 0:
        raise InvalidSplitInput("At least one weight must be positive")
    return weights


def compute_split(
    amount_cents: int,
    participants: Sequence[MemberId],
    strategy: SplitStrategy = SplitStrategy.EQUAL,
    strategy_input: Optional[Mapping[MemberId, Numeric]] = None,
    *,
    tax: Optional[Adjustment] = None,
    discount: Optional[Adjustment] = None,
) -> SplitResult:
    """Compute the final amount of a bill and each participant's share of it.

    Percentage tax and discount apply to the base amount, absolute ones are
    taken literally, and the final amount is clamped at zero. Shares always
    sum to the final amount exactly.

    ``strategy_input`` holds weights for ``WEIGHT`` (missing members weigh 1)
    and cents for ``EXACT`` and ``SHARE`` (missing members enter 0).

    ``EXACT`` amounts must add up to the base amount; tax and discount are then
    spread in proportion to them. ``SHARE`` amounts may differ from the base:
    the entered sum becomes the base and the gap is folded into the tax as an
    extra percentage of that sum.
    """
    _validate(amount_cents, participants, strategy_input)
    tax_mode = tax.mode if tax else None
    tax_value = tax.value if tax else None

    if strategy == SplitStrategy.SHARE:
        entered = _entered_cents(participants, strategy_input)
        base_cents = sum(entered)
        surcharge = amount_cents - base_cents
        tax_cents = adjustment_cents(base_cents, tax, "tax") + surcharge
        if surcharge:
            tax_mode = AdjustmentMode.PCT
            tax_value = (Decimal(tax_cents) * 100 / Decimal(base_cents)).quantize(PCT_PLACES)
        weights: Sequence[Numeric | Fraction] = entered
    else:
        base_cents = amount_cents
        tax_cents = adjustment_cents(base_cents, tax, "tax")
        if strategy == SplitStrategy.EQUAL:
            weights = [1] * len(participants)
        elif strategy == SplitStrategy.WEIGHT:
            weights = _weights(participants, strategy_input)
        elif strategy == SplitStrategy.EXACT:
            weights = _entered_cents(participants, strategy_input)
            if sum(weights) != base_cents:
                raise InvalidSplitInput("Exact amounts must sum to the bill amount")
        else:
            raise InvalidSplitInput(f"Unknown split strategy: {strategy!r}")

    discount_cents = adjustment_cents(base_cents, discount, "discount")
    final_cents = max(0, base_cents + tax_cents - discount_cents)

    shares = apportion(final_cents, weights)
    return SplitResult(
        amount_cents=base_cents,
        tax_cents=tax_cents,
        discount_cents=discount_cents,
        final_cents=final_cents,
        splits=[Split(member_id=m, share_cents=s) for m, s in zip(participants, shares)],
        tax_mode=tax_mode,
        tax=tax_value,
    )
