from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Mapping, Optional, Sequence, Union

MemberId = str
Numeric = Union[int, Decimal]


class SplitStrategy(str, Enum):
    EQUAL = "equal"
    WEIGHT = "weight"
    EXACT = "exact"
    SHARE = "share"


class AdjustmentMode(str, Enum):
    ABS = "abs"
    PCT = "pct"


class PayerMode(str, Enum):
    SINGLE = "single"
    MULTI_EVEN = "multi-even"
    MULTI_CUSTOM = "multi-custom"


class BalanceStatus(str, Enum):
    OWED = "owed"
    OWES = "owes"
    SETTLED = "settled"


class BillState(str, Enum):
    UNSPLIT = "unsplit"
    UNSETTLED = "unsettled"
    PARTIAL = "partial"
    SETTLED = "settled"


@dataclass(slots=True, frozen=True)
class Adjustment:
    """Tax or discount term. ``value`` is cents for ABS, a percentage for PCT."""

    mode: AdjustmentMode
    value: Numeric

    @classmethod
    def percent(cls, value: Numeric) -> Adjustment:
        return cls(AdjustmentMode.PCT, value)

    @classmethod
    def absolute(cls, cents: int) -> Adjustment:
        return cls(AdjustmentMode.ABS, cents)


@dataclass(slots=True)
class Member:
    id: MemberId
    name: str
    contact: Optional[str] = None
    archived: bool = False


@dataclass(slots=True)
class Contribution:
    member_id: MemberId
    amount_cents: int


@dataclass(slots=True)
class Split:
    member_id: MemberId
    share_cents: int
    settled: bool = False


@dataclass(slots=True)
class Bill:
    id: str
    group_id: str
    title: str
    amount_cents: int
    final_cents: int
    contributions: list[Contribution]
    splits: list[Split]
    created_at: datetime
    tax: Optional[Numeric] = None
    tax_mode: Optional[AdjustmentMode] = None
    discount: Optional[Numeric] = None
    discount_mode: Optional[AdjustmentMode] = None
    tax_cents: int = 0
    discount_cents: int = 0
    strategy: SplitStrategy = SplitStrategy.EQUAL
    paid_by: Optional[MemberId] = None

    def split_for(self, member_id: MemberId) -> Optional[Split]:
        for split in self.splits:
            if split.member_id == member_id:
                return split
        return None

    def contribution_of(self, member_id: MemberId) -> int:
        return sum(c.amount_cents for c in self.contributions if c.member_id == member_id)


@dataclass(slots=True)
class Settlement:
    id: str
    from_id: MemberId
    to_id: MemberId
    amount_cents: int
    created_at: datetime
    bill_id: Optional[str] = None
    memo: Optional[str] = None


@dataclass(slots=True)
class Group:
    id: str
    name: str
    created_at: datetime
    note: Optional[str] = None
    currency: Optional[str] = None
    members: list[Member] = field(default_factory=list)
    bills: list[Bill] = field(default_factory=list)
    settlements: list[Settlement] = field(default_factory=list)

    def member(self, member_id: MemberId) -> Optional[Member]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None


@dataclass(slots=True)
class BillInput:
    title: str
    amount_cents: int
    participants: Sequence[MemberId]
    strategy: SplitStrategy = SplitStrategy.EQUAL
    # weights for WEIGHT, cents for EXACT and SHARE
    strategy_input: Optional[Mapping[MemberId, Numeric]] = None
    tax: Optional[Adjustment] = None
    discount: Optional[Adjustment] = None
    payer_mode: PayerMode = PayerMode.SINGLE
    paid_by: Optional[MemberId] = None
    payers: Sequence[MemberId] = ()
    contributions: Optional[Mapping[MemberId, int]] = None
