"""Plain records handed to the personal-account ledger.

The engine never posts transactions itself; a consumer maps these entries
onto its own accounts.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from groupledger.errors import NotFound
from groupledger.models import Bill, Group, MemberId, Settlement


class EntryKind(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"


@dataclass(slots=True, frozen=True)
class LedgerEntry:
    kind: EntryKind
    amount_cents: int
    title: str
    note: str
    occurred_at: datetime
    member_id: MemberId
    counterparty_id: Optional[MemberId] = None
    bill_id: Optional[str] = None
    settlement_id: Optional[str] = None


def bill_payment_entry(bill: Bill, member_id: MemberId) -> LedgerEntry:
    paid = bill.contribution_of(member_id)
    if paid <= 0:
        raise NotFound(f"Member {member_id} did not pay for bill {bill.id}")
    return LedgerEntry(
        kind=EntryKind.EXPENSE,
        amount_cents=paid,
        title=bill.title,
        note=f"{bill.title} (Group Bill)",
        occurred_at=bill.created_at,
        member_id=member_id,
        bill_id=bill.id,
    )


def reimbursement_entry(group: Group, settlement: Settlement) -> LedgerEntry:
    payer = group.member(settlement.from_id)
    payer_name = payer.name if payer else settlement.from_id
    bill = next((b for b in group.bills if b.id == settlement.bill_id), None)

    note = f"Reimbursement from {payer_name}"
    if bill is not None:
        note += f" for {bill.title}"

    return LedgerEntry(
        kind=EntryKind.INCOME,
        amount_cents=settlement.amount_cents,
        title=f"Payment from {payer_name}",
        note=note,
        occurred_at=settlement.created_at,
        member_id=settlement.to_id,
        counterparty_id=settlement.from_id,
        bill_id=settlement.bill_id,
        settlement_id=settlement.id,
    )
