from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping

from groupledger.logging import get_logger
from groupledger.models import BalanceStatus, Group, MemberId
from groupledger.services.balances import balances
from groupledger.utils.money import classify

log = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class Transfer:
    from_id: MemberId
    to_id: MemberId
    amount_cents: int


Edge = Transfer


def settle(values: Mapping[MemberId, int]) -> List[Transfer]:
    """Greedy debt simplification: largest debtor pays largest creditor.

    Not always the fewest possible transfers, but deterministic and never more
    than ``len(creditors) + len(debtors) - 1`` of them. Equal amounts keep the
    order of ``values``.
    """
    creditors: list[tuple[MemberId, int]] = []
    debtors: list[tuple[MemberId, int]] = []

    for member_id, balance in values.items():
        status = classify(balance)
        if status == BalanceStatus.OWED:
            creditors.append((member_id, balance))
        elif status == BalanceStatus.OWES:
            debtors.append((member_id, -balance))

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers: list[Transfer] = []
    i, j = 0, 0

    while i < len(creditors) and j < len(debtors):
        cred_id, cred_amount = creditors[i]
        debt_id, debt_amount = debtors[j]

        transfer_amount = min(cred_amount, debt_amount)
        transfers.append(Transfer(from_id=debt_id, to_id=cred_id, amount_cents=transfer_amount))

        cred_amount -= transfer_amount
        debt_amount -= transfer_amount

        if cred_amount == 0:
            i += 1
        else:
            creditors[i] = (cred_id, cred_amount)

        if debt_amount == 0:
            j += 1
        else:
            debtors[j] = (debt_id, debt_amount)

    return transfers


def calculate_settlement_plan(group: Group) -> List[Transfer]:
    plan = settle(balances(group))
    log.debug(
        "plan.computed",
        group_id=group.id,
        transfers=len(plan),
        total_cents=sum(t.amount_cents for t in plan),
    )
    return plan
