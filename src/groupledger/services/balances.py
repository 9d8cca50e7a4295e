from __future__ import annotations

from typing import Mapping

from groupledger.errors import Inconsistent
from groupledger.models import BalanceStatus, Bill, BillState, Group, MemberId
from groupledger.utils.money import classify


def balances(group: Group) -> dict[MemberId, int]:
    """Net position of every member in cents; positive means the group owes them.

    Members are listed in group order, followed by ids that only appear in bills
    or settlements. Settlements count whether or not the bill they mention still
    exists.
    """
    result: dict[MemberId, int] = {member.id: 0 for member in group.members}

    for bill in group.bills:
        for contribution in bill.contributions:
            result[contribution.member_id] = result.get(contribution.member_id, 0) + contribution.amount_cents
        for split in bill.splits:
            result[split.member_id] = result.get(split.member_id, 0) - split.share_cents

    for settlement in group.settlements:
        result[settlement.from_id] = result.get(settlement.from_id, 0) + settlement.amount_cents
        result[settlement.to_id] = result.get(settlement.to_id, 0) - settlement.amount_cents

    return result


def member_status(cents: int) -> BalanceStatus:
    return classify(cents)


def is_group_settled(group: Group) -> bool:
    return all(classify(value) == BalanceStatus.SETTLED for value in balances(group).values())


def unsettled_total(group: Group) -> int:
    return sum(value for value in balances(group).values() if classify(value) == BalanceStatus.OWED)


def assert_conserved(values: Mapping[MemberId, int]) -> None:
    total = sum(values.values())
    if total != 0:
        raise Inconsistent(f"balances do not sum to zero (off by {total} cents)")


def bill_state(bill: Bill) -> BillState:
    if not bill.splits:
        return BillState.UNSPLIT
    if all(split.settled for split in bill.splits):
        return BillState.SETTLED
    if any(split.settled for split in bill.splits):
        return BillState.PARTIAL
    return BillState.UNSETTLED


def bill_remaining(bill: Bill) -> int:
    """Unsettled shares of members whose own contribution does not cover their share."""
    remaining = 0
    for split in bill.splits:
        if split.settled:
            continue
        if bill.contribution_of(split.member_id) >= split.share_cents:
            continue
        remaining += split.share_cents
    return remaining


def member_bill_position(group: Group, bill: Bill, member_id: MemberId) -> int:
    """What ``member_id`` is still owed (positive) or owes (negative) on one bill."""
    split = bill.split_for(member_id)
    share = split.share_cents if split else 0
    position = bill.contribution_of(member_id) - share
    for settlement in group.settlements:
        if settlement.bill_id != bill.id:
            continue
        if settlement.from_id == member_id:
            position += settlement.amount_cents
        if settlement.to_id == member_id:
            position -= settlement.amount_cents
    return position
