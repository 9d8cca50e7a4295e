from __future__ import annotations

from typing import Iterable, Optional

from groupledger.errors import InvalidInput, NotFound
from groupledger.logging import get_logger
from groupledger.models import Group, MemberId, Settlement
from groupledger.services.settlement import Transfer
from groupledger.utils.clock import new_id, utcnow

log = get_logger(__name__)


def add_settlement(
    group: Group,
    from_id: MemberId,
    to_id: MemberId,
    amount_cents: int,
    bill_id: Optional[str] = None,
    memo: Optional[str] = None,
) -> Settlement:
    """Record that ``from_id`` paid ``to_id``.

    Payments outside the computed plan are allowed; neither side has to
    currently owe or be owed anything. Archived members may still settle.
    """
    if amount_cents <= 0:
        raise InvalidInput("Settlement amount must be greater than 0")
    if from_id == to_id:
        raise InvalidInput("A member cannot pay themselves")
    for member_id in (from_id, to_id):
        if group.member(member_id) is None:
            raise NotFound(f"Member not found: {member_id}")
    if bill_id is not None and not any(bill.id == bill_id for bill in group.bills):
        raise NotFound(f"Bill not found: {bill_id}")

    settlement = Settlement(
        id=new_id(),
        from_id=from_id,
        to_id=to_id,
        amount_cents=amount_cents,
        created_at=utcnow(),
        bill_id=bill_id,
        memo=memo.strip() if memo and memo.strip() else None,
    )
    group.settlements.append(settlement)
    log.info(
        "settlement.added",
        group_id=group.id,
        settlement_id=settlement.id,
        from_id=from_id,
        to_id=to_id,
        amount_cents=amount_cents,
        bill_id=bill_id,
    )
    return settlement


def record_plan(group: Group, transfers: Iterable[Transfer], memo: Optional[str] = None) -> list[Settlement]:
    """Apply transfers one append at a time.

    A failure part way leaves the earlier settlements in place: the ledger stays
    valid, only less settled.
    """
    recorded: list[Settlement] = []
    for transfer in transfers:
        recorded.append(
            add_settlement(group, transfer.from_id, transfer.to_id, transfer.amount_cents, memo=memo)
        )
    log.info("plan.recorded", group_id=group.id, settlements=len(recorded))
    return recorded
