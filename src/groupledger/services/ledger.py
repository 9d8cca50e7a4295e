from __future__ import annotations

from typing import Optional, Sequence

from groupledger.config import DeletePolicy, get_settings
from groupledger.errors import BillHasSettlements, Inconsistent, InvalidInput, NotFound
from groupledger.logging import get_logger
from groupledger.models import Bill, BillInput, Contribution, Group, MemberId, PayerMode, Settlement, SplitStrategy
from groupledger.services.balances import member_bill_position
from groupledger.services.recorder import add_settlement
from groupledger.services.split import compute_split, split_amount
from groupledger.utils.clock import new_id, utcnow
from groupledger.utils.money import apportion

log = get_logger(__name__)


def _require_active(group: Group, member_ids: Sequence[MemberId], role: str) -> None:
    for member_id in member_ids:
        member = group.member(member_id)
        if member is None:
            raise InvalidInput(f"Unknown {role}: {member_id}")
        if member.archived:
            raise InvalidInput(f"Archived member cannot be a {role}: {member.name}")


def _contributions(group: Group, bill_input: BillInput, final_cents: int) -> list[Contribution]:
    if bill_input.payer_mode == PayerMode.SINGLE:
        if not bill_input.paid_by:
            raise InvalidInput("Select a payer")
        _require_active(group, [bill_input.paid_by], "payer")
        return [Contribution(member_id=bill_input.paid_by, amount_cents=final_cents)]

    if bill_input.payer_mode == PayerMode.MULTI_EVEN:
        payers = list(dict.fromkeys(bill_input.payers))
        if not payers:
            raise InvalidInput("Select at least one payer")
        _require_active(group, payers, "payer")
        return [
            Contribution(member_id=member_id, amount_cents=amount)
            for member_id, amount in split_amount(final_cents, payers).items()
        ]

    if bill_input.payer_mode == PayerMode.MULTI_CUSTOM:
        entries = dict(bill_input.contributions or {})
        if any(amount < 0 for amount in entries.values()):
            raise InvalidInput("Contributions must not be negative")
        entries = {member_id: amount for member_id, amount in entries.items() if amount > 0}
        if not entries:
            raise InvalidInput("Select at least one payer")
        _require_active(group, list(entries), "payer")
        if sum(entries.values()) != final_cents:
            raise InvalidInput("Contributions must sum to the final amount")
        return [Contribution(member_id=m, amount_cents=a) for m, a in entries.items()]

    raise InvalidInput(f"Unknown payer mode: {bill_input.payer_mode!r}")


def check_bill(bill: Bill) -> None:
    """Raise :class:`Inconsistent` if a bill breaks a money invariant."""
    if bill.final_cents != bill.amount_cents + bill.tax_cents - bill.discount_cents:
        raise Inconsistent(f"bill {bill.id}: final amount does not match amount, tax and discount")
    if sum(c.amount_cents for c in bill.contributions) != bill.final_cents:
        raise Inconsistent(f"bill {bill.id}: contributions do not sum to the final amount")
    if sum(s.share_cents for s in bill.splits) != bill.final_cents:
        raise Inconsistent(f"bill {bill.id}: splits do not sum to the final amount")


def add_bill(group: Group, bill_input: BillInput) -> Bill:
    participants = list(bill_input.participants)
    _require_active(group, participants, "participant")

    result = compute_split(
        bill_input.amount_cents,
        participants,
        bill_input.strategy,
        bill_input.strategy_input,
        tax=bill_input.tax,
        discount=bill_input.discount,
    )
    if result.final_cents <= 0:
        raise InvalidInput("Final amount must be greater than 0")

    contributions = _contributions(group, bill_input, result.final_cents)

    bill = Bill(
        id=new_id(),
        group_id=group.id,
        title=bill_input.title.strip() or get_settings().default_bill_title,
        amount_cents=result.amount_cents,
        final_cents=result.final_cents,
        contributions=contributions,
        splits=result.splits,
        created_at=utcnow(),
        tax=result.tax,
        tax_mode=result.tax_mode,
        discount=bill_input.discount.value if bill_input.discount else None,
        discount_mode=bill_input.discount.mode if bill_input.discount else None,
        tax_cents=result.tax_cents,
        discount_cents=result.discount_cents,
        strategy=SplitStrategy(bill_input.strategy),
        paid_by=bill_input.paid_by if bill_input.payer_mode == PayerMode.SINGLE else None,
    )
    check_bill(bill)

    group.bills.append(bill)
    log.info(
        "bill.added",
        group_id=group.id,
        bill_id=bill.id,
        strategy=bill.strategy.value,
        final_cents=bill.final_cents,
        participants=len(bill.splits),
        payers=len(bill.contributions),
    )
    return bill


def find_bill(group: Group, bill_id: str) -> Optional[Bill]:
    for bill in group.bills:
        if bill.id == bill_id:
            return bill
    return None


def get_bill(group: Group, bill_id: str) -> Bill:
    bill = find_bill(group, bill_id)
    if bill is None:
        raise NotFound(f"Bill not found: {bill_id}")
    return bill


def delete_bill(group: Group, bill_id: str, policy: Optional[DeletePolicy] = None) -> None:
    """Remove a bill.

    ``orphan`` leaves settlements that mention the bill alone; balances read
    them regardless. ``block`` refuses while such settlements exist and
    ``cascade`` removes them with the bill.
    """
    policy = policy or get_settings().bill_delete_policy
    if policy not in ("orphan", "block", "cascade"):
        raise InvalidInput(f"Unknown delete policy: {policy!r}")

    bill = get_bill(group, bill_id)
    linked = [s for s in group.settlements if s.bill_id == bill_id]

    if policy == "block" and linked:
        raise BillHasSettlements(f"Bill has {len(linked)} recorded settlement(s)")
    if policy == "cascade":
        group.settlements = [s for s in group.settlements if s.bill_id != bill_id]

    group.bills = [b for b in group.bills if b.id != bill.id]
    log.info(
        "bill.deleted",
        group_id=group.id,
        bill_id=bill_id,
        policy=policy,
        linked_settlements=len(linked),
    )


def mark_split_paid(group: Group, bill_id: str, member_id: MemberId) -> None:
    """Flag a member's share as settled. Records no money movement."""
    bill = get_bill(group, bill_id)
    split = bill.split_for(member_id)
    if split is None:
        raise NotFound(f"Member {member_id} has no share in bill {bill_id}")
    if split.settled:
        return
    split.settled = True
    log.info("split.marked_paid", group_id=group.id, bill_id=bill_id, member_id=member_id)


def settle_split(
    group: Group,
    bill_id: str,
    member_id: MemberId,
    memo: Optional[str] = None,
) -> list[Settlement]:
    """Pay what a member still owes on a bill and flag their share settled.

    The debt is the member's remaining position on the bill, counting
    settlements already recorded against it. It goes only to members the bill
    still owes, in proportion to what each is owed, and never more than they
    are owed in total. A member who owes nothing only gets the flag.
    """
    bill = get_bill(group, bill_id)
    split = bill.split_for(member_id)
    if split is None:
        raise NotFound(f"Member {member_id} has no share in bill {bill_id}")
    if split.settled:
        return []

    owed = -member_bill_position(group, bill, member_id)
    creditors: list[tuple[MemberId, int]] = []
    for contribution in bill.contributions:
        other = contribution.member_id
        if other == member_id or any(other == c for c, _ in creditors):
            continue
        surplus = member_bill_position(group, bill, other)
        if surplus > 0:
            creditors.append((other, surplus))

    recorded: list[Settlement] = []
    total = min(owed, sum(surplus for _, surplus in creditors))
    if total > 0:
        parts = apportion(total, [surplus for _, surplus in creditors])
        for (creditor_id, _), amount in zip(creditors, parts):
            if amount <= 0:
                continue
            recorded.append(
                add_settlement(group, member_id, creditor_id, amount, bill_id=bill_id, memo=memo)
            )

    mark_split_paid(group, bill_id, member_id)
    return recorded
