from __future__ import annotations

from typing import Iterable, Optional, Tuple, Union

from groupledger.config import get_settings
from groupledger.errors import InvalidInput, MemberInUse, NotFound
from groupledger.logging import get_logger
from groupledger.models import Group, Member, MemberId
from groupledger.utils.clock import new_id, utcnow

log = get_logger(__name__)

MemberEntry = Union[str, Tuple[str, Optional[str]]]


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _new_member(name: str, contact: Optional[str]) -> Member:
    return Member(id=new_id(), name=name.strip(), contact=_clean(contact))


def create_group(
    name: str,
    note: Optional[str] = None,
    currency: Optional[str] = None,
    members: Iterable[MemberEntry] = (),
) -> Group:
    if not name or not name.strip():
        raise InvalidInput("Group name must not be empty")

    group = Group(
        id=new_id(),
        name=name.strip(),
        created_at=utcnow(),
        note=_clean(note),
        currency=(currency or get_settings().default_currency).upper(),
    )
    for entry in members:
        member_name, contact = (entry, None) if isinstance(entry, str) else entry
        if not member_name or not member_name.strip():
            continue
        group.members.append(_new_member(member_name, contact))

    log.info("group.created", group_id=group.id, members=len(group.members), currency=group.currency)
    return group


def update_group(
    group: Group,
    name: Optional[str] = None,
    note: Optional[str] = None,
    currency: Optional[str] = None,
) -> Group:
    if name is not None:
        if not name.strip():
            raise InvalidInput("Group name must not be empty")
        group.name = name.strip()
    if note is not None:
        group.note = _clean(note)
    if currency is not None:
        group.currency = currency.strip().upper() or group.currency
    return group


def delete_group(groups: list[Group], group_id: str) -> None:
    """Remove a group from a caller-owned list of groups."""
    for index, group in enumerate(groups):
        if group.id == group_id:
            del groups[index]
            log.info("group.deleted", group_id=group_id)
            return
    raise NotFound(f"Group not found: {group_id}")


def get_member(group: Group, member_id: MemberId) -> Member:
    member = group.member(member_id)
    if member is None:
        raise NotFound(f"Member not found: {member_id}")
    return member


def active_member_ids(group: Group) -> list[MemberId]:
    return [member.id for member in group.members if not member.archived]


def add_member(group: Group, name: str, contact: Optional[str] = None) -> Member:
    if not name or not name.strip():
        raise InvalidInput("Member name must not be empty")
    member = _new_member(name, contact)
    group.members.append(member)
    log.info("member.added", group_id=group.id, member_id=member.id)
    return member


def update_member(
    group: Group,
    member_id: MemberId,
    name: Optional[str] = None,
    contact: Optional[str] = None,
) -> Member:
    member = get_member(group, member_id)
    if name is not None:
        if not name.strip():
            raise InvalidInput("Member name must not be empty")
        member.name = name.strip()
    if contact is not None:
        member.contact = _clean(contact)
    return member


def archive_member(group: Group, member_id: MemberId, archived: bool = True) -> Member:
    member = get_member(group, member_id)
    member.archived = archived
    log.info("member.archived", group_id=group.id, member_id=member_id, archived=archived)
    return member


def is_referenced(group: Group, member_id: MemberId) -> bool:
    for bill in group.bills:
        if any(c.member_id == member_id for c in bill.contributions):
            return True
        if any(s.member_id == member_id for s in bill.splits):
            return True
    return any(member_id in (s.from_id, s.to_id) for s in group.settlements)


def delete_member(group: Group, member_id: MemberId) -> None:
    """Hard-delete a member with no history. Members with history must be archived."""
    get_member(group, member_id)
    if is_referenced(group, member_id):
        raise MemberInUse("Member appears in bills or settlements; archive them instead")
    group.members = [m for m in group.members if m.id != member_id]
    log.info("member.deleted", group_id=group.id, member_id=member_id)
