from __future__ import annotations


class LedgerError(Exception):
    """Base class for every error raised by the ledger."""


class InvalidInput(LedgerError, ValueError):
    pass


class InvalidSplitInput(InvalidInput):
    pass


class MemberInUse(InvalidInput):
    pass


class BillHasSettlements(InvalidInput):
    pass


class NotFound(LedgerError, LookupError):
    pass


class Inconsistent(LedgerError, RuntimeError):
    """An internal invariant does not hold. Indicates a bug, not bad input."""
