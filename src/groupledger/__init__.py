"""Group expense ledger and debt-settlement engine."""

from groupledger.errors import (
    BillHasSettlements,
    Inconsistent,
    InvalidInput,
    InvalidSplitInput,
    LedgerError,
    MemberInUse,
    NotFound,
)
from groupledger.models import (
    Adjustment,
    AdjustmentMode,
    BalanceStatus,
    Bill,
    BillInput,
    BillState,
    Contribution,
    Group,
    Member,
    PayerMode,
    Settlement,
    Split,
    SplitStrategy,
)
from groupledger.services.balances import balances
from groupledger.services.ledger import add_bill, delete_bill, find_bill, mark_split_paid
from groupledger.services.recorder import add_settlement
from groupledger.services.settlement import Edge, Transfer, calculate_settlement_plan
from groupledger.services.split import compute_split

__all__ = [
    "Adjustment",
    "AdjustmentMode",
    "BalanceStatus",
    "Bill",
    "BillHasSettlements",
    "BillInput",
    "BillState",
    "Contribution",
    "Edge",
    "Group",
    "Inconsistent",
    "InvalidInput",
    "InvalidSplitInput",
    "LedgerError",
    "Member",
    "MemberInUse",
    "NotFound",
    "PayerMode",
    "Settlement",
    "Split",
    "SplitStrategy",
    "Transfer",
    "add_bill",
    "add_settlement",
    "balances",
    "calculate_settlement_plan",
    "compute_split",
    "delete_bill",
    "find_bill",
    "mark_split_paid",
]
