from datetime import datetime, timezone

import pytest

from groupledger.config import get_settings
from groupledger.models import BillInput, Group, Member, PayerMode, SplitStrategy


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    monkeypatch.delenv("BILL_DELETE_POLICY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def group() -> Group:
    return Group(
        id="g1",
        name="Trip",
        created_at=datetime(2024, 5, 10, tzinfo=timezone.utc),
        currency="USD",
        members=[
            Member(id="a", name="Alice"),
            Member(id="b", name="Bob"),
            Member(id="c", name="Carol"),
        ],
    )


def bill_input(amount_cents: int, paid_by: str = "a", participants=("a", "b", "c"), **kwargs) -> BillInput:
    title = kwargs.pop("title", "Dinner")
    kwargs.setdefault("strategy", SplitStrategy.EQUAL)
    kwargs.setdefault("payer_mode", PayerMode.SINGLE)
    return BillInput(
        title=title,
        amount_cents=amount_cents,
        participants=list(participants),
        paid_by=paid_by,
        **kwargs,
    )
