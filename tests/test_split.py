from decimal import Decimal

import pytest

from groupledger.errors import InvalidSplitInput
from groupledger.models import Adjustment, AdjustmentMode, SplitStrategy
from groupledger.services.split import compute_split, split_amount


def shares(result):
    return {split.member_id: split.share_cents for split in result.splits}


def test_split_amount_even():
    assert split_amount(1000, ["a", "b", "c", "d"]) == {"a": 250, "b": 250, "c": 250, "d": 250}


def test_split_amount_remainder_goes_to_first_participants():
    result = split_amount(1001, ["a", "b", "c"])
    assert result == {"a": 334, "b": 334, "c": 333}
    assert sum(result.values()) == 1001


def test_equal_split_with_percent_tax():
    result = compute_split(10000, ["a", "b"], tax=Adjustment.percent(10))

    assert result.final_cents == 11000
    assert result.tax_cents == 1000
    assert shares(result) == {"a": 5500, "b": 5500}


def test_weight_split():
    result = compute_split(10000, ["a", "b", "c"], SplitStrategy.WEIGHT, {"a": 1, "b": 2, "c": 2})
    assert shares(result) == {"a": 2000, "b": 4000, "c": 4000}


def test_weight_split_missing_weight_defaults_to_one():
    result = compute_split(900, ["a", "b", "c"], SplitStrategy.WEIGHT, {"a": Decimal("2")})
    assert shares(result) == {"a": 450, "b": 225, "c": 225}


def test_weight_split_rounding_is_exact():
    result = compute_split(1000, ["a", "b", "c"], SplitStrategy.WEIGHT, {"a": 1, "b": 1, "c": 1})
    assert sum(shares(result).values()) == 1000
    assert shares(result) == {"a": 334, "b": 333, "c": 333}


def test_exact_split_spreads_tax_and_discount_proportionally():
    result = compute_split(
        10000,
        ["a", "b"],
        SplitStrategy.EXACT,
        {"a": 2500, "b": 7500},
        tax=Adjustment.percent(20),
        discount=Adjustment.absolute(1000),
    )

    assert result.final_cents == 11000
    assert shares(result) == {"a": 2750, "b": 8250}


def test_exact_split_must_match_base():
    with pytest.raises(InvalidSplitInput):
        compute_split(10000, ["a", "b"], SplitStrategy.EXACT, {"a": 2500, "b": 5000})


def test_share_mode_folds_gap_into_tax():
    result = compute_split(10000, ["a", "b"], SplitStrategy.SHARE, {"a": 3000, "b": 6000})

    assert result.amount_cents == 9000
    assert result.tax_cents == 1000
    assert result.final_cents == 10000
    assert result.tax_mode == AdjustmentMode.PCT
    assert result.tax == Decimal("11.1111")
    assert shares(result) == {"a": 3333, "b": 6667}


def test_share_mode_combines_gap_with_user_tax():
    result = compute_split(
        10000,
        ["a", "b"],
        SplitStrategy.SHARE,
        {"a": 4500, "b": 4500},
        tax=Adjustment.percent(10),
    )

    # 10% of the entered 90.00 plus the 10.00 gap
    assert result.final_cents == 10900
    assert shares(result) == {"a": 5450, "b": 5450}


def test_share_mode_matching_base_keeps_tax_untouched():
    result = compute_split(10000, ["a", "b"], SplitStrategy.SHARE, {"a": 4000, "b": 6000})
    assert result.tax is None
    assert shares(result) == {"a": 4000, "b": 6000}


def test_percent_discount_uses_base_and_final_is_clamped():
    result = compute_split(1000, ["a"], discount=Adjustment(AdjustmentMode.PCT, 150))
    assert result.discount_cents == 1500
    assert result.final_cents == 0
    assert shares(result) == {"a": 0}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"amount_cents": 1000, "participants": []},
        {"amount_cents": 0, "participants": ["a"]},
        {"amount_cents": -5, "participants": ["a"]},
        {"amount_cents": 1000, "participants": ["a", "a"]},
        {
            "amount_cents": 1000,
            "participants": ["a", "b"],
            "strategy": SplitStrategy.WEIGHT,
            "strategy_input": {"z": 1},
        },
        {
            "amount_cents": 1000,
            "participants": ["a", "b"],
            "strategy": SplitStrategy.WEIGHT,
            "strategy_input": {"a": 0, "b": 0},
        },
        {
            "amount_cents": 1000,
            "participants": ["a"],
            "strategy": SplitStrategy.SHARE,
            "strategy_input": {"a": 0},
        },
    ],
)
def test_invalid_split_input(kwargs):
    with pytest.raises(InvalidSplitInput):
        compute_split(**kwargs)


def test_negative_tax_rejected():
    with pytest.raises(InvalidSplitInput):
        compute_split(1000, ["a"], tax=Adjustment.percent(-5))


@pytest.mark.parametrize("strategy", list(SplitStrategy))
def test_every_strategy_sums_to_final_amount(strategy):
    inputs = {
        SplitStrategy.EQUAL: None,
        SplitStrategy.WEIGHT: {"a": 3, "b": 7, "c": Decimal("1.5")},
        SplitStrategy.EXACT: {"a": 3333, "b": 3333, "c": 3335},
        SplitStrategy.SHARE: {"a": 1999, "b": 2999, "c": 4001},
    }
    result = compute_split(
        10001,
        ["a", "b", "c"],
        strategy,
        inputs[strategy],
        tax=Adjustment.percent(Decimal("8.875")),
        discount=Adjustment.absolute(333),
    )
    assert sum(shares(result).values()) == result.final_cents
    assert result.final_cents == result.amount_cents + result.tax_cents - result.discount_cents
