"""Tests for linear interest accrual"""
import pytest
from hypothesis import given, settings, strategies as st

from lending_model.src.constants import FIXED_ANNUAL_RATE_WAD, SECONDS_PER_YEAR, U64_MAX, WAD
from lending_model.src.errors import InvalidTimestampError, MathOverflowError
from lending_model.src.events import AccrueInterestEvent
from lending_model.src.state.market import Market
from lending_model.src.utils.interest import accrue_interest, calculate_interest, rate_per_second


def make_market(borrow: int = 0, supply: int = 0, last_update: int = 0) -> Market:
    return Market(
        authority="admin",
        loan_token_mint="USDC",
        collateral_token_mint="SOL",
        loan_vault="loan-vault",
        collateral_vault="collateral-vault",
        lltv=80_000_000,
        last_update=last_update,
        total_supply_assets=supply,
        total_borrow_assets=borrow,
    )


def test_rate_per_second():
    assert rate_per_second() == FIXED_ANNUAL_RATE_WAD // SECONDS_PER_YEAR
    assert 0 < rate_per_second() < FIXED_ANNUAL_RATE_WAD


def test_annual_interest_approximation():
    # 100,000 * 5% = 5,000, minus flooring of the per-second rate
    interest = calculate_interest(100_000, SECONDS_PER_YEAR)
    assert 4_999 <= interest <= 5_001


def test_zero_elapsed_time_is_noop():
    market = make_market(borrow=1_000, supply=2_000, last_update=100)
    assert accrue_interest(market, 100) is None
    assert market.total_borrow_assets == 1_000
    assert market.total_supply_assets == 2_000
    assert market.last_update == 100


def test_accrual_grows_both_sides_equally():
    market = make_market(borrow=800, supply=1_000, last_update=0)
    event = accrue_interest(market, SECONDS_PER_YEAR)

    assert isinstance(event, AccrueInterestEvent)
    assert event.interest == 39
    assert market.total_borrow_assets == 839
    assert market.total_supply_assets == 1_039
    assert market.last_update == SECONDS_PER_YEAR
    assert event.elapsed_seconds == SECONDS_PER_YEAR


def test_no_debt_only_moves_timestamp():
    market = make_market(borrow=0, supply=1_000, last_update=0)
    event = accrue_interest(market, 86_400)
    assert event.interest == 0
    assert market.total_supply_assets == 1_000
    assert market.last_update == 86_400


def test_clock_going_backwards():
    market = make_market(borrow=10, supply=10, last_update=1_000)
    with pytest.raises(InvalidTimestampError):
        accrue_interest(market, 999)
    assert market.last_update == 1_000


def test_clock_unavailable():
    with pytest.raises(InvalidTimestampError):
        accrue_interest(make_market(), None)


def test_overflow_leaves_market_untouched():
    market = make_market(borrow=U64_MAX // 2, supply=U64_MAX, last_update=0)
    with pytest.raises(MathOverflowError):
        accrue_interest(market, SECONDS_PER_YEAR)
    assert market.total_borrow_assets == U64_MAX // 2
    assert market.total_supply_assets == U64_MAX
    assert market.last_update == 0


def test_second_call_at_same_timestamp_changes_nothing():
    market = make_market(borrow=5_000_000, supply=9_000_000, last_update=0)
    accrue_interest(market, 3_600)
    snapshot = (market.total_borrow_assets, market.total_supply_assets, market.last_update)
    assert accrue_interest(market, 3_600) is None
    assert (market.total_borrow_assets, market.total_supply_assets, market.last_update) == snapshot


@given(
    borrow=st.integers(min_value=0, max_value=10**9),
    t1=st.integers(min_value=0, max_value=3_600),
    t2=st.integers(min_value=0, max_value=3_600),
)
@settings(max_examples=200)
def test_accrual_is_additive_up_to_rounding(borrow, t1, t2):
    split = make_market(borrow=borrow, supply=borrow, last_update=0)
    accrue_interest(split, t1)
    accrue_interest(split, t1 + t2)

    single = make_market(borrow=borrow, supply=borrow, last_update=0)
    accrue_interest(single, t1 + t2)

    assert abs(split.total_borrow_assets - single.total_borrow_assets) <= 2
    assert split.last_update == single.last_update == t1 + t2


@given(
    borrow=st.integers(min_value=0, max_value=10**12),
    supply_extra=st.integers(min_value=0, max_value=10**12),
    elapsed=st.integers(min_value=0, max_value=10 * SECONDS_PER_YEAR),
)
def test_accrual_preserves_liquidity_invariant(borrow, supply_extra, elapsed):
    market = make_market(borrow=borrow, supply=borrow + supply_extra, last_update=0)
    accrue_interest(market, elapsed)
    assert market.total_borrow_assets <= market.total_supply_assets
    assert market.total_supply_assets - market.total_borrow_assets == supply_extra


@given(borrow=st.integers(min_value=0, max_value=10**12), elapsed=st.integers(min_value=0, max_value=SECONDS_PER_YEAR))
def test_interest_matches_formula(borrow, elapsed):
    expected = borrow * (FIXED_ANNUAL_RATE_WAD // SECONDS_PER_YEAR) * elapsed // WAD
    assert calculate_interest(borrow, elapsed) == expected
