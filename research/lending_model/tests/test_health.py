"""Tests for the solvency evaluator"""
import pytest

from lending_model.src.constants import FIXED_ORACLE_PRICE, PRICE_PRECISION
from lending_model.src.errors import UndercollateralizedError
from lending_model.src.state.market import Market
from lending_model.src.state.user_position import UserPosition
from lending_model.src.utils.health import check_health, evaluate_health, is_healthy

PRICE_100 = 100 * PRICE_PRECISION


def market_with_debt(borrow_assets: int, borrow_shares: int, lltv: int = 80_000_000) -> Market:
    return Market(
        authority="admin",
        loan_token_mint="USDC",
        collateral_token_mint="SOL",
        loan_vault="loan-vault",
        collateral_vault="collateral-vault",
        lltv=lltv,
        total_supply_assets=10_000,
        total_supply_shares=10_000 * 10**6,
        total_borrow_assets=borrow_assets,
        total_borrow_shares=borrow_shares,
    )


def position(collateral: int, borrow_shares: int) -> UserPosition:
    return UserPosition(
        user="alice",
        market="m",
        borrow_shares=borrow_shares,
        collateral_amount=collateral,
    )


def test_no_debt_is_always_healthy():
    market = market_with_debt(0, 0)
    assert is_healthy(market, position(collateral=0, borrow_shares=0), PRICE_100)
    check_health(market, position(collateral=0, borrow_shares=0), PRICE_100)


def test_exactly_at_the_boundary():
    # 10 collateral * 100 = 1000 value, 80% -> 800 max
    market = market_with_debt(800, 800 * 10**6)
    report = evaluate_health(market, position(collateral=10, borrow_shares=800 * 10**6), PRICE_100)
    assert report.collateral_value == 1_000
    assert report.max_debt_value == 800
    assert report.debt_value == 800
    assert report.healthy


def test_one_unit_over_the_boundary():
    market = market_with_debt(801, 801 * 10**6)
    pos = position(collateral=10, borrow_shares=801 * 10**6)
    assert not is_healthy(market, pos, PRICE_100)
    with pytest.raises(UndercollateralizedError):
        check_health(market, pos, PRICE_100)


def test_debt_value_rounds_up():
    # 1 share of a 3 asset / 2 share pool is worth 4/1000002 of an asset -> 1 when rounded up
    market = market_with_debt(3, 2)
    report = evaluate_health(market, position(collateral=0, borrow_shares=1), PRICE_100)
    assert report.debt_value == 1
    assert not report.healthy


def test_default_price_adjusts_decimals():
    # 9 SOL (9 decimals) against 900 USDC (6 decimals)
    market = market_with_debt(720 * 10**6, 720 * 10**12, lltv=80_000_000)
    pos = position(collateral=9 * 10**9, borrow_shares=720 * 10**12)
    report = evaluate_health(market, pos, FIXED_ORACLE_PRICE)
    assert report.collateral_value == 900 * 10**6
    assert report.max_debt_value == 720 * 10**6
    assert is_healthy(market, pos)


def test_price_is_injected():
    market = market_with_debt(800, 800 * 10**6)
    pos = position(collateral=10, borrow_shares=800 * 10**6)
    assert is_healthy(market, pos, PRICE_100)
    assert not is_healthy(market, pos, PRICE_100 // 2)


def test_full_lltv_allows_borrowing_full_value():
    market = market_with_debt(1_000, 1_000 * 10**6, lltv=100_000_000)
    assert is_healthy(market, position(collateral=10, borrow_shares=1_000 * 10**6), PRICE_100)
