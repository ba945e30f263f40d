"""Shared fixtures for the lending model tests"""
import pytest

from lending_model.src.collaborators import (
    InMemoryCustody,
    InMemoryRecordStore,
    ListEventSink,
    ManualClock,
)
from lending_model.src.constants import PRICE_PRECISION
from lending_model.src.program import LendingProgram

START_TIME = 1_700_000_000
LOAN = "USDC"
COLLATERAL = "SOL"
# 100 loan units per collateral unit, no decimal adjustment
PRICE_100 = 100 * PRICE_PRECISION
LLTV_80 = 80_000_000


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(start=START_TIME)


@pytest.fixture()
def custody() -> InMemoryCustody:
    return InMemoryCustody()


@pytest.fixture()
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture()
def events() -> ListEventSink:
    return ListEventSink()


@pytest.fixture()
def program(store, custody, clock, events) -> LendingProgram:
    return LendingProgram(store=store, custody=custody, clock=clock, event_sink=events, price=PRICE_100)


@pytest.fixture()
def market(program) -> str:
    return program.initialize_market(
        authority="admin",
        loan_token_mint=LOAN,
        collateral_token_mint=COLLATERAL,
        lltv=LLTV_80,
    ).key


@pytest.fixture()
def fund(custody):
    """Give a user loan and collateral balances"""
    def _fund(user: str, loan: int = 0, collateral: int = 0) -> None:
        if loan:
            custody.mint(LOAN, user, loan)
        if collateral:
            custody.mint(COLLATERAL, user, collateral)
    return _fund


@pytest.fixture()
def borrowed_market(program, market, fund):
    """Lender supplied 1000, borrower posted 10 collateral and borrowed 800"""
    fund("lender", loan=1000)
    fund("borrower", loan=100, collateral=10)
    program.supply(market, "lender", assets=1000)
    program.supply_collateral(market, "borrower", 10)
    program.borrow(market, "borrower", assets=800)
    return market
