"""Entry points of the lending program

LendingProgram loads the market and position records from the store, runs
exactly one instruction handler against them and stores them back. Balances
are never cached between calls.
"""
import logging
from typing import Optional

from .collaborators import Clock, Custody, deliver_events, EventSink, RecordStore
from .constants import FIXED_ORACLE_PRICE
from .errors import MarketAlreadyInitializedError, UninitializedMarketError
from .events import (
    AccrueInterestEvent,
    BorrowEvent,
    RepayEvent,
    SupplyCollateralEvent,
    SupplyEvent,
    WithdrawCollateralEvent,
    WithdrawEvent,
)
from .instructions import (
    borrow,
    initialize_market,
    repay,
    supply,
    supply_collateral,
    withdraw,
    withdraw_collateral,
)
from .instructions.context import InstructionContext
from .state.amount import from_pair
from .state.market import Market, market_key
from .state.user_position import UserPosition, position_key
from .utils.health import evaluate_health, HealthReport, is_healthy
from .utils.interest import accrue_interest

logger = logging.getLogger(__name__)


class LendingProgram:
    def __init__(
        self,
        store: RecordStore,
        custody: Custody,
        clock: Clock,
        event_sink: Optional[EventSink] = None,
        price: int = FIXED_ORACLE_PRICE,
    ):
        self.store = store
        self.custody = custody
        self.clock = clock
        self.event_sink = event_sink
        self.price = price

    # -- record access -----------------------------------------------------

    def get_market(self, market: str) -> Market:
        loaded = self.store.load_market(market)
        if loaded is None:
            raise UninitializedMarketError(f"Market {market} is not initialized")
        return loaded

    def get_position(self, market: str, user: str) -> UserPosition:
        """Load a position, or a fresh zero position if the user never interacted"""
        loaded = self.store.load_position(position_key(market, user))
        if loaded is None:
            return UserPosition(user=user, market=market)
        return loaded

    def _context(self, market: str, user: str, owner: Optional[str] = None, **vaults) -> InstructionContext:
        return InstructionContext(
            market=self.get_market(market),
            user_position=self.get_position(market, owner or user),
            user=user,
            custody=self.custody,
            clock=self.clock,
            event_sink=self.event_sink,
            price=self.price,
            **vaults,
        )

    def _persist(self, ctx: InstructionContext) -> None:
        """Store the committed records, then deliver the operation's events"""
        self.store.store_market(ctx.market)
        self.store.store_position(ctx.user_position)
        ctx.flush()

    # -- instructions ------------------------------------------------------

    def initialize_market(
        self,
        authority: str,
        loan_token_mint: str,
        collateral_token_mint: str,
        lltv: int,
        loan_vault: Optional[str] = None,
        collateral_vault: Optional[str] = None,
    ) -> Market:
        """Create the market for a loan/collateral pair; each pair can be created once"""
        key = market_key(loan_token_mint, collateral_token_mint)
        if self.store.load_market(key) is not None:
            raise MarketAlreadyInitializedError(f"Market {key} already exists")
        market, event = initialize_market.handler(
            authority=authority,
            loan_token_mint=loan_token_mint,
            collateral_token_mint=collateral_token_mint,
            loan_vault=loan_vault or f"{key}:loan-vault",
            collateral_vault=collateral_vault or f"{key}:collateral-vault",
            lltv=lltv,
            clock=self.clock,
        )
        self.store.store_market(market)
        deliver_events(self.event_sink, [event])
        return market

    def supply(self, market: str, user: str, assets: int = 0, shares: int = 0,
               loan_vault: Optional[str] = None) -> SupplyEvent:
        ctx = self._context(market, user, loan_vault=loan_vault)
        event = supply.handler(ctx, from_pair(assets, shares))
        self._persist(ctx)
        return event

    def withdraw(self, market: str, user: str, assets: int = 0, shares: int = 0,
                 receiver: Optional[str] = None, loan_vault: Optional[str] = None) -> WithdrawEvent:
        ctx = self._context(market, user, loan_vault=loan_vault)
        event = withdraw.handler(ctx, from_pair(assets, shares), receiver)
        self._persist(ctx)
        return event

    def supply_collateral(self, market: str, user: str, amount: int,
                          collateral_vault: Optional[str] = None) -> SupplyCollateralEvent:
        ctx = self._context(market, user, collateral_vault=collateral_vault)
        event = supply_collateral.handler(ctx, amount)
        self._persist(ctx)
        return event

    def withdraw_collateral(self, market: str, user: str, amount: int,
                            receiver: Optional[str] = None,
                            collateral_vault: Optional[str] = None) -> WithdrawCollateralEvent:
        ctx = self._context(market, user, collateral_vault=collateral_vault)
        event = withdraw_collateral.handler(ctx, amount, receiver)
        self._persist(ctx)
        return event

    def borrow(self, market: str, user: str, assets: int = 0, shares: int = 0,
               loan_vault: Optional[str] = None) -> BorrowEvent:
        ctx = self._context(market, user, loan_vault=loan_vault)
        event = borrow.handler(ctx, from_pair(assets, shares))
        self._persist(ctx)
        return event

    def repay(self, market: str, payer: str, assets: int = 0, shares: int = 0,
              borrower: Optional[str] = None, loan_vault: Optional[str] = None) -> RepayEvent:
        """Repay `borrower`'s debt (the payer's own by default) with the payer's funds"""
        ctx = self._context(market, payer, owner=borrower, loan_vault=loan_vault)
        event = repay.handler(ctx, from_pair(assets, shares))
        self._persist(ctx)
        return event

    # -- read-only helpers -------------------------------------------------

    def accrue(self, market: str) -> Optional[AccrueInterestEvent]:
        """Accrue interest up to now and persist the market"""
        record = self.get_market(market)
        event = accrue_interest(record, self.clock.now())
        if event is not None:
            self.store.store_market(record)
            deliver_events(self.event_sink, [event])
        return event

    def is_healthy(self, market: str, user: str) -> bool:
        """Health of a position at the current time, without persisting the accrual"""
        record = self.get_market(market)
        accrue_interest(record, self.clock.now())
        return is_healthy(record, self.get_position(market, user), self.price)

    def health_report(self, market: str, user: str) -> HealthReport:
        """Like is_healthy, with the values behind the verdict"""
        record = self.get_market(market)
        accrue_interest(record, self.clock.now())
        return evaluate_health(record, self.get_position(market, user), self.price)
