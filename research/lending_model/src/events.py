"""Structured records emitted after each committed operation"""
from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Event:
    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["event"] = type(self).__name__
        return payload


@dataclass(frozen=True)
class MarketInitializedEvent(Event):
    market: str
    authority: str
    loan_token_mint: str
    collateral_token_mint: str
    lltv: int
    timestamp: int


@dataclass(frozen=True)
class AccrueInterestEvent(Event):
    interest: int
    total_borrow_assets: int
    total_supply_assets: int
    elapsed_seconds: int
    timestamp: int


@dataclass(frozen=True)
class SupplyEvent(Event):
    market: str
    user: str
    assets: int
    shares: int
    total_supply_assets: int
    total_supply_shares: int


@dataclass(frozen=True)
class WithdrawEvent(Event):
    market: str
    user: str
    receiver: str
    assets: int
    shares: int
    total_supply_assets: int
    total_supply_shares: int


@dataclass(frozen=True)
class SupplyCollateralEvent(Event):
    market: str
    user: str
    amount: int
    total_collateral: int


@dataclass(frozen=True)
class WithdrawCollateralEvent(Event):
    market: str
    user: str
    receiver: str
    assets: int
    remaining_collateral: int


@dataclass(frozen=True)
class BorrowEvent(Event):
    market: str
    user: str
    assets: int
    shares: int
    total_borrow_assets: int
    total_borrow_shares: int


@dataclass(frozen=True)
class RepayEvent(Event):
    market: str
    payer: str
    borrower: str
    assets: int
    shares: int
    remaining_borrow_shares: int
    total_borrow_assets: int
    total_borrow_shares: int
