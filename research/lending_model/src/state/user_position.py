"""User position state management"""
from dataclasses import dataclass, fields

from ..utils.checked_math import require_u64

USER_POSITION_SEED_PREFIX = "user-position"


@dataclass
class UserPosition:
    """A participant's claims on one market"""
    user: str  # Using string instead of Pubkey
    market: str  # key of the owning market
    supply_shares: int = 0  # u64
    borrow_shares: int = 0  # u64
    collateral_amount: int = 0  # u64, collateral token base units

    def __post_init__(self):
        require_u64("supply_shares", self.supply_shares)
        require_u64("borrow_shares", self.borrow_shares)
        require_u64("collateral_amount", self.collateral_amount)

    @property
    def key(self) -> str:
        return position_key(self.market, self.user)

    @property
    def is_empty(self) -> bool:
        return self.supply_shares == 0 and self.borrow_shares == 0 and self.collateral_amount == 0

    def copy_from(self, other: "UserPosition") -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))


def position_key(market_key: str, user: str) -> str:
    """Store key of a user's position in a market"""
    return f"{USER_POSITION_SEED_PREFIX}:{market_key}:{user}"
