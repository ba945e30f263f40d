"""Market state management"""
from dataclasses import dataclass, fields

from ..constants import I64_MAX, I64_MIN, MAX_LLTV
from ..errors import InvalidLltvError, InvalidTimestampError
from ..utils.checked_math import require_u64

MARKET_SEED_PREFIX = "market"


@dataclass
class Market:
    """Represents a lending market for one loan/collateral asset pair"""
    authority: str  # Using string instead of Pubkey
    loan_token_mint: str
    collateral_token_mint: str
    loan_vault: str
    collateral_vault: str
    lltv: int  # u64, precision LLTV_PRECISION
    last_update: int = 0  # i64 unix timestamp
    total_supply_assets: int = 0  # u64
    total_supply_shares: int = 0  # u64
    total_borrow_assets: int = 0  # u64
    total_borrow_shares: int = 0  # u64

    _TOTALS = (
        "total_supply_assets",
        "total_supply_shares",
        "total_borrow_assets",
        "total_borrow_shares",
    )

    def __post_init__(self):
        self.validate()

    @property
    def key(self) -> str:
        return market_key(self.loan_token_mint, self.collateral_token_mint)

    @property
    def available_liquidity(self) -> int:
        """Loan assets supplied but not borrowed"""
        return self.total_supply_assets - self.total_borrow_assets

    def validate(self) -> None:
        """Check field widths and the LLTV bound"""
        for name in self._TOTALS:
            require_u64(name, getattr(self, name))
        require_u64("lltv", self.lltv)
        if not 0 < self.lltv <= MAX_LLTV:
            raise InvalidLltvError(f"lltv={self.lltv} must be in (0, {MAX_LLTV}]")
        if not I64_MIN <= self.last_update <= I64_MAX:
            raise InvalidTimestampError(f"last_update={self.last_update} is outside the i64 range")

    def copy_from(self, other: "Market") -> None:
        """Overwrite every field with the values of another market"""
        for f in fields(self):
            setattr(self, f.name, getattr(other, f.name))


def market_key(loan_token_mint: str, collateral_token_mint: str) -> str:
    """Deterministic record key for a loan/collateral pair"""
    return f"{MARKET_SEED_PREFIX}:{loan_token_mint}:{collateral_token_mint}"
