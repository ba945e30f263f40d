"""Dual-mode quantities for supply, withdraw, borrow and repay

An operation is sized either by an asset amount or by a share amount; the
other side is derived through the virtual shares conversion.
"""
from dataclasses import dataclass
from typing import Union

from ..errors import InconsistentInputError
from ..utils.checked_math import require_u64


@dataclass(frozen=True)
class ByAssets:
    amount: int

    def __post_init__(self):
        require_u64("assets", self.amount)
        if self.amount == 0:
            raise InconsistentInputError("Asset amount must be non-zero")


@dataclass(frozen=True)
class ByShares:
    amount: int

    def __post_init__(self):
        require_u64("shares", self.amount)
        if self.amount == 0:
            raise InconsistentInputError("Share amount must be non-zero")


Quantity = Union[ByAssets, ByShares]


def from_pair(assets: int, shares: int) -> Quantity:
    """Build a quantity from an (assets, shares) pair where exactly one is non-zero"""
    require_u64("assets", assets)
    require_u64("shares", shares)
    if (assets > 0) == (shares > 0):
        raise InconsistentInputError(
            f"Exactly one of assets or shares must be non-zero (assets={assets}, shares={shares})"
        )
    return ByAssets(assets) if assets > 0 else ByShares(shares)
