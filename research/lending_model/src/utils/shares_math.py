"""Virtual shares conversion between asset amounts and share amounts

Every conversion is offset by VIRTUAL_SHARES and VIRTUAL_ASSETS so that the
first depositor cannot inflate the share price by transferring assets to the
vault directly. With an empty market, 1 asset is always worth
VIRTUAL_SHARES shares.

    to_shares = assets * (total_shares + VIRTUAL_SHARES) / (total_assets + VIRTUAL_ASSETS)
    to_assets = shares * (total_assets + VIRTUAL_ASSETS) / (total_shares + VIRTUAL_SHARES)

Rounding direction always favours the protocol:
    supply  -> shares down / assets up
    withdraw-> shares up   / assets down
    borrow  -> shares up   / assets down
    repay   -> shares down / assets up
    health  -> assets up
"""
from enum import Enum

from ..constants import VIRTUAL_ASSETS, VIRTUAL_SHARES
from .checked_math import (
    U128,
    checked_add,
    checked_div,
    checked_div_up,
    checked_mul,
    require_u64,
    to_u64,
)


class Rounding(str, Enum):
    DOWN = "down"
    UP = "up"


def _mul_div(amount: int, numerator: int, denominator: int, rounding: Rounding) -> int:
    """amount * numerator / denominator in 128 bits, narrowed to u64"""
    product = checked_mul(amount, numerator, U128)
    if rounding is Rounding.UP:
        result = checked_div_up(product, denominator, U128)
    else:
        result = checked_div(product, denominator)
    return to_u64(result)


def assets_to_shares(
    amount: int,
    total_assets: int,
    total_shares: int,
    rounding: Rounding = Rounding.DOWN,
) -> int:
    """Convert an asset amount to shares of a pool"""
    require_u64("amount", amount)
    require_u64("total_assets", total_assets)
    require_u64("total_shares", total_shares)
    shares_with_offset = checked_add(total_shares, VIRTUAL_SHARES, U128)
    assets_with_offset = checked_add(total_assets, VIRTUAL_ASSETS, U128)
    return _mul_div(amount, shares_with_offset, assets_with_offset, Rounding(rounding))


def shares_to_assets(
    amount: int,
    total_assets: int,
    total_shares: int,
    rounding: Rounding = Rounding.DOWN,
) -> int:
    """Convert a share amount to assets of a pool"""
    require_u64("amount", amount)
    require_u64("total_assets", total_assets)
    require_u64("total_shares", total_shares)
    assets_with_offset = checked_add(total_assets, VIRTUAL_ASSETS, U128)
    shares_with_offset = checked_add(total_shares, VIRTUAL_SHARES, U128)
    return _mul_div(amount, assets_with_offset, shares_with_offset, Rounding(rounding))


def to_shares_down(assets: int, total_assets: int, total_shares: int) -> int:
    """Shares minted for a deposit of assets, or burned for a repayment of assets"""
    return assets_to_shares(assets, total_assets, total_shares, Rounding.DOWN)


def to_shares_up(assets: int, total_assets: int, total_shares: int) -> int:
    """Shares burned for a withdrawal of assets, or owed for a borrow by assets"""
    return assets_to_shares(assets, total_assets, total_shares, Rounding.UP)


def to_assets_down(shares: int, total_assets: int, total_shares: int) -> int:
    """Assets paid out for burned supply shares, or lent for a borrow by shares"""
    return shares_to_assets(shares, total_assets, total_shares, Rounding.DOWN)


def to_assets_up(shares: int, total_assets: int, total_shares: int) -> int:
    """Assets charged for minted supply shares or repaid borrow shares"""
    return shares_to_assets(shares, total_assets, total_shares, Rounding.UP)
