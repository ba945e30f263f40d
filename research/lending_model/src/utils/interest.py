"""Linear interest accrual

A fixed 5% annual rate is applied to outstanding debt without compounding:

    rate_per_second = FIXED_ANNUAL_RATE_WAD // SECONDS_PER_YEAR
    interest = total_borrow_assets * rate_per_second * elapsed // WAD

All interest goes to suppliers, so total_borrow_assets and
total_supply_assets grow by the same amount and the liquidity invariant
total_borrow_assets <= total_supply_assets survives the passage of time.
"""
import logging
from typing import Optional

from ..constants import FIXED_ANNUAL_RATE_WAD, SECONDS_PER_YEAR, WAD
from ..errors import InvalidTimestampError
from ..events import AccrueInterestEvent
from ..state.market import Market
from .checked_math import U64, U128, checked_add, checked_div, checked_mul, to_u64

logger = logging.getLogger(__name__)


def rate_per_second() -> int:
    """Annual rate in WAD spread evenly over a year of seconds, truncated"""
    return checked_div(FIXED_ANNUAL_RATE_WAD, SECONDS_PER_YEAR)


def calculate_interest(total_borrow_assets: int, elapsed: int) -> int:
    """Interest owed on total_borrow_assets after elapsed seconds"""
    if elapsed < 0:
        raise InvalidTimestampError(f"Negative elapsed time: {elapsed}")
    interest = checked_mul(
        checked_mul(total_borrow_assets, rate_per_second(), U128),
        elapsed,
        U128,
    )
    return to_u64(checked_div(interest, WAD))


def accrue_interest(market: Market, now: int) -> Optional[AccrueInterestEvent]:
    """Advance market totals to `now`.

    Returns None when no time has elapsed. Raises InvalidTimestampError if
    the clock reads earlier than market.last_update.
    """
    if now is None:
        raise InvalidTimestampError("Clock unavailable")
    elapsed = now - market.last_update
    if elapsed < 0:
        raise InvalidTimestampError(
            f"Clock went backwards: now={now}, last_update={market.last_update}"
        )
    if elapsed == 0:
        return None

    interest = calculate_interest(market.total_borrow_assets, elapsed)

    # compute both before assigning so an overflow leaves the market untouched
    total_borrow_assets = checked_add(market.total_borrow_assets, interest, U64)
    total_supply_assets = checked_add(market.total_supply_assets, interest, U64)

    market.total_borrow_assets = total_borrow_assets
    market.total_supply_assets = total_supply_assets
    market.last_update = now

    logger.debug(
        "Interest accrued: interest=%d, elapsed=%ds, new_borrow=%d, new_supply=%d",
        interest,
        elapsed,
        market.total_borrow_assets,
        market.total_supply_assets,
    )
    return AccrueInterestEvent(
        interest=interest,
        total_borrow_assets=market.total_borrow_assets,
        total_supply_assets=market.total_supply_assets,
        elapsed_seconds=elapsed,
        timestamp=now,
    )
