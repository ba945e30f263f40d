"""Position health evaluation

A position is healthy when

    collateral_amount * price / PRICE_PRECISION * lltv / LLTV_PRECISION >= debt_value

where debt_value converts the borrow shares to assets rounding up, so the
check never under-estimates what the borrower owes.
"""
import logging
from dataclasses import dataclass

from ..constants import FIXED_ORACLE_PRICE, LLTV_PRECISION, PRICE_PRECISION
from ..errors import UndercollateralizedError
from ..state.market import Market
from ..state.user_position import UserPosition
from .checked_math import U128, checked_div, checked_mul
from .shares_math import to_assets_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthReport:
    debt_value: int
    collateral_value: int
    max_debt_value: int

    @property
    def healthy(self) -> bool:
        return self.debt_value <= self.max_debt_value


def evaluate_health(
    market: Market,
    position: UserPosition,
    price: int = FIXED_ORACLE_PRICE,
) -> HealthReport:
    """Debt value, collateral value and borrowing limit of a position at `price`"""
    if position.borrow_shares == 0:
        debt_value = 0
    else:
        debt_value = to_assets_up(
            position.borrow_shares,
            market.total_borrow_assets,
            market.total_borrow_shares,
        )
    collateral_value = checked_div(
        checked_mul(position.collateral_amount, price, U128), PRICE_PRECISION
    )
    max_debt_value = checked_div(
        checked_mul(collateral_value, market.lltv, U128), LLTV_PRECISION
    )
    return HealthReport(
        debt_value=debt_value,
        collateral_value=collateral_value,
        max_debt_value=max_debt_value,
    )


def is_healthy(market: Market, position: UserPosition, price: int = FIXED_ORACLE_PRICE) -> bool:
    """True if the position's debt is covered by its collateral at `price`"""
    if position.borrow_shares == 0:
        return True
    return evaluate_health(market, position, price).healthy


def check_health(market: Market, position: UserPosition, price: int = FIXED_ORACLE_PRICE) -> None:
    """Raise UndercollateralizedError if the position is not healthy"""
    if position.borrow_shares == 0:
        return
    report = evaluate_health(market, position, price)
    logger.debug(
        "Health check: collateral_value=%d, borrow_value=%d, max_borrow=%d, lltv=%d",
        report.collateral_value,
        report.debt_value,
        report.max_debt_value,
        market.lltv,
    )
    if not report.healthy:
        raise UndercollateralizedError(
            f"Position {position.user} is undercollateralized: "
            f"debt={report.debt_value} > max={report.max_debt_value}"
        )
