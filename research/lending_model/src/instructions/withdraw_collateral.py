"""Withdraw collateral, provided the position stays healthy"""
import logging
from typing import Optional

from ..errors import InsufficientCollateralError, UndercollateralizedError, ZeroAmountError
from ..events import WithdrawCollateralEvent
from ..utils.checked_math import require_u64
from ..utils.health import check_health
from ..utils.interest import accrue_interest
from .context import InstructionContext

logger = logging.getLogger(__name__)


def handler(
    ctx: InstructionContext,
    amount: int,
    receiver: Optional[str] = None,
) -> WithdrawCollateralEvent:
    """Release collateral to the receiver if the remaining collateral still covers the debt"""
    require_u64("amount", amount)
    if amount == 0:
        raise ZeroAmountError("Collateral amount must be greater than zero")
    ctx.require_owner()
    collateral_vault = ctx.require_collateral_vault()
    receiver = receiver or ctx.user
    market, position = ctx.scratch()

    # debt value depends on up-to-date borrow totals
    ctx.record(accrue_interest(market, ctx.now()))

    logger.debug(
        "Withdraw collateral: user=%s, amount=%d, current_collateral=%d",
        ctx.user,
        amount,
        position.collateral_amount,
    )
    if amount > position.collateral_amount:
        raise InsufficientCollateralError(
            f"Withdraw of {amount} exceeds deposited collateral {position.collateral_amount}"
        )
    position.collateral_amount -= amount

    try:
        check_health(market, position, ctx.price)
    except UndercollateralizedError:
        logger.warning("Withdraw collateral rejected for %s: position would be unhealthy", ctx.user)
        raise

    ctx.custody.transfer(market.collateral_token_mint, collateral_vault, receiver, amount)

    event = WithdrawCollateralEvent(
        market=market.key,
        user=ctx.user,
        receiver=receiver,
        assets=amount,
        remaining_collateral=position.collateral_amount,
    )
    ctx.record(event)
    ctx.commit(market, position)

    logger.info(
        "Withdraw collateral success: user=%s, amount=%d, remaining_collateral=%d",
        ctx.user,
        amount,
        position.collateral_amount,
    )
    return event
