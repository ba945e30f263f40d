"""Deposit collateral into the market's collateral vault"""
import logging

from ..errors import ZeroAmountError
from ..events import SupplyCollateralEvent
from ..utils.checked_math import U64, checked_add, require_u64
from .context import InstructionContext

logger = logging.getLogger(__name__)


def handler(ctx: InstructionContext, amount: int) -> SupplyCollateralEvent:
    """Credit collateral 1:1. No accrual since no totals are touched."""
    require_u64("amount", amount)
    if amount == 0:
        raise ZeroAmountError("Collateral amount must be greater than zero")
    ctx.require_owner()
    collateral_vault = ctx.require_collateral_vault()
    market, position = ctx.scratch()

    position.collateral_amount = checked_add(position.collateral_amount, amount, U64)

    ctx.custody.transfer(market.collateral_token_mint, ctx.user, collateral_vault, amount)

    event = SupplyCollateralEvent(
        market=market.key,
        user=ctx.user,
        amount=amount,
        total_collateral=position.collateral_amount,
    )
    ctx.record(event)
    ctx.commit(market, position)

    logger.info(
        "SupplyCollateral: user=%s, amount=%d, total_collateral=%d",
        ctx.user,
        amount,
        position.collateral_amount,
    )
    return event
