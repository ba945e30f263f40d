"""Withdraw loan assets by burning supply shares"""
import logging
from typing import Optional

from ..errors import InsufficientLiquidityError, InsufficientSupplyError, MathOverflowError
from ..events import WithdrawEvent
from ..state.amount import ByAssets, Quantity
from ..utils.interest import accrue_interest
from ..utils.shares_math import to_assets_down, to_shares_up
from .context import InstructionContext

logger = logging.getLogger(__name__)


def handler(
    ctx: InstructionContext,
    quantity: Quantity,
    receiver: Optional[str] = None,
) -> WithdrawEvent:
    """Burn supply shares rounded up (or pay out assets rounded down)"""
    ctx.require_owner()
    loan_vault = ctx.require_loan_vault()
    receiver = receiver or ctx.user
    market, position = ctx.scratch()

    ctx.record(accrue_interest(market, ctx.now()))

    if isinstance(quantity, ByAssets):
        assets = quantity.amount
        shares = to_shares_up(assets, market.total_supply_assets, market.total_supply_shares)
    else:
        shares = quantity.amount
        assets = to_assets_down(shares, market.total_supply_assets, market.total_supply_shares)

    logger.debug(
        "Withdraw calculation: assets=%d, shares=%d, user_shares=%d",
        assets,
        shares,
        position.supply_shares,
    )

    if shares > position.supply_shares:
        raise InsufficientSupplyError(
            f"Withdraw of {shares} shares exceeds position balance {position.supply_shares}"
        )
    if shares > market.total_supply_shares or assets > market.total_supply_assets:
        raise MathOverflowError("Withdraw exceeds market supply totals")

    position.supply_shares -= shares
    market.total_supply_shares -= shares
    market.total_supply_assets -= assets

    if market.total_borrow_assets > market.total_supply_assets:
        logger.warning(
            "Withdraw rejected: borrow=%d would exceed supply=%d",
            market.total_borrow_assets,
            market.total_supply_assets,
        )
        raise InsufficientLiquidityError(
            f"Withdrawing {assets} leaves {market.total_supply_assets} supplied "
            f"against {market.total_borrow_assets} borrowed"
        )

    ctx.custody.transfer(market.loan_token_mint, loan_vault, receiver, assets)

    event = WithdrawEvent(
        market=market.key,
        user=ctx.user,
        receiver=receiver,
        assets=assets,
        shares=shares,
        total_supply_assets=market.total_supply_assets,
        total_supply_shares=market.total_supply_shares,
    )
    ctx.record(event)
    ctx.commit(market, position)

    logger.info(
        "Withdraw success: user=%s, assets=%d, shares=%d, remaining_shares=%d, new_total_supply=%d",
        ctx.user,
        assets,
        shares,
        position.supply_shares,
        market.total_supply_assets,
    )
    return event
