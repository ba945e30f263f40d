"""Borrow loan assets against deposited collateral"""
import logging

from ..errors import InsufficientLiquidityError, UndercollateralizedError
from ..events import BorrowEvent
from ..state.amount import ByAssets, Quantity
from ..utils.checked_math import U64, checked_add
from ..utils.health import check_health
from ..utils.interest import accrue_interest
from ..utils.shares_math import to_assets_down, to_shares_up
from .context import InstructionContext

logger = logging.getLogger(__name__)


def handler(ctx: InstructionContext, quantity: Quantity) -> BorrowEvent:
    """Mint borrow shares rounded up (or pay out assets rounded down).

    The market must hold enough unborrowed liquidity and the position must
    remain healthy with the new debt, otherwise nothing changes.
    """
    ctx.require_owner()
    loan_vault = ctx.require_loan_vault()
    market, position = ctx.scratch()

    ctx.record(accrue_interest(market, ctx.now()))

    if isinstance(quantity, ByAssets):
        assets = quantity.amount
        shares = to_shares_up(assets, market.total_borrow_assets, market.total_borrow_shares)
    else:
        shares = quantity.amount
        assets = to_assets_down(shares, market.total_borrow_assets, market.total_borrow_shares)

    logger.debug(
        "Borrow calculation: assets=%d, shares=%d, total_borrow_assets=%d, total_borrow_shares=%d",
        assets,
        shares,
        market.total_borrow_assets,
        market.total_borrow_shares,
    )

    if market.available_liquidity < assets:
        logger.warning(
            "Borrow rejected: requested=%d, available=%d", assets, market.available_liquidity
        )
        raise InsufficientLiquidityError(
            f"Borrow of {assets} exceeds available liquidity {market.available_liquidity}"
        )

    position.borrow_shares = checked_add(position.borrow_shares, shares, U64)
    market.total_borrow_assets = checked_add(market.total_borrow_assets, assets, U64)
    market.total_borrow_shares = checked_add(market.total_borrow_shares, shares, U64)

    try:
        check_health(market, position, ctx.price)
    except UndercollateralizedError:
        logger.warning("Borrow rejected for %s: position would be unhealthy", ctx.user)
        raise

    if market.total_borrow_assets > market.total_supply_assets:
        raise InsufficientLiquidityError(
            f"Total borrow {market.total_borrow_assets} exceeds total supply {market.total_supply_assets}"
        )

    ctx.custody.transfer(market.loan_token_mint, loan_vault, ctx.user, assets)

    event = BorrowEvent(
        market=market.key,
        user=ctx.user,
        assets=assets,
        shares=shares,
        total_borrow_assets=market.total_borrow_assets,
        total_borrow_shares=market.total_borrow_shares,
    )
    ctx.record(event)
    ctx.commit(market, position)

    logger.info(
        "Borrow success: user=%s, assets=%d, shares=%d, user_total_borrow_shares=%d, "
        "market_total_borrow=%d, collateral=%d",
        ctx.user,
        assets,
        shares,
        position.borrow_shares,
        market.total_borrow_assets,
        position.collateral_amount,
    )
    return event
