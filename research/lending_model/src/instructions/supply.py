"""Supply loan assets to the market in exchange for supply shares"""
import logging

from ..events import SupplyEvent
from ..state.amount import ByAssets, Quantity
from ..utils.checked_math import U64, checked_add
from ..utils.interest import accrue_interest
from ..utils.shares_math import to_assets_up, to_shares_down
from .context import InstructionContext

logger = logging.getLogger(__name__)


def handler(ctx: InstructionContext, quantity: Quantity) -> SupplyEvent:
    """Deposit loan assets, minting shares rounded down (or charging assets rounded up)"""
    ctx.require_owner()
    loan_vault = ctx.require_loan_vault()
    market, position = ctx.scratch()

    ctx.record(accrue_interest(market, ctx.now()))

    if isinstance(quantity, ByAssets):
        assets = quantity.amount
        shares = to_shares_down(assets, market.total_supply_assets, market.total_supply_shares)
    else:
        shares = quantity.amount
        assets = to_assets_up(shares, market.total_supply_assets, market.total_supply_shares)

    logger.debug(
        "Supply calculation: assets=%d, shares=%d, total_assets=%d, total_shares=%d",
        assets,
        shares,
        market.total_supply_assets,
        market.total_supply_shares,
    )

    position.supply_shares = checked_add(position.supply_shares, shares, U64)
    market.total_supply_assets = checked_add(market.total_supply_assets, assets, U64)
    market.total_supply_shares = checked_add(market.total_supply_shares, shares, U64)

    ctx.custody.transfer(market.loan_token_mint, ctx.user, loan_vault, assets)

    event = SupplyEvent(
        market=market.key,
        user=ctx.user,
        assets=assets,
        shares=shares,
        total_supply_assets=market.total_supply_assets,
        total_supply_shares=market.total_supply_shares,
    )
    ctx.record(event)
    ctx.commit(market, position)

    logger.info(
        "Supply success: user=%s, assets=%d, shares=%d, user_total_shares=%d, market_total_supply=%d",
        ctx.user,
        assets,
        shares,
        position.supply_shares,
        market.total_supply_assets,
    )
    return event
