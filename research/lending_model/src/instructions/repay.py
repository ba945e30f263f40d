"""Repay debt on behalf of a borrower"""
import logging

from ..errors import InsufficientBorrowError
from ..events import RepayEvent
from ..state.amount import ByAssets, Quantity
from ..utils.checked_math import saturating_sub
from ..utils.interest import accrue_interest
from ..utils.shares_math import to_assets_up, to_shares_down
from .context import InstructionContext

logger = logging.getLogger(__name__)


def handler(ctx: InstructionContext, quantity: Quantity) -> RepayEvent:
    """Burn borrow shares rounded down (or charge assets rounded up).

    The payer (ctx.user) need not own the position. Paying more assets than
    the position owes repays the position in full and charges only its debt.
    Derived amounts can disagree with the recorded totals by one unit of
    rounding, so every subtraction floors at zero instead of failing.
    """
    borrower = ctx.user_position.user
    loan_vault = ctx.require_loan_vault()
    market, position = ctx.scratch()
    if position.borrow_shares == 0:
        raise InsufficientBorrowError(f"{borrower} has no debt to repay")

    ctx.record(accrue_interest(market, ctx.now()))

    if isinstance(quantity, ByAssets):
        assets = quantity.amount
        shares = to_shares_down(assets, market.total_borrow_assets, market.total_borrow_shares)
        if shares > position.borrow_shares:
            # overpayment settles the whole position and charges only what it owes
            shares = position.borrow_shares
            assets = to_assets_up(shares, market.total_borrow_assets, market.total_borrow_shares)
    else:
        shares = quantity.amount
        if shares > position.borrow_shares:
            raise InsufficientBorrowError(
                f"Repay of {shares} shares exceeds borrower debt of {position.borrow_shares} shares"
            )
        assets = to_assets_up(shares, market.total_borrow_assets, market.total_borrow_shares)

    logger.debug(
        "Repay calculation: assets=%d, shares=%d, borrower_shares=%d",
        assets,
        shares,
        position.borrow_shares,
    )

    position.borrow_shares = saturating_sub(position.borrow_shares, shares)
    market.total_borrow_shares = saturating_sub(market.total_borrow_shares, shares)
    market.total_borrow_assets = saturating_sub(market.total_borrow_assets, assets)

    ctx.custody.transfer(market.loan_token_mint, ctx.user, loan_vault, assets)

    event = RepayEvent(
        market=market.key,
        payer=ctx.user,
        borrower=borrower,
        assets=assets,
        shares=shares,
        remaining_borrow_shares=position.borrow_shares,
        total_borrow_assets=market.total_borrow_assets,
        total_borrow_shares=market.total_borrow_shares,
    )
    ctx.record(event)
    ctx.commit(market, position)

    logger.info(
        "Repay: payer=%s, borrower=%s, assets=%d, shares=%d, remaining_borrow_shares=%d",
        ctx.user,
        borrower,
        assets,
        shares,
        position.borrow_shares,
    )
    return event
