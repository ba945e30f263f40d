"""Market creation"""
import logging
from typing import Tuple

from ..collaborators import Clock
from ..constants import MAX_LLTV
from ..errors import InvalidLltvError
from ..events import MarketInitializedEvent
from ..state.market import Market
from ..utils.checked_math import require_u64

logger = logging.getLogger(__name__)


def handler(
    authority: str,
    loan_token_mint: str,
    collateral_token_mint: str,
    loan_vault: str,
    collateral_vault: str,
    lltv: int,
    clock: Clock,
) -> Tuple[Market, MarketInitializedEvent]:
    """Create a market with zero totals, stamped with the current time"""
    require_u64("lltv", lltv)
    if not 0 < lltv <= MAX_LLTV:
        raise InvalidLltvError(f"Invalid LLTV {lltv}: must be between 0 and {MAX_LLTV}")

    market = Market(
        authority=authority,
        loan_token_mint=loan_token_mint,
        collateral_token_mint=collateral_token_mint,
        loan_vault=loan_vault,
        collateral_vault=collateral_vault,
        lltv=lltv,
        last_update=clock.now(),
    )
    logger.info(
        "Market initialized: loan_mint=%s, collateral_mint=%s, lltv=%d",
        loan_token_mint,
        collateral_token_mint,
        lltv,
    )
    event = MarketInitializedEvent(
        market=market.key,
        authority=authority,
        loan_token_mint=loan_token_mint,
        collateral_token_mint=collateral_token_mint,
        lltv=lltv,
        timestamp=market.last_update,
    )
    return market, event
