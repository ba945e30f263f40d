"""Accounts and collaborators handed to every instruction handler

Handlers never mutate the live records directly. They work on scratch copies
returned by `scratch()`, request the single custody transfer once every check
has passed, and only then call `commit()` to write the copies back. A failure
anywhere before commit leaves the live records exactly as they were.
Events are held until `flush()`, after the caller has stored the records.
"""
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from ..collaborators import Clock, Custody, EventSink, deliver_events
from ..constants import FIXED_ORACLE_PRICE
from ..errors import InvalidTimestampError, InvalidVaultError, UnauthorizedError
from ..events import Event
from ..state.market import Market
from ..state.user_position import UserPosition


@dataclass
class InstructionContext:
    market: Market
    user_position: UserPosition
    user: str  # signer of the instruction
    custody: Custody
    clock: Clock
    event_sink: Optional[EventSink] = None
    price: int = FIXED_ORACLE_PRICE
    # vault references supplied by the caller, checked against the market
    loan_vault: Optional[str] = None
    collateral_vault: Optional[str] = None
    pending_events: List[Event] = field(default_factory=list)

    def now(self) -> int:
        timestamp = self.clock.now()
        if timestamp is None:
            raise InvalidTimestampError("Clock unavailable")
        return timestamp

    def scratch(self) -> Tuple[Market, UserPosition]:
        return replace(self.market), replace(self.user_position)

    def require_owner(self) -> None:
        if self.user_position.user != self.user:
            raise UnauthorizedError(
                f"{self.user} does not own position of {self.user_position.user}"
            )
        if self.user_position.market != self.market.key:
            raise UnauthorizedError(
                f"Position belongs to {self.user_position.market}, not {self.market.key}"
            )

    def require_loan_vault(self) -> str:
        return self._check_vault(self.loan_vault, self.market.loan_vault)

    def require_collateral_vault(self) -> str:
        return self._check_vault(self.collateral_vault, self.market.collateral_vault)

    @staticmethod
    def _check_vault(provided: Optional[str], expected: str) -> str:
        if provided is not None and provided != expected:
            raise InvalidVaultError(f"Vault {provided} does not match market vault {expected}")
        return expected

    def record(self, event: Optional[Event]) -> None:
        if event is not None:
            self.pending_events.append(event)

    def commit(self, market: Market, position: UserPosition) -> None:
        """Write scratch records back"""
        self.market.copy_from(market)
        self.user_position.copy_from(position)

    def flush(self) -> None:
        """Deliver buffered events; called once the records are stored"""
        events, self.pending_events = self.pending_events, []
        deliver_events(self.event_sink, events)
