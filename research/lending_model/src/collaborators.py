"""Interfaces to the world outside the accounting core, plus in-memory stand-ins

The core only ever calls:
    Custody.transfer(asset, source, destination, amount)  once per operation
    Clock.now()                                            monotonic seconds
    RecordStore load/store                                 serialized by the host
    EventSink.emit(event)                                  informational only
"""
import logging
import time
from collections import defaultdict
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, Tuple

from .errors import InvalidTimestampError, TransferError
from .events import Event
from .state.market import Market
from .state.user_position import UserPosition

logger = logging.getLogger(__name__)


class Custody(Protocol):
    def transfer(self, asset: str, source: str, destination: str, amount: int) -> None:
        """Move `amount` of `asset`; raise TransferError on failure"""
        ...


class Clock(Protocol):
    def now(self) -> int:
        ...


class RecordStore(Protocol):
    def load_market(self, key: str) -> Optional[Market]:
        ...

    def store_market(self, market: Market) -> None:
        ...

    def load_position(self, key: str) -> Optional[UserPosition]:
        ...

    def store_position(self, position: UserPosition) -> None:
        ...


class EventSink(Protocol):
    def emit(self, event: Event) -> None:
        ...


class InMemoryCustody:
    """Token balances keyed by (asset, account)"""

    def __init__(self):
        self.balances: Dict[Tuple[str, str], int] = defaultdict(int)
        self.transfers: List[Tuple[str, str, str, int]] = []

    def mint(self, asset: str, account: str, amount: int) -> None:
        self.balances[(asset, account)] += amount

    def balance_of(self, asset: str, account: str) -> int:
        return self.balances.get((asset, account), 0)

    def transfer(self, asset: str, source: str, destination: str, amount: int) -> None:
        if amount < 0:
            raise TransferError(f"Negative transfer amount: {amount}")
        available = self.balance_of(asset, source)
        if available < amount:
            raise TransferError(
                f"Insufficient {asset} balance in {source}: have {available}, need {amount}"
            )
        self.balances[(asset, source)] = available - amount
        self.balances[(asset, destination)] += amount
        self.transfers.append((asset, source, destination, amount))
        logger.debug("Transfer %s: %s -> %s amount=%d", asset, source, destination, amount)


class SystemClock:
    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock whose time only moves when told to"""

    def __init__(self, start: int = 0):
        self.current = start

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise InvalidTimestampError("ManualClock cannot move backwards")
        self.current += seconds
        return self.current

    def set(self, timestamp: int) -> None:
        self.current = timestamp


class InMemoryRecordStore:
    """Stores independent copies so callers cannot mutate persisted state by accident"""

    def __init__(self):
        self.markets: Dict[str, Market] = {}
        self.positions: Dict[str, UserPosition] = {}

    def load_market(self, key: str) -> Optional[Market]:
        stored = self.markets.get(key)
        return replace(stored) if stored is not None else None

    def store_market(self, market: Market) -> None:
        self.markets[market.key] = replace(market)

    def load_position(self, key: str) -> Optional[UserPosition]:
        stored = self.positions.get(key)
        return replace(stored) if stored is not None else None

    def store_position(self, position: UserPosition) -> None:
        self.positions[position.key] = replace(position)


class ListEventSink:
    def __init__(self):
        self.events: List[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: type) -> List[Event]:
        return [e for e in self.events if isinstance(e, event_type)]


class LoggingEventSink:
    def __init__(self, level: int = logging.INFO):
        self.level = level

    def emit(self, event: Event) -> None:
        logger.log(self.level, "%s %s", type(event).__name__, event.to_dict())


def deliver_events(sink: Optional[EventSink], events: List[Event]) -> None:
    """Hand events to the sink after the operation is stored; sink failures are logged only"""
    if sink is None:
        return
    for event in events:
        try:
            sink.emit(event)
        except Exception:
            logger.exception("Event sink failed to take %s", type(event).__name__)
