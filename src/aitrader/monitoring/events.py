"""Consumer-facing events and a synchronous dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from aitrader.market.models import PricePoint

if TYPE_CHECKING:
    from aitrader.advisory.models import Advisory
    from aitrader.ledger.models import TradeRecord
    from aitrader.simulator.models import ResultsSummary
    from aitrader.survey.policy import SurveyMode


@dataclass(frozen=True)
class TickUpdated:
    run_id: str
    tick_index: int
    point: PricePoint


@dataclass(frozen=True)
class AdvisoryReady:
    run_id: str
    advisory: "Advisory"


@dataclass(frozen=True)
class TradeExecuted:
    run_id: str
    record: "TradeRecord"
    cash: float
    holding_qty: float


@dataclass(frozen=True)
class SurveyRequired:
    run_id: str
    mode: "SurveyMode"
    trade_count: int


@dataclass(frozen=True)
class RunCompleted:
    run_id: str
    summary: "ResultsSummary"


@dataclass(frozen=True)
class RunFailed:
    message: str
    run_id: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    severity: str
    message: str


Listener = Callable[[object], None]


class EventBus:
    """Delivers each event to every subscriber, in subscription order."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: object) -> None:
        for listener in list(self._listeners):
            listener(event)


class EventRecorder:
    """Subscriber that keeps every event, handy for headless runs and tests."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self.events: list[object] = []
        if bus is not None:
            bus.subscribe(self)

    def __call__(self, event: object) -> None:
        self.events.append(event)

    def of_type(self, kind: type) -> list:
        return [event for event in self.events if isinstance(event, kind)]
