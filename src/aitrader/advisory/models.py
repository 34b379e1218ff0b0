"""Advisory data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from aitrader.ledger.models import TradeAction
from aitrader.market.models import PricePoint


class GateState(str, Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


@dataclass(frozen=True)
class AdvisoryRequest:
    """Snapshot of the market the advisory was computed against."""

    symbol: str
    window: tuple[PricePoint, ...]
    tick_index: int = 0
    run_id: Optional[str] = None

    @property
    def last_price(self) -> Optional[float]:
        return self.window[-1].price if self.window else None


@dataclass(frozen=True)
class Advisory:
    action: TradeAction
    suggested_amount: float
    explanation: str
    request: AdvisoryRequest
    fallback: bool = False

    def is_stale(self, tick_index: int) -> bool:
        return tick_index > self.request.tick_index

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "suggested_amount": self.suggested_amount,
            "explanation": self.explanation,
            "symbol": self.request.symbol,
            "tick_index": self.request.tick_index,
            "run_id": self.request.run_id,
            "window_size": len(self.request.window),
            "fallback": self.fallback,
        }
