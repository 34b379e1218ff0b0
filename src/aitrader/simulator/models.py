"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from aitrader.advisory.models import Advisory
from aitrader.ledger.ledger import Ledger
from aitrader.ledger.models import TradeRecord
from aitrader.market.models import PricePoint
from aitrader.runtime.context import RunContext
from aitrader.survey.policy import SurveyPolicy


class Outcome(str, Enum):
    PROFIT = "profit"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


def classify_outcome(final_asset_value: float, initial_balance: float) -> Outcome:
    difference = final_asset_value - initial_balance
    if difference > 0:
        return Outcome.PROFIT
    if difference < 0:
        return Outcome.LOSS
    return Outcome.BREAKEVEN


@dataclass(frozen=True)
class ResultsSummary:
    run_id: str
    symbol: str
    initial_balance: float
    final_asset_value: float
    total_profit: float
    trade_count: int
    outcome: Outcome
    final_cash: float
    final_holding_qty: float
    last_price: float

    def to_dict(self) -> dict:
        return {
            "run_id": self.run_id,
            "symbol": self.symbol,
            "initial_balance": self.initial_balance,
            "final_asset_value": self.final_asset_value,
            "total_profit": self.total_profit,
            "trade_count": self.trade_count,
            "outcome": self.outcome.value,
            "final_cash": self.final_cash,
            "final_holding_qty": self.final_holding_qty,
            "last_price": self.last_price,
        }


@dataclass
class SimulationRun:
    """
    Mutable aggregate for one replay.

    Only the clock advances ``tick_index`` and ``current_point``; only the
    session trade path appends to ``trades``. A restart builds a new run.
    """

    context: RunContext
    window: tuple[PricePoint, ...]
    ledger: Ledger
    survey: SurveyPolicy
    trade_amount: float = 100.0
    tick_index: int = 0
    trades: list[TradeRecord] = field(default_factory=list)
    current_point: Optional[PricePoint] = None
    latest_advisory: Optional[Advisory] = None
    summary: Optional[ResultsSummary] = None
    advisory_requests: int = 0
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.window:
            raise ValueError("window must not be empty")

    @property
    def run_id(self) -> str:
        return self.context.run_id

    @property
    def symbol(self) -> str:
        return self.context.symbol

    @property
    def speed_multiplier(self) -> float:
        return self.context.speed_multiplier

    @property
    def exhausted(self) -> bool:
        return self.tick_index >= len(self.window)

    @property
    def completed(self) -> bool:
        return self.summary is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def recent_window(self, point_index: int, lookback: int) -> tuple[PricePoint, ...]:
        return self.window[max(0, point_index - lookback) : point_index + 1]

    def total_asset_value(self) -> float:
        if self.current_point is None:
            return self.ledger.cash
        return self.ledger.total_asset_value(self.current_point.price)

    def summarize(self) -> ResultsSummary:
        last_price = self.current_point.price if self.current_point is not None else self.window[-1].price
        final_asset_value = self.ledger.total_asset_value(last_price)
        initial_balance = self.ledger.initial_balance
        return ResultsSummary(
            run_id=self.run_id,
            symbol=self.symbol,
            initial_balance=initial_balance,
            final_asset_value=final_asset_value,
            total_profit=final_asset_value - initial_balance,
            trade_count=len(self.trades),
            outcome=classify_outcome(final_asset_value, initial_balance),
            final_cash=self.ledger.cash,
            final_holding_qty=self.ledger.holding_qty,
            last_price=last_price,
        )
