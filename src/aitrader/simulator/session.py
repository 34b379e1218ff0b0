"""Single-user trading session: data loading, run lifecycle and the trade path."""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from aitrader.advisory.gate import AdvisoryGate
from aitrader.advisory.recommender import Recommender
from aitrader.config.models import AppConfig
from aitrader.errors import (
    DataSourceError,
    InsufficientDataError,
    InsufficientFundsError,
    InsufficientHoldingsError,
)
from aitrader.ledger.ledger import Ledger
from aitrader.ledger.models import TradeAction, TradeRecord
from aitrader.market.models import PriceSeries
from aitrader.market.source import PriceSource
from aitrader.monitoring.events import EventBus, RunFailed, SurveyRequired, TradeExecuted
from aitrader.monitoring.monitor import Monitor
from aitrader.monitoring.notifier import BusNotifier, Notifier
from aitrader.runtime.context import create_run_context
from aitrader.simulator.clock import SimulationClock
from aitrader.simulator.models import ResultsSummary, SimulationRun
from aitrader.survey.policy import SurveyPolicy, SurveySubmission


class SessionStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class TradingSession:
    """
    Owns the price history, the active SimulationRun and the clock driving it.

    Every start, restart, speed change or symbol change builds a brand-new run
    (fresh ledger, empty trade log, fresh survey policy, tick 0) after the
    previous timer is cancelled. Trades go through ``trade`` only, which turns
    ledger rejections into notifications.

    Usage:
        session = TradingSession(config, FrankfurterSource(config.data_source), OpenAIRecommender(config.advisory))
        session.bus.subscribe(render)
        await session.start()
        ...
        session.trade(TradeAction.BUY)
        session.close_survey()
        summary = await session.wait()
    """

    def __init__(
        self,
        config: AppConfig,
        source: PriceSource,
        recommender: Recommender,
        bus: Optional[EventBus] = None,
        notifier: Optional[Notifier] = None,
        audit_log: Optional[object] = None,
        config_hash: Optional[str] = None,
    ) -> None:
        self.config = config
        self.source = source
        self.bus = bus or EventBus()
        self.monitor = Monitor(notifier or BusNotifier(self.bus))
        self._audit_log = audit_log
        self._config_hash = config_hash
        self.gate = AdvisoryGate(recommender, monitor=self.monitor, audit_log=audit_log)
        self.clock = SimulationClock(
            self.gate,
            config=config.simulation,
            bus=self.bus,
            monitor=self.monitor,
            audit_log=audit_log,
        )

        self.history: dict[str, PriceSeries] = {}
        self.symbol = config.default_symbol
        self.speed_multiplier = config.simulation.default_speed
        self.trade_amount = config.simulation.trade_amount
        self.run: Optional[SimulationRun] = None
        self.error: Optional[str] = None
        self._failed = False
        self._sequence = 0

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    @property
    def status(self) -> SessionStatus:
        if self._failed:
            return SessionStatus.FAILED
        if self.run is None:
            return SessionStatus.IDLE
        if self.run.failed:
            return SessionStatus.FAILED
        if self.run.completed:
            return SessionStatus.COMPLETED
        return SessionStatus.RUNNING

    def _fail(self, message: str) -> None:
        self.clock.cancel()
        self._failed = True
        self.error = message
        self._log("run_failed", {"symbol": self.symbol, "error": message})
        self.monitor.data_source_failed(message)
        self.bus.publish(RunFailed(message=message, run_id=self.run.run_id if self.run else None))

    async def load(self) -> dict[str, PriceSeries]:
        try:
            self.history = await self.source.fetch_history()
        except DataSourceError as exc:
            self._fail(f"Failed to fetch historical data. Please try again later. ({exc})")
            raise
        self._failed = False
        self.error = None
        self._log(
            "session_loaded",
            {"symbols": sorted(self.history), "points": {symbol: len(series) for symbol, series in self.history.items()}},
        )
        return self.history

    async def retry(self) -> SimulationRun:
        await self.load()
        return await self.start()

    async def start(self, symbol: Optional[str] = None) -> SimulationRun:
        if symbol is not None:
            self.symbol = symbol
        if not self.history:
            await self.load()

        series = self.history.get(self.symbol, PriceSeries(symbol=self.symbol, points=()))
        try:
            window = series.slice(self.config.simulation.window_length)
        except InsufficientDataError as exc:
            self._fail(str(exc))
            raise

        self.clock.cancel()
        self._sequence += 1
        context = create_run_context(
            self.config.run_id_prefix,
            self.symbol,
            self.speed_multiplier,
            self._sequence,
            config_hash=self._config_hash,
        )
        simulation = self.config.simulation
        self.run = SimulationRun(
            context=context,
            window=window,
            ledger=Ledger(self.symbol, simulation.initial_balance, simulation.fee_rate),
            survey=SurveyPolicy(simulation.milestone_interval),
            trade_amount=self.trade_amount,
        )
        self._failed = False
        self.error = None
        self._log(
            "run_started",
            {
                "run_id": context.run_id,
                "symbol": self.symbol,
                "speed": self.speed_multiplier,
                "window": len(window),
                "interval_seconds": self.clock.interval_for(self.speed_multiplier),
            },
        )
        self.clock.start(self.run)
        return self.run

    async def restart(self) -> SimulationRun:
        return await self.start()

    async def set_speed(self, multiplier: float) -> Optional[SimulationRun]:
        simulation = self.config.simulation
        if not simulation.min_speed <= multiplier <= simulation.max_speed:
            raise ValueError(
                f"speed must be between {simulation.min_speed} and {simulation.max_speed}, got {multiplier}"
            )
        self.speed_multiplier = multiplier
        if self.run is not None:
            return await self.start()
        return None

    async def select_symbol(self, symbol: str) -> Optional[SimulationRun]:
        if self.history and symbol not in self.history:
            raise ValueError(f"Unknown symbol: {symbol}")
        self.symbol = symbol
        if self.run is not None:
            return await self.start()
        return None

    def set_trade_amount(self, amount: float) -> None:
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError(f"trade amount must be positive, got {amount}")
        self.trade_amount = amount
        if self.run is not None:
            self.run.trade_amount = amount

    def trade(self, action: TradeAction | str) -> Optional[TradeRecord]:
        action = TradeAction(action.upper()) if isinstance(action, str) else action
        run = self.run
        if run is None or self._failed or run.failed:
            self.monitor.trade_blocked("No simulation is running")
            return None
        if run.completed:
            self.monitor.trade_blocked("Simulation has finished; restart to trade again")
            return None
        if run.current_point is None:
            self.monitor.trade_blocked("No market price yet")
            return None
        if run.survey.active:
            self.monitor.trade_blocked("Complete or close the survey before trading")
            return None

        try:
            record = run.ledger.execute(action, run.trade_amount, run.current_point.price, sim_time=run.tick_index)
        except (InsufficientFundsError, InsufficientHoldingsError) as exc:
            self._log(
                "trade_rejected",
                {"run_id": run.run_id, "action": action.value, "amount": run.trade_amount, "reason": str(exc)},
            )
            self.monitor.trade_rejected(str(exc))
            return None

        run.trades.append(record)
        run.latest_advisory = None
        self._log(
            "trade_executed",
            {"run_id": run.run_id, **record.to_dict(), "cash": run.ledger.cash, "holding_qty": run.ledger.holding_qty},
        )
        self.bus.publish(
            TradeExecuted(run_id=run.run_id, record=record, cash=run.ledger.cash, holding_qty=run.ledger.holding_qty)
        )
        self.monitor.trade_executed(record, run.symbol)

        for mode in run.survey.record_trade():
            self._log("survey_triggered", {"run_id": run.run_id, "mode": mode.value, "trade_count": run.survey.trade_count})
            self.bus.publish(SurveyRequired(run_id=run.run_id, mode=mode, trade_count=run.survey.trade_count))
        return record

    def ignore_advisory(self) -> None:
        if self.run is not None:
            self.run.latest_advisory = None

    def score_simple(self, score: int) -> None:
        self._require_run().survey.score_simple(score)

    def score_statement(self, index: int, score: int) -> None:
        self._require_run().survey.score_statement(index, score)

    def close_survey(self) -> SurveySubmission:
        run = self._require_run()
        submission = run.survey.close_survey()
        self._log(
            "survey_closed",
            {
                "run_id": run.run_id,
                "mode": submission.mode.value,
                "trade_count": submission.trade_count,
                "simple_score": submission.simple_score,
                "responses": submission.responses,
                "complete": submission.complete,
            },
        )
        return submission

    async def wait(self) -> Optional[ResultsSummary]:
        """Summary of the finished run; None if it was stopped or failed (see ``status`` and ``run.error``)."""
        await self.clock.wait()
        return self.run.summary if self.run is not None else None

    def stop(self) -> None:
        self.clock.cancel()

    def _require_run(self) -> SimulationRun:
        if self.run is None:
            raise RuntimeError("No simulation run")
        return self.run
