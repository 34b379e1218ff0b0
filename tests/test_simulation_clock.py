from __future__ import annotations

import asyncio

import pytest

from aitrader.advisory import AdvisoryGate, Recommender
from aitrader.config import SimulationConfig
from aitrader.ledger import Ledger, TradeAction
from aitrader.market import PricePoint
from aitrader.monitoring import (
    AdvisoryReady,
    AuditLog,
    EventBus,
    EventRecorder,
    Monitor,
    Notifier,
    RunCompleted,
    RunFailed,
    TickUpdated,
)
from aitrader.runtime import create_run_context
from aitrader.simulator import Outcome, SimulationClock, SimulationRun
from aitrader.survey import SurveyPolicy


class InstantRecommender(Recommender):
    def __init__(self, text: str = "Hold steady.") -> None:
        self.text = text
        self.calls = 0

    async def recommend(self, prompt: str) -> str:
        self.calls += 1
        return self.text


class GatedRecommender(Recommender):
    def __init__(self) -> None:
        self.release = asyncio.Event()

    async def recommend(self, prompt: str) -> str:
        await self.release.wait()
        return "Buy"


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, severity, message: str) -> None:
        self.messages.append((severity.value, message))


def _run(count: int, speed: float = 1.0, sequence: int = 1) -> SimulationRun:
    window = tuple(PricePoint(timestamp=i, price=1.0 + i / 1000) for i in range(count))
    return SimulationRun(
        context=create_run_context("test", "EURUSD", speed, sequence),
        window=window,
        ledger=Ledger("EURUSD", 10000),
        survey=SurveyPolicy(),
    )


def test_interval_scales_with_speed():
    clock = SimulationClock(AdvisoryGate(InstantRecommender()), SimulationConfig(base_interval_seconds=1.0))
    assert clock.interval_for(1) == 1.0
    assert clock.interval_for(4) == 0.25
    with pytest.raises(ValueError):
        clock.interval_for(0)


def test_full_window_requests_one_advisory_per_period():
    recommender = InstantRecommender()
    gate = AdvisoryGate(recommender)
    bus = EventBus()
    recorder = EventRecorder(bus)
    clock = SimulationClock(gate, SimulationConfig(), bus=bus)
    run = _run(600)

    async def runner():
        while not run.completed:
            clock.tick(run)
        await clock.wait()

    asyncio.run(runner())

    assert run.tick_index == 600
    assert run.advisory_requests == 60
    assert gate.request_count == 60
    assert recommender.calls <= 60
    assert len(recorder.of_type(TickUpdated)) == 600
    assert len(recorder.of_type(AdvisoryReady)) == 60
    assert len(recorder.of_type(RunCompleted)) == 1
    assert run.summary.trade_count == 0
    assert run.summary.outcome == Outcome.BREAKEVEN


def test_tick_after_completion_is_noop():
    clock = SimulationClock(AdvisoryGate(InstantRecommender()), SimulationConfig(advisory_period=100))
    run = _run(2)

    async def runner():
        clock.tick(run)
        clock.tick(run)
        return clock.tick(run)

    assert asyncio.run(runner()) is None
    assert run.tick_index == 2
    assert run.current_point.timestamp == 1


def test_advisory_window_uses_lookback():
    recommender = InstantRecommender()
    bus = EventBus()
    recorder = EventRecorder(bus)
    clock = SimulationClock(AdvisoryGate(recommender), SimulationConfig(advisory_lookback=60), bus=bus)
    run = _run(100)

    async def runner():
        for _ in range(71):
            clock.tick(run)
        await clock.wait()

    asyncio.run(runner())

    windows = [event.advisory.request.window for event in recorder.of_type(AdvisoryReady)]
    assert len(windows[0]) == 1
    assert len(windows[-1]) == 61
    assert windows[-1][-1].timestamp == 70
    assert windows[-1][0].timestamp == 10


def test_no_advisory_while_survey_active(tmp_path):
    recommender = InstantRecommender()
    gate = AdvisoryGate(recommender)
    audit = AuditLog(tmp_path / "audit.log")
    clock = SimulationClock(gate, SimulationConfig(), audit_log=audit)
    run = _run(30)
    run.survey.record_trade()

    async def runner():
        while not run.completed:
            clock.tick(run)
        await clock.wait()

    asyncio.run(runner())

    assert run.advisory_requests == 0
    assert recommender.calls == 0
    assert len(audit.read_events("advisory_skipped")) == 3


def test_advisory_arriving_during_survey_is_suppressed():
    recommender = GatedRecommender()
    bus = EventBus()
    recorder = EventRecorder(bus)
    clock = SimulationClock(AdvisoryGate(recommender), SimulationConfig(), bus=bus)
    run = _run(5)

    async def runner():
        clock.tick(run)
        await asyncio.sleep(0)
        run.survey.record_trade()
        recommender.release.set()
        await clock.wait()

    asyncio.run(runner())

    assert recorder.of_type(AdvisoryReady) == []
    assert run.latest_advisory is None


def test_driver_completes_run_and_reports_profit():
    bus = EventBus()
    recorder = EventRecorder(bus)
    clock = SimulationClock(
        AdvisoryGate(InstantRecommender()),
        SimulationConfig(base_interval_seconds=0.001),
        bus=bus,
    )
    run = _run(20, speed=10)

    def buy_first_tick(event):
        if isinstance(event, TickUpdated) and event.tick_index == 1:
            run.trades.append(run.ledger.execute(TradeAction.BUY, 100, event.point.price))

    bus.subscribe(buy_first_tick)

    async def runner():
        clock.start(run)
        await clock.wait()

    asyncio.run(runner())

    assert run.completed
    summary = recorder.of_type(RunCompleted)[0].summary
    assert summary.trade_count == 1
    assert summary.last_price == run.window[-1].price
    assert summary.final_asset_value == pytest.approx(run.ledger.cash + run.ledger.holding_qty * run.window[-1].price)
    assert summary.total_profit == pytest.approx(summary.final_asset_value - 10000)
    assert summary.outcome == Outcome.PROFIT


def test_start_cancels_previous_timer():
    clock = SimulationClock(AdvisoryGate(InstantRecommender()), SimulationConfig(base_interval_seconds=0.001))
    first = _run(10)
    second = _run(10, sequence=2)

    async def runner():
        clock.start(first)
        clock.start(second)
        await clock.wait()

    asyncio.run(runner())

    assert first.tick_index == 0
    assert not first.completed
    assert second.completed
    assert not clock.running


def test_tick_error_stops_driver(tmp_path):
    notifier = RecordingNotifier()
    bus = EventBus()
    audit = AuditLog(tmp_path / "audit.log")
    clock = SimulationClock(
        AdvisoryGate(InstantRecommender()),
        SimulationConfig(base_interval_seconds=0.001, advisory_period=100),
        bus=bus,
        monitor=Monitor(notifier),
        audit_log=audit,
    )
    run = _run(10)
    recorder = EventRecorder(bus)

    def explode(event):
        if isinstance(event, TickUpdated) and event.tick_index == 3:
            raise RuntimeError("renderer crashed")

    bus.subscribe(explode)

    async def runner():
        clock.start(run)
        await clock.wait()

    asyncio.run(runner())

    assert run.tick_index == 3
    assert not run.completed
    assert run.failed
    assert run.error == "renderer crashed"
    assert recorder.of_type(RunFailed)[0].run_id == run.run_id
    assert notifier.messages == [("error", "Simulation stopped: renderer crashed")]
    assert audit.read_events("clock_error")[0]["payload"]["tick"] == 3


def test_skipped_request_is_not_counted():
    recommender = GatedRecommender()
    gate = AdvisoryGate(recommender)
    clock = SimulationClock(gate, SimulationConfig(advisory_period=1))
    run = _run(5)

    async def runner():
        clock.tick(run)
        await asyncio.sleep(0)
        clock.tick(run)
        await asyncio.sleep(0)
        recommender.release.set()
        await clock.wait()

    asyncio.run(runner())

    assert gate.request_count == 1
    assert run.advisory_requests == 1


def test_subscriber_error_in_advisory_is_audited(tmp_path):
    bus = EventBus()
    audit = AuditLog(tmp_path / "audit.log")
    clock = SimulationClock(AdvisoryGate(InstantRecommender()), SimulationConfig(), bus=bus, audit_log=audit)
    run = _run(5)

    def explode(event):
        if isinstance(event, AdvisoryReady):
            raise RuntimeError("panel closed")

    bus.subscribe(explode)

    async def runner():
        clock.tick(run)
        await clock.wait()

    asyncio.run(runner())

    errors = audit.read_events("advisory_error")
    assert len(errors) == 1
    assert errors[0]["payload"]["error"] == "panel closed"
    assert errors[0]["payload"]["type"] == "RuntimeError"
    assert clock.pending_advisories == 0
