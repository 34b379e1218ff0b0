"""Asyncio-driven replay clock."""

from __future__ import annotations

import asyncio
from typing import Optional

from aitrader.advisory.gate import AdvisoryGate
from aitrader.config.models import SimulationConfig
from aitrader.market.models import PricePoint
from aitrader.monitoring.events import AdvisoryReady, EventBus, RunCompleted, RunFailed, TickUpdated
from aitrader.monitoring.monitor import Monitor
from aitrader.simulator.models import SimulationRun


class SimulationClock:
    """
    Replays a run's window one point per tick.

    One timer task at a time: ``start`` cancels the previous task before
    creating a new one. Advisory requests run as separate tasks so a slow
    recommender never delays the next tick.
    """

    def __init__(
        self,
        gate: AdvisoryGate,
        config: Optional[SimulationConfig] = None,
        bus: Optional[EventBus] = None,
        monitor: Optional[Monitor] = None,
        audit_log: Optional[object] = None,
    ) -> None:
        self.gate = gate
        self.config = config or SimulationConfig()
        self.bus = bus
        self.monitor = monitor
        self._audit_log = audit_log
        self._task: Optional[asyncio.Task] = None
        self._advisory_tasks: set[asyncio.Task] = set()

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    def _publish(self, event: object) -> None:
        if self.bus is None:
            return
        self.bus.publish(event)

    def interval_for(self, speed_multiplier: float) -> float:
        if speed_multiplier <= 0:
            raise ValueError("speed_multiplier must be positive")
        return self.config.base_interval_seconds / speed_multiplier

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending_advisories(self) -> int:
        return len(self._advisory_tasks)

    def start(self, run: SimulationRun) -> asyncio.Task:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._drive(run), name=f"clock-{run.run_id}")
        return self._task

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self, include_advisories: bool = True) -> None:
        """Wait for the timer task to end, and optionally for in-flight advisories."""
        if self._task is not None:
            await asyncio.wait({self._task})
        if include_advisories and self._advisory_tasks:
            await asyncio.wait(set(self._advisory_tasks))

    async def _drive(self, run: SimulationRun) -> None:
        interval = self.interval_for(run.speed_multiplier)
        while not run.completed:
            await asyncio.sleep(interval)
            try:
                self.tick(run)
            except Exception as exc:
                run.error = str(exc)
                self._log("clock_error", {"run_id": run.run_id, "tick": run.tick_index, "error": run.error})
                if self.monitor is not None:
                    self.monitor.clock_error(run.error)
                self._publish(RunFailed(message=run.error, run_id=run.run_id))
                return

    def tick(self, run: SimulationRun) -> Optional[PricePoint]:
        """Advance ``run`` by one point. Returns the published point, or None once finished."""
        if run.completed:
            return None
        if run.exhausted:
            self._finish(run)
            return None

        point_index = run.tick_index
        point = run.window[point_index]
        run.tick_index += 1
        run.current_point = point
        self._publish(TickUpdated(run_id=run.run_id, tick_index=run.tick_index, point=point))

        if point_index % self.config.advisory_period == 0:
            self._schedule_advisory(run, point_index)

        if run.exhausted:
            self._finish(run)
        return point

    def _schedule_advisory(self, run: SimulationRun, point_index: int) -> None:
        if run.survey.active:
            self._log(
                "advisory_skipped",
                {"run_id": run.run_id, "tick": run.tick_index, "reason": "survey_active"},
            )
            return
        tick_index = run.tick_index
        task = asyncio.get_running_loop().create_task(
            self._advise(run, point_index, tick_index),
            name=f"advisory-{run.run_id}-{tick_index}",
        )
        self._advisory_tasks.add(task)
        task.add_done_callback(lambda done: self._advisory_done(done, run, tick_index))

    def _advisory_done(self, task: asyncio.Task, run: SimulationRun, tick_index: int) -> None:
        self._advisory_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log(
                "advisory_error",
                {"run_id": run.run_id, "tick": tick_index, "error": str(exc), "type": type(exc).__name__},
            )

    async def _advise(self, run: SimulationRun, point_index: int, tick_index: int) -> None:
        advisory = await self.gate.request_advisory(
            run.recent_window(point_index, self.config.advisory_lookback),
            run.symbol,
            run.trade_amount,
            tick_index=tick_index,
            run_id=run.run_id,
            survey=run.survey,
        )
        if advisory is None:
            return
        run.advisory_requests += 1
        if run.survey.active:
            self._log(
                "advisory_suppressed",
                {"run_id": run.run_id, "tick": tick_index, "action": advisory.action.value},
            )
            return
        run.latest_advisory = advisory
        self._publish(AdvisoryReady(run_id=run.run_id, advisory=advisory))

    def _finish(self, run: SimulationRun) -> None:
        run.summary = run.summarize()
        self._log("run_completed", run.summary.to_dict())
        self._publish(RunCompleted(run_id=run.run_id, summary=run.summary))
