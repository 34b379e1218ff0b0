"""Replay simulation: run aggregate, clock and session."""

from aitrader.simulator.clock import SimulationClock
from aitrader.simulator.models import Outcome, ResultsSummary, SimulationRun, classify_outcome
from aitrader.simulator.session import SessionStatus, TradingSession

__all__ = [
    "Outcome",
    "ResultsSummary",
    "SessionStatus",
    "SimulationClock",
    "SimulationRun",
    "TradingSession",
    "classify_outcome",
]
