"""Advisory gate: when to ask the recommender and how to read its answer."""

from __future__ import annotations

from typing import Optional, Sequence

from aitrader.advisory.models import Advisory, AdvisoryRequest, GateState
from aitrader.advisory.recommender import Recommender, build_prompt
from aitrader.ledger.models import TradeAction
from aitrader.market.models import PricePoint
from aitrader.monitoring.monitor import Monitor
from aitrader.survey.policy import SurveyPolicy

FALLBACK_EXPLANATION = "AI explanation unavailable due to an error. Defaulting to HOLD."


def parse_action(text: str) -> TradeAction:
    """First keyword wins: "buy" before "sell"; anything else is HOLD."""
    lowered = text.lower()
    if "buy" in lowered:
        return TradeAction.BUY
    if "sell" in lowered:
        return TradeAction.SELL
    return TradeAction.HOLD


class AdvisoryGate:
    def __init__(
        self,
        recommender: Recommender,
        monitor: Optional[Monitor] = None,
        audit_log: Optional[object] = None,
    ) -> None:
        self.recommender = recommender
        self.monitor = monitor
        self._audit_log = audit_log
        # run ids with a request awaiting its response
        self._in_flight: set[Optional[str]] = set()
        self.request_count = 0

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    @property
    def state(self) -> GateState:
        return GateState.AWAITING_RESPONSE if self._in_flight else GateState.IDLE

    def state_for(self, run_id: Optional[str]) -> GateState:
        return GateState.AWAITING_RESPONSE if run_id in self._in_flight else GateState.IDLE

    async def request_advisory(
        self,
        recent_window: Sequence[PricePoint],
        symbol: str,
        trade_amount: float,
        tick_index: int = 0,
        run_id: Optional[str] = None,
        survey: Optional[SurveyPolicy] = None,
    ) -> Optional[Advisory]:
        """
        Ask the recommender once for a BUY/SELL/HOLD suggestion.

        Returns None without calling the recommender while a survey is active or
        while another request for the same run is still awaiting its response.
        A request still pending for an earlier run does not block a new run.
        Recommender failures never propagate: a HOLD advisory with a fixed
        explanation is returned instead and the failure is reported through the
        monitor.
        """
        if survey is not None and survey.active:
            self._log("advisory_skipped", {"run_id": run_id, "tick": tick_index, "reason": "survey_active"})
            return None
        if run_id in self._in_flight:
            self._log("advisory_skipped", {"run_id": run_id, "tick": tick_index, "reason": "in_flight"})
            return None

        request = AdvisoryRequest(symbol=symbol, window=tuple(recent_window), tick_index=tick_index, run_id=run_id)
        self._in_flight.add(run_id)
        self.request_count += 1
        self._log("advisory_requested", {"run_id": run_id, "tick": tick_index, "symbol": symbol})
        try:
            text = await self.recommender.recommend(build_prompt(symbol, request.window))
        except Exception as exc:
            self._log(
                "advisory_failed",
                {"run_id": run_id, "tick": tick_index, "error": str(exc), "type": type(exc).__name__},
            )
            if self.monitor is not None:
                self.monitor.advisory_unavailable()
            return Advisory(
                action=TradeAction.HOLD,
                suggested_amount=trade_amount,
                explanation=FALLBACK_EXPLANATION,
                request=request,
                fallback=True,
            )
        finally:
            self._in_flight.discard(run_id)

        advisory = Advisory(
            action=parse_action(text),
            suggested_amount=trade_amount,
            explanation=text,
            request=request,
        )
        self._log("advisory_received", {"run_id": run_id, "tick": tick_index, "action": advisory.action.value})
        return advisory
