"""Routes simulator situations to user-facing notifications."""

from __future__ import annotations

from dataclasses import dataclass

from aitrader.ledger.models import TradeAction, TradeRecord
from aitrader.monitoring.notifier import Notifier, Severity

ADVISORY_FALLBACK_MESSAGE = "Failed to get AI suggestion. Using default HOLD decision."


@dataclass
class Monitor:
    notifier: Notifier

    def trade_executed(self, record: TradeRecord, symbol: str) -> None:
        if record.action == TradeAction.BUY:
            self.notifier.notify(
                Severity.SUCCESS,
                f"Bought {record.quantity:.4f} {symbol} for ${record.notional_amount:.2f}",
            )
        elif record.action == TradeAction.SELL:
            self.notifier.notify(
                Severity.SUCCESS,
                f"Sold {record.quantity:.4f} {symbol} for ${record.notional_amount:.2f}",
            )
        else:
            self.notifier.notify(Severity.INFO, "Decided to hold the position")

    def trade_rejected(self, reason: str) -> None:
        self.notifier.notify(Severity.ERROR, reason)

    def trade_blocked(self, reason: str) -> None:
        self.notifier.notify(Severity.WARNING, reason)

    def advisory_unavailable(self) -> None:
        self.notifier.notify(Severity.ERROR, ADVISORY_FALLBACK_MESSAGE)

    def data_source_failed(self, reason: str) -> None:
        self.notifier.notify(Severity.ERROR, reason)

    def clock_error(self, reason: str) -> None:
        self.notifier.notify(Severity.ERROR, f"Simulation stopped: {reason}")
