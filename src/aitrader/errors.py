"""Error taxonomy for the simulator."""

from __future__ import annotations


class SimulatorError(Exception):
    """Base class for simulator errors."""


class InsufficientDataError(SimulatorError):
    """Price series has no points to replay."""


class DataSourceError(SimulatorError):
    """Historical price fetch failed."""


class InsufficientFundsError(SimulatorError):
    def __init__(self, required: float, available: float) -> None:
        super().__init__(f"Not enough balance to buy. Current balance: ${available:.2f}")
        self.required = required
        self.available = available


class InsufficientHoldingsError(SimulatorError):
    def __init__(self, requested_value: float, holding_value: float, holding_qty: float, symbol: str) -> None:
        super().__init__(f"Not enough holdings to sell. Current holdings: {holding_qty:.4f} {symbol}")
        self.requested_value = requested_value
        self.holding_value = holding_value
        self.holding_qty = holding_qty
        self.symbol = symbol


class AdvisoryUnavailableError(SimulatorError):
    """Recommender failed or returned no usable content."""
