"""Cash and holdings ledger for a single symbol."""

from __future__ import annotations

import math

from aitrader.errors import InsufficientFundsError, InsufficientHoldingsError
from aitrader.ledger.models import LedgerState, TradeAction, TradeRecord

DEFAULT_FEE_RATE = 0.001
SELL_TOLERANCE = 1e-9


def _check_positive(value: float, name: str) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")


class Ledger:
    """
    Virtual account holding cash and one instrument.

    Trades are sized by notional (cash-equivalent) amount. The fee is charged on
    the notional amount, not on the resulting asset delta. A rejected trade
    raises before any field is touched.
    """

    def __init__(self, symbol: str, initial_balance: float, fee_rate: float = DEFAULT_FEE_RATE) -> None:
        _check_positive(initial_balance, "initial_balance")
        if not 0.0 <= fee_rate < 1.0:
            raise ValueError(f"fee_rate must be in [0, 1), got {fee_rate}")
        self.symbol = symbol
        self.initial_balance = initial_balance
        self.fee_rate = fee_rate
        self._cash = initial_balance
        self._holding_qty = 0.0

    @property
    def cash(self) -> float:
        return self._cash

    @property
    def holding_qty(self) -> float:
        return self._holding_qty

    @property
    def state(self) -> LedgerState:
        return LedgerState(symbol=self.symbol, cash=self._cash, holding_qty=self._holding_qty)

    def fee_for(self, notional_amount: float) -> float:
        return notional_amount * self.fee_rate

    def total_asset_value(self, current_price: float) -> float:
        return self._cash + self._holding_qty * current_price

    def buy(self, notional_amount: float, price: float, sim_time: int = 0) -> TradeRecord:
        _check_positive(notional_amount, "notional_amount")
        _check_positive(price, "price")
        fee = self.fee_for(notional_amount)
        required = notional_amount + fee
        if self._cash < required:
            raise InsufficientFundsError(required=required, available=self._cash)

        quantity = notional_amount / price
        self._cash -= required
        self._holding_qty += quantity
        return TradeRecord(
            sim_time=sim_time,
            action=TradeAction.BUY,
            notional_amount=notional_amount,
            price=price,
            fee=fee,
            quantity=quantity,
        )

    def sell(self, notional_amount: float, price: float, sim_time: int = 0) -> TradeRecord:
        _check_positive(notional_amount, "notional_amount")
        _check_positive(price, "price")
        holding_value = self._holding_qty * price
        if holding_value < notional_amount and not math.isclose(holding_value, notional_amount, rel_tol=SELL_TOLERANCE):
            raise InsufficientHoldingsError(
                requested_value=notional_amount,
                holding_value=holding_value,
                holding_qty=self._holding_qty,
                symbol=self.symbol,
            )

        fee = self.fee_for(notional_amount)
        # selling the full value just bought can land one rounding unit short
        quantity = min(notional_amount / price, self._holding_qty)
        self._cash += notional_amount - fee
        self._holding_qty = max(0.0, self._holding_qty - quantity)
        return TradeRecord(
            sim_time=sim_time,
            action=TradeAction.SELL,
            notional_amount=notional_amount,
            price=price,
            fee=fee,
            quantity=quantity,
        )

    def hold(self, price: float, sim_time: int = 0) -> TradeRecord:
        return TradeRecord(
            sim_time=sim_time,
            action=TradeAction.HOLD,
            notional_amount=0.0,
            price=price,
            fee=0.0,
        )

    def execute(self, action: TradeAction, notional_amount: float, price: float, sim_time: int = 0) -> TradeRecord:
        if action == TradeAction.BUY:
            return self.buy(notional_amount, price, sim_time)
        if action == TradeAction.SELL:
            return self.sell(notional_amount, price, sim_time)
        return self.hold(price, sim_time)

    def reset(self) -> None:
        self._cash = self.initial_balance
        self._holding_qty = 0.0
