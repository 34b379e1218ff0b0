"""Ledger data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class LedgerState:
    symbol: str
    cash: float
    holding_qty: float


@dataclass(frozen=True)
class TradeRecord:
    sim_time: int
    action: TradeAction
    notional_amount: float
    price: float
    fee: float
    quantity: float = 0.0

    def to_dict(self) -> dict:
        return {
            "sim_time": self.sim_time,
            "action": self.action.value,
            "notional_amount": self.notional_amount,
            "price": self.price,
            "fee": self.fee,
            "quantity": self.quantity,
        }
