"""Virtual account ledger."""

from aitrader.ledger.ledger import DEFAULT_FEE_RATE, Ledger
from aitrader.ledger.models import LedgerState, TradeAction, TradeRecord

__all__ = [
    "DEFAULT_FEE_RATE",
    "Ledger",
    "LedgerState",
    "TradeAction",
    "TradeRecord",
]
