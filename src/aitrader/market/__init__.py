"""Market data: price series and historical sources."""

from aitrader.market.frankfurter import FrankfurterSource
from aitrader.market.models import PricePoint, PriceSeries
from aitrader.market.source import PriceSource, StaticPriceSource

__all__ = [
    "FrankfurterSource",
    "PricePoint",
    "PriceSeries",
    "PriceSource",
    "StaticPriceSource",
]
