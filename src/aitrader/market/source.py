"""Historical price source interface."""

from __future__ import annotations

from typing import Iterable, Mapping

from aitrader.market.models import PricePoint, PriceSeries


class PriceSource:
    async def fetch_history(self) -> dict[str, PriceSeries]:  # pragma: no cover - interface
        raise NotImplementedError


class StaticPriceSource(PriceSource):
    """Serves series held in memory."""

    def __init__(self, series: Mapping[str, PriceSeries]) -> None:
        self._series = dict(series)
        self.fetch_count = 0

    @classmethod
    def from_prices(
        cls,
        symbol: str,
        prices: Iterable[float],
        start_ms: int = 0,
        step_ms: int = 86_400_000,
    ) -> "StaticPriceSource":
        points = tuple(
            PricePoint(timestamp=start_ms + index * step_ms, price=float(price))
            for index, price in enumerate(prices)
        )
        return cls({symbol: PriceSeries(symbol=symbol, points=points)})

    async def fetch_history(self) -> dict[str, PriceSeries]:
        self.fetch_count += 1
        return dict(self._series)
