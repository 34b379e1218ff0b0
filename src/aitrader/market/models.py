"""Price data structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator

from aitrader.errors import InsufficientDataError


@dataclass(frozen=True)
class PricePoint:
    timestamp: int  # epoch ms
    price: float


@dataclass(frozen=True)
class PriceSeries:
    symbol: str
    points: tuple[PricePoint, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))
        previous = None
        for point in self.points:
            if not math.isfinite(point.price) or point.price <= 0:
                raise ValueError(f"{self.symbol}: price must be positive, got {point.price}")
            if previous is not None and point.timestamp <= previous:
                raise ValueError(f"{self.symbol}: timestamps must be strictly increasing")
            previous = point.timestamp

    @classmethod
    def from_rates(cls, symbol: str, rates: Iterable[tuple[int, float]]) -> "PriceSeries":
        """Build a series from quoted rates, where price is the inverse of the rate."""
        points = []
        for timestamp, rate in rates:
            if rate <= 0:
                raise ValueError(f"{symbol}: rate must be positive, got {rate}")
            points.append(PricePoint(timestamp=int(timestamp), price=1.0 / float(rate)))
        return cls(symbol=symbol, points=tuple(points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)

    @property
    def last(self) -> PricePoint | None:
        return self.points[-1] if self.points else None

    def slice(self, window_length: int) -> tuple[PricePoint, ...]:
        """Return the last ``window_length`` points, or all of them if the series is shorter."""
        if window_length <= 0:
            raise ValueError("window_length must be positive")
        if not self.points:
            raise InsufficientDataError(f"No price data for {self.symbol}")
        return self.points[-window_length:]
