"""Historical FX rates from the Frankfurter API."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

import httpx

from aitrader.config.models import DataSourceConfig
from aitrader.errors import DataSourceError
from aitrader.market.models import PriceSeries
from aitrader.market.source import PriceSource


class FrankfurterSource(PriceSource):
    """
    Daily reference rates for ``base_currency`` against each quote currency.

    Quotes are rates (units of quote currency per base unit); the series price is
    their inverse. Pairs are named ``{base}{quote}``, e.g. ``EURUSD``.

    Usage:
        source = FrankfurterSource(DataSourceConfig())
        history = await source.fetch_history()
        history["EURUSD"].slice(600)
    """

    def __init__(
        self,
        config: Optional[DataSourceConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        today: Optional[date] = None,
    ) -> None:
        self.config = config or DataSourceConfig()
        self._client = client
        self._today = today

    @property
    def symbols(self) -> list[str]:
        return [f"{self.config.base_currency}{quote}" for quote in self.config.quote_currencies]

    def date_range(self) -> tuple[date, date]:
        end = self._today or datetime.now(timezone.utc).date()
        start = end - timedelta(days=self.config.lookback_days)
        return start, end

    async def fetch_history(self) -> dict[str, PriceSeries]:
        start, end = self.date_range()
        return await self.fetch_range(start, end)

    async def fetch_range(self, start: date, end: date) -> dict[str, PriceSeries]:
        url = f"{self.config.base_url}/{start.isoformat()}..{end.isoformat()}"
        params = {
            "base": self.config.base_currency,
            "symbols": ",".join(self.config.quote_currencies),
        }
        try:
            if self._client is not None:
                response = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                    response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as exc:
            raise DataSourceError(f"Failed to fetch historical data: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"Historical data response is not JSON: {exc}") from exc
        return self._parse(payload)

    def _parse(self, payload: Any) -> dict[str, PriceSeries]:
        if not isinstance(payload, dict) or not isinstance(payload.get("rates"), dict):
            raise DataSourceError("Historical data response has no rates")

        rates_by_pair: dict[str, list[tuple[int, float]]] = {}
        for day in sorted(payload["rates"]):
            quotes = payload["rates"][day]
            if not isinstance(quotes, dict):
                raise DataSourceError(f"Malformed rates for {day}")
            try:
                stamp = datetime.fromisoformat(day).replace(tzinfo=timezone.utc)
            except ValueError as exc:
                raise DataSourceError(f"Malformed rate date: {day}") from exc
            timestamp = int(stamp.timestamp() * 1000)
            for currency, rate in quotes.items():
                pair = f"{self.config.base_currency}{currency}"
                try:
                    rates_by_pair.setdefault(pair, []).append((timestamp, float(rate)))
                except (TypeError, ValueError) as exc:
                    raise DataSourceError(f"Malformed {pair} rate on {day}: {rate}") from exc

        try:
            return {pair: PriceSeries.from_rates(pair, rates) for pair, rates in rates_by_pair.items()}
        except ValueError as exc:
            raise DataSourceError(str(exc)) from exc
