import pytest

from aitrader.errors import InsufficientDataError
from aitrader.market import PricePoint, PriceSeries, StaticPriceSource


def _series(count: int) -> PriceSeries:
    return PriceSeries("EURUSD", tuple(PricePoint(timestamp=i, price=1.0 + i / 1000) for i in range(count)))


def test_slice_returns_last_points():
    window = _series(700).slice(600)
    assert len(window) == 600
    assert window[0].timestamp == 100
    assert window[-1].timestamp == 699


def test_slice_short_series_returns_everything():
    window = _series(120).slice(600)
    assert len(window) == 120


def test_slice_empty_series_raises():
    with pytest.raises(InsufficientDataError, match="EURUSD"):
        PriceSeries("EURUSD", ()).slice(600)


def test_slice_rejects_non_positive_length():
    with pytest.raises(ValueError):
        _series(10).slice(0)


def test_from_rates_inverts():
    series = PriceSeries.from_rates("EURUSD", [(1, 1.25), (2, 0.8)])
    assert series.points[0].price == pytest.approx(0.8)
    assert series.points[1].price == pytest.approx(1.25)
    assert series.last.timestamp == 2


def test_invalid_points_rejected():
    with pytest.raises(ValueError):
        PriceSeries("EURUSD", (PricePoint(1, 1.0), PricePoint(1, 1.1)))
    with pytest.raises(ValueError):
        PriceSeries("EURUSD", (PricePoint(1, 0.0),))
    with pytest.raises(ValueError):
        PriceSeries.from_rates("EURUSD", [(1, 0.0)])


def test_static_source_from_prices():
    import asyncio

    source = StaticPriceSource.from_prices("EURGBP", [0.85, 0.86], start_ms=1000, step_ms=10)
    history = asyncio.run(source.fetch_history())

    assert source.fetch_count == 1
    assert [point.timestamp for point in history["EURGBP"]] == [1000, 1010]
