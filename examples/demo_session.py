import asyncio
import math

from aitrader.advisory import Recommender
from aitrader.config import AppConfig, SimulationConfig
from aitrader.market import StaticPriceSource
from aitrader.monitoring import AdvisoryReady, EventRecorder, LogNotifier, SurveyRequired
from aitrader.simulator import TradingSession


class TrendRecommender(Recommender):
    """Offline stand-in: buy when the last price in the prompt beats the first."""

    async def recommend(self, prompt: str) -> str:
        prices = [float(value) for value in prompt.split("[", 1)[1].split("]", 1)[0].split(", ")]
        if prices[-1] > prices[0]:
            return "Buy: the recent trend is up."
        if prices[-1] < prices[0]:
            return "Sell: the recent trend is down."
        return "Hold: no clear direction."


config = AppConfig(
    name="demo",
    version="1",
    run_id_prefix="demo",
    simulation=SimulationConfig(window_length=120, base_interval_seconds=0.01),
)
prices = [1.08 + 0.01 * math.sin(index / 9) for index in range(200)]
source = StaticPriceSource.from_prices("EURUSD", prices)


async def main():
    session = TradingSession(config, source, TrendRecommender(), notifier=LogNotifier())
    recorder = EventRecorder(session.bus)

    def follow(event):
        if isinstance(event, AdvisoryReady):
            session.trade(event.advisory.action)
        elif isinstance(event, SurveyRequired) and session.run.survey.active:
            session.score_simple(5)
            session.close_survey()

    session.bus.subscribe(follow)
    await session.set_speed(10)
    await session.start()
    summary = await session.wait()

    print("Advisories:", len(recorder.of_type(AdvisoryReady)))
    print("Trades:", summary.trade_count)
    print("Final asset value:", round(summary.final_asset_value, 2))
    print("Outcome:", summary.outcome.value)


asyncio.run(main())
