from __future__ import annotations

import argparse
import asyncio
import csv
import json
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from aitrader.advisory import OpenAIRecommender
from aitrader.config import compute_config_hash, load_config, serialize_config
from aitrader.market import FrankfurterSource, PricePoint, PriceSeries, StaticPriceSource
from aitrader.monitoring import (
    AdvisoryReady,
    AuditLog,
    EventRecorder,
    LogNotifier,
    RunCompleted,
    SurveyRequired,
    TradeExecuted,
)
from aitrader.simulator import TradingSession


def _load_csv(path: Path, symbol: str) -> StaticPriceSource:
    points = []
    with path.open(newline="", encoding="utf-8") as handle:
        for row in csv.DictReader(handle):
            points.append(PricePoint(timestamp=int(row["timestamp"]), price=float(row["price"])))
    return StaticPriceSource({symbol: PriceSeries(symbol=symbol, points=tuple(points))})


async def _run(args: argparse.Namespace) -> dict:
    config_path = Path(args.config)
    config = load_config(config_path)
    simulation = config.simulation
    if args.interval is not None:
        simulation = replace(simulation, base_interval_seconds=args.interval)
    if args.window is not None:
        simulation = replace(simulation, window_length=args.window)
    config = replace(config, simulation=simulation)
    symbol = args.symbol or config.default_symbol

    if args.prices:
        source = _load_csv(Path(args.prices), symbol)
    else:
        source = FrankfurterSource(config.data_source)

    config_hash = compute_config_hash(config_path)
    audit = AuditLog(Path(config.monitoring.audit_log_path), config_hash=config_hash)
    session = TradingSession(
        config,
        source,
        OpenAIRecommender(config.advisory),
        notifier=LogNotifier(),
        audit_log=audit,
        config_hash=config_hash,
    )
    recorder = EventRecorder(session.bus)

    def on_event(event: object) -> None:
        if isinstance(event, AdvisoryReady) and args.auto_follow:
            session.trade(event.advisory.action)
        elif isinstance(event, SurveyRequired) and session.run.survey.active:
            session.close_survey()
        elif isinstance(event, TradeExecuted):
            print(f"[{event.record.sim_time:>4}] {event.record.action.value} @ {event.record.price:.4f}")
        elif isinstance(event, RunCompleted):
            print(f"Run complete: {event.summary.outcome.value} {event.summary.total_profit:+.2f}")

    session.bus.subscribe(on_event)
    await session.set_speed(args.speed)
    await session.start(symbol)
    summary = await session.wait()

    return {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "config_path": str(config_path),
        "config": serialize_config(config),
        "summary": summary.to_dict() if summary else None,
        "trades": [record.to_dict() for record in session.run.trades] if session.run else [],
        "advisories": [event.advisory.to_dict() for event in recorder.of_type(AdvisoryReady)],
    }


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", required=True)
    parser.add_argument("--output", required=True)
    parser.add_argument("--symbol")
    parser.add_argument("--prices", help="CSV with timestamp,price columns instead of the Frankfurter API")
    parser.add_argument("--speed", type=float, default=10.0)
    parser.add_argument("--interval", type=float, help="Override base_interval_seconds")
    parser.add_argument("--window", type=int, help="Override window_length")
    parser.add_argument("--auto-follow", action="store_true", help="Execute every advisory as suggested")
    args = parser.parse_args()

    report = asyncio.run(_run(args))
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
