from __future__ import annotations

from aitrader.ledger import TradeAction, TradeRecord
from aitrader.monitoring import (
    AuditLog,
    BusNotifier,
    EventBus,
    EventRecorder,
    LogNotifier,
    Monitor,
    Notification,
    Severity,
)
from aitrader.runtime import create_run_context


def test_audit_log_round_trip(tmp_path):
    audit = AuditLog(tmp_path / "logs" / "audit.log", run_id="default-run", config_hash="abc")
    audit.log("session_loaded", {"symbols": ["EURUSD"]})
    audit.log("trade_executed", {"run_id": "run-7", "action": "BUY"})

    events = audit.read_events()
    assert [event["event"] for event in events] == ["session_loaded", "trade_executed"]
    assert events[0]["run_id"] == "default-run"
    assert events[1]["run_id"] == "run-7"
    assert events[1]["config_hash"] == "abc"
    assert audit.read_events("trade_executed")[0]["payload"]["action"] == "BUY"


def test_log_notifier_prints(capsys):
    LogNotifier().notify(Severity.WARNING, "careful")
    assert capsys.readouterr().out.strip() == "[AITRADER] WARNING: careful"


def test_monitor_trade_messages():
    bus = EventBus()
    recorder = EventRecorder(bus)
    monitor = Monitor(BusNotifier(bus))

    monitor.trade_executed(
        TradeRecord(sim_time=1, action=TradeAction.SELL, notional_amount=100, price=1.25, fee=0.1, quantity=80),
        "EURUSD",
    )
    monitor.trade_executed(TradeRecord(sim_time=2, action=TradeAction.HOLD, notional_amount=0, price=1.25, fee=0), "EURUSD")

    assert recorder.of_type(Notification) == [
        Notification(severity="success", message="Sold 80.0000 EURUSD for $100.00"),
        Notification(severity="info", message="Decided to hold the position"),
    ]


def test_event_bus_unsubscribe():
    bus = EventBus()
    seen = []
    unsubscribe = bus.subscribe(seen.append)
    bus.publish("first")
    unsubscribe()
    bus.publish("second")
    assert seen == ["first"]


def test_run_context_ids_are_unique_per_sequence():
    first = create_run_context("aitrader-v1", "EURUSD", 1.0, 1, config_hash="0123456789abcdef")
    second = create_run_context("aitrader-v1", "EURUSD", 1.0, 2, config_hash="0123456789abcdef")

    assert first.run_id.startswith("aitrader-v1-EURUSD-")
    assert first.run_id.endswith("-001-01234567")
    assert first.run_id != second.run_id
    assert create_run_context("p", "EURUSD", 1.0, 1, run_id="fixed").run_id == "fixed"
