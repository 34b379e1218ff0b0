"""Monitoring exports."""

from aitrader.monitoring.audit import AuditLog
from aitrader.monitoring.events import (
    AdvisoryReady,
    EventBus,
    EventRecorder,
    Notification,
    RunCompleted,
    RunFailed,
    SurveyRequired,
    TickUpdated,
    TradeExecuted,
)
from aitrader.monitoring.monitor import ADVISORY_FALLBACK_MESSAGE, Monitor
from aitrader.monitoring.notifier import BusNotifier, LogNotifier, Notifier, Severity

__all__ = [
    "ADVISORY_FALLBACK_MESSAGE",
    "AdvisoryReady",
    "AuditLog",
    "BusNotifier",
    "EventBus",
    "EventRecorder",
    "LogNotifier",
    "Monitor",
    "Notification",
    "Notifier",
    "RunCompleted",
    "RunFailed",
    "Severity",
    "SurveyRequired",
    "TickUpdated",
    "TradeExecuted",
]
