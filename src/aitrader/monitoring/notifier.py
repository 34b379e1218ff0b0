"""Notification backends."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from aitrader.monitoring.events import EventBus, Notification


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notifier:
    def notify(self, severity: Severity, message: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class LogNotifier(Notifier):
    prefix: str = "[AITRADER]"

    def notify(self, severity: Severity, message: str) -> None:
        print(f"{self.prefix} {severity.value.upper()}: {message}")


@dataclass
class BusNotifier(Notifier):
    bus: EventBus

    def notify(self, severity: Severity, message: str) -> None:
        self.bus.publish(Notification(severity=severity.value, message=message))
