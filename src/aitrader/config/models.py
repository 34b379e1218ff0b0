"""Configuration models for reproducible sessions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SimulationConfig:
    window_length: int = 600
    advisory_period: int = 10
    advisory_lookback: int = 60
    fee_rate: float = 0.001
    initial_balance: float = 10000.0
    milestone_interval: int = 5
    base_interval_seconds: float = 1.0
    default_speed: float = 1.0
    min_speed: float = 1.0
    max_speed: float = 10.0
    trade_amount: float = 100.0


@dataclass(frozen=True)
class AdvisoryConfig:
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    max_tokens: int = 150
    api_key_env: str = "OPENAI_API_KEY"
    base_url: Optional[str] = None
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class DataSourceConfig:
    base_url: str = "https://api.frankfurter.app"
    base_currency: str = "EUR"
    quote_currencies: list[str] = field(default_factory=lambda: ["USD", "GBP", "JPY", "AUD", "CAD"])
    lookback_days: int = 120
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"


@dataclass(frozen=True)
class AppConfig:
    name: str
    version: str
    run_id_prefix: str
    default_symbol: str = "EURUSD"
    simulation: SimulationConfig = SimulationConfig()
    advisory: AdvisoryConfig = AdvisoryConfig()
    data_source: DataSourceConfig = DataSourceConfig()
    monitoring: MonitoringConfig = MonitoringConfig()
