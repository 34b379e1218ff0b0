"""Load and freeze configuration files."""

from __future__ import annotations

import hashlib
import json
import math
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from aitrader.config.models import (
    AdvisoryConfig,
    AppConfig,
    DataSourceConfig,
    MonitoringConfig,
    SimulationConfig,
)


def load_config(path: str | Path) -> AppConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = _require(data, "name")
    version = str(_require(data, "version"))
    run_id_prefix = data.get("run_id_prefix", name)

    simulation = _parse_simulation(data.get("simulation", {}))
    advisory = _parse_advisory(data.get("advisory", {}))
    data_source = _parse_data_source(data.get("data_source", {}))
    monitoring = _parse_monitoring(data.get("monitoring", {}))

    default_symbol = str(data.get("default_symbol", f"{data_source.base_currency}USD"))
    symbols = {f"{data_source.base_currency}{quote}" for quote in data_source.quote_currencies}
    if default_symbol not in symbols:
        raise ValueError(f"default_symbol {default_symbol} is not served by the data source")

    return AppConfig(
        name=name,
        version=version,
        run_id_prefix=run_id_prefix,
        default_symbol=default_symbol,
        simulation=simulation,
        advisory=advisory,
        data_source=data_source,
        monitoring=monitoring,
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def freeze_config(path: str | Path, lock_path: Optional[str | Path] = None) -> Path:
    path = Path(path)
    config_hash = compute_config_hash(path)
    if lock_path is None:
        lock_path = path.with_suffix(path.suffix + ".lock.json")
    lock_path = Path(lock_path)

    payload = {
        "config_path": str(path),
        "config_hash": config_hash,
        "frozen_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    lock_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return lock_path


def verify_config_lock(path: str | Path, lock_path: Optional[str | Path] = None) -> bool:
    path = Path(path)
    if lock_path is None:
        lock_path = path.with_suffix(path.suffix + ".lock.json")
    lock_path = Path(lock_path)
    if not lock_path.exists():
        return False
    payload = json.loads(lock_path.read_text(encoding="utf-8"))
    return payload.get("config_hash") == compute_config_hash(path)


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _positive(value: Any, key: str, cast=float):
    try:
        number = cast(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {key}: {value}") from exc
    if not math.isfinite(number) or number <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return number


def _parse_simulation(data: dict[str, Any]) -> SimulationConfig:
    defaults = SimulationConfig()
    fee_rate = float(data.get("fee_rate", defaults.fee_rate))
    if not 0.0 <= fee_rate < 1.0:
        raise ValueError(f"fee_rate must be in [0, 1), got {fee_rate}")
    advisory_lookback = int(data.get("advisory_lookback", defaults.advisory_lookback))
    if advisory_lookback < 0:
        raise ValueError(f"advisory_lookback must not be negative, got {advisory_lookback}")

    config = SimulationConfig(
        window_length=_positive(data.get("window_length", defaults.window_length), "window_length", int),
        advisory_period=_positive(data.get("advisory_period", defaults.advisory_period), "advisory_period", int),
        advisory_lookback=advisory_lookback,
        fee_rate=fee_rate,
        initial_balance=_positive(data.get("initial_balance", defaults.initial_balance), "initial_balance"),
        milestone_interval=_positive(
            data.get("milestone_interval", defaults.milestone_interval), "milestone_interval", int
        ),
        base_interval_seconds=_positive(
            data.get("base_interval_seconds", defaults.base_interval_seconds), "base_interval_seconds"
        ),
        default_speed=_positive(data.get("default_speed", defaults.default_speed), "default_speed"),
        min_speed=_positive(data.get("min_speed", defaults.min_speed), "min_speed"),
        max_speed=_positive(data.get("max_speed", defaults.max_speed), "max_speed"),
        trade_amount=_positive(data.get("trade_amount", defaults.trade_amount), "trade_amount"),
    )
    if not config.min_speed <= config.default_speed <= config.max_speed:
        raise ValueError("default_speed must lie within [min_speed, max_speed]")
    return config


def _parse_advisory(data: dict[str, Any]) -> AdvisoryConfig:
    defaults = AdvisoryConfig()
    return AdvisoryConfig(
        model=str(data.get("model", defaults.model)),
        temperature=float(data.get("temperature", defaults.temperature)),
        max_tokens=_positive(data.get("max_tokens", defaults.max_tokens), "max_tokens", int),
        api_key_env=str(data.get("api_key_env", defaults.api_key_env)),
        base_url=data.get("base_url"),
        timeout_seconds=_positive(data.get("timeout_seconds", defaults.timeout_seconds), "timeout_seconds"),
    )


def _parse_data_source(data: dict[str, Any]) -> DataSourceConfig:
    defaults = DataSourceConfig()
    quotes = [str(item).upper() for item in data.get("quote_currencies", defaults.quote_currencies)]
    if not quotes:
        raise ValueError("quote_currencies must not be empty")
    return DataSourceConfig(
        base_url=str(data.get("base_url", defaults.base_url)).rstrip("/"),
        base_currency=str(data.get("base_currency", defaults.base_currency)).upper(),
        quote_currencies=quotes,
        lookback_days=_positive(data.get("lookback_days", defaults.lookback_days), "lookback_days", int),
        timeout_seconds=_positive(data.get("timeout_seconds", defaults.timeout_seconds), "timeout_seconds"),
    )


def _parse_monitoring(data: dict[str, Any]) -> MonitoringConfig:
    return MonitoringConfig(
        audit_log_path=str(data.get("audit_log_path", "runtime/audit.log")),
    )


def serialize_config(config: AppConfig) -> dict[str, Any]:
    return asdict(config)
