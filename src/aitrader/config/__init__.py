"""Config loading and freezing."""

from aitrader.config.loader import (
    compute_config_hash,
    freeze_config,
    load_config,
    serialize_config,
    verify_config_lock,
)
from aitrader.config.models import (
    AdvisoryConfig,
    AppConfig,
    DataSourceConfig,
    MonitoringConfig,
    SimulationConfig,
)

__all__ = [
    "AdvisoryConfig",
    "AppConfig",
    "DataSourceConfig",
    "MonitoringConfig",
    "SimulationConfig",
    "compute_config_hash",
    "freeze_config",
    "load_config",
    "serialize_config",
    "verify_config_lock",
]
