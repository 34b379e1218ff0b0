"""Run context creation and metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class RunContext:
    run_id: str
    symbol: str
    speed_multiplier: float
    sequence: int
    started_at: datetime
    config_hash: Optional[str] = None


def create_run_context(
    run_id_prefix: str,
    symbol: str,
    speed_multiplier: float,
    sequence: int,
    config_hash: Optional[str] = None,
    run_id: Optional[str] = None,
) -> RunContext:
    started_at = datetime.now(timezone.utc)
    if run_id is None:
        stamp = started_at.strftime("%Y%m%dT%H%M%SZ")
        run_id = f"{run_id_prefix}-{symbol}-{stamp}-{sequence:03d}"
        if config_hash:
            run_id = f"{run_id}-{config_hash[:8]}"
    return RunContext(
        run_id=run_id,
        symbol=symbol,
        speed_multiplier=speed_multiplier,
        sequence=sequence,
        started_at=started_at,
        config_hash=config_hash,
    )
