"""
config.py — Application Settings
==================================
Server and control-range settings in one dataclass.  Defaults suit a
local run; every field can be overridden with a SORTVIZ_* environment
variable (e.g. SORTVIZ_PORT=8080, SORTVIZ_DEBUG=1).
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Tuple

from engine.controller import (
    DEFAULT_SPEED,
    PAUSE_POLL_INTERVAL,
    SPEED_MAX,
    SPEED_MIN,
)

ENV_PREFIX = "SORTVIZ_"


@dataclass
class Settings:
    # server
    host:      str  = "0.0.0.0"
    port:      int  = 5000
    debug:     bool = False
    log_level: str  = "INFO"

    # controls
    default_algo:  str   = "bubble"
    default_size:  int   = 20
    size_min:      int   = 5
    size_max:      int   = 150
    default_speed: float = float(DEFAULT_SPEED)
    speed_min:     float = float(SPEED_MIN)
    speed_max:     float = float(SPEED_MAX)
    poll_interval: float = PAUSE_POLL_INTERVAL   # seconds between pause checks
    seed:          Optional[int] = None          # fixed data for demos / tests

    @property
    def size_range(self) -> Tuple[int, int]:
        return (self.size_min, self.size_max)

    @property
    def speed_range(self) -> Tuple[float, float]:
        return (self.speed_min, self.speed_max)

    def clamp_size(self, n: int) -> int:
        return max(self.size_min, min(self.size_max, int(n)))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build Settings, overriding defaults from SORTVIZ_* variables."""
        environ = os.environ if environ is None else environ
        settings = cls()
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            setattr(settings, f.name, _coerce(f.name, raw, getattr(settings, f.name)))
        return settings


def _coerce(name: str, raw: str, current):
    if name == "seed":
        return int(raw) if raw.strip() else None
    if isinstance(current, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, int):
        return int(raw)
    if isinstance(current, float):
        return float(raw)
    return raw
