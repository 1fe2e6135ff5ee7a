"""
Garden Configuration — The Windowsill's Tunables

All timing and growth constants live here. Every tunable can be overridden
through a WINDOWSILL_* environment variable so a demo can run at any speed.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import asdict, dataclass

logger = logging.getLogger("windowsill.config")

SEED_TYPES = ("fern", "flower", "moss")

INITIAL_GROWTH = 0.15
SOFT_WITHER_GROWTH = 0.05
LABEL_LIMIT = 24
DEFAULT_NAME = "Unnamed plant"
DEFAULT_CARETAKER = "Anonymous"

ENV_PREFIX = "WINDOWSILL_"


@dataclass(frozen=True)
class GardenConfig:
    num_pots: int = 20
    tick_ms: int = 15_000
    save_every_ms: int = 15_000
    day_length_ms: int = 1000 * 60 * 5       # one simulated "day" = 5 minutes
    wither_after_days: float = 3.0
    growth_per_tick: float = 0.02
    decay_per_tick: float = 0.015

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> GardenConfig:
        """Build a config from WINDOWSILL_* variables, keeping defaults for bad values."""
        env = os.environ if environ is None else environ
        defaults = cls()
        values = {}
        for key, default in asdict(defaults).items():
            raw = env.get(ENV_PREFIX + key.upper())
            if raw is None:
                continue
            try:
                value = type(default)(raw)
            except ValueError:
                logger.warning("Ignoring %s%s=%r: not a valid %s", ENV_PREFIX, key.upper(), raw, type(default).__name__)
                continue
            if not math.isfinite(value) or value <= 0:
                logger.warning("Ignoring %s%s=%r: must be a positive finite number", ENV_PREFIX, key.upper(), raw)
                continue
            values[key] = value
        return cls(**values)

    def client_view(self) -> dict:
        """Constants the browser needs to stay numerically in step with the server."""
        return {
            "numPots": self.num_pots,
            "tickMs": self.tick_ms,
            "dayLengthMs": self.day_length_ms,
            "witherAfterDays": self.wither_after_days,
            "seedTypes": list(SEED_TYPES),
        }
