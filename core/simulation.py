"""
Simulation Clock — The Windowsill's Heartbeat

Advances every occupied pot by one tick: growth when recently watered, decay
when not, and withering from either long neglect (calendar days) or decay
down to almost nothing.

Growth is a running per-tick accumulator while watering recency is measured
against wall-clock time, so the effective growth rate depends on the tick
period, not on elapsed time.
"""

from __future__ import annotations

import asyncio
import logging

from core.config import SOFT_WITHER_GROWTH, GardenConfig
from core.world import EMPTY, GROWING, GROWN, WITHERED, World, clamp01, now_ms

logger = logging.getLogger("windowsill.simulation")


class SimulationClock:
    """Owns the tick algorithm and the periodic loop that drives it."""

    def __init__(self, world: World, config: GardenConfig, broadcaster=None):
        self.world = world
        self.config = config
        self.broadcaster = broadcaster
        self.tick_count = 0

    # ── One tick ──────────────────────────────────────────────────

    def tick(self, now: float | None = None) -> int:
        """Advance the world one step. Returns how many pots changed status."""
        now = now_ms() if now is None else now
        cfg = self.config
        self.world.last_tick = now
        self.tick_count += 1
        changed = 0

        for pot in self.world.pots:
            if pot.status == EMPTY:
                continue

            before = pot.status
            days = pot.days_since_watered(now, cfg.day_length_ms)

            if days >= cfg.wither_after_days:
                pot.status = WITHERED
            elif pot.status in (GROWING, GROWN):
                watered_recently = days < 1
                if watered_recently:
                    pot.growth = clamp01(pot.growth + cfg.growth_per_tick)
                else:
                    pot.growth = clamp01(pot.growth - cfg.decay_per_tick)

                if pot.growth >= 1:
                    pot.status = GROWN

                if pot.growth <= SOFT_WITHER_GROWTH and not watered_recently:
                    pot.status = WITHERED

            if pot.status != before:
                changed += 1
                logger.info("Pot %d: %s → %s (%.1f days dry)", pot.id, before, pot.status, days)

        logger.debug("Tick %d complete, %d status change(s)", self.tick_count, changed)
        return changed

    # ── Periodic driver ───────────────────────────────────────────

    async def run(self) -> None:
        """Tick forever on the configured period, broadcasting when anyone is watching."""
        interval = self.config.tick_ms / 1000
        logger.info("Simulation clock started (interval=%.1fs)", interval)
        while True:
            await asyncio.sleep(interval)
            try:
                self.tick()
                if self.broadcaster is not None:
                    await self.broadcaster.broadcast_if_observed()
            except Exception:
                logger.exception("Simulation tick %d failed", self.tick_count)
