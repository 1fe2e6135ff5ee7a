"""
Persistence Gateway — Best-Effort Snapshots

Loads the world once on boot and overwrites a single snapshot on a fixed
period. Any storage problem is logged and ignored: a missing, unreadable or
malformed snapshot means a fresh world, and a failed save leaves the live
world untouched. Recent writes can be lost on a crash.
"""

from __future__ import annotations

import asyncio
import json
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import GardenConfig
from core.world import SnapshotError, World
from models.db_models import WORLD_ROW_ID, WorldSnapshotRecord

logger = logging.getLogger("windowsill.persistence")


class PersistenceGateway:
    """Reads and writes the world snapshot row."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], config: GardenConfig):
        self.session_factory = session_factory
        self.config = config
        self.save_count = 0

    async def load(self) -> World:
        """Return the persisted world reconciled to the configured pot count, or a fresh one."""
        num_pots = self.config.num_pots
        try:
            async with self.session_factory() as session:
                record = await session.get(WorldSnapshotRecord, WORLD_ROW_ID)
                payload = record.payload if record is not None else None
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Failed to read snapshot, starting fresh: %s", e)
            return World.fresh(num_pots)

        if payload is None:
            logger.info("No snapshot found, planting a fresh windowsill of %d pots", num_pots)
            return World.fresh(num_pots)

        try:
            world = World.from_snapshot(json.loads(payload), num_pots)
        except (ValueError, TypeError) as e:
            logger.warning("Snapshot unusable, starting fresh: %s", e)
            return World.fresh(num_pots)

        logger.info("Loaded snapshot (%d occupied pots)", len(world.occupied()))
        return world

    async def save(self, world: World) -> bool:
        """Overwrite the snapshot. Returns False on failure; never raises for storage errors."""
        payload = json.dumps(world.to_snapshot())
        try:
            async with self.session_factory() as session:
                record = await session.get(WorldSnapshotRecord, WORLD_ROW_ID)
                if record is None:
                    session.add(WorldSnapshotRecord(id=WORLD_ROW_ID, payload=payload))
                else:
                    record.payload = payload
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Failed to save snapshot: %s", e)
            return False

        self.save_count += 1
        logger.debug("Snapshot saved (#%d)", self.save_count)
        return True

    async def run(self, world: World) -> None:
        """Save on the configured period until cancelled."""
        interval = self.config.save_every_ms / 1000
        logger.info("Snapshot saver started (interval=%.1fs)", interval)
        while True:
            await asyncio.sleep(interval)
            try:
                await self.save(world)
            except Exception:
                logger.exception("Snapshot save loop iteration failed")
