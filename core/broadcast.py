"""
Broadcast Gateway — Everyone Sees the Same Windowsill

Tracks connected observers and pushes the full world to them. There are no
deltas: every push is a complete snapshot, so clients never merge state.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol

from core.world import World

logger = logging.getLogger("windowsill.broadcast")


class Observer(Protocol):
    async def send_json(self, data: Any, mode: str = "text") -> None: ...


class BroadcastGateway:
    """Connection bookkeeping plus full-state fan-out."""

    def __init__(self, world: World):
        self.world = world
        self._observers: list[Observer] = []

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    async def connect(self, observer: Observer) -> None:
        """Register an observer and bring it up to date immediately."""
        self._observers.append(observer)
        logger.info("Observer connected (%d watching)", self.observer_count)
        await self.send(observer, "state", self.world.to_snapshot())

    def disconnect(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)
            logger.info("Observer disconnected (%d watching)", self.observer_count)

    async def send(self, observer: Observer, event: str, data: dict) -> bool:
        """Point-to-point message. Returns False (and drops the observer) if the send fails."""
        try:
            await observer.send_json({"event": event, "data": data, "timestamp": time.time()})
            return True
        except Exception:
            logger.debug("Send of '%s' failed; dropping observer", event)
            self.disconnect(observer)
            return False

    async def broadcast_state(self) -> int:
        """Push the current world to every observer. Returns how many received it."""
        snapshot = self.world.to_snapshot()
        delivered = 0
        for observer in list(self._observers):
            if await self.send(observer, "state", snapshot):
                delivered += 1
        return delivered

    async def broadcast_if_observed(self) -> int:
        if not self._observers:
            return 0
        return await self.broadcast_state()
