"""
Action Processor — Caretaker Requests

Validates and applies plant, water and clear against the world. Failures are
returned as values with a short reason; nothing here raises for bad input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from core.config import INITIAL_GROWTH, SEED_TYPES
from core.world import EMPTY, GROWING, WITHERED, World, clean_caretaker, clean_name, now_ms

logger = logging.getLogger("windowsill.actions")

NO_SUCH_POT = "no such pot"
POT_NOT_EMPTY = "pot not empty"
INVALID_SEED = "invalid seed type"
NOTHING_TO_WATER = "nothing to water"
WITHERED_POT = "withered pot"
ALREADY_EMPTY = "already empty"
UNKNOWN_ACTION = "unknown action"


@dataclass(frozen=True)
class ActionResult:
    action: str
    ok: bool
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"action": self.action, "ok": self.ok}
        if self.reason is not None:
            out["reason"] = self.reason
        return out


class ActionProcessor:
    """Applies caretaker actions to a single world, pot by pot."""

    def __init__(self, world: World):
        self.world = world

    def plant(
        self,
        pot_id: Any,
        seed_type: Any,
        name: Any = None,
        caretaker: Any = None,
        now: float | None = None,
    ) -> ActionResult:
        pot = self.world.get_pot(pot_id)
        if pot is None:
            return ActionResult("plant", False, NO_SUCH_POT)
        if pot.status != EMPTY:
            return ActionResult("plant", False, POT_NOT_EMPTY)
        if seed_type not in SEED_TYPES:
            return ActionResult("plant", False, INVALID_SEED)

        now = now_ms() if now is None else now
        pot.seed_type = seed_type
        pot.name = clean_name(name)
        pot.caretaker = clean_caretaker(caretaker)
        pot.planted_at = now
        pot.last_watered_at = now
        pot.growth = INITIAL_GROWTH
        pot.status = GROWING

        logger.info("Pot %d planted with %s '%s' by %s", pot.id, seed_type, pot.name, pot.caretaker)
        return ActionResult("plant", True)

    def water(self, pot_id: Any, now: float | None = None) -> ActionResult:
        pot = self.world.get_pot(pot_id)
        if pot is None:
            return ActionResult("water", False, NO_SUCH_POT)
        if pot.status == EMPTY:
            return ActionResult("water", False, NOTHING_TO_WATER)
        if pot.status == WITHERED:
            return ActionResult("water", False, WITHERED_POT)

        pot.last_watered_at = now_ms() if now is None else now
        logger.info("Pot %d watered", pot.id)
        return ActionResult("water", True)

    def clear(self, pot_id: Any) -> ActionResult:
        pot = self.world.get_pot(pot_id)
        if pot is None:
            return ActionResult("clear", False, NO_SUCH_POT)
        if pot.status == EMPTY:
            return ActionResult("clear", False, ALREADY_EMPTY)

        previous = pot.status
        pot.reset()
        logger.info("Pot %d cleared (was %s)", pot.id, previous)
        return ActionResult("clear", True)

    def dispatch(self, action: str, payload: dict[str, Any] | None = None) -> ActionResult:
        """Route a raw channel payload (camelCase keys) to the matching action."""
        payload = payload or {}
        pot_id = payload.get("potId")
        if action == "plant":
            return self.plant(pot_id, payload.get("seedType"), payload.get("name"), payload.get("caretaker"))
        if action == "water":
            return self.water(pot_id)
        if action == "clear":
            return self.clear(pot_id)
        return ActionResult(str(action), False, UNKNOWN_ACTION)
