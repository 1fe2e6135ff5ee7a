"""
World Model — The Windowsill and Its Pots

The single authoritative state of the garden: a fixed row of pots plus the
timestamp of the last simulation tick. Pots are mutated in place and never
removed; clearing a pot resets it to its empty default.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from functools import partial
from typing import Any

from pydantic import ValidationError

from core.config import DEFAULT_CARETAKER, DEFAULT_NAME, LABEL_LIMIT
from models.schemas import PotSnapshot, WorldSnapshot

logger = logging.getLogger("windowsill.world")

EMPTY = "empty"
GROWING = "growing"
GROWN = "grown"
WITHERED = "withered"


def now_ms() -> int:
    return int(time.time() * 1000)


def clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


# ── Free-text labels ──────────────────────────────────────────────

def clean_label(value: Any, default: str, limit: int = LABEL_LIMIT) -> str:
    """Trim, cap at `limit` characters, and fall back to `default` when blank."""
    if not isinstance(value, str):
        return default
    return value.strip()[:limit] or default


clean_name = partial(clean_label, default=DEFAULT_NAME)
clean_caretaker = partial(clean_label, default=DEFAULT_CARETAKER)


class SnapshotError(ValueError):
    """A persisted snapshot is structurally unusable."""


# ── Pot ───────────────────────────────────────────────────────────

@dataclass
class Pot:
    id: int
    seed_type: str | None = None
    status: str = EMPTY
    growth: float = 0.0
    planted_at: float | None = None
    last_watered_at: float | None = None
    name: str = ""
    caretaker: str = ""

    def reset(self) -> None:
        """Return to the empty default, keeping the id."""
        fresh = Pot(self.id)
        self.seed_type = fresh.seed_type
        self.status = fresh.status
        self.growth = fresh.growth
        self.planted_at = fresh.planted_at
        self.last_watered_at = fresh.last_watered_at
        self.name = fresh.name
        self.caretaker = fresh.caretaker

    @property
    def is_empty(self) -> bool:
        return self.status == EMPTY

    def days_since_watered(self, now: float, day_length_ms: float) -> float:
        if self.last_watered_at is None:
            return float("inf")
        return (now - self.last_watered_at) / day_length_ms

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "seedType": self.seed_type,
            "status": self.status,
            "growth": self.growth,
            "plantedAt": self.planted_at,
            "lastWateredAt": self.last_watered_at,
            "name": self.name,
            "caretaker": self.caretaker,
        }

    @classmethod
    def from_snapshot(cls, snap: PotSnapshot) -> Pot:
        return cls(
            id=snap.id,
            seed_type=snap.seed_type,
            status=snap.status,
            growth=snap.growth,
            planted_at=snap.planted_at,
            last_watered_at=snap.last_watered_at,
            name=snap.name,
            caretaker=snap.caretaker,
        )


# ── World ─────────────────────────────────────────────────────────

@dataclass
class World:
    last_tick: float
    pots: list[Pot] = field(default_factory=list)

    @classmethod
    def fresh(cls, num_pots: int, now: float | None = None) -> World:
        return cls(
            last_tick=now_ms() if now is None else now,
            pots=[Pot(i) for i in range(num_pots)],
        )

    def get_pot(self, pot_id: Any) -> Pot | None:
        """Look up a pot by id; anything that is not an in-range whole number is 'not found'."""
        if isinstance(pot_id, bool):
            return None
        if isinstance(pot_id, float):
            if not pot_id.is_integer():
                return None
            pot_id = int(pot_id)
        if not isinstance(pot_id, int):
            return None
        if 0 <= pot_id < len(self.pots):
            return self.pots[pot_id]
        return None

    def occupied(self) -> list[Pot]:
        return [p for p in self.pots if not p.is_empty]

    def to_snapshot(self) -> dict[str, Any]:
        """Copy-out of the whole world in its wire/persisted shape."""
        return {
            "lastTick": self.last_tick,
            "pots": [p.to_dict() for p in self.pots],
        }

    @classmethod
    def from_snapshot(cls, data: Any, num_pots: int) -> World:
        """
        Rebuild a world from persisted data, reconciled to `num_pots` slots.

        Pots with in-range ids are kept, gaps are filled with empty pots, and
        individual pot entries that fail validation are dropped. Raises
        SnapshotError when the envelope itself (pots list, numeric lastTick)
        is unusable.
        """
        try:
            envelope = WorldSnapshot.model_validate(data)
        except ValidationError as e:
            raise SnapshotError(f"invalid world snapshot: {e.error_count()} error(s)") from e

        existing: dict[int, Pot] = {}
        for raw in envelope.pots:
            try:
                snap = PotSnapshot.model_validate(raw)
            except ValidationError:
                logger.warning("Dropping malformed pot entry from snapshot: %r", raw)
                continue
            if 0 <= snap.id < num_pots:
                existing[snap.id] = Pot.from_snapshot(snap)

        dropped = len(envelope.pots) - len(existing)
        if dropped > 0:
            logger.info("Snapshot reconciliation dropped %d pot entries", dropped)

        return cls(
            last_tick=envelope.last_tick,
            pots=[existing[i] if i in existing else Pot(i) for i in range(num_pots)],
        )
