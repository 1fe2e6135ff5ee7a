"""
Pydantic Schemas — The Windowsill's Wire Shapes

Snapshot models validate persisted world data on boot; request/response
models describe the HTTP and WebSocket surface. Field names on the wire are
camelCase so the browser client can read state as-is.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SeedType = Literal["fern", "flower", "moss"]
PotStatus = Literal["empty", "growing", "grown", "withered"]


# ── Snapshot ──────────────────────────────────────────────────────

class PotSnapshot(BaseModel):
    id: int = Field(..., strict=True)
    seed_type: SeedType | None = Field(None, alias="seedType")
    status: PotStatus = "empty"
    growth: float = Field(0.0, ge=0, le=1)
    planted_at: float | None = Field(None, alias="plantedAt")
    last_watered_at: float | None = Field(None, alias="lastWateredAt")
    name: str = ""
    caretaker: str = ""

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _empty_iff_unseeded(self) -> PotSnapshot:
        if (self.status == "empty") != (self.seed_type is None):
            raise ValueError("seedType must be unset exactly when status is empty")
        if self.status == "empty" and (self.planted_at is not None or self.last_watered_at is not None):
            raise ValueError("empty pot cannot carry timestamps")
        if self.status != "empty" and (self.planted_at is None or self.last_watered_at is None):
            raise ValueError("planted pot needs plantedAt and lastWateredAt")
        return self


class WorldSnapshot(BaseModel):
    """Envelope check only; pots are validated one at a time so a bad entry can be dropped."""

    last_tick: float = Field(..., alias="lastTick", strict=True)
    pots: list[Any]

    model_config = ConfigDict(populate_by_name=True)


# ── Requests ──────────────────────────────────────────────────────

class PlantRequest(BaseModel):
    seed_type: str = Field(..., alias="seedType", description="fern, flower or moss")
    name: str | None = Field(None, description="Plant name, trimmed to 24 characters")
    caretaker: str | None = Field(None, description="Who planted it, trimmed to 24 characters")

    model_config = ConfigDict(populate_by_name=True)


class ClientMessage(BaseModel):
    """A single frame sent over /ws/garden."""

    event: str
    data: dict[str, Any] = Field(default_factory=dict)


# ── Responses ─────────────────────────────────────────────────────

class PotResponse(BaseModel):
    id: int
    seedType: SeedType | None
    status: PotStatus
    growth: float
    plantedAt: float | None
    lastWateredAt: float | None
    name: str
    caretaker: str


class WorldResponse(BaseModel):
    lastTick: float
    pots: list[PotResponse]


class ActionResultResponse(BaseModel):
    action: str
    ok: bool
    reason: str | None = None


class GardenConfigResponse(BaseModel):
    numPots: int
    tickMs: int
    dayLengthMs: int
    witherAfterDays: float
    seedTypes: list[str]
