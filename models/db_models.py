"""
SQLAlchemy ORM Models — The Snapshot Shelf

The world is persisted as one JSON document in a single-row table. The row is
overwritten on every save; there is no history and no write-ahead log.
"""

from __future__ import annotations

import time

from sqlalchemy import Column, Float, String, Text
from sqlalchemy.orm import DeclarativeBase

WORLD_ROW_ID = "world"


def _now() -> float:
    return time.time()


class Base(DeclarativeBase):
    pass


class WorldSnapshotRecord(Base):
    __tablename__ = "world_snapshots"

    id = Column(String, primary_key=True, default=WORLD_ROW_ID)
    payload = Column(Text, nullable=False)              # JSON {lastTick, pots: [...]}
    saved_at = Column(Float, default=_now, onupdate=_now)
