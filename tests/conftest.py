"""
Shared test fixtures — a small windowsill for every component to grow in.
"""

from __future__ import annotations

import pytest
import pytest_asyncio

from core.config import GardenConfig
from core.world import World
from db.database import create_engine, create_session_factory, init_db
from timeline import DAY, NOW, TEST_DATABASE_URL, TICK


@pytest.fixture
def config():
    return GardenConfig(num_pots=6, tick_ms=TICK, save_every_ms=TICK, day_length_ms=DAY)


@pytest.fixture
def world(config):
    return World.fresh(config.num_pots, now=NOW)


@pytest_asyncio.fixture
async def engine():
    eng = create_engine(TEST_DATABASE_URL)
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)
