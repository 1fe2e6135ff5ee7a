"""Tests for the Action Processor — plant, water, clear."""

import pytest

from core.actions import ActionProcessor, ActionResult
from core.world import Pot
from timeline import NOW


@pytest.fixture
def actions(world):
    return ActionProcessor(world)


def test_plant_empty_pot(actions, world):
    result = actions.plant(2, "fern", "  Fernando  ", " Kit ", now=NOW)
    assert result == ActionResult("plant", True)
    pot = world.pots[2]
    assert pot.status == "growing"
    assert pot.seed_type == "fern"
    assert pot.growth == 0.15
    assert pot.planted_at == pot.last_watered_at == NOW
    assert pot.name == "Fernando"
    assert pot.caretaker == "Kit"


def test_plant_defaults_blank_labels(actions, world):
    actions.plant(0, "moss", "   ", None, now=NOW)
    assert world.pots[0].name == "Unnamed plant"
    assert world.pots[0].caretaker == "Anonymous"


def test_plant_caps_long_labels(actions, world):
    actions.plant(0, "flower", "x" * 50, "y" * 30, now=NOW)
    assert len(world.pots[0].name) == 24
    assert len(world.pots[0].caretaker) == 24


def test_plant_occupied_pot_fails_and_leaves_world(actions, world):
    actions.plant(1, "moss", "First", "A", now=NOW)
    before = world.to_snapshot()
    result = actions.plant(1, "fern", "Second", "B", now=NOW + 1)
    assert result == ActionResult("plant", False, "pot not empty")
    assert world.to_snapshot() == before


def test_plant_withered_pot_fails(actions, world):
    actions.plant(1, "moss", now=NOW)
    world.pots[1].status = "withered"
    assert actions.plant(1, "fern").reason == "pot not empty"


@pytest.mark.parametrize("seed", ["cactus", "", None, "Fern", 3])
def test_plant_invalid_seed(actions, world, seed):
    result = actions.plant(0, seed, now=NOW)
    assert result == ActionResult("plant", False, "invalid seed type")
    assert world.pots[0] == Pot(0)


def test_plant_checks_pot_before_seed(actions):
    assert actions.plant(99, "cactus").reason == "no such pot"
    actions.plant(0, "fern", now=NOW)
    assert actions.plant(0, "cactus").reason == "pot not empty"


def test_water_updates_timestamp(actions, world):
    actions.plant(3, "flower", now=NOW)
    assert actions.water(3, now=NOW + 5000).ok
    assert world.pots[3].last_watered_at == NOW + 5000
    assert world.pots[3].planted_at == NOW


def test_water_grown_pot(actions, world):
    actions.plant(3, "flower", now=NOW)
    world.pots[3].status = "grown"
    assert actions.water(3, now=NOW + 1).ok


def test_water_failures(actions, world):
    assert actions.water(-1) == ActionResult("water", False, "no such pot")
    assert actions.water(0) == ActionResult("water", False, "nothing to water")

    actions.plant(0, "fern", now=NOW)
    world.pots[0].status = "withered"
    before = world.to_snapshot()
    assert actions.water(0, now=NOW + 1) == ActionResult("water", False, "withered pot")
    assert world.to_snapshot() == before


@pytest.mark.parametrize("status", ["growing", "grown", "withered"])
def test_clear_resets_pot(actions, world, status):
    actions.plant(4, "moss", "Moss", "Jo", now=NOW)
    world.pots[4].status = status
    assert actions.clear(4) == ActionResult("clear", True)
    assert world.pots[4] == Pot(4)


def test_clear_failures(actions):
    assert actions.clear(6) == ActionResult("clear", False, "no such pot")
    assert actions.clear(0) == ActionResult("clear", False, "already empty")


def test_dispatch_routes_payloads(actions, world):
    result = actions.dispatch("plant", {"potId": 5, "seedType": "flower", "name": "Daisy", "caretaker": "Lee"})
    assert result.ok
    assert world.pots[5].name == "Daisy"
    assert actions.dispatch("water", {"potId": 5}).ok
    assert actions.dispatch("clear", {"potId": 5}).ok
    assert world.pots[5] == Pot(5)


def test_dispatch_tolerates_missing_fields(actions):
    assert actions.dispatch("water", {}).reason == "no such pot"
    assert actions.dispatch("plant", None).reason == "no such pot"
    assert actions.dispatch("plant", {"potId": 0}).reason == "invalid seed type"


def test_dispatch_unknown_action(actions):
    assert actions.dispatch("harvest", {"potId": 0}) == ActionResult("harvest", False, "unknown action")


def test_result_to_dict():
    assert ActionResult("water", True).to_dict() == {"action": "water", "ok": True}
    assert ActionResult("clear", False, "already empty").to_dict() == {
        "action": "clear", "ok": False, "reason": "already empty",
    }
