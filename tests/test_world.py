"""Tests for the World model — pots, lookups, labels and snapshot reconciliation."""

import pytest

from core.world import Pot, SnapshotError, World, clean_caretaker, clean_label, clean_name
from timeline import NOW


def test_fresh_world_is_all_empty(world):
    assert world.last_tick == NOW
    assert [p.id for p in world.pots] == list(range(6))
    for pot in world.pots:
        assert pot.status == "empty"
        assert pot.seed_type is None
        assert pot.planted_at is None and pot.last_watered_at is None
        assert pot.growth == 0.0


@pytest.mark.parametrize("bad_id", [-1, 6, 100, True, "3", 2.5, 6.0, float("nan"), float("inf"), None])
def test_get_pot_not_found(world, bad_id):
    assert world.get_pot(bad_id) is None


def test_get_pot_returns_live_pot(world):
    pot = world.get_pot(3)
    assert pot is world.pots[3]
    assert pot.id == 3


def test_get_pot_accepts_whole_floats(world):
    # JSON clients may send 1.0 for 1
    assert world.get_pot(1.0) is world.pots[1]
    assert world.get_pot(0.0) is world.pots[0]


def test_reset_restores_empty_default():
    pot = Pot(4, seed_type="fern", status="withered", growth=0.4,
              planted_at=1.0, last_watered_at=2.0, name="Fernando", caretaker="Kit")
    pot.reset()
    assert pot == Pot(4)


def test_clean_label_trims_caps_and_defaults():
    assert clean_label("  Basil  ", "x") == "Basil"
    assert clean_label("a" * 40, "x") == "a" * 24
    assert clean_label("   ", "fallback") == "fallback"
    assert clean_label(None, "fallback") == "fallback"
    assert clean_label(12, "fallback") == "fallback"


def test_name_and_caretaker_defaults():
    assert clean_name("") == "Unnamed plant"
    assert clean_caretaker(None) == "Anonymous"
    assert clean_caretaker("  Robin ") == "Robin"


def test_snapshot_round_trip(world):
    pot = world.pots[2]
    pot.seed_type, pot.status, pot.growth = "moss", "growing", 0.37
    pot.planted_at = pot.last_watered_at = NOW
    pot.name, pot.caretaker = "Moss Def", "Sam"

    restored = World.from_snapshot(world.to_snapshot(), num_pots=6)
    assert restored == world


def test_snapshot_is_a_copy(world):
    snap = world.to_snapshot()
    snap["pots"][0]["status"] = "grown"
    assert world.pots[0].status == "empty"


def test_from_snapshot_fills_missing_pots():
    data = {"lastTick": NOW, "pots": [
        {"id": 0, "seedType": "fern", "status": "grown", "growth": 1.0,
         "plantedAt": NOW, "lastWateredAt": NOW, "name": "A", "caretaker": "B"},
    ]}
    restored = World.from_snapshot(data, num_pots=4)
    assert len(restored.pots) == 4
    assert restored.pots[0].status == "grown"
    assert restored.pots[1:] == [Pot(1), Pot(2), Pot(3)]


def test_from_snapshot_drops_out_of_range_and_malformed_pots():
    data = {"lastTick": NOW, "pots": [
        {"id": 1, "seedType": None, "status": "growing", "growth": 0.5,
         "plantedAt": NOW, "lastWateredAt": NOW},
        {"id": 9, "seedType": "moss", "status": "growing", "growth": 0.5,
         "plantedAt": NOW, "lastWateredAt": NOW},
        "not a pot",
    ]}
    restored = World.from_snapshot(data, num_pots=3)
    assert restored.pots == [Pot(0), Pot(1), Pot(2)]


@pytest.mark.parametrize("data", [
    None,
    [],
    {"pots": []},
    {"lastTick": "123", "pots": []},
    {"lastTick": NOW},
])
def test_from_snapshot_rejects_bad_envelope(data):
    with pytest.raises(SnapshotError):
        World.from_snapshot(data, num_pots=3)
