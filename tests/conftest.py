"""Shared fixtures: small hand-built levels and fresh simulation states."""

import pytest

from doom_platformer.controls import Controls
from doom_platformer.level import GridPoint, Level, Spawn
from doom_platformer.simulation import start_game
from doom_platformer.state import new_state


# 10 x 5 room, floor top at y=128
ROOM = [
    "1111111111",
    "1000000001",
    "1000000001",
    "1000000001",
    "1111111111",
]

# 30 x 5 corridor, long enough to keep enemies out of detection range
CORRIDOR = [
    "1" * 30,
    "1" + "0" * 28 + "1",
    "1" + "0" * 28 + "1",
    "1" + "0" * 28 + "1",
    "1" * 30,
]


def build_level(rows, start=(1, 2), enemies=(), pickups=(), checkpoints=(), name="TEST"):
    return Level(
        name=name,
        width=len(rows[0]),
        height=len(rows),
        player_start=GridPoint(*start),
        data=list(rows),
        enemies=[Spawn(kind, x, y) for kind, x, y in enemies],
        pickups=[Spawn(kind, x, y) for kind, x, y in pickups],
        checkpoints=[GridPoint(x, y) for x, y in checkpoints],
    )


@pytest.fixture
def make_level():
    return build_level


@pytest.fixture
def room():
    return build_level(ROOM)


@pytest.fixture
def corridor():
    return build_level(CORRIDOR)


@pytest.fixture
def make_state():
    def _make(levels, difficulty="normal", started=True):
        state = new_state(levels, difficulty=difficulty, seed=1234)
        if started:
            start_game(state)
        return state
    return _make


@pytest.fixture
def controls():
    return Controls()
