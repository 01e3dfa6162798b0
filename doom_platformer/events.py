# events.py
# Delayed actions on the simulation clock, plus the presentation events the
# loop emits for sound and on-screen feedback.
#
# Delays are measured in simulation seconds: they only advance while the
# gameplay block runs, so pausing or a level transition holds them too.

from __future__ import annotations
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(order=True)
class _Scheduled:
    due: float
    seq: int
    action: Callable[[Any], None] = field(compare=False)
    label: str = field(compare=False, default="")


class TimedEventQueue:
    def __init__(self):
        self.now = 0.0
        self._heap: list[_Scheduled] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, delay: float, action: Callable[[Any], None], label: str = "") -> None:
        heapq.heappush(self._heap, _Scheduled(self.now + max(0.0, delay), next(self._seq), action, label))

    def pending(self) -> list[str]:
        return [item.label for item in sorted(self._heap)]

    def advance(self, dt: float, state) -> int:
        """Move the clock forward and run everything now due, oldest first."""
        self.now += dt
        ran = 0
        while self._heap and self._heap[0].due <= self.now:
            item = heapq.heappop(self._heap)
            item.action(state)
            ran += 1
        return ran

    def clear(self) -> None:
        self._heap.clear()
        self.now = 0.0


# --------------------------
# Presentation events
# --------------------------

@dataclass(frozen=True)
class GameEvent:
    pass


@dataclass(frozen=True)
class ShotFired(GameEvent):
    weapon: str


@dataclass(frozen=True)
class EnemyKilled(GameEvent):
    kind: str
    x: float
    y: float
    score: int
    coins: int


@dataclass(frozen=True)
class PickupCollected(GameEvent):
    kind: str


@dataclass(frozen=True)
class CheckpointActivated(GameEvent):
    x: float
    y: float


@dataclass(frozen=True)
class PlayerHurt(GameEvent):
    amount: float


@dataclass(frozen=True)
class PlayerDied(GameEvent):
    lives_left: int


@dataclass(frozen=True)
class Explosion(GameEvent):
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class LevelLoaded(GameEvent):
    index: int
    name: str


@dataclass(frozen=True)
class LevelComplete(GameEvent):
    index: int
    coin_bonus: int
    perfect: bool


@dataclass(frozen=True)
class Victory(GameEvent):
    score: int


@dataclass(frozen=True)
class GameOver(GameEvent):
    score: int
