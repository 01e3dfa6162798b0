# level.py
# Level records and the JSON format the editor reads and writes.
#
# A level is static content:
#   name, width, height (tiles), player_start (tile coords),
#   enemies / pickups (type + tile coords), checkpoints (tile coords),
#   data: one string per row, one digit per tile.

from __future__ import annotations
import json
from dataclasses import dataclass, field

from .enemies import EnemyKind
from .pickup import PickupKind
from .tilemap import VALID_TILE_CHARS


class LevelFormatError(ValueError):
    """Level data that cannot be turned into a playable tilemap."""


@dataclass(frozen=True)
class GridPoint:
    x: int
    y: int

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Spawn:
    type: str
    x: int
    y: int

    def to_dict(self) -> dict:
        return {"type": self.type, "x": self.x, "y": self.y}


@dataclass
class Level:
    name: str
    width: int
    height: int
    player_start: GridPoint
    data: list[str]
    enemies: list[Spawn] = field(default_factory=list)
    pickups: list[Spawn] = field(default_factory=list)
    checkpoints: list[GridPoint] = field(default_factory=list)

    def validate(self) -> None:
        """Raise LevelFormatError unless the grid and spawns are consistent."""
        if self.width <= 0 or self.height <= 0:
            raise LevelFormatError(f"{self.name!r}: size must be positive, got {self.width}x{self.height}")
        if len(self.data) != self.height:
            raise LevelFormatError(f"{self.name!r}: {len(self.data)} rows, expected {self.height}")

        for y, row in enumerate(self.data):
            if len(row) != self.width:
                raise LevelFormatError(f"{self.name!r}: row {y} has {len(row)} tiles, expected {self.width}")
            bad = set(row) - VALID_TILE_CHARS
            if bad:
                raise LevelFormatError(f"{self.name!r}: row {y} has invalid tile codes {sorted(bad)}")

        start = self.player_start
        if not (0 <= start.x < self.width and 0 <= start.y < self.height):
            raise LevelFormatError(f"{self.name!r}: player start ({start.x}, {start.y}) is outside the grid")

        enemy_types = {k.value for k in EnemyKind}
        for spawn in self.enemies:
            if spawn.type not in enemy_types:
                raise LevelFormatError(f"{self.name!r}: unknown enemy type {spawn.type!r}")

        pickup_types = {k.value for k in PickupKind}
        for spawn in self.pickups:
            if spawn.type not in pickup_types:
                raise LevelFormatError(f"{self.name!r}: unknown pickup type {spawn.type!r}")

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "playerStart": self.player_start.to_dict(),
            "width": self.width,
            "height": self.height,
            "enemies": [s.to_dict() for s in self.enemies],
            "pickups": [s.to_dict() for s in self.pickups],
            "checkpoints": [c.to_dict() for c in self.checkpoints],
            "data": list(self.data),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> Level:
        try:
            return cls(
                name=str(raw.get("name", "CUSTOM LEVEL")),
                width=int(raw["width"]),
                height=int(raw["height"]),
                player_start=GridPoint(int(raw["playerStart"]["x"]), int(raw["playerStart"]["y"])),
                data=[str(row) for row in raw["data"]],
                enemies=[Spawn(str(e["type"]), int(e["x"]), int(e["y"])) for e in raw.get("enemies") or []],
                pickups=[Spawn(str(p["type"]), int(p["x"]), int(p["y"])) for p in raw.get("pickups") or []],
                checkpoints=[GridPoint(int(c["x"]), int(c["y"])) for c in raw.get("checkpoints") or []],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise LevelFormatError(f"malformed level record: {e!r}") from e


def export_level(level: Level) -> str:
    return json.dumps(level.to_dict())


def import_level(text: str) -> Level:
    """Parse and validate one exported level."""
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise LevelFormatError(f"level is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise LevelFormatError("level JSON must be an object")

    level = Level.from_dict(raw)
    level.validate()
    return level


def load_levels(path: str) -> list[Level]:
    """Read a JSON file holding one level object or a list of them."""
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except ValueError as e:
            raise LevelFormatError(f"{path}: not valid JSON: {e}") from e

    records = raw if isinstance(raw, list) else [raw]
    levels = []
    for record in records:
        if not isinstance(record, dict):
            raise LevelFormatError(f"{path}: every level must be a JSON object")
        level = Level.from_dict(record)
        level.validate()
        levels.append(level)
    return levels
