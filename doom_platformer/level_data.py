# level_data.py
# The campaign levels. Static content: the game never mutates these records;
# the editor appends new ones for playtesting.

from __future__ import annotations

from .level import GridPoint, Level, Spawn


def _level(name, start, enemies, pickups, checkpoints, rows) -> Level:
    return Level(
        name=name,
        width=len(rows[0]),
        height=len(rows),
        player_start=GridPoint(*start),
        data=list(rows),
        enemies=[Spawn(t, x, y) for t, x, y in enemies],
        pickups=[Spawn(t, x, y) for t, x, y in pickups],
        checkpoints=[GridPoint(x, y) for x, y in checkpoints],
    )


ENTRANCE_TO_HELL = _level(
    "ENTRANCE TO HELL",
    (2, 11),
    enemies=[("patrol", 10, 11), ("patrol", 31, 8), ("patrol", 40, 6), ("patrol", 45, 5)],
    pickups=[
        ("health", 8, 12), ("shotgun", 18, 10), ("ammo", 36, 7), ("health", 44, 5),
        ("coin", 6, 12), ("coin", 14, 11), ("coin", 26, 9), ("coin", 36, 7), ("coin", 44, 5),
    ],
    checkpoints=[(15, 11), (36, 7)],
    rows=[
        "11111111111111111111111111111111111111111111111111",
        "10000000000000000000000000000000000000000000000001",
        "10000000000000000000000000000000000000000000000001",
        "10000000000000000000000000000000000000000000000001",
        "10000000000000000000000000000000000000000000000051",
        "10000000000000000000000000000000000000000000011111",
        "10000000000000000000000000000000000000000111000001",
        "10000000000000000000000000000000000011100000000001",
        "10000000000000000000000000000001110000000000000001",
        "10000000000000000000000001110000000000000000000001",
        "10000000000000000000011100000000000000000000000001",
        "10000000000000000001111000000000000000000000000001",
        "10000000000001111000000000000000000000000000000001",
        "11111111111111111111111111111111111111111111111111",
        "11111111111111111111111111111111111111111111111111",
    ],
)

THE_BLOOD_PITS = _level(
    "THE BLOOD PITS",
    (2, 11),
    enemies=[
        ("patrol", 12, 11), ("shooter", 20, 7), ("patrol", 28, 9), ("flying", 35, 5),
        ("shooter", 42, 3), ("patrol", 50, 8), ("flying", 55, 6),
    ],
    pickups=[
        ("health", 10, 12), ("ammo", 18, 10), ("machinegun", 25, 8), ("health", 33, 6),
        ("armor", 40, 4), ("ammo", 48, 9), ("health", 55, 4),
        ("coin", 8, 12), ("coin", 16, 10), ("coin", 24, 8), ("coin", 32, 6), ("coin", 44, 7), ("coin", 52, 9),
    ],
    checkpoints=[(15, 9), (30, 5), (47, 8)],
    rows=[
        "111111111111111111111111111111111111111111111111111111111111",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000051",
        "100000000000000000000000000000000000000000000000000000011111",
        "100000000000000000000000000000000000000000000000000011100001",
        "100000000000000000000000000000000000000000000000011100000001",
        "100000000000000000000000000000000000000000000111000000000001",
        "100000000000000000000000000000000000000011110000000000000001",
        "100000000000000000000000000000000111100000000000000000000001",
        "100000000000000000000000001111000000000000000000000000000001",
        "100000000000000011111000000000000000000000000000000000000001",
        "100000000011111000000000000000000000000000000000000000000001",
        "111111133311111133311111133311111133311111133311111133311111",
        "111111111111111111111111111111111111111111111111111111111111",
    ],
)

DEMONS_LAIR = _level(
    "DEMON'S LAIR",
    (2, 11),
    enemies=[
        ("patrol", 10, 11), ("flying", 18, 8), ("shooter", 25, 6), ("patrol", 32, 9),
        ("flying", 40, 5), ("shooter", 48, 3), ("patrol", 55, 7), ("flying", 62, 4),
        ("shooter", 67, 2),
    ],
    pickups=[
        ("health", 8, 12), ("ammo", 15, 10), ("armor", 22, 7), ("plasma", 30, 10),
        ("health", 38, 6), ("ammo", 46, 4), ("rocket", 53, 8), ("health", 60, 5),
        ("invincibility", 35, 3),
        ("coin", 7, 12), ("coin", 14, 10), ("coin", 21, 7), ("coin", 29, 10), ("coin", 37, 6),
        ("coin", 45, 4), ("coin", 52, 8), ("coin", 59, 5), ("coin", 66, 3),
    ],
    checkpoints=[(12, 11), (27, 6), (42, 5), (58, 7)],
    rows=[
        "1111111111111111111111111111111111111111111111111111111111111111111111",
        "1000000000000000000000000000000000000000000000000000000000000000000001",
        "1000000000000000000000000000000000000000000000000000000000000000000051",
        "1000000000000000000000000000000000000000000000000000000000000000011111",
        "1000000000000000000000000000000000000000000000000000000000000011100001",
        "1000000000000000000000000000000000000000000000000000000000011100000001",
        "1000000000000000000000000000000000000000000000000000000011000000000001",
        "1000000000000000000000000000000000000000000000000011000000000000000001",
        "1000000000000000000000000000000000000000000000111000000000000000000001",
        "1000000000000000000000000000000000000000011100000000000000000000000001",
        "1000000000000000000000000000000000001110000000000000000000000000000001",
        "1000000000000000000000000000001111000000000000000000000000000000000001",
        "1000000000000000000001111100000000000000000000000000000000000000000001",
        "1111111133311111133311111133311111133311111133311111133311111133311111",
        "1111111111111111111111111111111111111111111111111111111111111111111111",
    ],
)

CYBERDEMONS_THRONE = _level(
    "THE CYBERDEMON'S THRONE",
    (3, 11),
    enemies=[("boss", 45, 6)],
    pickups=[
        ("health", 5, 12), ("armor", 8, 12), ("health", 12, 10), ("ammo", 16, 10),
        ("rocket", 20, 8), ("plasma", 24, 8), ("health", 28, 6), ("armor", 32, 6),
        ("invincibility", 30, 3), ("ammo", 40, 8), ("health", 48, 10), ("armor", 52, 10),
        ("health", 55, 12),
        ("coin", 10, 11), ("coin", 15, 9), ("coin", 22, 7), ("coin", 30, 5), ("coin", 38, 7),
        ("coin", 45, 9), ("coin", 50, 9),
    ],
    checkpoints=[(10, 11), (25, 7), (50, 9)],
    rows=[
        "111111111111111111111111111111111111111111111111111111111111",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000002220000000000022200000000000002220000000000022200001",
        "100000000000000000000000000000000000000000000000000000000001",
        "100000000000000022200000000000000000000000002220000000000001",
        "100000000000220000000000000000000000000000000000220000000001",
        "100000002200000000000000000000000000000000000000002200000001",
        "100000000000000000000000000000000000000000000000000000000001",
        "111111111111111111111111111111111111111111111111111111111111",
        "111111111111111111111111111111111111111111111111111111111111",
    ],
)

LEVELS: list[Level] = [ENTRANCE_TO_HELL, THE_BLOOD_PITS, DEMONS_LAIR, CYBERDEMONS_THRONE]
