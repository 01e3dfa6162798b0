# main.py
# Launcher: parse options, set up logging, run the game.

from __future__ import annotations
import argparse
import logging
import sys

from doom_platformer import settings
from doom_platformer.game import Game
from doom_platformer.level import LevelFormatError, load_levels
from doom_platformer.level_data import LEVELS

logger = logging.getLogger("doom_platformer")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="DOOM-themed side-scrolling platformer")
    parser.add_argument("--difficulty", choices=sorted(settings.DIFFICULTY_SETTINGS),
                        default=settings.DEFAULT_DIFFICULTY)
    parser.add_argument("--levels", metavar="FILE",
                        help="JSON file with one level or a list of levels to play instead of the campaign")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    levels = LEVELS
    if args.levels:
        try:
            levels = load_levels(args.levels)
        except (OSError, LevelFormatError) as e:
            logger.error("Could not load levels from %s: %s", args.levels, e)
            return 1
        if not levels:
            logger.error("%s holds no levels", args.levels)
            return 1

    Game(levels, difficulty=args.difficulty).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
