# settings.py
# Central place for constants so the game feel can be tweaked in one file.

import os

# Window / render
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 480
FPS = 60
WINDOW_TITLE = "DOOM Platformer (Pygame-CE)"

# Tile size (level rows are strings of one digit per tile)
TILE_SIZE = 32

# Frame timing
# Anything longer than this (tab stall, debugger, resume) is treated as this.
MAX_FRAME_DT = 0.1

# Physics tuning
GRAVITY = 1500.0          # pixels per second^2
MAX_FALL_SPEED = 800.0    # pixels per second
GROUND_FRICTION = 0.85    # velocity kept per 1/60 s without input
AIR_FRICTION = 0.95
FRICTION_REFERENCE_FPS = 60
MIN_HORIZONTAL_SPEED = 10.0

# Player
PLAYER_WIDTH = 28
PLAYER_HEIGHT = 56
PLAYER_SPEED = 350.0
PLAYER_ACCELERATION = 2000.0
JUMP_SPEED = 520.0
JUMP_CUT_SPEED = 100.0     # releasing jump above this upward speed halves it
JUMP_COOLDOWN = 0.1
JUMP_BUFFER_TIME = 0.1
COYOTE_TIME = 0.1
ROCKET_JUMP_SPEED = 650.0
PLAYER_MAX_HEALTH = 100
PLAYER_MAX_ARMOR = 100
PLAYER_LIVES = 3
INVULNERABLE_DURATION = 1.0
INVINCIBILITY_DURATION = 10.0
RESPAWN_DELAY = 1.0

# Combat
# Fraction of each hit taken by armor while the player has any.
ARMOR_ABSORPTION = 0.5
SPIKE_DAMAGE = 25
PIERCE_MAX_HITS = 3
PROJECTILE_LIFETIME = 3.0
ENEMY_PROJECTILE_DAMAGE = 10
CONTACT_KNOCKBACK_X = 200.0
CONTACT_KNOCKBACK_Y = 150.0
ENEMY_DEATH_DURATION = 0.5

# Pickups
HEALTH_PICKUP_AMOUNT = 25
ARMOR_PICKUP_AMOUNT = 50
AMMO_PICKUP_AMOUNT = 20

# Scoring
SCORE_PER_KILL = 100
SCORE_PER_PICKUP = 50
LEVEL_COMPLETE_BONUS = 500
VICTORY_BONUS = 5000
VICTORY_DELAY = 2.0       # seconds of simulation time after the boss dies

# Coins
COIN_PICKUP_VALUE = 10
COIN_LEVEL_BONUS = 50
COIN_PERFECT_BONUS = 25
COIN_CHAIN_WINDOW = 3.0

# Level transitions (presentation only, not load-bearing)
TRANSITION_DURATION = 1.0

# Camera
CAMERA_SMOOTHING = 5.0
CAMERA_LOOK_AHEAD = 50.0
CAMERA_LOOK_AHEAD_SMOOTHING = 3.0

# Difficulty
DEFAULT_DIFFICULTY = "normal"
DIFFICULTY_SETTINGS = {
    "easy": {
        "player_damage": 0.5,
        "enemy_health": 0.7,
        "enemy_damage": 0.5,
        "enemy_speed": 0.8,
        "score": 0.5,
    },
    "normal": {
        "player_damage": 1.0,
        "enemy_health": 1.0,
        "enemy_damage": 1.0,
        "enemy_speed": 1.0,
        "score": 1.0,
    },
    "hard": {
        "player_damage": 1.5,
        "enemy_health": 1.5,
        "enemy_damage": 1.5,
        "enemy_speed": 1.3,
        "score": 2.0,
    },
}

# Backend (leaderboard)
API_URL = os.environ.get("DOOM_API_URL", "http://localhost:3000/api")
API_TOKEN = os.environ.get("DOOM_API_TOKEN") or None
API_TIMEOUT = 5.0

# Local files
DATA_DIR = os.environ.get(
    "DOOM_DATA_DIR", os.path.join(os.path.expanduser("~"), ".doom_platformer")
)
HIGH_SCORE_FILE = "highscores.json"
SAVE_FILE = "save.json"
HIGH_SCORE_LIMIT = 10

# Logging
LOG_LEVEL = os.environ.get("DOOM_LOG_LEVEL", "INFO")


def difficulty(name: str) -> dict:
    """Multipliers for a difficulty name, falling back to normal."""
    return DIFFICULTY_SETTINGS.get(name, DIFFICULTY_SETTINGS[DEFAULT_DIFFICULTY])
