"""
Game constants for Snake Evolution.
"""

# Movement directions as (dx, dy) unit vectors. y grows downwards.
UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

DIRECTION_NAMES = {
    UP: "UP",
    DOWN: "DOWN",
    LEFT: "LEFT",
    RIGHT: "RIGHT",
}

# Board settings
GRID_SIZE = 24          # tiles per side (square board)
INITIAL_LENGTH = 3

# Speed settings (moves per second)
TICK_RATE = 8
MAX_TICK_RATE = 16
SPEED_STEP = 1
POINTS_PER_LEVEL = 5

# Scoring
FOOD_POINTS = 1
BONUS_POINTS = 5
BONUS_EVERY = 5             # a bonus appears after every N foods eaten
BONUS_LIFETIME_TICKS = 40

# Food placement
MAX_SPAWN_ATTEMPTS = 64

# Scheduler
MAX_FRAME_DELTA = 0.25      # seconds of elapsed time accepted per frame
