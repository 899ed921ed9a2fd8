"""World dimensions, entity type codes and enemy tuning constants."""

from seafortune.vectors import Vec2

WIN_W = 1280.0
WIN_H = 720.0

WIN_W_CENTER = WIN_W / 2.0
WIN_H_CENTER = WIN_H / 2.0

TILE_SIZE = 32

OCEAN_LEVEL_H = 4000.0
OCEAN_LEVEL_W = 4000.0
OCEAN_H_CENTER = OCEAN_LEVEL_H / 2.0
OCEAN_W_CENTER = OCEAN_LEVEL_W / 2.0

SAND_LEVEL_H = 3000.0
SAND_LEVEL_W = 3000.0
SAND_H_CENTER = SAND_LEVEL_H / 2.0
SAND_W_CENTER = SAND_LEVEL_W / 2.0

DUNGEON_LEVEL_H = 16000.0
DUNGEON_LEVEL_W = 16000.0
DUNGEON_H_CENTER = DUNGEON_LEVEL_H / 2.0
DUNGEON_W_CENTER = DUNGEON_LEVEL_W / 2.0

# Movement bounds for the boat.
BOUNDS = Vec2(OCEAN_LEVEL_W, OCEAN_LEVEL_H)

# Entity type codes
PLAYER = 0
BOAT = 1
BAT = 2
KRAKEN = 3
GHOSTSHIP = 4
ROCK = 5
RSKELETON = 6
MSKELETON = 7
WHIRLPOOL = 8

GHOSTSHIP_PROJECTILE_LIFETIME = 5.0
GHOSTSHIP_PROJECTILE_SPEED = 350.0

GHOSTSHIP_MAX_HP = 2.0
GHOSTSHIP_ATTACK_DIST = 800.0
GHOSTSHIP_MOVEMENT_SPEED = 215.0
GHOSTSHIP_AGRO_STOP = 300.0
GHOSTSHIP_AGRO_RANGE = 1000.0

KRAKEN_PROJECTILE_LIFETIME = 5.0
KRAKEN_PROJECTILE_SPEED = 175.0

KRAKEN_MAX_HP = 2.0
KRAKEN_ATTACK_DIST = 800.0
KRAKEN_MOVEMENT_SPEED = 150.0
KRAKEN_AGRO_STOP = 300.0
KRAKEN_AGRO_RANGE = 1000.0