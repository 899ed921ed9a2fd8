"""Game world state and the per-frame enemy behaviour."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Iterable

from seafortune.gameworld import (
    GHOSTSHIP,
    GHOSTSHIP_AGRO_RANGE,
    GHOSTSHIP_AGRO_STOP,
    GHOSTSHIP_ATTACK_DIST,
    GHOSTSHIP_MAX_HP,
    GHOSTSHIP_MOVEMENT_SPEED,
    GHOSTSHIP_PROJECTILE_LIFETIME,
    GHOSTSHIP_PROJECTILE_SPEED,
    KRAKEN,
    KRAKEN_AGRO_RANGE,
    KRAKEN_AGRO_STOP,
    KRAKEN_ATTACK_DIST,
    KRAKEN_MAX_HP,
    KRAKEN_MOVEMENT_SPEED,
    KRAKEN_PROJECTILE_LIFETIME,
    KRAKEN_PROJECTILE_SPEED,
    TILE_SIZE,
    WIN_H,
)
from seafortune.ocean import OceanTile, build_ocean
from seafortune.protocol import (
    Cooldown,
    Counter,
    Enemies,
    Enemy,
    EnemyLists,
    Player,
    Players,
    Projectile,
    Timer,
    Velocity,
)
from seafortune.vectors import Vec3

logger = logging.getLogger(__name__)

# etype -> (aggro range, aggro stop, movement speed)
_CHASE = {
    KRAKEN: (KRAKEN_AGRO_RANGE, KRAKEN_AGRO_STOP, KRAKEN_MOVEMENT_SPEED),
    GHOSTSHIP: (GHOSTSHIP_AGRO_RANGE, GHOSTSHIP_AGRO_STOP, GHOSTSHIP_MOVEMENT_SPEED),
}

# etype -> (attack distance, projectile lifetime, projectile speed)
_ATTACK = {
    KRAKEN: (KRAKEN_ATTACK_DIST, KRAKEN_PROJECTILE_LIFETIME, KRAKEN_PROJECTILE_SPEED),
    GHOSTSHIP: (
        GHOSTSHIP_ATTACK_DIST,
        GHOSTSHIP_PROJECTILE_LIFETIME,
        GHOSTSHIP_PROJECTILE_SPEED,
    ),
}

_SPAWN_Y = -(WIN_H / 1.5) + TILE_SIZE * 1.5
_SPAWN_Z = 900.0
_MUZZLE_OFFSET = 10.0
_PROJECTILE_Z = 2.0
_COOLDOWN_RESET = 2.5
_FIRST_COOLDOWN = 3.0


@dataclass
class World:
    """Everything the server keeps between frames."""

    ocean: list[OceanTile] = field(default_factory=list)
    players: Players = field(default_factory=Players)
    enemies: EnemyLists = field(default_factory=EnemyLists)
    projectiles: list[Projectile] = field(default_factory=list)
    cooldowns: list[Cooldown] = field(default_factory=list)
    counter: Counter = field(default_factory=Counter)


def _spawn(enemy_id: int, etype: int, x: float, hp: float) -> Enemy:
    return Enemy(
        id=enemy_id,
        etype=etype,
        pos=Vec3(x, _SPAWN_Y, _SPAWN_Z),
        animation_index=0,
        hp=hp,
        alive=True,
        target_id=-1,
    )


def initial_world(rng: random.Random | None = None) -> World:
    """Build the ocean and place the starting kraken and ghost ship."""
    world = World(ocean=build_ocean(rng))
    spawns = [(15, KRAKEN, 0.0, KRAKEN_MAX_HP), (16, GHOSTSHIP, 200.0, GHOSTSHIP_MAX_HP)]
    world.enemies = EnemyLists(
        new=Enemies([_spawn(*spec) for spec in spawns]),
        update=Enemies([_spawn(*spec) for spec in spawns]),
        dead=Enemies(),
    )
    world.cooldowns = [
        Cooldown(enemy_id=enemy_id, og=_COOLDOWN_RESET, timer=Timer(_FIRST_COOLDOWN))
        for enemy_id, *_ in spawns
    ]
    return world


def move_enemies(enemies: Iterable[Enemy], players: Iterable[Player], dt: float) -> None:
    """Move each enemy toward the first player slot within its aggro band."""
    slots = list(players)
    for enemy in enemies:
        chase = _CHASE.get(enemy.etype)
        if chase is None:
            logger.warning("Undefined enemy type: %s", enemy.etype)
            continue
        agro_range, agro_stop, speed = chase
        origin = enemy.pos
        target = next(
            (
                player
                for player in slots
                if agro_stop < origin.xy().distance(player.pos.xy()) <= agro_range
            ),
            None,
        )
        if target is None:
            continue
        velocity = (target.pos - origin).normalize() * speed
        enemy.pos = origin + velocity * dt


def fire_projectiles(
    enemies: Iterable[Enemy],
    players: Iterable[Player],
    cooldowns: list[Cooldown],
    projectiles: list[Projectile],
    dt: float,
) -> list[Projectile]:
    """Fire at the first connected player in range once an enemy's cooldown ends.

    New projectiles are appended to ``projectiles`` and also returned.
    """
    slots = list(players)
    fired: list[Projectile] = []
    for enemy in enemies:
        cooldown = next((cd for cd in cooldowns if cd.enemy_id == enemy.id), None)
        if cooldown is None:
            raise KeyError(f"no cooldown for enemy {enemy.id}")
        cooldown.timer.tick(dt)
        if not cooldown.timer.finished():
            continue
        cooldown.timer = Timer(cooldown.og)

        stats = _ATTACK.get(enemy.etype)
        if stats is None:
            logger.warning("Undefined enemy type for projectile handling: %s", enemy.etype)
            stats = (0.0, 0.0, 0.0)
        attack_dist, lifetime, speed = stats

        for player in slots:
            if not player.used:
                continue
            if enemy.pos.xy().distance(player.pos.xy()) > attack_dist:
                continue
            heading = (player.pos - enemy.pos).normalize()
            angle = math.atan2(heading.x, heading.y)
            aim = Vec3(math.sin(angle), math.cos(angle), 0.0).normalize()
            muzzle = enemy.pos + aim * _MUZZLE_OFFSET
            projectile = Projectile(
                owner_id=enemy.id,
                velocity=Velocity(aim.truncate() * speed),
                translation=Vec3(muzzle.x, muzzle.y, _PROJECTILE_Z),
                lifetime=lifetime,
            )
            logger.info("Player #%s is in range of entity [%s]", player.id, enemy.id)
            projectiles.append(projectile)
            fired.append(projectile)
            break
    return fired