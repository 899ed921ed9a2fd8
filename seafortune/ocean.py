"""Ocean overworld tiles and their random generation."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Any, Protocol

from seafortune.gameworld import (
    OCEAN_H_CENTER,
    OCEAN_LEVEL_H,
    OCEAN_LEVEL_W,
    OCEAN_W_CENTER,
    TILE_SIZE,
)
from seafortune.vectors import Vec3


class _IntSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


@dataclass(frozen=True)
class OceanTile:
    """One tile of the ocean map: where it sits and which sprite it uses."""

    translation: Vec3
    tile_index: int

    def to_dict(self) -> dict[str, Any]:
        return {"translation": self.translation.to_list(), "tile_index": self.tile_index}


def _tile_index(rng: _IntSource) -> int:
    # Weighted so most of the ocean is the dark tile.
    return 0 if rng.randint(0, 10) < 9 else 1


def build_ocean(rng: _IntSource | None = None) -> list[OceanTile]:
    """Generate the ocean map, row by row from the bottom-left corner."""
    rng = rng if rng is not None else random.Random()
    rows = math.ceil(OCEAN_LEVEL_H / TILE_SIZE)
    columns = math.ceil(OCEAN_LEVEL_W / TILE_SIZE)
    step = TILE_SIZE * 2
    first_row_x = -OCEAN_W_CENTER + TILE_SIZE / 2.0
    later_row_x = -OCEAN_W_CENTER + step / 2.0
    start_y = -OCEAN_H_CENTER + TILE_SIZE / 2.0

    tiles: list[OceanTile] = []
    for row in range(rows):
        row_x = first_row_x if row == 0 else later_row_x
        y = start_y + row * step
        tiles.extend(
            OceanTile(Vec3(row_x + column * step, y, 0.0), _tile_index(rng))
            for column in range(columns)
        )
    return tiles