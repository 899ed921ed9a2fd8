"""Small immutable vector and quaternion types with list serialisation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Iterator


def _components(values: Iterable[float], count: int, name: str) -> list[float]:
    items = [float(v) for v in values]
    if len(items) != count:
        raise ValueError(f"{name} needs {count} components, got {len(items)}")
    return items


@dataclass(frozen=True)
class Vec2:
    """A two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: Vec2) -> float:
        return (self - other).length()

    def to_list(self) -> list[float]:
        return [self.x, self.y]

    @classmethod
    def from_list(cls, values: Iterable[float]) -> Vec2:
        return cls(*_components(values, 2, "Vec2"))


@dataclass(frozen=True)
class Vec3:
    """A three-dimensional vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Vec3:
        """Return the unit vector in the same direction; a zero vector has none."""
        size = self.length()
        if size == 0.0 or not math.isfinite(size):
            raise ValueError("cannot normalize a zero or non-finite vector")
        return Vec3(self.x / size, self.y / size, self.z / size)

    def xy(self) -> Vec2:
        return Vec2(self.x, self.y)

    def truncate(self) -> Vec2:
        """Drop the z component."""
        return self.xy()

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]

    @classmethod
    def from_list(cls, values: Iterable[float]) -> Vec3:
        return cls(*_components(values, 3, "Vec3"))


@dataclass(frozen=True)
class Quat:
    """A rotation quaternion stored as (x, y, z, w)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def from_rotation_x(cls, angle: float) -> Quat:
        half = angle * 0.5
        return cls(math.sin(half), 0.0, 0.0, math.cos(half))

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z, self.w]

    @classmethod
    def from_list(cls, values: Iterable[float]) -> Quat:
        return cls(*_components(values, 4, "Quat"))