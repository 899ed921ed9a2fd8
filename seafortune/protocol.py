"""Wire messages and shared game state exchanged between server and clients."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Any, Iterator

from seafortune.vectors import Quat, Vec2, Vec3

MAX_PLAYERS = 4

_COMPACT = (",", ":")


class ProtocolError(ValueError):
    """Raised when a message cannot be decoded."""


def _to_wire(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    return value


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=_COMPACT)


@dataclass(frozen=True)
class Envelope:
    """A message name plus a JSON-encoded packet carrying the payload."""

    message: str
    packet: str

    def to_json(self) -> str:
        return _dumps({"message": self.message, "packet": self.packet})

    @classmethod
    def from_json(cls, data: str | bytes) -> Envelope:
        try:
            decoded = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ProtocolError(f"malformed envelope: {exc}") from exc
        if not isinstance(decoded, dict):
            raise ProtocolError("envelope must be a JSON object")
        message, packet = decoded.get("message"), decoded.get("packet")
        if not isinstance(message, str) or not isinstance(packet, str):
            raise ProtocolError("envelope needs string 'message' and 'packet' fields")
        return cls(message, packet)

    def payload(self) -> Any:
        """Decode the packet and return its payload."""
        try:
            decoded = json.loads(self.packet)
        except json.JSONDecodeError as exc:
            raise ProtocolError(f"malformed packet: {exc}") from exc
        if not isinstance(decoded, dict) or "payload" not in decoded:
            raise ProtocolError("packet has no payload")
        return decoded["payload"]


def create_env(message: str, payload: Any) -> str:
    """Wrap a payload in a packet and envelope and return the JSON text."""
    packet = _dumps({"payload": _to_wire(payload)})
    return Envelope(message, packet).to_json()


@dataclass
class Counter:
    """A counter handing out increasing identifiers."""

    count: int = 5

    def next(self) -> int:
        self.count += 1
        return self.count


def _field(data: dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError) as exc:
        raise ProtocolError(f"missing field {key!r}") from exc


def _decode(build: Any, *args: Any) -> Any:
    try:
        return build(*args)
    except (TypeError, ValueError) as exc:
        raise ProtocolError(str(exc)) from exc


@dataclass
class Player:
    """A player slot: identity, address and boat state."""

    id: int = -1
    addr: str = "null"
    pos: Vec3 = field(default_factory=Vec3)
    rot: Quat = field(default_factory=lambda: Quat.from_rotation_x(math.radians(90.0)))
    boat: bool = True
    used: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "addr": self.addr,
            "pos": self.pos.to_list(),
            "rot": self.rot.to_list(),
            "boat": self.boat,
            "used": self.used,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        return cls(
            id=_decode(int, _field(data, "id")),
            addr=_decode(str, _field(data, "addr")),
            pos=_decode(Vec3.from_list, _field(data, "pos")),
            rot=_decode(Quat.from_list, _field(data, "rot")),
            boat=bool(_field(data, "boat")),
            used=bool(_field(data, "used")),
        )


@dataclass
class Players:
    """The fixed set of player slots in the lobby."""

    player_array: list[Player] = field(
        default_factory=lambda: [Player() for _ in range(MAX_PLAYERS)]
    )

    def __post_init__(self) -> None:
        if len(self.player_array) != MAX_PLAYERS:
            raise ProtocolError(
                f"expected {MAX_PLAYERS} player slots, got {len(self.player_array)}"
            )

    def __iter__(self) -> Iterator[Player]:
        return iter(self.player_array)

    def to_dict(self) -> dict[str, Any]:
        return {"player_array": [p.to_dict() for p in self.player_array]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Players:
        slots = _field(data, "player_array")
        if not isinstance(slots, list):
            raise ProtocolError("'player_array' must be a list")
        return cls([Player.from_dict(slot) for slot in slots])


@dataclass(frozen=True)
class Velocity:
    v: Vec2

    def to_dict(self) -> dict[str, Any]:
        return {"v": self.v.to_list()}


@dataclass(frozen=True)
class Projectile:
    owner_id: int
    velocity: Velocity
    translation: Vec3
    lifetime: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "velocity": self.velocity.to_dict(),
            "translation": self.translation.to_list(),
            "lifetime": self.lifetime,
        }


@dataclass
class Enemy:
    id: int
    etype: int
    pos: Vec3
    animation_index: int = 0
    hp: float = 0.0
    alive: bool = True
    target_id: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "etype": self.etype,
            "pos": self.pos.to_list(),
            "animation_index": self.animation_index,
            "hp": self.hp,
            "alive": self.alive,
            "target_id": self.target_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Enemy:
        return cls(
            id=_decode(int, _field(data, "id")),
            etype=_decode(int, _field(data, "etype")),
            pos=_decode(Vec3.from_list, _field(data, "pos")),
            animation_index=_decode(int, _field(data, "animation_index")),
            hp=_decode(float, _field(data, "hp")),
            alive=bool(_field(data, "alive")),
            target_id=_decode(int, _field(data, "target_id")),
        )


@dataclass
class Enemies:
    """A list of enemies, serialised under the key 'list'."""

    items: list[Enemy] = field(default_factory=list)

    def __iter__(self) -> Iterator[Enemy]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict[str, Any]:
        return {"list": [e.to_dict() for e in self.items]}


@dataclass
class EnemyLists:
    """Enemies newly spawned, currently tracked, and killed."""

    new: Enemies = field(default_factory=Enemies)
    update: Enemies = field(default_factory=Enemies)
    dead: Enemies = field(default_factory=Enemies)


@dataclass(frozen=True)
class Damage:
    target_id: int
    dmg: float

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Damage:
        return cls(
            target_id=_decode(int, _field(data, "target_id")),
            dmg=_decode(float, _field(data, "dmg")),
        )


@dataclass
class Timer:
    """A one-shot timer that finishes once its duration has elapsed."""

    duration: float
    elapsed: float = 0.0

    def tick(self, delta: float) -> None:
        self.elapsed = min(self.duration, self.elapsed + delta)

    def finished(self) -> bool:
        return self.elapsed >= self.duration


@dataclass
class Cooldown:
    """An enemy's attack cooldown: the reset period and the running timer."""

    enemy_id: int
    og: float
    timer: Timer