"""UDP game server: decodes client messages and keeps the world in step."""

from __future__ import annotations

import argparse
import logging
import socket
import time
from dataclasses import replace
from typing import Any, Callable, Protocol

from seafortune.protocol import (
    MAX_PLAYERS,
    Damage,
    Envelope,
    Player,
    ProtocolError,
    create_env,
)
from seafortune.simulation import World, initial_world, move_enemies

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 5000
RECV_SIZE = 1024
RETRY_DELAY = 3.0
FRAME_TIME = 1.0 / 60.0
FULL_LOBBY_TEXT = "Lobby is full, cannot join right now. Try again later!"


class Transport(Protocol):
    def sendto(self, data: bytes, address: Any) -> int: ...

    def recvfrom(self, bufsize: int) -> tuple[bytes, Any]: ...


def _address(text: str) -> tuple[str, int]:
    """Split a 'host:port' or '[v6host]:port' string into a socket address."""
    if text.startswith("["):
        host, sep, port = text[1:].partition("]:")
    else:
        host, sep, port = text.rpartition(":")
    if not sep or not host or not port.isdigit() or int(port) > 65535:
        raise ProtocolError(f"invalid address {text!r}")
    return host, int(port)


class GameServer:
    """Handles client datagrams against a shared game world."""

    def __init__(self, world: World, transport: Transport) -> None:
        self.world = world
        self.transport = transport
        self._handlers: dict[str, Callable[[Envelope], None]] = {
            "new_player": self._new_player,
            "player_leave": self._player_leave,
            "update": self._update,
            "player_update": self._player_update,
            "enemy_damaged": self._enemy_damaged,
            "got_here_late": self._got_here_late,
        }

    def handle(self, data: bytes, source: Any) -> None:
        """Process one datagram received from ``source``."""
        envelope = Envelope.from_json(data)
        handler = self._handlers.get(envelope.message)
        if handler is None:
            logger.warning("Recieved invalid packet from [%s]: %s", source[0], envelope.message)
            return
        handler(envelope)

    def poll(self) -> int:
        """Handle every datagram waiting on the transport; return how many."""
        handled = 0
        while True:
            try:
                data, source = self.transport.recvfrom(RECV_SIZE)
            except OSError:
                break
            self.handle(data, source)
            handled += 1
        return handled

    def tick(self, dt: float) -> None:
        """Run one frame: drain incoming messages, then move enemies."""
        self.poll()
        move_enemies(self.world.enemies.update, self.world.players, dt)

    def run(self) -> None:
        """Tick forever at a steady frame rate."""
        last = time.monotonic()
        while True:
            now = time.monotonic()
            self.tick(now - last)
            last = now
            remaining = FRAME_TIME - (time.monotonic() - now)
            if remaining > 0:
                time.sleep(remaining)

    def _send(self, message: str, payload: Any, addr: str) -> None:
        self.transport.sendto(create_env(message, payload).encode(), _address(addr))

    def _slot(self, player_id: int) -> Player:
        if not 0 <= player_id < MAX_PLAYERS:
            raise ProtocolError(f"no player slot {player_id}")
        return self.world.players.player_array[player_id]

    def _new_player(self, envelope: Envelope) -> None:
        player = Player.from_dict(envelope.payload())
        logger.info("Player join request from [%s]", player.addr)
        slots = self.world.players.player_array
        index = next((i for i, slot in enumerate(slots) if not slot.used), None)
        if index is None:
            self._send("full_lobby", FULL_LOBBY_TEXT, player.addr)
            return
        player.id = index
        player.used = True
        slots[index] = replace(player)
        self._send("joined_lobby", player.id, player.addr)
        logger.info("Sending ocean overworld...")
        for tile in self.world.ocean:
            self._send("load_ocean", tile, player.addr)
        logger.info("Done. Total ocean packets sent: %d", len(self.world.ocean))

    def _player_leave(self, envelope: Envelope) -> None:
        player = Player.from_dict(envelope.payload())
        self._slot(player.id).used = False
        self._send("leave_success", "null", player.addr)
        logger.info("Logged out player")

    def _update(self, envelope: Envelope) -> None:
        players = self.world.players
        for player in players:
            if player.used:
                self._send("update_players", players, player.addr)
        self.world.enemies.new.items.clear()

    def _player_update(self, envelope: Envelope) -> None:
        player = Player.from_dict(envelope.payload())
        slot = self._slot(player.id)
        slot.pos = player.pos
        slot.rot = player.rot

    def _enemy_damaged(self, envelope: Envelope) -> None:
        attack = Damage.from_dict(envelope.payload())
        tracked = self.world.enemies.update.items
        index = next((i for i, e in enumerate(tracked) if e.id == attack.target_id), None)
        if index is None:
            return
        enemy = tracked[index]
        enemy.hp -= attack.dmg
        logger.info("Enemy [%s] hp: [%s]", enemy.id, enemy.hp)
        if enemy.hp > 0.0:
            return
        for player in self.world.players:
            if player.used:
                logger.info("Sending enemy [%s] dead to player #%s", enemy.id, player.addr)
                self.world.enemies.dead.items.append(replace(enemy))
        del tracked[index]

    def _got_here_late(self, envelope: Envelope) -> None:
        player = Player.from_dict(envelope.payload())
        update = self.world.enemies.update
        logger.info("This happened for player #%s: Sending [%d] enemies", player.id, len(update))
        self._send("new_enemies", update, player.addr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="seafortune", description="Run the game server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    logger.info("Starting Server")
    world = initial_world()
    logger.info("Ocean size: %d", len(world.ocean))

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind((args.host, args.port))
    except OSError as exc:
        sock.close()
        logger.error("UDP Socket unsuccessfully bound: %s", exc)
        time.sleep(RETRY_DELAY)
        return 1

    with sock:
        sock.setblocking(False)
        logger.info("UDP Socket listening to %s", sock.getsockname())
        try:
            GameServer(world, sock).run()
        except KeyboardInterrupt:
            pass
    return 0