import socket
from unittest import mock

import pytest

from seafortune.gameworld import KRAKEN, KRAKEN_MAX_HP, KRAKEN_MOVEMENT_SPEED
from seafortune.ocean import OceanTile
from seafortune.protocol import (
    Damage,
    Enemies,
    Enemy,
    EnemyLists,
    Envelope,
    Player,
    Players,
    ProtocolError,
    create_env,
)
from seafortune.server import FULL_LOBBY_TEXT, RETRY_DELAY, GameServer, main
from seafortune.simulation import World
from seafortune.vectors import Quat, Vec3

SOURCE = ("127.0.0.1", 6000)


class FakeTransport:
    def __init__(self, incoming=()):
        self.incoming = list(incoming)
        self.sent = []

    def sendto(self, data, address):
        self.sent.append((data, address))
        return len(data)

    def recvfrom(self, size):
        if not self.incoming:
            raise BlockingIOError
        return self.incoming.pop(0)


def _world(**kwargs):
    ocean = [OceanTile(Vec3(1.0, 2.0, 0.0), 0), OceanTile(Vec3(3.0, 4.0, 0.0), 1)]
    return World(ocean=ocean, **kwargs)


def _server(world=None):
    return GameServer(world if world is not None else _world(), FakeTransport())


def _decoded(server):
    messages = []
    for data, _ in server.transport.sent:
        envelope = Envelope.from_json(data)
        messages.append((envelope.message, envelope.payload()))
    return messages


def _msg(message, payload):
    return create_env(message, payload).encode()


def _join(server, port=6000):
    server.handle(_msg("new_player", Player(addr=f"127.0.0.1:{port}")), ("127.0.0.1", port))


def _kraken():
    return Enemy(15, KRAKEN, Vec3(), hp=KRAKEN_MAX_HP)


def test_join_takes_first_slot_and_sends_ocean():
    server = _server()
    _join(server)
    slot = server.world.players.player_array[0]
    assert slot.used and slot.id == 0 and slot.addr == "127.0.0.1:6000"
    messages = _decoded(server)
    assert messages[0] == ("joined_lobby", 0)
    assert messages[1:] == [("load_ocean", tile.to_dict()) for tile in server.world.ocean]
    assert {address for _, address in server.transport.sent} == {SOURCE}


def test_full_lobby_rejects_fifth_player():
    server = _server()
    for port in range(6000, 6005):
        _join(server, port)
    assert [p.id for p in server.world.players] == [0, 1, 2, 3]
    assert _decoded(server)[-1] == ("full_lobby", FULL_LOBBY_TEXT)
    assert server.transport.sent[-1][1] == ("127.0.0.1", 6004)


def test_leave_frees_slot():
    server = _server()
    _join(server)
    server.handle(_msg("player_leave", Player(id=0, addr="127.0.0.1:6000")), SOURCE)
    assert not server.world.players.player_array[0].used
    assert _decoded(server)[-1] == ("leave_success", "null")


def test_update_broadcasts_players_and_clears_new_enemies():
    world = _world(enemies=EnemyLists(new=Enemies([_kraken()])))
    server = _server(world)
    _join(server, 6000)
    _join(server, 6001)
    server.transport.sent.clear()
    server.handle(_msg("update", "null"), SOURCE)
    messages = _decoded(server)
    assert [m for m, _ in messages] == ["update_players", "update_players"]
    assert all(Players.from_dict(p) == world.players for _, p in messages)
    assert len(world.enemies.new) == 0


def test_player_update_moves_slot():
    server = _server()
    _join(server)
    moved = Player(id=0, addr="127.0.0.1:6000", pos=Vec3(5.0, 6.0, 7.0), rot=Quat())
    server.handle(_msg("player_update", moved), SOURCE)
    slot = server.world.players.player_array[0]
    assert slot.pos == Vec3(5.0, 6.0, 7.0)
    assert slot.rot == Quat()


def test_player_update_with_bad_slot_raises():
    server = _server()
    with pytest.raises(ProtocolError):
        server.handle(_msg("player_update", Player(id=7)), SOURCE)


def _damage_msg(target, dmg):
    return _msg("enemy_damaged", {"target_id": target, "dmg": dmg})


def test_enemy_damage_and_death():
    world = _world(enemies=EnemyLists(update=Enemies([_kraken()])))
    world.players.player_array[0].used = True
    world.players.player_array[1].used = True
    server = _server(world)
    server.handle(_damage_msg(15, 1.0), SOURCE)
    assert world.enemies.update.items[0].hp == KRAKEN_MAX_HP - 1.0
    server.handle(_damage_msg(15, 1.0), SOURCE)
    assert len(world.enemies.update) == 0
    assert [e.id for e in world.enemies.dead] == [15, 15]


def test_damage_to_unknown_enemy_is_ignored():
    world = _world(enemies=EnemyLists(update=Enemies([_kraken()])))
    server = _server(world)
    server.handle(_damage_msg(99, 5.0), SOURCE)
    assert world.enemies.update.items == [_kraken()]
    assert Damage.from_dict({"target_id": 99, "dmg": 5.0}).target_id == 99


def test_late_joiner_gets_tracked_enemies():
    world = _world(enemies=EnemyLists(update=Enemies([_kraken()])))
    server = _server(world)
    server.handle(_msg("got_here_late", Player(id=0, addr="127.0.0.1:6000")), SOURCE)
    assert _decoded(server) == [("new_enemies", world.enemies.update.to_dict())]


def test_unknown_message_changes_nothing():
    server = _server()
    server.handle(_msg("dance", 1), SOURCE)
    assert server.transport.sent == []
    assert not any(p.used for p in server.world.players)


def test_malformed_datagram_raises():
    with pytest.raises(ProtocolError):
        _server().handle(b"not json", SOURCE)


def test_ipv6_address_is_parsed():
    server = _server()
    server.handle(_msg("new_player", Player(addr="[::1]:7000")), SOURCE)
    assert server.transport.sent[0][1] == ("::1", 7000)


def test_bad_address_raises():
    with pytest.raises(ProtocolError):
        _server().handle(_msg("new_player", Player(addr="nowhere")), SOURCE)


def test_poll_drains_transport():
    incoming = [
        (_msg("new_player", Player(addr="127.0.0.1:6000")), SOURCE),
        (_msg("update", "null"), SOURCE),
    ]
    server = GameServer(_world(), FakeTransport(incoming))
    assert server.poll() == 2
    assert server.transport.incoming == []
    assert _decoded(server)[-1][0] == "update_players"


def test_tick_moves_enemies():
    world = _world(enemies=EnemyLists(update=Enemies([Enemy(15, KRAKEN, Vec3(500.0, 0.0, 0.0))])))
    server = _server(world)
    server.tick(1.0)
    assert world.enemies.update.items[0].pos == Vec3(500.0 - KRAKEN_MOVEMENT_SPEED, 0.0, 0.0)


@pytest.fixture
def busy_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    yield sock.getsockname()[1]
    sock.close()


def test_main_reports_bind_failure(busy_port):
    with mock.patch("seafortune.server.time.sleep") as sleep:
        result = main(["--host", "127.0.0.1", "--port", str(busy_port)])
    assert result == 1
    sleep.assert_called_once_with(RETRY_DELAY)