# seafortune

This is the server side of a small multiplayer ocean adventure. It holds the
authoritative world state and talks to game clients over UDP using JSON
envelopes. The world state is an ocean map, up to four player slots, and a
kraken and a ghost ship.

## Running the server

```
pip install .
seafortune-server
```

Options:

- `--host` sets the address to bind. The default is `0.0.0.0`.
- `--port` sets the UDP port. The default is `5000`.

At start-up the server builds a random ocean of 125 × 125 tiles. It places the
kraken (id 15) and the ghost ship (id 16), then binds a non-blocking UDP socket.

Each frame, about 60 times a second, the server does two things:

1. It handles every datagram waiting on the socket.
2. It moves each enemy towards the first player slot inside its aggro band.

It logs what happens to standard error.

If the socket cannot be bound, the server logs the error, waits three seconds and exits with status 1. Ctrl-C stops it.

## Protocol

Every datagram is a JSON object with two string fields:

```json
{"message": "new_player", "packet": "{\"payload\": ...}"}
```

`packet` is itself a JSON document. Its `payload` field carries the data for
that message.

A player payload has these fields: `id`, `addr`, `pos` ([x, y, z]), `rot` ([x, y, z, w]), `boat` and `used`. Replies go to the player's `addr`, which must be a `host:port` or `[v6host]:port` string. They do not go to the datagram's source address.

| message          | payload                   | effect / reply                                                        |
|------------------|---------------------------|-----------------------------------------------------------------------|
| `new_player`     | player                    | `joined_lobby` with the slot id, then one `load_ocean` per tile; `full_lobby` if all four slots are taken |
| `player_leave`   | player                    | frees the slot, replies `leave_success`                               |
| `update`         | ignored                   | `update_players` (all four slots) to every connected player; clears the new-enemy list |
| `player_update`  | player                    | stores position and rotation in the player's slot                    |
| `enemy_damaged`  | `{"target_id", "dmg"}`    | lowers the enemy's hp; at 0 hp or less it is removed from the tracked list |
| `got_here_late`  | player                    | `new_enemies` with the tracked enemies                                |

The server logs any other message name and otherwise ignores it. A datagram
that cannot be decoded, or that names a player slot outside 0–3, raises
`seafortune.protocol.ProtocolError` from `GameServer.handle`.

## Using it as a library

```python
import random
from seafortune.protocol import Envelope, create_env
from seafortune.ocean import build_ocean
from seafortune.simulation import initial_world
from seafortune.server import GameServer

tiles = build_ocean(random.Random(1))
wire = create_env("joined_lobby", 0)
envelope = Envelope.from_json(wire)
print(envelope.message, envelope.payload())   # joined_lobby 0

world = initial_world(random.Random(1))
```

The package has these modules:

- `seafortune.vectors`: the `Vec2`, `Vec3` and `Quat` value types, with list serialisation.
- `seafortune.gameworld`: world dimensions, entity type codes and enemy tuning constants.
- `seafortune.ocean`: the `OceanTile` type and `build_ocean(rng)`.
- `seafortune.protocol`: the wire format and the game-state types. These are `Envelope`, `create_env`, `Player`, `Players`, `Enemy`, `Enemies`, `EnemyLists`, `Damage`, `Projectile`, `Velocity`, `Timer`, `Cooldown` and `Counter`.
- `seafortune.simulation`: the `World` state, `initial_world(rng)`, `move_enemies(enemies, players, dt)` and `fire_projectiles(enemies, players, cooldowns, projectiles, dt)`.
- `seafortune.server`: the `GameServer` class and the `main(argv)` entry point.

`GameServer(world, transport)` works with any object that has `sendto` and `recvfrom`, such as a UDP socket. It offers these methods:

- `handle(data, source)` processes one datagram.
- `poll()` drains everything waiting on the transport.
- `tick(dt)` polls and then moves enemies.
- `run()` loops over `tick` forever.

## What it does not do

- It opens no window and draws nothing. It only keeps and serves state.
- `fire_projectiles` can compute enemy shots, but the running server does not call it.
- The server sends no projectile, enemy-position or enemy-death updates to clients. Killed enemies are only collected in `world.enemies.dead`.
- There is no persistence. The world is rebuilt on every start.

## Tests

```
pip install .[test]
pytest
```