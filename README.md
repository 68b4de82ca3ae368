# turtle_remote

A websocket server and shared data model for driving programmable mining
turtles inside a block game from a remote viewer client.

Turtles connect on one websocket port, viewer clients on another. The server
keeps a SQLite record of every turtle (index, name, position, orientation,
fuel, maximum fuel, world) and of every block the turtles report, and relays
state to all connected clients: turtle moves, fuel and inventory changes, and
block updates. Clients can ask for the list of worlds, the blocks of a world
and the turtles in a world, and can send Lua code for a turtle to run.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running the server

```
turtle-remote-server --database turtles.db
```

Options:

- `--database` — SQLite database path, or a `sqlite:` / `sqlite://` URL.
  Defaults to the `DATABASE_URL` environment variable; one of the two is
  required. The tables are created on start if they do not exist.
- `--host` — address to listen on (default `0.0.0.0`).
- `--lua-dir` — directory served under `/lua` (default `./lua`); it is only
  served if it exists.

The server listens on:

- port 9001 for client websockets,
- port 9002 for turtle websockets,
- port 9003 for a small HTTP API:
  - `GET /get_worlds` — names of known worlds, as a JSON list,
  - `POST /add_world` — the request body is the name of a world to add;
    adding a known world does nothing,
  - `GET /get_supported_extensions` — identifiers of supported protocol
    extensions (`["trc_position_tracking"]`),
  - `/lua/...` — static files from the Lua directory.

## Protocol

Every message is a JSON text frame. A new turtle is first sent
`"GetSetupInfo"` and must answer with a `Batch` whose first packet is
`SetupInfo`; `Ping` packets before it are ignored, and anything else closes
the connection. A turtle not yet in the database is stored as a new one.

The packet types and their encoders live in:

- `turtle_remote.turtle_packets` — turtle ↔ server (`t2s_to_json`,
  `t2s_from_json`, `s2t_to_json`, `s2t_from_json`, `loads_t2s`, `dumps_s2t`),
- `turtle_remote.client_packets` — client ↔ server (`c2s_to_json`,
  `c2s_from_json`, `s2c_to_json`, `s2c_from_json`, `dumps`, `loads_c2s`,
  `loads_s2c`),
- `turtle_remote.remote_control` — direct move, slot, place and break
  packets (`to_json`, `s2t_from_json`, `c2s_from_json`).

Enum-like variants without data are bare strings (`"RequestWorlds"`), others
are one-key objects (`{"RequestWorld": "overworld"}`); optional values are
`"None"` or `{"Some": value}`.

## Library pieces

- `turtle_remote.pos3.Pos3` — integer 3D positions.
- `turtle_remote.turtle` — `Turtle`, `Orientation`, `MoveDirection`,
  `TurnDir`, `Item`, `Inventory`, `TurtleInventory`.
- `turtle_remote.world_data` — `Block`, `Chunk`, `World`, and
  `chunk_containing_block` / `chunk_relative_pos`.
- `turtle_remote.vec3d.Vec3D` — a dict keyed by `Pos3`.
- `turtle_remote.db.Database` — the asynchronous SQLite store.
- `turtle_remote.connection_manager.ConnectionManager` — routes messages
  between turtles, clients and the database.
- `turtle_remote.meshing` — `generate_mesh_for_chunk` turns a chunk into the
  visible triangle faces with colours and normals;
  `turtle_remote.client_chunk.build_mesh_arrays` flattens them into
  position, colour and normal arrays.
- `turtle_remote.lerp.LerpTransform` and `turtle_remote.geometry` — smooth
  position and rotation interpolation.
- `turtle_remote.colors` — stable colours derived from block and item names.
- `turtle_remote.widgets` — display logic for a fuel ring (`CircleDisplay`,
  `limit_number`) and inventory slots (`slot_color`, `ItemSlotAction`,
  `action_to_lua`).

A small meshing demonstration meshes one block at the origin and prints the
number of faces (6):

```
turtle-remote-mesh-demo
```

## What it does not do

There is no graphical viewer: the package has no window, 3D renderer or
on-screen widgets. The meshing, interpolation and widget modules compute the
data such a viewer would draw, but nothing here draws it. The server does not
support forwarding standard input to turtles (`StdInForTurtle`) or handling
`Executables` and `StdOut` packets from turtles; these are rejected with an
error.