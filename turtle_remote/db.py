"""Persistent storage of worlds, turtles and blocks in SQLite."""

from __future__ import annotations

import re
import sqlite3
from typing import Any, Mapping, Optional

import aiosqlite

from .pos3 import Pos3
from .turtle import Orientation, Turtle
from .world_data import Block, chunk_containing_block

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1

_MASKS = (
    0b001001001001001001001001001001001,
    0b010010010010010010010010010010010,
    0b001001001001001001001001001001001,
)

_ORDINALS = ("first", "second", "third")
_INT_RE = re.compile(r"[+-]?[0-9]+")

_TURTLE_COLUMNS = frozenset({"name", "position", "orientation", "fuel", "max_fuel", "world"})

_SCHEMA = """
CREATE TABLE IF NOT EXISTS worlds (
    name TEXT PRIMARY KEY NOT NULL
);
CREATE TABLE IF NOT EXISTS turtles (
    id INTEGER NOT NULL,
    name TEXT NOT NULL,
    position TEXT NOT NULL,
    orientation TEXT NOT NULL,
    fuel INTEGER NOT NULL,
    max_fuel INTEGER NOT NULL,
    world TEXT NOT NULL,
    PRIMARY KEY (id, world)
);
CREATE TABLE IF NOT EXISTS blocks (
    chunk_key INTEGER NOT NULL,
    id TEXT NOT NULL,
    world TEXT NOT NULL,
    world_pos TEXT NOT NULL,
    is_air BOOLEAN NOT NULL,
    PRIMARY KEY (world, world_pos)
);
"""


def pos_to_db_pos(pos: Pos3) -> str:
    """Encode a position as "x;y;z"."""
    return f"{pos.x};{pos.y};{pos.z}"


def parse_db_pos(text: str) -> Pos3:
    """Decode an "x;y;z" position; parts after the third are ignored."""
    parts = text.split(";")
    values = []
    for ordinal, part in zip(_ORDINALS, parts):
        if not _INT_RE.fullmatch(part):
            raise ValueError(f"could not parse {ordinal} int: {part!r}")
        value = int(part)
        if not _I32_MIN <= value <= _I32_MAX:
            raise ValueError(f"{ordinal} int out of range: {part!r}")
        values.append(value)
    if len(values) < 3:
        raise ValueError(f"could not parse {_ORDINALS[len(values)]} int")
    return Pos3(*values)


def chunk_key_mask(i: int) -> int:
    """Bit mask applied to coordinate i when building a chunk key."""
    return _MASKS[i] if 0 <= i < len(_MASKS) else 0


def pos_to_key(pos: Pos3) -> int:
    """Interleave the masked absolute coordinates of a chunk position."""
    return (
        (abs(pos.x) & chunk_key_mask(0))
        | (abs(pos.y) & chunk_key_mask(1))
        | (abs(pos.z) & chunk_key_mask(2))
    )


def _i32(value: Any, what: str) -> int:
    value = int(value)
    if not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"{what} does not fit in 32 bits: {value}")
    return value


def block_from_row(row: Mapping[str, Any]) -> Block:
    """Build a block from a row of the blocks table."""
    return Block(
        world=row["world"],
        id=row["id"],
        pos=parse_db_pos(row["world_pos"]),
        is_air=bool(row["is_air"]),
    )


def turtle_from_row(row: Mapping[str, Any]) -> Turtle:
    """Build an offline turtle without inventory from a row of the turtles table."""
    return Turtle(
        index=_i32(row["id"], "id"),
        name=row["name"],
        inventory=None,
        position=parse_db_pos(row["position"]),
        orientation=Orientation.parse(row["orientation"]),
        fuel=_i32(row["fuel"], "fuel"),
        max_fuel=_i32(row["max_fuel"], "max_fuel"),
        is_online=False,
        world=row["world"],
    )


class Database:
    """Asynchronous access to the server's SQLite database."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    @classmethod
    async def connect(cls, path: str) -> Database:
        conn = await aiosqlite.connect(path)
        conn.row_factory = sqlite3.Row
        return cls(conn)

    async def close(self) -> None:
        await self._conn.close()

    async def __aenter__(self) -> Database:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def create_schema(self) -> None:
        """Create the tables if they do not exist yet."""
        await self._conn.executescript(_SCHEMA)
        await self._conn.commit()

    async def _fetch(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        async with self._conn.execute(sql, params) as cursor:
            return list(await cursor.fetchall())

    async def _write(self, sql: str, params: tuple) -> int:
        async with self._conn.execute(sql, params) as cursor:
            count = cursor.rowcount
        await self._conn.commit()
        return count

    async def world_names(self) -> list[str]:
        rows = await self._fetch("SELECT name FROM worlds ORDER BY rowid")
        return [row["name"] for row in rows]

    async def add_world(self, name: str) -> None:
        """Add a world; adding an existing one does nothing."""
        await self._write("INSERT OR IGNORE INTO worlds VALUES (?)", (name,))

    async def turtles_in_world(self, world: str) -> list[Turtle]:
        rows = await self._fetch("SELECT * FROM turtles WHERE world = ? ORDER BY rowid", (world,))
        return [turtle_from_row(row) for row in rows]

    async def find_turtle(self, index: int, world: str) -> Optional[Turtle]:
        rows = await self._fetch(
            "SELECT * FROM turtles WHERE id = ? AND world = ?", (index, world)
        )
        return turtle_from_row(rows[0]) if rows else None

    async def insert_turtle(self, turtle: Turtle) -> None:
        await self._write(
            "INSERT INTO turtles VALUES (?,?,?,?,?,?,?)",
            (
                turtle.index,
                turtle.name,
                pos_to_db_pos(turtle.position),
                str(turtle.orientation),
                turtle.fuel,
                turtle.max_fuel,
                turtle.world,
            ),
        )

    async def update_turtle(self, index: int, world: str, column: str, value: Any) -> int:
        """Set one column of a turtle's row and return the number of rows changed."""
        if column not in _TURTLE_COLUMNS:
            raise ValueError(f"unknown turtle column: {column!r}")
        return await self._write(
            f"UPDATE turtles SET {column} = ? WHERE id = ? AND world = ?",
            (value, index, world),
        )

    async def upsert_block(self, block: Block) -> None:
        """Store a block, replacing any block at the same place."""
        await self._write(
            "INSERT OR REPLACE INTO blocks VALUES (?,?,?,?,?)",
            (
                pos_to_key(chunk_containing_block(block.pos)),
                block.id,
                block.world,
                pos_to_db_pos(block.pos),
                block.is_air,
            ),
        )

    async def blocks_in_world(self, world: str) -> list[Block]:
        rows = await self._fetch("SELECT * FROM blocks WHERE world = ? ORDER BY rowid", (world,))
        return [block_from_row(row) for row in rows]