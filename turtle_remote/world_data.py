"""Blocks, chunks and worlds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .pos3 import Pos3
from .vec3d import Vec3D

CHUNK_SIZE = 16


def chunk_containing_block(pos: Pos3) -> Pos3:
    """Chunk coordinates of the chunk holding a global block position."""
    return Pos3(pos.x // CHUNK_SIZE, pos.y // CHUNK_SIZE, pos.z // CHUNK_SIZE)


def chunk_relative_pos(pos: Pos3) -> Pos3:
    """Position of a block inside its chunk."""
    return Pos3(pos.x % CHUNK_SIZE, pos.y % CHUNK_SIZE, pos.z % CHUNK_SIZE)


def _field(data: Any, key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc


@dataclass
class Block:
    """A block at a global position."""

    world: str
    id: str
    pos: Pos3
    is_air: bool

    @classmethod
    def create(cls, ident: Optional[str], pos: Pos3, world_name: str) -> Block:
        """A block named ident, or air when ident is None."""
        return cls(world=world_name, id=ident or "", pos=pos, is_air=ident is None)

    def to_json(self) -> dict[str, Any]:
        return {
            "world": self.world,
            "id": self.id,
            "pos": self.pos.to_json(),
            "is_air": self.is_air,
        }

    @classmethod
    def from_json(cls, data: Any) -> Block:
        world, ident, is_air = _field(data, "world"), _field(data, "id"), _field(data, "is_air")
        if not isinstance(world, str) or not isinstance(ident, str):
            raise ValueError("block world and id must be strings")
        if not isinstance(is_air, bool):
            raise ValueError("is_air must be a boolean")
        return cls(world=world, id=ident, pos=Pos3.from_json(_field(data, "pos")), is_air=is_air)


@dataclass
class Chunk:
    """Blocks of one chunk, keyed by chunk-local position."""

    pos: Pos3
    blocks: Vec3D[Block] = field(default_factory=Vec3D)

    def does_block_exist(self, pos: Pos3) -> bool:
        block = self.blocks.get(pos)
        return block is not None and not block.is_air

    def set_block(self, block: Block) -> None:
        self.blocks[chunk_relative_pos(block.pos)] = block

    def get_block_id(self, pos: Pos3) -> Optional[str]:
        block = self.blocks.get(pos)
        return None if block is None else block.id

    def all_blocks(self) -> Vec3D[Block]:
        return self.blocks.copy()

    def to_json(self) -> dict[str, Any]:
        return {"blocks": self.blocks.to_json(Block.to_json), "pos": self.pos.to_json()}

    @classmethod
    def from_json(cls, data: Any) -> Chunk:
        return cls(
            pos=Pos3.from_json(_field(data, "pos")),
            blocks=Vec3D.from_json(_field(data, "blocks"), Block.from_json),
        )


@dataclass
class World:
    """A named world made of chunks."""

    name: str
    chunks: Vec3D[Chunk] = field(default_factory=Vec3D)

    def get_block(self, pos: Pos3) -> Optional[Block]:
        chunk = self.chunks.get(chunk_containing_block(pos))
        if chunk is None:
            return None
        return chunk.blocks.get(pos)

    def set_block(self, block: Block) -> None:
        chunk_pos = chunk_containing_block(block.pos)
        self.chunks.setdefault(chunk_pos, Chunk(chunk_pos)).set_block(block)

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "chunks": self.chunks.to_json(Chunk.to_json)}

    @classmethod
    def from_json(cls, data: Any) -> World:
        name = _field(data, "name")
        if not isinstance(name, str):
            raise ValueError("world name must be a string")
        return cls(name=name, chunks=Vec3D.from_json(_field(data, "chunks"), Chunk.from_json))