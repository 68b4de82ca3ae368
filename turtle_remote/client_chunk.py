"""Chunks as seen by a viewer, with render blacklists and mesh arrays."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from .meshing import Side, generate_mesh_for_chunk
from .pos3 import Pos3
from .world_data import CHUNK_SIZE, Chunk, chunk_relative_pos


class ClientChunk:
    """A chunk whose blacklisted block ids are not rendered."""

    def __init__(self, chunk: Chunk, blacklist: Iterable[str] = ()) -> None:
        self.chunk = chunk
        self.blacklist: frozenset[str] = frozenset(blacklist)

    @classmethod
    def from_chunk(cls, chunk: Chunk, blacklist: Iterable[str] = ()) -> ClientChunk:
        return cls(chunk, blacklist)

    @property
    def pos(self) -> Pos3:
        return self.chunk.pos

    def _block_if_exists(self, pos: Pos3) -> Optional[str]:
        if self.chunk.does_block_exist(pos):
            return self.chunk.get_block_id(pos)
        return None

    def block_exists(self, pos: Pos3) -> bool:
        block = self._block_if_exists(pos)
        return block is not None and block not in self.blacklist

    def chunk_size(self) -> int:
        return CHUNK_SIZE

    def has_neighbour(self, pos: Pos3, side: Side) -> bool:
        neighbour = chunk_relative_pos(pos) + side.rel_pos()
        coords = (neighbour.x, neighbour.y, neighbour.z)
        if any(c < 0 or c > CHUNK_SIZE for c in coords):
            return False
        return self.block_exists(neighbour)

    def color_seed_for_block(self, pos: Pos3) -> str:
        return self.chunk.get_block_id(pos) or ""


@dataclass
class MeshArrays:
    """Per-vertex attribute arrays of a chunk mesh."""

    positions: list[tuple[float, float, float]] = field(default_factory=list)
    colors: list[tuple[float, float, float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)


def build_mesh_arrays(chunk: ClientChunk) -> MeshArrays:
    """Position, colour and normal arrays for a triangle-list mesh."""
    arrays = MeshArrays()
    for face in generate_mesh_for_chunk(chunk):
        color = tuple(c / 255 for c in face.color) + (1.0,)
        normal = (float(face.normal.x), float(face.normal.y), float(face.normal.z))
        for v in face.vertices:
            arrays.positions.append((float(v.x), float(v.y), float(v.z)))
            arrays.colors.append(color)
            arrays.normals.append(normal)
    return arrays