"""Face-culled voxel meshing of chunks."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Sequence

from .colors import string_to_color
from .pos3 import Pos3


class Side(Enum):
    POS_X = "PosX"
    NEG_X = "NegX"
    POS_Y = "PosY"
    NEG_Y = "NegY"
    POS_Z = "PosZ"
    NEG_Z = "NegZ"

    def rel_pos(self) -> Pos3:
        """Unit offset towards the neighbour on this side."""
        return _REL[self]


_REL = {
    Side.NEG_X: Pos3(-1, 0, 0),
    Side.POS_X: Pos3(1, 0, 0),
    Side.NEG_Y: Pos3(0, -1, 0),
    Side.POS_Y: Pos3(0, 1, 0),
    Side.NEG_Z: Pos3(0, 0, -1),
    Side.POS_Z: Pos3(0, 0, 1),
}

_QUADS = {
    Side.POS_X: (Pos3(1, 1, 1), Pos3(1, 0, 1), Pos3(1, 1, 0), Pos3(1, 0, 0)),
    Side.NEG_X: (Pos3(0, 1, 0), Pos3(0, 0, 0), Pos3(0, 1, 1), Pos3(0, 0, 1)),
    Side.POS_Y: (Pos3(0, 1, 1), Pos3(1, 1, 1), Pos3(0, 1, 0), Pos3(1, 1, 0)),
    Side.NEG_Y: (Pos3(1, 0, 1), Pos3(0, 0, 1), Pos3(1, 0, 0), Pos3(0, 0, 0)),
    Side.NEG_Z: (Pos3(1, 0, 0), Pos3(0, 0, 0), Pos3(1, 1, 0), Pos3(0, 1, 0)),
    Side.POS_Z: (Pos3(0, 0, 1), Pos3(1, 0, 1), Pos3(0, 1, 1), Pos3(1, 1, 1)),
}


class ChunkData(Protocol):
    """What the mesher needs to know about a chunk."""

    def has_neighbour(self, pos: Pos3, side: Side) -> bool: ...

    def chunk_size(self) -> int: ...

    def color_seed_for_block(self, pos: Pos3) -> str: ...

    def block_exists(self, pos: Pos3) -> bool: ...


@dataclass(frozen=True)
class BlockFaceData:
    """Two triangles of one visible block face."""

    vertices: tuple[Pos3, ...]
    normal: Pos3
    color: tuple[int, int, int]


def vertices_for_side(side: Side) -> tuple[Pos3, ...]:
    """Six unit-cube vertices forming the two triangles of a face."""
    p = _QUADS[side]
    return (p[0], p[1], p[2], p[2], p[1], p[3])


def face_data_for_block(chunk_data: ChunkData, pos: Pos3) -> list[BlockFaceData]:
    """Faces of the block at pos that have no neighbour."""
    if not chunk_data.block_exists(pos):
        return []
    color = string_to_color(chunk_data.color_seed_for_block(pos))[:3]
    return [
        BlockFaceData(
            vertices=tuple(v + pos for v in vertices_for_side(side)),
            normal=side.rel_pos(),
            color=color,
        )
        for side in Side
        if not chunk_data.has_neighbour(pos, side)
    ]


def generate_mesh_for_chunk(chunk_data: ChunkData) -> list[BlockFaceData]:
    """All visible faces of a chunk, by y, then x, then z."""
    size = chunk_data.chunk_size()
    return [
        face
        for y in range(size)
        for x in range(size)
        for z in range(size)
        for face in face_data_for_block(chunk_data, Pos3(x, y, z))
    ]


class _SingleBlockChunk:
    def has_neighbour(self, pos: Pos3, side: Side) -> bool:
        return False

    def chunk_size(self) -> int:
        return 16

    def color_seed_for_block(self, pos: Pos3) -> str:
        return "dwasdwasd"

    def block_exists(self, pos: Pos3) -> bool:
        return pos == Pos3.zero()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Mesh a chunk holding one block at the origin and report the face count."""
    faces = generate_mesh_for_chunk(_SingleBlockChunk())
    sys.stdout.write(f"{len(faces)}\n")
    return 0