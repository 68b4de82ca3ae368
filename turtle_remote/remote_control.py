"""Direct remote-control packets for moving and operating turtles."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from .turtle import MoveDirection


class TurtleUpDown(Enum):
    UP = "Up"
    FORWARD = "Forward"
    DOWN = "Down"


@dataclass(frozen=True)
class Move:
    directions: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class SelectSlot:
    slot: int


@dataclass(frozen=True)
class PlaceBlock:
    dir: TurtleUpDown
    text: Optional[str] = None


@dataclass(frozen=True)
class BreakBlock:
    dir: TurtleUpDown


@dataclass(frozen=True)
class MoveTurtle:
    index: int
    world: str
    direction: MoveDirection


@dataclass(frozen=True)
class TurtleSelectSlot:
    index: int
    world: str
    slot: int


@dataclass(frozen=True)
class PlaceBlockFor:
    index: int
    world: str
    dir: TurtleUpDown
    text: Optional[str] = None


@dataclass(frozen=True)
class BreakBlockFor:
    index: int
    world: str
    dir: TurtleUpDown


S2TPacket = Union[Move, SelectSlot, PlaceBlock, BreakBlock]
C2SPacket = Union[MoveTurtle, TurtleSelectSlot, PlaceBlockFor, BreakBlockFor]


def _tagged(data: Any) -> tuple[str, Any]:
    if isinstance(data, dict) and len(data) == 1:
        return next(iter(data.items()))
    raise ValueError(f"invalid packet: {data!r}")


def _get(data: Any, key: str, kind: type) -> Any:
    try:
        value = data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"field {key!r} has the wrong type")
    return value


def _enum(kind: type, value: Any) -> Any:
    try:
        return kind(value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"invalid {kind.__name__}: {value!r}") from exc


def _text(data: Any) -> Optional[str]:
    value = data.get("text") if isinstance(data, dict) else None
    if value is not None and not isinstance(value, str):
        raise ValueError("text must be a string or null")
    return value


def to_json(packet: Union[S2TPacket, C2SPacket]) -> Any:
    """Encode any remote-control packet."""
    match packet:
        case Move(directions=directions):
            return {"Move": [d.value for d in directions]}
        case SelectSlot(slot=slot):
            return {"SelectSlot": slot}
        case PlaceBlock(dir=d, text=text):
            return {"PlaceBlock": {"dir": d.value, "text": text}}
        case BreakBlock(dir=d):
            return {"BreakBlock": {"dir": d.value}}
        case MoveTurtle():
            return {"MoveTurtle": {"index": packet.index, "world": packet.world, "direction": packet.direction.value}}
        case TurtleSelectSlot():
            return {"TurtleSelectSlot": {"index": packet.index, "world": packet.world, "slot": packet.slot}}
        case PlaceBlockFor():
            return {"PlaceBlock": {"index": packet.index, "world": packet.world, "dir": packet.dir.value, "text": packet.text}}
        case BreakBlockFor():
            return {"BreakBlock": {"index": packet.index, "world": packet.world, "dir": packet.dir.value}}
    raise TypeError(f"not a remote-control packet: {packet!r}")


def s2t_from_json(data: Any) -> S2TPacket:
    """Decode a server-to-turtle remote-control packet."""
    tag, body = _tagged(data)
    if tag == "Move":
        if not isinstance(body, list):
            raise ValueError("Move expects a list")
        return Move(tuple(_enum(MoveDirection, d) for d in body))
    if tag == "SelectSlot":
        if isinstance(body, bool) or not isinstance(body, int) or body < 0:
            raise ValueError("invalid slot")
        return SelectSlot(body)
    if tag == "PlaceBlock":
        return PlaceBlock(_enum(TurtleUpDown, _get(body, "dir", str)), _text(body))
    if tag == "BreakBlock":
        return BreakBlock(_enum(TurtleUpDown, _get(body, "dir", str)))
    raise ValueError(f"unknown packet: {tag!r}")


def c2s_from_json(data: Any) -> C2SPacket:
    """Decode a client-to-server remote-control packet."""
    tag, body = _tagged(data)
    if tag == "MoveTurtle":
        return MoveTurtle(
            _get(body, "index", int), _get(body, "world", str),
            _enum(MoveDirection, _get(body, "direction", str)),
        )
    if tag == "TurtleSelectSlot":
        return TurtleSelectSlot(_get(body, "index", int), _get(body, "world", str), _get(body, "slot", int))
    if tag == "PlaceBlock":
        return PlaceBlockFor(
            _get(body, "index", int), _get(body, "world", str),
            _enum(TurtleUpDown, _get(body, "dir", str)), _text(body),
        )
    if tag == "BreakBlock":
        return BreakBlockFor(
            _get(body, "index", int), _get(body, "world", str),
            _enum(TurtleUpDown, _get(body, "dir", str)),
        )
    raise ValueError(f"unknown packet: {tag!r}")