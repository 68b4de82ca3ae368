"""Packets exchanged between the server and viewer clients."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from .pos3 import Pos3
from .turtle import Orientation, Turtle, TurtleInventory
from .world_data import Block, World

T = TypeVar("T")


def _tagged(data: Any) -> tuple[str, Any]:
    if isinstance(data, str):
        return data, None
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


def _expect(value: Any, kind: type) -> Any:
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"expected {kind.__name__}, got {value!r}")
    return value


@dataclass(frozen=True)
class RequestTurtles:
    world: str


@dataclass(frozen=True)
class RequestWorlds:
    pass


@dataclass(frozen=True)
class RequestWorld:
    name: str


@dataclass(frozen=True)
class SendLuaToTurtle:
    index: int
    world: str
    code: str


@dataclass(frozen=True)
class StdInForTurtle:
    index: int
    value: str


C2SPacket = Union[RequestTurtles, RequestWorlds, RequestWorld, SendLuaToTurtle, StdInForTurtle]


@dataclass
class MovedTurtleData:
    index: int
    world: str
    new_orientation: Orientation
    new_pos: Pos3

    def to_json(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "world": self.world,
            "new_orientation": self.new_orientation.value,
            "new_pos": self.new_pos.to_json(),
        }

    @classmethod
    def from_json(cls, data: Any) -> MovedTurtleData:
        try:
            orientation = Orientation(_get(data, "new_orientation", str))
        except ValueError as exc:
            raise ValueError("invalid orientation") from exc
        return cls(
            index=_get(data, "index", int),
            world=_get(data, "world", str),
            new_orientation=orientation,
            new_pos=Pos3.from_json(_get(data, "new_pos", dict)),
        )


@dataclass
class UpdateTurtleData(Generic[T]):
    index: int
    world: str
    data: T


@dataclass
class SetTurtlesData:
    turtles: list[Turtle] = field(default_factory=list)
    world: str = ""


@dataclass
class MovedTurtle:
    data: MovedTurtleData


@dataclass
class TurtleInventoryUpdate:
    data: UpdateTurtleData[TurtleInventory]


@dataclass
class TurtleFuelUpdate:
    data: UpdateTurtleData[int]


@dataclass
class SetTurtles:
    data: SetTurtlesData


@dataclass
class Worlds:
    names: list[str]


@dataclass
class WorldUpdate:
    block: Block


@dataclass
class SetWorld:
    world: World


@dataclass
class StdOutFromTurtle:
    index: int
    value: str


S2CPacket = Union[
    MovedTurtle,
    TurtleInventoryUpdate,
    TurtleFuelUpdate,
    SetTurtles,
    Worlds,
    WorldUpdate,
    SetWorld,
    StdOutFromTurtle,
]

_C2S_TYPES = (RequestTurtles, RequestWorlds, RequestWorld, SendLuaToTurtle, StdInForTurtle)


def c2s_to_json(packet: C2SPacket) -> Any:
    """Encode a client-to-server packet."""
    match packet:
        case RequestTurtles(world=world):
            return {"RequestTurtles": world}
        case RequestWorlds():
            return "RequestWorlds"
        case RequestWorld(name=name):
            return {"RequestWorld": name}
        case SendLuaToTurtle():
            return {"SendLuaToTurtle": {"index": packet.index, "world": packet.world, "code": packet.code}}
        case StdInForTurtle():
            return {"StdInForTurtle": {"index": packet.index, "value": packet.value}}
    raise TypeError(f"not a client packet: {packet!r}")


def c2s_from_json(data: Any) -> C2SPacket:
    """Decode a client-to-server packet."""
    tag, body = _tagged(data)
    if tag == "RequestWorlds":
        return RequestWorlds()
    if tag == "RequestTurtles":
        return RequestTurtles(_expect(body, str))
    if tag == "RequestWorld":
        return RequestWorld(_expect(body, str))
    if tag == "SendLuaToTurtle":
        return SendLuaToTurtle(_get(body, "index", int), _get(body, "world", str), _get(body, "code", str))
    if tag == "StdInForTurtle":
        return StdInForTurtle(_get(body, "index", int), _get(body, "value", str))
    raise ValueError(f"unknown client packet: {tag!r}")


def _update(data: UpdateTurtleData[Any], encoded: Any) -> dict[str, Any]:
    return {"index": data.index, "world": data.world, "data": encoded}


def s2c_to_json(packet: S2CPacket) -> Any:
    """Encode a server-to-client packet."""
    match packet:
        case MovedTurtle(data=data):
            return {"MovedTurtle": data.to_json()}
        case TurtleInventoryUpdate(data=data):
            return {"TurtleInventoryUpdate": _update(data, data.data.to_json())}
        case TurtleFuelUpdate(data=data):
            return {"TurtleFuelUpdate": _update(data, data.data)}
        case SetTurtles(data=data):
            return {"SetTurtles": {"turtles": [t.to_json() for t in data.turtles], "world": data.world}}
        case Worlds(names=names):
            return {"Worlds": list(names)}
        case WorldUpdate(block=block):
            return {"WorldUpdate": block.to_json()}
        case SetWorld(world=world):
            return {"SetWorld": world.to_json()}
        case StdOutFromTurtle(index=index, value=value):
            return {"StdOutFromTurtle": {"index": index, "value": value}}
    raise TypeError(f"not a server packet: {packet!r}")


def s2c_from_json(data: Any) -> S2CPacket:
    """Decode a server-to-client packet."""
    tag, body = _tagged(data)
    if tag == "MovedTurtle":
        return MovedTurtle(MovedTurtleData.from_json(body))
    if tag == "TurtleInventoryUpdate":
        return TurtleInventoryUpdate(
            UpdateTurtleData(
                _get(body, "index", int),
                _get(body, "world", str),
                TurtleInventory.from_json(_get(body, "data", dict)),
            )
        )
    if tag == "TurtleFuelUpdate":
        return TurtleFuelUpdate(
            UpdateTurtleData(_get(body, "index", int), _get(body, "world", str), _get(body, "data", int))
        )
    if tag == "SetTurtles":
        turtles = [Turtle.from_json(t) for t in _get(body, "turtles", list)]
        return SetTurtles(SetTurtlesData(turtles, _get(body, "world", str)))
    if tag == "Worlds":
        return Worlds([_expect(name, str) for name in _expect(body, list)])
    if tag == "WorldUpdate":
        return WorldUpdate(Block.from_json(body))
    if tag == "SetWorld":
        return SetWorld(World.from_json(body))
    if tag == "StdOutFromTurtle":
        return StdOutFromTurtle(_get(body, "index", int), _get(body, "value", str))
    raise ValueError(f"unknown server packet: {tag!r}")


def dumps(packet: Union[C2SPacket, S2CPacket]) -> str:
    """Serialise either kind of packet to JSON text."""
    if isinstance(packet, _C2S_TYPES):
        return json.dumps(c2s_to_json(packet))
    return json.dumps(s2c_to_json(packet))


def loads_c2s(text: str) -> C2SPacket:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid JSON") from exc
    return c2s_from_json(data)


def loads_s2c(text: str) -> S2CPacket:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid JSON") from exc
    return s2c_from_json(data)