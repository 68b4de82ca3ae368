"""Packets exchanged between the server and turtles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .pos3 import Pos3
from .turtle import MoveDirection, Orientation, TurtleInventory, maybe_from_json, maybe_to_json


def _tagged(data: Any) -> tuple[str, Any]:
    if isinstance(data, str):
        return data, None
    if isinstance(data, dict) and len(data) == 1:
        return next(iter(data.items()))
    raise ValueError(f"invalid packet: {data!r}")


def _expect(value: Any, kind: type) -> Any:
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"expected {kind.__name__}, got {value!r}")
    return value


def _get(data: Any, key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc


def _str_or_none(value: Any) -> str:
    return _expect(value, str)


@dataclass
class SetupInfoData:
    facing: Orientation
    position: Pos3
    index: int
    world: str

    def to_json(self) -> dict[str, Any]:
        return {
            "facing": self.facing.value,
            "position": self.position.to_json(),
            "index": self.index,
            "world": self.world,
        }

    @classmethod
    def from_json(cls, data: Any) -> SetupInfoData:
        try:
            facing = Orientation(_get(data, "facing"))
        except (ValueError, TypeError) as exc:
            raise ValueError("invalid facing") from exc
        return cls(
            facing=facing,
            position=Pos3.from_json(_get(data, "position")),
            index=_expect(_get(data, "index"), int),
            world=_expect(_get(data, "world"), str),
        )


@dataclass
class Batch:
    packets: list = field(default_factory=list)


@dataclass
class SetupInfo:
    data: SetupInfoData


@dataclass(frozen=True)
class Moved:
    direction: MoveDirection


@dataclass(frozen=True)
class SetMaxFuel:
    max_fuel: int


@dataclass(frozen=True)
class SetPos:
    pos: Pos3


@dataclass(frozen=True)
class SetOrientation:
    orientation: Orientation


@dataclass(frozen=True)
class WorldUpdate:
    world: str


@dataclass
class InventoryUpdate:
    inventory: TurtleInventory


@dataclass(frozen=True)
class NameUpdate:
    name: str


@dataclass(frozen=True)
class FuelUpdate:
    fuel: int


@dataclass(frozen=True)
class Blocks:
    up: Optional[str]
    down: Optional[str]
    front: Optional[str]


@dataclass
class Executables:
    names: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Ping:
    pass


@dataclass(frozen=True)
class StdOut:
    text: str


T2SPacket = Union[
    Batch, SetupInfo, Moved, SetMaxFuel, SetPos, SetOrientation, WorldUpdate,
    InventoryUpdate, NameUpdate, FuelUpdate, Blocks, Executables, Ping, StdOut,
]


@dataclass(frozen=True)
class RunLuaCode:
    code: str


@dataclass(frozen=True)
class GetSetupInfo:
    pass


@dataclass(frozen=True)
class GetExecutables:
    pass


@dataclass(frozen=True)
class StdIn:
    value: str


S2TPacket = Union[RunLuaCode, GetSetupInfo, GetExecutables, StdIn]


def t2s_to_json(packet: T2SPacket) -> Any:
    """Encode a turtle-to-server packet."""
    match packet:
        case Batch(packets=packets):
            return {"Batch": [t2s_to_json(p) for p in packets]}
        case SetupInfo(data=data):
            return {"SetupInfo": data.to_json()}
        case Moved(direction=direction):
            return {"Moved": {"direction": direction.value}}
        case SetMaxFuel(max_fuel=value):
            return {"SetMaxFuel": value}
        case SetPos(pos=pos):
            return {"SetPos": pos.to_json()}
        case SetOrientation(orientation=orientation):
            return {"SetOrientation": orientation.value}
        case WorldUpdate(world=world):
            return {"WorldUpdate": world}
        case InventoryUpdate(inventory=inventory):
            return {"InventoryUpdate": inventory.to_json()}
        case NameUpdate(name=name):
            return {"NameUpdate": name}
        case FuelUpdate(fuel=fuel):
            return {"FuelUpdate": fuel}
        case Blocks(up=up, down=down, front=front):
            return {"Blocks": {"up": maybe_to_json(up), "down": maybe_to_json(down), "front": maybe_to_json(front)}}
        case Executables(names=names):
            return {"Executables": list(names)}
        case Ping():
            return "Ping"
        case StdOut(text=text):
            return {"StdOut": text}
    raise TypeError(f"not a turtle packet: {packet!r}")


def t2s_from_json(data: Any) -> T2SPacket:
    """Decode a turtle-to-server packet."""
    tag, body = _tagged(data)
    if tag == "Ping":
        return Ping()
    if tag == "Batch":
        return Batch([t2s_from_json(p) for p in _expect(body, list)])
    if tag == "SetupInfo":
        return SetupInfo(SetupInfoData.from_json(body))
    if tag == "Moved":
        try:
            return Moved(MoveDirection(_get(body, "direction")))
        except (ValueError, TypeError) as exc:
            raise ValueError("invalid direction") from exc
    if tag == "SetMaxFuel":
        return SetMaxFuel(_expect(body, int))
    if tag == "SetPos":
        return SetPos(Pos3.from_json(body))
    if tag == "SetOrientation":
        try:
            return SetOrientation(Orientation(body))
        except (ValueError, TypeError) as exc:
            raise ValueError("invalid orientation") from exc
    if tag == "WorldUpdate":
        return WorldUpdate(_expect(body, str))
    if tag == "InventoryUpdate":
        return InventoryUpdate(TurtleInventory.from_json(body))
    if tag == "NameUpdate":
        return NameUpdate(_expect(body, str))
    if tag == "FuelUpdate":
        return FuelUpdate(_expect(body, int))
    if tag == "Blocks":
        return Blocks(
            up=maybe_from_json(_get(body, "up"), _str_or_none),
            down=maybe_from_json(_get(body, "down"), _str_or_none),
            front=maybe_from_json(_get(body, "front"), _str_or_none),
        )
    if tag == "Executables":
        return Executables([_expect(n, str) for n in _expect(body, list)])
    if tag == "StdOut":
        return StdOut(_expect(body, str))
    raise ValueError(f"unknown turtle packet: {tag!r}")


def s2t_to_json(packet: S2TPacket) -> Any:
    """Encode a server-to-turtle packet."""
    match packet:
        case RunLuaCode(code=code):
            return {"RunLuaCode": code}
        case GetSetupInfo():
            return "GetSetupInfo"
        case GetExecutables():
            return "GetExecutables"
        case StdIn(value=value):
            return {"StdIn": value}
    raise TypeError(f"not a server-to-turtle packet: {packet!r}")


def s2t_from_json(data: Any) -> S2TPacket:
    """Decode a server-to-turtle packet."""
    tag, body = _tagged(data)
    if tag == "GetSetupInfo":
        return GetSetupInfo()
    if tag == "GetExecutables":
        return GetExecutables()
    if tag == "RunLuaCode":
        return RunLuaCode(_expect(body, str))
    if tag == "StdIn":
        return StdIn(_expect(body, str))
    raise ValueError(f"unknown server-to-turtle packet: {tag!r}")


def loads_t2s(text: str) -> T2SPacket:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid JSON") from exc
    return t2s_from_json(data)


def dumps_s2t(packet: S2TPacket, pretty: bool = True) -> str:
    """Serialise a packet for a turtle, indented by default."""
    return json.dumps(s2t_to_json(packet), indent=2 if pretty else None)