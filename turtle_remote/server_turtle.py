"""A connected turtle as the server sees it."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Optional, Union

from .db import Database, pos_to_db_pos
from .pos3 import Pos3
from .turtle import MoveDirection, TurnDir, Turtle
from .turtle_packets import (
    Batch,
    Blocks,
    Executables,
    FuelUpdate,
    InventoryUpdate,
    Moved,
    NameUpdate,
    Ping,
    S2TPacket,
    SetMaxFuel,
    SetOrientation,
    SetPos,
    SetupInfo,
    StdOut,
    T2SPacket,
    WorldUpdate,
    dumps_s2t,
    loads_t2s,
)
from .world_data import Block

log = logging.getLogger(__name__)

_UP = Pos3(0, 1, 0)
_DOWN = Pos3(0, -1, 0)


@dataclass(frozen=True)
class PacketFrom:
    """A packet to be handled by the turtle with this instance id."""

    instance_id: int
    packet: Any


@dataclass(frozen=True)
class TurtleMoved:
    instance_id: int


@dataclass(frozen=True)
class RemoveMe:
    instance_id: int


@dataclass(frozen=True)
class InvUpdate:
    instance_id: int


@dataclass(frozen=True)
class FuelChanged:
    instance_id: int


@dataclass(frozen=True)
class UpdateBlock:
    block: Block


TurtleComm = Union[PacketFrom, TurtleMoved, RemoveMe, InvUpdate, FuelChanged, UpdateBlock]


def _random_id() -> int:
    return random.randint(-(2**31), 2**31 - 1)


class ServerTurtle:
    """Tracks one turtle's state and reports changes on the comm bus."""

    def __init__(
        self,
        turtle: Turtle,
        ws: Any,
        comm_bus: "asyncio.Queue[TurtleComm]",
        db: Database,
        instance_id: Optional[int] = None,
    ) -> None:
        self.turtle = turtle
        self.ws = ws
        self.comm_bus = comm_bus
        self.db = db
        self.instance_id = _random_id() if instance_id is None else instance_id
        self._reader: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start forwarding the turtle's packets to the comm bus."""
        if self._reader is None:
            self._reader = asyncio.create_task(self._read_loop())

    def stop(self) -> None:
        """Stop reading from the turtle."""
        if self._reader is not None:
            self._reader.cancel()
            self._reader = None

    async def _read_loop(self) -> None:
        try:
            async for message in self.ws:
                if not isinstance(message, str) or message == "Ping":
                    continue
                try:
                    packet = loads_t2s(message)
                except (ValueError, TypeError):
                    continue
                await self.comm_bus.put(PacketFrom(self.instance_id, packet))
        except Exception as exc:
            log.error("Turtle ws error: %s", exc)
        await self.comm_bus.put(RemoveMe(self.instance_id))

    async def _repacket(self, packet: T2SPacket) -> None:
        await self.comm_bus.put(PacketFrom(self.instance_id, packet))

    async def _store(self, column: str, value: Any) -> None:
        await self.db.update_turtle(self.turtle.index, self.turtle.world, column, value)

    async def on_msg_received(self, msg: T2SPacket) -> None:
        """Apply a packet from the turtle and report its effects."""
        turtle = self.turtle
        match msg:
            case Ping() | SetupInfo():
                pass
            case Batch(packets=packets):
                for packet in packets:
                    await self._repacket(packet)
            case SetPos(pos=pos):
                turtle.position = pos
                await self._store("position", pos_to_db_pos(pos))
            case SetMaxFuel(max_fuel=max_fuel):
                turtle.max_fuel = max_fuel
                await self._store("max_fuel", max_fuel)
            case SetOrientation(orientation=orientation):
                turtle.orientation = orientation
                await self._store("orientation", str(orientation))
            case InventoryUpdate(inventory=inventory):
                turtle.inventory = inventory
                await self.comm_bus.put(InvUpdate(self.instance_id))
            case WorldUpdate(world=world):
                await self._store("world", world)
                turtle.world = world
            case NameUpdate(name=name):
                turtle.name = name
                await self._store("name", name)
            case FuelUpdate(fuel=fuel):
                log.info("turtle fuel %s", fuel)
                turtle.fuel = fuel
                await self._store("fuel", fuel)
                await self.comm_bus.put(FuelChanged(self.instance_id))
            case Moved(direction=direction):
                await self._moved(direction)
            case Blocks(up=up, down=down, front=front):
                neighbours = (
                    (up, turtle.position + _UP),
                    (front, turtle.position + turtle.forward_vec()),
                    (down, turtle.position + _DOWN),
                )
                for ident, pos in neighbours:
                    await self.comm_bus.put(UpdateBlock(Block.create(ident, pos, turtle.world)))
            case Executables() | StdOut():
                raise ValueError(f"unsupported turtle packet: {type(msg).__name__}")
            case _:
                raise TypeError(f"not a turtle packet: {msg!r}")

    async def _moved(self, direction: MoveDirection) -> None:
        turtle = self.turtle
        pos, orientation = turtle.position, turtle.orientation
        match direction:
            case MoveDirection.FORWARD:
                pos = pos + turtle.forward_vec()
            case MoveDirection.BACK:
                pos = pos - turtle.forward_vec()
            case MoveDirection.UP:
                pos = pos + _UP
            case MoveDirection.DOWN:
                pos = pos + _DOWN
            case MoveDirection.LEFT:
                orientation = turtle.turn(TurnDir.LEFT)
            case MoveDirection.RIGHT:
                orientation = turtle.turn(TurnDir.RIGHT)
        await self.comm_bus.put(UpdateBlock(Block.create(None, pos, turtle.world)))
        await self._repacket(SetPos(pos))
        await self._repacket(SetOrientation(orientation))
        await self.comm_bus.put(TurtleMoved(self.instance_id))

    async def send_ws(self, packet: S2TPacket) -> None:
        """Send a packet to the turtle as indented JSON."""
        await self.ws.send(dumps_s2t(packet, pretty=True))