"""Routes traffic between connected turtles, viewer clients and the database."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from typing import Any, Optional

from .client_map import ClientMap
from .client_packets import (
    MovedTurtle,
    MovedTurtleData,
    RequestTurtles,
    RequestWorld,
    RequestWorlds,
    SendLuaToTurtle,
    SetTurtles,
    SetTurtlesData,
    SetWorld,
    StdInForTurtle,
    TurtleFuelUpdate,
    TurtleInventoryUpdate,
    UpdateTurtleData,
    WorldUpdate,
    Worlds,
)
from .db import Database
from .server_client import ClientComms, ClientPacket, KillMe, ServerClient
from .server_turtle import (
    FuelChanged,
    InvUpdate,
    PacketFrom,
    RemoveMe,
    ServerTurtle,
    TurtleComm,
    TurtleMoved,
    UpdateBlock,
)
from .turtle import Turtle
from .turtle_map import TurtleMap
from .turtle_packets import Batch, RunLuaCode, SetupInfoData, T2SPacket
from .world_data import World

log = logging.getLogger(__name__)


class ConnectionManager:
    """Owns the connected turtles and clients and dispatches their messages."""

    def __init__(self, db: Database) -> None:
        self.db = db
        self.turtles = TurtleMap()
        self.clients = ClientMap()
        self.turtle_comms: asyncio.Queue[TurtleComm] = asyncio.Queue()
        self.client_comms: asyncio.Queue[tuple[int, ClientComms]] = asyncio.Queue()
        self._tasks: list[asyncio.Task] = []
        self._stopping = False

    async def turtles_for_world(self, world: str) -> list[Turtle]:
        """Stored turtles of a world, marked online when connected."""
        online = {t.index for t in self.turtles.common_turtles() if t.world == world}
        try:
            turtles = await self.db.turtles_in_world(world)
        except sqlite3.Error as exc:
            log.error("%s", exc)
            return []
        for turtle in turtles:
            turtle.is_online = turtle.index in online
        return turtles

    async def _broadcast_turtles(self, world: str) -> None:
        turtles = await self.turtles_for_world(world)
        await self.clients.broadcast(SetTurtles(SetTurtlesData(turtles, world)))

    def _turtle(self, instance_id: int) -> ServerTurtle:
        turtle = self.turtles.get(instance_id)
        if turtle is None:
            raise KeyError(f"no turtle with instance id {instance_id}")
        return turtle

    async def handle_client_comms(self, client_index: int, comms: ClientComms) -> None:
        """Act on a message from a viewer client."""
        if isinstance(comms, KillMe):
            log.info("removing client %s", client_index)
            await self.clients.remove(client_index)
            return
        if not isinstance(comms, ClientPacket):
            raise TypeError(f"not a client message: {comms!r}")
        match comms.packet:
            case RequestTurtles(world=world):
                await self._broadcast_turtles(world)
            case RequestWorld(name=name):
                world = World(name)
                for block in await self.db.blocks_in_world(name):
                    world.set_block(block)
                await self.clients.send_to(SetWorld(world), client_index)
            case RequestWorlds():
                try:
                    names = await self.db.world_names()
                except sqlite3.Error as exc:
                    log.error("%s", exc)
                    names = []
                await self.clients.send_to(Worlds(names), client_index)
            case SendLuaToTurtle(index=index, world=world, code=code):
                turtle = self.turtles.find(index, world)
                if turtle is not None:
                    await turtle.send_ws(RunLuaCode(code))
            case StdInForTurtle():
                raise ValueError("standard input for turtles is not supported")
            case other:
                raise TypeError(f"not a client packet: {other!r}")

    async def handle_turtle_comms(self, message: TurtleComm) -> None:
        """Act on a message from a connected turtle."""
        match message:
            case RemoveMe(instance_id=instance_id):
                log.info("removing turtle %s", instance_id)
                dropped = self.turtles.drop(instance_id)
                if dropped is not None:
                    dropped.stop()
                    await self._broadcast_turtles(dropped.turtle.world)
            case PacketFrom(instance_id=instance_id, packet=packet):
                turtle = self._turtle(instance_id)
                try:
                    await turtle.on_msg_received(packet)
                except Exception as exc:
                    log.error("Turtle packet error: %s", exc)
            case TurtleMoved(instance_id=instance_id):
                t = self._turtle(instance_id).turtle
                data = MovedTurtleData(t.index, t.world, t.orientation, t.position)
                await self.clients.broadcast(MovedTurtle(data))
            case UpdateBlock(block=block):
                try:
                    await self.db.upsert_block(block)
                except sqlite3.Error as exc:
                    log.error("storing block failed: %s", exc)
                await self.clients.broadcast(WorldUpdate(block))
            case InvUpdate(instance_id=instance_id):
                st = self.turtles.get(instance_id)
                if st is not None and st.turtle.inventory is not None:
                    t = st.turtle
                    update = UpdateTurtleData(t.index, t.world, t.inventory)
                    await self.clients.broadcast(TurtleInventoryUpdate(update))
            case FuelChanged(instance_id=instance_id):
                log.info("fuel %s", instance_id)
                st = self.turtles.get(instance_id)
                if st is not None:
                    t = st.turtle
                    await self.clients.broadcast(
                        TurtleFuelUpdate(UpdateTurtleData(t.index, t.world, t.fuel))
                    )
            case other:
                raise TypeError(f"not a turtle message: {other!r}")

    async def add_client(self, ws: Any) -> ServerClient:
        """Register a viewer connection and start reading from it."""
        client = ServerClient(ws, self.client_comms)
        client.start()
        self.clients.push(client)
        return client

    async def add_turtle(
        self, info: SetupInfoData, packets: list[T2SPacket], ws: Any
    ) -> Optional[ServerTurtle]:
        """Register a turtle that finished its handshake.

        The turtle is loaded from the database, or stored there as a new
        turtle when unknown. Returns None when the database cannot be read.
        """
        log.info("new turtle with index: %s", info.index)
        try:
            turtle = await self.db.find_turtle(info.index, info.world)
        except sqlite3.Error as exc:
            log.error("%s", exc)
            await ws.close()
            return None
        if turtle is None:
            turtle = Turtle.new_dummy(info.index, info.world, info.position, info.facing)
            try:
                await self.db.insert_turtle(turtle)
            except sqlite3.Error as exc:
                log.error("storing new turtle failed: %s", exc)

        server_turtle = ServerTurtle(turtle, ws, self.turtle_comms, self.db)
        server_turtle.start()
        await server_turtle.on_msg_received(Batch(list(packets)))
        self.turtles.push(server_turtle)
        await self._broadcast_turtles(server_turtle.turtle.world)
        return server_turtle

    async def _client_loop(self) -> None:
        while True:
            index, comms = await self.client_comms.get()
            try:
                await self.handle_client_comms(index, comms)
            except Exception:
                log.exception("handling client message failed")

    async def _turtle_loop(self) -> None:
        while True:
            message = await self.turtle_comms.get()
            try:
                await self.handle_turtle_comms(message)
            except Exception:
                log.exception("handling turtle message failed")

    async def run(self) -> None:
        """Dispatch queued client and turtle messages until stopped."""
        if self._tasks:
            raise RuntimeError("connection manager is already running")
        self._stopping = False
        self._tasks = [
            asyncio.create_task(self._client_loop()),
            asyncio.create_task(self._turtle_loop()),
        ]
        try:
            await asyncio.gather(*self._tasks)
        except asyncio.CancelledError:
            if not self._stopping:
                raise
        finally:
            for task in self._tasks:
                task.cancel()
            self._tasks = []

    def stop(self) -> None:
        """Stop dispatching messages."""
        self._stopping = True
        for task in self._tasks:
            task.cancel()