"""A connected viewer client as the server sees it."""

from __future__ import annotations

import asyncio
import json
import logging
import random
from dataclasses import dataclass
from typing import Any, Optional, Union

from .client_packets import C2SPacket, S2CPacket, loads_c2s, s2c_to_json

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KillMe:
    """The client's connection is gone and it should be removed."""


@dataclass(frozen=True)
class ClientPacket:
    """A packet received from the client."""

    packet: C2SPacket


ClientComms = Union[KillMe, ClientPacket]


def _random_index() -> int:
    return random.randint(-(2**31), 2**31 - 1)


class ServerClient:
    """Reads packets from a client connection and sends packets to it."""

    def __init__(
        self,
        ws: Any,
        comms: "asyncio.Queue[tuple[int, ClientComms]]",
        index: Optional[int] = None,
    ) -> None:
        self.ws = ws
        self.comms = comms
        self.index = _random_index() if index is None else index
        self.chunk_render_distance = 8
        self._reader: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start forwarding incoming packets to the comms queue."""
        if self._reader is None:
            self._reader = asyncio.create_task(self._read_loop())

    async def _read_loop(self) -> None:
        try:
            async for message in self.ws:
                if not isinstance(message, str):
                    continue
                try:
                    packet = loads_c2s(message)
                except (ValueError, TypeError):
                    continue
                await self.comms.put((self.index, ClientPacket(packet)))
        except Exception as exc:
            log.error("client ws error: %s", exc)
        await self.comms.put((self.index, KillMe()))

    async def send_msg(self, msg: S2CPacket) -> None:
        """Send a packet; on failure ask for this client to be removed."""
        text = json.dumps(s2c_to_json(msg))
        try:
            await self.ws.send(text)
        except Exception as exc:
            log.error("Error when sending to client: %s", exc)
            self.comms.put_nowait((self.index, KillMe()))

    async def delete(self) -> None:
        """Stop reading and close the connection."""
        if self._reader is not None and self._reader is not asyncio.current_task():
            self._reader.cancel()
        self._reader = None
        try:
            await self.ws.close()
        except Exception as exc:
            log.debug("closing client ws failed: %s", exc)