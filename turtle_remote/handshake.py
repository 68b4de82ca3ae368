"""Accepting new turtle and viewer connections."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .turtle_packets import (
    Batch,
    GetSetupInfo,
    Ping,
    SetupInfo,
    SetupInfoData,
    T2SPacket,
    dumps_s2t,
    loads_t2s,
)

log = logging.getLogger(__name__)

BLOCKED_ADDRESSES = frozenset({"35.177.97.185"})


class InvalidSetup(Exception):
    """A turtle did not answer the setup request with a valid setup batch."""


def _is_blocked(address: Any) -> bool:
    if address is None:
        return False
    host = address[0] if isinstance(address, tuple) and address else address
    return str(host) in BLOCKED_ADDRESSES


async def _reject(ws: Any, reason: str) -> None:
    log.info("invalid Setup Packet!")
    await ws.close()
    raise InvalidSetup(reason)


async def read_setup(ws: Any) -> Optional[tuple[SetupInfoData, list[T2SPacket]]]:
    """Ask a turtle for its setup info and wait for the setup batch.

    Returns the setup info and every packet of the batch, or None when the
    connection ends first. Raises InvalidSetup, after closing the connection,
    when the turtle sends anything but pings before its setup batch.
    """
    await ws.send(dumps_s2t(GetSetupInfo(), pretty=True))
    async for message in ws:
        if not isinstance(message, str):
            await _reject(ws, "setup message is not text")
        log.info("%s", message)
        try:
            packet = loads_t2s(message)
        except (ValueError, TypeError) as exc:
            await ws.close()
            raise InvalidSetup("malformed setup packet") from exc
        match packet:
            case Ping():
                continue
            case Batch(packets=[SetupInfo(data=info), *_]):
                return info, list(packet.packets)
            case _:
                await _reject(ws, f"unexpected setup packet: {type(packet).__name__}")
    return None


async def handle_turtle_connection(ws: Any, manager: Any) -> Any:
    """Run the setup handshake and register the turtle with the manager.

    Returns what the manager returned, or None when the connection was
    refused or the handshake did not complete.
    """
    address = getattr(ws, "remote_address", None)
    if _is_blocked(address):
        return None
    log.info("Incoming turtle connection from: %s", address)
    try:
        setup = await read_setup(ws)
    except InvalidSetup as exc:
        log.info("turtle handshake failed: %s", exc)
        return None
    if setup is None:
        return None
    info, packets = setup
    return await manager.add_turtle(info, packets, ws)


async def handle_client_connection(ws: Any, manager: Any) -> Any:
    """Register a viewer connection with the manager."""
    log.info("Incoming client connection from: %s", getattr(ws, "remote_address", None))
    return await manager.add_client(ws)