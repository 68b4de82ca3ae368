"""Connected viewer clients keyed by their index."""

from __future__ import annotations

from typing import Iterator

from .client_packets import S2CPacket
from .server_client import ServerClient


class ClientMap:
    """The viewer clients currently connected to the server."""

    def __init__(self) -> None:
        self._clients: dict[int, ServerClient] = {}

    def push(self, client: ServerClient) -> ClientMap:
        self._clients[client.index] = client
        return self

    async def broadcast(self, msg: S2CPacket) -> None:
        """Send a packet to every client."""
        for client in list(self._clients.values()):
            await client.send_msg(msg)

    async def send_to(self, msg: S2CPacket, client_id: int) -> bool:
        """Send a packet to one client; False if there is no such client."""
        client = self._clients.get(client_id)
        if client is None:
            return False
        await client.send_msg(msg)
        return True

    async def remove(self, client_id: int) -> None:
        """Forget a client and close its connection."""
        client = self._clients.pop(client_id, None)
        if client is not None:
            await client.delete()

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, client_id: object) -> bool:
        return client_id in self._clients

    def __iter__(self) -> Iterator[ServerClient]:
        return iter(list(self._clients.values()))