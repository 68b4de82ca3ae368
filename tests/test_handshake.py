import json
from collections import deque

import pytest

from turtle_remote.handshake import (
    InvalidSetup,
    handle_client_connection,
    handle_turtle_connection,
    read_setup,
)
from turtle_remote.pos3 import Pos3
from turtle_remote.turtle import Orientation
from turtle_remote.turtle_packets import (
    Batch,
    FuelUpdate,
    Ping,
    SetupInfo,
    SetupInfoData,
    t2s_to_json,
)


class FakeWS:
    def __init__(self, incoming, address=("127.0.0.1", 4000)):
        self.incoming = deque(incoming)
        self.sent = []
        self.closed = False
        self.remote_address = address

    async def send(self, text):
        self.sent.append(text)

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self._messages()

    async def _messages(self):
        while self.incoming:
            yield self.incoming.popleft()


class FakeManager:
    def __init__(self):
        self.turtles = []
        self.clients = []

    async def add_turtle(self, info, packets, ws):
        self.turtles.append((info, packets, ws))
        return "registered"

    async def add_client(self, ws):
        self.clients.append(ws)
        return "client"


def _info():
    return SetupInfoData(Orientation("North"), Pos3(1, 2, 3), 7, "overworld")


def _batch_text(*packets):
    return json.dumps(t2s_to_json(Batch(list(packets))))


@pytest.mark.asyncio
async def test_read_setup_requests_setup_info_first():
    ws = FakeWS([_batch_text(SetupInfo(_info()))])
    await read_setup(ws)
    assert json.loads(ws.sent[0]) == "GetSetupInfo"


@pytest.mark.asyncio
async def test_read_setup_returns_info_and_whole_batch():
    ws = FakeWS([_batch_text(SetupInfo(_info()), FuelUpdate(10))])
    info, packets = await read_setup(ws)
    assert info == _info()
    assert packets == [SetupInfo(_info()), FuelUpdate(10)]
    assert not ws.closed


@pytest.mark.asyncio
async def test_read_setup_skips_pings():
    ping = json.dumps(t2s_to_json(Ping()))
    ws = FakeWS([ping, ping, _batch_text(SetupInfo(_info()))])
    info, packets = await read_setup(ws)
    assert info.index == 7
    assert len(packets) == 1


@pytest.mark.asyncio
async def test_batch_without_setup_info_is_rejected():
    ws = FakeWS([_batch_text(FuelUpdate(3))])
    with pytest.raises(InvalidSetup):
        await read_setup(ws)
    assert ws.closed


@pytest.mark.asyncio
async def test_other_packet_is_rejected():
    ws = FakeWS([json.dumps(t2s_to_json(FuelUpdate(3)))])
    with pytest.raises(InvalidSetup):
        await read_setup(ws)
    assert ws.closed


@pytest.mark.asyncio
async def test_binary_message_is_rejected():
    ws = FakeWS([b"\x00\x01"])
    with pytest.raises(InvalidSetup):
        await read_setup(ws)
    assert ws.closed


@pytest.mark.asyncio
async def test_malformed_json_is_rejected():
    ws = FakeWS(["{not json"])
    with pytest.raises(InvalidSetup):
        await read_setup(ws)
    assert ws.closed


@pytest.mark.asyncio
async def test_connection_ending_before_setup_gives_none():
    ws = FakeWS([])
    assert await read_setup(ws) is None


@pytest.mark.asyncio
async def test_turtle_connection_registers_with_manager():
    ws = FakeWS([_batch_text(SetupInfo(_info()), FuelUpdate(4))])
    manager = FakeManager()
    result = await handle_turtle_connection(ws, manager)
    assert result == "registered"
    info, packets, registered_ws = manager.turtles[0]
    assert info == _info()
    assert packets[1] == FuelUpdate(4)
    assert registered_ws is ws


@pytest.mark.asyncio
async def test_failed_handshake_does_not_register():
    ws = FakeWS([json.dumps(t2s_to_json(FuelUpdate(3)))])
    manager = FakeManager()
    assert await handle_turtle_connection(ws, manager) is None
    assert manager.turtles == []


@pytest.mark.asyncio
async def test_blocked_address_is_dropped_without_handshake():
    ws = FakeWS([_batch_text(SetupInfo(_info()))], address=("35.177.97.185", 5000))
    manager = FakeManager()
    assert await handle_turtle_connection(ws, manager) is None
    assert ws.sent == []
    assert manager.turtles == []


@pytest.mark.asyncio
async def test_client_connection_registers_with_manager():
    ws = FakeWS([])
    manager = FakeManager()
    assert await handle_client_connection(ws, manager) == "client"
    assert manager.clients == [ws]