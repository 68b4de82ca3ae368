import json

import pytest

from turtle_remote.pos3 import Pos3
from turtle_remote.turtle import MoveDirection, Orientation, TurtleInventory
from turtle_remote.turtle_packets import (
    Batch,
    Blocks,
    Executables,
    FuelUpdate,
    GetExecutables,
    GetSetupInfo,
    InventoryUpdate,
    Moved,
    NameUpdate,
    Ping,
    RunLuaCode,
    SetMaxFuel,
    SetOrientation,
    SetPos,
    SetupInfo,
    SetupInfoData,
    StdIn,
    StdOut,
    WorldUpdate,
    dumps_s2t,
    loads_t2s,
    s2t_from_json,
    s2t_to_json,
    t2s_from_json,
    t2s_to_json,
)


def test_get_setup_info_wire():
    assert dumps_s2t(GetSetupInfo()) == '"GetSetupInfo"'


def test_ping_from_plain_string():
    assert loads_t2s('"Ping"') == Ping()


def test_moved_wire():
    assert t2s_to_json(Moved(MoveDirection.UP)) == {"Moved": {"direction": "Up"}}


def test_blocks_maybe_encoding():
    encoded = t2s_to_json(Blocks(up="minecraft:stone", down=None, front=None))
    assert encoded["Blocks"]["up"] == {"Some": "minecraft:stone"}
    assert encoded["Blocks"]["down"] == "None"


def test_batch_round_trip():
    packet = Batch(
        [
            SetupInfo(SetupInfoData(Orientation.WEST, Pos3(1, 2, 3), 5, "w")),
            SetMaxFuel(20000),
            SetPos(Pos3(4, 5, 6)),
            SetOrientation(Orientation.SOUTH),
            WorldUpdate("w2"),
            InventoryUpdate(TurtleInventory()),
            NameUpdate("bob"),
            FuelUpdate(10),
            Blocks(None, "a", "b"),
            Executables(["x"]),
            Ping(),
            StdOut("out"),
        ]
    )
    assert t2s_from_json(t2s_to_json(packet)) == packet


@pytest.mark.parametrize("packet", [RunLuaCode("print(1)"), GetSetupInfo(), GetExecutables(), StdIn("y")])
def test_s2t_round_trip(packet):
    assert s2t_from_json(json.loads(dumps_s2t(packet, pretty=False))) == packet
    assert s2t_from_json(s2t_to_json(packet)) == packet


def test_pretty_is_indented():
    assert "\n" in dumps_s2t(RunLuaCode("x"))
    assert "\n" not in dumps_s2t(RunLuaCode("x"), pretty=False)


def test_invalid_packets():
    with pytest.raises(ValueError):
        loads_t2s('{"Moved": {"direction": "Sideways"}}')
    with pytest.raises(ValueError):
        t2s_from_json({"Unknown": 1})
    with pytest.raises(ValueError):
        loads_t2s("garbage")