import pytest

from turtle_remote.extensions import Extension


def test_string_idents():
    assert Extension.POSITION_TRACKING.string_ident() == "trc_position_tracking"
    assert Extension.PATHFINDING.string_ident() == "trc_pathfinding"


@pytest.mark.parametrize("ext", list(Extension))
def test_round_trip(ext):
    assert Extension.from_json(ext.string_ident()) is ext


def test_unknown_extension():
    with pytest.raises(ValueError):
        Extension.from_json("trc_teleport")