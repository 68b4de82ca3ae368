import pytest

from turtle_remote.pos3 import Pos3


def test_zero_is_origin():
    assert Pos3.zero() == Pos3(0, 0, 0)
    assert Pos3.ZERO == Pos3.zero()
    assert Pos3() == Pos3.ZERO


def test_add_then_sub_round_trip():
    a = Pos3(3, -7, 11)
    b = Pos3(-2, 5, 9)
    assert a + b - b == a
    assert (a + b) == (b + a)


def test_scale_matches_repeated_addition():
    a = Pos3(4, -1, 6)
    assert a.scale(2) == a + a
    assert a.scale(-1) + a == Pos3.zero()
    assert a.scale(0) == Pos3.zero()


def test_multiply_identity_and_commutative():
    a = Pos3(4, -1, 6)
    b = Pos3(2, 3, -5)
    assert a.multiply(Pos3(1, 1, 1)) == a
    assert a.multiply(b) == b.multiply(a)
    assert a.multiply(Pos3.zero()) == Pos3.zero()


def test_json_round_trip():
    a = Pos3(-12, 64, 300)
    data = a.to_json()
    assert data == {"x": a.x, "y": a.y, "z": a.z}
    assert Pos3.from_json(data) == a


@pytest.mark.parametrize(
    "data",
    [{"x": 1, "y": 2}, {"x": 1, "y": "2", "z": 3}, {"x": True, "y": 0, "z": 0}, [1, 2, 3], None],
)
def test_from_json_rejects_bad_data(data):
    with pytest.raises(ValueError):
        Pos3.from_json(data)


def test_from_json_rejects_out_of_range():
    with pytest.raises(ValueError):
        Pos3.from_json({"x": 2**31, "y": 0, "z": 0})


def test_hashable_and_frozen():
    positions = {Pos3(1, 2, 3), Pos3(1, 2, 3), Pos3(3, 2, 1)}
    assert len(positions) == 2
    with pytest.raises(AttributeError):
        Pos3(1, 2, 3).x = 5  # type: ignore[misc]


def test_add_other_type_fails():
    with pytest.raises(TypeError):
        Pos3(1, 2, 3) + (1, 2, 3)  # type: ignore[operator]