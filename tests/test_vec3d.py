import pytest

from turtle_remote.pos3 import Pos3
from turtle_remote.vec3d import Vec3D


def test_insert_get_and_overwrite():
    v = Vec3D()
    v[Pos3(1, 2, 3)] = "a"
    v[Pos3(1, 2, 3)] = "b"
    assert v[Pos3(1, 2, 3)] == "b"
    assert v.get(Pos3(0, 0, 0)) is None
    assert len(v) == 1


def test_setdefault_acts_as_entry():
    v = Vec3D()
    first = v.setdefault(Pos3(0, 1, 0), [])
    first.append(1)
    assert v.setdefault(Pos3(0, 1, 0), []) == [1]


def test_to_json_pairs():
    v = Vec3D({Pos3(4, 5, 6): 9})
    assert v.to_json(lambda x: x) == [[{"x": 4, "y": 5, "z": 6}, 9]]


def test_json_round_trip():
    v = Vec3D({Pos3(1, 0, 0): "stone", Pos3(-3, 7, 2): "dirt"})
    back = Vec3D.from_json(v.to_json(str), str)
    assert dict(back) == dict(v)


def test_from_json_later_pair_wins():
    pos = {"x": 0, "y": 0, "z": 0}
    back = Vec3D.from_json([[pos, 1], [pos, 2]], int)
    assert back[Pos3.zero()] == 2


@pytest.mark.parametrize("data", [{}, [[{"x": 0, "y": 0, "z": 0}]], [1]])
def test_from_json_rejects_bad(data):
    with pytest.raises(ValueError):
        Vec3D.from_json(data, int)


def test_keys_must_be_pos3():
    with pytest.raises(TypeError):
        Vec3D()[(1, 2, 3)] = 1


def test_copy_is_independent():
    v = Vec3D({Pos3(1, 1, 1): 1})
    c = v.copy()
    c[Pos3(2, 2, 2)] = 2
    assert len(v) == 1
    assert len(c) == 2