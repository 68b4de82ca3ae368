import math

import pytest

from turtle_remote.geometry import pos3_to_vec3, quat_from_dir, quat_lerp, vec3_to_pos3, vec_lerp
from turtle_remote.pos3 import Pos3


def test_pos_vec_round_trip():
    p = Pos3(1, -2, 3)
    assert pos3_to_vec3(p) == (1.0, -2.0, 3.0)
    assert vec3_to_pos3(pos3_to_vec3(p)) == p


def test_vec3_to_pos3_truncates():
    assert vec3_to_pos3((1.7, -2.7, 0.2)) == Pos3(1, -2, 0)


def test_looking_north_is_identity():
    q = quat_from_dir((0.0, 0.0, -1.0), (0.0, 1.0, 0.0))
    assert q == pytest.approx((0.0, 0.0, 0.0, 1.0))


@pytest.mark.parametrize("d", [(1, 0, 0), (-1, 0, 0), (0, 0, 1), (0, 0, -1), (1, 0, 1)])
def test_quat_is_unit(d):
    q = quat_from_dir(d, (0.0, 1.0, 0.0))
    assert math.sqrt(sum(c * c for c in q)) == pytest.approx(1.0)


def test_zero_direction_rejected():
    with pytest.raises(ValueError):
        quat_from_dir((0, 0, 0), (0, 1, 0))


def test_quat_lerp_endpoints():
    a = quat_from_dir((1, 0, 0), (0, 1, 0))
    b = quat_from_dir((0, 0, 1), (0, 1, 0))
    assert quat_lerp(a, b, 0.0) == pytest.approx(a)
    assert quat_lerp(a, b, 1.0) == pytest.approx(b)


def test_vec_lerp_endpoints():
    assert vec_lerp((0, 0, 0), (2, 4, 6), 0.0) == (0, 0, 0)
    assert vec_lerp((0, 0, 0), (2, 4, 6), 1.0) == (2, 4, 6)