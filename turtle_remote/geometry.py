"""Small vector and quaternion helpers; quaternions are (x, y, z, w)."""

from __future__ import annotations

import math

from .pos3 import Pos3

Vec3 = tuple[float, float, float]
Quat = tuple[float, float, float, float]

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1], a[2] * b[0] - a[0] * b[2], a[0] * b[1] - a[1] * b[0])


def _normalize(v: tuple[float, ...]) -> tuple[float, ...]:
    length = math.sqrt(sum(c * c for c in v))
    if length == 0:
        raise ValueError("cannot normalise a zero vector")
    return tuple(c / length for c in v)


def quat_from_dir(direction: Vec3, up: Vec3) -> Quat:
    """Rotation that looks along direction with the given up vector."""
    fx, fy, fz = forward = tuple(-c for c in _normalize(direction))
    rx, ry, rz = right = _normalize(_cross(up, forward))
    ux, uy, uz = _cross(forward, right)
    m00, m01, m02 = rx, ry, rz
    m10, m11, m12 = ux, uy, uz
    m20, m21, m22 = fx, fy, fz
    if m22 <= 0:
        dif10 = m11 - m00
        omm22 = 1 - m22
        if dif10 <= 0:
            s = omm22 - dif10
            inv = 0.5 / math.sqrt(s)
            return (s * inv, (m01 + m10) * inv, (m02 + m20) * inv, (m12 - m21) * inv)
        s = omm22 + dif10
        inv = 0.5 / math.sqrt(s)
        return ((m01 + m10) * inv, s * inv, (m12 + m21) * inv, (m20 - m02) * inv)
    sum10 = m11 + m00
    opm22 = 1 + m22
    if sum10 <= 0:
        s = opm22 - sum10
        inv = 0.5 / math.sqrt(s)
        return ((m02 + m20) * inv, (m12 + m21) * inv, s * inv, (m01 - m10) * inv)
    s = opm22 + sum10
    inv = 0.5 / math.sqrt(s)
    return ((m12 - m21) * inv, (m20 - m02) * inv, (m01 - m10) * inv, s * inv)


def quat_lerp(start: Quat, end: Quat, t: float) -> Quat:
    """Normalised linear interpolation along the shorter arc."""
    dot = sum(a * b for a, b in zip(start, end))
    bias = 1.0 if dot >= 0 else -1.0
    mixed = tuple(a + (b * bias - a) * t for a, b in zip(start, end))
    return _normalize(mixed)  # type: ignore[return-value]


def vec_lerp(start: Vec3, end: Vec3, t: float) -> Vec3:
    return tuple(a + (b - a) * t for a, b in zip(start, end))  # type: ignore[return-value]


def pos3_to_vec3(pos: Pos3) -> Vec3:
    return (float(pos.x), float(pos.y), float(pos.z))


def _to_i32(value: float) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _I32_MAX if value > 0 else _I32_MIN
    return max(_I32_MIN, min(_I32_MAX, int(value)))


def vec3_to_pos3(vec: Vec3) -> Pos3:
    """Truncate each component towards zero."""
    return Pos3(*(_to_i32(c) for c in vec))