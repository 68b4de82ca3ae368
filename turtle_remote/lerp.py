"""Smooth movement and rotation of rendered objects over time."""

from __future__ import annotations

from .geometry import Quat, Vec3, quat_lerp, vec_lerp


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


class LerpTransform:
    """Interpolates a position and a rotation towards targets."""

    def __init__(self, pos: Vec3, rot: Quat) -> None:
        self.pos_time = 1.0
        self.start_pos = pos
        self.end_pos = pos
        self.current_pos_time = 1.0
        self.start_rot = rot
        self.end_rot = rot
        self.current_rot_time = 1.0
        self.rot_time = 1.0

    def lerp_pos_to(self, end_pos: Vec3, time: float) -> LerpTransform:
        """Start moving from the previous target to end_pos over time seconds."""
        self.start_pos = self.end_pos
        self.end_pos = end_pos
        self.current_pos_time = 0.0
        self.pos_time = time
        return self

    def lerp_rot_to(self, end_rot: Quat, time: float) -> LerpTransform:
        """Start rotating from the previous target to end_rot over time seconds."""
        self.start_rot = self.end_rot
        self.end_rot = end_rot
        self.current_rot_time = 0.0
        self.rot_time = time
        return self

    def advance(self, delta: float) -> tuple[Vec3, Quat]:
        """Step by delta seconds and return the current translation and rotation."""
        self.current_pos_time = _clamp01(self.current_pos_time + delta / self.pos_time)
        self.current_rot_time = _clamp01(self.current_rot_time + delta / self.rot_time)
        translation = vec_lerp(self.start_pos, self.end_pos, self.current_pos_time)
        rotation = quat_lerp(self.start_rot, self.end_rot, self.current_rot_time)
        return translation, rotation