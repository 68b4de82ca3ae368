"""Integer positions in block space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class Pos3:
    """A position or offset with integer coordinates."""

    x: int = 0
    y: int = 0
    z: int = 0

    ZERO: ClassVar[Pos3]

    @classmethod
    def zero(cls) -> Pos3:
        """Return the origin."""
        return cls(0, 0, 0)

    def multiply(self, vector: Pos3) -> Pos3:
        """Multiply component-wise with another position."""
        return Pos3(self.x * vector.x, self.y * vector.y, self.z * vector.z)

    def scale(self, scaler: int) -> Pos3:
        """Multiply every component by a scalar."""
        return Pos3(self.x * scaler, self.y * scaler, self.z * scaler)

    def __add__(self, other: object) -> Pos3:
        if not isinstance(other, Pos3):
            return NotImplemented
        return Pos3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: object) -> Pos3:
        if not isinstance(other, Pos3):
            return NotImplemented
        return Pos3(self.x - other.x, self.y - other.y, self.z - other.z)

    def to_json(self) -> dict[str, int]:
        """Return the wire representation."""
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_json(cls, data: Any) -> Pos3:
        """Build a position from its wire representation."""
        try:
            values = (data["x"], data["y"], data["z"])
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid position: {data!r}") from exc
        for value in values:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"invalid coordinate: {value!r}")
            if not _I32_MIN <= value <= _I32_MAX:
                raise ValueError(f"coordinate out of range: {value!r}")
        return cls(*values)


Pos3.ZERO = Pos3(0, 0, 0)