"""A mapping keyed by block positions."""

from __future__ import annotations

from collections import UserDict
from typing import Any, Callable, Generic, Iterable, Mapping, Optional, TypeVar, Union

from .pos3 import Pos3

T = TypeVar("T")


class Vec3D(UserDict, Generic[T]):
    """Sparse three-dimensional storage keyed by Pos3."""

    def __init__(
        self, items: Optional[Union[Mapping[Pos3, T], Iterable[tuple[Pos3, T]]]] = None
    ) -> None:
        super().__init__()
        if items is not None:
            self.update(items)

    def __setitem__(self, pos: Pos3, value: T) -> None:
        if not isinstance(pos, Pos3):
            raise TypeError(f"keys must be Pos3, not {type(pos).__name__}")
        self.data[pos] = value

    def __repr__(self) -> str:
        return f"Vec3D({self.data!r})"

    def copy(self) -> Vec3D[T]:
        return Vec3D(self.data)

    def to_json(self, encode: Callable[[T], Any]) -> list[list[Any]]:
        """Encode as a list of [position, value] pairs."""
        return [[pos.to_json(), encode(value)] for pos, value in self.data.items()]

    @classmethod
    def from_json(cls, data: Any, decode: Callable[[Any], T]) -> Vec3D[T]:
        """Decode a list of [position, value] pairs; later pairs win."""
        if not isinstance(data, list):
            raise ValueError("expected a list of [position, value] pairs")
        result: Vec3D[T] = cls()
        for entry in data:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ValueError(f"invalid entry: {entry!r}")
            pos_data, value = entry
            result[Pos3.from_json(pos_data)] = decode(value)
        return result