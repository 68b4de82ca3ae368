"""Turtle state: orientation, inventory and identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Optional, TypeVar

from .pos3 import Pos3

T = TypeVar("T")

INVENTORY_SLOTS = 16


def maybe_to_json(value: Optional[T], encode: Optional[Callable[[T], Any]] = None) -> Any:
    """Encode an optional value in the tagged Some/None form."""
    if value is None:
        return "None"
    return {"Some": encode(value) if encode is not None else value}


def maybe_from_json(data: Any, decode: Optional[Callable[[Any], T]] = None) -> Optional[T]:
    """Decode an optional value from the tagged Some/None form."""
    if isinstance(data, str) and data == "None":
        return None
    if isinstance(data, dict) and set(data) == {"Some"}:
        inner = data["Some"]
        return decode(inner) if decode is not None else inner
    raise ValueError(f"invalid optional value: {data!r}")


def _int_field(data: Any, key: str) -> int:
    try:
        value = data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"field {key!r} must be an integer")
    return value


def _str_field(data: Any, key: str) -> str:
    try:
        value = data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _bool_field(data: Any, key: str) -> bool:
    try:
        value = data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _field(data: Any, key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"missing field {key!r}") from exc


@dataclass
class Item:
    """A stack of items in one slot."""

    count: int
    name: str

    def to_json(self) -> dict[str, Any]:
        return {"count": self.count, "name": self.name}

    @classmethod
    def from_json(cls, data: Any) -> Item:
        count = _int_field(data, "count")
        if count < 0:
            raise ValueError("item count must not be negative")
        return cls(count=count, name=_str_field(data, "name"))


def _items_to_json(items: list[Optional[Item]]) -> list[Any]:
    return [maybe_to_json(item, Item.to_json) for item in items]


def _items_from_json(data: Any) -> list[Optional[Item]]:
    if not isinstance(data, list):
        raise ValueError("inventory must be a list")
    return [maybe_from_json(entry, Item.from_json) for entry in data]


@dataclass
class Inventory:
    """An inventory of any size, such as a chest."""

    inv: list[Optional[Item]] = field(default_factory=list)

    def __iter__(self) -> Iterator[tuple[int, Optional[Item]]]:
        """Yield (slot index, item) pairs."""
        return iter(enumerate(self.inv))

    def __len__(self) -> int:
        return len(self.inv)

    def __getitem__(self, index: int) -> Optional[Item]:
        return self.inv[index]

    def to_json(self) -> dict[str, Any]:
        return {"inv": _items_to_json(self.inv)}

    @classmethod
    def from_json(cls, data: Any) -> Inventory:
        return cls(inv=_items_from_json(_field(data, "inv")))


@dataclass
class TurtleInventory:
    """A turtle's sixteen-slot inventory with its selected slot."""

    selected_slot: int = 1
    inv: list[Optional[Item]] = field(
        default_factory=lambda: [None] * INVENTORY_SLOTS
    )

    def __post_init__(self) -> None:
        if len(self.inv) != INVENTORY_SLOTS:
            raise ValueError(f"a turtle inventory has exactly {INVENTORY_SLOTS} slots")

    def __iter__(self) -> Iterator[tuple[int, Optional[Item]]]:
        """Yield (slot index, item) pairs."""
        return iter(enumerate(self.inv))

    def __len__(self) -> int:
        return len(self.inv)

    def __getitem__(self, index: int) -> Optional[Item]:
        return self.inv[index]

    def __setitem__(self, index: int, item: Optional[Item]) -> None:
        self.inv[index] = item

    def to_json(self) -> dict[str, Any]:
        return {"selected_slot": self.selected_slot, "inv": _items_to_json(self.inv)}

    @classmethod
    def from_json(cls, data: Any) -> TurtleInventory:
        slot = _int_field(data, "selected_slot")
        if not 0 <= slot <= 255:
            raise ValueError("selected slot out of range")
        return cls(selected_slot=slot, inv=_items_from_json(_field(data, "inv")))


class TurnDir(Enum):
    LEFT = "Left"
    RIGHT = "Right"


class MoveDirection(Enum):
    FORWARD = "Forward"
    BACK = "Back"
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"


class Orientation(Enum):
    """Compass direction a turtle faces."""

    NORTH = "North"  # towards -Z
    EAST = "East"  # towards +X
    SOUTH = "South"  # towards +Z
    WEST = "West"  # towards -X

    def forward_vec(self) -> Pos3:
        """Unit offset of one step forward."""
        return _FORWARD[self]

    @classmethod
    def parse(cls, text: str) -> Orientation:
        """Parse an orientation from its name."""
        try:
            return cls(text)
        except ValueError:
            raise ValueError("Invalid String") from None

    def __str__(self) -> str:
        return self.value


_FORWARD = {
    Orientation.NORTH: Pos3(0, 0, -1),
    Orientation.EAST: Pos3(1, 0, 0),
    Orientation.SOUTH: Pos3(0, 0, 1),
    Orientation.WEST: Pos3(-1, 0, 0),
}

_CLOCKWISE = [Orientation.NORTH, Orientation.EAST, Orientation.SOUTH, Orientation.WEST]


def get_rotated_orientation(curr_orient: Orientation, direction: TurnDir) -> Orientation:
    """Return the orientation after turning left or right."""
    step = -1 if direction is TurnDir.LEFT else 1
    return _CLOCKWISE[(_CLOCKWISE.index(curr_orient) + step) % len(_CLOCKWISE)]


@dataclass(eq=False)
class Turtle:
    """A turtle; two turtles are equal when their indexes are."""

    index: int = 0
    name: str = ""
    inventory: Optional[TurtleInventory] = None
    position: Pos3 = field(default_factory=Pos3.zero)
    orientation: Orientation = Orientation.NORTH
    fuel: int = 0
    max_fuel: int = 0
    is_online: bool = False
    world: str = ""

    @classmethod
    def new_dummy(
        cls, index: int, world: str, pos: Pos3, orientation: Orientation
    ) -> Turtle:
        """A fresh offline turtle with no name, fuel or inventory."""
        return cls(index=index, world=world, position=pos, orientation=orientation)

    def turn(self, direction: TurnDir) -> Orientation:
        """Orientation after turning; the turtle itself is unchanged."""
        return get_rotated_orientation(self.orientation, direction)

    def forward_vec(self) -> Pos3:
        return self.orientation.forward_vec()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Turtle):
            return NotImplemented
        return self.index == other.index

    def to_json(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "inventory": maybe_to_json(self.inventory, TurtleInventory.to_json),
            "position": self.position.to_json(),
            "orientation": self.orientation.value,
            "fuel": self.fuel,
            "max_fuel": self.max_fuel,
            "is_online": self.is_online,
            "world": self.world,
        }

    @classmethod
    def from_json(cls, data: Any) -> Turtle:
        try:
            orientation = Orientation(_field(data, "orientation"))
        except (ValueError, TypeError) as exc:
            raise ValueError("invalid orientation") from exc
        return cls(
            index=_int_field(data, "index"),
            name=_str_field(data, "name"),
            inventory=maybe_from_json(_field(data, "inventory"), TurtleInventory.from_json),
            position=Pos3.from_json(_field(data, "position")),
            orientation=orientation,
            fuel=_int_field(data, "fuel"),
            max_fuel=_int_field(data, "max_fuel"),
            is_online=_bool_field(data, "is_online"),
            world=_str_field(data, "world"),
        )