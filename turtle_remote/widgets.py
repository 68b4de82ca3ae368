"""Display logic for the fuel ring and inventory slot widgets."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .colors import string_to_color

Color = tuple[int, int, int]
Point = tuple[float, float]

RED: Color = (255, 0, 0)
DARK_GRAY: Color = (96, 96, 96)

_TAU = 2 * math.pi


class SlotActionKind(Enum):
    SELECT_SLOT = "SelectSlot"
    TRANSFER = "Transfer"
    REFUEL = "Refuel"


@dataclass(frozen=True)
class ItemSlotAction:
    """An action requested on an inventory slot (slots count from 1)."""

    slot: int
    kind: SlotActionKind
    amount: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.amount <= 255:
            raise ValueError(f"amount out of range: {self.amount}")

    @classmethod
    def select_slot(cls, slot: int) -> ItemSlotAction:
        return cls(slot, SlotActionKind.SELECT_SLOT)

    @classmethod
    def transfer(cls, slot: int, amount: int) -> ItemSlotAction:
        return cls(slot, SlotActionKind.TRANSFER, amount)

    @classmethod
    def refuel(cls, slot: int) -> ItemSlotAction:
        return cls(slot, SlotActionKind.REFUEL)


def action_to_lua(action: ItemSlotAction) -> Optional[str]:
    """Lua code carrying out a slot action, or None when it sends nothing."""
    match action.kind:
        case SlotActionKind.TRANSFER:
            return f"turtle.transferTo({action.slot}, {action.amount})"
        case SlotActionKind.REFUEL:
            return "turtle.refuel()"
    return None


def limit_number(num: int) -> str:
    """Shorten numbers of 1000 and more to thousands with a K suffix."""
    text = str(num)
    if num >= 1000:
        return f"{text[:-3]}K"
    return text


def gray_scale(color: Color) -> float:
    """Relative luminance of an RGB colour, from 0 to 1."""
    r, g, b = (c / 255 for c in color[:3])
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def text_gray_for(color: Color) -> int:
    """Gray level of text that contrasts with the given background."""
    inverse = 1.0 - min(1.0, max(0.0, gray_scale(color)))
    return int(255 * inverse)


def slot_color(name: Optional[str]) -> Color:
    """Background colour of an inventory slot holding the named item."""
    if name is None:
        return DARK_GRAY
    r, g, b = tuple(string_to_color(name))[:3]
    return ((r >> 1) | 128, (g >> 1) | 128, (b >> 1) | 128)


@dataclass
class CircleDisplay:
    """A ring showing a value against its maximum."""

    stroke_width: float = 1.0
    stroke_color: Color = RED
    font_size: float = 14.0
    segments: int = 20
    size: float = 1.0
    render_background: bool = False

    def label(self, value: int, max_value: int) -> str:
        """The two-line text drawn in the ring's centre."""
        return f" {limit_number(value)}\n/{limit_number(max_value)}"

    def segments_for(
        self, value: int, max_value: int, center: Point, radius: float
    ) -> list[tuple[Point, Point]]:
        """Line segments of the ring, starting at the top and going clockwise on screen."""
        if max_value == 0:
            raise ValueError("max_value must not be zero")
        normalized = value / max_value
        part = _TAU / self.segments
        cx, cy = center

        def point(angle: float) -> Point:
            return (cx + math.cos(angle) * radius, cy + math.sin(angle) * radius)

        return [
            (
                point(i * part * normalized - _TAU / 4),
                point((i + 1) * part * normalized - _TAU / 4 + self.stroke_width * 0.005),
            )
            for i in range(self.segments)
        ]