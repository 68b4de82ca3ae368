import math

import pytest

from turtle_remote.widgets import (
    CircleDisplay,
    ItemSlotAction,
    SlotActionKind,
    action_to_lua,
    gray_scale,
    limit_number,
    slot_color,
    text_gray_for,
)


def test_small_numbers_are_unchanged():
    assert limit_number(999) == "999"
    assert limit_number(0) == "0"


def test_thousands_get_k_suffix():
    assert limit_number(1000) == "1K"
    assert limit_number(123456) == "123K"


def test_gray_scale_extremes():
    assert gray_scale((0, 0, 0)) == 0
    assert gray_scale((255, 255, 255)) == pytest.approx(1.0)
    assert gray_scale((255, 0, 0)) == pytest.approx(0.2126)


def test_text_gray_contrasts_background():
    assert text_gray_for((0, 0, 0)) == 255
    assert text_gray_for((255, 255, 255)) == 0
    assert text_gray_for((200, 200, 200)) < text_gray_for((50, 50, 50))


def test_empty_slot_is_dark_gray():
    color = slot_color(None)
    assert len(set(color)) == 1
    assert color[0] < 128


@pytest.mark.parametrize("name", ["minecraft:stone", "minecraft:coal", ""])
def test_item_slot_color_is_light(name):
    color = slot_color(name)
    assert len(color) == 3
    assert all(128 <= c <= 255 for c in color)
    assert slot_color(name) == color


def test_circle_display_defaults():
    display = CircleDisplay()
    assert display.segments == 20
    assert display.stroke_width == 1.0
    assert display.font_size == 14.0
    assert display.render_background is False


def test_label_uses_limited_numbers():
    display = CircleDisplay()
    assert display.label(5, 10) == " 5\n/10"
    assert display.label(999, 100000) == f" 999\n/{limit_number(100000)}"


def test_segment_count_and_radius():
    display = CircleDisplay(segments=12, stroke_width=6.0)
    segments = display.segments_for(30, 100, (10.0, 20.0), 5.0)
    assert len(segments) == 12
    for start, end in segments:
        for x, y in (start, end):
            assert math.hypot(x - 10.0, y - 20.0) == pytest.approx(5.0)


def test_ring_starts_at_top():
    display = CircleDisplay()
    (start, _), *_ = display.segments_for(50, 100, (0.0, 0.0), 4.0)
    assert start[0] == pytest.approx(0.0, abs=1e-9)
    assert start[1] == pytest.approx(-4.0)


def test_zero_value_collapses_all_starts():
    display = CircleDisplay(segments=5)
    segments = display.segments_for(0, 100, (1.0, 1.0), 2.0)
    starts = {(round(s[0], 9), round(s[1], 9)) for s, _ in segments}
    assert len(starts) == 1


def test_zero_max_value_is_rejected():
    with pytest.raises(ValueError):
        CircleDisplay().segments_for(1, 0, (0.0, 0.0), 1.0)


def test_transfer_action_lua():
    assert action_to_lua(ItemSlotAction.transfer(3, 64)) == "turtle.transferTo(3, 64)"


def test_refuel_action_lua():
    assert action_to_lua(ItemSlotAction.refuel(2)) == "turtle.refuel()"


def test_select_slot_sends_nothing():
    action = ItemSlotAction.select_slot(4)
    assert action.kind is SlotActionKind.SELECT_SLOT
    assert action_to_lua(action) is None


def test_transfer_amount_must_fit_a_byte():
    with pytest.raises(ValueError):
        ItemSlotAction.transfer(1, 256)