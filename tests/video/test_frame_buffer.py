"""Tests for the 64x32 frame buffer."""

from __future__ import annotations

import pytest

from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, FrameBuffer, glyph_address


def test_new_buffer_is_blank() -> None:
    display = FrameBuffer()

    assert display.width == DISPLAY_WIDTH
    assert display.height == DISPLAY_HEIGHT
    assert display.snapshot() == bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)
    assert not display.redraw_requested


def test_draw_sprite_msb_first_and_collision() -> None:
    display = FrameBuffer()

    assert display.draw_sprite(10, 5, [0b10100000]) is False
    assert display.get_pixel(10, 5) == 1
    assert display.get_pixel(11, 5) == 0
    assert display.get_pixel(12, 5) == 1

    assert display.draw_sprite(11, 5, [0b11000000]) is True
    assert display.get_pixel(11, 5) == 1
    assert display.get_pixel(12, 5) == 0


def test_collision_only_when_pixel_turns_off() -> None:
    display = FrameBuffer()
    display.draw_sprite(0, 0, [0x80])

    assert display.draw_sprite(1, 0, [0x80]) is False
    assert display.draw_sprite(0, 0, [0x80]) is True
    assert display.get_pixel(0, 0) == 0


def test_redraw_flag_lifecycle() -> None:
    display = FrameBuffer()
    display.draw_sprite(0, 0, [0xFF])
    assert display.redraw_requested

    display.acknowledge_redraw()
    assert not display.redraw_requested

    display.clear()
    assert display.redraw_requested
    assert display.lit_count() == 0


def test_get_pixel_bounds() -> None:
    display = FrameBuffer()

    with pytest.raises(IndexError):
        display.get_pixel(DISPLAY_WIDTH, 0)


def test_rows_reflect_pixels() -> None:
    display = FrameBuffer()
    display.draw_sprite(60, 0, [0xF0])

    rows = display.rows()

    assert len(rows) == DISPLAY_HEIGHT
    assert rows[0][60:] == b"\x01\x01\x01\x01"


def test_glyph_address_uses_low_nibble() -> None:
    assert glyph_address(0x0) == 0
    assert glyph_address(0xF) == 75
    assert glyph_address(0x1F) == 75
