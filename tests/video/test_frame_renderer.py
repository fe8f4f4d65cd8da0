"""Unit tests for the frame renderer."""

from __future__ import annotations

import pytest

from pychip8.video import PHOSPHOR, FrameBuffer, Renderer, validate_palette


def test_render_single_pixel() -> None:
    display = FrameBuffer()
    display.draw_sprite(1, 0, [0x80])

    result = Renderer().render(display)

    assert result.width == 64
    assert result.height == 32
    assert result.get_pixel(1, 0) == (255, 255, 255)
    assert result.get_pixel(0, 0) == (0, 0, 0)
    assert len(result.pixels) == 64 * 32 * 3


def test_render_scale_factor() -> None:
    display = FrameBuffer()
    display.draw_sprite(0, 0, [0x80])

    result = Renderer().render(display, scale=3)

    assert result.width == 192
    assert result.height == 96
    assert result.get_pixel(2, 2) == (255, 255, 255)
    assert result.get_pixel(3, 0) == (0, 0, 0)
    assert result.get_pixel(0, 3) == (0, 0, 0)


def test_render_uses_palette() -> None:
    display = FrameBuffer()
    display.draw_sprite(0, 0, [0x80])

    result = Renderer(PHOSPHOR).render(display)

    assert result.get_pixel(0, 0) == PHOSPHOR[1]
    assert result.get_pixel(1, 0) == PHOSPHOR[0]


def test_invalid_scale_and_palette() -> None:
    with pytest.raises(ValueError):
        Renderer().render(FrameBuffer(), scale=0)
    with pytest.raises(ValueError):
        validate_palette([(0, 0, 0)])
