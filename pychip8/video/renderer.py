"""Convert the frame buffer into scaled RGB images."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .display import FrameBuffer
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB image produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build display surfaces") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale each CHIP-8 pixel into a ``scale`` x ``scale`` block of colour."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, display: FrameBuffer, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")

        background = bytes(self._background)
        foreground = bytes(self._foreground)
        out_width = display.width * scale
        out = bytearray()

        for row in display.rows():
            line = bytearray()
            for value in row:
                line += (foreground if value else background) * scale
            out += bytes(line) * scale

        return RenderResult(out_width, display.height * scale, bytes(out))
