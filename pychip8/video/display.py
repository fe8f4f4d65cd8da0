"""64x32 monochrome frame buffer with XOR sprite drawing."""

from __future__ import annotations

from typing import Iterable

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8


class FrameBuffer:
    """One byte per pixel display memory plus a redraw request flag.

    Sprites wrap around both edges: a pixel that lands past the right or
    bottom border is drawn on the opposite side.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)
        self.redraw_requested = False

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self.redraw_requested = True

    def get_pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return self._pixels[y * self.width + x]

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR ``rows`` onto the buffer at (``x``, ``y``).

        Returns ``True`` when at least one lit pixel was switched off.
        """

        width = self.width
        height = self.height
        origin_x = x % width
        origin_y = y % height
        pixels = self._pixels
        collision = False

        for row_index, row in enumerate(rows):
            if not row:
                continue
            py = (origin_y + row_index) % height
            base = py * width
            for bit in range(SPRITE_WIDTH):
                if not row & (0x80 >> bit):
                    continue
                offset = base + (origin_x + bit) % width
                if pixels[offset]:
                    collision = True
                pixels[offset] ^= 1

        self.redraw_requested = True
        return collision

    def acknowledge_redraw(self) -> None:
        """Called by the host once it has consumed the current frame."""

        self.redraw_requested = False

    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    def rows(self) -> list[bytes]:
        data = self._pixels
        return [bytes(data[y * self.width : (y + 1) * self.width]) for y in range(self.height)]

    def lit_count(self) -> int:
        return sum(self._pixels)
