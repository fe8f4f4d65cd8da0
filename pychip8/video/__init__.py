"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, FrameBuffer
from .font import FONT_START, FONTSET, FONTSET_SIZE, GLYPH_BYTES, glyph_address
from .palette import MONOCHROME, PALETTES, PHOSPHOR, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "FrameBuffer",
    "FONT_START",
    "FONTSET",
    "FONTSET_SIZE",
    "GLYPH_BYTES",
    "glyph_address",
    "MONOCHROME",
    "PHOSPHOR",
    "PALETTES",
    "validate_palette",
    "Renderer",
    "RenderResult",
]
