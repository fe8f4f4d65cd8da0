"""CHIP-8 interpreter with a pygame frontend.

The interpreter core lives in :mod:`pychip8.cpu`; the remaining sub-packages
supply memory, display, keypad, audio, program loading and the host loop
used by ``run.py``.
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
