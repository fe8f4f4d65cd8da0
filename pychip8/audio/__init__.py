"""Audio output for the CHIP-8 interpreter."""

from .beeper import SquareWaveBeeper, build_square_wave

__all__ = ["SquareWaveBeeper", "build_square_wave"]
