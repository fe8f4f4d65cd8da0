"""Square-wave tone output driven by the sound timer."""

from __future__ import annotations

from array import array
from typing import Optional

from pychip8.utils import debug_enabled, debug_log


def build_square_wave(sample_rate: int, frequency: float, amplitude: int = 8_000) -> array:
    """Return one period of a signed 16-bit square wave."""

    if sample_rate <= 0 or frequency <= 0.0:
        raise ValueError("sample rate and frequency must be positive")
    period = max(2, int(round(sample_rate / frequency)))
    half = period // 2
    samples = array("h", [amplitude] * half)
    samples.extend([-amplitude] * (period - half))
    return samples


class SquareWaveBeeper:
    """Play a looping tone using pygame's mixer while the sound timer runs."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = 440.0,
        volume: float = 0.25,
    ) -> None:
        try:
            import pygame  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        if pygame.mixer.get_init() is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")

        self._pygame = pygame
        self._volume = max(0.0, min(1.0, volume))
        self._sound = pygame.mixer.Sound(
            buffer=build_square_wave(max(1, sample_rate), frequency).tobytes()
        )
        self._sound.set_volume(self._volume)
        self._channel: Optional["pygame.mixer.Channel"] = None

    @property
    def playing(self) -> bool:
        return self._channel is not None and self._channel.get_busy()

    def set_active(self, active: bool) -> None:
        """Start or stop the tone so that it follows ``active``."""

        if active and not self.playing:
            self._channel = self._sound.play(loops=-1)
            if debug_enabled("audio"):
                debug_log("audio", "tone on")
        elif not active and self._channel is not None:
            self._channel.stop()
            self._channel = None
            if debug_enabled("audio"):
                debug_log("audio", "tone off")

    def shutdown(self) -> None:
        """Stop any active tone and release the channel."""

        self.set_active(False)


__all__ = ["SquareWaveBeeper", "build_square_wave"]
