"""Tests for square-wave sample generation."""

import pytest

from pychip8.audio import build_square_wave


def test_square_wave_has_one_period() -> None:
    samples = build_square_wave(44_100, 441.0, amplitude=1000)

    assert len(samples) == 100
    assert list(samples[:50]) == [1000] * 50
    assert list(samples[50:]) == [-1000] * 50


def test_square_wave_rejects_bad_parameters() -> None:
    with pytest.raises(ValueError):
        build_square_wave(0, 440.0)
    with pytest.raises(ValueError):
        build_square_wave(44_100, 0.0)
