"""Tests for the run.py argument handling."""

from __future__ import annotations

import pytest

import run


def test_parser_defaults(tmp_path) -> None:
    rom = tmp_path / "game.ch8"
    args = run.build_arg_parser().parse_args(["--rom", str(rom)])

    assert args.rom == rom
    assert args.scale == 10
    assert args.speed == 10
    assert args.seed is None
    assert args.palette == "mono"
    assert not args.mute


def test_missing_rom_exits(tmp_path) -> None:
    with pytest.raises(SystemExit):
        run.main(["--rom", str(tmp_path / "missing.ch8")])


def test_main_builds_app_config(tmp_path, monkeypatch) -> None:
    rom = tmp_path / "game.ch8"
    rom.write_bytes(b"\x12\x00")
    captured = {}

    class FakeApp:
        def __init__(self, config) -> None:
            captured["config"] = config

        def run(self) -> None:
            captured["ran"] = True

    monkeypatch.setattr(run, "Chip8App", FakeApp)

    assert run.main(["--rom", str(rom), "--speed", "4", "--seed", "9", "--mute"]) == 0
    config = captured["config"]
    assert captured["ran"]
    assert config.steps_per_frame == 4
    assert config.seed == 9
    assert not config.enable_audio
