"""Tests for environment-driven debug logging."""

from __future__ import annotations

import pytest

from pychip8.utils import debug


@pytest.fixture
def categories(monkeypatch):
    def _set(value: str | None) -> None:
        if value is None:
            monkeypatch.delenv("CHIP8_DEBUG", raising=False)
        else:
            monkeypatch.setenv("CHIP8_DEBUG", value)
        debug.reload_categories()

    yield _set
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)
    debug.reload_categories()


def test_disabled_by_default(categories, capsys) -> None:
    categories(None)

    assert not debug.debug_enabled("cpu")
    debug.debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == ""


def test_selected_categories(categories, capsys) -> None:
    categories("cpu, Input")

    assert debug.debug_enabled("cpu")
    assert debug.debug_enabled("input")
    assert not debug.debug_enabled("video")

    debug.debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_enables_everything(categories) -> None:
    categories("all")

    assert debug.debug_enabled("video")
    assert debug.debug_enabled()


def test_bad_format_arguments_are_appended(categories, capsys) -> None:
    categories("cpu")

    debug.debug_log("cpu", "value=%d", "text")

    assert "value=%d ('text',)" in capsys.readouterr().out
