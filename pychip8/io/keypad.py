"""CHIP-8 hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16

# Host key layout (left) mapped onto the COSMAC VIP keypad (right):
#   1 2 3 4      1 2 3 C
#   q w e r  ->  4 5 6 D
#   a s d f      7 8 9 E
#   z x c v      A 0 B F
KEY_MAP_TEMPLATE: Mapping[str, int] = {
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


@dataclass
class Keypad:
    """Sixteen boolean key states written by the host before each step."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, key: int) -> None:
        self._set(key, True)

    def release(self, key: int) -> None:
        self._set(key, False)

    def set_keys(self, states: Iterable[bool]) -> None:
        """Replace all sixteen key states at once."""

        values = [bool(state) for state in states]
        if len(values) != KEY_COUNT:
            raise ValueError(f"expected {KEY_COUNT} key states, got {len(values)}")
        for key, pressed in enumerate(values):
            self._set(key, pressed)

    def press_named(self, name: str) -> bool:
        key = self.lookup(name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", name)
            return False
        self.press(key)
        return True

    def release_named(self, name: str) -> bool:
        key = self.lookup(name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", name)
            return False
        self.release(key)
        return True

    def is_pressed(self, key: int) -> bool:
        return self._keys[key & 0x0F]

    def first_pressed(self) -> int | None:
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    @staticmethod
    def lookup(name: str) -> int | None:
        return KEY_MAP_TEMPLATE.get(name.lower())

    def _set(self, key: int, pressed: bool) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"key index out of range: {key}")
        before = self._keys[key]
        self._keys[key] = pressed
        if before != pressed:
            if debug_enabled("input"):
                debug_log("input", "key=%X pressed=%s", key, pressed)
            self._notify_listeners(key, pressed)

    def _notify_listeners(self, key: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(key, pressed)
