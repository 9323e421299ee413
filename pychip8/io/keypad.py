"""CHIP-8 hexadecimal keypad state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT: Final[int] = 0x10

# Host keyboard layout: the 4x4 block under "1234" mirrors the COSMAC VIP pad
#   1 2 3 C
#   4 5 6 D
#   7 8 9 E
#   A 0 B F
KEY_LAYOUT: Mapping[str, int] = {
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
    """Sixteen pressed/released flags indexed by logical key id."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def press(self, key: int) -> None:
        self._keys[self._check(key)] = True
        if debug_enabled("input"):
            debug_log("input", "press key=%X", key)

    def release(self, key: int) -> None:
        self._keys[self._check(key)] = False
        if debug_enabled("input"):
            debug_log("input", "release key=%X", key)

    def is_pressed(self, key: int) -> bool:
        return self._keys[self._check(key)]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key id, or ``None`` when all are up."""

        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    def press_name(self, key_name: str) -> bool:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press(key)
        return True

    def release_name(self, key_name: str) -> bool:
        key = self._lookup(key_name)
        if key is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release(key)
        return True

    def reset(self) -> None:
        self._keys[:] = [False] * KEY_COUNT

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    @staticmethod
    def _check(key: int) -> int:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"key id {key!r} outside 0x0-0xF")
        return key

    @staticmethod
    def _lookup(key_name: str) -> int | None:
        return KEY_LAYOUT.get(key_name.lower())
