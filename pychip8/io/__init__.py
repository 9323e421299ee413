"""Input devices for the CHIP-8 core."""

from .keypad import KEY_COUNT, KEY_LAYOUT, Keypad

__all__ = [
    "KEY_COUNT",
    "KEY_LAYOUT",
    "Keypad",
]
