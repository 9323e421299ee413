"""Display and font helpers for the CHIP-8 core."""

from __future__ import annotations

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, SPRITE_WIDTH, Display
from .font import FONT_SET, FONT_START, GLYPH_BYTES, get_glyph, glyph_address

__all__ = [
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "SPRITE_WIDTH",
    "FONT_SET",
    "FONT_START",
    "GLYPH_BYTES",
    "get_glyph",
    "glyph_address",
]
