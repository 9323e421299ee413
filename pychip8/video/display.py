"""Monochrome 64x32 frame buffer and the XOR sprite compositor."""

from __future__ import annotations

from typing import Final, Iterable

DISPLAY_WIDTH: Final[int] = 64
DISPLAY_HEIGHT: Final[int] = 32
SPRITE_WIDTH: Final[int] = 8


class Display:
    """Row-major grid of 1-bit pixels.

    Only :meth:`clear` and :meth:`draw` change pixels while a program runs;
    :meth:`restore` exists for replacing the whole frame from a snapshot.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self._pixels = bytearray(width * height)

    @classmethod
    def from_pixels(
        cls,
        pixels: Iterable[int | bool],
        width: int = DISPLAY_WIDTH,
        height: int = DISPLAY_HEIGHT,
    ) -> "Display":
        display = cls(width, height)
        display.restore(bytes(1 if pixel else 0 for pixel in pixels))
        return display

    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))

    def get_pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return self._pixels[y * self.width + x]

    def draw(self, x: int, y: int, sprite: bytes) -> bool:
        """XOR ``sprite`` onto the grid with its top-left corner at (x, y).

        The origin wraps once onto the grid; pixels that then fall past the
        right or bottom edge are clipped. Returns ``True`` when any lit pixel
        was switched off.
        """

        origin_x = x % self.width
        origin_y = y % self.height
        collision = False
        for row, bits in enumerate(sprite):
            target_y = origin_y + row
            if target_y >= self.height:
                break
            base = target_y * self.width
            for column in range(SPRITE_WIDTH):
                if not bits & (0x80 >> column):
                    continue
                target_x = origin_x + column
                if target_x >= self.width:
                    break
                index = base + target_x
                if self._pixels[index]:
                    self._pixels[index] = 0
                    collision = True
                else:
                    self._pixels[index] = 1
        return collision

    def export(self) -> tuple[bool, ...]:
        """Return every pixel as a flat row-major tuple of booleans."""

        return tuple(pixel == 1 for pixel in self._pixels)

    def snapshot(self) -> bytes:
        return bytes(self._pixels)

    def restore(self, pixels: bytes) -> None:
        if len(pixels) != len(self._pixels):
            raise ValueError(f"frame has {len(pixels)} pixels, expected {len(self._pixels)}")
        self._pixels[:] = bytes(1 if pixel else 0 for pixel in pixels)

    def lit_count(self) -> int:
        return sum(self._pixels)

    def to_text(self, on: str = "#", off: str = ".") -> str:
        lines = []
        for y in range(self.height):
            row = self._pixels[y * self.width : (y + 1) * self.width]
            lines.append("".join(on if pixel else off for pixel in row))
        return "\n".join(lines)
