"""CHIP-8 virtual machine core.

The package holds the memory, CPU, display, keypad, loader and system layers.
Rendering, audio and windowing are left to the host, which pulls display state
through :meth:`pychip8.video.Display.export` after each cycle.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, utils, video

__all__: list[str] = [
    "bus",
    "cpu",
    "video",
    "io",
    "loader",
    "system",
    "utils",
]
