from __future__ import annotations

import pytest

from pychip8.utils import debug


@pytest.fixture(autouse=True)
def _fresh_categories():
    debug.reload_categories()
    yield
    debug.reload_categories()


def test_disabled_without_environment(monkeypatch, capsys):
    monkeypatch.delenv("CHIP8_DEBUG", raising=False)

    debug.debug_log("cpu", "pc=%03x", 0x200)

    assert not debug.debug_enabled("cpu")
    assert capsys.readouterr().out == ""


def test_category_filtering(monkeypatch, capsys):
    monkeypatch.setenv("CHIP8_DEBUG", "cpu, Input")

    debug.debug_log("cpu", "pc=%03x", 0x200)
    debug.debug_log("loader", "hidden")

    assert debug.debug_enabled("input")
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"


def test_all_enables_everything(monkeypatch, capsys):
    monkeypatch.setenv("CHIP8_DEBUG", "all")

    debug.debug_log("history", "bad format %d", "x")

    assert "[CHIP8][history] bad format %d ('x',)" in capsys.readouterr().out
