#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging

import Xlib.X

from conftest import FakeHints, makeXError
from pmdock import Tile, TileKind
from pmdock._swallow import DockappSwallower

MOVES = ("reparent", "map", "unmap", "configure")


def _dockapp(index, resName):
    return Tile(index, TileKind.DOCKAPP, resName, resourceName=resName)


def _swallower(display, tiles, horizontal=True, completions=None):
    panel = display.newWindow(("pmdock", "PMDock"))
    onComplete = (lambda: completions.append(True)) if completions is not None else None
    swallower = DockappSwallower(display, display.root, panel, tiles, 64, horizontal, onComplete=onComplete,
                                 iconPollAttempts=2, iconPollDelay=0.1, wmGraceDelay=0.1, wmSettleDelay=0.05)
    return swallower, panel


def test_swallow_without_wm(display, noSleep):
    tiles = [_dockapp(0, "xclock")]
    completions = []
    swallower, panel = _swallower(display, tiles, completions=completions)

    icon = display.newWindow(size=(48, 48))
    main = display.newWindow(("xclock", "XClock"))
    # The icon window shows up in WM_HINTS on the second look
    main.hints = [FakeHints(None), FakeHints(icon)]

    assert swallower.handleCreatedWindow(main)

    moves = display.requests(*MOVES)
    assert moves == [
        ("configure", icon.id, {"border_width": 0}),
        ("reparent", main.id, panel.id, 8, 128),
        ("reparent", icon.id, panel.id, 8, 8),
        ("configure", main.id, {"stack_mode": Xlib.X.Above}),
        ("map", main.id),
        ("configure", icon.id, {"stack_mode": Xlib.X.Above}),
        ("map", icon.id),
    ]
    assert noSleep == [0.1]
    assert tiles[0].window is icon
    assert swallower.completed
    assert completions == [True]
    assert display.root.attributes["event_mask"] == Xlib.X.NoEventMask


def test_swallow_with_wm(display, noSleep, caplog):
    display.setWmRunning()
    tiles = [_dockapp(0, "wmcube"), _dockapp(1, "wmnd")]
    swallower, panel = _swallower(display, tiles, horizontal=False)

    icon = display.newWindow(size=(56, 56))
    main = display.newWindow(("wmnd", "WMnd"))
    main.hints = [FakeHints(icon)]

    with caplog.at_level(logging.WARNING, logger="pmdock"):
        assert swallower.handleCreatedWindow(main)
    assert "Window manager detected" in caplog.text

    reparents = display.requests("reparent")
    assert reparents == [("reparent", main.id, panel.id, 128, 68),
                         ("reparent", icon.id, panel.id, 4, 68)] * 2

    moves = [c[0:2] for c in display.requests("unmap", "reparent", "map")]
    assert moves.index(("unmap", main.id)) < moves.index(("reparent", main.id))
    assert moves.index(("unmap", icon.id)) < moves.index(("reparent", icon.id))
    assert moves[-2:] == [("map", main.id), ("map", icon.id)]

    # Grace delay for the WM, then two settle pauses
    assert noSleep == [0.1, 0.05, 0.05]
    assert tiles[1].window is icon
    assert not tiles[0].isFilled
    assert not swallower.completed


def test_no_icon_window(display, noSleep, caplog):
    tiles = [_dockapp(0, "xclock")]
    swallower, panel = _swallower(display, tiles)
    main = display.newWindow(("xclock", "XClock"))

    with caplog.at_level(logging.WARNING, logger="pmdock"):
        assert not swallower.handleCreatedWindow(main)

    assert "has no icon window" in caplog.text
    assert display.requests(*MOVES) == []
    assert noSleep == [0.1]
    assert not tiles[0].isFilled


def test_unrelated_windows_are_ignored(display, noSleep):
    tiles = [_dockapp(0, "xclock")]
    swallower, panel = _swallower(display, tiles)

    other = display.newWindow(("xterm", "XTerm"))
    other.hints = [FakeHints(display.newWindow())]
    assert not swallower.handleCreatedWindow(other)
    assert not swallower.handleCreatedWindow(display.newWindow())
    assert not swallower.handleCreatedWindow(display.newWindow(makeXError()))

    assert display.requests(*MOVES) == []
    assert not tiles[0].isFilled


def test_duplicate_names_fill_in_index_order(display, noSleep):
    tiles = [_dockapp(0, "wmclock"), _dockapp(1, "wmclock")]
    completions = []
    swallower, panel = _swallower(display, tiles, completions=completions)

    icons = []
    for _ in range(3):
        icon = display.newWindow()
        main = display.newWindow(("wmclock", "WMClock"))
        main.hints = [FakeHints(icon)]
        icons.append(icon)
        swallower.handleCreatedWindow(main)

    assert tiles[0].window is icons[0]
    assert tiles[1].window is icons[1]
    assert completions == [True]
    assert [c[0:2] for c in display.requests("reparent") if c[1] == icons[2].id] == []


def test_icon_window_vanished(display, noSleep, caplog):
    tiles = [_dockapp(0, "xclock")]
    swallower, panel = _swallower(display, tiles)

    icon = display.newWindow()
    icon.geometryError = makeXError(resourceId=icon.id)
    main = display.newWindow(("xclock", "XClock"))
    main.hints = [FakeHints(icon)]

    with caplog.at_level(logging.WARNING, logger="pmdock"):
        assert not swallower.handleCreatedWindow(main)
    assert "went away" in caplog.text
    assert display.requests("reparent", "map") == []
    assert not tiles[0].isFilled


def test_completion_is_notified_once(display):
    completions = []
    swallower, panel = _swallower(display, [Tile(0, TileKind.LAUNCHER, "xterm")], completions=completions)

    swallower.checkCompletion()
    swallower.checkCompletion()
    assert completions == [True]
    assert len(display.requests("change_attributes")) == 1
