#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import array

import Xlib.Xatom
import Xlib.Xutil

from conftest import FakeHints, FakeProperty, FakeWindow, makeXError
from pmdock._props import (ALL_DESKTOPS, getIconWindow, getPropertyValue, getResourceName, isWmRunning,
                           setClassHint, setDesktop, setMotifHints, setStateAbove)


def test_wm_check(display):
    assert not isWmRunning(display, display.root)
    display.setWmRunning()
    assert isWmRunning(display, display.root)


def test_property_value():
    assert getPropertyValue(None) is None
    assert getPropertyValue(FakeProperty(array.array('I', [1, 2]))) == [1, 2]
    assert getPropertyValue(FakeProperty(b"pmdock\x00PMDock\x00")) == ["pmdock", "PMDock"]


def test_motif_hints(display):
    win = display.newWindow()
    setMotifHints(win, display, functions=0x04, decorations=0x00)

    atom = display.get_atom("_MOTIF_WM_HINTS")
    request = display.requests("change_property")[0]
    assert request == ("change_property", win.id, atom, atom, 32, [0x03, 0x04, 0x00, 0, 0])


def test_desktop_and_above(display):
    win = display.newWindow()
    setDesktop(win, display)
    setStateAbove(win, display)

    desktop, state = display.requests("change_property")
    assert desktop == ("change_property", win.id, display.get_atom("_NET_WM_DESKTOP"), Xlib.Xatom.CARDINAL, 32,
                       [ALL_DESKTOPS])
    assert ALL_DESKTOPS == 0xFFFFFFFF
    assert state == ("change_property", win.id, display.get_atom("_NET_WM_STATE"), Xlib.Xatom.ATOM, 32,
                     [display.get_atom("_NET_WM_STATE_ABOVE")])


def test_class_hint(display):
    win = display.newWindow()
    setClassHint(win)
    assert win.wmClass == ("pmdock", "PMDock")


def test_icon_window(display):
    main = display.newWindow()
    icon = display.newWindow()
    assert getIconWindow(main) is None

    main.hints = [FakeHints(icon, flags=Xlib.Xutil.IconPixmapHint)]
    assert getIconWindow(main) is None

    main.hints = [FakeHints(FakeWindow(display, 0), flags=Xlib.Xutil.IconWindowHint)]
    assert getIconWindow(main) is None

    main.hints = [FakeHints(icon)]
    assert getIconWindow(main) is icon


def test_resource_name(display):
    assert getResourceName(display.newWindow()) is None
    assert getResourceName(display.newWindow(("wmcube", "WMCube"))) == "wmcube"
    assert getResourceName(display.newWindow(makeXError())) is None
