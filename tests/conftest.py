#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import array
import itertools
from typing import Any, Dict, List, Optional

import pytest
import Xlib.error
import Xlib.X
import Xlib.Xatom
import Xlib.Xutil


def makeXError(cls=Xlib.error.BadWindow, resourceId: int = 0):
    # XError objects are normally parsed from the wire; build one with just the fields __str__ needs
    err = cls.__new__(cls)
    err._data = dict(code=3, resource_id=resourceId, sequence_number=0, major_opcode=0, minor_opcode=0)
    return err


class FakeProperty:

    def __init__(self, value, property_type: int = Xlib.X.AnyPropertyType, format: int = 32):
        self.value = value
        self.property_type = property_type
        self.format = format


class FakeHints:

    def __init__(self, iconWindow=None, flags: Optional[int] = None):
        self.icon_window = iconWindow
        if flags is None:
            flags = Xlib.Xutil.IconWindowHint if iconWindow is not None else 0
        self.flags = flags


class FakeGeometry:

    def __init__(self, width: int, height: int, border_width: int = 1, depth: int = 24):
        self.width = width
        self.height = height
        self.border_width = border_width
        self.depth = depth


class FakeWindow:
    """Records every request in the display call log, as (request, window id, args...)"""

    def __init__(self, display: FakeDisplay, wid: int, wmClass=None, size=(48, 48)):
        self.display = display
        self.id = wid
        self.wmClass = wmClass
        self.hints: List[Any] = []
        self.geometry = FakeGeometry(*size)
        self.properties: Dict[int, FakeProperty] = {}
        self.attributes: Dict[str, Any] = {}
        self.children: List[FakeWindow] = []
        self.parent: Optional[FakeWindow] = None
        self.mapped = False
        self.wmName: Optional[str] = None
        self.geometryError: Optional[Exception] = None

    def __repr__(self):
        return 'FakeWindow(0x%x)' % self.id

    def _log(self, request, *args):
        self.display.calls.append((request, self.id) + args)

    def get_full_property(self, prop, prop_type, sizehint=10):
        return self.properties.get(prop)

    def change_property(self, prop, prop_type, fmt, data, mode=Xlib.X.PropModeReplace):
        self.properties[prop] = FakeProperty(data, prop_type, fmt)
        self._log("change_property", prop, prop_type, fmt, list(data) if not isinstance(data, bytes) else data)

    def get_wm_hints(self):
        # Successive calls walk through the queued hints; the last one sticks
        if not self.hints:
            return None
        if len(self.hints) > 1:
            return self.hints.pop(0)
        return self.hints[0]

    def get_wm_class(self):
        if isinstance(self.wmClass, Exception):
            raise self.wmClass
        return self.wmClass

    def set_wm_class(self, inst, cls):
        self.wmClass = (inst, cls)
        self._log("set_wm_class", inst, cls)

    def set_wm_name(self, name):
        self.wmName = name
        self._log("set_wm_name", name)

    def get_geometry(self):
        if self.geometryError is not None:
            raise self.geometryError
        return self.geometry

    def configure(self, **keys):
        self._log("configure", keys)

    def change_attributes(self, **keys):
        self.attributes.update(keys)
        self._log("change_attributes", keys)

    def map(self):
        self.mapped = True
        self._log("map")

    def unmap(self):
        self.mapped = False
        self._log("unmap")

    def reparent(self, parent, x, y):
        self.parent = parent
        self._log("reparent", parent.id, x, y)

    def create_window(self, x, y, width, height, border_width, depth, **keys):
        win = self.display.newWindow()
        win.parent = self
        win.geometry = FakeGeometry(width, height, border_width)
        self.children.append(win)
        self._log("create_window", win.id, x, y, width, height)
        return win

    def create_gc(self, **keys):
        self._log("create_gc")
        return object()

    def put_pil_image(self, gc, x, y, image):
        self._log("put_pil_image", x, y, image.size, image.mode)


class FakeScreen:

    def __init__(self, root: FakeWindow):
        self.root = root
        self.root_depth = 24
        self.black_pixel = 0
        self.white_pixel = 0xFFFFFF


class FakeDisplay:

    def __init__(self):
        self.calls: List[tuple] = []
        self.events: List[Any] = []
        self.errorHandler = None
        self._atoms: Dict[str, int] = {}
        self._ids = itertools.count(0x1000001)
        self.root = FakeWindow(self, 0x100)
        self._screen = FakeScreen(self.root)

    def newWindow(self, wmClass=None, size=(48, 48)) -> FakeWindow:
        return FakeWindow(self, next(self._ids), wmClass, size)

    def screen(self):
        return self._screen

    def get_atom(self, name):
        if name not in self._atoms:
            self._atoms[name] = 300 + len(self._atoms)
        return self._atoms[name]

    def flush(self):
        self.calls.append(("flush",))

    def set_error_handler(self, handler):
        self.errorHandler = handler

    def pending_events(self):
        return len(self.events)

    def next_event(self):
        event = self.events.pop(0)
        if isinstance(event, Exception):
            raise event
        return event

    def fileno(self):
        return -1

    def requests(self, *names):
        return [c for c in self.calls if c[0] in names]

    def setWmRunning(self):
        self.root.properties[self.get_atom("_NET_SUPPORTING_WM_CHECK")] = \
            FakeProperty(array.array('I', [0x400001]), Xlib.Xatom.WINDOW)


class FakeEvent:

    def __init__(self, type, window):
        self.type = type
        self.window = window


@pytest.fixture
def display():
    return FakeDisplay()


@pytest.fixture
def noSleep(monkeypatch):
    slept: List[float] = []
    monkeypatch.setattr("time.sleep", slept.append)
    return slept
