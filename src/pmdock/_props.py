#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import array
import logging
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Union

from typing_extensions import TypedDict

import Xlib.display
import Xlib.error
import Xlib.protocol
import Xlib.X
import Xlib.Xatom
import Xlib.Xutil
from Xlib.xobject.drawable import Window as XWindow

logger = logging.getLogger(__name__)

PANEL_NAME = "PMDock"
PANEL_RES_NAME = "pmdock"
PANEL_RES_CLASS = "PMDock"

ALL_DESKTOPS = 0xFFFFFFFF  # -1 as CARDINAL


class Props:

    class Root(Enum):
        SUPPORTING_WM_CHECK = "_NET_SUPPORTING_WM_CHECK"

    class Window(Enum):
        DESKTOP = "_NET_WM_DESKTOP"
        WM_STATE = "_NET_WM_STATE"
        MOTIF_HINTS = "_MOTIF_WM_HINTS"

    class State(Enum):
        ABOVE = "_NET_WM_STATE_ABOVE"

    class MotifFlags(IntEnum):
        FUNCTIONS = 1 << 0
        DECORATIONS = 1 << 1

    class DataFormat(IntEnum):
        STR = 8
        INT = 32

    class Mode(IntEnum):
        REPLACE = Xlib.X.PropModeReplace
        APPEND = Xlib.X.PropModeAppend
        PREPEND = Xlib.X.PropModePrepend


class MotifHints(TypedDict):
    """
    Container class to handle _MOTIF_WM_HINTS struct (5 x 32-bit values):

        - flags: which of the following fields are meaningful (Props.MotifFlags)
        - functions: bitmask of window functions the WM should offer (0 means none)
        - decorations: bitmask of decorations the WM should draw (0 means a borderless window)
        - input_mode: unused
        - status: unused
    """
    flags: int
    functions: int
    decorations: int
    input_mode: int
    status: int


def getProperty(window: XWindow, prop: Union[str, int], display: Xlib.display.Display,
                prop_type: int = Xlib.X.AnyPropertyType, sizehint: int = 10) \
        -> Optional[Xlib.protocol.request.GetProperty]:
    """
    Get given window/root property

    :param window: window from which get the property
    :param prop: property to retrieve as int or str (will be translated to int)
    :param display: display connection the window belongs to
    :param prop_type: property type (e.g. Xlib.X.AnyPropertyType or Xlib.Xatom.WINDOW)
    :param sizehint: Expected data length hint (defaults to 10)
    :return: Xlib.protocol.request.GetProperty struct or None (property is not set)
    """
    if isinstance(prop, str):
        prop = display.get_atom(prop)

    if isinstance(prop, int) and prop != 0:
        return window.get_full_property(prop, prop_type, sizehint)
    return None


def getPropertyValue(prop: Optional[Xlib.protocol.request.GetProperty]) -> Optional[Union[List[int], List[str]]]:
    """
    Extract data from retrieved window/root property

    :param prop: Xlib.protocol.request.GetProperty struct from which extract data
    :return: extracted property data (as a list of integers or strings) or None
    """
    if prop is not None:
        # Value is either bytes (separated by '\x00' when multiple values) or array.array of integers.
        valueData: Union[array.array[int], bytes] = prop.value
        if isinstance(valueData, bytes):
            resultStr: List[str] = [a for a in valueData.decode().split("\x00") if a]
            return resultStr
        elif isinstance(valueData, array.array):
            resultInt: List[int] = [a for a in valueData]
            return resultInt
        return [a for a in valueData] if isinstance(valueData, Iterable) else [valueData]
    return None


def changeProperty(window: XWindow, prop: Union[str, int], data: Union[List[int], str], display: Xlib.display.Display,
                   prop_type: Union[str, int] = Xlib.Xatom.ATOM, propMode: Props.Mode = Props.Mode.REPLACE):
    """
    Change given window property

    :param window: window to which change the property
    :param prop: property to change as int or str (will be translated to int)
    :param data: data of the property as string (format 8) or list of int (format 32)
    :param display: display connection the window belongs to
    :param prop_type: property type as int or str (e.g. Xlib.Xatom.CARDINAL or "_MOTIF_WM_HINTS")
    :param propMode: whether to Replace/Append/Prepend (Props.Mode.*) existing data
    """
    if isinstance(prop, str):
        prop = display.get_atom(prop)
    if isinstance(prop_type, str):
        prop_type = display.get_atom(prop_type)

    if isinstance(prop, int) and prop != 0:
        if isinstance(data, str):
            dataFormat: int = Props.DataFormat.STR
            window.change_property(prop, prop_type, dataFormat, data.encode(encoding="utf-8"), propMode.value)
        else:
            dataFormat = Props.DataFormat.INT
            window.change_property(prop, prop_type, dataFormat, data, propMode.value)


def isWmRunning(display: Xlib.display.Display, root: XWindow) -> bool:
    """
    Check if a window manager is currently running on given root.

    A compliant Window Manager sets _NET_SUPPORTING_WM_CHECK on the root window to the ID of a child window created
    by himself. Only its existence is checked here, as a one-shot snapshot

    :return: ''True'' if the property holds any value
    """
    ret = getProperty(root, Props.Root.SUPPORTING_WM_CHECK.value, display, Xlib.Xatom.WINDOW, 1)
    return bool(getPropertyValue(ret))


def getIconWindow(window: XWindow) -> Optional[XWindow]:
    """
    Get the icon window advertised in the WM_HINTS of given window

    :return: icon X-Window object or None (hints not set, or set without IconWindowHint)
    """
    hints = window.get_wm_hints()
    if hints is None:
        return None
    if not hints.flags & Xlib.Xutil.IconWindowHint:
        return None
    iconWindow = hints.icon_window
    if not iconWindow or not iconWindow.id:
        return None
    return iconWindow


def getResourceName(window: XWindow) -> Optional[str]:
    """
    Get the resource name (instance part of WM_CLASS) of given window

    :return: resource name or None if the window has no class hints or has already gone away
    """
    try:
        wmClass = window.get_wm_class()
    except Xlib.error.XError:
        return None
    if not wmClass:
        return None
    return wmClass[0]


def setMotifHints(window: XWindow, display: Xlib.display.Display, functions: int, decorations: int,
                  flags: int = Props.MotifFlags.FUNCTIONS | Props.MotifFlags.DECORATIONS):
    """
    Set _MOTIF_WM_HINTS for given window. With both masks set to 0, a Motif-aware WM shows a borderless
    window with no functions

    :param functions: window functions bitmask
    :param decorations: window decorations bitmask
    :param flags: which fields are meaningful (defaults to both functions and decorations)
    """
    hints = MotifHints(flags=int(flags), functions=functions, decorations=decorations, input_mode=0, status=0)
    data = [hints["flags"], hints["functions"], hints["decorations"], hints["input_mode"], hints["status"]]
    changeProperty(window, Props.Window.MOTIF_HINTS.value, data, display, Props.Window.MOTIF_HINTS.value)


def setClassHint(window: XWindow, resName: str = PANEL_RES_NAME, resClass: str = PANEL_RES_CLASS):
    window.set_wm_class(resName, resClass)


def setDesktop(window: XWindow, display: Xlib.display.Display, desktop: int = ALL_DESKTOPS):
    """
    Set _NET_WM_DESKTOP for given window. Default value (0xFFFFFFFF) shows the window on all desktops
    """
    changeProperty(window, Props.Window.DESKTOP.value, [desktop], display, Xlib.Xatom.CARDINAL)
    logger.debug("Set _NET_WM_DESKTOP hint for window 0x%x to %d", window.id, desktop)


def setStateAbove(window: XWindow, display: Xlib.display.Display):
    """
    Set _NET_WM_STATE to _NET_WM_STATE_ABOVE, before mapping, so the WM keeps the window on top of all others
    """
    above = display.get_atom(Props.State.ABOVE.value)
    changeProperty(window, Props.Window.WM_STATE.value, [above], display, Xlib.Xatom.ATOM)
    logger.debug("Set _NET_WM_STATE_ABOVE hint for window 0x%x", window.id)
