#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

import Xlib.display
import Xlib.error
import Xlib.X
from Xlib.xobject.drawable import Window as XWindow

from ._config import ICON_POLL_ATTEMPTS, ICON_POLL_DELAY, WM_GRACE_DELAY, WM_SETTLE_DELAY
from ._props import getIconWindow, getResourceName, isWmRunning
from ._tiles import Tile, allDockappsSwallowed, findUnfilledDockapp, getSwallowPlacement

logger = logging.getLogger(__name__)


def mapRaised(window: XWindow):
    # Same as XMapRaised(): put the window on top of its siblings, then map it
    window.configure(stack_mode=Xlib.X.Above)
    window.map()


class DockappSwallower:
    """
    Embed dockapps into the panel window.

    A dockapp is recognized by the resource name of a newly created top-level window. Its icon window (announced
    in WM_HINTS, often some time after the main window is created) is what the user sees: it is centered in the
    matching tile, while the main window is reparented too, but parked outside the visible area of the panel.

    If a window manager is running, it may try to manage (and reparent into its own frame) the same windows. In
    that case both windows are first unmapped and reparented with some pauses in between, to let the WM release
    them. Then, whatever the WM did, windows are reparented again and mapped. This second pass is a heuristic
    that proved necessary with some WMs, not a protocol guarantee. Pauses can be tuned for slower WMs.

    :param display: display connection
    :param root: root window, where new top-level windows are notified
    :param panel: panel X-Window, the new parent of swallowed windows
    :param tiles: all panel tiles, in index order
    :param onComplete: invoked once, when the last dockapp tile is filled
    """

    def __init__(self, display: Xlib.display.Display, root: XWindow, panel: XWindow, tiles: List[Tile],
                 tileSize: int, horizontal: bool, onComplete: Optional[Callable[[], None]] = None,
                 iconPollAttempts: int = ICON_POLL_ATTEMPTS, iconPollDelay: float = ICON_POLL_DELAY,
                 wmGraceDelay: float = WM_GRACE_DELAY, wmSettleDelay: float = WM_SETTLE_DELAY):
        self._display = display
        self._root = root
        self._panel = panel
        self._tiles = tiles
        self._tileSize = tileSize
        self._horizontal = horizontal
        self._onComplete = onComplete
        self._iconPollAttempts = iconPollAttempts
        self._iconPollDelay = iconPollDelay
        self._wmGraceDelay = wmGraceDelay
        self._wmSettleDelay = wmSettleDelay
        self._completed = False

    @property
    def completed(self) -> bool:
        """''True'' once every dockapp tile holds its window"""
        return self._completed

    def handleCreatedWindow(self, window: XWindow) -> bool:
        """
        Check if a newly created window belongs to a dockapp still waiting to be swallowed, and swallow it

        :param window: window notified by CreateNotify on the root window
        :return: ''True'' if the window has been swallowed
        """
        resName = getResourceName(window)
        if resName is None:
            return False

        logger.debug("Created window 0x%x with res_name '%s'", window.id, resName)

        tile = findUnfilledDockapp(self._tiles, resName)
        if tile is None:
            return False
        return self.swallow(window, tile)

    def swallow(self, mainWindow: XWindow, tile: Tile) -> bool:
        """
        Reparent a dockapp main window and its icon window into the given tile

        :param mainWindow: dockapp top-level window
        :param tile: unfilled dockapp tile
        :return: ''True'' if the dockapp has been swallowed. If not, the tile remains unfilled
        """
        logger.debug("Swallowing dockapp with main window 0x%x at index %d", mainWindow.id, tile.index)

        wmRunning = isWmRunning(self._display, self._root)
        if wmRunning:
            logger.warning("Window manager detected, swallowing dockapp with workaround")
            # Give the WM time to handle the new window
            time.sleep(self._wmGraceDelay)

        iconWindow = self.discoverIconWindow(mainWindow)
        if iconWindow is None:
            logger.warning("Window 0x%x has no icon window, skipping", mainWindow.id)
            return False

        try:
            iconWindow.configure(border_width=0)
            geom = iconWindow.get_geometry()
        except Xlib.error.XError as e:
            logger.warning("Icon window 0x%x of window 0x%x went away: %s", iconWindow.id, mainWindow.id, e)
            return False

        logger.debug("Window 0x%x has size %dx%d, border %d, depth %d",
                     iconWindow.id, geom.width, geom.height, geom.border_width, geom.depth)

        iconPos, mainPos = getSwallowPlacement(tile.index, (geom.width, geom.height), self._tileSize,
                                               self._horizontal)

        if wmRunning:
            self._releaseFromWm(mainWindow, iconWindow, iconPos, mainPos)

        mainWindow.reparent(self._panel, mainPos.x, mainPos.y)
        iconWindow.reparent(self._panel, iconPos.x, iconPos.y)
        mapRaised(mainWindow)
        mapRaised(iconWindow)
        self._display.flush()

        tile.assignWindow(iconWindow)
        logger.debug("Swallowed window 0x%x at %dx%d", iconWindow.id, iconPos.x, iconPos.y)

        self.checkCompletion()
        return True

    def discoverIconWindow(self, mainWindow: XWindow) -> Optional[XWindow]:
        """
        Look for the icon window of a dockapp. Legacy dockapps set it after mapping their main window, so
        it is polled a few times

        :return: icon X-Window object or None if it was not found
        """
        for attempt in range(self._iconPollAttempts):
            try:
                iconWindow = getIconWindow(mainWindow)
            except Xlib.error.XError as e:
                logger.debug("Failed to get hints of window 0x%x: %s", mainWindow.id, e)
                return None
            if iconWindow is not None:
                return iconWindow
            if attempt < self._iconPollAttempts - 1:
                logger.debug("Waiting for icon window of 0x%x", mainWindow.id)
                time.sleep(self._iconPollDelay)
        return None

    def checkCompletion(self):
        """
        Once all dockapps are swallowed, stop listening to new windows on root and notify it, only once
        """
        if self._completed or not allDockappsSwallowed(self._tiles):
            return
        self._completed = True
        logger.debug("All dockapps swallowed")

        self._root.change_attributes(event_mask=Xlib.X.NoEventMask)
        self._display.flush()

        if self._onComplete is not None:
            self._onComplete()

    def _releaseFromWm(self, mainWindow: XWindow, iconWindow: XWindow, iconPos, mainPos):
        # Unmapping first keeps the WM from framing the windows and avoids flickering
        mainWindow.unmap()
        iconWindow.unmap()
        self._display.flush()
        time.sleep(self._wmSettleDelay)
        mainWindow.reparent(self._panel, mainPos.x, mainPos.y)
        iconWindow.reparent(self._panel, iconPos.x, iconPos.y)
        self._display.flush()
        time.sleep(self._wmSettleDelay)
