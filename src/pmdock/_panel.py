#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import Xlib.display
import Xlib.X
from PIL import Image
from Xlib.xobject.drawable import Window as XWindow

from ._config import PanelConfig
from ._images import RGB_DEPTH, composeTile, renderOnto
from ._props import PANEL_NAME, setClassHint, setDesktop, setMotifHints, setStateAbove
from ._tiles import Tile, getLauncherTiles, getPanelSize, getTilePosition, getTileRect

logger = logging.getLogger(__name__)

PANEL_EVENT_MASK = Xlib.X.ExposureMask | Xlib.X.StructureNotifyMask
LAUNCHER_EVENT_MASK = Xlib.X.ExposureMask | Xlib.X.ButtonPressMask


def createSimpleWindow(parent: XWindow, screen: Any, x: int, y: int, width: int, height: int) -> XWindow:
    # Same as XCreateSimpleWindow(): no border, white background, attributes copied from parent
    return parent.create_window(x, y, width, height, 0, Xlib.X.CopyFromParent,
                                window_class=Xlib.X.InputOutput,
                                visual=Xlib.X.CopyFromParent,
                                border_pixel=screen.black_pixel,
                                background_pixel=screen.white_pixel)


class PanelWindow:
    """
    The panel top-level window, holding one tile per dockapp or launcher.

    Dockapp tiles are drawn directly on the panel window (swallowed icon windows are placed on top of them).
    Launcher tiles get their own child window, so clicks on them can be told apart

    :param display: display connection
    :param screen: screen struct the panel is shown on
    :param config: panel configuration
    :param tiles: all panel tiles, in index order
    :param background: tile background image, shared by all tiles
    """

    def __init__(self, display: Xlib.display.Display, screen: Any, config: PanelConfig, tiles: List[Tile],
                 background: Image.Image):
        self._display = display
        self._screen = screen
        self._config = config
        self._tiles = tiles
        self._background = background
        self._tileSize = config.tileSize
        self._horizontal = config.horizontal
        self.xWindow: Optional[XWindow] = None
        self._gc: Optional[Any] = None
        self._bgTile = composeTile(background, self._tileSize)
        self._launcherImages: Dict[int, Image.Image] = {}

    @property
    def id(self) -> int:
        return self.xWindow.id if self.xWindow is not None else 0

    def create(self) -> XWindow:
        """
        Create and map the panel window, setting its hints before mapping so the WM gets them right from start
        """
        width, height = getPanelSize(len(self._tiles), self._tileSize, self._horizontal)
        x, y = self._config.x, self._config.y

        win = createSimpleWindow(self._screen.root, self._screen, x, y, width, height)
        self.xWindow = win

        win.set_wm_name(PANEL_NAME)
        setMotifHints(win, self._display, self._config.mwmFunctions, self._config.mwmDecorations)
        setClassHint(win)

        if self._config.aboveAll:
            setStateAbove(win, self._display)

        if self._config.allDesktops:
            setDesktop(win, self._display)

        win.map()
        # Some WMs place new windows at their will; ask again for the configured geometry
        win.configure(x=x, y=y, width=width, height=height)
        win.change_attributes(event_mask=PANEL_EVENT_MASK)
        self._gc = win.create_gc(foreground=self._screen.black_pixel, background=self._screen.white_pixel)

        if self._screen.root_depth != RGB_DEPTH:
            logger.warning("Screen depth is %d bits, tiles are drawn as %d-bit images and may not show",
                           self._screen.root_depth, RGB_DEPTH)

        logger.debug("Created dock window 0x%x at %dx%d+%d+%d", win.id, width, height, x, y)
        return win

    def createLaunchers(self):
        """
        Create a tile-sized child window for every launcher tile, and map it. Launchers need no swallowing
        """
        for tile in getLauncherTiles(self._tiles):
            rect = getTileRect(tile.index, self._tileSize, self._horizontal)
            win = createSimpleWindow(self.xWindow, self._screen, rect.left, rect.top, rect.width, rect.height)
            tile.assignWindow(win)
            win.change_attributes(event_mask=LAUNCHER_EVENT_MASK)
            win.map()
            self._launcherImages[tile.index] = composeTile(self._background, self._tileSize, tile.icon)
            logger.debug("Created launcher window 0x%x at %dx%d", win.id, rect.left, rect.top)

    def findLauncher(self, window: XWindow) -> Optional[Tile]:
        for tile in self._tiles:
            if tile.isLauncher and tile.window is not None and tile.window.id == window.id:
                return tile
        return None

    def redraw(self, window: XWindow):
        """
        Paint the tiles shown on given window: the background on every non-launcher tile for the panel window,
        background and icon for a launcher window. Other windows (e.g. swallowed dockapps) draw themselves
        """
        if self.xWindow is None:
            return

        if window.id == self.xWindow.id:
            for tile in self._tiles:
                if tile.isLauncher:
                    continue
                pos = getTilePosition(tile.index, self._tileSize, self._horizontal)
                renderOnto(self.xWindow, self._gc, self._bgTile, pos.x, pos.y)
            return

        tile = self.findLauncher(window)
        if tile is not None:
            renderOnto(tile.window, self._gc, self._launcherImages[tile.index], 0, 0)
