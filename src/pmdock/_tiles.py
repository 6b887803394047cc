#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

from enum import IntEnum
from typing import Any, Iterable, List, Optional, Tuple

from PIL import Image
from pyrect import Point, Rect, Size

from ._errors import PanelError


class TileKind(IntEnum):
    DOCKAPP = 0
    LAUNCHER = 1


class Tile:
    """
    One fixed-size cell of the panel, hosting exactly one dockapp or launcher.

    Apart from the constructor arguments, these values are filled at runtime:

    - window: X-Window object embedded in the tile. For dockapps it is the swallowed icon window, for launchers
      the child window created at startup. ''None'' means the tile is not filled yet

    - processId: PID of the child process running the tile command, or ''None'' if not started
    """

    def __init__(self, index: int, kind: TileKind, command: str, resourceName: Optional[str] = None,
                 icon: Optional[Image.Image] = None):
        self.index = index
        self.kind = kind
        self.command = command
        self.resourceName = resourceName
        self.icon = icon
        self.window: Optional[Any] = None
        self.processId: Optional[int] = None

    def __repr__(self):
        return '%s(index=%s, kind=%s, command=%r)' % (self.__class__.__name__, self.index, self.kind.name,
                                                       self.command)

    @property
    def isDockapp(self) -> bool:
        return self.kind == TileKind.DOCKAPP

    @property
    def isLauncher(self) -> bool:
        return self.kind == TileKind.LAUNCHER

    @property
    def isFilled(self) -> bool:
        """''True'' once a window has been embedded in this tile"""
        return self.window is not None

    def assignWindow(self, window: Any):
        """
        Embed given window in this tile. A tile window is set once and never replaced

        :param window: X-Window object (dockapp icon window or launcher window)
        """
        if self.window is not None:
            raise PanelError("Tile %d already holds window 0x%x" % (self.index, self.window.id))
        self.window = window

    def matches(self, resourceName: str) -> bool:
        # Exact string equality, only for dockapps still waiting for their window
        return self.isDockapp and not self.isFilled and self.resourceName == resourceName


def getTilePosition(index: int, tileSize: int, horizontal: bool) -> Point:
    """
    Get the top-left offset of the tile at given index, relative to the panel window

    :param index: 0-based tile index
    :param tileSize: tile edge length in pixels
    :param horizontal: ''True'' for a row layout, ''False'' for a column
    :return: Point(x, y)
    """
    if horizontal:
        return Point(index * tileSize, 0)
    return Point(0, index * tileSize)


def getTileRect(index: int, tileSize: int, horizontal: bool) -> Rect:
    x, y = getTilePosition(index, tileSize, horizontal)
    return Rect(x, y, tileSize, tileSize)


def getPanelSize(tileCount: int, tileSize: int, horizontal: bool) -> Size:
    """
    Get the total size of the panel window: ''tileCount'' tiles along the layout axis and one across

    :return: Size(width, height)
    """
    if horizontal:
        return Size(tileCount * tileSize, tileSize)
    return Size(tileSize, tileCount * tileSize)


def getCenteredOffset(size: Tuple[int, int], tileSize: int) -> Point:
    """
    Get the offset that centers an item of given size inside a tile.
    On each axis where the item is larger than the tile, the offset is clamped to the tile origin

    :param size: (width, height) of the item
    :param tileSize: tile edge length in pixels
    :return: Point(x, y) relative to the tile origin
    """
    width, height = size
    x = (tileSize - width) // 2 if width <= tileSize else 0
    y = (tileSize - height) // 2 if height <= tileSize else 0
    return Point(x, y)


def getSwallowPlacement(index: int, iconSize: Tuple[int, int], tileSize: int,
                        horizontal: bool) -> Tuple[Point, Point]:
    """
    Get where a swallowed dockapp goes inside the panel window.

    The icon window is centered in its tile. The main window is parked two tile lengths away on the cross axis,
    outside the visible panel area, since only the icon window is meant to be seen

    :return: (icon position, main window position) as Points relative to the panel window
    """
    tileX, tileY = getTilePosition(index, tileSize, horizontal)
    offX, offY = getCenteredOffset(iconSize, tileSize)
    icon = Point(tileX + offX, tileY + offY)
    if horizontal:
        main = Point(icon.x, tileSize * 2)
    else:
        main = Point(tileSize * 2, icon.y)
    return icon, main


def findUnfilledDockapp(tiles: Iterable[Tile], resourceName: str) -> Optional[Tile]:
    """
    Get the first tile, in index order, waiting for a dockapp window with given resource name

    :return: Tile or None (no unfilled dockapp tile matches)
    """
    for tile in tiles:
        if tile.matches(resourceName):
            return tile
    return None


def allDockappsSwallowed(tiles: Iterable[Tile]) -> bool:
    return all(tile.isFilled for tile in tiles if tile.isDockapp)


def getDockappTiles(tiles: Iterable[Tile]) -> List[Tile]:
    return [tile for tile in tiles if tile.isDockapp]


def getLauncherTiles(tiles: Iterable[Tile]) -> List[Tile]:
    return [tile for tile in tiles if tile.isLauncher]
