#!/usr/bin/python
# -*- coding: utf-8 -*-

__all__ = [
    "version", "main", "PmDock",
    "PanelConfig", "TileSpec", "parseArgs",
    "Tile", "TileKind", "getTilePosition", "getPanelSize", "getCenteredOffset", "getSwallowPlacement",
    "ProcessSupervisor", "DockappSwallower", "EventDispatcher", "PanelWindow",
    "PanelError", "ConfigError", "ImageLoadError"
]

__version__ = "0.1.0"


def version(numberOnly: bool = True) -> str:
    """Returns the current version of pmdock module, in the form ''x.x.xx'' as string"""
    return ("" if numberOnly else "PMDock-")+__version__


from ._errors import PanelError, ConfigError, ImageLoadError
from ._tiles import (Tile, TileKind, getTilePosition, getPanelSize, getCenteredOffset, getSwallowPlacement)
from ._config import PanelConfig, TileSpec, parseArgs
from ._supervisor import ProcessSupervisor
from ._swallow import DockappSwallower
from ._dispatcher import EventDispatcher
from ._panel import PanelWindow
from ._main import PmDock, main
