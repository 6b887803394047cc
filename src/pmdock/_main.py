#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import sys
from typing import Any, List, Optional, Sequence

import Xlib.display
import Xlib.error
import Xlib.X
from PIL import Image

from ._config import PanelConfig, parseArgs
from ._daemon import daemonize, notifyParent
from ._dispatcher import EventDispatcher
from ._errors import PanelError
from ._images import loadImage
from ._panel import PanelWindow
from ._supervisor import ProcessSupervisor
from ._swallow import DockappSwallower
from ._tiles import Tile, TileKind

logger = logging.getLogger("pmdock")

LOG_FORMAT = "pmdock (%(levelname)s): %(message)s"


def configureLogging(verbose: bool = False):
    logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT, level=logging.DEBUG if verbose else logging.WARNING)


def buildTiles(config: PanelConfig) -> List[Tile]:
    """
    Build the panel tiles from their definitions, loading launcher icons

    :return: list of Tile objects, in index order
    """
    tiles: List[Tile] = []
    for index, spec in enumerate(config.tiles):
        if spec.kind == TileKind.LAUNCHER:
            tiles.append(Tile(index, spec.kind, spec.command, icon=loadImage(spec.iconPath)))
        else:
            tiles.append(Tile(index, spec.kind, spec.command, resourceName=spec.resourceName))
    return tiles


class PmDock:
    """
    Panel application context. Built once from the configuration, it owns the tiles and the display connection
    and is handed to the components working on them.

    Images are loaded on construction, so any error there happens before touching the display or forking

    :param config: panel configuration
    """

    def __init__(self, config: PanelConfig):
        config.validate()
        self.config = config
        self.tiles: List[Tile] = buildTiles(config)
        self.background: Image.Image = loadImage(config.backgroundPath)
        self.supervisor = ProcessSupervisor(useShell=config.useShell)
        self.parentPid: Optional[int] = None

        self.display: Optional[Xlib.display.Display] = None
        self.screen: Optional[Any] = None
        self.root: Optional[Any] = None
        self.panel: Optional[PanelWindow] = None
        self.swallower: Optional[DockappSwallower] = None
        self.dispatcher: Optional[EventDispatcher] = None
        self._handshakeSent = False

    def daemonize(self):
        self.parentPid = daemonize()

    def setupDisplay(self, displayName: Optional[str] = None):
        """
        Open the display connection and start listening to top-level windows creation on root
        """
        self.display = Xlib.display.Display(displayName)
        self.screen = self.display.screen()
        self.root = self.screen.root
        self.root.change_attributes(event_mask=Xlib.X.SubstructureNotifyMask)

    def createPanel(self):
        self.panel = PanelWindow(self.display, self.screen, self.config, self.tiles, self.background)
        self.panel.create()
        self.panel.createLaunchers()
        self.swallower = DockappSwallower(self.display, self.root, self.panel.xWindow, self.tiles,
                                          self.config.tileSize, self.config.horizontal,
                                          onComplete=self.onAllSwallowed,
                                          iconPollAttempts=self.config.iconPollAttempts,
                                          iconPollDelay=self.config.iconPollDelay,
                                          wmGraceDelay=self.config.wmGraceDelay,
                                          wmSettleDelay=self.config.wmSettleDelay)
        self.display.flush()

    def onAllSwallowed(self):
        # Daemon startup handshake: let the waiting parent exit, only once
        if self.parentPid is None or self._handshakeSent:
            return
        self._handshakeSent = True
        notifyParent(self.parentPid)

    def run(self, displayName: Optional[str] = None):
        """
        Set up the panel, start the dockapps and process events forever
        """
        self.setupDisplay(displayName)
        self.dispatcher = EventDispatcher(self)
        self.dispatcher.installHandlers()
        self.createPanel()
        self.supervisor.startDockapps(self.tiles)
        # A panel with launchers only is complete right away
        self.swallower.checkCompletion()
        self.dispatcher.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = parseArgs(argv)
    configureLogging(config.verbose)

    app: Optional[PmDock] = None
    try:
        app = PmDock(config)
        if config.daemonMode:
            app.daemonize()
        app.run()
    except Xlib.error.DisplayError as e:
        logger.error("Cannot open display: %s", e)
        return 1
    except PanelError as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("Failed to start process: %s", e)
        if app is not None:
            app.supervisor.terminateAll(app.tiles)
        return 1
    return 0
