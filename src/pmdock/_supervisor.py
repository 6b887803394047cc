#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Dict, Iterable, List, Optional

from ._tiles import Tile, getDockappTiles

logger = logging.getLogger(__name__)

SHELL = "/bin/sh"


class ProcessSupervisor:
    """
    Start the commands of dockapp and launcher tiles as child processes, and signal them on shutdown.

    Commands are split into an argument vector and executed directly. Set ''useShell'' to run them through
    ''/bin/sh -c'' instead (needed for pipes, redirections, variables and the like in the command string).

    Children are not watched: a crashed dockapp is neither detected nor restarted
    """

    def __init__(self, useShell: bool = False):
        self.useShell = useShell
        self._children: Dict[int, subprocess.Popen] = {}

    def buildArgs(self, command: str) -> List[str]:
        if self.useShell:
            return [SHELL, "-c", command]
        return shlex.split(command)

    def spawn(self, command: str) -> Optional[subprocess.Popen]:
        """
        Start given command in a new child process.

        Failing to execute the command only affects that command. Any other failure to create the process
        (e.g. resources exhausted) is raised to the caller

        :param command: command string
        :return: Popen object or None if the command could not be executed
        """
        args = self.buildArgs(command)
        try:
            proc = subprocess.Popen(args, close_fds=True)
        except OSError as e:
            # Errors reported back by the child after fork carry the executable as filename
            if e.filename is None:
                raise
            logger.error("Failed to execute %s: %s", command, e)
            return None
        return proc

    def start(self, tile: Tile) -> Optional[int]:
        """
        Start the command of given tile and record its PID on it

        :return: PID of the child process or None if the command could not be executed
        """
        proc = self.spawn(tile.command)
        if proc is None:
            return None
        self._children[proc.pid] = proc
        tile.processId = proc.pid
        logger.debug("Started dockapp %s with pid %d", tile.command, proc.pid)
        return proc.pid

    def startDockapps(self, tiles: Iterable[Tile]):
        for tile in getDockappTiles(tiles):
            self.start(tile)

    def launch(self, tile: Tile):
        # Launcher clicks are fire-and-forget: the child is not tracked nor waited for
        proc = self.spawn(tile.command)
        if proc is not None:
            logger.debug("Launched %s with pid %d", tile.command, proc.pid)

    def terminateAll(self, tiles: Iterable[Tile]):
        """
        Send SIGTERM to the child process of every tile that has one still running. Does not wait for them to exit
        """
        logger.debug("Terminating dockapps")
        for tile in tiles:
            if not tile.processId:
                continue
            proc = self._children.get(tile.processId)
            if proc is None or proc.poll() is not None:
                continue
            try:
                proc.terminate()
            except ProcessLookupError:
                pass
