#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import select
import signal
import socket
import sys
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

import Xlib.error
import Xlib.X

if TYPE_CHECKING:
    from ._main import PmDock

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class SignalMonitor:
    """
    Turn asynchronous signals into notifications consumed by the event loop.

    Handlers only record the signal number. A socket pair registered as signal wake-up fd makes the event loop
    return from select() as soon as a signal arrives, so it can act on it on its next iteration
    """

    def __init__(self, signals: Iterable[int] = TERMINATION_SIGNALS):
        self._signals = tuple(signals)
        self._pending: List[int] = []
        self._reader: Optional[socket.socket] = None
        self._writer: Optional[socket.socket] = None
        self._previousWakeupFd = -1

    def install(self):
        self._reader, self._writer = socket.socketpair()
        self._reader.setblocking(False)
        self._writer.setblocking(False)
        self._previousWakeupFd = signal.set_wakeup_fd(self._writer.fileno())
        for signum in self._signals:
            signal.signal(signum, self._handler)

    def uninstall(self):
        for signum in self._signals:
            signal.signal(signum, signal.SIG_DFL)
        signal.set_wakeup_fd(self._previousWakeupFd)
        if self._reader is not None:
            self._reader.close()
            self._writer.close()
            self._reader = self._writer = None

    def fileno(self) -> int:
        return self._reader.fileno() if self._reader is not None else -1

    def _handler(self, signum, frame):
        self._pending.append(signum)

    def drain(self):
        # Empty the wake-up socket; signal numbers are already recorded by the handler
        if self._reader is None:
            return
        try:
            while self._reader.recv(512):
                pass
        except BlockingIOError:
            pass

    def popPending(self) -> List[int]:
        pending, self._pending = self._pending, []
        return pending


class EventDispatcher:
    """
    Single-threaded blocking loop, handling X events one at a time:

        - CreateNotify: offered to the dockapp swallower
        - Expose: tiles redraw
        - ButtonPress: launcher command spawn (not waited for)

    It also installs the handler for asynchronous X protocol errors and handles the loss of the display
    connection, as well as termination signals (see SignalMonitor)

    :param app: panel application context
    """

    def __init__(self, app: PmDock, signals: Optional[SignalMonitor] = None):
        self._app = app
        self._display = app.display
        self._signals = signals or SignalMonitor()

    def installHandlers(self):
        self._display.set_error_handler(self.handleProtocolError)
        self._signals.install()

    def handleProtocolError(self, error: Xlib.error.XError, request: Any = None):
        """
        Handle X errors for requests not waiting for a reply. These are expected when racing with a WM or with
        a dockapp that closed early, so they never stop the panel
        """
        if isinstance(error, Xlib.error.BadWindow):
            return
        logger.debug("X11 Error: %s", error)

    def handleConnectionError(self, error: Exception):
        """
        The display connection is lost: terminate all children and exit with failure status
        """
        logger.debug("X11 IO Error: %s", error)
        self._app.supervisor.terminateAll(self._app.tiles)
        sys.exit(1)

    def handleSignals(self):
        for signum in self._signals.popPending():
            logger.debug("Received signal %d, exiting", signum)
            self._app.supervisor.terminateAll(self._app.tiles)
            sys.exit(0)

    def dispatch(self, event: Any):
        if event.type == Xlib.X.CreateNotify:
            self._app.swallower.handleCreatedWindow(event.window)
        elif event.type == Xlib.X.Expose:
            self._app.panel.redraw(event.window)
        elif event.type == Xlib.X.ButtonPress:
            tile = self._app.panel.findLauncher(event.window)
            if tile is not None:
                self._app.supervisor.launch(tile)

    def waitForEvents(self):
        # Block until the X connection or the signal wake-up socket is readable. No timeout
        try:
            select.select([self._display.fileno(), self._signals.fileno()], [], [])
        except InterruptedError:
            pass
        self._signals.drain()

    def runOnce(self):
        self.handleSignals()
        if not self._display.pending_events():
            self.waitForEvents()
            return
        self.dispatch(self._display.next_event())

    def run(self):
        """Loop forever. Only a termination signal or the loss of the display connection end the process"""
        try:
            while True:
                self.runOnce()
        except Xlib.error.ConnectionClosedError as e:
            self.handleConnectionError(e)
