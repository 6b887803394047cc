#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import os
import signal
import sys

logger = logging.getLogger(__name__)

HANDSHAKE_SIGNAL = signal.SIGUSR1
_WAIT_SIGNALS = {HANDSHAKE_SIGNAL, signal.SIGCHLD}


def daemonize() -> int:
    """
    Fork the panel into the background. The starting process waits until the panel signals that all dockapps
    are swallowed (see notifyParent()), then exits with status 0. This lets scripts starting the panel continue
    only once it is fully set up.

    Only the child returns from this function, detached in a new session, with stdin on /dev/null

    :return: PID of the waiting parent process, to be passed to notifyParent()
    """
    # Blocked before forking, so a handshake sent early is kept pending instead of lost
    signal.pthread_sigmask(signal.SIG_BLOCK, _WAIT_SIGNALS)
    pid = os.fork()

    if pid > 0:
        waitForHandshake(pid)

    parentPid = os.getppid()
    signal.pthread_sigmask(signal.SIG_UNBLOCK, _WAIT_SIGNALS)

    os.setsid()
    fd = os.open(os.devnull, os.O_RDWR)
    os.dup2(fd, 0)
    if fd > 2:
        os.close(fd)

    logger.debug("Daemonized child process %d", os.getpid())
    return parentPid


def waitForHandshake(childPid: int):
    """
    Block the parent process until the child either sends the handshake (exit 0) or dies (exit 1). Never returns
    """
    while True:
        signum = signal.sigwait(_WAIT_SIGNALS)
        if signum == HANDSHAKE_SIGNAL:
            logger.debug("Exiting parent process")
            sys.exit(0)
        pid, status = os.waitpid(childPid, os.WNOHANG)
        if pid == childPid:
            logger.error("Panel process %d exited before swallowing all dockapps", childPid)
            sys.exit(1)


def notifyParent(parentPid: int):
    os.kill(parentPid, HANDSHAKE_SIGNAL)
