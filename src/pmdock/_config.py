#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import shlex
import sys
from typing import List, NamedTuple, Optional, Sequence

from ._errors import ConfigError
from ._tiles import TileKind

DEFAULT_BG_PATH = "tile-default.png"
DEFAULT_TILE_SIZE = 64
MAX_HINT_MASK = 0xFFFFFFFF

# Swallowing delays, in seconds. Timing-sensitive: some WMs need longer pauses to release new windows
ICON_POLL_ATTEMPTS = 2
ICON_POLL_DELAY = 0.1
WM_GRACE_DELAY = 0.1
WM_SETTLE_DELAY = 0.05

USAGE = """\
Usage: pmdock [OPTIONS]

Options:
  -a            Show on all virtual desktops
  -A            Show on top of all windows
  -x POSITION   X coordinate (default: 0)
  -y POSITION   Y coordinate (default: 0)
  -s SIZE       Tile size in pixels (default: 64)
  -b IMAGE      Tile background image (default: tile-default.png)
  -H            Use horizontal layout
  -D DECOR      Window decorations hints (default: 0x00)
  -f FUNCS      Window functions hints (default: 0x00)
  -d            Daemonize after swallowing all dockapps
  -r NAME       Resource name for dockapp in the next tile
  -i ICON       Icon path for launcher in the next tile
  -c COMMAND    Command to execute in the next tile
  -t TYPE       Add tile (dockapp or launcher)
  -S, --shell   Run commands through /bin/sh -c instead of splitting them into arguments
  -v            Show debug messages
  -h            Display this help message

Swallowing delays:
  --icon-poll-attempts N   Times to look for a dockapp icon window (default: 2)
  --icon-poll-delay SECS   Pause between icon window lookups (default: 0.1)
  --wm-delay SECS          Pause after detecting a window manager (default: 0.1)
  --settle-delay SECS      Pauses while moving windows away from a window manager (default: 0.05)
"""


class TileSpec(NamedTuple):
    """One tile definition, as given on the command line"""
    kind: TileKind
    command: str
    resourceName: Optional[str] = None
    iconPath: Optional[str] = None


class PanelConfig:
    """
    Panel settings, built once from the command line (see parseArgs())
    """

    def __init__(self, tiles: Optional[List[TileSpec]] = None, tileSize: int = DEFAULT_TILE_SIZE,
                 horizontal: bool = False, x: int = 0, y: int = 0, backgroundPath: str = DEFAULT_BG_PATH,
                 allDesktops: bool = False, aboveAll: bool = False, mwmDecorations: int = 0,
                 mwmFunctions: int = 0, daemonMode: bool = False, verbose: bool = False, useShell: bool = False,
                 iconPollAttempts: int = ICON_POLL_ATTEMPTS, iconPollDelay: float = ICON_POLL_DELAY,
                 wmGraceDelay: float = WM_GRACE_DELAY, wmSettleDelay: float = WM_SETTLE_DELAY):
        self.tiles: List[TileSpec] = list(tiles or [])
        self.tileSize = tileSize
        self.horizontal = horizontal
        self.x = x
        self.y = y
        self.backgroundPath = backgroundPath
        self.allDesktops = allDesktops
        self.aboveAll = aboveAll
        self.mwmDecorations = mwmDecorations
        self.mwmFunctions = mwmFunctions
        self.daemonMode = daemonMode
        self.verbose = verbose
        self.useShell = useShell
        self.iconPollAttempts = iconPollAttempts
        self.iconPollDelay = iconPollDelay
        self.wmGraceDelay = wmGraceDelay
        self.wmSettleDelay = wmSettleDelay

    def __repr__(self):
        return '%s(tiles=%s, tileSize=%s, horizontal=%s)' % (self.__class__.__name__, len(self.tiles),
                                                              self.tileSize, self.horizontal)

    def validate(self):
        """
        Check the settings can make a working panel

        :raises ConfigError: describing the first problem found
        """
        if not self.tiles:
            raise ConfigError("No tiles specified")
        if self.tileSize <= 0:
            raise ConfigError("Invalid tile size: %s" % self.tileSize)
        for spec in self.tiles:
            if spec.kind == TileKind.DOCKAPP and not spec.resourceName:
                raise ConfigError("Dockapp tile requires a resource name")
            if spec.kind == TileKind.LAUNCHER and not spec.iconPath:
                raise ConfigError("Launcher tile requires an icon")
            if not spec.command:
                raise ConfigError("Tile requires a command")
            if self.useShell:
                continue
            try:
                argsList = shlex.split(spec.command)
            except ValueError as e:
                raise ConfigError("Invalid command '%s': %s" % (spec.command, e))
            if not argsList:
                raise ConfigError("Empty command for %s tile" % spec.kind.name.lower())


class _ArgumentParser(argparse.ArgumentParser):

    def error(self, message: str):
        # Configuration errors print the whole usage text and exit with status 1, before touching the display
        self.print_help(sys.stderr)
        self.exit(1, "pmdock (ERROR): %s\n" % message)

    def format_help(self) -> str:
        return USAGE

    def print_help(self, file=None):
        # Help goes to stderr too, the same as on errors
        super().print_help(file if file is not None else sys.stderr)


class _PendingAction(argparse.Action):
    # -r/-i/-c only stage a value for the tile closed by the next -t

    def __call__(self, parser, namespace, values, option_string=None):
        pending = dict(getattr(namespace, "pending", None) or {})
        pending[self.dest] = values
        setattr(namespace, "pending", pending)


class _TileAction(argparse.Action):

    def __call__(self, parser, namespace, values, option_string=None):
        pending = getattr(namespace, "pending", None) or {}
        command = pending.get("command")
        if not command:
            raise argparse.ArgumentError(self, "-t requires preceding -c to specify command")

        if values == "dockapp":
            resourceName = pending.get("resourceName")
            if not resourceName:
                raise argparse.ArgumentError(self, "dockapp type requires preceding -r to specify resource name")
            spec = TileSpec(TileKind.DOCKAPP, command, resourceName=resourceName)
        elif values == "launcher":
            iconPath = pending.get("iconPath")
            if not iconPath:
                raise argparse.ArgumentError(self, "launcher type requires preceding -i to specify icon")
            spec = TileSpec(TileKind.LAUNCHER, command, iconPath=iconPath)
        else:
            raise argparse.ArgumentError(self, "invalid type '%s' (must be 'dockapp' or 'launcher')" % values)

        tiles = list(getattr(namespace, self.dest, None) or [])
        tiles.append(spec)
        setattr(namespace, self.dest, tiles)
        setattr(namespace, "pending", {})


def _tileSize(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        size = 0
    if size <= 0:
        raise argparse.ArgumentTypeError("Invalid tile size: %s" % value)
    return size


def _hintMask(value: str) -> int:
    # Same bases as strtoul(..., 0): 0x.. hex, 0.. octal, decimal otherwise. 0o.. is accepted too
    try:
        if len(value) > 1 and value.startswith("0") and value[1].isdigit():
            mask = int(value, 8)
        else:
            mask = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError("Invalid hints mask: %s" % value)
    # Sent as a 32-bit CARDINAL in _MOTIF_WM_HINTS
    if mask < 0 or mask > MAX_HINT_MASK:
        raise argparse.ArgumentTypeError("Invalid hints mask: %s" % value)
    return mask


def _delay(value: str) -> float:
    try:
        secs = float(value)
    except ValueError:
        secs = -1.0
    if secs < 0:
        raise argparse.ArgumentTypeError("Invalid delay: %s" % value)
    return secs


def _attempts(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        count = 0
    if count <= 0:
        raise argparse.ArgumentTypeError("Invalid number of attempts: %s" % value)
    return count


def buildParser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog="pmdock", add_help=True, allow_abbrev=False)
    parser.add_argument("-a", dest="allDesktops", action="store_true")
    parser.add_argument("-A", dest="aboveAll", action="store_true")
    parser.add_argument("-x", dest="x", type=int, default=0)
    parser.add_argument("-y", dest="y", type=int, default=0)
    parser.add_argument("-s", dest="tileSize", type=_tileSize, default=DEFAULT_TILE_SIZE)
    parser.add_argument("-b", dest="backgroundPath", default=DEFAULT_BG_PATH)
    parser.add_argument("-H", dest="horizontal", action="store_true")
    parser.add_argument("-D", dest="mwmDecorations", type=_hintMask, default=0)
    parser.add_argument("-f", dest="mwmFunctions", type=_hintMask, default=0)
    parser.add_argument("-d", dest="daemonMode", action="store_true")
    parser.add_argument("-r", dest="resourceName", action=_PendingAction)
    parser.add_argument("-i", dest="iconPath", action=_PendingAction)
    parser.add_argument("-c", dest="command", action=_PendingAction)
    parser.add_argument("-t", dest="tiles", action=_TileAction, default=[])
    parser.add_argument("-S", "--shell", dest="useShell", action="store_true")
    parser.add_argument("-v", dest="verbose", action="store_true")
    parser.add_argument("--icon-poll-attempts", dest="iconPollAttempts", type=_attempts, default=ICON_POLL_ATTEMPTS)
    parser.add_argument("--icon-poll-delay", dest="iconPollDelay", type=_delay, default=ICON_POLL_DELAY)
    parser.add_argument("--wm-delay", dest="wmGraceDelay", type=_delay, default=WM_GRACE_DELAY)
    parser.add_argument("--settle-delay", dest="wmSettleDelay", type=_delay, default=WM_SETTLE_DELAY)
    return parser


def parseArgs(argv: Optional[Sequence[str]] = None) -> PanelConfig:
    """
    Build the panel configuration from command-line arguments.

    Tiles are defined in order by groups of options: -r (dockapp resource name) or -i (launcher icon), then -c
    (command), closed by -t (tile type). Any error prints the usage text and exits with status 1

    :param argv: arguments, without the program name. Defaults to sys.argv[1:]
    :return: PanelConfig
    """
    parser = buildParser()
    args = parser.parse_args(argv)

    config = PanelConfig(tiles=args.tiles, tileSize=args.tileSize, horizontal=args.horizontal, x=args.x, y=args.y,
                         backgroundPath=args.backgroundPath, allDesktops=args.allDesktops, aboveAll=args.aboveAll,
                         mwmDecorations=args.mwmDecorations, mwmFunctions=args.mwmFunctions,
                         daemonMode=args.daemonMode, verbose=args.verbose, useShell=args.useShell,
                         iconPollAttempts=args.iconPollAttempts, iconPollDelay=args.iconPollDelay,
                         wmGraceDelay=args.wmGraceDelay, wmSettleDelay=args.wmSettleDelay)
    try:
        config.validate()
    except ConfigError as e:
        parser.error(str(e))
    return config
