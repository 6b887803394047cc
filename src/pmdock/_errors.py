#!/usr/bin/python
# -*- coding: utf-8 -*-


class PanelError(Exception):
    """Base class for unrecoverable panel errors. main() turns these into exit status 1"""


class ConfigError(PanelError):
    """Panel configuration is invalid or incomplete"""


class ImageLoadError(PanelError):
    """An image file could not be opened or decoded"""
