#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Optional

from PIL import Image, UnidentifiedImageError
from pyrect import Size

from ._errors import ImageLoadError
from ._tiles import getCenteredOffset

# put_pil_image() sends RGB images as ZPixmap data of this depth
RGB_DEPTH = 24


def loadImage(path: str) -> Image.Image:
    """
    Load and decode an image file

    :param path: image file path (any format supported by Pillow)
    :return: decoded image, in RGBA mode
    """
    try:
        with Image.open(path) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError("Failed to load image %s: %s" % (path, e)) from e


def decodedSize(image: Image.Image) -> Size:
    width, height = image.size
    return Size(width, height)


def clipToTile(image: Image.Image, tileSize: int) -> Image.Image:
    # Pixels beyond the tile are not drawn, the same as rendering into a tile-sized window
    width, height = image.size
    if width <= tileSize and height <= tileSize:
        return image
    return image.crop((0, 0, min(width, tileSize), min(height, tileSize)))


def composeTile(background: Image.Image, tileSize: int, icon: Optional[Image.Image] = None) -> Image.Image:
    """
    Build the content of one tile: the background drawn at the tile origin and, if given, the icon
    alpha-blended on top of it, centered (or at the origin on the axes where it is larger than the tile)

    :return: tileSize x tileSize RGBA image
    """
    canvas = Image.new("RGBA", (tileSize, tileSize))
    canvas.paste(clipToTile(background, tileSize), (0, 0))
    if icon is not None:
        x, y = getCenteredOffset(decodedSize(icon), tileSize)
        canvas.alpha_composite(clipToTile(icon, tileSize), dest=(x, y))
    return canvas


def renderOnto(drawable: Any, gc: Any, image: Image.Image, x: int, y: int):
    """
    Draw given image onto an X drawable (window or pixmap)

    :param drawable: Xlib drawable object
    :param gc: graphics context created for the drawable
    :param image: image to draw
    :param x: left position inside the drawable
    :param y: top position inside the drawable
    """
    # put_pil_image() only handles bitmaps, greyscale and RGB images, and splits large requests by itself
    drawable.put_pil_image(gc, x, y, image.convert("RGB"))
