'''
sprites.py
This handles loading the sprite atlas that holds every brush mask.

rmrender draws reMarkable notebooks as images and PDF documents.
Copyright (C) 2020-23  Davis Remmel

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''

from PySide6.QtCore import Qt, QRect, QRectF
from PySide6.QtGui import QImage, QPainter
from pathlib import Path
import json

from rmrender import log
from rmrender.errors import RenderError

SPRITE_IMAGE = 'sprites.png'
SPRITE_INDEX = 'sprites.json'

ARGB = QImage.Format.Format_ARGB32_Premultiplied


def read_image(path):
    log.debug('read image from', path)
    img = QImage()
    if not Path(path).is_file() or not img.load(str(path)):
        raise RenderError('could not read image {}'.format(path))
    return img.convertToFormat(ARGB)


def sprite_rect(name, entry, bounds):
    # entry is [x0, y0, x1, y1], right and bottom edges exclusive.
    if not isinstance(entry, list) or 4 != len(entry) \
       or not all(type(v) is int for v in entry):
        raise RenderError('invalid sprite entry for brush {!r}'.format(name))
    x0, y0, x1, y1 = entry
    rect = QRect(x0, y0, x1 - x0, y1 - y0)
    if rect.isEmpty():
        raise RenderError('empty sprite entry for brush {!r}'.format(name))
    if not bounds.contains(rect):
        raise RenderError(
            'sprite bounds of {!r} not within spritesheet dimensions '
            '({}x{})'.format(name, bounds.width(), bounds.height()))
    return rect


class SpriteView:
    # A read-only window onto the atlas. Nothing is copied; the view
    # is only valid while the atlas it came from is alive.
    def __init__(self, atlas, rect):
        self.atlas = atlas
        self.rect = QRect(rect)

    def width(self):
        return self.rect.width()

    def height(self):
        return self.rect.height()

    def draw(self, painter, target):
        painter.drawImage(QRectF(target), self.atlas.image, QRectF(self.rect))

    def tinted(self, color):
        # Build a stamp of the given color whose coverage is the mask:
        # dark, opaque sprite pixels cover fully, light or transparent
        # ones not at all.
        w, h = self.width(), self.height()
        sprite = QImage(w, h, ARGB)
        sprite.fill(Qt.GlobalColor.transparent)
        p = QPainter(sprite)
        p.setCompositionMode(QPainter.CompositionMode.CompositionMode_Source)
        self.draw(p, QRectF(0, 0, w, h))
        p.end()

        coverage = sprite.convertToFormat(QImage.Format.Format_Grayscale8)
        coverage.invertPixels()

        stamp = QImage(w, h, ARGB)
        stamp.fill(color)
        stamp.setAlphaChannel(coverage)
        p = QPainter(stamp)
        p.setCompositionMode(
            QPainter.CompositionMode.CompositionMode_DestinationIn)
        p.drawImage(0, 0, sprite)
        p.end()
        return stamp.convertToFormat(ARGB)


class SpriteAtlas:
    def __init__(self, image, rects):
        self.image = image
        self.rects = rects

    @classmethod
    def from_dir(cls, data_dir):
        # All or nothing: a single bad entry fails the whole atlas.
        jsonpath = Path(data_dir) / Path(SPRITE_INDEX)
        log.debug('load sprite index from', jsonpath)
        try:
            with open(jsonpath, 'r') as f:
                index = json.load(f)
                f.close()
        except (OSError, ValueError) as e:
            raise RenderError(
                'could not read sprite index {}: {}'.format(jsonpath, e))
        if not isinstance(index, dict):
            raise RenderError('sprite index {} is not a mapping'.format(
                jsonpath))

        image = read_image(Path(data_dir) / Path(SPRITE_IMAGE))
        bounds = image.rect()
        rects = {}
        for name, entry in index.items():
            rects[name] = sprite_rect(name, entry, bounds)
        return cls(image, rects)

    def names(self):
        return sorted(self.rects)

    def get(self, name):
        if name not in self.rects:
            raise RenderError('no sprite image for brush {!r}'.format(name))
        return SpriteView(self, self.rects[name])
