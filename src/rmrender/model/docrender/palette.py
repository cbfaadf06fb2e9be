'''
palette.py
Maps tablet ink colors to the colors used for rendering.

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

from PySide6.QtGui import QColor

from rmrender.errors import ValidationError
from rmrender.model.lines import BrushColor


def color_parse(value):
    # Accepts 'r,g,b', [r, g, b], '#rrggbb' or a QColor.
    if isinstance(value, QColor):
        return QColor(value)
    if isinstance(value, str) and ',' in value:
        value = value.split(',')
    if isinstance(value, (list, tuple)):
        try:
            c = [int(str(v).strip()) for v in value]
        except ValueError:
            raise ValidationError('invalid color {!r}'.format(value))
        if len(c) not in (3, 4) or not all(0 <= v <= 255 for v in c):
            raise ValidationError('invalid color {!r}'.format(value))
        return QColor(*c)
    color = QColor(str(value))
    if not color.isValid():
        raise ValidationError('invalid color {!r}'.format(value))
    return color


class Palette:
    # The tablet only knows black, gray and white. Those always resolve,
    # whether or not a caller's palette mentions them.
    default_colors = {
        BrushColor.BLACK: QColor(0, 0, 0),
        BrushColor.GRAY: QColor(150, 150, 150),
        BrushColor.WHITE: QColor(255, 255, 255),
    }
    default_background = QColor(255, 255, 255)
    default_highlighter = QColor(150, 150, 150)

    def __init__(self, background=None, highlighter=None, colors=None):
        self.background = QColor(background) if background is not None \
            else QColor(self.default_background)
        self.highlighter = QColor(highlighter) if highlighter is not None \
            else QColor(self.default_highlighter)
        self.colors = {}
        for key, value in (colors or {}).items():
            if isinstance(key, str):
                key = BrushColor.from_name(key)
            if key not in BrushColor.names.values():
                # not one of ours
                continue
            self.colors[key] = color_parse(value)

    @classmethod
    def default(cls):
        return cls()

    @classmethod
    def from_dict(cls, adict):
        background = adict.get('background')
        highlighter = adict.get('highlighter')
        return cls(
            background=color_parse(background) if background else None,
            highlighter=color_parse(highlighter) if highlighter else None,
            colors=adict.get('colors') or {})

    @classmethod
    def from_settings(cls, settings, prefix='render'):
        # settings: a QSettings (or anything with .value(key))
        def load(key):
            value = settings.value('{}/{}'.format(prefix, key))
            if value is None or '' == value:
                return None
            return color_parse(value)

        colors = {}
        for name in BrushColor.names:
            loaded = load('color_' + name)
            if loaded is not None:
                colors[name] = loaded
        return cls(background=load('background'),
                   highlighter=load('highlighter'),
                   colors=colors)

    def color(self, brush_color):
        # Returns None if the color cannot be resolved.
        if brush_color in self.colors:
            return QColor(self.colors[brush_color])
        if brush_color in self.default_colors:
            return QColor(self.default_colors[brush_color])
        return None
