'''
lines.py
This is the model for Lines, the decoded ink of a single page.

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

from collections import namedtuple

from rmrender.errors import ValidationError

MAX_LAYERS = 5

Layer = namedtuple('Layer', ['strokes', 'name'])

Stroke = namedtuple(
    'Stroke',
    ['pen', 'color', 'width', 'segments']
)

# direction is the pen tilt. width, when set, overrides the width that
# would be derived from pressure.
Segment = namedtuple(
    'Segment',
    ['x', 'y', 'speed', 'direction', 'width', 'pressure'],
    defaults=(0.0, 0.0, None, 1.0)
)


class BrushType:
    # Tool codes as written by the tablet. The first block is the
    # first (v3) set, the second block came with the v5 format.
    PAINTBRUSH = 0
    PENCIL = 1
    BALLPOINT = 2
    MARKER = 3
    FINELINER = 4
    HIGHLIGHTER = 5
    ERASER = 6
    MECHANICAL_PENCIL = 7
    ERASE_AREA = 8
    PAINTBRUSH_V5 = 12
    MECHANICAL_PENCIL_V5 = 13
    PENCIL_V5 = 14
    BALLPOINT_V5 = 15
    MARKER_V5 = 16
    FINELINER_V5 = 17
    HIGHLIGHTER_V5 = 18
    CALLIGRAPHY_V5 = 21


class BrushColor:
    BLACK = 0
    GRAY = 1
    WHITE = 2
    HIGHLIGHT_YELLOW = 3
    HIGHLIGHT_GREEN = 4
    HIGHLIGHT_PINK = 5
    BLUE = 6
    RED = 7
    HIGHLIGHT_GRAY = 8

    names = {
        'black': BLACK,
        'gray': GRAY,
        'white': WHITE,
        'highlight_yellow': HIGHLIGHT_YELLOW,
        'highlight_green': HIGHLIGHT_GREEN,
        'highlight_pink': HIGHLIGHT_PINK,
        'blue': BLUE,
        'red': RED,
        'highlight_gray': HIGHLIGHT_GRAY,
    }

    @classmethod
    def from_name(cls, name):
        # Returns None for names outside of the closed set.
        return cls.names.get(str(name).strip().lower().replace(' ', '_'))


def validate_layer_names(names):
    if names is None or 0 == len(names):
        raise ValidationError('no layers defined')
    if len(names) > MAX_LAYERS:
        raise ValidationError(
            'maximum number of layers exceeded ({} > {})'.format(
                len(names), MAX_LAYERS))
    for name in names:
        if not name:
            raise ValidationError('layer name must not be empty')


class Drawing:
    # The ink of one page: layers in paint order, each layer holding
    # its strokes in paint order.
    def __init__(self, layers=None):
        self.layers = list(layers or [])

    @classmethod
    def empty(cls):
        return cls([Layer(strokes=[], name='Layer 1')])

    @classmethod
    def from_strokes(cls, strokes, name='Layer 1'):
        return cls([Layer(strokes=list(strokes), name=name)])

    def validate(self):
        validate_layer_names([layer.name for layer in self.layers])

    def strokes(self):
        for layer in self.layers:
            for stroke in layer.strokes:
                yield stroke

    def bounding_rect(self):
        # (min_x, min_y, max_x, max_y) of every segment, or None when the
        # drawing holds no segments.
        xs = []
        ys = []
        for stroke in self.strokes():
            for segment in stroke.segments:
                xs.append(segment.x)
                ys.append(segment.y)
        if not len(xs):
            return None
        return (min(xs), min(ys), max(xs), max(ys))

    def __len__(self):
        return len(self.layers)
