'''
context.py
The render context owns the resources every render needs: the brush
sprite atlas, the background templates and the palette.

If several documents or pages are rendered, they should share one
context so the atlas and templates are only read once.

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

from pathlib import Path
import os
import threading

from rmrender import log
from rmrender.errors import RenderError
from rmrender.model.lines import BrushType
from rmrender.model.pens import *
from .document_renderer import DocRender
from .palette import Palette
from .sprites import SpriteAtlas, read_image

DEFAULT_DATA_DIR = './data'
DEFAULT_BRUSH = 'ballpoint'
TEMPLATE_DIR = 'templates'

# Tool code -> sprite name. Paintbrush and Calligraphy have no mask of
# their own yet.
brush_names = {
    BrushType.BALLPOINT: 'ballpoint',
    BrushType.BALLPOINT_V5: 'ballpoint',
    BrushType.PENCIL: 'pencil',
    BrushType.PENCIL_V5: 'pencil',
    BrushType.MECHANICAL_PENCIL: 'mech-pencil',
    BrushType.MECHANICAL_PENCIL_V5: 'mech-pencil',
    BrushType.MARKER: 'marker',
    BrushType.MARKER_V5: 'marker',
    BrushType.FINELINER: 'fineliner',
    BrushType.FINELINER_V5: 'fineliner',
    BrushType.HIGHLIGHTER: 'highlighter',
    BrushType.HIGHLIGHTER_V5: 'highlighter',
    BrushType.PAINTBRUSH: 'ballpoint',
    BrushType.PAINTBRUSH_V5: 'ballpoint',
    BrushType.CALLIGRAPHY_V5: 'ballpoint',
}

pen_lookup = {
    BrushType.BALLPOINT: BallpointPen,
    BrushType.BALLPOINT_V5: BallpointPen,
    BrushType.PENCIL: PencilPen,
    BrushType.PENCIL_V5: PencilPen,
    BrushType.MECHANICAL_PENCIL: MechanicalPencilPen,
    BrushType.MECHANICAL_PENCIL_V5: MechanicalPencilPen,
    BrushType.MARKER: MarkerPen,
    BrushType.MARKER_V5: MarkerPen,
    BrushType.FINELINER: FinelinerPen,
    BrushType.FINELINER_V5: FinelinerPen,
    BrushType.HIGHLIGHTER: HighlighterPen,
    BrushType.HIGHLIGHTER_V5: HighlighterPen,
    BrushType.PAINTBRUSH: PaintbrushPen,
    BrushType.PAINTBRUSH_V5: PaintbrushPen,
    BrushType.ERASER: EraserPen,
    BrushType.ERASE_AREA: EraseAreaPen,
}


class RenderContext:
    def __init__(self, data_dir, palette):
        # No I/O here; the caches fill on first use.
        self.data_dir = Path(data_dir)
        self.palette = palette

        self._sprites = None
        self._sprite_mx = threading.Lock()
        self._brushes = {}

        self._templates = {}
        self._template_mx = threading.Lock()

    @classmethod
    def default(cls):
        data_dir = os.environ.get('RMRENDER_DATA') or DEFAULT_DATA_DIR
        return cls(data_dir, Palette.default())

    def __repr__(self):
        return '<RenderContext {}>'.format(self.data_dir)

    def load_brush(self, pen, color):
        # Returns a pen for the tool code and ink color. Unknown tool codes
        # get the GenericPen; unknown colors are an error.
        if pen in (BrushType.HIGHLIGHTER, BrushType.HIGHLIGHTER_V5):
            # The highlighter ignores the recorded ink color.
            col = self.palette.highlighter
        elif BrushType.ERASER == pen:
            col = self.palette.background
        else:
            col = self.palette.color(color)
            if col is None:
                raise RenderError('invalid color {!r}'.format(color))

        key = (pen, color)
        with self._sprite_mx:
            if key in self._brushes:
                return self._brushes[key]
            name = brush_names.get(pen, DEFAULT_BRUSH)
            pen_class = pen_lookup.get(pen)
            if pen_class is None:
                log.warning('unsupported brush type {}, using {} mask'.format(
                    pen, name))
                pen_class = GenericPen

            mask = None
            if pen_class.uses_mask:
                mask = self._load_brush_mask(name)
            brush = pen_class(col, mask=mask)
            self._brushes[key] = brush
            return brush

    def load_brush_mask(self, name):
        with self._sprite_mx:
            return self._load_brush_mask(name)

    def _load_brush_mask(self, name):
        # Caller holds _sprite_mx.
        if self._sprites is None:
            self._sprites = SpriteAtlas.from_dir(self.data_dir)
            log.debug('loaded sprites', self._sprites.names())
        return self._sprites.get(name)

    def load_template(self, name):
        with self._template_mx:
            cached = self._templates.get(name)
            if cached is not None:
                return cached
            path = self.data_dir / Path(TEMPLATE_DIR) / Path(name + '.png')
            img = read_image(path)
            self._templates[name] = img
            return img

    def page(self, doc, page_id, sink):
        # Draws a single page to a PNG and writes it to sink.
        return DocRender(doc, self).render_page_png(page_id, sink)

    def pdf(self, doc, sink):
        return DocRender(doc, self).render_pdf(sink)

    def pdf_page(self, doc, page_id, sink):
        return DocRender(doc, self).render_pdf_page(page_id, sink)
