'''
document_renderer_page.py
Procedures for rendering document pages and page layers.

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

from PySide6.QtCore import Qt, QByteArray, QBuffer, QIODevice, QRectF
from PySide6.QtGui import QImage, QPainter, QTransform

from rmrender import log
from rmrender.errors import RenderError
from rmrender.model.content import FileType
from rmrender.model.display import DisplayRM


def image_to_png(qimage):
    ba = QByteArray()
    buf = QBuffer(ba)
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    if not qimage.save(buf, 'PNG'):
        raise RenderError('could not encode PNG')
    buf.close()
    return bytes(ba.data())


class DocumentPage:
    # A single page in a document. With overlay=True the page is drawn
    # on a transparent canvas without template, to be placed over the
    # page of a base PDF.
    def __init__(self, renderer, page_id, overlay=False):
        self.renderer = renderer
        self.doc = renderer.doc
        self.ctx = renderer.ctx
        self.uuid = page_id
        self.overlay = overlay
        self.display = DisplayRM

        # Raises NotFoundError for pages the document doesn't have.
        self.drawing = self.doc.get_drawing(page_id)
        self.num = self.doc.get_pages().index(page_id)

        self.template_name = None
        if not overlay and FileType.NOTEBOOK == self.doc.get_filetype():
            self.template_name = self.doc.get_template_for_page(page_id)
        self.template = None

        self.layers = []
        for i, layer in enumerate(self.drawing.layers):
            self.layers.append(DocumentPageLayer(self, i, layer))

    def prepare(self):
        # Everything that may fail on resources happens here, before a
        # canvas exists.
        self.drawing.validate()
        if self.template_name:
            self.template = self.ctx.load_template(self.template_name)
        for layer in self.layers:
            layer.prepare()

    def render_image(self):
        self.prepare()

        width, height = self.display.portrait_size
        qimage = QImage(width, height,
                        QImage.Format.Format_ARGB32_Premultiplied)
        if self.overlay:
            qimage.fill(Qt.GlobalColor.transparent)
        else:
            qimage.fill(self.ctx.palette.background)

        p = QPainter(qimage)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        if self.template is not None:
            p.drawImage(QRectF(0, 0, width, height), self.template)
        # Every layer paints, in stored order.
        for layer in self.layers:
            layer.render_strokes_to_painter(p, (width, height))
        p.end()

        log.debug('rendered page', self.num + 1, 'of', self.doc.uuid)
        return qimage

    def render_png(self):
        qimage = self.render_image()
        if not self.overlay:
            qimage = qimage.convertToFormat(QImage.Format.Format_RGB32)
        return image_to_png(qimage)


class DocumentPageLayer:
    def __init__(self, page, index, layer):
        self.page = page
        self.index = index
        self.name = layer.name
        self.strokes = layer.strokes
        # One resolved pen per stroke, set by prepare().
        self.pens = []

    def prepare(self):
        self.pens = []
        for stroke in self.strokes:
            self.pens.append(self.page.ctx.load_brush(stroke.pen,
                                                      stroke.color))

    def render_strokes_to_painter(self, painter, size):
        width, height = size
        tsfm = self.page.doc.get_tsfm()
        transform = QTransform(tsfm['m11'], tsfm['m12'], tsfm['m13'],
                               tsfm['m21'], tsfm['m22'], tsfm['m23'],
                               tsfm['m31'] * width,
                               tsfm['m32'] * height,
                               tsfm['m33'])
        o_transform = painter.transform()
        painter.setTransform(transform)

        # Paint strokes; later strokes cover earlier ones.
        for stroke, qpen in zip(self.strokes, self.pens):
            qpen.paint_stroke(painter, stroke)

        painter.setTransform(o_transform)
