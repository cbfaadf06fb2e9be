'''
document_renderer.py
Primary logic for rendering documents.

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

from rmrender import log
from rmrender.errors import RenderError
from rmrender.model.content import FileType
from .document_renderer_page import DocumentPage

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPainter

from datetime import timezone
from pathlib import Path
import io
import os
import shutil
import tempfile
import pikepdf

# A4 in points
DEFAULT_PAGE_SIZE = (595.28, 841.89)
PRODUCER = 'rmrender'
TS_FORMAT = '%Y-%m-%d %H:%M:%S'
FOOTER_FONT = '/FRmFooter'
FOOTER_FONT_SIZE = 8
FOOTER_GRAY = 127 / 255
FOOTER_X = 24
FOOTER_Y = 12


def packed_bits(qimage, bytepp):
    # QImage pads each scanline to 32 bits; PDF image data is packed.
    width, height = qimage.width(), qimage.height()
    data = bytes(qimage.constBits())[:qimage.sizeInBytes()]
    bpl = qimage.bytesPerLine()
    if bpl == width * bytepp:
        return data
    return b''.join(data[y * bpl:y * bpl + width * bytepp]
                    for y in range(height))

def rgb_bits(qimage, alpha):
    if not alpha:
        # Opaque pages are flattened onto white.
        flat = QImage(qimage.width(), qimage.height(),
                      QImage.Format.Format_RGB888)
        flat.fill(Qt.GlobalColor.white)
        p = QPainter(flat)
        p.drawImage(0, 0, qimage)
        p.end()
        return packed_bits(flat, 3)
    # The soft mask carries the coverage, so the color channels must not
    # be premultiplied by it a second time.
    rgba = packed_bits(qimage.convertToFormat(QImage.Format.Format_RGBA8888),
                       4)
    rgb = bytearray(len(rgba) // 4 * 3)
    rgb[0::3] = rgba[0::4]
    rgb[1::3] = rgba[1::4]
    rgb[2::3] = rgba[2::4]
    return bytes(rgb)

def pdf_escape(text):
    # Footer text goes into a literal string drawn with a WinAnsi font.
    raw = text.encode('cp1252', errors='replace')
    return raw.replace(b'\\', b'\\\\') \
              .replace(b'(', b'\\(') \
              .replace(b')', b'\\)')

def as_utc(dt):
    # Naive timestamps are taken to be UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def write_sink(sink, data):
    # sink is a writable binary file object or a path. Paths are only
    # replaced once the complete output exists.
    if hasattr(sink, 'write'):
        sink.write(data)
        return
    filepath = Path(sink)
    th, tmp = tempfile.mkstemp(dir=str(filepath.parent) or None)
    os.close(th)
    with open(tmp, 'wb') as f:
        f.write(data)
        f.close()
    # Don't use pathlib.Path.replace() because it does not
    # work on Windows across drive letters.
    shutil.move(tmp, filepath)


class DocRender:
    def __init__(self, doc, ctx, page_size=DEFAULT_PAGE_SIZE,
                 margins=(0, 0)):
        self.doc = doc
        self.ctx = ctx
        self.page_size = page_size
        # (left, right) in points; the drawing fills the width between.
        self.margins = margins
        # Opened base PDFs; their pages are read until the output is saved.
        self.sources = []

    def render_page_png(self, page_id, sink):
        self.doc.content.validate()
        png = DocumentPage(self, page_id).render_png()
        write_sink(sink, png)
        return True

    def render_pdf_page(self, page_id, sink):
        # A single drawing on a single page, without footer or metadata.
        self.doc.content.validate()
        r_page = DocumentPage(self, page_id)
        base_pdf = pikepdf.new()
        try:
            pdf_page = base_pdf.add_blank_page(page_size=self.page_size)
            self.place_image(base_pdf, pdf_page, r_page.render_image(),
                             'ImPage0', alpha=False)
            self.save(base_pdf, sink)
        finally:
            self.cleanup(base_pdf)
        return True

    def render_pdf(self, sink):
        if FileType.EPUB == self.doc.get_filetype():
            raise RenderError(
                'render PDF not supported for file type epub ({})'.format(
                    self.doc.uuid))
        self.doc.validate()

        log.debug('render PDF for document', self.doc.uuid)
        base_pdf = pikepdf.new()
        try:
            if FileType.PDF == self.doc.get_filetype():
                self.overlay_pdf(base_pdf)
            else:
                self.drawings_pdf(base_pdf)
            self.add_footers(base_pdf)
            self.set_metadata(base_pdf)
            self.save(base_pdf, sink)
        finally:
            self.cleanup(base_pdf)
        log.info('rendered {} pages of {}'.format(
            self.doc.get_pages_len(), self.doc.visible_name))
        return True

    def drawings_pdf(self, base_pdf):
        # Notebook pages: the rendered page is the only content.
        for page_i, page_id in enumerate(self.doc.get_pages()):
            pdf_page = base_pdf.add_blank_page(page_size=self.page_size)
            r_page = DocumentPage(self, page_id)
            self.place_image(base_pdf, pdf_page, r_page.render_image(),
                             'ImPage{}'.format(page_i), alpha=False)

    def open_source(self):
        try:
            return pikepdf.open(io.BytesIO(self.doc.get_source_pdf()))
        except pikepdf.PdfError as e:
            raise RenderError('could not open source PDF of {}: {}'.format(
                self.doc.uuid, e))

    def overlay_pdf(self, base_pdf):
        # PDF-backed pages: each page starts as a copy of its base PDF
        # page and the ink is drawn over it.
        sources = self.sources
        sources.append(self.open_source())
        used = [set()]

        for page_i, page_id in enumerate(self.doc.get_pages()):
            basepdf_p = self.doc.get_redirection_for_page(page_i)
            if 0 <= basepdf_p:
                if basepdf_p >= len(sources[0].pages):
                    raise RenderError(
                        'page {} refers to missing source page {}'.format(
                            page_i + 1, basepdf_p + 1))
                # A source page shown twice needs a second, independent
                # copy, or both would share resources.
                n = 0
                while basepdf_p in used[n]:
                    n += 1
                    if n == len(sources):
                        sources.append(self.open_source())
                        used.append(set())
                used[n].add(basepdf_p)
                base_pdf.pages.append(sources[n].pages[basepdf_p])
            else:
                # Inserted on the tablet; give it a blank page the size
                # of the page before it.
                log.info('page {} has no source page, inserting blank'
                         .format(page_i + 1))
                if len(base_pdf.pages):
                    oldpp = base_pdf.pages[-1].obj
                    size = (abs(float(oldpp.MediaBox[2])
                                - float(oldpp.MediaBox[0])),
                            abs(float(oldpp.MediaBox[3])
                                - float(oldpp.MediaBox[1])))
                else:
                    size = self.page_size
                base_pdf.add_blank_page(page_size=size)

            pdf_page = base_pdf.pages[-1]
            # Keep whatever the source page does to the graphics state
            # inside its own q..Q.
            pdf_page.contents_add(b'q\n', prepend=True)
            pdf_page.contents_add(b'Q\n')

            r_page = DocumentPage(self, page_id, overlay=True)
            self.place_image(base_pdf, pdf_page, r_page.render_image(),
                             'ImPage{}Ink'.format(page_i), alpha=True)

    def image_xobject(self, base_pdf, qimage, alpha):
        width, height = qimage.width(), qimage.height()

        # pikepdf will automatically convert the opaque and alpha
        # streams to /FlateDecode filter.
        xobj = pikepdf.Stream(base_pdf, rgb_bits(qimage, alpha))
        xobj.Type = pikepdf.Name('/XObject')
        xobj.Subtype = pikepdf.Name('/Image')
        xobj.ColorSpace = pikepdf.Name('/DeviceRGB')
        xobj.BitsPerComponent = 8
        xobj.Width, xobj.Height = width, height
        xobj.Interpolate = False

        if alpha:
            alpha_qimage = qimage.convertToFormat(QImage.Format.Format_Alpha8)
            smask = pikepdf.Stream(base_pdf, packed_bits(alpha_qimage, 1))
            smask.Type = pikepdf.Name('/XObject')
            smask.Subtype = pikepdf.Name('/Image')
            smask.ColorSpace = pikepdf.Name('/DeviceGray')
            smask.BitsPerComponent = 8
            smask.Width, smask.Height = width, height
            smask.Interpolate = False
            xobj.SMask = smask
        return xobj

    def page_box(self, pdf_page):
        box = pdf_page.obj.get('/MediaBox')
        if box is None:
            return [0, 0, self.page_size[0], self.page_size[1]]
        box = [float(v) for v in box]
        return [min(box[0], box[2]), min(box[1], box[3]),
                max(box[0], box[2]), max(box[1], box[3])]

    def place_image(self, base_pdf, pdf_page, qimage, name, alpha):
        # The drawing is scaled to the usable page width; its height
        # follows from the aspect ratio.
        xobj_id = '/' + name
        xobj = self.image_xobject(base_pdf, qimage, alpha)

        page_obj = pdf_page.obj
        if '/Resources' not in page_obj:
            page_obj.Resources = pikepdf.Dictionary()
        if '/XObject' not in page_obj.Resources:
            page_obj.Resources.XObject = pikepdf.Dictionary()
        page_obj.Resources.XObject[xobj_id] = xobj

        box = self.page_box(pdf_page)
        left, right = self.margins
        w = (box[2] - box[0]) - left - right
        h = w * qimage.height() / qimage.width()
        x = box[0] + left
        y = box[3] - h

        stream_s = 'q' + '\n'
        stream_s += '{} 0 0 {} {} {} cm'.format(
            round(w, 5), round(h, 5), round(x, 5), round(y, 5)) + '\n'
        stream_s += '{} Do'.format(xobj_id) + '\n'
        stream_s += 'Q' + '\n'
        pdf_page.contents_add(stream_s.encode('utf-8'))

    def footer_text(self, page_no, total):
        local_ts = as_utc(self.doc.last_modified).astimezone()
        return '{} / {} | {} (v{}, {})'.format(
            page_no, total, self.doc.visible_name, self.doc.version,
            local_ts.strftime(TS_FORMAT))

    def add_footers(self, base_pdf):
        font = base_pdf.make_indirect(pikepdf.Dictionary(
            Type=pikepdf.Name('/Font'),
            Subtype=pikepdf.Name('/Type1'),
            BaseFont=pikepdf.Name('/Helvetica'),
            Encoding=pikepdf.Name('/WinAnsiEncoding')))
        total = len(base_pdf.pages)
        for page_i, pdf_page in enumerate(base_pdf.pages):
            page_obj = pdf_page.obj
            if '/Resources' not in page_obj:
                page_obj.Resources = pikepdf.Dictionary()
            if '/Font' not in page_obj.Resources:
                page_obj.Resources.Font = pikepdf.Dictionary()
            page_obj.Resources.Font[FOOTER_FONT] = font

            box = self.page_box(pdf_page)
            text = self.footer_text(page_i + 1, total)
            stream = b'q\nBT\n'
            stream += '{} {} Tf\n'.format(
                FOOTER_FONT, FOOTER_FONT_SIZE).encode('utf-8')
            stream += '{} g\n'.format(round(FOOTER_GRAY, 5)).encode('utf-8')
            stream += '1 0 0 1 {} {} Tm\n'.format(
                round(box[0] + FOOTER_X, 5),
                round(box[1] + FOOTER_Y, 5)).encode('utf-8')
            stream += b'(' + pdf_escape(text) + b') Tj\nET\nQ\n'
            pdf_page.contents_add(stream)

    def set_metadata(self, base_pdf):
        modified = as_utc(self.doc.last_modified).strftime('D:%Y%m%d%H%M%SZ')
        base_pdf.docinfo['/Title'] = self.doc.visible_name
        base_pdf.docinfo['/Producer'] = PRODUCER
        base_pdf.docinfo['/CreationDate'] = modified
        base_pdf.docinfo['/ModDate'] = modified

    def save(self, base_pdf, sink):
        # Nothing reaches the sink until the whole PDF is built.
        buf = io.BytesIO()
        base_pdf.save(buf, deterministic_id=True)
        write_sink(sink, buf.getvalue())

    def cleanup(self, base_pdf):
        base_pdf.close()
        for source in self.sources:
            source.close()
        self.sources = []
