"""Tests for rendering whole documents to PDF."""

import io

import pikepdf
import pytest
from PySide6.QtGui import QColor, QImage

from rmrender import render
from rmrender.errors import RenderError, ValidationError
from rmrender.model import BrushColor, BrushType, Content, Document, \
    Drawing, FileType
from rmrender.model.docrender import DocRender


SOURCE_MARK = b'0 0 1 rg 10 10 50 50 re f'


def source_pdf(*sizes):
    # Every page carries a filled blue square.
    pdf = pikepdf.new()
    for size in sizes:
        page = pdf.add_blank_page(page_size=size)
        page.obj.Contents = pdf.make_stream(SOURCE_MARK + b'\n')
    buf = io.BytesIO()
    pdf.save(buf)
    return buf.getvalue()


def pdf_backed(page_ids, redirection, source, make_line):
    content = Content.new(FileType.PDF, page_ids)
    content.redirection_page_map = list(redirection)
    stroke = make_line(BrushType.BALLPOINT, BrushColor.BLACK, 4,
                       [(100, 100), (600, 900)])
    drawings = {page_ids[0]: Drawing.from_strokes([stroke])}
    return Document(content, drawings=drawings, name='Paper', version=1,
                    doc_id='pdf-1', source_pdf=source)


def page_size(page):
    box = [float(v) for v in page.obj.MediaBox]
    return (round(box[2] - box[0], 2), round(box[3] - box[1], 2))


def page_bytes(page):
    page.contents_coalesce()
    return page.obj.Contents.read_bytes()


def read_pdf(data):
    return pikepdf.open(io.BytesIO(data))


# ---------------------------------------------------------------------------
# Notebooks
# ---------------------------------------------------------------------------


class TestNotebookPdf:
    def test_pages_footer_metadata(self, ctx, make_notebook, make_line):
        stroke = make_line(BrushType.BALLPOINT, BrushColor.BLACK, 4,
                           [(100, 100), (600, 900)])
        doc = make_notebook({'p1': Drawing.from_strokes([stroke]),
                             'p2': Drawing.empty()}, pagedata=['Lines'])
        sink = io.BytesIO()
        assert ctx.pdf(doc, sink)

        with read_pdf(sink.getvalue()) as pdf:
            assert len(pdf.pages) == 2
            assert page_size(pdf.pages[0]) == (595.28, 841.89)
            assert str(pdf.docinfo['/Title']) == 'Notes'
            assert str(pdf.docinfo['/Producer']) == 'rmrender'
            assert str(pdf.docinfo['/ModDate']) == 'D:20230401123000Z'

            first = page_bytes(pdf.pages[0])
            assert b'(1 / 2 | Notes \\(v3, ' in first
            assert b'/ImPage0 Do' in first
            assert b'(2 / 2 | Notes \\(v3, ' in page_bytes(pdf.pages[1])

            xobj = pdf.pages[0].obj.Resources.XObject['/ImPage0']
            assert int(xobj.Width) == 1404
            assert int(xobj.Height) == 1872
            assert '/SMask' not in xobj

    def test_deterministic(self, ctx, make_page, make_line):
        doc = make_page([make_line(BrushType.PENCIL, BrushColor.GRAY, 6,
                                   [(10, 10), (900, 1200)], pressure=0.4)])
        a, b = io.BytesIO(), io.BytesIO()
        ctx.pdf(doc, a)
        ctx.pdf(doc, b)
        assert a.getvalue() == b.getvalue()

    def test_path_sink(self, ctx, make_page, tmp_path):
        out = tmp_path / 'notes.pdf'
        render.pdf(make_page([]), out, ctx=ctx)
        with pikepdf.open(out) as pdf:
            assert len(pdf.pages) == 1

    def test_single_page(self, ctx, make_notebook):
        doc = make_notebook({'p1': Drawing.empty(), 'p2': Drawing.empty()})
        sink = io.BytesIO()
        assert ctx.pdf_page(doc, 'p2', sink)
        with read_pdf(sink.getvalue()) as pdf:
            assert len(pdf.pages) == 1
            assert '/Font' not in pdf.pages[0].obj.Resources
            assert '/Title' not in pdf.docinfo


# ---------------------------------------------------------------------------
# PDF-backed documents
# ---------------------------------------------------------------------------


class TestOverlayPdf:
    def test_source_page_sizes(self, ctx, make_line):
        source = source_pdf((300, 400), (500, 600))
        doc = pdf_backed(['a', 'b'], [], source, make_line)
        sink = io.BytesIO()
        ctx.pdf(doc, sink)
        with read_pdf(sink.getvalue()) as pdf:
            assert [page_size(p) for p in pdf.pages] == \
                [(300, 400), (500, 600)]
            ink = pdf.pages[0].obj.Resources.XObject['/ImPage0Ink']
            assert '/SMask' in ink

    def test_source_content_under_ink(self, ctx, make_line):
        doc = pdf_backed(['a'], [], source_pdf((300, 400)), make_line)
        sink = io.BytesIO()
        ctx.pdf(doc, sink)
        with read_pdf(sink.getvalue()) as pdf:
            data = page_bytes(pdf.pages[0])
            assert data.startswith(b'q')
            mark = data.index(SOURCE_MARK)
            restore = data.index(b'Q', mark)
            assert restore < data.index(b'/ImPage0Ink Do')

            # Black ink: the color stream stays black and the soft mask
            # carries solid as well as partial coverage.
            ink = pdf.pages[0].obj.Resources.XObject['/ImPage0Ink']
            assert set(ink.read_bytes()) == {0}
            coverage = set(ink.SMask.read_bytes())
            assert 255 in coverage
            assert any(0 < v < 255 for v in coverage)

    def test_inserted_page_takes_previous_size(self, ctx, make_line):
        source = source_pdf((300, 400), (500, 600))
        doc = pdf_backed(['a', 'b', 'c'], [0, 1, -1], source, make_line)
        sink = io.BytesIO()
        ctx.pdf(doc, sink)
        with read_pdf(sink.getvalue()) as pdf:
            assert [page_size(p) for p in pdf.pages] == \
                [(300, 400), (500, 600), (500, 600)]
            assert b'(3 / 3 | Paper \\(v1, ' in page_bytes(pdf.pages[2])

    def test_duplicated_source_page(self, ctx, make_line):
        source = source_pdf((300, 400))
        doc = pdf_backed(['a', 'b'], [0, 0], source, make_line)
        sink = io.BytesIO()
        ctx.pdf(doc, sink)
        with read_pdf(sink.getvalue()) as pdf:
            assert [page_size(p) for p in pdf.pages] == \
                [(300, 400), (300, 400)]
            assert pdf.pages[0].obj.objgen != pdf.pages[1].obj.objgen
            assert '/ImPage0Ink' not in pdf.pages[1].obj.Resources.XObject

    def test_missing_source_page(self, ctx, make_line, tmp_path):
        doc = pdf_backed(['a'], [4], source_pdf((300, 400)), make_line)
        out = tmp_path / 'out.pdf'
        with pytest.raises(RenderError, match='missing source page'):
            ctx.pdf(doc, out)
        assert not out.exists()

    def test_broken_source(self, ctx, make_line):
        doc = pdf_backed(['a'], [], b'not a pdf', make_line)
        with pytest.raises(RenderError, match='could not open'):
            ctx.pdf(doc, io.BytesIO())


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_epub(self, ctx, tmp_path):
        doc = Document(Content.new(FileType.EPUB, ['a']), doc_id='e-1')
        out = tmp_path / 'book.pdf'
        with pytest.raises(RenderError, match='epub'):
            ctx.pdf(doc, out)
        assert not out.exists()

    def test_invalid_content(self, ctx, make_page):
        doc = make_page([])
        doc.content.page_count = 4
        sink = io.BytesIO()
        with pytest.raises(ValidationError):
            ctx.pdf(doc, sink)
        assert sink.getvalue() == b''

    def test_failure_keeps_previous_output(self, ctx, make_notebook,
                                           make_line, tmp_path):
        out = tmp_path / 'notes.pdf'
        out.write_bytes(b'previous')
        stroke = make_line(BrushType.MARKER, BrushColor.BLUE, 4,
                           [(10, 10), (90, 90)])
        doc = make_notebook({'p1': Drawing.empty(),
                             'p2': Drawing.from_strokes([stroke])})
        with pytest.raises(RenderError):
            ctx.pdf(doc, out)
        assert out.read_bytes() == b'previous'

    def test_preview_validates_content(self, ctx, make_page):
        doc = make_page([])
        doc.content.page_count = 3
        sink = io.BytesIO()
        with pytest.raises(ValidationError, match='pageCount'):
            ctx.pdf_page(doc, 'p1', sink)
        assert sink.getvalue() == b''


# ---------------------------------------------------------------------------
# Image XObjects
# ---------------------------------------------------------------------------


def translucent(color, width=4):
    image = QImage(width, 1, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(color)
    return image


class TestImageXObject:
    def test_soft_mask_color_is_straight(self, ctx):
        with pikepdf.new() as pdf:
            xobj = DocRender(None, ctx).image_xobject(
                pdf, translucent(QColor(0, 0, 0, 102)), alpha=True)
            assert xobj.read_bytes() == bytes(12)
            assert xobj.SMask.read_bytes() == bytes([102] * 4)

    def test_soft_mask_keeps_full_color(self, ctx):
        with pikepdf.new() as pdf:
            xobj = DocRender(None, ctx).image_xobject(
                pdf, translucent(QColor(255, 0, 0, 102)), alpha=True)
            assert xobj.read_bytes() == b'\xff\x00\x00' * 4

    def test_opaque_flattens_onto_white(self, ctx):
        with pikepdf.new() as pdf:
            xobj = DocRender(None, ctx).image_xobject(
                pdf, translucent(QColor(0, 0, 0, 102)), alpha=False)
            assert '/SMask' not in xobj
            assert all(abs(v - 153) <= 1 for v in xobj.read_bytes())
