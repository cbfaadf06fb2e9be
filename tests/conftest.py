"""Shared fixtures: a resource directory generated on the fly, a render
context over it, and builders for documents and strokes.
"""

import json
from datetime import datetime, timezone

import pytest
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QImage

from rmrender.model import Content, Document, Drawing, FileType, \
    Segment, Stroke
from rmrender.model.docrender import Palette, RenderContext

ATLAS_SIZE = (64, 16)
TEMPLATE_COLOR = QColor(200, 220, 255)

# Every brush shares one solid square, except the pencil which has its
# own cell.
DEFAULT_INDEX = {
    'ballpoint': [0, 0, 16, 16],
    'pencil': [16, 0, 32, 16],
    'mech-pencil': [0, 0, 16, 16],
    'marker': [0, 0, 16, 16],
    'fineliner': [0, 0, 16, 16],
    'highlighter': [32, 0, 48, 16],
}


def write_atlas(data_dir, index=None):
    image = QImage(ATLAS_SIZE[0], ATLAS_SIZE[1],
                   QImage.Format.Format_ARGB32)
    image.fill(Qt.GlobalColor.transparent)
    for x in range(0, 48):
        for y in range(0, 16):
            image.setPixelColor(x, y, QColor(0, 0, 0, 255))
    assert image.save(str(data_dir / 'sprites.png'), 'PNG')
    with open(data_dir / 'sprites.json', 'w') as f:
        json.dump(DEFAULT_INDEX if index is None else index, f)


def write_template(data_dir, name, color=TEMPLATE_COLOR):
    tdir = data_dir / 'templates'
    tdir.mkdir(exist_ok=True)
    image = QImage(36, 48, QImage.Format.Format_RGB32)
    image.fill(color)
    assert image.save(str(tdir / (name + '.png')), 'PNG')


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / 'data'
    d.mkdir()
    write_atlas(d)
    write_template(d, 'Lines')
    return d


@pytest.fixture
def ctx(data_dir):
    return RenderContext(data_dir, Palette.default())


def line(pen, color, width, points, pressure=1.0, speed=0.0):
    return Stroke(pen=pen, color=color, width=width,
                  segments=[Segment(x=x, y=y, speed=speed,
                                    pressure=pressure)
                            for x, y in points])


def notebook(drawings, pagedata=None, name='Notes', version=3):
    page_ids = list(drawings)
    content = Content.new(FileType.NOTEBOOK, page_ids)
    return Document(content, drawings=drawings, name=name, version=version,
                    doc_id='nb-1', pagedata=pagedata,
                    last_modified=datetime(2023, 4, 1, 12, 30,
                                           tzinfo=timezone.utc))


def one_page(strokes, **kwargs):
    return notebook({'p1': Drawing.from_strokes(strokes)}, **kwargs)


@pytest.fixture
def make_line():
    return line


@pytest.fixture
def make_notebook():
    return notebook


@pytest.fixture
def make_page():
    return one_page


@pytest.fixture
def atlas_writer():
    return write_atlas
