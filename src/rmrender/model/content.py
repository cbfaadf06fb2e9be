'''
content.py
This is the model for a document's content (the .content file).

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

from rmrender.errors import ValidationError
from .lines import validate_layer_names

DEFAULT_COVER_PAGE = -1


class FileType:
    NOTEBOOK = 0
    EPUB = 1
    PDF = 2

    names = {'notebook': NOTEBOOK, 'epub': EPUB, 'pdf': PDF}


class Orientation:
    PORTRAIT = 0
    LANDSCAPE = 1

    names = {'portrait': PORTRAIT, 'landscape': LANDSCAPE}


class TextAlign:
    LEFT = 0
    JUSTIFY = 1

    names = {'left': LEFT, 'justify': JUSTIFY}


class LineHeight:
    DEFAULT = -1
    SMALL = 100
    MEDIUM = 150
    LARGE = 200


def name_for(enum_cls, value):
    for name, v in enum_cls.names.items():
        if v == value:
            return name
    return None

def parse_enum(enum_cls, value, what):
    # The tablet writes these as strings; older files (and callers
    # building content by hand) use the integer values.
    if isinstance(value, str):
        if value in enum_cls.names:
            return enum_cls.names[value]
        raise ValidationError('invalid {} {!r}'.format(what, value))
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('invalid {} {!r}'.format(what, value))
    return value


class Transform:
    keys = ('m11', 'm12', 'm13',
            'm21', 'm22', 'm23',
            'm31', 'm32', 'm33')

    def __init__(self, **kwargs):
        self.m11, self.m12, self.m13 = 1, 0, 0
        self.m21, self.m22, self.m23 = 0, 1, 0
        self.m31, self.m32, self.m33 = 0, 0, 1
        for key, value in kwargs.items():
            if key not in self.keys:
                raise ValidationError('invalid transform key {}'.format(key))
            setattr(self, key, value)

    @classmethod
    def from_dict(cls, adict):
        # Only accept a complete matrix; anything else is the identity.
        if not adict or not set(cls.keys).issubset(adict):
            return cls()
        return cls(**{k: float(adict[k]) for k in cls.keys})

    def to_dict(self):
        return {k: getattr(self, k) for k in self.keys}

    def is_identity(self):
        return self.to_dict() == Transform().to_dict()


class Content:
    def __init__(self, file_type=FileType.NOTEBOOK):
        self.dummy_document = False
        self.file_type = file_type
        self.orientation = Orientation.PORTRAIT
        self.page_count = 0
        self.pages = []
        self.cover_page = DEFAULT_COVER_PAGE
        # Only used for EPUB and PDF content.
        self.font_name = ''
        self.line_height = LineHeight.DEFAULT
        self.margins = 100
        self.text_alignment = TextAlign.LEFT
        self.text_scale = 1.0
        self.transform = Transform()
        # Page index -> base PDF page index, -1 for inserted pages.
        self.redirection_page_map = []

    @classmethod
    def new(cls, file_type, pages=None):
        content = cls(file_type)
        content.pages = list(pages or [])
        content.page_count = len(content.pages)
        return content

    @classmethod
    def from_dict(cls, adict):
        content = cls()
        content.dummy_document = bool(adict.get('dummyDocument', False))
        content.file_type = parse_enum(
            FileType, adict.get('fileType', 'notebook'), 'file type')
        content.orientation = parse_enum(
            Orientation, adict.get('orientation', 'portrait'),
            'orientation')
        content.pages = list(adict.get('pages') or [])
        content.page_count = int(adict.get('pageCount', len(content.pages)))
        content.cover_page = int(
            adict.get('coverPageNumber', DEFAULT_COVER_PAGE))
        content.font_name = adict.get('fontName', '') or ''
        content.line_height = int(adict.get('lineHeight', LineHeight.DEFAULT))
        content.margins = int(adict.get('margins', 100))
        content.text_alignment = parse_enum(
            TextAlign, adict.get('textAlignment', 'left'), 'text align')
        content.text_scale = float(adict.get('textScale', 1.0))
        content.transform = Transform.from_dict(adict.get('transform'))
        content.redirection_page_map = list(
            adict.get('redirectionPageMap') or [])
        content.validate()
        return content

    def to_dict(self):
        self.validate()
        return {
            'dummyDocument': self.dummy_document,
            'fileType': name_for(FileType, self.file_type),
            'orientation': name_for(Orientation, self.orientation),
            'pageCount': self.page_count,
            'pages': list(self.pages),
            'coverPageNumber': self.cover_page,
            'fontName': self.font_name,
            'lineHeight': self.line_height,
            'margins': self.margins,
            'textAlignment': name_for(TextAlign, self.text_alignment),
            'textScale': self.text_scale,
            'transform': self.transform.to_dict(),
            'redirectionPageMap': list(self.redirection_page_map),
        }

    def validate(self):
        if self.file_type not in FileType.names.values():
            raise ValidationError(
                'invalid file type {!r}'.format(self.file_type))
        if self.orientation not in Orientation.names.values():
            raise ValidationError(
                'invalid orientation {!r}'.format(self.orientation))
        if self.page_count != len(self.pages):
            raise ValidationError(
                'pageCount does not match number of pages {} != {}'.format(
                    self.page_count, len(self.pages)))
        # Cover page may be -1 (not set) or an existing page.
        if self.cover_page != DEFAULT_COVER_PAGE:
            if self.cover_page < 1 or self.cover_page > self.page_count:
                raise ValidationError(
                    'cover page {} is not an existing page'.format(
                        self.cover_page))
        if self.text_alignment not in TextAlign.names.values():
            raise ValidationError(
                'invalid text align {!r}'.format(self.text_alignment))
        if len(self.redirection_page_map) \
           and len(self.redirection_page_map) != self.page_count:
            raise ValidationError(
                'redirection map does not match number of pages {} != {}'
                .format(len(self.redirection_page_map), self.page_count))


class PageMetadata:
    # The layer information stored beside each page (-metadata.json).
    def __init__(self, layer_names):
        self.layer_names = list(layer_names)

    @classmethod
    def from_dict(cls, adict):
        layers = adict.get('layers')
        if layers is None:
            raise ValidationError('no layers defined')
        return cls([layer.get('name', '') for layer in layers])

    def validate(self):
        validate_layer_names(self.layer_names)


def read_pagedata(source):
    # pagedata is a plain text file with one template name per page.
    if isinstance(source, (bytes, bytearray)):
        source = source.decode('utf-8')
    if isinstance(source, str):
        source = source.splitlines()
    return [line.strip() for line in source]
