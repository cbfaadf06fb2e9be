'''
document.py
This is the model for a document, as handed to the renderer.

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

from datetime import datetime, timezone

from rmrender.errors import NotFoundError, RenderError
from .content import Content, FileType
from .lines import Drawing

BLANK_TEMPLATE = 'Blank'


class Document:
    # A read-only snapshot of a decoded document. The parser that builds
    # the drawings lives outside this package; this class only carries
    # what the renderer asks for.
    def __init__(self, content, drawings=None, name='Untitled Document',
                 last_modified=None, version=0, doc_id=None,
                 pagedata=None, source_pdf=None):
        self.content = content
        self.drawings = dict(drawings or {})
        self.visible_name = name
        self.last_modified = last_modified \
            or datetime.fromtimestamp(0, tz=timezone.utc)
        self.version = version
        self.uuid = doc_id
        # One template name per page (the .pagedata file).
        self.pagedata = list(pagedata or [])
        # Bytes of the base PDF for PDF-backed documents.
        self.source_pdf = source_pdf

    def __repr__(self):
        return '<Document {} {!r} v{}>'.format(
            self.uuid, self.visible_name, self.version)

    def get_filetype(self):
        return self.content.file_type

    def get_pages(self):
        return list(self.content.pages)

    def get_pages_len(self):
        return len(self.content.pages)

    def get_drawing(self, page_id):
        if page_id not in self.content.pages:
            raise NotFoundError('no page {!r} in document {}'.format(
                page_id, self.uuid))
        drawing = self.drawings.get(page_id)
        if drawing is None:
            # A page nobody wrote on.
            return Drawing.empty()
        return drawing

    def get_template_for_page(self, page_id):
        if not len(self.pagedata):
            return None
        page_i = self.content.pages.index(page_id)
        # Some documents don't store a template for later pages; the
        # last-available one is what the tablet shows for them.
        tmpname = self.pagedata[-1]
        if page_i < len(self.pagedata):
            tmpname = self.pagedata[page_i]
        if not tmpname or BLANK_TEMPLATE == tmpname:
            return None
        return tmpname

    def get_redirection_for_page(self, page_i):
        # Index of the base PDF page shown under page_i, or -1 if the
        # page was inserted on the tablet.
        redir = self.content.redirection_page_map
        if not len(redir):
            return page_i
        return int(redir[page_i])

    def get_tsfm(self):
        return self.content.transform.to_dict()

    def get_source_pdf(self):
        if FileType.PDF != self.content.file_type:
            raise RenderError('document {} is not PDF-backed'.format(
                self.uuid))
        if not self.source_pdf:
            raise RenderError('no source PDF for document {}'.format(
                self.uuid))
        return self.source_pdf

    def validate(self):
        self.content.validate()
        for page_id in self.content.pages:
            self.get_drawing(page_id).validate()
