'''
render.py
Shortcuts that render with the default context.

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

import threading

from .model.docrender import RenderContext

_default_ctx = None
_default_mx = threading.Lock()

def default_context():
    # Shared, so the atlas and templates are read once per process.
    global _default_ctx
    with _default_mx:
        if _default_ctx is None:
            _default_ctx = RenderContext.default()
        return _default_ctx

def page(doc, page_id, sink, ctx=None):
    return (ctx or default_context()).page(doc, page_id, sink)

def pdf(doc, sink, ctx=None):
    return (ctx or default_context()).pdf(doc, sink)

def pdf_page(doc, page_id, sink, ctx=None):
    return (ctx or default_context()).pdf_page(doc, page_id, sink)
