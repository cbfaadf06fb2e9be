'''
__init__.py
Package exports.

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

from .errors import RenderError, ValidationError, NotFoundError
from .model import Document, Content, Drawing, Layer, Stroke, Segment, \
    BrushType, BrushColor, FileType
from .model.docrender import RenderContext, Palette

__version__ = '1.0.0'
