'''
errors.py
Exceptions raised while validating and rendering documents.

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


class RenderError(Exception):
    # A resource or rendering failure. The current page or document
    # render is aborted.
    pass

class ValidationError(Exception):
    # Malformed document metadata, raised before anything is drawn.
    pass

class NotFoundError(LookupError):
    pass
