'''
eraser.py
These are the models for the Eraser and the Erase Area tool.

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

from .generic import GenericPen

class EraserPen(GenericPen):
    # Paints over ink with the page background color, which is set as
    # this pen's color when it is built.
    uses_mask = False
    width_scale = 2.0


class EraseAreaPen(GenericPen):
    # The area eraser records a selection outline, not ink.
    uses_mask = False

    def paint_stroke(self, painter, stroke):
        return

    def max_radius(self, stroke):
        return 0.0
