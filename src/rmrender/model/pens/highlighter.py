'''
highlighter.py
This is the model for a Highlighter.

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

from PySide6.QtCore import Qt, QRect
from PySide6.QtGui import QBrush, QImage, QPainter, QTransform

from .generic import GenericPen, MIN_WIDTH, clamp

class HighlighterPen(GenericPen):
    # Opacity of a finished highlighter stroke over the page. Strokes are
    # first drawn into their own buffer, so a stroke crossing itself
    # stays even while a second stroke on top darkens the first.
    stroke_alpha = 0.4

    def segment_width(self, stroke, segment):
        if segment.width is not None:
            return max(MIN_WIDTH, segment.width)
        return max(MIN_WIDTH, stroke.width)

    def segment_opacity(self, stroke, segment):
        flow = 0.6 + 0.4 * clamp(segment.pressure)
        return clamp(flow * self.speed_factor(segment))

    def device_rect(self, painter, stroke):
        device = painter.device()
        rect = painter.transform().mapRect(self.stroke_rect(stroke))
        rect = rect.toAlignedRect()
        return rect.intersected(QRect(0, 0, device.width(), device.height()))

    def paint_stroke(self, painter, stroke):
        if len(stroke.segments) < 2:
            return
        rect = self.device_rect(painter, stroke)
        if rect.isEmpty():
            return

        layer = QImage(rect.width(), rect.height(),
                       QImage.Format.Format_ARGB32_Premultiplied)
        layer.fill(Qt.GlobalColor.transparent)
        base = painter.transform() \
            * QTransform.fromTranslate(-rect.x(), -rect.y())
        lp = QPainter(layer)
        lp.setRenderHints(painter.renderHints())
        lp.setPen(Qt.PenStyle.NoPen)
        lp.setBrush(QBrush(self.color))
        self.stamp_segments(lp, stroke, base)
        lp.end()

        o_transform = painter.transform()
        o_opacity = painter.opacity()
        painter.setTransform(QTransform())
        painter.setOpacity(self.stroke_alpha)
        painter.drawImage(rect.topLeft(), layer)
        painter.setOpacity(o_opacity)
        painter.setTransform(o_transform)
