'''
generic.py
This is the model for the Generic pen, which every other pen builds on.
It is also the fallback for tool codes that aren't recognized.

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

from PySide6.QtCore import Qt, QPointF, QRectF
from PySide6.QtGui import QBrush, QColor, QTransform
import math

MIN_WIDTH = 1.0
# Stamps are placed at most this fraction of the stamp width apart, so
# consecutive stamps always overlap.
SPACING = 0.25
MIN_STEP = 0.5
# Speeds above this don't thin the ink any further.
MAX_SPEED = 100.0


def clamp(val, lo=0.0, hi=1.0):
    return max(lo, min(hi, val))


class GenericPen:
    # Fixed width, fixed opacity.
    width_scale = 1.0
    # Pens with a mask draw the rotated mask at each stamp; pens without
    # one fill an ellipse.
    uses_mask = True

    def __init__(self, color, mask=None):
        self.color = QColor(color)
        self.mask = mask
        self.stamp = None
        if self.uses_mask and mask is not None:
            self.stamp = mask.tinted(self.color)

    def __repr__(self):
        return '<{} {}>'.format(type(self).__name__, self.color.name())

    def segment_width(self, stroke, segment):
        return max(MIN_WIDTH, stroke.width * self.width_scale)

    def segment_opacity(self, stroke, segment):
        return 1.0

    def pressure_width(self, stroke, segment):
        # A width stored on the segment wins over the pressure-derived
        # one.
        if segment.width is not None:
            base = segment.width
        else:
            base = stroke.width * clamp(segment.pressure)
        return max(MIN_WIDTH, base * self.width_scale)

    def speed_factor(self, segment):
        return 1.0 - 0.3 * clamp(abs(segment.speed) / MAX_SPEED)

    def stamp_radius(self, width):
        if self.stamp is not None:
            # half the diagonal of a square stamp, any rotation
            return width * math.sqrt(2) / 2 + 1
        return width / 2 + 1

    def max_radius(self, stroke):
        widths = [self.segment_width(stroke, s) for s in stroke.segments]
        if not len(widths):
            return 0.0
        return self.stamp_radius(max(widths))

    def stroke_rect(self, stroke):
        # Everything this pen can touch for the stroke, in stroke
        # coordinates.
        if not len(stroke.segments):
            return QRectF()
        xs = [s.x for s in stroke.segments]
        ys = [s.y for s in stroke.segments]
        r = self.max_radius(stroke)
        return QRectF(min(xs) - r, min(ys) - r,
                      max(xs) - min(xs) + 2 * r,
                      max(ys) - min(ys) + 2 * r)

    def paint_stroke(self, painter, stroke):
        if len(stroke.segments) < 2:
            return
        o_transform = painter.transform()
        o_opacity = painter.opacity()
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(self.color))
        self.stamp_segments(painter, stroke, o_transform)
        painter.setOpacity(o_opacity)
        painter.setTransform(o_transform)

    def stamp_segments(self, painter, stroke, base):
        segments = stroke.segments
        for i, segment in enumerate(segments):
            if i + 1 >= len(segments):
                # no next segment, last 'to' point
                continue
            nextsegment = segments[i + 1]
            last = i + 2 == len(segments)
            self.stamp_segment(painter, stroke, segment, nextsegment,
                               base, last)

    def stamp_segment(self, painter, stroke, segment, nextsegment, base,
                      last):
        w0 = self.segment_width(stroke, segment)
        w1 = self.segment_width(stroke, nextsegment)
        o0 = self.segment_opacity(stroke, segment)
        o1 = self.segment_opacity(stroke, nextsegment)

        dx = nextsegment.x - segment.x
        dy = nextsegment.y - segment.y
        length = math.hypot(dx, dy)
        angle = math.degrees(math.atan2(dy, dx))

        step = max(MIN_STEP, min(w0, w1) * SPACING)
        n = max(1, int(math.ceil(length / step)))
        # The end point belongs to the next pair, except on the last one.
        count = n + 1 if last else n
        for k in range(count):
            t = k / n
            self.stamp_at(painter, base,
                          segment.x + dx * t,
                          segment.y + dy * t,
                          w0 + (w1 - w0) * t,
                          o0 + (o1 - o0) * t,
                          angle)

    def stamp_at(self, painter, base, x, y, width, opacity, angle):
        t = QTransform(base)
        t.translate(x, y)
        t.rotate(angle)
        painter.setTransform(t)
        painter.setOpacity(clamp(opacity))
        half = width / 2
        if self.stamp is not None:
            painter.drawImage(QRectF(-half, -half, width, width), self.stamp)
        else:
            painter.drawEllipse(QPointF(0, 0), half, half)
