from .lines import Layer, Stroke, Segment, Drawing, BrushType, BrushColor
from .content import Content, FileType, Orientation, TextAlign, \
    LineHeight, Transform, PageMetadata, read_pagedata
from .document import Document
from .display import DisplayRM
