from .generic import GenericPen
from .ballpoint import BallpointPen
from .pencil import PencilPen
from .mechanicalpencil import MechanicalPencilPen
from .marker import MarkerPen
from .fineliner import FinelinerPen
from .highlighter import HighlighterPen
from .paintbrush import PaintbrushPen
from .eraser import EraserPen, EraseAreaPen
