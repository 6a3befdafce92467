"""chordview: guitar chord diagram layout engine and renderers."""

from chordview.barre_detector import BarreSpan, detect
from chordview.chord_models import ChordModel, parse_chord_line, parse_fingers, parse_frets
from chordview.diagram import ChordDiagram
from chordview.errors import (
    ChordViewError,
    InvalidLayoutAreaError,
    MalformedChordError,
    StyleConfigError,
)
from chordview.layout_engine import DiagramGeometry, LayoutEngine
from chordview.style import ImageHandle, ShowMode, StyleConfig, load_style

__version__ = "0.1.0"

__all__ = [
    "BarreSpan",
    "ChordDiagram",
    "ChordModel",
    "ChordViewError",
    "DiagramGeometry",
    "ImageHandle",
    "InvalidLayoutAreaError",
    "LayoutEngine",
    "MalformedChordError",
    "ShowMode",
    "StyleConfig",
    "StyleConfigError",
    "detect",
    "load_style",
    "parse_chord_line",
    "parse_fingers",
    "parse_frets",
]
