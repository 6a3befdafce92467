"""LayoutEngine: Turns a chord and a style into an ordered list of drawing primitives."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chordview.barre_detector import BarreSpan, detect
from chordview.chord_models import CLOSED_STRING, OPEN_STRING, STRING_COUNT, ChordModel
from chordview.errors import InvalidLayoutAreaError, MalformedChordError
from chordview.primitives import Circle, Image, Line, Path, Rect, RenderPrimitive, Text
from chordview.style import ImageHandle, ShowMode, StyleConfig
from chordview.text_metrics import PillowTextMetrics, TextMetrics

logger = logging.getLogger(__name__)


def _image_height(handle: ImageHandle | None) -> float:
    return handle.height if handle is not None else 0.0


@dataclass(frozen=True)
class DiagramGeometry:
    """
    Every derived quantity of one diagram layout.

    The drawing area is split, top to bottom, into the string-indicator
    row, the head (nut) row and the grid; left to right into the
    fret-label column, the grid and a margin of one note radius.

    Attributes:
        rows:                 Number of fret rows in the grid (3 or 4).
        exceeds_default_fret: Largest fret lies beyond the default window,
                              so fret labels are drawn and notes slide.
        draws_head:           The nut is visible (largest fret <= 5).
        draws_strings:        The chord has closed or open strings.
        fret_width:           Width of the fret-label column.
        string_height:        Height of the string-indicator row.
        head_height:          Height of the head row.
        grid_left, grid_top:  Top-left corner of the grid.
        grid_width, grid_height: Outer size of the grid, line strokes included.
        column_width:         Distance between neighbouring strings.
        row_height:           Distance between neighbouring frets.
    """

    rows: int
    exceeds_default_fret: bool
    draws_head: bool
    draws_strings: bool
    fret_width: float
    string_height: float
    head_height: float
    grid_left: float
    grid_top: float
    grid_width: float
    grid_height: float
    column_width: float
    row_height: float


class LayoutEngine:
    """
    Computes the geometry of a chord diagram and emits its primitives.

    The engine keeps no state between calls apart from the (read-only)
    text metrics provider, so one instance can serve many diagrams and
    threads.

    Emission order
    --------------
    1. string indicators (closed/open images above the nut)
    2. fret-number labels
    3. head (nut)
    4. horizontal then vertical grid lines
    5. barre rectangle, its outline and its two anchor notes
    6. remaining notes, each followed by its finger label and outline

    Renderers must draw primitives in this order.
    """

    DEFAULT_ROWS = 4
    SIMPLE_ROWS = 3          # first-position fingerings in SIMPLE mode
    DEFAULT_FRET_WINDOW = 4  # frets visible without fret labels
    MAX_HEAD_FRET = 5        # above this the nut is off-screen
    BARRE_FINGER = 1

    def __init__(self, metrics: TextMetrics | None = None) -> None:
        """
        Args:
            metrics: Text measurement provider. Defaults to Pillow's bundled
                     font via PillowTextMetrics.
        """
        self.metrics: TextMetrics = metrics if metrics is not None else PillowTextMetrics()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_area(self, width: float, height: float) -> None:
        if width <= 0 or height <= 0:
            raise InvalidLayoutAreaError(
                f"Drawing area must be positive, got {width} x {height}."
            )

    def _check_chord(self, chord: ChordModel) -> None:
        if len(chord.frets) != STRING_COUNT:
            raise MalformedChordError(
                f"frets must have exactly {STRING_COUNT} entries, got {len(chord.frets)}."
            )
        if chord.fingers is not None and len(chord.fingers) != STRING_COUNT:
            raise MalformedChordError(
                f"fingers must have exactly {STRING_COUNT} entries, got {len(chord.fingers)}."
            )

    def _row_count(self, chord: ChordModel | None, style: StyleConfig) -> int:
        if style.show_mode is ShowMode.SIMPLE:
            least = chord.least_fret if chord is not None else 1
            largest = chord.largest_fret if chord is not None else 1
            if largest - least < 3 and least == 1:
                return self.SIMPLE_ROWS
            return self.DEFAULT_ROWS
        if style.show_mode is ShowMode.NORMAL:
            return self.DEFAULT_ROWS
        raise ValueError(f"Unsupported show mode: {style.show_mode!r}")

    def _fret_width(self, chord: ChordModel | None, style: StyleConfig, rows: int) -> float:
        """Width of the widest fret label the window can show, plus its offset."""
        if chord is None:
            return 0.0
        widest_label = str(chord.least_fret + rows - 1)
        return self.metrics.text_width(widest_label, style.fret_text_size) + style.fret_text_offset_x

    def _note_row(self, fret: int, chord: ChordModel, geometry: DiagramGeometry) -> int:
        """
        Map a fret number onto a 1-based grid row.

        Inside the default window the row is the fret itself. Beyond it the
        window slides so the least fret sits on row 1, while the fret labels
        carry the real numbers.
        """
        if not geometry.exceeds_default_fret:
            return fret
        least = chord.least_fret
        if fret == least:
            return 1
        remainder = fret % least
        return remainder + 1 if remainder != 0 else fret - least + 1

    def _note_center(
        self, string: int, row: int, style: StyleConfig, geometry: DiagramGeometry
    ) -> tuple[float, float]:
        line_width = style.grid_line_width
        # The highest string hugs the inside of the grid's right edge.
        inset = line_width if string == STRING_COUNT - 1 else line_width / 2
        cx = geometry.grid_left + line_width / 2 + geometry.column_width * string - inset
        cy = geometry.grid_top + geometry.row_height * row - geometry.row_height / 2
        return cx, cy

    def _note(
        self,
        chord: ChordModel,
        style: StyleConfig,
        geometry: DiagramGeometry,
        string: int,
        fret: int,
        finger: int,
        alpha: int,
        stroke_width: float,
        stroke_color: str,
    ) -> list[RenderPrimitive]:
        row = self._note_row(fret, chord, geometry)
        cx, cy = self._note_center(string, row, style, geometry)
        primitives: list[RenderPrimitive] = [
            Circle(cx=cx, cy=cy, radius=style.note_radius, fill_color=style.note_color, alpha=alpha)
        ]

        if style.show_mode is not ShowMode.SIMPLE and finger > 0:
            label = str(finger)
            ascent, descent = self.metrics.ascent_descent(style.note_text_size)
            primitives.append(
                Text(
                    x=cx - self.metrics.text_width(label, style.note_text_size) / 2,
                    y=cy + (ascent - descent) / 2,
                    content=label,
                    size=style.note_text_size,
                    color=style.note_text_color,
                )
            )

        if stroke_width > 0:
            primitives.append(
                Circle(
                    cx=cx,
                    cy=cy,
                    radius=style.note_radius,
                    stroke_color=stroke_color,
                    stroke_width=stroke_width,
                )
            )
        return primitives

    def _string_indicators(
        self, chord: ChordModel, style: StyleConfig, geometry: DiagramGeometry
    ) -> list[RenderPrimitive]:
        if not geometry.draws_strings:
            return []

        closed, empty = style.closed_string_image, style.empty_string_image
        top = max(_image_height(closed), _image_height(empty)) / 2

        primitives: list[RenderPrimitive] = []
        for string, fret in enumerate(chord.frets):
            if fret == CLOSED_STRING:
                handle = closed
            elif fret == OPEN_STRING:
                handle = empty
            else:
                handle = None
            if handle is None:
                continue
            left = geometry.fret_width - handle.width / 2 + geometry.column_width * string
            primitives.append(Image(handle=handle, x=left, y=top))
        return primitives

    def _fret_labels(
        self, chord: ChordModel, style: StyleConfig, geometry: DiagramGeometry
    ) -> list[RenderPrimitive]:
        if not geometry.exceeds_default_fret:
            return []

        # SIMPLE mode only names the first fret of the window.
        label_count = 1 if style.show_mode is ShowMode.SIMPLE else geometry.rows

        primitives: list[RenderPrimitive] = []
        for index in range(1, label_count + 1):
            label = str(chord.least_fret + index - 1)
            label_width = self.metrics.text_width(label, style.fret_text_size)
            primitives.append(
                Text(
                    x=geometry.fret_width - label_width - style.fret_text_offset_x,
                    y=geometry.grid_top + geometry.row_height * index,
                    content=label,
                    size=style.fret_text_size,
                    color=style.fret_text_color,
                )
            )
        return primitives

    def _head(self, style: StyleConfig, geometry: DiagramGeometry) -> list[RenderPrimitive]:
        radius = style.head_radius
        if not geometry.draws_head or radius <= 0:
            return []

        x, y, width = geometry.grid_left, geometry.string_height, geometry.grid_width
        commands = (
            ("M", x, y + radius),
            ("Q", x, y, x + radius, y),
            ("L", x + width - radius, y),
            ("Q", x + width, y, x + width, y + radius),
        )
        return [Path(commands=commands, fill_color=style.head_color)]

    def _grid(self, style: StyleConfig, geometry: DiagramGeometry) -> list[RenderPrimitive]:
        line_width = style.grid_line_width
        rows = geometry.rows
        left, top = geometry.grid_left, geometry.grid_top
        right, bottom = left + geometry.grid_width, top + geometry.grid_height

        primitives: list[RenderPrimitive] = []

        # Lines are centred on their stroke: the outer edges of the first and
        # last line coincide with the grid boundary.
        row_gap = (geometry.grid_height - line_width * (rows + 1)) / rows
        for index in range(rows + 1):
            y = top + line_width / 2 + index * (row_gap + line_width)
            primitives.append(
                Line(x1=left, y1=y, x2=right, y2=y, color=style.grid_line_color, width=line_width)
            )

        column_gap = (geometry.grid_width - line_width * STRING_COUNT) / (STRING_COUNT - 1)
        for index in range(STRING_COUNT):
            x = left + line_width / 2 + index * (column_gap + line_width)
            primitives.append(
                Line(x1=x, y1=top, x2=x, y2=bottom, color=style.grid_line_color, width=line_width)
            )
        return primitives

    def _barre(
        self, chord: ChordModel, style: StyleConfig, geometry: DiagramGeometry, barre: BarreSpan
    ) -> list[RenderPrimitive]:
        line_width = style.grid_line_width
        row = self._note_row(barre.fret, chord, geometry)

        left = geometry.grid_left + line_width / 2 + geometry.column_width * barre.start_string
        top = (
            geometry.grid_top
            + geometry.row_height * row
            - geometry.row_height / 2
            - style.note_radius
        )
        right = left + geometry.column_width * (barre.string_span_count - 1)
        bottom = top + style.note_radius * 2

        primitives: list[RenderPrimitive] = [
            Rect(
                left=left,
                top=top,
                right=right,
                bottom=bottom,
                fill_color=style.barre_color,
                alpha=style.barre_alpha,
            )
        ]

        stroke = style.barre_stroke_width
        if stroke > 0:
            for y in (top + stroke / 2, bottom - stroke / 2):
                primitives.append(
                    Line(x1=left, y1=y, x2=right, y2=y, color=style.barre_stroke_color, width=stroke)
                )

        finger = self.BARRE_FINGER if chord.fingers is not None else 0
        for string in (barre.end_string, barre.start_string):
            primitives.extend(
                self._note(chord, style, geometry, string, barre.fret, finger, 255, 0.0, style.note_stroke_color)
            )
        return primitives

    def _notes(
        self,
        chord: ChordModel,
        style: StyleConfig,
        geometry: DiagramGeometry,
        barre: BarreSpan | None,
    ) -> list[RenderPrimitive]:
        primitives: list[RenderPrimitive] = []
        if barre is not None:
            primitives.extend(self._barre(chord, style, geometry, barre))

        for string, fret in enumerate(chord.frets):
            if fret < 1:
                continue  # closed and open strings have indicators, not notes
            if barre is not None and fret == barre.fret and barre.covers(string):
                continue
            primitives.extend(
                self._note(
                    chord,
                    style,
                    geometry,
                    string,
                    fret,
                    chord.finger_at(string),
                    style.note_alpha,
                    style.note_stroke_width,
                    style.note_stroke_color,
                )
            )
        return primitives

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def measure(
        self, chord: ChordModel | None, style: StyleConfig, width: float, height: float
    ) -> DiagramGeometry:
        """
        Compute the geometry of a diagram without emitting primitives.

        Args:
            chord:  The fingering, or None for an empty diagram.
            style:  Visual parameters.
            width:  Width of the drawing area.
            height: Height of the drawing area.

        Returns:
            DiagramGeometry describing rows, columns and every region.

        Raises:
            MalformedChordError:    If the chord has the wrong shape.
            InvalidLayoutAreaError: If the area, or the grid left once the
                                    style's margins are taken, is not positive.
        """
        self._check_area(width, height)
        if chord is not None:
            self._check_chord(chord)

        rows = self._row_count(chord, style)
        largest = chord.largest_fret if chord is not None else 1
        exceeds = largest > self.DEFAULT_FRET_WINDOW
        draws_head = chord is not None and largest <= self.MAX_HEAD_FRET
        draws_strings = chord is not None and (chord.has_closed_string or chord.has_open_string)

        fret_width = self._fret_width(chord, style, rows)
        string_height = 0.0
        if draws_strings:
            string_height = (
                max(_image_height(style.closed_string_image), _image_height(style.empty_string_image))
                + style.string_offset_y
            )
        head_height = style.head_radius if draws_head else 0.0

        grid_width = width - fret_width - style.note_radius
        grid_height = height - string_height - head_height
        if grid_width <= 0 or grid_height <= 0:
            raise InvalidLayoutAreaError(
                f"A {width} x {height} area leaves no room for the grid "
                f"({grid_width:g} x {grid_height:g}) with this style."
            )

        geometry = DiagramGeometry(
            rows=rows,
            exceeds_default_fret=exceeds,
            draws_head=draws_head,
            draws_strings=draws_strings,
            fret_width=fret_width,
            string_height=string_height,
            head_height=head_height,
            grid_left=fret_width,
            grid_top=string_height + head_height,
            grid_width=grid_width,
            grid_height=grid_height,
            column_width=grid_width / (STRING_COUNT - 1),
            row_height=grid_height / rows,
        )
        logger.debug("Geometry for %s in %s x %s: %s", chord, width, height, geometry)
        return geometry

    def layout(
        self, chord: ChordModel | None, style: StyleConfig, width: float, height: float
    ) -> list[RenderPrimitive]:
        """
        Lay out one chord diagram.

        Args:
            chord:  The fingering to draw. None renders a blank diagram.
            style:  Visual parameters.
            width:  Width of the drawing area.
            height: Height of the drawing area.

        Returns:
            Primitives in back-to-front drawing order. Empty when *chord* is None.

        Raises:
            MalformedChordError:    If the chord has the wrong shape.
            InvalidLayoutAreaError: If the drawing area is not positive or too
                                    small for the style.
        """
        self._check_area(width, height)
        if chord is None:
            return []

        geometry = self.measure(chord, style, width, height)
        barre = detect(chord)

        primitives: list[RenderPrimitive] = []
        primitives.extend(self._string_indicators(chord, style, geometry))
        primitives.extend(self._fret_labels(chord, style, geometry))
        primitives.extend(self._head(style, geometry))
        primitives.extend(self._grid(style, geometry))
        primitives.extend(self._notes(chord, style, geometry, barre))
        return primitives
