"""ChordSheetExporter: renders a chord list file as an HTML sheet or diagram files."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Final

from chordview.chord_models import ChordModel, parse_chord_line
from chordview.diagram_renderers import DiagramRenderer, PngRenderer, SvgRenderer, build_html
from chordview.errors import MalformedChordError
from chordview.layout_engine import LayoutEngine
from chordview.style import StyleConfig
from chordview.text_metrics import PillowTextMetrics

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS: Final[set[str]] = {"html", "svg", "png"}


class ChordSheetExporter:
    """
    Lay out every chord of a chord list and write the result to disk.

    Chord list format
    -----------------
    One chord per line as ``NAME FRETS [FINGERS]``, for example::

        # open chords
        C   x32010 032010
        F   133211 134211
        Bb  6,8,8,7,6,6

    Blank lines and lines starting with ``#`` are ignored.

    Supported formats:
    - ``html``: every diagram as inline SVG in one printable HTML file.
    - ``svg`` / ``png``: one file per chord in an output directory.
    """

    DEFAULT_WIDTH = 400
    DEFAULT_HEIGHT = 480

    def __init__(
        self,
        style: StyleConfig | None = None,
        output_format: str = "html",
        width: float = DEFAULT_WIDTH,
        height: float = DEFAULT_HEIGHT,
        title: str = "",
    ) -> None:
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.style = style if style is not None else StyleConfig()
        self.output_format = normalized
        self.width = width
        self.height = height
        self.title = title
        metrics = PillowTextMetrics()
        self.engine = LayoutEngine(metrics)
        self.renderer = self._build_renderer(normalized, metrics)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str, metrics: PillowTextMetrics) -> DiagramRenderer:
        if output_format == "png":
            return PngRenderer(metrics=metrics)
        return SvgRenderer()

    def _render(self, chord: ChordModel) -> str | bytes:
        primitives = self.engine.layout(chord, self.style, self.width, self.height)
        return self.renderer.render(primitives, width=self.width, height=self.height)

    def _file_stem(self, index: int, chord: ChordModel) -> str:
        safe = re.sub(r"[^\w#-]", "_", chord.name).replace("#", "sharp")
        return f"{index:02d}_{safe or 'chord'}"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def read_chords(self, chord_file: str | Path) -> list[ChordModel]:
        """
        Parse a chord list file.

        Raises:
            MalformedChordError: If a line is not a valid chord; the message
                                 names the offending line number.
            OSError: If the file cannot be read.
        """
        chords: list[ChordModel] = []
        text = Path(chord_file).read_text(encoding="utf-8")
        for line_no, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            try:
                chords.append(parse_chord_line(stripped))
            except MalformedChordError as exc:
                raise MalformedChordError(f"{chord_file}:{line_no}: {exc}") from exc
        return chords

    def build_html(self, chords: list[ChordModel]) -> str:
        """Render *chords* as inline SVG diagrams inside one HTML document."""
        svgs = [str(self._render(chord)) for chord in chords]
        return build_html(self.title, svgs, [chord.name for chord in chords])

    def export(self, chord_file: str | Path, output_path: str | Path) -> list[Path]:
        """
        Render every chord of *chord_file* and write the output.

        For ``html`` *output_path* is the HTML file; for ``svg`` and ``png``
        it is a directory (created if needed) receiving one file per chord.

        Returns:
            Paths of the files written.

        Raises:
            MalformedChordError:    If the chord list cannot be parsed.
            InvalidLayoutAreaError: If the diagram size is too small for the style.
            OSError: If an output file cannot be written.
        """
        chords = self.read_chords(chord_file)
        output = Path(output_path)

        if self.output_format == "html":
            output.write_text(self.build_html(chords), encoding="utf-8")
            logger.debug("Wrote %d chord(s) to %s", len(chords), output)
            return [output]

        output.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for index, chord in enumerate(chords, start=1):
            target = output / f"{self._file_stem(index, chord)}{self.renderer.default_extension}"
            content = self._render(chord)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
            logger.debug("Wrote %s", target)
            written.append(target)
        return written
