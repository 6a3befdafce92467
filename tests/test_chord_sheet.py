"""Unit tests for ChordSheetExporter."""

from pathlib import Path

import pytest

from chordview.chord_sheet import ChordSheetExporter
from chordview.errors import MalformedChordError
from chordview.style import StyleConfig

CHORD_LIST = """\
# open chords
C   x32010 032010

G   320003 210003
Bb  6,8,8,7,6,6
"""

SMALL_STYLE = StyleConfig(note_radius=10, fret_text_size=20, grid_line_width=2)


def _write_chords(directory: Path, text: str = CHORD_LIST) -> Path:
    path = directory / "songbook.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_unsupported_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="Unsupported output format"):
        ChordSheetExporter(output_format="pdf")


def test_read_chords_skips_comments_and_blank_lines(tmp_path: Path) -> None:
    chords = ChordSheetExporter().read_chords(_write_chords(tmp_path))
    assert [chord.name for chord in chords] == ["C", "G", "Bb"]
    assert chords[2].frets == (6, 8, 8, 7, 6, 6)


def test_read_chords_reports_line_number(tmp_path: Path) -> None:
    path = _write_chords(tmp_path, "C x32010\nBroken x320\n")
    with pytest.raises(MalformedChordError, match=":2:"):
        ChordSheetExporter().read_chords(path)


def test_export_html_sheet(tmp_path: Path) -> None:
    output = tmp_path / "songbook.html"
    exporter = ChordSheetExporter(style=SMALL_STYLE, title="Songbook", width=200, height=240)
    written = exporter.export(_write_chords(tmp_path), output)

    assert written == [output]
    html = output.read_text(encoding="utf-8")
    assert "<h1>Songbook</h1>" in html
    assert html.count("<svg") == 3
    assert "<figcaption>Bb</figcaption>" in html


def test_export_svg_files(tmp_path: Path) -> None:
    output = tmp_path / "diagrams"
    exporter = ChordSheetExporter(style=SMALL_STYLE, output_format="svg", width=200, height=240)
    written = exporter.export(_write_chords(tmp_path), output)

    assert [path.name for path in written] == ["01_C.svg", "02_G.svg", "03_Bb.svg"]
    assert all(path.read_text(encoding="utf-8").startswith("<svg") for path in written)


def test_export_png_files(tmp_path: Path) -> None:
    output = tmp_path / "diagrams"
    exporter = ChordSheetExporter(style=SMALL_STYLE, output_format="PNG", width=200, height=240)
    written = exporter.export(_write_chords(tmp_path, "F#m 244222 134111\n"), output)

    assert [path.name for path in written] == ["01_Fsharpm.png"]
    assert written[0].read_bytes().startswith(b"\x89PNG")
