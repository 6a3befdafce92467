"""Tests for the chordview command line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from chordview import __version__
from chordview.cli import main


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_primitives_prints_json() -> None:
    result = CliRunner().invoke(main, ["primitives", "x32010", "--fingers", "032010"])
    assert result.exit_code == 0, result.output

    payload = json.loads(result.output)
    kinds = [item["kind"] for item in payload]
    assert kinds.count("line") == 11
    assert [item["content"] for item in payload if item["kind"] == "text"] == ["3", "2", "1"]
    assert len([item for item in payload if item["kind"] == "circle"]) == 3


def test_primitives_simple_mode_has_three_rows() -> None:
    result = CliRunner().invoke(main, ["primitives", "111111", "--mode", "simple"])
    assert result.exit_code == 0, result.output

    payload = json.loads(result.output)
    assert [item["kind"] for item in payload].count("line") == 4 + 6
    assert [item["kind"] for item in payload].count("rect") == 1


def test_primitives_rejects_malformed_frets() -> None:
    result = CliRunner().invoke(main, ["primitives", "x3201"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_render_writes_svg(tmp_path: Path) -> None:
    output = tmp_path / "c.svg"
    result = CliRunner().invoke(
        main, ["render", "x32010", "--fingers", "032010", "--name", "C", "-o", str(output)]
    )
    assert result.exit_code == 0, result.output
    assert "Done!" in result.output
    assert output.read_text(encoding="utf-8").startswith("<svg")


def test_render_writes_png_with_style_file(tmp_path: Path) -> None:
    style = tmp_path / "style.json"
    style.write_text(json.dumps({"note_radius": 12, "grid_line_width": 2}), encoding="utf-8")
    output = tmp_path / "bb.png"

    result = CliRunner().invoke(
        main,
        ["render", "6,8,8,7,6,6", "--style", str(style), "--format", "png", "-o", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert output.read_bytes().startswith(b"\x89PNG")


def test_render_rejects_bad_style(tmp_path: Path) -> None:
    style = tmp_path / "style.json"
    style.write_text(json.dumps({"note_colour": "#FFFFFF"}), encoding="utf-8")

    result = CliRunner().invoke(main, ["render", "x32010", "--style", str(style)])
    assert result.exit_code == 1
    assert "note_colour" in result.output


def test_render_rejects_too_small_area(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        main, ["render", "x32010", "--width", "20", "-o", str(tmp_path / "x.svg")]
    )
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_sheet_writes_html_next_to_chord_file(tmp_path: Path) -> None:
    chord_file = tmp_path / "campfire_songs.txt"
    chord_file.write_text("C x32010 032010\nAm x02210 002310\n", encoding="utf-8")

    result = CliRunner().invoke(main, ["sheet", str(chord_file)])
    assert result.exit_code == 0, result.output

    html = (tmp_path / "campfire_songs.html").read_text(encoding="utf-8")
    assert "<h1>campfire songs</h1>" in html
    assert html.count("<svg") == 2


def test_sheet_reports_malformed_chord_file(tmp_path: Path) -> None:
    chord_file = tmp_path / "broken.txt"
    chord_file.write_text("C x32010\nD xx0\n", encoding="utf-8")

    result = CliRunner().invoke(main, ["sheet", str(chord_file)])
    assert result.exit_code == 1
    assert ":2:" in result.output
