"""chordview CLI entry point."""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from chordview import __version__
from chordview.chord_models import ChordModel, parse_fingers, parse_frets
from chordview.chord_sheet import ChordSheetExporter
from chordview.diagram_renderers import DiagramRenderer, PngRenderer, SvgRenderer
from chordview.errors import ChordViewError
from chordview.layout_engine import LayoutEngine
from chordview.primitives import primitive_to_dict
from chordview.style import ShowMode, StyleConfig, load_style
from chordview.text_metrics import PillowTextMetrics

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 480
DEFAULT_BACKGROUND = "#2B2B2B"


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _resolve_style(style_path: str | None, mode: str | None) -> StyleConfig:
    """Load the style file (or defaults) and apply a --mode override."""
    style = load_style(style_path) if style_path is not None else StyleConfig()
    if mode is not None:
        style = style.with_mode(ShowMode(mode.lower()))
    return style


def _build_chord(frets: str, fingers: str | None, name: str) -> ChordModel:
    return ChordModel(
        frets=parse_frets(frets),
        fingers=parse_fingers(fingers) if fingers is not None else None,
        name=name,
    )


def _get_renderer(output_format: str, background: str | None, metrics: PillowTextMetrics) -> DiagramRenderer:
    """Return the renderer for the requested output format."""
    if output_format == "png":
        return PngRenderer(background=background, metrics=metrics)
    return SvgRenderer(background=background)


def _chord_options(func):
    """Options shared by every command that lays out a single chord."""
    func = click.option(
        "--height",
        type=click.FloatRange(min=0, min_open=True),
        default=DEFAULT_HEIGHT,
        show_default=True,
        help="Diagram height in pixels.",
    )(func)
    func = click.option(
        "--width",
        type=click.FloatRange(min=0, min_open=True),
        default=DEFAULT_WIDTH,
        show_default=True,
        help="Diagram width in pixels.",
    )(func)
    func = click.option(
        "--style",
        "style_path",
        type=click.Path(exists=True, dir_okay=False, readable=True),
        default=None,
        metavar="FILE",
        help="JSON style file. Keys are StyleConfig field names.",
    )(func)
    func = click.option(
        "--mode",
        type=click.Choice([mode.value for mode in ShowMode], case_sensitive=False),
        default=None,
        help="Show mode; overrides the style file.",
    )(func)
    func = click.option(
        "--fingers",
        default=None,
        metavar="FINGERS",
        help="Finger numbers per string, e.g. 032010 (0 = unspecified).",
    )(func)
    return func


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="chordview")
@click.option("--verbose", "-v", is_flag=True, help="Log layout details to stderr.")
def main(verbose: bool) -> None:
    """chordview — guitar chord diagram renderer."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("frets")
@_chord_options
@click.option("--name", default="", metavar="TEXT", help="Chord name, used for the default filename.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["svg", "png"], case_sensitive=False),
    default="svg",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--background",
    default=DEFAULT_BACKGROUND,
    show_default=True,
    metavar="COLOR",
    help="Background colour; pass 'none' for a transparent background.",
)
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to <name or chord>.<format>.",
)
def render(
    frets: str,
    fingers: str | None,
    mode: str | None,
    style_path: str | None,
    width: float,
    height: float,
    name: str,
    output_format: str,
    background: str,
    output: str | None,
) -> None:
    """
    Render one chord diagram to SVG or PNG.

    FRETS lists one fret per string from the lowest string up: x = closed,
    0 = open. Use commas once any fret has two digits.

    \b
    Examples:
      chordview render x32010 --fingers 032010 --name C
      chordview render 133211 --mode simple -o F.png --format png
      chordview render 8,10,10,9,8,8 --style dark.json
    """
    normalized_format = output_format.lower()
    resolved_output = output if output is not None else f"{name or 'chord'}.{normalized_format}"

    click.echo(f"chordview v{__version__}")
    click.echo(f"  Frets  : {frets}")
    click.echo(f"  Size   : {width:g} x {height:g}  |  Format: {normalized_format}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    try:
        chord = _build_chord(frets, fingers, name)
        style = _resolve_style(style_path, mode)
    except ChordViewError as exc:
        _fail(str(exc))

    metrics = PillowTextMetrics()
    engine = LayoutEngine(metrics)
    renderer = _get_renderer(
        normalized_format,
        None if background.lower() == "none" else background,
        metrics,
    )

    click.echo("[1/2] Laying out diagram...")
    try:
        drawing = engine.layout(chord, style, width, height)
    except ChordViewError as exc:
        _fail(str(exc))
    click.echo(f"      {len(drawing)} primitive(s)")

    click.echo("[2/2] Writing diagram...")
    try:
        content = renderer.render(drawing, width=width, height=height)
        target = Path(resolved_output)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8")
    except OSError as exc:
        _fail(f"Could not write diagram — {exc}")

    click.echo()
    click.echo(f"Done!  Wrote '{resolved_output}'.")


# ── primitives subcommand ──────────────────────────────────────────────────────

@main.command()
@click.argument("frets")
@_chord_options
def primitives(
    frets: str,
    fingers: str | None,
    mode: str | None,
    style_path: str | None,
    width: float,
    height: float,
) -> None:
    """
    Print the drawing primitives of one chord as JSON.

    \b
    Examples:
      chordview primitives x32010 --fingers 032010
      chordview primitives 111111 --mode simple --width 200 --height 240
    """
    try:
        chord = _build_chord(frets, fingers, "")
        style = _resolve_style(style_path, mode)
        result = LayoutEngine().layout(chord, style, width, height)
    except ChordViewError as exc:
        _fail(str(exc))

    click.echo(json.dumps([primitive_to_dict(primitive) for primitive in result], indent=2))


# ── sheet subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("chord_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--style",
    "style_path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    default=None,
    metavar="FILE",
    help="JSON style file. Keys are StyleConfig field names.",
)
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in ShowMode], case_sensitive=False),
    default=None,
    help="Show mode; overrides the style file.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "svg", "png"], case_sensitive=False),
    default="html",
    show_default=True,
    help="html: one printable sheet. svg/png: one file per chord in a directory.",
)
@click.option("--width", type=float, default=ChordSheetExporter.DEFAULT_WIDTH, show_default=True)
@click.option("--height", type=float, default=ChordSheetExporter.DEFAULT_HEIGHT, show_default=True)
@click.option(
    "--title",
    default=None,
    metavar="TEXT",
    help="Sheet title. Defaults to the chord file stem.",
)
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file (html) or directory (svg/png). Defaults next to CHORD_FILE.",
)
def sheet(
    chord_file: str,
    style_path: str | None,
    mode: str | None,
    output_format: str,
    width: float,
    height: float,
    title: str | None,
    output: str | None,
) -> None:
    """
    Render every chord of a chord list file.

    CHORD_FILE holds one 'NAME FRETS [FINGERS]' entry per line.

    \b
    Examples:
      chordview sheet songbook.txt
      chordview sheet songbook.txt -o songbook.html --title "Campfire"
      chordview sheet songbook.txt --format png -o diagrams/
    """
    chord_path = Path(chord_file)
    normalized_format = output_format.lower()
    resolved_title = title if title is not None else chord_path.stem.replace("_", " ")
    if output is not None:
        resolved_output = output
    elif normalized_format == "html":
        resolved_output = str(chord_path.with_suffix(".html"))
    else:
        resolved_output = str(chord_path.with_name(f"{chord_path.stem}_diagrams"))

    click.echo(f"chordview v{__version__}")
    click.echo(f"  Chords : {chord_file}")
    click.echo(f"  Format : {normalized_format}")
    click.echo(f"  Title  : {resolved_title}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    try:
        style = _resolve_style(style_path, mode)
    except ChordViewError as exc:
        _fail(str(exc))

    exporter = ChordSheetExporter(
        style=style,
        output_format=normalized_format,
        width=width,
        height=height,
        title=resolved_title,
    )

    click.echo("[1/2] Reading chord list...")
    click.echo("[2/2] Rendering diagrams...")
    try:
        written = exporter.export(chord_file, resolved_output)
    except ChordViewError as exc:
        _fail(f"Could not render sheet — {exc}")
    except OSError as exc:
        _fail(f"Could not write output — {exc}")

    click.echo()
    click.echo(f"Done!  Wrote {len(written)} file(s) to '{resolved_output}'.")
