"""Unit tests for the SVG, PNG and HTML renderers."""

import io
from pathlib import Path

from PIL import Image as PILImage

from chordview.diagram_renderers import PngRenderer, SvgRenderer, build_html, flatten_path, path_data
from chordview.primitives import Circle, Image, Line, Path as PathPrimitive, Rect, Text
from chordview.style import ImageHandle

HEAD = PathPrimitive(
    commands=(("M", 10, 28), ("Q", 10, 20, 18, 20), ("L", 192, 20), ("Q", 200, 20, 200, 28)),
    fill_color="#EEEEEE",
)


def _png_pixels(content: bytes) -> PILImage.Image:
    return PILImage.open(io.BytesIO(content)).convert("RGBA")


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def test_path_data_formats_commands() -> None:
    assert path_data(HEAD.commands) == "M 10,28 Q 10,20 18,20 L 192,20 Q 200,20 200,28"


def test_flatten_path_ends_on_curve_endpoints() -> None:
    points = flatten_path(HEAD.commands)
    assert points[0] == (10, 28)
    assert points[-1] == (200, 28)
    assert (192, 20) in points


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------

def test_svg_renderer_emits_one_element_per_primitive() -> None:
    svg = SvgRenderer().render(
        [
            Line(x1=0, y1=5, x2=100, y2=5, color="#999999", width=2),
            Circle(cx=50, cy=50, radius=10, fill_color="#FF0000", alpha=255),
            Rect(left=10, top=10, right=90, bottom=30, fill_color="#00FF00", alpha=128),
            Text(x=45, y=54, content="3", size=12, color="#000000"),
        ],
        width=100,
        height=120,
    )
    assert svg.startswith("<svg")
    assert svg.count("<line") == 1
    assert svg.count("<circle") == 1
    assert svg.count("<rect") == 1
    assert ">3</text>" in svg
    assert 'viewBox="0 0 100 120"' in svg


def test_svg_renderer_translates_alpha_to_opacity() -> None:
    svg = SvgRenderer().render(
        [Rect(left=0, top=0, right=10, bottom=10, fill_color="#00FF00", alpha=51)],
        width=10,
        height=10,
    )
    assert 'fill-opacity="0.2"' in svg


def test_svg_renderer_outline_circle_is_unfilled() -> None:
    svg = SvgRenderer().render(
        [Circle(cx=5, cy=5, radius=4, stroke_color="#123456", stroke_width=2)],
        width=10,
        height=10,
    )
    assert 'fill="none"' in svg
    assert 'stroke="#123456"' in svg


def test_svg_renderer_draws_head_path_and_images() -> None:
    handle = ImageHandle(source="open.svg", width=12, height=16)
    svg = SvgRenderer().render([HEAD, Image(handle=handle, x=4, y=8)], width=210, height=260)
    assert 'd="M 10,28 Q 10,20 18,20 L 192,20 Q 200,20 200,28"' in svg
    assert "open.svg" in svg


def test_svg_renderer_background() -> None:
    svg = SvgRenderer(background="#2B2B2B").render([], width=10, height=10)
    assert 'fill="#2B2B2B"' in svg


# ---------------------------------------------------------------------------
# PNG
# ---------------------------------------------------------------------------

def test_png_renderer_produces_png_of_requested_size() -> None:
    content = PngRenderer().render([], width=80.4, height=60)
    assert content.startswith(b"\x89PNG")
    assert _png_pixels(content).size == (81, 60)


def test_png_renderer_fills_rectangles() -> None:
    content = PngRenderer(background="#000000").render(
        [Rect(left=10, top=10, right=30, bottom=30, fill_color="#FF0000", alpha=255)],
        width=40,
        height=40,
    )
    pixels = _png_pixels(content)
    assert pixels.getpixel((20, 20)) == (255, 0, 0, 255)
    assert pixels.getpixel((35, 35)) == (0, 0, 0, 255)


def test_png_renderer_blends_translucent_fills() -> None:
    content = PngRenderer(background="#000000").render(
        [Circle(cx=20, cy=20, radius=10, fill_color="#FFFFFF", alpha=128)],
        width=40,
        height=40,
    )
    red, green, blue, alpha = _png_pixels(content).getpixel((20, 20))
    assert 120 <= red <= 136
    assert alpha == 255


def test_png_renderer_draws_text_and_path() -> None:
    content = PngRenderer(background="#000000").render(
        [HEAD, Text(x=100, y=200, content="8", size=40, color="#FFFFFF")],
        width=210,
        height=260,
    )
    pixels = _png_pixels(content)
    assert pixels.getpixel((100, 24)) == (238, 238, 238, 255)
    assert pixels.getbbox() is not None


def test_png_renderer_pastes_indicator_images(tmp_path: Path) -> None:
    source = tmp_path / "closed.png"
    PILImage.new("RGBA", (4, 4), (0, 0, 255, 255)).save(source)
    handle = ImageHandle(source=str(source), width=8, height=8)

    content = PngRenderer().render([Image(handle=handle, x=2, y=2)], width=20, height=20)
    pixels = _png_pixels(content)
    assert pixels.getpixel((5, 5)) == (0, 0, 255, 255)
    assert pixels.getpixel((15, 15))[3] == 0


# ---------------------------------------------------------------------------
# HTML sheet
# ---------------------------------------------------------------------------

def test_build_html_title_in_title_tag_and_h1() -> None:
    html = build_html("Campfire", ["<svg></svg>"])
    assert "<title>Campfire</title>" in html
    assert "<h1>Campfire</h1>" in html


def test_build_html_empty_title_no_h1() -> None:
    assert "<h1>" not in build_html("", ["<svg></svg>"])


def test_build_html_escapes_title_and_captions() -> None:
    html = build_html("Fur & Feathers", ["<svg></svg>"], ["<C>"])
    assert "Fur &amp; Feathers" in html
    assert "<figcaption>&lt;C&gt;</figcaption>" in html


def test_build_html_one_figure_per_svg() -> None:
    html = build_html("Test", ["<svg>1</svg>", "<svg>2</svg>", "<svg>3</svg>"], ["C", "G", "Am"])
    assert html.count('<figure class="chord">') == 3
    assert "<svg>2</svg>" in html


def test_build_html_print_rules() -> None:
    html = build_html("", [])
    assert html.startswith("<!DOCTYPE html>")
    assert "@media print" in html
    assert "page-break-inside: avoid" in html
