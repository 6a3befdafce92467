"""Renderer implementations translating layout primitives into output formats."""

from __future__ import annotations

import io
import math
from abc import ABC, abstractmethod
from typing import Sequence

import svgwrite
from PIL import Image as PILImage
from PIL import ImageColor, ImageDraw

from chordview.primitives import Circle, Image, Line, Path, PathCommand, Rect, RenderPrimitive, Text
from chordview.text_metrics import PillowTextMetrics

# Segments used to flatten one quadratic curve for raster output
_CURVE_STEPS = 16


def _escape_html(text: str) -> str:
    """Escape the three characters that are unsafe in HTML text content."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _opacity(alpha: int | None) -> float:
    return 1.0 if alpha is None else alpha / 255


def path_data(commands: Sequence[PathCommand]) -> str:
    """Format path commands as an SVG ``d`` attribute."""
    parts: list[str] = []
    for op, *coords in commands:
        points = " ".join(f"{coords[i]:g},{coords[i + 1]:g}" for i in range(0, len(coords), 2))
        parts.append(f"{op} {points}")
    return " ".join(parts)


def flatten_path(commands: Sequence[PathCommand]) -> list[tuple[float, float]]:
    """Approximate path commands by a polygon, sampling quadratic curves."""
    points: list[tuple[float, float]] = []
    for op, *coords in commands:
        if op in ("M", "L"):
            points.append((coords[0], coords[1]))
        elif op == "Q":
            x0, y0 = points[-1] if points else (coords[0], coords[1])
            cx, cy, x1, y1 = coords
            for step in range(1, _CURVE_STEPS + 1):
                t = step / _CURVE_STEPS
                u = 1 - t
                points.append(
                    (u * u * x0 + 2 * u * t * cx + t * t * x1, u * u * y0 + 2 * u * t * cy + t * t * y1)
                )
        else:
            raise ValueError(f"Unsupported path command {op!r}.")
    return points


class DiagramRenderer(ABC):
    """Abstract diagram renderer: draws primitives in order onto a fresh surface."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(
        self, primitives: Sequence[RenderPrimitive], *, width: float, height: float
    ) -> str | bytes:
        """Render primitives onto a width x height surface and return the file content."""


class SvgRenderer(DiagramRenderer):
    """Render primitives into a standalone SVG document using svgwrite."""

    def __init__(self, background: str | None = None, font_family: str = "sans-serif") -> None:
        """
        Args:
            background:  Fill colour behind the diagram, transparent when None.
            font_family: CSS font family for fret labels and finger numbers.
        """
        self.background = background
        self.font_family = font_family

    @property
    def default_extension(self) -> str:
        return ".svg"

    def _element(self, dwg: svgwrite.Drawing, primitive: RenderPrimitive) -> svgwrite.base.BaseElement:
        if isinstance(primitive, Line):
            return dwg.line(
                (primitive.x1, primitive.y1),
                (primitive.x2, primitive.y2),
                stroke=primitive.color,
                stroke_width=primitive.width,
            )
        if isinstance(primitive, Circle):
            return dwg.circle(
                center=(primitive.cx, primitive.cy),
                r=primitive.radius,
                fill=primitive.fill_color or "none",
                fill_opacity=_opacity(primitive.alpha),
                stroke=primitive.stroke_color or "none",
                stroke_width=primitive.stroke_width or 0,
            )
        if isinstance(primitive, Rect):
            return dwg.rect(
                insert=(primitive.left, primitive.top),
                size=(primitive.right - primitive.left, primitive.bottom - primitive.top),
                fill=primitive.fill_color or "none",
                fill_opacity=_opacity(primitive.alpha),
            )
        if isinstance(primitive, Text):
            return dwg.text(
                primitive.content,
                insert=(primitive.x, primitive.y),
                font_size=primitive.size,
                font_family=self.font_family,
                fill=primitive.color,
            )
        if isinstance(primitive, Image):
            return dwg.image(
                href=primitive.handle.source,
                insert=(primitive.x, primitive.y),
                size=(primitive.handle.width, primitive.handle.height),
            )
        if isinstance(primitive, Path):
            return dwg.path(d=path_data(primitive.commands), fill=primitive.fill_color)
        raise TypeError(f"Unsupported primitive: {primitive!r}")

    def render(
        self, primitives: Sequence[RenderPrimitive], *, width: float, height: float
    ) -> str:
        dwg = svgwrite.Drawing(
            size=(width, height),
            viewBox=f"0 0 {width:g} {height:g}",
            debug=False,
        )
        if self.background is not None:
            dwg.add(dwg.rect((0, 0), (width, height), fill=self.background))
        for primitive in primitives:
            dwg.add(self._element(dwg, primitive))
        return dwg.tostring()


class PngRenderer(DiagramRenderer):
    """
    Rasterise primitives into a PNG image using Pillow.

    Translucent fills are drawn on a separate layer and alpha-composited,
    so overlapping notes and barres blend like they do on a canvas.
    Indicator images are loaded from ``ImageHandle.source`` as file paths.
    """

    def __init__(
        self,
        background: str | None = None,
        metrics: PillowTextMetrics | None = None,
    ) -> None:
        """
        Args:
            background: Fill colour behind the diagram, transparent when None.
            metrics:    Font provider; pass the one given to the LayoutEngine so
                        labels are drawn with the font they were measured with.
        """
        self.background = background
        self.metrics = metrics if metrics is not None else PillowTextMetrics()

    @property
    def default_extension(self) -> str:
        return ".png"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _rgba(self, color: str, alpha: int | None = None) -> tuple[int, int, int, int]:
        red, green, blue = ImageColor.getrgb(color)[:3]
        return red, green, blue, 255 if alpha is None else alpha

    def _draw(self, draw: ImageDraw.ImageDraw, primitive: RenderPrimitive) -> None:
        if isinstance(primitive, Line):
            if primitive.width > 0:
                draw.line(
                    [(primitive.x1, primitive.y1), (primitive.x2, primitive.y2)],
                    fill=self._rgba(primitive.color),
                    width=max(1, round(primitive.width)),
                )
        elif isinstance(primitive, Circle):
            box = [
                primitive.cx - primitive.radius,
                primitive.cy - primitive.radius,
                primitive.cx + primitive.radius,
                primitive.cy + primitive.radius,
            ]
            fill = self._rgba(primitive.fill_color, primitive.alpha) if primitive.fill_color else None
            outline = self._rgba(primitive.stroke_color) if primitive.stroke_color else None
            draw.ellipse(
                box,
                fill=fill,
                outline=outline,
                width=max(1, round(primitive.stroke_width or 0)),
            )
        elif isinstance(primitive, Rect):
            if primitive.fill_color:
                draw.rectangle(
                    [primitive.left, primitive.top, primitive.right, primitive.bottom],
                    fill=self._rgba(primitive.fill_color, primitive.alpha),
                )
        elif isinstance(primitive, Text):
            draw.text(
                (primitive.x, primitive.y),
                primitive.content,
                fill=self._rgba(primitive.color),
                font=self.metrics.font(primitive.size),
                anchor="ls",
            )
        elif isinstance(primitive, Path):
            draw.polygon(flatten_path(primitive.commands), fill=self._rgba(primitive.fill_color))
        else:
            raise TypeError(f"Unsupported primitive: {primitive!r}")

    def _paste_image(self, canvas: PILImage.Image, primitive: Image) -> None:
        handle = primitive.handle
        size = (max(1, round(handle.width)), max(1, round(handle.height)))
        with PILImage.open(handle.source) as source:
            picture = source.convert("RGBA").resize(size)
        canvas.paste(picture, (round(primitive.x), round(primitive.y)), picture)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self, primitives: Sequence[RenderPrimitive], *, width: float, height: float
    ) -> bytes:
        """
        Raises:
            OSError: If an indicator image cannot be opened.
        """
        size = (max(1, math.ceil(width)), max(1, math.ceil(height)))
        background = self._rgba(self.background) if self.background else (0, 0, 0, 0)
        canvas = PILImage.new("RGBA", size, background)

        for primitive in primitives:
            if isinstance(primitive, Image):
                self._paste_image(canvas, primitive)
                continue
            alpha = getattr(primitive, "alpha", None)
            if alpha is None or alpha == 255:
                self._draw(ImageDraw.Draw(canvas), primitive)
            else:
                layer = PILImage.new("RGBA", size, (0, 0, 0, 0))
                self._draw(ImageDraw.Draw(layer), primitive)
                canvas.alpha_composite(layer)

        buffer = io.BytesIO()
        canvas.save(buffer, format="PNG")
        return buffer.getvalue()


def build_html(title: str, svgs: Sequence[str], captions: Sequence[str] | None = None) -> str:
    """
    Wrap SVG diagrams in a self-contained, printable HTML chord sheet.

    Each SVG is placed in its own ``.chord`` figure with an optional
    caption. The stylesheet lays figures out in a wrapping grid on screen
    and avoids splitting a figure across printed pages.
    """
    title_safe = _escape_html(title)
    heading = f"  <h1>{title_safe}</h1>\n" if title else ""
    names = list(captions) if captions is not None else [""] * len(svgs)

    figures: list[str] = []
    for svg, caption in zip(svgs, names):
        label = f"<figcaption>{_escape_html(caption)}</figcaption>" if caption else ""
        figures.append(f'    <figure class="chord">{label}{svg}</figure>')
    body = "\n".join(figures)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    *, *::before, *::after {{ box-sizing: border-box; }}
    body {{
      font-family: Georgia, serif;
      background: #f0f0f0;
      margin: 0;
      padding: 2rem;
    }}
    h1 {{
      text-align: center;
      font-size: 1.6rem;
      margin-bottom: 2rem;
      color: #222;
    }}
    .sheet {{
      display: flex;
      flex-wrap: wrap;
      gap: 1.5rem;
      justify-content: center;
    }}
    .chord {{
      background: #2b2b2b;
      border-radius: 8px;
      box-shadow: 0 2px 8px rgba(0, 0, 0, 0.15);
      margin: 0;
      padding: 1rem;
      text-align: center;
    }}
    .chord figcaption {{
      color: #fff;
      font-size: 1.2rem;
      margin-bottom: 0.5rem;
    }}
    .chord svg {{
      display: block;
    }}
    @media print {{
      body {{
        background: #fff;
        padding: 0;
      }}
      .chord {{
        box-shadow: none;
        page-break-inside: avoid;
      }}
    }}
  </style>
</head>
<body>
{heading}  <div class="sheet">
{body}
  </div>
</body>
</html>"""
