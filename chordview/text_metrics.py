"""Text measurement used to size fret labels and centre finger numbers."""

from __future__ import annotations

import threading
from typing import Protocol

from PIL import ImageFont


class TextMetrics(Protocol):
    """Font measurements the layout engine needs."""

    def text_width(self, text: str, size: float) -> float:
        """Advance width of *text* at font *size*."""
        ...

    def ascent_descent(self, size: float) -> tuple[float, float]:
        """Distances above and below the baseline at font *size*, both positive."""
        ...


class PillowTextMetrics:
    """
    TextMetrics backed by Pillow FreeType fonts.

    Without a ``font_path`` Pillow's bundled default font is used, which
    needs Pillow built with FreeType support (the case for PyPI wheels).
    Fonts are loaded once per size and shared between layout calls.
    """

    def __init__(self, font_path: str | None = None) -> None:
        self.font_path = font_path
        self._fonts: dict[float, ImageFont.FreeTypeFont] = {}
        self._lock = threading.Lock()

    def font(self, size: float) -> ImageFont.FreeTypeFont:
        """Return the font at *size*, loading it on first use."""
        with self._lock:
            font = self._fonts.get(size)
            if font is None:
                if self.font_path:
                    font = ImageFont.truetype(self.font_path, size)
                else:
                    font = ImageFont.load_default(size=size)
                self._fonts[size] = font
            return font

    def text_width(self, text: str, size: float) -> float:
        return float(self.font(size).getlength(text))

    def ascent_descent(self, size: float) -> tuple[float, float]:
        ascent, descent = self.font(size).getmetrics()
        return float(ascent), float(descent)
