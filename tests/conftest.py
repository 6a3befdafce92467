"""Shared fixtures: deterministic text metrics and a small diagram style."""

import pytest

from chordview.layout_engine import LayoutEngine
from chordview.style import ImageHandle, StyleConfig


class FixedMetrics:
    """Monospaced metrics: every character is half the font size wide."""

    def text_width(self, text: str, size: float) -> float:
        return len(text) * size * 0.5

    def ascent_descent(self, size: float) -> tuple[float, float]:
        return size * 0.8, size * 0.2


@pytest.fixture
def engine() -> LayoutEngine:
    return LayoutEngine(FixedMetrics())


@pytest.fixture
def style() -> StyleConfig:
    return StyleConfig(
        closed_string_image=ImageHandle(source="closed.png", width=12, height=12),
        empty_string_image=ImageHandle(source="open.png", width=12, height=16),
        string_offset_y=4,
        head_radius=8,
        head_color="#EEEEEE",
        fret_text_size=20,
        fret_text_color="#CCCCCC",
        grid_line_width=2,
        grid_line_color="#999999",
        note_color="#FF0000",
        note_radius=10,
        note_text_size=12,
        note_text_color="#000000",
        note_alpha=200,
        barre_color="#00FF00",
        barre_alpha=128,
    )
