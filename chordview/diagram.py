"""ChordDiagram: Host object composing a layout engine with a renderer."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from chordview.chord_models import ChordModel
from chordview.diagram_renderers import DiagramRenderer, SvgRenderer
from chordview.layout_engine import LayoutEngine
from chordview.primitives import RenderPrimitive
from chordview.style import StyleConfig


@dataclass(frozen=True)
class ChordDiagram:
    """
    A chord diagram as a host would hold it: what to draw and how.

    The diagram never redraws by itself. Hosts swap the chord or style with
    ``with_chord`` / ``with_style`` and call ``draw`` when they decide to
    repaint.

    Usage:

        diagram = ChordDiagram(style=StyleConfig()).with_chord(chord)
        svg = diagram.draw(400, 480)
    """

    style: StyleConfig
    chord: ChordModel | None = None
    engine: LayoutEngine = field(default_factory=LayoutEngine, compare=False)
    renderer: DiagramRenderer = field(default_factory=SvgRenderer, compare=False)

    def with_chord(self, chord: ChordModel | None) -> ChordDiagram:
        return replace(self, chord=chord)

    def with_style(self, style: StyleConfig) -> ChordDiagram:
        return replace(self, style=style)

    def primitives(self, width: float, height: float) -> list[RenderPrimitive]:
        """Lay out the current chord in a width x height area."""
        return self.engine.layout(self.chord, self.style, width, height)

    def draw(self, width: float, height: float) -> str | bytes:
        """Lay out and render the current chord, returning the renderer's file content."""
        return self.renderer.render(self.primitives(width, height), width=width, height=height)
