"""Drawing primitives emitted by the layout engine and consumed by renderers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union

from chordview.style import ImageHandle

#: One path command: ("M", x, y), ("L", x, y) or ("Q", ctrl_x, ctrl_y, x, y).
PathCommand = tuple[Any, ...]


@dataclass(frozen=True)
class Line:
    """A stroked straight segment."""

    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float


@dataclass(frozen=True)
class Circle:
    """A circle, filled when ``fill_color`` is set and outlined when ``stroke_color`` is set."""

    cx: float
    cy: float
    radius: float
    fill_color: str | None = None
    alpha: int | None = None
    stroke_color: str | None = None
    stroke_width: float | None = None

    @property
    def is_filled(self) -> bool:
        return self.fill_color is not None


@dataclass(frozen=True)
class Rect:
    """An axis-aligned filled rectangle."""

    left: float
    top: float
    right: float
    bottom: float
    fill_color: str | None = None
    alpha: int | None = None


@dataclass(frozen=True)
class Text:
    """A text run; ``x`` is its left edge and ``y`` its baseline."""

    x: float
    y: float
    content: str
    size: float
    color: str


@dataclass(frozen=True)
class Image:
    """An image placed with its top-left corner at (x, y), drawn at its handle's size."""

    handle: ImageHandle
    x: float
    y: float


@dataclass(frozen=True)
class Path:
    """A filled outline made of move, line and quadratic-curve commands."""

    commands: tuple[PathCommand, ...]
    fill_color: str


RenderPrimitive = Union[Line, Circle, Rect, Text, Image, Path]


def primitive_to_dict(primitive: RenderPrimitive) -> dict[str, Any]:
    """Serialise a primitive to a JSON-friendly dict tagged with its kind."""
    payload = asdict(primitive)
    if isinstance(primitive, Path):
        payload["commands"] = [list(command) for command in primitive.commands]
    return {"kind": type(primitive).__name__.lower(), **payload}
