"""Visual parameters of a chord diagram and the JSON style loader."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

from chordview.errors import StyleConfigError

logger = logging.getLogger(__name__)

_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ShowMode(Enum):
    """
    Display density of a diagram.

    NORMAL shows finger numbers and every fret label. SIMPLE hides finger
    numbers, keeps only the first fret label and drops to three rows when a
    first-position fingering fits in them.
    """

    NORMAL = "normal"
    SIMPLE = "simple"


@dataclass(frozen=True)
class ImageHandle:
    """
    A string-indicator graphic.

    The layout engine only reads the size; renderers resolve ``source``
    (a file path for PNG output, an href for SVG output).
    """

    source: str
    width: float
    height: float


@dataclass(frozen=True)
class StyleConfig:
    """
    Every configurable visual parameter of a chord diagram.

    Lengths are in drawing units (pixels for the bundled renderers),
    colours are ``#RRGGBB`` strings and alphas range from 0 to 255.
    """

    show_mode: ShowMode = ShowMode.NORMAL

    # String indicators (above the nut)
    closed_string_image: ImageHandle | None = None
    empty_string_image: ImageHandle | None = None
    string_offset_y: float = 0.0

    # Nut ("head")
    head_radius: float = 0.0
    head_color: str = "#FFFFFF"

    # Fret-number labels
    fret_text_size: float = 40.0
    fret_text_color: str = "#FFFFFF"
    fret_text_offset_x: float = 0.0

    # Grid
    grid_line_width: float = 10.0
    grid_line_color: str = "#FFFFFF"

    # Notes
    note_color: str = "#FFFFFF"
    note_radius: float = 40.0
    note_text_size: float = 40.0
    note_text_color: str = "#000000"
    note_stroke_width: float = 0.0
    note_stroke_color: str = "#FFFFFF"
    note_alpha: int = 255

    # Barre
    barre_color: str = "#FFFFFF"
    barre_alpha: int = 255
    barre_stroke_width: float = 0.0
    barre_stroke_color: str = "#FFFFFF"

    def __post_init__(self) -> None:
        for option in fields(self):
            value = getattr(self, option.name)
            if option.name.endswith("_color") and not _COLOR_RE.match(str(value)):
                raise StyleConfigError(f"{option.name} must be a #RRGGBB colour, got {value!r}.")
            if option.name.endswith("_alpha") and not 0 <= value <= 255:
                raise StyleConfigError(f"{option.name} must be between 0 and 255, got {value!r}.")

    def with_mode(self, mode: ShowMode) -> StyleConfig:
        """Return a copy of this style using *mode*."""
        return replace(self, show_mode=mode)


# ── JSON style files ─────────────────────────────────────────────────────────

_IMAGE_FIELDS = {"closed_string_image", "empty_string_image"}


def _parse_image(name: str, value: Any) -> ImageHandle | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise StyleConfigError(f"{name} must be an object with source, width and height.")
    try:
        return ImageHandle(
            source=str(value["source"]),
            width=float(value["width"]),
            height=float(value["height"]),
        )
    except KeyError as exc:
        raise StyleConfigError(f"{name} is missing the {exc.args[0]!r} key.") from None
    except (TypeError, ValueError):
        raise StyleConfigError(f"{name} width and height must be numbers.") from None


def _parse_show_mode(value: Any) -> ShowMode:
    try:
        return ShowMode(str(value).strip().lower())
    except ValueError:
        supported = ", ".join(mode.value for mode in ShowMode)
        raise StyleConfigError(
            f"Unsupported show_mode {value!r}. Use one of: {supported}."
        ) from None


def style_from_mapping(data: dict[str, Any]) -> StyleConfig:
    """
    Build a StyleConfig from a plain mapping of field names to values.

    Keys absent from *data* keep their StyleConfig defaults.

    Raises:
        StyleConfigError: On unknown keys or values of the wrong type.
    """
    known = {option.name: option for option in fields(StyleConfig)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise StyleConfigError(f"Unknown style option(s): {', '.join(unknown)}.")

    kwargs: dict[str, Any] = {}
    for name, value in data.items():
        if name == "show_mode":
            kwargs[name] = _parse_show_mode(value)
        elif name in _IMAGE_FIELDS:
            kwargs[name] = _parse_image(name, value)
        elif name.endswith("_color"):
            kwargs[name] = str(value)
        elif name.endswith("_alpha"):
            if isinstance(value, bool) or not isinstance(value, int):
                raise StyleConfigError(f"{name} must be an integer, got {value!r}.")
            kwargs[name] = value
        else:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise StyleConfigError(f"{name} must be a number, got {value!r}.")
            kwargs[name] = float(value)
    return StyleConfig(**kwargs)


def load_style(path: str | Path) -> StyleConfig:
    """
    Read a JSON style file.

    Image sources given as relative paths are resolved against the style
    file's directory.

    Raises:
        StyleConfigError: If the file is not a JSON object of style options.
        OSError: If the file cannot be read.
    """
    style_path = Path(path)
    try:
        data = json.loads(style_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise StyleConfigError(f"{style_path} is not valid JSON: {exc}") from None
    if not isinstance(data, dict):
        raise StyleConfigError(f"{style_path} must contain a JSON object.")

    for name in _IMAGE_FIELDS:
        image = data.get(name)
        if isinstance(image, dict) and "source" in image:
            source = Path(str(image["source"]))
            if not source.is_absolute():
                data[name] = {**image, "source": str(style_path.parent / source)}

    style = style_from_mapping(data)
    logger.debug("Loaded style from %s: %s", style_path, style)
    return style
