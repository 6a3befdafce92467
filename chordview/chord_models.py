"""ChordModel: Normalised description of one six-string chord fingering."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final, Sequence

from chordview.errors import MalformedChordError

# ── Fretboard constants ─────────────────────────────────────────────────────
STRING_COUNT: Final[int] = 6
CLOSED_STRING: Final[int] = -1  # muted, drawn with the closed-string indicator
OPEN_STRING: Final[int] = 0     # played open, drawn with the open-string indicator
MAX_FINGER: Final[int] = 4      # index .. little finger; 0 means "unspecified"

_SEPARATOR_RE = re.compile(r"[\s,]+")


def _as_int_tuple(values: Sequence[int], label: str) -> tuple[int, ...]:
    if isinstance(values, (str, bytes)):
        raise MalformedChordError(f"{label} must be a sequence of integers, got {values!r}.")
    result: list[int] = []
    for value in values:
        # bool is an int subclass but never a meaningful fret or finger
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedChordError(f"{label} must contain integers only, got {value!r}.")
        result.append(value)
    if len(result) != STRING_COUNT:
        raise MalformedChordError(
            f"{label} must have exactly {STRING_COUNT} entries, got {len(result)}."
        )
    return tuple(result)


@dataclass(frozen=True)
class ChordModel:
    """
    One chord fingering, indexed from the lowest (thickest) string to the highest.

    Attributes:
        frets:   Six fret values. -1 = closed string, 0 = open string,
                 n >= 1 = pressed at fret n.
        fingers: Optional six finger numbers (0-4, 0 = unspecified), aligned
                 index-for-index with ``frets``. ``None`` when not annotated.
        name:    Display name used for captions, e.g. "C" or "F#m7".

    Raises:
        MalformedChordError: If either sequence has the wrong length or
                             contains out-of-range values.
    """

    frets: tuple[int, ...]
    fingers: tuple[int, ...] | None = None
    name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        frets = _as_int_tuple(self.frets, "frets")
        for fret in frets:
            if fret < CLOSED_STRING:
                raise MalformedChordError(f"Fret values must be >= -1, got {fret}.")
        object.__setattr__(self, "frets", frets)

        if self.fingers is not None:
            fingers = _as_int_tuple(self.fingers, "fingers")
            for finger in fingers:
                if not 0 <= finger <= MAX_FINGER:
                    raise MalformedChordError(
                        f"Finger values must be between 0 and {MAX_FINGER}, got {finger}."
                    )
            object.__setattr__(self, "fingers", fingers)

    @property
    def pressed_frets(self) -> list[int]:
        """Fret numbers of every pressed string, in string order."""
        return [fret for fret in self.frets if fret > 0]

    @property
    def least_fret(self) -> int:
        """Lowest pressed fret, or 1 when no string is pressed."""
        return min(self.pressed_frets, default=1)

    @property
    def largest_fret(self) -> int:
        """Highest pressed fret, or 1 when no string is pressed."""
        return max(self.pressed_frets, default=1)

    @property
    def has_closed_string(self) -> bool:
        return CLOSED_STRING in self.frets

    @property
    def has_open_string(self) -> bool:
        return OPEN_STRING in self.frets

    def finger_at(self, string: int) -> int:
        """Finger number annotated for *string*, 0 when unknown."""
        return self.fingers[string] if self.fingers is not None else 0


# ── Text notation ────────────────────────────────────────────────────────────

def _parse_positions(text: str, label: str, closed_token: bool) -> list[int]:
    """
    Split a fret/finger string into integers.

    Two notations are accepted:

    - compact: one character per string, e.g. ``"x32010"``;
    - separated: whitespace or comma separated values, e.g. ``"8 10 10 9 8 8"``
      or ``"-1,3,2,0,1,0"``. Required as soon as any value has two digits.

    ``x``/``X`` stands for a closed string when *closed_token* is set.
    """
    stripped = text.strip()
    if not stripped:
        raise MalformedChordError(f"Empty {label} notation.")

    parts = _SEPARATOR_RE.split(stripped) if _SEPARATOR_RE.search(stripped) else list(stripped)

    values: list[int] = []
    for part in parts:
        if closed_token and part in ("x", "X"):
            values.append(CLOSED_STRING)
            continue
        try:
            values.append(int(part))
        except ValueError:
            raise MalformedChordError(f"Invalid {label} value {part!r} in {text!r}.") from None
    return values


def parse_frets(text: str) -> tuple[int, ...]:
    """
    Parse fret notation such as ``"x32010"`` or ``"8 10 10 9 8 8"``.

    Returns:
        A tuple of six fret values.

    Raises:
        MalformedChordError: If the text is not six valid fret values.
    """
    return _as_int_tuple(_parse_positions(text, "frets", closed_token=True), "frets")


def parse_fingers(text: str) -> tuple[int, ...]:
    """Parse finger notation such as ``"032010"``."""
    return _as_int_tuple(_parse_positions(text, "fingers", closed_token=False), "fingers")


def parse_chord_line(line: str) -> ChordModel:
    """
    Parse one chord list entry: ``NAME FRETS [FINGERS]``.

    Fret and finger fields use the compact notation; for chords above the
    ninth fret, separate the values with commas, e.g.
    ``"Bb 6,8,8,7,6,6 1,3,4,2,1,1"``.

    Raises:
        MalformedChordError: If the line does not hold a name and six frets.
    """
    fields = line.split()
    if len(fields) not in (2, 3):
        raise MalformedChordError(
            f"Expected 'NAME FRETS [FINGERS]', got {line.strip()!r}."
        )
    fingers = parse_fingers(fields[2]) if len(fields) == 3 else None
    return ChordModel(frets=parse_frets(fields[1]), fingers=fingers, name=fields[0])
