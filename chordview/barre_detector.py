"""BarreDetector: Finds the single barre, if any, in a chord fingering."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chordview.chord_models import ChordModel

logger = logging.getLogger(__name__)

MIN_BARRE_STRINGS = 2


@dataclass(frozen=True)
class BarreSpan:
    """
    One finger pressing several adjacent strings on the same fret.

    Attributes:
        fret:              The barred fret (always the chord's least fret).
        start_string:      Index of the lowest string under the barre.
        string_span_count: Number of consecutive strings covered.
    """

    fret: int
    start_string: int
    string_span_count: int

    @property
    def end_string(self) -> int:
        """Index of the highest string under the barre."""
        return self.start_string + self.string_span_count - 1

    def covers(self, string: int) -> bool:
        return self.start_string <= string <= self.end_string


def detect(chord: ChordModel) -> BarreSpan | None:
    """
    Decide whether *chord* needs a barre and where it goes.

    Algorithm
    ---------
    Strings are scanned from index 0 upwards. Every maximal run of
    consecutive strings pressed at the chord's least fret is a candidate;
    any other value (closed, open or a higher fret) ends the run. Runs
    shorter than two strings are ignored.

    The widest candidate wins. Among equally wide runs the one starting at
    the lowest string index wins, i.e. the first maximal run found.

    Args:
        chord: A validated ChordModel.

    Returns:
        The BarreSpan, or None when no two adjacent strings share the least
        fret.
    """
    target = chord.least_fret
    best: BarreSpan | None = None
    run_start: int | None = None

    # A trailing sentinel closes a run that reaches the highest string.
    for index, fret in enumerate((*chord.frets, None)):
        if fret == target:
            if run_start is None:
                run_start = index
            continue
        if run_start is not None:
            length = index - run_start
            if length >= MIN_BARRE_STRINGS and (best is None or length > best.string_span_count):
                best = BarreSpan(fret=target, start_string=run_start, string_span_count=length)
            run_start = None

    logger.debug("Barre for frets %s: %s", chord.frets, best)
    return best
