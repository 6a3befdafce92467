"""Exception types raised by the chord diagram engine and its collaborators."""


class ChordViewError(ValueError):
    """Base class for every error raised by chordview."""


class MalformedChordError(ChordViewError):
    """A chord's fret or finger data does not have the expected shape."""


class InvalidLayoutAreaError(ChordViewError):
    """The drawing area is too small to lay out a diagram."""


class StyleConfigError(ChordViewError):
    """A style declaration could not be turned into a StyleConfig."""
