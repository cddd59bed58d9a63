"""Custom exceptions for the bansuri flute finder.

The theory core reports bad user input with sentinel values; these
exceptions are raised by strict lookups and by the collaborators around it.
"""


class BansuriError(Exception):
    """Base exception for flute finder errors."""
    pass


class UnknownFluteError(BansuriError):
    """Exception raised when a flute name does not resolve to a pitch class."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown flute: {name!r}")


class InvalidScaleError(BansuriError):
    """Exception raised when a scale does not have exactly seven notes."""
    pass


class InvalidThemeError(BansuriError):
    """Exception raised when a display theme is not light or dark."""
    pass


class MidiReadError(BansuriError):
    """Exception raised when a MIDI file cannot be read."""
    pass
