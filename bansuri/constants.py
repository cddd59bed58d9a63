#!/usr/bin/env python

"""
Bansuri Constants
=================
Pitch table and fixed layout values shared by the flute finder.
"""

from typing import Dict, Tuple

# Chromatic pitch classes, sharp spelling, in flute enumeration order
NOTES: Tuple[str, ...] = (
    "A", "A#", "B", "C", "C#", "D",
    "D#", "E", "F", "F#", "G", "G#",
)

# Flat to sharp conversion
FLAT_TO_SHARP: Dict[str, str] = {
    "Db": "C#", "Eb": "D#", "Fb": "E", "Gb": "F#",
    "Ab": "G#", "Bb": "A#", "Cb": "B",
}

MAJOR_SCALE_INTERVALS: Tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)

# A flute is named after the 4th degree of its scale
ROOT_OFFSET = 5

SCALE_LENGTH = len(MAJOR_SCALE_INTERVALS)

# Solfège labels from the blow hole to the far end
HOLE_LABELS: Tuple[str, ...] = ("Ni", "Dha", "Pa", "Ma", "Ga", "Re", "Sa")
BLOW_HOLE_LABEL = "BLOW"

# Hole states consumed by renderers
HOLE_STATE_DEFAULT = "default"
HOLE_STATE_AVOID = "avoid"
HOLE_STATE_EXTRA = "extra"

THEMES: Tuple[str, ...] = ("light", "dark")

# MIDI note number of the lowest A (A-1) modulo 12
MIDI_A_PITCH_CLASS = 9
