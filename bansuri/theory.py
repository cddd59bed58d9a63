#!/usr/bin/env python

"""
Music Theory Helpers
====================
Pitch table lookups and the free-text note parser.

Every function here is total: unresolvable names come back as ``None`` and
unusable tokens are dropped, so callers never need a try/except around them.
"""

import logging
import re
from typing import List, NamedTuple, Optional

from .constants import FLAT_TO_SHARP, MIDI_A_PITCH_CLASS, NOTES

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = re.compile(r"[\s,]+")


class ParseReport(NamedTuple):
    """Result of parsing note text with per-token diagnostics."""
    notes: List[str]
    accepted: List[str]
    rejected: List[str]


def wrap_index(index: int) -> int:
    """Wrap any integer into the 0-11 pitch class range."""
    return (index % 12 + 12) % 12


def index_to_note(index: int) -> str:
    """Return the canonical note name for a (possibly out of range) index."""
    return NOTES[wrap_index(index)]


def normalize_note(token: str) -> Optional[str]:
    """
    Normalize a single note token to its canonical sharp spelling.

    Args:
        token: Note as typed by a user (e.g. 'bb', 'C#', 'Ebm')

    Returns:
        Canonical note name (e.g. 'A#') or None if the token is not a note
    """
    if not token:
        return None
    note = token.strip().replace("♯", "#").replace("♭", "b")
    if not note:
        return None

    # Capitalize the letter, lowercase the modifier
    note = note[0].upper() + note[1:].lower()

    # A flat spelling wins over whatever follows it ('Bbm' -> 'A#')
    if len(note) >= 2 and note[1] == "b":
        note = FLAT_TO_SHARP.get(note[0] + "b", note)

    # Anything after a sharp is dropped ('C#m' -> 'C#')
    if "#" in note:
        note = note[0] + "#"

    return note if note in NOTES else None


def note_to_index(note: str) -> Optional[int]:
    """Return the pitch class index (0-11) of a note name, or None."""
    canonical = normalize_note(note)
    if canonical is None:
        return None
    return NOTES.index(canonical)


def transpose(note: str, semitones: int) -> Optional[str]:
    """Move a note by a number of semitones, wrapping around the octave."""
    index = note_to_index(note)
    if index is None:
        return None
    return index_to_note(index + semitones)


def midi_to_note_name(midi_num: int) -> str:
    """
    Convert a MIDI note number to its pitch class name (e.g. 61 -> 'C#').

    Args:
        midi_num: MIDI note number

    Returns:
        Canonical note name without octave
    """
    return index_to_note(midi_num - MIDI_A_PITCH_CLASS)


def parse_notes_with_diagnostics(text: Optional[str]) -> ParseReport:
    """
    Parse space or comma separated notes and report which tokens were kept.

    Args:
        text: Free-form note text

    Returns:
        ParseReport with the deduplicated notes in first-seen order plus the
        raw tokens that were accepted and rejected
    """
    notes: List[str] = []
    accepted: List[str] = []
    rejected: List[str] = []

    if not text or not text.strip():
        return ParseReport(notes, accepted, rejected)

    for token in TOKEN_SEPARATOR.split(text.strip()):
        if not token:
            continue
        note = normalize_note(token)
        if note is None:
            rejected.append(token)
            continue
        accepted.append(token)
        if note not in notes:
            notes.append(note)

    if rejected:
        logger.debug("Dropped unrecognized note tokens: %s", rejected)
    return ParseReport(notes, accepted, rejected)


def parse_notes(text: Optional[str]) -> List[str]:
    """Parse note text into unique canonical notes, dropping invalid tokens."""
    return parse_notes_with_diagnostics(text).notes
