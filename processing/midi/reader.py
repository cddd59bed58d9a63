#!/usr/bin/env python

"""
MIDI Reader
===========
Functions for pulling the pitch classes of a melody out of a MIDI file.
"""

import io
import logging
from typing import List, Union
from pathlib import Path

import mido
from mido import MidiFile

from bansuri.exceptions import MidiReadError
from bansuri.theory import midi_to_note_name

logger = logging.getLogger(__name__)


def notes_from_midi_file(midi_file: MidiFile) -> List[str]:
    """
    Collect the distinct pitch classes sounded in a MIDI file.

    Args:
        midi_file: Loaded MidiFile object

    Returns:
        Canonical note names in the order they are first played
    """
    notes: List[str] = []
    for track in midi_file.tracks:
        for msg in track:
            # A note_on with velocity 0 is a note_off
            if msg.type != "note_on" or msg.velocity == 0:
                continue
            if msg.channel == 9:  # General MIDI percussion
                continue
            note = midi_to_note_name(msg.note)
            if note not in notes:
                notes.append(note)
    return notes


def notes_from_midi(path: Union[str, Path]) -> List[str]:
    """
    Read a MIDI file from disk and return its pitch classes.

    Raises:
        MidiReadError: If the file is missing or not valid MIDI
    """
    try:
        midi_file = mido.MidiFile(str(path))
    except (OSError, EOFError, ValueError) as e:
        logger.error(f"Error reading MIDI file {path}: {e}")
        raise MidiReadError(f"Could not read MIDI file {path}: {e}") from e
    return notes_from_midi_file(midi_file)


def notes_from_midi_bytes(data: bytes) -> List[str]:
    """
    Parse MIDI data held in memory (e.g. an upload) and return its pitch classes.

    Raises:
        MidiReadError: If the data is empty or not valid MIDI
    """
    if not data:
        raise MidiReadError("Empty MIDI data")
    try:
        midi_file = mido.MidiFile(file=io.BytesIO(data))
    except (OSError, EOFError, ValueError) as e:
        logger.error(f"Error parsing uploaded MIDI data: {e}")
        raise MidiReadError(f"Invalid MIDI data: {e}") from e
    return notes_from_midi_file(midi_file)
