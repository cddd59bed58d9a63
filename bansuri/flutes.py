#!/usr/bin/env python

"""
Flute Scales and Matching
=========================
Scale derivation, scoring and ranking for the twelve bansuri flutes.

A bansuri is named after the 4th degree ("Ma") of the major scale it plays,
so the root ("Sa") sits 5 semitones below the name: an A flute plays E major.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .constants import MAJOR_SCALE_INTERVALS, NOTES, ROOT_OFFSET
from .exceptions import UnknownFluteError
from .theory import index_to_note, normalize_note, note_to_index, transpose

logger = logging.getLogger(__name__)

# Flutes are enumerated in pitch table order; ties in a ranking keep it
FLUTES: Tuple[str, ...] = NOTES


@dataclass(frozen=True)
class ScoreResult:
    """How well one flute's scale covers a set of input notes."""
    flute_name: str
    root_note: Optional[str]
    scale_notes: Tuple[str, ...]
    matching_notes: Tuple[str, ...]
    extra_notes: Tuple[str, ...]
    match_count: int
    match_percent: int

    @property
    def resolved(self) -> bool:
        """False when the flute name did not resolve to a pitch class."""
        return self.root_note is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "flute_name": self.flute_name,
            "root_note": self.root_note,
            "scale_notes": list(self.scale_notes),
            "matching_notes": list(self.matching_notes),
            "extra_notes": list(self.extra_notes),
            "match_count": self.match_count,
            "match_percent": self.match_percent,
        }


def round_percent(part: int, whole: int) -> int:
    """Percentage rounded half up; 0 when there is nothing to divide by."""
    if whole <= 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def resolve_flute(name: str) -> Optional[str]:
    """Return the canonical flute name for any accepted spelling, or None."""
    return normalize_note(name)


def require_flute(name: str) -> str:
    """
    Resolve a flute name, raising for names outside the pitch table.

    Raises:
        UnknownFluteError: If the name is not one of the twelve flutes
    """
    canonical = resolve_flute(name)
    if canonical is None:
        raise UnknownFluteError(name)
    return canonical


def get_root_note(flute_name: str) -> Optional[str]:
    """Return the root ("Sa") of a flute's scale, or None if unresolved."""
    return transpose(flute_name, -ROOT_OFFSET)


def get_scale_notes(root_note: str) -> Tuple[str, ...]:
    """Return the seven notes of the major scale built on a root."""
    root_index = note_to_index(root_note)
    if root_index is None:
        return ()
    return tuple(index_to_note(root_index + interval) for interval in MAJOR_SCALE_INTERVALS)


def derive_scale(flute_name: str) -> Optional[Tuple[str, ...]]:
    """
    Derive the scale a flute plays.

    Args:
        flute_name: Flute name in any accepted spelling (e.g. 'A', 'Bb')

    Returns:
        Seven note names from the root upwards, or None if the flute name
        does not resolve
    """
    root_note = get_root_note(flute_name)
    if root_note is None:
        return None
    return get_scale_notes(root_note)


def score_flute(flute_name: str, input_notes: Iterable[str]) -> ScoreResult:
    """
    Score a flute against a set of canonical input notes.

    An unresolvable flute name produces an unresolved result (no root, empty
    scale, every note extra, 0%) rather than an error.

    Args:
        flute_name: Flute name
        input_notes: Canonical notes as returned by parse_notes

    Returns:
        ScoreResult with matching and extra notes in input order
    """
    notes = list(input_notes)
    canonical = resolve_flute(flute_name)
    if canonical is None:
        logger.debug("Unresolved flute name %r", flute_name)
        return ScoreResult(
            flute_name=flute_name,
            root_note=None,
            scale_notes=(),
            matching_notes=(),
            extra_notes=tuple(notes),
            match_count=0,
            match_percent=0,
        )

    root_note = get_root_note(canonical)
    scale_notes = get_scale_notes(root_note)

    matching_notes = [note for note in notes if note in scale_notes]
    extra_notes = [note for note in notes if note not in scale_notes]

    return ScoreResult(
        flute_name=canonical,
        root_note=root_note,
        scale_notes=scale_notes,
        matching_notes=tuple(matching_notes),
        extra_notes=tuple(extra_notes),
        match_count=len(matching_notes),
        match_percent=round_percent(len(matching_notes), len(notes)),
    )


def find_best_flutes(input_notes: Iterable[str]) -> List[ScoreResult]:
    """
    Rank all twelve flutes for a set of input notes.

    Results are ordered by match percentage, then match count, both
    descending. The sort is stable over the pitch table enumeration, so
    flutes with identical scores stay in A, A#, B, ... order.
    """
    notes = list(input_notes)
    results = [score_flute(flute_name, notes) for flute_name in FLUTES]
    ranked = sorted(results, key=lambda result: (-result.match_percent, -result.match_count))
    if notes:
        logger.debug(
            "Best flute for %s: %s (%d%%)",
            notes, ranked[0].flute_name, ranked[0].match_percent,
        )
    return ranked
