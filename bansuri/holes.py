#!/usr/bin/env python

"""
Hole Positions
==============
Maps a flute's scale onto its blow hole and six finger holes.

Read from the blow hole to the far end, the holes show the scale backwards:
with every hole open the flute sounds the 7th degree (Ni), and closing holes
one by one walks down to the root (Sa) at the far end.
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .constants import (
    BLOW_HOLE_LABEL,
    HOLE_LABELS,
    HOLE_STATE_AVOID,
    HOLE_STATE_DEFAULT,
    SCALE_LENGTH,
)
from .exceptions import InvalidScaleError


@dataclass(frozen=True)
class HolePosition:
    position: int
    label: str
    note: str
    is_blow: bool = False

    @property
    def display_label(self) -> str:
        return BLOW_HOLE_LABEL if self.is_blow else self.label


@dataclass(frozen=True)
class HoleView:
    """A hole plus how it should be drawn for a given input."""
    hole: HolePosition
    state: str


@dataclass(frozen=True)
class FluteView:
    """Everything a renderer needs to draw one flute."""
    holes: Tuple[HoleView, ...]
    extra_notes: Tuple[str, ...]
    has_input: bool


def map_to_hole_positions(scale: Sequence[str]) -> List[HolePosition]:
    """
    Assign the seven scale degrees to the seven hole positions.

    Args:
        scale: Seven notes, root first, as returned by derive_scale

    Returns:
        Hole positions from the blow hole (7th degree) to the far end (root)

    Raises:
        InvalidScaleError: If the scale does not have exactly seven notes
    """
    if scale is None or len(scale) != SCALE_LENGTH:
        raise InvalidScaleError(f"A scale needs {SCALE_LENGTH} notes, got {scale!r}")

    return [
        HolePosition(
            position=position,
            label=HOLE_LABELS[position],
            note=scale[SCALE_LENGTH - 1 - position],
            is_blow=position == 0,
        )
        for position in range(SCALE_LENGTH)
    ]


def annotate_holes(scale: Sequence[str], input_notes: Iterable[str] = ()) -> FluteView:
    """
    Work out the drawing state of every hole for a set of input notes.

    Holes whose note the input uses (or every hole, when there is no input)
    are 'default'; scale notes the input never uses are 'avoid'. Input notes
    outside the scale are returned separately as extra notes.
    """
    notes = list(input_notes)
    has_input = bool(notes)

    holes = []
    for hole in map_to_hole_positions(scale):
        if not has_input or hole.note in notes:
            state = HOLE_STATE_DEFAULT
        else:
            state = HOLE_STATE_AVOID
        holes.append(HoleView(hole=hole, state=state))

    extra_notes = tuple(note for note in notes if note not in scale)
    return FluteView(holes=tuple(holes), extra_notes=extra_notes, has_input=has_input)
