"""Flute finder state.

The finder reveals ranked flutes one at a time ("add next"). The number of
revealed results lives in an immutable FinderState that callers hold on to
and replace, so the ranking functions stay stateless.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Tuple

from .flutes import ScoreResult, find_best_flutes
from .theory import parse_notes


@dataclass(frozen=True)
class FinderState:
    notes: Tuple[str, ...] = ()
    results: Tuple[ScoreResult, ...] = ()
    revealed: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.notes

    @property
    def visible(self) -> List[ScoreResult]:
        return list(self.results[:self.revealed])

    @property
    def has_more(self) -> bool:
        return self.revealed < len(self.results)


def start_search(text: Optional[str], revealed: int = 1) -> FinderState:
    """
    Parse note text, rank every flute and reveal the first results.

    Empty input gives an empty state with nothing to reveal.
    """
    return search_notes(parse_notes(text), revealed)


def search_notes(input_notes: Iterable[str], revealed: int = 1) -> FinderState:
    """Rank every flute for already parsed notes and reveal the first results."""
    notes = list(input_notes)
    if not notes:
        return FinderState()
    results = tuple(find_best_flutes(notes))
    return FinderState(
        notes=tuple(notes),
        results=results,
        revealed=max(0, min(revealed, len(results))),
    )


def reveal_next(state: FinderState) -> FinderState:
    """Return a new state with one more result revealed."""
    if not state.has_more:
        return state
    return replace(state, revealed=state.revealed + 1)
