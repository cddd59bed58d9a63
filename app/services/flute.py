from typing import List, Optional
import logging

from app.core.config import settings
from app.models.flute import (
    FluteOut,
    ParseOut,
    RecommendOut,
    ScoreOut,
    VisualizerOut,
)
from bansuri.finder import FinderState, search_notes
from bansuri.flutes import FLUTES, derive_scale, get_root_note, require_flute, score_flute
from bansuri.holes import annotate_holes
from bansuri.theory import parse_notes_with_diagnostics
from processing.midi.reader import notes_from_midi_bytes

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter some notes to get recommendations."

class FluteFinderService:
    """Service exposing the flute visualizer and finder."""

    def __init__(self):
        self.max_revealed = settings.MAX_REVEALED

    def list_flutes(self) -> List[FluteOut]:
        """Get all twelve flutes with the scale each one plays."""
        return [
            FluteOut(
                flute_name=name,
                root_note=get_root_note(name),
                scale_notes=list(derive_scale(name)),
            )
            for name in FLUTES
        ]

    def visualize(self, flute_name: str, notes_text: Optional[str] = None) -> VisualizerOut:
        """Build the visualizer view of one flute.

        Raises:
            UnknownFluteError: If the flute name does not resolve
        """
        name = require_flute(flute_name)
        report = parse_notes_with_diagnostics(notes_text)
        scale = derive_scale(name)
        view = annotate_holes(scale, report.notes)
        result = score_flute(name, report.notes)

        return VisualizerOut(
            flute=FluteOut(flute_name=name, root_note=result.root_note, scale_notes=list(scale)),
            notes=report.notes,
            rejected_tokens=report.rejected,
            holes=VisualizerOut.holes_from_view(view),
            extra_notes=list(view.extra_notes),
            score=ScoreOut.from_result(result),
        )

    def parse(self, notes_text: Optional[str]) -> ParseOut:
        """Parse note text and report rejected tokens."""
        report = parse_notes_with_diagnostics(notes_text)
        return ParseOut(
            notes=report.notes,
            accepted_tokens=report.accepted,
            rejected_tokens=report.rejected,
        )

    def recommend(self, notes_text: Optional[str], revealed: int = 1) -> RecommendOut:
        """Rank flutes for note text, returning the first `revealed` results."""
        report = parse_notes_with_diagnostics(notes_text)
        state = search_notes(report.notes, self._clamp(revealed))
        return self._build_recommendation(state, report.rejected)

    def recommend_from_midi(self, data: bytes, revealed: int = 1) -> RecommendOut:
        """Rank flutes for the notes of an uploaded MIDI file.

        Raises:
            MidiReadError: If the data is not a readable MIDI file
        """
        notes = notes_from_midi_bytes(data)
        logger.info(f"Extracted {len(notes)} pitch classes from MIDI upload")
        state = search_notes(notes, self._clamp(revealed))
        return self._build_recommendation(state, [])

    def _clamp(self, revealed: int) -> int:
        return max(1, min(revealed, self.max_revealed))

    def _build_recommendation(self, state: FinderState, rejected: List[str]) -> RecommendOut:
        """Convert a finder state to the API response."""
        if state.is_empty:
            return RecommendOut(
                notes=[],
                rejected_tokens=rejected,
                results=[],
                revealed=0,
                total=0,
                has_more=False,
                message=EMPTY_INPUT_MESSAGE,
            )

        return RecommendOut(
            notes=list(state.notes),
            rejected_tokens=rejected,
            results=[ScoreOut.from_result(result) for result in state.visible],
            revealed=state.revealed,
            total=len(state.results),
            has_more=state.has_more,
        )
