from pydantic import BaseModel, Field
from typing import List, Optional

from bansuri.flutes import ScoreResult
from bansuri.holes import FluteView

class HoleOut(BaseModel):
    """One hole of a flute diagram."""
    position: int
    label: str
    display_label: str
    note: str
    is_blow: bool
    state: str

class FluteOut(BaseModel):
    """A flute and the scale it plays."""
    flute_name: str
    root_note: str
    scale_notes: List[str]

class ScoreOut(BaseModel):
    """Score of one flute against the input notes."""
    flute_name: str
    root_note: Optional[str] = None
    scale_notes: List[str]
    matching_notes: List[str]
    extra_notes: List[str]
    match_count: int
    match_percent: int = Field(..., ge=0, le=100)

    @classmethod
    def from_result(cls, result: ScoreResult) -> "ScoreOut":
        return cls(**result.to_dict())

class VisualizerOut(BaseModel):
    """Visualizer view of a single flute."""
    flute: FluteOut
    notes: List[str]
    rejected_tokens: List[str] = []
    holes: List[HoleOut]
    extra_notes: List[str]
    score: ScoreOut

    @staticmethod
    def holes_from_view(view: FluteView) -> List[HoleOut]:
        return [
            HoleOut(
                position=item.hole.position,
                label=item.hole.label,
                display_label=item.hole.display_label,
                note=item.hole.note,
                is_blow=item.hole.is_blow,
                state=item.state,
            )
            for item in view.holes
        ]

class ParseRequest(BaseModel):
    """Free-form note text."""
    notes: str = ""

class ParseOut(BaseModel):
    """Parsed notes with per-token diagnostics."""
    notes: List[str]
    accepted_tokens: List[str]
    rejected_tokens: List[str]

class RecommendRequest(BaseModel):
    """Finder request; revealed is how many ranked flutes to return."""
    notes: str = ""
    revealed: int = Field(1, ge=1, le=12)

class RecommendOut(BaseModel):
    """Ranked flute recommendations."""
    notes: List[str]
    rejected_tokens: List[str] = []
    results: List[ScoreOut]
    revealed: int
    total: int
    has_more: bool
    message: Optional[str] = None
