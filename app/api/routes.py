from fastapi import APIRouter, HTTPException, status, File, UploadFile, Form, Query
from typing import List, Optional
import logging

from app.services.flute import FluteFinderService
from app.models.flute import FluteOut, ParseOut, ParseRequest, RecommendOut, RecommendRequest, VisualizerOut
from app.core.config import settings
from bansuri.exceptions import MidiReadError, UnknownFluteError

logger = logging.getLogger(__name__)

router = APIRouter()

# Initialize flute service
flute_service = FluteFinderService()

# Visualizer endpoints
@router.get("/flutes", response_model=List[FluteOut])
async def list_flutes():
    """List the twelve flutes and the scale each one plays."""
    return flute_service.list_flutes()

@router.get("/flutes/{flute_name}", response_model=VisualizerOut)
async def visualize_flute(
    flute_name: str,
    notes: Optional[str] = Query(None, description="Notes to highlight, space or comma separated")
):
    """Show a flute's scale, hole layout and how it covers the given notes."""
    try:
        return flute_service.visualize(flute_name, notes)
    except UnknownFluteError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

@router.post("/notes/parse", response_model=ParseOut)
async def parse_notes(request: ParseRequest):
    """Parse note text and report which tokens were not recognized."""
    return flute_service.parse(request.notes)

# Finder endpoints
@router.post("/recommend", response_model=RecommendOut)
async def recommend_flutes(request: RecommendRequest):
    """Rank every flute for the given notes."""
    return flute_service.recommend(request.notes, request.revealed)

@router.post("/recommend/midi", response_model=RecommendOut)
async def recommend_flutes_from_midi(
    file: UploadFile = File(...),
    revealed: int = Form(1)
):
    """Rank every flute for the notes played in an uploaded MIDI file."""
    data = await file.read()
    if len(data) > settings.MAX_MIDI_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"MIDI file cannot exceed {settings.MAX_MIDI_BYTES} bytes"
        )

    try:
        return flute_service.recommend_from_midi(data, revealed)
    except MidiReadError as e:
        logger.warning(f"Rejected MIDI upload {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.get("/health")
async def flute_service_health():
    """Check flute finder health."""
    return {
        "service": "Flute Finder Service",
        "status": "healthy",
        "flutes": len(flute_service.list_flutes())
    }
