import io
import pytest
from fastapi.testclient import TestClient
from mido import Message, MidiFile, MidiTrack

from app.main import app
from app.core.config import settings
from app.models.flute import ScoreOut
from bansuri.flutes import score_flute

client = TestClient(app)

API = settings.API_V1_STR


def _midi_upload(pitches):
    mid = MidiFile()
    track = MidiTrack()
    mid.tracks.append(track)
    for pitch in pitches:
        track.append(Message('note_on', note=pitch, velocity=80, time=0))
        track.append(Message('note_off', note=pitch, velocity=0, time=240))
    buffer = io.BytesIO()
    mid.save(file=buffer)
    return buffer.getvalue()

class TestServiceEndpoints:
    """Test service-level endpoints."""

    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_flute_service_health(self):
        response = client.get(f"{API}/health")
        assert response.status_code == 200
        assert response.json()["flutes"] == 12

class TestVisualizerEndpoints:
    """Test flute listing and visualizer endpoints."""

    def test_list_flutes(self):
        response = client.get(f"{API}/flutes")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 12
        assert data[0] == {
            "flute_name": "A",
            "root_note": "E",
            "scale_notes": ["E", "F#", "G#", "A", "B", "C#", "D#"],
        }

    def test_visualize_with_notes(self):
        response = client.get(f"{API}/flutes/A", params={"notes": "A# C# F"})
        assert response.status_code == 200
        data = response.json()
        assert data["notes"] == ["A#", "C#", "F"]
        assert data["score"]["match_percent"] == 33
        assert data["score"]["matching_notes"] == ["C#"]
        assert data["extra_notes"] == ["A#", "F"]

        holes = data["holes"]
        assert holes[0]["display_label"] == "BLOW"
        assert holes[0]["note"] == "D#"
        assert holes[0]["state"] == "avoid"
        assert holes[1]["note"] == "C#"
        assert holes[1]["state"] == "default"
        assert holes[3]["note"] == "A"
        assert holes[6]["label"] == "Sa"

    def test_visualize_without_notes(self):
        response = client.get(f"{API}/flutes/C")
        assert response.status_code == 200
        data = response.json()
        assert data["flute"]["root_note"] == "G"
        assert data["score"]["match_percent"] == 0
        assert all(hole["state"] == "default" for hole in data["holes"])

    def test_visualize_flat_and_sharp_names(self):
        response = client.get(f"{API}/flutes/Bb")
        assert response.status_code == 200
        assert response.json()["flute"]["flute_name"] == "A#"

        response = client.get(f"{API}/flutes/C%23")
        assert response.status_code == 200
        assert response.json()["flute"]["root_note"] == "G#"

    def test_visualize_reports_rejected_tokens(self):
        response = client.get(f"{API}/flutes/D", params={"notes": "D zz A"})
        assert response.status_code == 200
        assert response.json()["rejected_tokens"] == ["zz"]

    def test_unknown_flute(self):
        response = client.get(f"{API}/flutes/H")
        assert response.status_code == 404
        assert "Unknown flute" in response.json()["detail"]

class TestNoteParsing:
    """Test note parsing endpoint."""

    def test_parse_notes(self):
        response = client.post(f"{API}/notes/parse", json={"notes": "C foo Db, c"})
        assert response.status_code == 200
        data = response.json()
        assert data["notes"] == ["C", "C#"]
        assert data["accepted_tokens"] == ["C", "Db", "c"]
        assert data["rejected_tokens"] == ["foo"]

    def test_parse_empty(self):
        response = client.post(f"{API}/notes/parse", json={})
        assert response.status_code == 200
        assert response.json()["notes"] == []

class TestRecommendation:
    """Test flute finder endpoints."""

    def test_recommend_first_result(self):
        response = client.post(f"{API}/recommend", json={"notes": "E F# G# A B C# D#"})
        assert response.status_code == 200
        data = response.json()
        assert data["revealed"] == 1
        assert data["total"] == 12
        assert data["has_more"] is True
        assert len(data["results"]) == 1
        assert data["results"][0]["flute_name"] == "A"
        assert data["results"][0]["match_percent"] == 100

    def test_recommend_ties_keep_flute_order(self):
        response = client.post(f"{API}/recommend", json={"notes": "C D E", "revealed": 3})
        assert response.status_code == 200
        data = response.json()
        assert [r["flute_name"] for r in data["results"]] == ["A#", "C", "F"]

    def test_recommend_all(self):
        response = client.post(f"{API}/recommend", json={"notes": "Bb D G", "revealed": 12})
        data = response.json()
        assert len(data["results"]) == 12
        assert data["has_more"] is False
        percents = [r["match_percent"] for r in data["results"]]
        assert percents == sorted(percents, reverse=True)

    @pytest.mark.parametrize("notes", ["", "   ", "xyz"])
    def test_recommend_empty_input(self, notes):
        response = client.post(f"{API}/recommend", json={"notes": notes})
        assert response.status_code == 200
        data = response.json()
        assert data["results"] == []
        assert data["total"] == 0
        assert "Please enter some notes" in data["message"]

    def test_recommend_invalid_revealed(self):
        response = client.post(f"{API}/recommend", json={"notes": "C", "revealed": 0})
        assert response.status_code == 422

    def test_recommend_from_midi(self):
        # E F# G# fits the A, D and E flutes
        files = {"file": ("melody.mid", _midi_upload([64, 66, 68]), "audio/midi")}
        response = client.post(f"{API}/recommend/midi", files=files, data={"revealed": "3"})
        assert response.status_code == 200
        data = response.json()
        assert data["notes"] == ["E", "F#", "G#"]
        assert [r["flute_name"] for r in data["results"]] == ["A", "D", "E"]

    def test_recommend_from_invalid_midi(self):
        files = {"file": ("melody.mid", b"not midi at all", "audio/midi")}
        response = client.post(f"{API}/recommend/midi", files=files)
        assert response.status_code == 400

class TestResponseModels:
    """Test response models built from core results."""

    def test_score_out_from_unresolved_result(self):
        score = ScoreOut.from_result(score_flute("H", ["C", "D"]))
        assert score.root_note is None
        assert score.scale_notes == []
        assert score.extra_notes == ["C", "D"]
        assert score.match_percent == 0

    def test_score_out_from_resolved_result(self):
        score = ScoreOut.from_result(score_flute("C", ["F#", "A#"]))
        assert score.root_note == "G"
        assert score.match_percent == 50
