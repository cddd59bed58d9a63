import io
import unittest
import sys
import os
import tempfile

from mido import Message, MidiFile, MidiTrack

# Add the parent directory to the path so we can import our modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from bansuri.exceptions import MidiReadError
from processing.midi.reader import notes_from_midi, notes_from_midi_bytes, notes_from_midi_file


def build_midi(pitches, channel=0):
    mid = MidiFile()
    track = MidiTrack()
    mid.tracks.append(track)
    for pitch in pitches:
        track.append(Message('note_on', note=pitch, velocity=80, channel=channel, time=0))
        track.append(Message('note_on', note=pitch, velocity=0, channel=channel, time=240))
    return mid


def midi_bytes(mid):
    buffer = io.BytesIO()
    mid.save(file=buffer)
    return buffer.getvalue()


class TestMidiReader(unittest.TestCase):
    def test_notes_in_first_played_order(self):
        # E4 F#4 G#4 E5 B3
        mid = build_midi([64, 66, 68, 76, 59])
        self.assertEqual(notes_from_midi_file(mid), ["E", "F#", "G#", "B"])

    def test_percussion_channel_is_ignored(self):
        mid = build_midi([60, 62])
        mid.tracks[0].append(Message('note_on', note=42, velocity=90, channel=9, time=0))
        self.assertEqual(notes_from_midi_file(mid), ["C", "D"])

    def test_notes_from_bytes(self):
        data = midi_bytes(build_midi([69, 70, 71]))
        self.assertEqual(notes_from_midi_bytes(data), ["A", "A#", "B"])

    def test_notes_from_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "melody.mid")
            build_midi([60, 64, 67]).save(path)
            self.assertEqual(notes_from_midi(path), ["C", "E", "G"])

    def test_invalid_data_raises(self):
        with self.assertRaises(MidiReadError):
            notes_from_midi_bytes(b"")
        with self.assertRaises(MidiReadError):
            notes_from_midi_bytes(b"this is not a midi file")

    def test_missing_file_raises(self):
        with self.assertRaises(MidiReadError):
            notes_from_midi("/nonexistent/melody.mid")


if __name__ == "__main__":
    unittest.main()
