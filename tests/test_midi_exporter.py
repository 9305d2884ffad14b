"""Unit tests for VoicingMidiExporter."""

from pathlib import Path

import pytest

from fretchord.midi_exporter import VoicingMidiExporter
from fretchord.voicing_generator import MUTED, Voicing

OPEN_C = Voicing(frets=(0, 1, 0, 2, 3, MUTED), start_fret=1, score=-48.0)
OPEN_G = Voicing(frets=(3, 0, 0, 0, 2, 3), start_fret=2, score=-76.0)


def test_strum_pitches_lowest_string_first_skipping_mutes() -> None:
    exporter = VoicingMidiExporter()
    pitches = exporter._strum_pitches(OPEN_C, "GUITAR", [], 6)
    # C3 E3 G3 C4 E4
    assert pitches == [48, 52, 55, 60, 64]


def test_strum_pitches_follow_tuning() -> None:
    exporter = VoicingMidiExporter()
    drop_d = Voicing(frets=(2, 3, 2, 0, 0, 0), start_fret=2, score=-76.0)
    pitches = exporter._strum_pitches(drop_d, "GUITAR", [0, 0, 0, 0, 0, -2], 6)
    assert pitches[0] == 38
    assert pitches == sorted(pitches)


def test_export_writes_standard_midi_file(tmp_path: Path) -> None:
    out = tmp_path / "chords.mid"
    VoicingMidiExporter(tempo=90).export([OPEN_C, OPEN_G], "GUITAR", [], 6, str(out))

    data = out.read_bytes()
    assert data.startswith(b"MThd")
    assert data.count(b"MTrk") >= 2
    assert b"Guitar" in data


def test_export_empty_list_still_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "empty.mid"
    VoicingMidiExporter().export([], "BASS", [], 4, str(out))
    assert out.read_bytes().startswith(b"MThd")


def test_export_raises_oserror_for_missing_directory(tmp_path: Path) -> None:
    out = tmp_path / "missing" / "chords.mid"
    with pytest.raises(OSError):
        VoicingMidiExporter().export([OPEN_C], "GUITAR", [], 6, str(out))
