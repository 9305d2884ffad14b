"""Unit tests for instrument layouts, tunings and the pitch resolver."""

import pytest

from fretchord.instruments import (
    BASS_TUNINGS,
    FALLBACK_PITCH_CLASS,
    GUITAR_TUNINGS,
    GUITAR_TUNINGS_7,
    GUITAR_TUNINGS_8,
    INSTRUMENT_CONFIGS,
    available_tunings,
    midi_at_position,
    note_at_position,
)
from fretchord.music_theory import NOTE_NAMES


def _open_names(instrument: str, string_count: int, offsets: tuple[int, ...] = ()) -> str:
    return " ".join(
        NOTE_NAMES[note_at_position(instrument, index, 0, offsets, string_count)]
        for index in range(string_count)
    )


def test_standard_guitar_open_strings_high_to_low() -> None:
    assert _open_names("GUITAR", 6) == "E B G D A E"
    assert _open_names("GUITAR", 7) == "E B G D A E B"
    assert _open_names("GUITAR", 8) == "E B G D A E B F#"


def test_bass_open_strings_high_to_low() -> None:
    assert _open_names("BASS", 4) == "G D A E"
    assert _open_names("BASS", 5) == "G D A E B"
    assert _open_names("BASS", 6) == "C G D A E B"


def test_fretted_notes() -> None:
    assert NOTE_NAMES[note_at_position("GUITAR", 0, 1, [], 6)] == "F"
    assert NOTE_NAMES[note_at_position("GUITAR", 4, 2, [], 6)] == "B"
    assert NOTE_NAMES[note_at_position("GUITAR", 5, 12, [], 6)] == "E"


def test_drop_d_offsets() -> None:
    tuning = [0, 0, 0, 0, 0, -2]
    assert NOTE_NAMES[note_at_position("GUITAR", 5, 0, tuning, 6)] == "D"
    assert NOTE_NAMES[note_at_position("GUITAR", 5, 2, tuning, 6)] == "E"


def test_short_offset_list_leaves_remaining_strings_standard() -> None:
    assert NOTE_NAMES[note_at_position("GUITAR", 5, 0, [-1], 6)] == "E"
    assert NOTE_NAMES[note_at_position("GUITAR", 0, 0, [-1], 6)] == "D#"


@pytest.mark.parametrize("string_index", [-1, 6, 10])
def test_out_of_range_string_returns_fallback(string_index: int) -> None:
    assert note_at_position("GUITAR", string_index, 3, [], 6) == FALLBACK_PITCH_CLASS
    assert midi_at_position("GUITAR", string_index, 3, [], 6) is None


def test_unknown_string_count_uses_default_layout() -> None:
    assert _open_names("GUITAR", 5) == "E B G D A"


def test_midi_at_position() -> None:
    assert midi_at_position("GUITAR", 5, 0, [], 6) == 40
    assert midi_at_position("GUITAR", 0, 5, [], 6) == 69
    assert midi_at_position("GUITAR", 5, 0, [0, 0, 0, 0, 0, -2], 6) == 38
    assert midi_at_position("BASS", 3, 0, [], 4) == 28


@pytest.mark.parametrize(
    ("key", "expected"),
    [
        ("DROP_D", "E B G D A D"),
        ("DADGAD", "D A G D A D"),
        ("OPEN_G", "D B G D G D"),
        ("OPEN_D", "D A F# D A D"),
        ("FULL_STEP_DOWN", "D A F C G D"),
    ],
)
def test_named_guitar_tunings(key: str, expected: str) -> None:
    assert _open_names("GUITAR", 6, GUITAR_TUNINGS[key].offsets) == expected


def test_tuning_offsets_match_string_counts() -> None:
    for tunings, count in [
        (GUITAR_TUNINGS, 6),
        (GUITAR_TUNINGS_7, 7),
        (GUITAR_TUNINGS_8, 8),
        (BASS_TUNINGS, 4),
    ]:
        assert all(len(t.offsets) == count for t in tunings.values())


def test_available_tunings() -> None:
    assert available_tunings("GUITAR", 6) is GUITAR_TUNINGS
    assert available_tunings("GUITAR", 7) is GUITAR_TUNINGS_7
    assert available_tunings("GUITAR", 8) is GUITAR_TUNINGS_8
    assert available_tunings("BASS", 4) is BASS_TUNINGS
    assert available_tunings("BASS", 5) == {}


def test_layouts_are_ordered_high_to_low() -> None:
    for config in INSTRUMENT_CONFIGS.values():
        assert config.default_string_count in config.layouts
        for layout in config.layouts.values():
            assert list(layout) == sorted(layout, reverse=True)
