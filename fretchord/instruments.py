"""Instrument configurations, tunings and the fretboard pitch resolver."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from fretchord.music_theory import SEMITONES_PER_OCTAVE

#: Returned by note_at_position for a string index outside the layout.
FALLBACK_PITCH_CLASS: Final[int] = 0


@dataclass(frozen=True)
class InstrumentConfig:
    """
    A fretted instrument and the string layouts it supports.

    Attributes:
        name:                 Display name.
        default_string_count: Layout used when an unknown string count is asked for.
        midi_program:         General MIDI program number (0-based) used on export.
        layouts:              String count -> open-string MIDI notes. Index 0 is the
                              highest-pitched string, the last index the lowest.
    """

    name: str
    default_string_count: int
    midi_program: int
    layouts: dict[int, tuple[int, ...]]

    def open_strings(self, string_count: int) -> tuple[int, ...]:
        """Return the open-string MIDI notes for *string_count* strings."""
        return self.layouts.get(string_count, self.layouts[self.default_string_count])


@dataclass(frozen=True)
class Tuning:
    """A named set of per-string semitone offsets from standard tuning."""

    name: str
    offsets: tuple[int, ...] = ()


INSTRUMENT_CONFIGS: Final[dict[str, InstrumentConfig]] = {
    "GUITAR": InstrumentConfig(
        name="Guitar",
        default_string_count=6,
        midi_program=25,  # Acoustic Guitar (steel)
        layouts={
            6: (64, 59, 55, 50, 45, 40),              # E4 B3 G3 D3 A2 E2
            7: (64, 59, 55, 50, 45, 40, 35),          # + B1
            8: (64, 59, 55, 50, 45, 40, 35, 30),      # + F#1
        },
    ),
    "BASS": InstrumentConfig(
        name="Bass",
        default_string_count=4,
        midi_program=33,  # Electric Bass (finger)
        layouts={
            4: (43, 38, 33, 28),                      # G2 D2 A1 E1
            5: (43, 38, 33, 28, 23),                  # + B0
            6: (48, 43, 38, 33, 28, 23),              # C3 + five-string
        },
    ),
}

GUITAR_TUNINGS: Final[dict[str, Tuning]] = {
    "STANDARD": Tuning("Standard (E A D G B E)", (0, 0, 0, 0, 0, 0)),
    "DROP_D": Tuning("Drop D (D A D G B E)", (0, 0, 0, 0, 0, -2)),
    "HALF_STEP_DOWN": Tuning("Half Step Down (Eb Ab Db Gb Bb Eb)", (-1, -1, -1, -1, -1, -1)),
    "FULL_STEP_DOWN": Tuning("Full Step Down (D G C F A D)", (-2, -2, -2, -2, -2, -2)),
    "DADGAD": Tuning("DADGAD", (-2, -2, 0, 0, 0, -2)),
    "OPEN_G": Tuning("Open G (D G D G B D)", (-2, 0, 0, 0, -2, -2)),
    "OPEN_D": Tuning("Open D (D A D F# A D)", (-2, -2, -1, 0, 0, -2)),
}

GUITAR_TUNINGS_7: Final[dict[str, Tuning]] = {
    "STANDARD": Tuning("Standard (B E A D G B E)", (0, 0, 0, 0, 0, 0, 0)),
    "DROP_A": Tuning("Drop A (A E A D G B E)", (0, 0, 0, 0, 0, 0, -2)),
}

GUITAR_TUNINGS_8: Final[dict[str, Tuning]] = {
    "STANDARD": Tuning("Standard (F# B E A D G B E)", (0, 0, 0, 0, 0, 0, 0, 0)),
    "DROP_E": Tuning("Drop E (E B E A D G B E)", (0, 0, 0, 0, 0, 0, 0, -2)),
}

BASS_TUNINGS: Final[dict[str, Tuning]] = {
    "STANDARD": Tuning("Standard (E A D G)", (0, 0, 0, 0)),
    "DROP_D": Tuning("Drop D (D A D G)", (0, 0, 0, -2)),
}


def available_tunings(instrument: str, string_count: int) -> dict[str, Tuning]:
    """Return the named tunings offered for an instrument and string count."""
    if instrument == "GUITAR":
        if string_count == 7:
            return GUITAR_TUNINGS_7
        if string_count == 8:
            return GUITAR_TUNINGS_8
        if string_count == 6:
            return GUITAR_TUNINGS
        return {}
    if instrument == "BASS" and string_count == 4:
        return BASS_TUNINGS
    return {}


def midi_at_position(
    instrument: str,
    string_index: int,
    fret: int,
    tuning_offsets: Sequence[int],
    string_count: int,
) -> int | None:
    """
    Return the MIDI note sounding at a fretboard position.

    Args:
        instrument:     Key of INSTRUMENT_CONFIGS.
        string_index:   0 = highest-pitched string.
        fret:           0 = open string.
        tuning_offsets: Per-string semitone offsets; missing entries count as 0.
        string_count:   Number of strings on the instrument.

    Returns:
        The MIDI note number, or None if *string_index* is outside the layout.
    """
    open_strings = INSTRUMENT_CONFIGS[instrument].open_strings(string_count)
    if not 0 <= string_index < len(open_strings):
        return None
    offset = tuning_offsets[string_index] if string_index < len(tuning_offsets) else 0
    return open_strings[string_index] + offset + fret


def note_at_position(
    instrument: str,
    string_index: int,
    fret: int,
    tuning_offsets: Sequence[int],
    string_count: int,
) -> int:
    """
    Return the pitch class sounding at a fretboard position.

    Never raises for an out-of-range string index: FALLBACK_PITCH_CLASS is
    returned instead so callers can treat the position as an ordinary note.
    """
    midi = midi_at_position(instrument, string_index, fret, tuning_offsets, string_count)
    if midi is None:
        return FALLBACK_PITCH_CLASS
    return midi % SEMITONES_PER_OCTAVE
