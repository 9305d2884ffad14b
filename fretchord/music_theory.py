"""Music theory helpers: pitch classes, chord qualities, scales and diatonic chords."""

from dataclasses import dataclass, field
from typing import Final

SEMITONES_PER_OCTAVE: Final[int] = 12

# Chromatic pitch class names (index 0 = C)
NOTE_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
SOLFEGE_NAMES: list[str] = [
    "Do", "Do#", "Re", "Re#", "Mi", "Fa", "Fa#", "Sol", "Sol#", "La", "La#", "Si",
]

NAMING_SYSTEMS: Final[dict[str, list[str]]] = {
    "ENGLISH": NOTE_NAMES,
    "SOLFEGE": SOLFEGE_NAMES,
}

_FLAT_ALIASES: Final[dict[str, int]] = {
    "Cb": 11, "Db": 1, "Eb": 3, "Fb": 4, "Gb": 6, "Ab": 8, "Bb": 10,
}


# ── Chord qualities ─────────────────────────────────────────────────────────

#: Quality tag -> semitone offsets from the root, root first and the
#: highest extension last. Compound intervals (9, 11, 13) stay above 11.
CHORD_INTERVALS: Final[dict[str, list[int]]] = {
    "MAJOR": [0, 4, 7],
    "MINOR": [0, 3, 7],
    "DIMINISHED": [0, 3, 6],
    "AUGMENTED": [0, 4, 8],
    "SUS2": [0, 2, 7],
    "SUS4": [0, 5, 7],
    "ADD2": [0, 2, 4, 7],
    "ADD4": [0, 4, 5, 7],
    "ADD6": [0, 4, 7, 9],
    "ADD9": [0, 4, 7, 14],
    "DOM7": [0, 4, 7, 10],
    "MAJ7": [0, 4, 7, 11],
    "MIN7": [0, 3, 7, 10],
    "MIN7B5": [0, 3, 6, 10],
    "DIM7": [0, 3, 6, 9],
    "MINMAJ7": [0, 3, 7, 11],
    "DOM9": [0, 4, 7, 10, 14],
    "MAJ9": [0, 4, 7, 11, 14],
    "MIN9": [0, 3, 7, 10, 14],
    "DOM11": [0, 4, 7, 10, 14, 17],
    "MAJ11": [0, 4, 7, 11, 14, 17],
    "MIN11": [0, 3, 7, 10, 14, 17],
    "DOM13": [0, 4, 7, 10, 14, 17, 21],
    "MAJ13": [0, 4, 7, 11, 14, 17, 21],
    "MIN13": [0, 3, 7, 10, 14, 17, 21],
}

CHORD_QUALITIES: Final[list[str]] = list(CHORD_INTERVALS)

CHORD_GROUPS: Final[dict[str, list[str]]] = {
    "triads": ["MAJOR", "MINOR", "DIMINISHED", "AUGMENTED"],
    "sevenths": ["DOM7", "MAJ7", "MIN7", "MIN7B5", "DIM7", "MINMAJ7"],
    "extended": ["DOM9", "MAJ9", "MIN9", "DOM11", "MAJ11", "MIN11", "DOM13", "MAJ13", "MIN13"],
    "suspended": ["SUS2", "SUS4", "ADD2", "ADD4", "ADD6", "ADD9"],
}

CHORD_SYMBOLS: Final[dict[str, str]] = {
    "MAJOR": "",
    "MINOR": "m",
    "DIMINISHED": "dim",
    "AUGMENTED": "aug",
    "SUS2": "sus2",
    "SUS4": "sus4",
    "ADD2": "add2",
    "ADD4": "add4",
    "ADD6": "add6",
    "ADD9": "add9",
    "DOM7": "7",
    "MAJ7": "maj7",
    "MIN7": "m7",
    "MIN7B5": "m7b5",
    "DIM7": "dim7",
    "MINMAJ7": "mM7",
    "DOM9": "9",
    "MAJ9": "maj9",
    "MIN9": "m9",
    "DOM11": "11",
    "MAJ11": "maj11",
    "MIN11": "m11",
    "DOM13": "13",
    "MAJ13": "maj13",
    "MIN13": "m13",
}

DEFAULT_INTERVAL_LABELS: Final[dict[int, str]] = {
    0: "1", 1: "b2", 2: "2", 3: "b3", 4: "3", 5: "4", 6: "b5", 7: "5",
    8: "b6", 9: "6", 10: "b7", 11: "7", 14: "9", 17: "11", 21: "13",
}

INTERVAL_ALIASES: Final[dict[str, dict[int, str]]] = {
    "AUGMENTED": {8: "#5"},
    "DIM7": {9: "bb7", 6: "b5"},
    "MIN7B5": {6: "b5"},
}


# ── Scales ──────────────────────────────────────────────────────────────────

SCALES: Final[dict[str, list[int]]] = {
    "MAJOR": [0, 2, 4, 5, 7, 9, 11],
    "MINOR": [0, 2, 3, 5, 7, 8, 10],  # natural minor
}

ROMAN_NUMERALS: Final[list[str]] = ["I", "II", "III", "IV", "V", "VI", "VII"]

# (third, fifth) above the degree root -> triad quality
_TRIAD_QUALITIES: Final[dict[tuple[int, int], str]] = {
    (4, 7): "MAJOR",
    (3, 7): "MINOR",
    (3, 6): "DIMINISHED",
    (4, 8): "AUGMENTED",
}


@dataclass(frozen=True)
class DiatonicChord:
    """
    A triad built on one degree of a scale.

    Attributes:
        root:           Pitch class of the chord root (0=C, ..., 11=B).
        quality:        Quality tag, one of the triad keys of CHORD_INTERVALS.
        roman_numeral:  Degree label, e.g. "ii" or "vii°".
        notes:          Chord tones, root first.
    """

    root: int
    quality: str
    roman_numeral: str
    notes: list[int] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Human-readable chord name, e.g. 'Dm' or 'Bdim'."""
        return chord_symbol(self.root, self.quality)


def parse_note(text: str) -> int:
    """
    Parse a note name such as "C", "f#" or "Bb" into a pitch class.

    Raises:
        ValueError: If the text is not a recognised note name.
    """
    cleaned = text.strip()
    if not cleaned:
        raise ValueError("Empty note name.")
    normalized = cleaned[0].upper() + cleaned[1:]
    if normalized in NOTE_NAMES:
        return NOTE_NAMES.index(normalized)
    if normalized in _FLAT_ALIASES:
        return _FLAT_ALIASES[normalized]
    raise ValueError(f"Unknown note name '{text}'. Use one of: {', '.join(NOTE_NAMES)}.")


def note_name(pitch_class: int, naming: str = "ENGLISH") -> str:
    """Return the display name of a pitch class in the given naming system."""
    names = NAMING_SYSTEMS.get(naming.upper())
    if names is None:
        supported = ", ".join(NAMING_SYSTEMS)
        raise ValueError(f"Unknown naming system '{naming}'. Use one of: {supported}.")
    return names[pitch_class % SEMITONES_PER_OCTAVE]


def chord_tones(root: int, quality: str) -> list[int]:
    """
    Return the pitch classes of a chord, ordered by the quality's interval list.

    Args:
        root:    Pitch class of the chord root.
        quality: Key of CHORD_INTERVALS.

    Returns:
        Pitch classes, root first and the highest extension last.
    """
    return [(root + interval) % SEMITONES_PER_OCTAVE for interval in CHORD_INTERVALS[quality]]


def chord_symbol(root: int, quality: str) -> str:
    return f"{NOTE_NAMES[root % SEMITONES_PER_OCTAVE]}{CHORD_SYMBOLS[quality]}"


def interval_labels(quality: str) -> list[str]:
    """Return the textual interval of each chord tone, e.g. ['1', 'b3', '5']."""
    aliases = INTERVAL_ALIASES.get(quality, {})
    return [
        aliases.get(semitones) or DEFAULT_INTERVAL_LABELS.get(semitones, "?")
        for semitones in CHORD_INTERVALS[quality]
    ]


def get_scale(root: int, scale_type: str = "MAJOR") -> list[int]:
    """Return the pitch classes of a scale starting on *root*."""
    return [(root + interval) % SEMITONES_PER_OCTAVE for interval in SCALES[scale_type]]


def get_diatonic_chords(root: int, scale_type: str = "MAJOR") -> list[DiatonicChord]:
    """
    Build the seven triads of a scale by stacking thirds on every degree.

    The third and the fifth are taken two and four scale steps above each
    degree; their distance in semitones decides the triad quality, which in
    turn decides the case of the roman numeral.
    """
    scale = get_scale(root, scale_type)
    degrees = len(scale)
    chords: list[DiatonicChord] = []

    for degree, degree_root in enumerate(scale):
        third = (scale[(degree + 2) % degrees] - degree_root) % SEMITONES_PER_OCTAVE
        fifth = (scale[(degree + 4) % degrees] - degree_root) % SEMITONES_PER_OCTAVE
        quality = _TRIAD_QUALITIES[(third, fifth)]

        numeral = ROMAN_NUMERALS[degree]
        if quality == "MINOR":
            numeral = numeral.lower()
        elif quality == "DIMINISHED":
            numeral = numeral.lower() + "°"
        elif quality == "AUGMENTED":
            numeral += "+"

        chords.append(
            DiatonicChord(
                root=degree_root,
                quality=quality,
                roman_numeral=numeral,
                notes=chord_tones(degree_root, quality),
            )
        )

    return chords
