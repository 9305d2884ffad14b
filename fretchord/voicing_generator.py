"""VoicingGenerator: enumerates, filters, scores and ranks chord fingerings."""

import itertools
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Final

from fretchord.instruments import note_at_position
from fretchord.music_theory import chord_tones

logger = logging.getLogger(__name__)

# ── Search bounds ───────────────────────────────────────────────────────────
MUTED: Final[int] = -1             # fret value of a string that is not played
OPEN: Final[int] = 0
WINDOW_SPAN: Final[int] = 5        # frets covered by one hand position
DEFAULT_MAX_FRET: Final[int] = 18
DEFAULT_LIMIT: Final[int] = 10

# ── Hand limits ─────────────────────────────────────────────────────────────
MAX_STRETCH: Final[int] = 3        # highest minus lowest fretted position
MAX_FINGERS: Final[int] = 4
FULL_BARRE_STRINGS: Final[int] = 3

# ── Scoring weights (lower score = more playable) ───────────────────────────
ROOT_BASS_BONUS: Final[float] = -50.0
INVERSION_PENALTY: Final[float] = 20.0
MUTED_STRING_PENALTY: Final[float] = 20.0
OPEN_STRING_BONUS: Final[float] = -10.0
FULL_BARRE_BONUS: Final[float] = -20.0
POSITION_PENALTY_PER_FRET: Final[float] = 2.0


@dataclass(frozen=True)
class ScoringWeights:
    """Additive weights applied by the playability scorer."""

    root_bass: float = ROOT_BASS_BONUS
    inversion: float = INVERSION_PENALTY
    muted_string: float = MUTED_STRING_PENALTY
    open_string: float = OPEN_STRING_BONUS
    full_barre: float = FULL_BARRE_BONUS
    position_per_fret: float = POSITION_PENALTY_PER_FRET


DEFAULT_WEIGHTS: Final[ScoringWeights] = ScoringWeights()


@dataclass(frozen=True)
class Voicing:
    """
    One playable fingering of a chord.

    Attributes:
        frets:      One fret per string, index 0 = highest-pitched string.
                    0 is an open string, MUTED a string that is not played.
        start_fret: Lowest fretted (> 0) position, or 0 for open shapes.
        score:      Playability score; lower is better.
    """

    frets: tuple[int, ...]
    start_fret: int
    score: float


@dataclass(frozen=True)
class Barre:
    """A single finger laid across several strings at the same fret."""

    fret: int
    first_string: int
    last_string: int
    string_count: int


# ------------------------------------------------------------------
# Stage helpers
# ------------------------------------------------------------------

def played_span(frets: Sequence[int]) -> tuple[int, int] | None:
    """Return (first, last) index of the played strings, or None if all are muted."""
    played = [index for index, fret in enumerate(frets) if fret != MUTED]
    if not played:
        return None
    return played[0], played[-1]


def has_internal_gap(frets: Sequence[int]) -> bool:
    """True when a muted string sits between two played strings."""
    span = played_span(frets)
    if span is None:
        return False
    first, last = span
    return any(frets[index] == MUTED for index in range(first, last + 1))


def covers_chord(played_notes: set[int], tones: Sequence[int], root: int) -> bool:
    """
    Check that enough distinct chord tones sound.

    Chords of up to four tones need every tone. Larger chords may drop one
    tone, but never the root nor the highest extension.
    """
    required = set(tones)
    if len(required) <= 4:
        return len(played_notes & required) >= len(required)
    if len(played_notes & required) < len(required) - 1:
        return False
    return root in played_notes and tones[-1] in played_notes


def detect_barre(frets: Sequence[int]) -> Barre | None:
    """
    Find a barre on the lowest fretted position.

    A barre needs two or more strings on the lowest fret, no open string
    between its outer strings and no open string on a lower index than its
    first string.
    """
    fretted = [fret for fret in frets if fret > 0]
    if not fretted:
        return None

    lowest = min(fretted)
    barred = [index for index, fret in enumerate(frets) if fret == lowest]
    if len(barred) < 2:
        return None

    first, last = barred[0], barred[-1]
    if any(frets[index] == OPEN for index in range(0, last + 1)):
        return None

    return Barre(fret=lowest, first_string=first, last_string=last, string_count=len(barred))


def fingers_required(frets: Sequence[int], barre: Barre | None) -> int:
    """Count fretting fingers; a barre costs one finger for all its strings."""
    fretted = sum(1 for fret in frets if fret > 0)
    if barre is None:
        return fretted
    return 1 + fretted - barre.string_count


def rank_voicings(voicings: Sequence[Voicing], limit: int = DEFAULT_LIMIT) -> list[Voicing]:
    """
    Collapse duplicate fret patterns and return the best *limit* voicings.

    For each pattern the lowest score wins. The sort is stable, so equal
    scores keep the order in which their patterns were first seen.
    """
    unique: dict[tuple[int, ...], Voicing] = {}
    for voicing in voicings:
        current = unique.get(voicing.frets)
        if current is None or voicing.score < current.score:
            unique[voicing.frets] = voicing

    return sorted(unique.values(), key=lambda voicing: voicing.score)[:limit]


class VoicingGenerator:
    """
    Finds playable fingerings of a chord on a fretted instrument.

    Algorithm overview
    ------------------
    1. **Candidates** – A 5-fret window slides from fret 1 to
       ``max_fret - 4``. Per string the choices are: muted, open (when the
       open string is a chord tone) and every window fret that sounds a
       chord tone. The Cartesian product of these choices is one window's
       candidate set.

    2. **Validity** – A candidate is dropped when every string is muted,
       when it misses chord tones, when a muted string sits between played
       strings, when fretted positions stretch over more than three frets
       or when it needs more than four fingers.

    3. **Scoring** – Root in the bass, open strings and full barres lower
       the score; inversions, muted strings and higher positions raise it.

    4. **Ranking** – Overlapping windows regenerate the same patterns, so
       candidates are deduplicated by fret pattern before sorting.
    """

    def __init__(
        self,
        instrument: str,
        tuning_offsets: Sequence[int] = (),
        string_count: int = 6,
        max_fret: int = DEFAULT_MAX_FRET,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
    ) -> None:
        """
        Args:
            instrument:     Key of INSTRUMENT_CONFIGS, e.g. "GUITAR".
            tuning_offsets: Per-string semitone offsets (index 0 = highest string).
                            An empty sequence means standard tuning.
            string_count:   Number of strings.
            max_fret:       Highest fret the search may use.
            weights:        Scoring weights.
        """
        self.instrument = instrument
        self.tuning_offsets = tuple(tuning_offsets)
        self.string_count = string_count
        self.max_fret = max_fret
        self.weights = weights
        self._build_fretboard()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_fretboard(self) -> None:
        """Resolve the pitch class of every string and fret up to max_fret once."""
        self._fretboard = [
            [
                note_at_position(
                    self.instrument, string_index, fret, self.tuning_offsets, self.string_count
                )
                for fret in range(max(self.max_fret, 0) + 1)
            ]
            for string_index in range(self.string_count)
        ]

    def _note(self, string_index: int, fret: int) -> int:
        notes = self._fretboard[string_index]
        if fret < len(notes):
            return notes[fret]
        return note_at_position(
            self.instrument, string_index, fret, self.tuning_offsets, self.string_count
        )

    def _window_starts(self) -> range:
        return range(1, self.max_fret - WINDOW_SPAN + 2)

    def _string_choices(self, window_start: int, required: set[int]) -> list[list[int]]:
        """Return the fret choices of every string for one window."""
        choices: list[list[int]] = []
        window_end = min(window_start + WINDOW_SPAN - 1, self.max_fret)

        for string_index in range(self.string_count):
            options = [MUTED]
            if self._note(string_index, OPEN) in required:
                options.append(OPEN)
            options.extend(
                fret
                for fret in range(window_start, window_end + 1)
                if self._note(string_index, fret) in required
            )
            choices.append(options)

        return choices

    def _candidates(self, required: set[int]) -> Iterator[tuple[int, ...]]:
        """Yield every fret combination of every window, depth first by string."""
        for window_start in self._window_starts():
            choices = self._string_choices(window_start, required)
            yield from itertools.product(*choices)

    def _bass_note(self, frets: Sequence[int]) -> int:
        """Pitch class of the lowest-pitched (highest index) played string."""
        for string_index in range(len(frets) - 1, -1, -1):
            if frets[string_index] != MUTED:
                return self._note(string_index, frets[string_index])
        raise ValueError("Fingering has no played string.")

    def _score(self, frets: Sequence[int], root: int, start_fret: int, barre: Barre | None) -> float:
        weights = self.weights
        score = weights.root_bass if self._bass_note(frets) == root else weights.inversion
        score += weights.muted_string * sum(1 for fret in frets if fret == MUTED)
        score += weights.open_string * sum(1 for fret in frets if fret == OPEN)
        if barre is not None and barre.string_count >= FULL_BARRE_STRINGS:
            score += weights.full_barre
        score += weights.position_per_fret * start_fret
        return score

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evaluate(self, frets: Sequence[int], root: int, tones: Sequence[int]) -> Voicing | None:
        """
        Validate one candidate fingering and score it.

        Args:
            frets: One fret per string (MUTED, OPEN or a fret number).
            root:  Pitch class of the chord root.
            tones: Chord tones in interval order (see ``chord_tones``).

        Returns:
            The scored Voicing, or None if the fingering is not playable.
        """
        if played_span(frets) is None:
            return None

        played_notes = {
            self._note(string_index, fret)
            for string_index, fret in enumerate(frets)
            if fret != MUTED
        }
        if not covers_chord(played_notes, tones, root):
            return None

        if has_internal_gap(frets):
            return None

        fretted = [fret for fret in frets if fret > 0]
        start_fret = 0
        barre = None
        if fretted:
            start_fret = min(fretted)
            if max(fretted) - start_fret > MAX_STRETCH:
                return None
            barre = detect_barre(frets)
            if fingers_required(frets, barre) > MAX_FINGERS:
                return None

        return Voicing(
            frets=tuple(frets),
            start_fret=start_fret,
            score=self._score(frets, root, start_fret, barre),
        )

    def generate(self, root: int, quality: str, limit: int = DEFAULT_LIMIT) -> list[Voicing]:
        """
        Return the *limit* most playable voicings of a chord.

        Args:
            root:    Pitch class of the chord root.
            quality: Key of CHORD_INTERVALS.
            limit:   Maximum number of voicings to return.

        Returns:
            Unique voicings sorted by ascending score; empty if none is playable.
        """
        tones = chord_tones(root, quality)
        required = set(tones)

        candidates = 0
        voicings: list[Voicing] = []
        for frets in self._candidates(required):
            candidates += 1
            voicing = self.evaluate(frets, root, tones)
            if voicing is not None:
                voicings.append(voicing)

        ranked = rank_voicings(voicings, limit)
        logger.debug(
            "%s %s on %d-string %s: %d candidates, %d valid, %d returned",
            root, quality, self.string_count, self.instrument,
            candidates, len(voicings), len(ranked),
        )
        return ranked


def get_chord_voicings(
    instrument: str,
    tuning_offsets: Sequence[int],
    string_count: int,
    root: int,
    quality: str,
    max_fret: int = DEFAULT_MAX_FRET,
    limit: int = DEFAULT_LIMIT,
) -> list[Voicing]:
    """
    Return the best playable voicings of a chord on a fretted instrument.

    Args:
        instrument:     Key of INSTRUMENT_CONFIGS, e.g. "GUITAR".
        tuning_offsets: Per-string semitone offsets; empty for standard tuning.
        string_count:   Number of strings.
        root:           Pitch class of the chord root.
        quality:        Key of CHORD_INTERVALS.
        max_fret:       Highest fret the search may use.
        limit:          Maximum number of voicings returned.

    Returns:
        Unique voicings sorted by ascending score.
    """
    generator = VoicingGenerator(instrument, tuning_offsets, string_count, max_fret)
    return generator.generate(root, quality, limit)
