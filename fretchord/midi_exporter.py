"""VoicingMidiExporter: Writes chord voicings to a strummed MIDI file."""

from collections.abc import Sequence

from midiutil import MIDIFile

from fretchord.instruments import INSTRUMENT_CONFIGS, midi_at_position
from fretchord.voicing_generator import MUTED, Voicing

# In midiutil Format 1 MIDI, track 0 is the conductor/tempo track.
# Note data written to track 0 is ignored by most players and notation apps.
TRACK_CONDUCTOR = 0  # tempo only, never receives notes
TRACK_VOICINGS = 1

CHANNEL = 0
BEATS_PER_VOICING = 4  # one 4/4 bar per voicing


class VoicingMidiExporter:
    """
    Writes a list of voicings to a Standard MIDI File, one bar each.

    Track layout (Format 1, 2 internal tracks)
    ------------------------------------------
    Track 0 — conductor track (tempo only, no notes)

    Track 1 — the instrument, named after it and set to its General MIDI
        program. Every voicing is strummed downwards: the lowest-pitched
        played string sounds first and each higher string follows after
        ``strum_delay`` beats. Muted strings are skipped.

    Playing the file lets a student hear each shape before trying it.
    """

    DEFAULT_TEMPO = 72        # BPM
    DEFAULT_VELOCITY = 90     # MIDI velocity (0-127)
    DEFAULT_STRUM_DELAY = 0.06  # beats between two adjacent strings

    def __init__(
        self,
        tempo: int = DEFAULT_TEMPO,
        velocity: int = DEFAULT_VELOCITY,
        strum_delay: float = DEFAULT_STRUM_DELAY,
    ) -> None:
        """
        Args:
            tempo:       Playback tempo in beats per minute.
            velocity:    MIDI note-on velocity.
            strum_delay: Offset in beats between consecutive strings.
        """
        self.tempo = tempo
        self.velocity = velocity
        self.strum_delay = strum_delay

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _strum_pitches(
        self,
        voicing: Voicing,
        instrument: str,
        tuning_offsets: Sequence[int],
        string_count: int,
    ) -> list[int]:
        """Return the sounding MIDI notes of a voicing, lowest string first."""
        pitches: list[int] = []
        for string_index in range(len(voicing.frets) - 1, -1, -1):
            fret = voicing.frets[string_index]
            if fret == MUTED:
                continue
            pitch = midi_at_position(instrument, string_index, fret, tuning_offsets, string_count)
            if pitch is not None:
                pitches.append(pitch)
        return pitches

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def export(
        self,
        voicings: Sequence[Voicing],
        instrument: str,
        tuning_offsets: Sequence[int],
        string_count: int,
        output_path: str,
    ) -> None:
        """
        Render voicings to a Standard MIDI File (SMF format 1).

        Args:
            voicings:       Voicings to play, in order.
            instrument:     Key of INSTRUMENT_CONFIGS the voicings were built for.
            tuning_offsets: Tuning the voicings were built for.
            string_count:   Number of strings the voicings were built for.
            output_path:    Destination file path (e.g. "c_major.mid").

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        config = INSTRUMENT_CONFIGS[instrument]
        midi = MIDIFile(numTracks=2, removeDuplicates=False, deinterleave=False)

        midi.addTempo(TRACK_CONDUCTOR, 0, self.tempo)
        midi.addTrackName(TRACK_VOICINGS, 0, config.name)
        midi.addProgramChange(TRACK_VOICINGS, CHANNEL, 0, config.midi_program)

        for bar, voicing in enumerate(voicings):
            bar_start = bar * BEATS_PER_VOICING
            pitches = self._strum_pitches(voicing, instrument, tuning_offsets, string_count)

            for order, pitch in enumerate(pitches):
                onset = order * self.strum_delay
                midi.addNote(
                    track=TRACK_VOICINGS,
                    channel=CHANNEL,
                    pitch=pitch,
                    time=bar_start + onset,
                    duration=BEATS_PER_VOICING - onset,
                    volume=self.velocity,
                )

        with open(output_path, "wb") as f:
            midi.writeFile(f)
