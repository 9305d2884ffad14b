"""fretchord CLI entry point."""

import logging
import sys
from collections.abc import Callable, Sequence
from typing import Any

import click

from fretchord import __version__
from fretchord.instruments import INSTRUMENT_CONFIGS, available_tunings, note_at_position
from fretchord.midi_exporter import VoicingMidiExporter
from fretchord.music_theory import (
    CHORD_QUALITIES,
    NAMING_SYSTEMS,
    SCALES,
    chord_symbol,
    chord_tones,
    get_diatonic_chords,
    interval_labels,
    note_name,
    parse_note,
)
from fretchord.voicing_generator import (
    DEFAULT_LIMIT,
    DEFAULT_MAX_FRET,
    MUTED,
    Voicing,
    get_chord_voicings,
)


def _root_callback(ctx: click.Context, param: click.Parameter, value: str) -> int:
    try:
        return parse_note(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param) from exc


def _string_count(instrument: str, strings: int | None) -> int:
    if strings is None:
        return INSTRUMENT_CONFIGS[instrument].default_string_count
    if strings not in INSTRUMENT_CONFIGS[instrument].layouts:
        supported = ", ".join(str(count) for count in INSTRUMENT_CONFIGS[instrument].layouts)
        raise click.BadParameter(
            f"{instrument.lower()} supports {supported} strings.", param_hint="'--strings'"
        )
    return strings


def _resolve_tuning(instrument: str, string_count: int, tuning: str) -> tuple[int, ...]:
    """Turn a tuning name or a comma-separated offset list into offsets.

    Raises:
        ValueError: If the name is unknown or the offsets do not parse.
    """
    named = available_tunings(instrument, string_count)
    key = tuning.strip().upper()
    if key == "STANDARD":
        return ()
    if key in named:
        return named[key].offsets

    try:
        offsets = tuple(int(part) for part in tuning.split(","))
    except ValueError:
        choices = ", ".join(named) or "STANDARD"
        raise ValueError(
            f"Unknown tuning '{tuning}'. Use one of: {choices}, or offsets like 0,0,0,0,0,-2."
        ) from None

    if len(offsets) > string_count:
        raise ValueError(f"Got {len(offsets)} tuning offsets for {string_count} strings.")
    return offsets


def _format_frets(frets: Sequence[int], width: int = 3) -> str:
    """Render frets low string first, e.g. '  x  3  2  0  1  0'."""
    cells = ["x" if fret == MUTED else str(fret) for fret in reversed(frets)]
    return "".join(f"{cell:>{width}}" for cell in cells)


def _open_string_names(
    instrument: str, tuning_offsets: Sequence[int], string_count: int, naming: str
) -> list[str]:
    """Names of the open strings, low string first."""
    return [
        note_name(note_at_position(instrument, index, 0, tuning_offsets, string_count), naming)
        for index in range(string_count - 1, -1, -1)
    ]


def _instrument_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the --instrument / --strings / --tuning / --naming options."""
    options = [
        click.option(
            "--instrument",
            type=click.Choice(list(INSTRUMENT_CONFIGS), case_sensitive=False),
            default="GUITAR",
            show_default=True,
            help="Instrument to voice the chord on.",
        ),
        click.option(
            "--strings",
            type=int,
            default=None,
            help="String count. Defaults to 6 for guitar and 4 for bass.",
        ),
        click.option(
            "--tuning",
            default="STANDARD",
            show_default=True,
            metavar="NAME|OFFSETS",
            help=(
                "Named tuning (see 'fretchord tunings') or comma-separated semitone "
                "offsets, highest string first, e.g. 0,0,0,0,0,-2."
            ),
        ),
        click.option(
            "--naming",
            type=click.Choice(list(NAMING_SYSTEMS), case_sensitive=False),
            default="ENGLISH",
            show_default=True,
            help="Note naming system for the output.",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _setup(instrument: str, strings: int | None, tuning: str) -> tuple[str, int, tuple[int, ...]]:
    instrument = instrument.upper()
    string_count = _string_count(instrument, strings)
    try:
        offsets = _resolve_tuning(instrument, string_count, tuning)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--tuning'") from exc
    return instrument, string_count, offsets


def _echo_voicings(
    voicings: Sequence[Voicing],
    instrument: str,
    tuning_offsets: Sequence[int],
    string_count: int,
    naming: str,
) -> None:
    names = _open_string_names(instrument, tuning_offsets, string_count, naming)
    width = max(3, max(len(name) for name in names) + 1)
    header = "".join(f"{name:>{width}}" for name in names)

    click.echo(f"    #{header}   start  score")
    for rank, voicing in enumerate(voicings, start=1):
        frets = _format_frets(voicing.frets, width)
        click.echo(f"  {rank:>3}{frets}   {voicing.start_fret:>5}  {voicing.score:>5g}")


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="fretchord")
@click.option("-v", "--verbose", is_flag=True, help="Print debug logging to stderr.")
def main(verbose: bool) -> None:
    """fretchord — playable chord voicings for any fretted instrument and tuning."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ── voicings subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("root", callback=_root_callback)
@click.argument("quality", type=click.Choice(CHORD_QUALITIES, case_sensitive=False))
@_instrument_options
@click.option(
    "--max-fret",
    type=click.IntRange(0, 30),
    default=DEFAULT_MAX_FRET,
    show_default=True,
    help="Highest fret the search may use.",
)
@click.option(
    "--limit",
    type=click.IntRange(1, None),
    default=DEFAULT_LIMIT,
    show_default=True,
    help="Number of voicings to list.",
)
def voicings(
    root: int,
    quality: str,
    instrument: str,
    strings: int | None,
    tuning: str,
    naming: str,
    max_fret: int,
    limit: int,
) -> None:
    """
    List the most playable voicings of a chord.

    ROOT is a note name (C, F#, Bb, ...). QUALITY is a chord quality tag.

    \b
    Examples:
      fretchord voicings C MAJOR
      fretchord voicings D MAJOR --tuning DROP_D
      fretchord voicings A MIN7 --instrument bass --strings 5 --limit 5
    """
    instrument, string_count, offsets = _setup(instrument, strings, tuning)
    tones = " ".join(note_name(tone, naming) for tone in chord_tones(root, quality))

    click.echo(f"fretchord v{__version__}")
    click.echo(f"  Chord      : {chord_symbol(root, quality)}  ({tones})")
    click.echo(f"  Instrument : {INSTRUMENT_CONFIGS[instrument].name}, {string_count} strings")
    click.echo()

    found = get_chord_voicings(instrument, offsets, string_count, root, quality, max_fret, limit)
    if not found:
        click.echo("No playable voicings found.")
        return

    _echo_voicings(found, instrument, offsets, string_count, naming)


# ── chord subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("root", callback=_root_callback)
@click.argument("quality", type=click.Choice(CHORD_QUALITIES, case_sensitive=False))
@click.option(
    "--naming",
    type=click.Choice(list(NAMING_SYSTEMS), case_sensitive=False),
    default="ENGLISH",
    show_default=True,
    help="Note naming system for the output.",
)
def chord(root: int, quality: str, naming: str) -> None:
    """Show the tones and intervals of a chord."""
    click.echo(chord_symbol(root, quality))
    for tone, label in zip(chord_tones(root, quality), interval_labels(quality)):
        click.echo(f"  {label:<4} {note_name(tone, naming)}")


# ── diatonic subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("root", callback=_root_callback)
@click.option(
    "--scale",
    "scale_type",
    type=click.Choice(list(SCALES), case_sensitive=False),
    default="MAJOR",
    show_default=True,
    help="Scale the chords are built from.",
)
def diatonic(root: int, scale_type: str) -> None:
    """List the seven triads of a major or natural minor key."""
    for triad in get_diatonic_chords(root, scale_type):
        tones = " ".join(note_name(tone) for tone in triad.notes)
        click.echo(f"  {triad.roman_numeral:<5} {triad.name:<6} {tones}")


# ── tunings subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.option(
    "--instrument",
    type=click.Choice(list(INSTRUMENT_CONFIGS), case_sensitive=False),
    default="GUITAR",
    show_default=True,
)
@click.option("--strings", type=int, default=None, help="String count.")
def tunings(instrument: str, strings: int | None) -> None:
    """List the named tunings of an instrument."""
    instrument = instrument.upper()
    string_count = _string_count(instrument, strings)
    named = available_tunings(instrument, string_count)
    if not named:
        click.echo("No named tunings; pass offsets with --tuning instead.")
        return
    for key, tuning in named.items():
        offsets = ",".join(str(offset) for offset in tuning.offsets)
        click.echo(f"  {key:<15} {tuning.name:<36} {offsets}")


# ── export subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("root", callback=_root_callback)
@click.argument("quality", type=click.Choice(CHORD_QUALITIES, case_sensitive=False))
@_instrument_options
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MIDI file path. Defaults to <chord>.mid.",
)
@click.option(
    "--limit",
    type=click.IntRange(1, None),
    default=4,
    show_default=True,
    help="Number of voicings to play, one bar each.",
)
@click.option(
    "--tempo",
    type=click.IntRange(20, 300),
    default=VoicingMidiExporter.DEFAULT_TEMPO,
    show_default=True,
    help="Playback tempo in BPM.",
)
def export(
    root: int,
    quality: str,
    instrument: str,
    strings: int | None,
    tuning: str,
    naming: str,
    output: str | None,
    limit: int,
    tempo: int,
) -> None:
    """
    Write the best voicings of a chord to a MIDI file.

    \b
    Examples:
      fretchord export G MAJOR
      fretchord export E MIN7 --tuning DROP_D -o em7.mid --limit 8
    """
    instrument, string_count, offsets = _setup(instrument, strings, tuning)
    symbol = chord_symbol(root, quality)
    if output is None:
        output = f"{symbol.replace('#', 's')}.mid"

    click.echo(f"[1/2] Finding voicings for {symbol}...")
    found = get_chord_voicings(instrument, offsets, string_count, root, quality, limit=limit)
    if not found:
        click.echo("  WARNING: No playable voicings found; nothing written.", err=True)
        return
    _echo_voicings(found, instrument, offsets, string_count, naming)

    click.echo(f"[2/2] Writing MIDI file → '{output}'...")
    exporter = VoicingMidiExporter(tempo=tempo)
    try:
        exporter.export(found, instrument, offsets, string_count, output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write MIDI file — {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo(f"Done!  Open '{output}' in any MIDI player.")
