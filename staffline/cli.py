"""staffline CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from staffline import __version__
from staffline.clefs import Clef, supported_clefs
from staffline.config import load_style
from staffline.engraver import Engraver, engrave_melody
from staffline.errors import StafflineError
from staffline.keyboard import PianoKeyboard
from staffline.ledger import ledger_lines
from staffline.melody import EXAMPLE_MELODIES, find_melody
from staffline.models import Note, StaffDocument
from staffline.renderers import RENDERERS, build_renderer
from staffline.resolver import resolver_for
from staffline.theory import MODES, AccidentalKind, KeySignature

MEASURE_SEPARATOR = "|"

_CLEF_CHOICE = click.Choice([clef.value for clef in supported_clefs()], case_sensitive=False)
_FORMAT_CHOICE = click.Choice(sorted(RENDERERS), case_sensitive=False)
_ACCIDENTAL_CHOICE = click.Choice([kind.value for kind in AccidentalKind], case_sensitive=False)


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _parse_pitch(text: str) -> Note:
    """Accept a MIDI number (``61``, ``-1``) or a note name (``C#4``, ``r``)."""
    stripped = text.strip()
    if stripped.lstrip("-").isdigit():
        return Note(pitch=int(stripped))
    return Note.from_name(stripped)


def _split_measures(tokens: tuple[str, ...]) -> list[list[Note]]:
    """
    Split note tokens into measures on ``|``.

    The separator may stand alone or be glued to a note (``E4|F4``). Empty
    measures are dropped.
    """
    measures: list[list[Note]] = [[]]
    for token in tokens:
        parts = token.split(MEASURE_SEPARATOR)
        for idx, part in enumerate(parts):
            if idx > 0:
                measures.append([])
            if part.strip():
                measures[-1].append(Note.from_name(part))
    return [measure for measure in measures if measure]


def _emit(document: StaffDocument, output_format: str, output: str | None) -> None:
    renderer = build_renderer(output_format)
    content = renderer.render(document)
    if output is None:
        click.echo(content, nl=False)
        return
    Path(output).write_text(content, encoding="utf-8")
    click.echo(f"Done!  Wrote {renderer.default_extension.lstrip('.')} output to '{output}'.")


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="staffline")
@click.option("--verbose", "-v", is_flag=True, help="Log resolver and tracker decisions.")
def main(verbose: bool) -> None:
    """staffline — place pitches on a staff and decide their accidentals."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── resolve subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("pitch")
@click.option("--clef", type=_CLEF_CHOICE, default="treble", show_default=True)
@click.option(
    "--accidental",
    type=_ACCIDENTAL_CHOICE,
    default=None,
    help="Spelling of the pitch. Overrides any accidental in a note name.",
)
@click.option("--key", default="C", show_default=True, help="Key tonic, e.g. G, Bb, F#.")
@click.option("--mode", type=click.Choice(MODES), default="major", show_default=True)
def resolve(pitch: str, clef: str, accidental: str | None, key: str, mode: str) -> None:
    """
    Print the staff line and ledger lines of a single pitch.

    PITCH is a MIDI number (61, or -1 for a rest) or a note name (C#4, Eb4).

    \b
    Examples:
      staffline resolve 60
      staffline resolve 63 --accidental flat
      staffline resolve Bb2 --clef bass --key F
    """
    try:
        note = _parse_pitch(pitch)
        kind = AccidentalKind(accidental) if accidental is not None else note.accidental
        resolver = resolver_for(Clef.from_name(clef))
        signature = KeySignature.from_key(key, mode)
        staff_line = resolver.resolve(note.pitch, kind)
        signature_lines = resolver.key_signature_lines(signature)
    except StafflineError as exc:
        _fail(str(exc))
    except ValueError as exc:
        _fail(f"Could not read pitch — {exc}")

    ledger = [] if note.is_rest else ledger_lines(staff_line)
    click.echo(f"  Clef       : {clef}")
    click.echo(f"  Pitch      : {note.pitch} ({Note(note.pitch, kind).name})")
    click.echo(f"  Spelling   : {kind.value}")
    click.echo(f"  Staff line : {staff_line:g}")
    click.echo(f"  Ledger     : {', '.join(f'{line:g}' for line in ledger) or 'none'}")
    click.echo(
        f"  Key        : {signature.name}"
        f"  [{', '.join(f'{line:g}' for line in signature_lines) or 'no accidentals'}]"
    )


# ── engrave subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("notes", nargs=-1, required=True)
@click.option("--clef", type=_CLEF_CHOICE, default="treble", show_default=True)
@click.option("--key", default="C", show_default=True, help="Key tonic, e.g. G, Bb, F#.")
@click.option("--mode", type=click.Choice(MODES), default="major", show_default=True)
@click.option("--title", default="", metavar="TEXT", help="Title shown in the output header.")
@click.option(
    "--format",
    "output_format",
    type=_FORMAT_CHOICE,
    default="text",
    show_default=True,
    help="Output format: fixed-width text table or JSON.",
)
@click.option(
    "--style",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    default=None,
    metavar="PATH",
    help="YAML file overriding engraving style constants.",
)
@click.option("--output", "-o", default=None, metavar="PATH", help="Write to a file instead of stdout.")
def engrave(
    notes: tuple[str, ...],
    clef: str,
    key: str,
    mode: str,
    title: str,
    output_format: str,
    style: str | None,
    output: str | None,
) -> None:
    """
    Engrave a note sequence on one staff.

    NOTES are note names (F#4, Bb3, Cn5), ``r`` for a rest, with a trailing
    ``~`` for a tie. A ``|`` starts a new measure.

    \b
    Examples:
      staffline engrave C4 D4 E4 F4 "|" G4 A4 B4 C5
      staffline engrave E4 F4 F#4 G4 Gn4 --key E --format json
      staffline engrave C#4 D4 C4 --clef alto -o out.json --format json
    """
    try:
        measures = _split_measures(notes)
        engraver = Engraver(
            Clef.from_name(clef),
            KeySignature.from_key(key, mode),
            style=load_style(style),
            title=title,
        )
        document = engraver.engrave_measures(measures)
    except StafflineError as exc:
        _fail(str(exc))
    except ValueError as exc:
        _fail(f"Could not engrave notes — {exc}")
    except OSError as exc:
        _fail(f"Could not read style file — {exc}")

    try:
        _emit(document, output_format.lower(), output)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")


# ── melody subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("melody_id", required=False)
@click.option("--format", "output_format", type=_FORMAT_CHOICE, default="text", show_default=True)
@click.option("--output", "-o", default=None, metavar="PATH", help="Write to a file instead of stdout.")
def melody(melody_id: str | None, output_format: str, output: str | None) -> None:
    """
    List the example melodies, or engrave one by id.

    \b
    Examples:
      staffline melody
      staffline melody melody_002 --format json
    """
    if melody_id is None:
        for profile in EXAMPLE_MELODIES:
            meter = "free"
            if profile.time_signature is not None:
                meter = f"{profile.time_signature[0]}/{profile.time_signature[1]}"
            click.echo(
                f"  {profile.id:<12} {profile.name:<28} "
                f"{profile.key} {profile.mode}, {profile.clef.value}, {meter}, "
                f"difficulty {profile.difficulty}"
            )
        return

    try:
        profile = find_melody(melody_id)
    except KeyError:
        known = ", ".join(profile.id for profile in EXAMPLE_MELODIES)
        _fail(f"Unknown melody '{melody_id}'. Use one of: {known}.")

    try:
        document = engrave_melody(profile)
    except StafflineError as exc:
        _fail(str(exc))

    try:
        _emit(document, output_format.lower(), output)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")


# ── keyboard subcommand ────────────────────────────────────────────────────────

@main.command()
@click.option("--clef", type=_CLEF_CHOICE, default="treble", show_default=True)
@click.option("--flats", is_flag=True, help="Label and press black keys as flats.")
def keyboard(clef: str, flats: bool) -> None:
    """List the keys of the virtual keyboard for a clef."""
    piano = PianoKeyboard(Clef.from_name(clef), use_flats=flats)
    resolver = resolver_for(piano.clef)
    keys = piano.keys()
    click.echo(f"  Keyboard for {clef} clef: {keys[0].label} - {keys[-1].label}")
    for key in keys:
        note = piano.press(key.pitch)
        colour = "black" if key.is_black else "white"
        staff_line = resolver.resolve(note.pitch, note.accidental)
        click.echo(f"  {key.pitch:>4}  {key.label:<4} {colour:<5}  line {staff_line:g}")
