"""Data models for note input and engraving output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Final

from staffline.theory import (
    REST,
    AccidentalKind,
    letter_for,
    octave_of,
    spelled_name,
    validate_pitch,
)

_NOTE_NAME: Final[re.Pattern[str]] = re.compile(r"^([A-Ga-g])([#♯b♭n♮x𝄪𝄫]*)(\d+)?$")

# Accidental text -> music21 modifier
_MUSIC21_MODIFIERS: Final[dict[str, str]] = {
    "": "",
    "#": "#",
    "♯": "#",
    "##": "##",
    "x": "##",
    "𝄪": "##",
    "b": "-",
    "♭": "-",
    "bb": "--",
    "𝄫": "--",
    "n": "n",
    "♮": "n",
}

_MUSIC21_ACCIDENTALS: Final[dict[str, AccidentalKind]] = {
    "sharp": AccidentalKind.SHARP,
    "flat": AccidentalKind.FLAT,
    "natural": AccidentalKind.NATURAL,
    "double-sharp": AccidentalKind.DOUBLE_SHARP,
    "double-flat": AccidentalKind.DOUBLE_FLAT,
}


@dataclass(frozen=True)
class Note:
    """
    A note event as seen by the engine.

    Attributes:
        pitch:      MIDI note number, or -1 for a rest.
        accidental: The accidental the caller asked for. What is actually
                    drawn is decided by the KeyTracker.
        tied:       True when this note is tied into the next note of the
                    same pitch.
    """

    pitch: int
    accidental: AccidentalKind = AccidentalKind.NONE
    tied: bool = False

    def __post_init__(self) -> None:
        validate_pitch(self.pitch)

    @property
    def is_rest(self) -> bool:
        return self.pitch == REST

    @property
    def pitch_class(self) -> int:
        return self.pitch % 12

    @property
    def octave(self) -> int:
        return octave_of(self.pitch)

    @property
    def letter(self) -> str:
        """Letter the note is written on, e.g. ``"C"`` for Cb4 and ``"E"`` for Eb4."""
        return letter_for(self.pitch, self.accidental)

    @property
    def name(self) -> str:
        """Spelled name such as ``"Eb4"`` or ``"Cb4"``; ``"rest"`` for rests."""
        return spelled_name(self.pitch, self.accidental)

    @classmethod
    def rest(cls) -> Note:
        return cls(pitch=REST)

    @classmethod
    def from_name(cls, text: str) -> Note:
        """
        Parse a spelled note name such as ``"F#4"``, ``"Bb3"`` or ``"Cn5"``.

        ``r`` or ``rest`` gives a rest, and a trailing ``~`` marks a tie into
        the next note. The octave defaults to 4.
        The parsed letter is kept: ``"Cb4"`` is MIDI 59 written on C, not B.

        Raises:
            ValueError: If the text is not a note name.
            InvalidPitch: If the note falls outside the MIDI range.
        """
        from music21 import pitch as m21pitch

        raw = text.strip()
        tied = raw.endswith("~")
        if tied:
            raw = raw[:-1]
        if raw.lower() in ("r", "rest"):
            return cls.rest()

        match = _NOTE_NAME.match(raw)
        if not match or match.group(2) not in _MUSIC21_MODIFIERS:
            raise ValueError(f"Unrecognized note name '{text}'.")
        letter, accidental_text, octave_text = match.groups()
        octave = int(octave_text) if octave_text is not None else 4

        parsed = m21pitch.Pitch(f"{letter.upper()}{_MUSIC21_MODIFIERS[accidental_text]}{octave}")
        accidental = AccidentalKind.NONE
        if parsed.accidental is not None:
            accidental = _MUSIC21_ACCIDENTALS.get(parsed.accidental.name, AccidentalKind.NONE)
        return cls(pitch=int(parsed.midi), accidental=accidental, tied=tied)


@dataclass(frozen=True)
class EngravedNote:
    """A note with everything the painter needs to draw it."""

    pitch: int
    name: str
    staff_line: float
    ledger_lines: list[float]
    accidental: str | None
    glyph: str
    x: float
    y: float
    tied: bool = False


@dataclass(frozen=True)
class EngravedMeasure:
    """One measure of engraved notes, numbered from 1."""

    number: int
    notes: list[EngravedNote] = field(default_factory=list)


@dataclass(frozen=True)
class StaffDocument:
    """A single engraved staff consumed by the renderers."""

    title: str
    clef: str
    key: str
    key_signature_lines: list[float]
    measures: list[EngravedMeasure]
