"""PianoKeyboard: a virtual keyboard that turns key presses into notes."""

from __future__ import annotations

from dataclasses import dataclass

from staffline.clefs import Clef, clef_table
from staffline.errors import InvalidPitch
from staffline.models import Note
from staffline.theory import (
    SEMITONES_PER_OCTAVE,
    AccidentalKind,
    is_black_key,
    pitch_name,
)


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """
    Convert a pitch class (0-11) and an octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.

    Args:
        pitch_class: 0=C, 1=C#, 2=D, ..., 11=B.
        octave:      Scientific octave number (e.g. 4 for Middle C octave).

    Returns:
        MIDI note number.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


@dataclass(frozen=True)
class PianoKey:
    """
    One key on the virtual keyboard.

    Attributes:
        pitch:    MIDI note number.
        is_black: True for the five raised keys of each octave.
        label:    Spelled name, e.g. ``"C4"``, ``"F#4"`` or ``"Gb4"``.
    """

    pitch: int
    is_black: bool
    label: str


class PianoKeyboard:
    """
    Keyboard covering the octave range of a clef.

    The range comes from the clef's reference table (treble C4-B6, bass
    C2-B4, alto and tenor C3-B5). Black keys are labelled and pressed as
    sharps, or as flats when ``use_flats`` is set.

    Raises:
        UnresolvedClef: If ``clef`` has no reference table.
    """

    def __init__(self, clef: Clef, use_flats: bool = False) -> None:
        self.clef = clef
        self.use_flats = use_flats
        self.low_octave, self.high_octave = clef_table(clef).octave_range

    @property
    def lowest(self) -> int:
        return pitch_class_to_midi(0, self.low_octave)

    @property
    def highest(self) -> int:
        return pitch_class_to_midi(11, self.high_octave)

    def __contains__(self, pitch: object) -> bool:
        return isinstance(pitch, int) and self.lowest <= pitch <= self.highest

    def keys(self) -> list[PianoKey]:
        """All keys from lowest to highest."""
        return [
            PianoKey(
                pitch=pitch,
                is_black=is_black_key(pitch),
                label=pitch_name(pitch, prefer_flats=self.use_flats),
            )
            for pitch in range(self.lowest, self.highest + 1)
        ]

    def white_keys(self) -> list[PianoKey]:
        return [key for key in self.keys() if not key.is_black]

    def black_keys(self) -> list[PianoKey]:
        return [key for key in self.keys() if key.is_black]

    def press(self, pitch: int) -> Note:
        """
        Note produced by pressing the key at ``pitch``.

        Raises:
            InvalidPitch: If ``pitch`` is not on this keyboard.
        """
        if pitch not in self:
            raise InvalidPitch(pitch)
        if not is_black_key(pitch):
            return Note(pitch=pitch)
        accidental = AccidentalKind.FLAT if self.use_flats else AccidentalKind.SHARP
        return Note(pitch=pitch, accidental=accidental)
