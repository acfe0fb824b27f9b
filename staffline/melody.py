"""Melody profiles: named-note melodies used as engraving input."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from staffline.clefs import Clef
from staffline.models import Note
from staffline.theory import MAJOR, AccidentalKind, KeySignature, midi_from_name

#: Quarter notes per whole note; time signatures are measured in quarters.
_QUARTERS_PER_WHOLE = 4.0
_EPSILON = 1e-9


@dataclass(frozen=True)
class MelodyNote:
    """
    A single melody note written by name.

    Attributes:
        letter:     Natural letter A-G.
        octave:     Scientific octave (4 for C4).
        accidental: Written accidental.
        duration:   Length in quarter notes.
        tied:       Tied into the following note.
    """

    letter: str
    octave: int
    accidental: AccidentalKind = AccidentalKind.NONE
    duration: float = 1.0
    tied: bool = False

    @property
    def midi_pitch(self) -> int:
        return midi_from_name(self.letter, self.accidental, self.octave)

    @property
    def full_name(self) -> str:
        """Name with accidental glyph, e.g. ``"C♯4"`` or ``"F♮5"``."""
        return f"{self.letter.upper()}{self.accidental.glyph}{self.octave}"

    def to_note(self) -> Note:
        return Note(pitch=self.midi_pitch, accidental=self.accidental, tied=self.tied)

    @classmethod
    def from_name(
        cls, letter: str, accidental: str | None, octave: int, duration: float = 1.0
    ) -> MelodyNote:
        """Build a note from a letter, an accidental symbol (or None) and an octave."""
        return cls(
            letter=letter.upper(),
            octave=octave,
            accidental=AccidentalKind.from_symbol(accidental),
            duration=duration,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "letter": self.letter,
            "octave": self.octave,
            "accidental": self.accidental.value,
            "duration": self.duration,
            "tied": self.tied,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MelodyNote:
        return cls(
            letter=str(data["letter"]).upper(),
            octave=int(data["octave"]),
            accidental=AccidentalKind.from_symbol(data.get("accidental") or None),
            duration=float(data["duration"]),
            tied=bool(data.get("tied", False)),
        )


@dataclass(frozen=True)
class MelodyProfile:
    """A complete melody with its key, clef and meter."""

    id: str
    name: str
    key: str
    clef: Clef
    notes: list[MelodyNote]
    mode: str = MAJOR
    time_signature: tuple[int, int] | None = (4, 4)
    description: str | None = None
    difficulty: int = 1  # 1-5 scale

    def key_signature(self) -> KeySignature:
        return KeySignature.from_key(self.key, self.mode)

    def measure_length(self) -> float | None:
        """Quarter notes per measure, or None when the melody is unmetered."""
        if self.time_signature is None:
            return None
        numerator, denominator = self.time_signature
        if numerator <= 0 or denominator <= 0:
            raise ValueError(f"Invalid time signature {numerator}/{denominator}.")
        return numerator * _QUARTERS_PER_WHOLE / denominator

    def measures(self) -> list[list[Note]]:
        """
        Split the melody into measures of engine notes.

        A measure closes once its durations fill the time signature; an
        unmetered melody is a single measure.
        """
        capacity = self.measure_length()
        if capacity is None:
            return [[note.to_note() for note in self.notes]]

        measures: list[list[Note]] = []
        current: list[Note] = []
        filled = 0.0
        for melody_note in self.notes:
            current.append(melody_note.to_note())
            filled += melody_note.duration
            if filled >= capacity - _EPSILON:
                measures.append(current)
                current, filled = [], 0.0
        if current:
            measures.append(current)
        return measures

    def to_dict(self) -> dict[str, Any]:
        time_signature = None
        if self.time_signature is not None:
            time_signature = {
                "numerator": self.time_signature[0],
                "denominator": self.time_signature[1],
            }
        return {
            "id": self.id,
            "name": self.name,
            "key": self.key,
            "mode": self.mode,
            "clef": self.clef.value,
            "timeSignature": time_signature,
            "notes": [note.to_dict() for note in self.notes],
            "description": self.description,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MelodyProfile:
        raw_time = data.get("timeSignature")
        time_signature = None
        if raw_time is not None:
            time_signature = (int(raw_time["numerator"]), int(raw_time["denominator"]))
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            key=str(data["key"]),
            mode=str(data.get("mode", MAJOR)),
            clef=Clef.from_name(str(data["clef"])),
            time_signature=time_signature,
            notes=[MelodyNote.from_dict(note) for note in data["notes"]],
            description=data.get("description"),
            difficulty=int(data.get("difficulty", 1)),
        )


EXAMPLE_MELODIES: list[MelodyProfile] = [
    MelodyProfile(
        id="melody_001",
        name="Simple C Major Scale",
        key="C",
        clef=Clef.TREBLE,
        time_signature=(4, 4),
        notes=[
            MelodyNote.from_name("C", None, 4),
            MelodyNote.from_name("D", None, 4),
            MelodyNote.from_name("E", None, 4),
            MelodyNote.from_name("F", None, 4),
            MelodyNote.from_name("G", None, 4),
            MelodyNote.from_name("A", None, 4),
            MelodyNote.from_name("B", None, 4),
            MelodyNote.from_name("C", None, 5),
        ],
        description="A simple ascending C major scale",
        difficulty=1,
    ),
    MelodyProfile(
        id="melody_002",
        name="E Major with Accidentals",
        key="E",
        clef=Clef.TREBLE,
        time_signature=(3, 4),
        notes=[
            MelodyNote.from_name("E", None, 4),
            MelodyNote.from_name("F", None, 4, 0.5),
            MelodyNote.from_name("F", "♯", 4, 0.5),
            MelodyNote.from_name("G", None, 4),
            MelodyNote.from_name("G", "♮", 4),
        ],
        description="A melody in E major with some accidentals",
        difficulty=2,
    ),
    MelodyProfile(
        id="melody_003",
        name="D-flat Major Exercise",
        key="Db",
        clef=Clef.TREBLE,
        time_signature=(4, 4),
        notes=[
            MelodyNote.from_name("C", "♯", 4),
            MelodyNote.from_name("D", "♯", 4),
            MelodyNote.from_name("F", "♯", 4),
            MelodyNote.from_name("F", "♮", 4),
            MelodyNote.from_name("G", "♭", 4),
        ],
        description="A melody in D-flat major with natural signs",
        difficulty=3,
    ),
]


def find_melody(melody_id: str) -> MelodyProfile:
    """
    Look up an example melody by id.

    Raises:
        KeyError: If no example has that id.
    """
    for melody in EXAMPLE_MELODIES:
        if melody.id == melody_id:
            return melody
    raise KeyError(melody_id)
