"""Pitch and key theory: spelling tables, key signatures and relative keys."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from staffline.errors import InvalidKeySignature, InvalidPitch

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12
MIDDLE_C_MIDI = 60  # C4 in Scientific Pitch Notation
MIDI_MIN = 0
MIDI_MAX = 127
REST = -1  # pitch value reserved for a rest

#: Natural letters in diatonic order, index = step within the octave.
LETTERS: Final[tuple[str, ...]] = ("C", "D", "E", "F", "G", "A", "B")

#: Pitch class of each natural letter.
NATURAL_PITCH_CLASSES: Final[dict[str, int]] = {
    "C": 0,
    "D": 2,
    "E": 4,
    "F": 5,
    "G": 7,
    "A": 9,
    "B": 11,
}

# Chromatic spelling tables (index 0 = C)
SHARP_NAMES: Final[list[str]] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_NAMES: Final[list[str]] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

BLACK_KEY_PITCH_CLASSES: Final[frozenset[int]] = frozenset({1, 3, 6, 8, 10})

#: Order in which sharps enter a key signature.
SHARP_ORDER: Final[tuple[str, ...]] = ("F", "C", "G", "D", "A", "E", "B")

#: Order in which flats enter a key signature.
FLAT_ORDER: Final[tuple[str, ...]] = ("B", "E", "A", "D", "G", "C", "F")

MAJOR = "major"
MINOR = "minor"
MODES: Final[tuple[str, ...]] = (MAJOR, MINOR)


class AccidentalKind(Enum):
    """An accidental attached to a note, or drawn in front of it."""

    NONE = "none"
    SHARP = "sharp"
    FLAT = "flat"
    NATURAL = "natural"
    DOUBLE_SHARP = "double_sharp"
    DOUBLE_FLAT = "double_flat"

    @property
    def glyph(self) -> str:
        """Display symbol, empty for NONE."""
        return _GLYPHS[self]

    @property
    def offset(self) -> int:
        """Semitones this accidental adds to the natural letter."""
        return _OFFSETS[self]

    @property
    def prefers_flats(self) -> bool:
        return self in (AccidentalKind.FLAT, AccidentalKind.DOUBLE_FLAT)

    @classmethod
    def from_symbol(cls, symbol: str | None) -> AccidentalKind:
        """
        Parse an accidental symbol such as ``"#"``, ``"♭"``, ``"n"`` or ``"𝄪"``.

        Raises:
            ValueError: If the symbol is not a known accidental.
        """
        if symbol is None:
            return cls.NONE
        normalized = symbol.strip()
        try:
            return _SYMBOLS[normalized]
        except KeyError:
            try:
                return cls(normalized.lower())
            except ValueError:
                raise ValueError(f"Invalid accidental: {symbol!r}") from None


_GLYPHS: Final[dict[AccidentalKind, str]] = {
    AccidentalKind.NONE: "",
    AccidentalKind.SHARP: "♯",
    AccidentalKind.FLAT: "♭",
    AccidentalKind.NATURAL: "♮",
    AccidentalKind.DOUBLE_SHARP: "𝄪",
    AccidentalKind.DOUBLE_FLAT: "𝄫",
}

_OFFSETS: Final[dict[AccidentalKind, int]] = {
    AccidentalKind.NONE: 0,
    AccidentalKind.SHARP: 1,
    AccidentalKind.FLAT: -1,
    AccidentalKind.NATURAL: 0,
    AccidentalKind.DOUBLE_SHARP: 2,
    AccidentalKind.DOUBLE_FLAT: -2,
}

_SYMBOLS: Final[dict[str, AccidentalKind]] = {
    "": AccidentalKind.NONE,
    "#": AccidentalKind.SHARP,
    "♯": AccidentalKind.SHARP,
    "b": AccidentalKind.FLAT,
    "♭": AccidentalKind.FLAT,
    "n": AccidentalKind.NATURAL,
    "♮": AccidentalKind.NATURAL,
    "##": AccidentalKind.DOUBLE_SHARP,
    "x": AccidentalKind.DOUBLE_SHARP,
    "𝄪": AccidentalKind.DOUBLE_SHARP,
    "bb": AccidentalKind.DOUBLE_FLAT,
    "𝄫": AccidentalKind.DOUBLE_FLAT,
}


# ── Key tables ──────────────────────────────────────────────────────────────

#: Major tonic -> (accidental count, uses sharps)
_MAJOR_KEYS: Final[dict[str, tuple[int, bool]]] = {
    "C": (0, False),
    "G": (1, True),
    "D": (2, True),
    "A": (3, True),
    "E": (4, True),
    "B": (5, True),
    "F#": (6, True),
    "C#": (7, True),
    "F": (1, False),
    "Bb": (2, False),
    "Eb": (3, False),
    "Ab": (4, False),
    "Db": (5, False),
    "Gb": (6, False),
    "Cb": (7, False),
}

#: Minor tonic -> relative major tonic. The last three wrap enharmonically
#: (Gb minor reads as F# minor, Db minor as C# minor, Cb minor as B minor).
_RELATIVE_MAJORS: Final[dict[str, str]] = {
    "A": "C",
    "E": "G",
    "B": "D",
    "F#": "A",
    "C#": "E",
    "G#": "B",
    "D#": "F#",
    "A#": "C#",
    "D": "F",
    "G": "Bb",
    "C": "Eb",
    "F": "Ab",
    "Bb": "Db",
    "Eb": "Gb",
    "Ab": "Cb",
    "Gb": "A",
    "Db": "E",
    "Cb": "D",
}


def normalize_tonic(tonic: str) -> str:
    """
    Normalise a tonic spelling to ASCII form, e.g. ``"b♭"`` -> ``"Bb"``.

    Raises:
        InvalidKeySignature: If the text is not a letter with an optional
            single sharp or flat.
    """
    text = tonic.strip().replace("♯", "#").replace("♭", "b")
    if not text or text[0].upper() not in NATURAL_PITCH_CLASSES or len(text) > 2:
        raise InvalidKeySignature(f"Unrecognized key tonic {tonic!r}.")
    letter, rest = text[0].upper(), text[1:]
    if rest not in ("", "#", "b"):
        raise InvalidKeySignature(f"Unrecognized key tonic {tonic!r}.")
    return letter + rest


def accidental_count(key: str) -> int:
    """Number of sharps or flats in the signature of a major key."""
    return _major_entry(key)[0]


def is_sharp_key(key: str) -> bool:
    """True for G, D, A, E, B, F# and C# major; False for flat keys and C."""
    return _major_entry(key)[1]


def _major_entry(key: str) -> tuple[int, bool]:
    tonic = normalize_tonic(key)
    try:
        return _MAJOR_KEYS[tonic]
    except KeyError:
        raise InvalidKeySignature(f"{tonic} major has no standard key signature.") from None


def relative_major(key: str, mode: str = MAJOR) -> str:
    """
    Return the major tonic whose signature ``key`` in ``mode`` uses.

    A major key is its own relative major; a minor key maps down the circle
    of fifths (A minor -> C, E minor -> G, C minor -> Eb, ...).
    """
    tonic = normalize_tonic(key)
    normalized_mode = mode.strip().lower()
    if normalized_mode == MAJOR:
        _major_entry(tonic)
        return tonic
    if normalized_mode != MINOR:
        raise InvalidKeySignature(f"Unsupported mode {mode!r}. Use one of: {', '.join(MODES)}.")
    try:
        return _RELATIVE_MAJORS[tonic]
    except KeyError:
        raise InvalidKeySignature(f"{tonic} minor has no standard key signature.") from None


@dataclass(frozen=True)
class KeySignature:
    """
    A key signature identified by its accidental count and polarity.

    Attributes:
        accidental_count: 0-7 sharps or flats.
        is_sharp:         True for a sharp signature. Must be False when the
                          count is 0 (C major carries neither).
    """

    accidental_count: int = 0
    is_sharp: bool = False

    def __post_init__(self) -> None:
        count = self.accidental_count
        if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= 7:
            raise InvalidKeySignature(
                f"Accidental count {self.accidental_count!r} is outside 0-7."
            )
        if self.accidental_count == 0 and self.is_sharp:
            raise InvalidKeySignature("A signature without accidentals has no sharp polarity.")

    @property
    def affected_letters(self) -> tuple[str, ...]:
        """Letters altered by the signature, in the order they are written."""
        order = SHARP_ORDER if self.is_sharp else FLAT_ORDER
        return order[: self.accidental_count]

    @property
    def polarity(self) -> AccidentalKind:
        """The accidental the signature applies to its letters."""
        if self.accidental_count == 0:
            return AccidentalKind.NONE
        return AccidentalKind.SHARP if self.is_sharp else AccidentalKind.FLAT

    @property
    def tonic(self) -> str:
        """Major tonic of this signature, e.g. ``"Bb"``."""
        for tonic, entry in _MAJOR_KEYS.items():
            if entry == (self.accidental_count, self.is_sharp):
                return tonic
        raise InvalidKeySignature(f"No major key for {self!r}.")  # unreachable after validation

    @property
    def name(self) -> str:
        return f"{self.tonic} major"

    def affects(self, letter: str) -> bool:
        """True when ``letter`` is altered by this signature."""
        return letter in self.affected_letters

    @classmethod
    def from_key(cls, key: str, mode: str = MAJOR) -> KeySignature:
        """Build the signature of ``key`` in ``mode`` (minor keys use their relative major)."""
        count, sharp = _major_entry(relative_major(key, mode))
        return cls(accidental_count=count, is_sharp=sharp)


def key_signature(tonic: str, mode: str = MAJOR) -> KeySignature:
    """Shorthand for :meth:`KeySignature.from_key`."""
    return KeySignature.from_key(tonic, mode)


#: The fifteen standard major signatures, keyed by tonic.
STANDARD_KEYS: Final[dict[str, KeySignature]] = {
    tonic: KeySignature(accidental_count=count, is_sharp=sharp)
    for tonic, (count, sharp) in _MAJOR_KEYS.items()
}


# ── Pitch helpers ───────────────────────────────────────────────────────────

def validate_pitch(pitch: int) -> int:
    """
    Return ``pitch`` unchanged if it is a MIDI note or a rest.

    Raises:
        InvalidPitch: For non-integers and values outside [-1, 127].
    """
    if isinstance(pitch, bool) or not isinstance(pitch, int):
        raise InvalidPitch(pitch)
    if pitch != REST and not MIDI_MIN <= pitch <= MIDI_MAX:
        raise InvalidPitch(pitch)
    return pitch


def octave_of(pitch: int) -> int:
    """Scientific octave number (C4 = 60)."""
    return pitch // SEMITONES_PER_OCTAVE - 1


def is_black_key(pitch: int) -> bool:
    return pitch % SEMITONES_PER_OCTAVE in BLACK_KEY_PITCH_CLASSES


def letter_of(pitch: int, prefer_flats: bool = False) -> str:
    """
    Spell the pitch class of ``pitch`` as a letter plus optional ``#``/``b``.

    Natural pitch classes map to the bare letter regardless of ``prefer_flats``.
    """
    names = FLAT_NAMES if prefer_flats else SHARP_NAMES
    return names[pitch % SEMITONES_PER_OCTAVE]


def natural_of(pitch: int, accidental: AccidentalKind = AccidentalKind.NONE) -> int:
    """
    MIDI pitch of the natural letter ``pitch`` is written on.

    A sharp, flat or double accidental names its letter directly: the letter
    sits ``accidental.offset`` semitones away, so Cb4 (59) is written on C4
    (60) and C𝄪4 (62) on C4 as well. When that lands on a black key the
    accidental cannot spell the pitch, and the sharp or flat table decides.
    """
    if accidental.offset:
        natural = pitch - accidental.offset
        if not is_black_key(natural):
            return natural
    if not is_black_key(pitch):
        return pitch
    return pitch + 1 if accidental.prefers_flats else pitch - 1


def letter_for(pitch: int, accidental: AccidentalKind = AccidentalKind.NONE) -> str:
    """Bare letter a note is written on, e.g. ``"C"`` for Cb4 and ``"E"`` for Eb4."""
    return SHARP_NAMES[natural_of(pitch, accidental) % SEMITONES_PER_OCTAVE]


_ALTERATION_TEXT: Final[dict[int, str]] = {-2: "bb", -1: "b", 0: "", 1: "#", 2: "##"}


def spelled_name(pitch: int, accidental: AccidentalKind = AccidentalKind.NONE) -> str:
    """Written name with the octave of the letter, e.g. ``"Cb4"`` for 59 spelled flat."""
    if pitch == REST:
        return "rest"
    natural = natural_of(pitch, accidental)
    alteration = _ALTERATION_TEXT[pitch - natural]
    return f"{SHARP_NAMES[natural % SEMITONES_PER_OCTAVE]}{alteration}{octave_of(natural)}"


def pitch_name(pitch: int, prefer_flats: bool = False) -> str:
    """Human-readable pitch name, e.g. ``"C#4"`` or ``"Db4"``; ``"rest"`` for -1."""
    if pitch == REST:
        return "rest"
    return f"{letter_of(pitch, prefer_flats)}{octave_of(pitch)}"


def natural_pitch_class(letter: str) -> int:
    """
    Pitch class of a natural letter.

    Raises:
        InvalidKeySignature: If ``letter`` is not one of A-G.
    """
    try:
        return NATURAL_PITCH_CLASSES[letter.upper()]
    except (KeyError, AttributeError):
        raise InvalidKeySignature(f"Unrecognized letter name {letter!r}.") from None


def diatonic_step(pitch: int, accidental: AccidentalKind = AccidentalKind.NONE) -> int:
    """
    Absolute diatonic step of the spelled note (C-1 = 0, C4 = 35).

    Each step is one line-or-space on a staff, so two notes one step apart sit
    half a staff position apart.
    """
    natural = natural_of(pitch, accidental)
    letter = SHARP_NAMES[natural % SEMITONES_PER_OCTAVE]
    return (octave_of(natural) + 1) * len(LETTERS) + LETTERS.index(letter)


def midi_from_name(letter: str, accidental: AccidentalKind, octave: int) -> int:
    """
    Convert a letter, accidental and octave to a MIDI note.

    Raises:
        InvalidKeySignature: If the letter is unknown.
        InvalidPitch: If the result falls outside 0-127.
    """
    pitch = (octave + 1) * SEMITONES_PER_OCTAVE + natural_pitch_class(letter) + accidental.offset
    if not MIDI_MIN <= pitch <= MIDI_MAX:
        raise InvalidPitch(pitch)
    return pitch
