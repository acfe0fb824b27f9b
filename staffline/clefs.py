"""Clefs and their staff reference tables.

Every clef that can place pitches owns a :class:`ClefTable`. Adding a clef
means adding a table here, not another branch in the resolver.

Staff coordinates run downward: 0 is the top of the grid, each diatonic step
moves half a position, and values beyond [0, 4] fall into ledger territory.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final, Mapping

from staffline.errors import UnresolvedClef


class Clef(Enum):
    """Clefs known to the engine. Only some carry a reference table."""

    TREBLE = "treble"
    BASS = "bass"
    ALTO = "alto"
    TENOR = "tenor"
    SOPRANO = "soprano"
    MEZZO_SOPRANO = "mezzo_soprano"
    BARITONE = "baritone"
    VARBARITONE = "varbaritone"
    SUBBASS = "subbass"
    FRENCH = "french"
    TREBLE_8VA = "treble_8va"
    TREBLE_8VB = "treble_8vb"
    BASS_8VA = "bass_8va"
    BASS_8VB = "bass_8vb"
    TAB = "tab"
    PERCUSSION = "percussion"

    @classmethod
    def from_name(cls, name: str) -> Clef:
        """Look a clef up by value, accepting ``-`` or spaces for ``_``."""
        normalized = name.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown clef '{name}'. Use one of: {supported}.") from None


@dataclass(frozen=True)
class ClefTable:
    """
    Reference data for one clef.

    Attributes:
        anchors:           Natural MIDI pitch -> staff line, spanning about two
                           octaves around the clef's home range.
        middle_line_pitch: Anchor on the middle staff line; rests sit there.
        sharp_signature:   Natural pitches on which key-signature sharps are
                           drawn, in sharp order (F C G D A E B).
        flat_signature:    Same for flats, in flat order (B E A D G C F).
        octave_range:      Inclusive octave span of the input keyboard.
    """

    anchors: Mapping[int, float]
    middle_line_pitch: int
    sharp_signature: tuple[int, ...]
    flat_signature: tuple[int, ...]
    octave_range: tuple[int, int]

    def __post_init__(self) -> None:
        object.__setattr__(self, "anchors", MappingProxyType(dict(sorted(self.anchors.items()))))

    @property
    def rest_line(self) -> float:
        return self.anchors[self.middle_line_pitch]

    def transposed(self, semitones: int) -> ClefTable:
        """Same layout for an octave clef whose notes are written ``semitones`` away."""
        octaves = semitones // 12
        low, high = self.octave_range
        return ClefTable(
            anchors={pitch + semitones: line for pitch, line in self.anchors.items()},
            middle_line_pitch=self.middle_line_pitch + semitones,
            sharp_signature=tuple(pitch + semitones for pitch in self.sharp_signature),
            flat_signature=tuple(pitch + semitones for pitch in self.flat_signature),
            octave_range=(low + octaves, high + octaves),
        )


TREBLE_TABLE: Final[ClefTable] = ClefTable(
    anchors={
        60: 5.5,   # C4, middle C below the staff
        62: 5.0,   # D4
        64: 4.5,   # E4, bottom line
        65: 4.0,   # F4
        67: 3.5,   # G4
        69: 3.0,   # A4
        71: 2.5,   # B4, middle line
        72: 2.0,   # C5
        74: 1.5,   # D5
        76: 1.0,   # E5
        77: 0.5,   # F5, top line
        79: 0.0,   # G5
        81: -0.5,  # A5
        83: -1.0,  # B5
        84: -1.5,  # C6
    },
    middle_line_pitch=71,
    sharp_signature=(77, 72, 79, 74, 69, 76, 71),
    flat_signature=(71, 76, 69, 74, 67, 72, 65),
    octave_range=(4, 6),
)

BASS_TABLE: Final[ClefTable] = ClefTable(
    anchors={
        36: 6.5,   # C2
        38: 6.0,   # D2
        40: 5.5,   # E2
        41: 5.0,   # F2
        43: 4.5,   # G2, bottom line
        45: 4.0,   # A2
        47: 3.5,   # B2
        48: 3.0,   # C3
        50: 2.5,   # D3, middle line
        52: 2.0,   # E3
        53: 1.5,   # F3
        55: 1.0,   # G3
        57: 0.5,   # A3, top line
        59: 0.0,   # B3
        60: -0.5,  # C4, middle C above the staff
    },
    middle_line_pitch=50,
    sharp_signature=(53, 48, 55, 50, 45, 52, 47),
    flat_signature=(47, 52, 45, 50, 43, 48, 41),
    octave_range=(2, 4),
)

ALTO_TABLE: Final[ClefTable] = ClefTable(
    anchors={
        48: 6.0,   # C3
        50: 5.5,   # D3
        52: 5.0,   # E3
        53: 4.5,   # F3, bottom line
        55: 4.0,   # G3
        57: 3.5,   # A3
        59: 3.0,   # B3
        60: 2.5,   # C4, middle line
        62: 2.0,   # D4
        64: 1.5,   # E4
        65: 1.0,   # F4
        67: 0.5,   # G4, top line
        69: 0.0,   # A4
        71: -0.5,  # B4
        72: -1.0,  # C5
    },
    middle_line_pitch=60,
    sharp_signature=(65, 60, 67, 62, 57, 64, 59),
    flat_signature=(59, 64, 57, 62, 55, 60, 53),
    octave_range=(3, 5),
)

TENOR_TABLE: Final[ClefTable] = ClefTable(
    anchors={
        45: 6.0,   # A2
        47: 5.5,   # B2
        48: 5.0,   # C3
        50: 4.5,   # D3, bottom line
        52: 4.0,   # E3
        53: 3.5,   # F3
        55: 3.0,   # G3
        57: 2.5,   # A3, middle line
        59: 2.0,   # B3
        60: 1.5,   # C4
        62: 1.0,   # D4
        64: 0.5,   # E4, top line
        65: 0.0,   # F4
        67: -0.5,  # G4
        69: -1.0,  # A4
        71: -1.5,  # B4
        72: -2.0,  # C5
    },
    middle_line_pitch=57,
    # Tenor sharps start on the low F to stay inside the staff.
    sharp_signature=(53, 60, 55, 62, 57, 64, 59),
    flat_signature=(59, 64, 57, 62, 55, 60, 53),
    octave_range=(3, 5),
)

CLEF_TABLES: Final[Mapping[Clef, ClefTable]] = MappingProxyType(
    {
        Clef.TREBLE: TREBLE_TABLE,
        Clef.BASS: BASS_TABLE,
        Clef.ALTO: ALTO_TABLE,
        Clef.TENOR: TENOR_TABLE,
        Clef.TREBLE_8VA: TREBLE_TABLE.transposed(12),
        Clef.TREBLE_8VB: TREBLE_TABLE.transposed(-12),
        Clef.BASS_8VA: BASS_TABLE.transposed(12),
        Clef.BASS_8VB: BASS_TABLE.transposed(-12),
    }
)


def clef_table(clef: Clef) -> ClefTable:
    """
    Return the reference table for ``clef``.

    Raises:
        UnresolvedClef: If the clef is display-only and has no table.
    """
    try:
        return CLEF_TABLES[clef]
    except KeyError:
        raise UnresolvedClef(clef) from None


def supported_clefs() -> list[Clef]:
    """Clefs that can place pitches, in declaration order."""
    return [clef for clef in Clef if clef in CLEF_TABLES]
