"""Exception types raised by the notation engine."""


class StafflineError(ValueError):
    """Base class for every error the engine reports to its caller."""


class InvalidPitch(StafflineError):
    """A pitch outside the MIDI range [-1, 127] (-1 meaning a rest)."""

    def __init__(self, pitch: object) -> None:
        super().__init__(f"Invalid pitch {pitch!r}: expected an int in [-1, 127].")
        self.pitch = pitch


class UnresolvedClef(StafflineError):
    """A clef that has no reference table and cannot place pitches."""

    def __init__(self, clef: object) -> None:
        super().__init__(f"Clef {clef!r} has no staff reference table.")
        self.clef = clef


class InvalidKeySignature(StafflineError):
    """An unknown tonic, or an accidental count/polarity outside 0-7 sharps or flats."""
