"""staffline: pitch-to-staff placement and accidental tracking for music notation."""

from staffline.clefs import Clef, clef_table, supported_clefs
from staffline.config import EngravingStyle, load_style
from staffline.engraver import Engraver, engrave_melody, staff_line_to_y
from staffline.errors import InvalidKeySignature, InvalidPitch, StafflineError, UnresolvedClef
from staffline.keyboard import PianoKey, PianoKeyboard
from staffline.ledger import ledger_lines, needs_ledger_line
from staffline.melody import EXAMPLE_MELODIES, MelodyNote, MelodyProfile
from staffline.models import EngravedMeasure, EngravedNote, Note, StaffDocument
from staffline.resolver import StaffPositionResolver, key_signature_lines, resolve_staff_line
from staffline.theory import AccidentalKind, KeySignature, key_signature, relative_major
from staffline.tracker import KeyTracker

__version__ = "0.1.0"

__all__ = [
    "AccidentalKind",
    "Clef",
    "EXAMPLE_MELODIES",
    "EngravedMeasure",
    "EngravedNote",
    "Engraver",
    "EngravingStyle",
    "InvalidKeySignature",
    "InvalidPitch",
    "KeySignature",
    "KeyTracker",
    "MelodyNote",
    "MelodyProfile",
    "Note",
    "PianoKey",
    "PianoKeyboard",
    "StaffDocument",
    "StaffPositionResolver",
    "StafflineError",
    "UnresolvedClef",
    "__version__",
    "clef_table",
    "engrave_melody",
    "key_signature",
    "key_signature_lines",
    "ledger_lines",
    "load_style",
    "needs_ledger_line",
    "relative_major",
    "resolve_staff_line",
    "staff_line_to_y",
    "supported_clefs",
]
