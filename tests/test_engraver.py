"""Unit tests for the Engraver pass."""

import pytest

from staffline.clefs import Clef
from staffline.config import EngravingStyle
from staffline.engraver import Engraver, engrave_melody, staff_line_to_y
from staffline.melody import find_melody
from staffline.models import Note, StaffDocument
from staffline.theory import AccidentalKind, key_signature


def _accidentals(document: StaffDocument) -> list[list[str | None]]:
    return [[note.accidental for note in measure.notes] for measure in document.measures]


def test_staff_line_to_y() -> None:
    assert staff_line_to_y(0.0, 10.0) == 0.0
    assert staff_line_to_y(5.5, 10.0) == 55.0
    assert staff_line_to_y(-1.0, 8.0, staff_top=20.0) == 12.0


def test_engrave_single_measure() -> None:
    document = Engraver(Clef.TREBLE, title="Demo").engrave(
        [Note(60), Note(61, AccidentalKind.SHARP), Note(60), Note(62)]
    )
    assert document.title == "Demo"
    assert document.clef == "treble"
    assert document.key == "C major"
    assert document.key_signature_lines == []
    assert len(document.measures) == 1
    assert _accidentals(document) == [[None, "sharp", "natural", None]]


def test_engraved_note_geometry() -> None:
    document = Engraver(Clef.TREBLE).engrave([Note(60), Note(77)])
    first, second = document.measures[0].notes
    assert first.staff_line == 5.5
    assert first.ledger_lines == [5.0]
    assert first.y == 55.0
    assert first.x == pytest.approx(60.0)
    assert second.staff_line == 0.5
    assert second.ledger_lines == []
    assert second.x == pytest.approx(100.0)


def test_key_signature_shifts_first_note() -> None:
    document = Engraver(Clef.TREBLE, key_signature("D")).engrave([Note(62)])
    assert document.key_signature_lines == [0.5, 2.0]
    assert document.measures[0].notes[0].x == pytest.approx(81.0)


def test_custom_spatium_scales_coordinates() -> None:
    style = EngravingStyle(spatium=5.0)
    note = Engraver(Clef.TREBLE, style=style).engrave([Note(64)]).measures[0].notes[0]
    assert note.y == 22.5
    assert note.x == pytest.approx(30.0)


def test_accidentals_reset_at_barline() -> None:
    measures = [
        [Note(61, AccidentalKind.SHARP), Note(60)],
        [Note(60), Note(61, AccidentalKind.SHARP)],
    ]
    document = Engraver(Clef.TREBLE).engrave_measures(measures)
    assert [measure.number for measure in document.measures] == [1, 2]
    assert _accidentals(document) == [["sharp", "natural"], [None, "sharp"]]


def test_ties_do_not_cross_barlines() -> None:
    measures = [
        [Note(61, AccidentalKind.SHARP, tied=True)],
        [Note(61, AccidentalKind.SHARP)],
    ]
    document = Engraver(Clef.TREBLE).engrave_measures(measures)
    assert _accidentals(document) == [["sharp"], ["sharp"]]
    assert document.measures[0].notes[0].tied


def test_rest_has_no_ledger_lines() -> None:
    note = Engraver(Clef.BASS).engrave([Note.rest()]).measures[0].notes[0]
    assert note.name == "rest"
    assert note.staff_line == 2.5
    assert note.ledger_lines == []
    assert note.accidental is None
    assert note.glyph == ""


def test_glyph_matches_drawn_accidental() -> None:
    note = Engraver(Clef.TREBLE, key_signature("F")).engrave([Note(71)]).measures[0].notes[0]
    assert note.accidental == "natural"
    assert note.glyph == "♮"


def test_separate_engravers_do_not_share_state() -> None:
    treble = Engraver(Clef.TREBLE)
    bass = Engraver(Clef.BASS)
    treble.engrave([Note(61, AccidentalKind.SHARP)])
    assert treble.tracker is not bass.tracker
    assert bass.tracker.state[0] == AccidentalKind.NONE


def test_engrave_melody_e_major() -> None:
    document = engrave_melody(find_melody("melody_002"))
    assert document.title == "E Major with Accidentals"
    assert document.key == "E major"
    assert len(document.key_signature_lines) == 4
    assert _accidentals(document) == [[None, "natural", "sharp", "natural"], ["natural"]]


def test_engrave_melody_d_flat_major() -> None:
    document = engrave_melody(find_melody("melody_003"))
    assert _accidentals(document) == [["sharp", "sharp", "sharp", "natural"], [None]]


def test_engrave_melody_c_major_scale_has_no_accidentals() -> None:
    document = engrave_melody(find_melody("melody_001"))
    assert len(document.measures) == 2
    assert all(accidental is None for measure in _accidentals(document) for accidental in measure)
    lines = [note.staff_line for measure in document.measures for note in measure.notes]
    assert lines == [5.5, 5.0, 4.5, 4.0, 3.5, 3.0, 2.5, 2.0]
