"""Unit tests for pitch and key-signature theory helpers."""

import pytest

from staffline.errors import InvalidKeySignature, InvalidPitch
from staffline.theory import (
    STANDARD_KEYS,
    AccidentalKind,
    KeySignature,
    accidental_count,
    diatonic_step,
    is_sharp_key,
    key_signature,
    letter_for,
    letter_of,
    midi_from_name,
    natural_pitch_class,
    normalize_tonic,
    octave_of,
    pitch_name,
    spelled_name,
    relative_major,
    validate_pitch,
)


@pytest.mark.parametrize(
    ("key", "count"),
    [
        ("C", 0), ("G", 1), ("F", 1), ("D", 2), ("Bb", 2), ("A", 3), ("Eb", 3),
        ("E", 4), ("Ab", 4), ("B", 5), ("Db", 5), ("F#", 6), ("Gb", 6),
        ("C#", 7), ("Cb", 7),
    ],
)
def test_accidental_count_follows_circle_of_fifths(key: str, count: int) -> None:
    assert accidental_count(key) == count


def test_is_sharp_key() -> None:
    assert is_sharp_key("D")
    assert is_sharp_key("F#")
    assert not is_sharp_key("Bb")
    assert not is_sharp_key("C")


def test_unknown_key_raises() -> None:
    with pytest.raises(InvalidKeySignature):
        accidental_count("D#")
    with pytest.raises(InvalidKeySignature):
        accidental_count("H")


def test_normalize_tonic_accepts_unicode_and_lowercase() -> None:
    assert normalize_tonic("b♭") == "Bb"
    assert normalize_tonic(" f# ") == "F#"


def test_relative_major_for_minor_keys() -> None:
    assert relative_major("A", "minor") == "C"
    assert relative_major("E", "minor") == "G"
    assert relative_major("C", "minor") == "Eb"
    assert relative_major("D#", "minor") == "F#"
    assert relative_major("Db", "minor") == "E"


def test_relative_major_of_major_key_is_itself() -> None:
    assert relative_major("Bb") == "Bb"


def test_relative_major_rejects_unknown_mode() -> None:
    with pytest.raises(InvalidKeySignature):
        relative_major("C", "dorian")


def test_key_signature_from_minor_key_uses_relative_major() -> None:
    assert key_signature("A", "minor") == KeySignature()
    assert key_signature("C", "minor") == KeySignature(accidental_count=3, is_sharp=False)


def test_key_signature_affected_letters_in_order() -> None:
    assert key_signature("D").affected_letters == ("F", "C")
    assert key_signature("Eb").affected_letters == ("B", "E", "A")
    assert key_signature("C").affected_letters == ()


def test_key_signature_polarity_and_name() -> None:
    assert key_signature("A").polarity == AccidentalKind.SHARP
    assert key_signature("F").polarity == AccidentalKind.FLAT
    assert key_signature("C").polarity == AccidentalKind.NONE
    assert key_signature("Bb").name == "Bb major"


@pytest.mark.parametrize(("count", "sharp"), [(-1, False), (8, True), (0, True)])
def test_key_signature_rejects_invalid_construction(count: int, sharp: bool) -> None:
    with pytest.raises(InvalidKeySignature):
        KeySignature(accidental_count=count, is_sharp=sharp)


def test_key_signature_rejects_bool_count() -> None:
    with pytest.raises(InvalidKeySignature):
        KeySignature(accidental_count=True)


def test_standard_keys_has_fifteen_signatures() -> None:
    assert len(STANDARD_KEYS) == 15
    assert STANDARD_KEYS["Gb"].tonic == "Gb"


def test_accidental_kind_glyphs_and_offsets() -> None:
    assert AccidentalKind.SHARP.glyph == "♯"
    assert AccidentalKind.DOUBLE_FLAT.glyph == "𝄫"
    assert AccidentalKind.NONE.glyph == ""
    assert AccidentalKind.DOUBLE_SHARP.offset == 2
    assert AccidentalKind.NATURAL.offset == 0


@pytest.mark.parametrize(
    ("symbol", "kind"),
    [
        (None, AccidentalKind.NONE),
        ("#", AccidentalKind.SHARP),
        ("♭", AccidentalKind.FLAT),
        ("♮", AccidentalKind.NATURAL),
        ("x", AccidentalKind.DOUBLE_SHARP),
        ("double_flat", AccidentalKind.DOUBLE_FLAT),
    ],
)
def test_accidental_from_symbol(symbol: str | None, kind: AccidentalKind) -> None:
    assert AccidentalKind.from_symbol(symbol) == kind


def test_accidental_from_symbol_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        AccidentalKind.from_symbol("?")


def test_validate_pitch_bounds() -> None:
    assert validate_pitch(-1) == -1
    assert validate_pitch(127) == 127
    for bad in (-2, 128, 60.0, True):
        with pytest.raises(InvalidPitch):
            validate_pitch(bad)


def test_spelling_helpers() -> None:
    assert octave_of(60) == 4
    assert octave_of(59) == 3
    assert letter_of(61) == "C#"
    assert letter_of(61, prefer_flats=True) == "Db"
    assert letter_for(63, AccidentalKind.FLAT) == "E"
    assert letter_for(63, AccidentalKind.SHARP) == "D"
    assert pitch_name(70, prefer_flats=True) == "Bb4"
    assert pitch_name(-1) == "rest"


def test_natural_pitch_class() -> None:
    assert natural_pitch_class("c") == 0
    assert natural_pitch_class("B") == 11
    with pytest.raises(InvalidKeySignature):
        natural_pitch_class("H")


def test_diatonic_step_counts_letters_not_semitones() -> None:
    assert diatonic_step(60) == 35
    assert diatonic_step(72) - diatonic_step(60) == 7
    assert diatonic_step(63, AccidentalKind.SHARP) == diatonic_step(62)
    assert diatonic_step(63, AccidentalKind.FLAT) == diatonic_step(64)


def test_white_key_enharmonics_keep_their_letter() -> None:
    assert letter_for(59, AccidentalKind.FLAT) == "C"
    assert letter_for(64, AccidentalKind.FLAT) == "F"
    assert letter_for(65, AccidentalKind.SHARP) == "E"
    assert letter_for(62, AccidentalKind.DOUBLE_SHARP) == "C"
    assert letter_for(57, AccidentalKind.DOUBLE_FLAT) == "B"
    assert diatonic_step(59, AccidentalKind.FLAT) == diatonic_step(60)
    assert diatonic_step(60, AccidentalKind.SHARP) == diatonic_step(59)
    assert diatonic_step(62, AccidentalKind.DOUBLE_SHARP) == diatonic_step(60)


def test_spelled_name() -> None:
    assert spelled_name(59, AccidentalKind.FLAT) == "Cb4"
    assert spelled_name(60, AccidentalKind.SHARP) == "B#3"
    assert spelled_name(84, AccidentalKind.DOUBLE_FLAT) == "Dbb6"
    assert spelled_name(61) == "C#4"
    assert spelled_name(61, AccidentalKind.FLAT) == "Db4"
    assert spelled_name(60, AccidentalKind.NATURAL) == "C4"
    assert spelled_name(-1) == "rest"


def test_midi_from_name() -> None:
    assert midi_from_name("C", AccidentalKind.NONE, 4) == 60
    assert midi_from_name("C", AccidentalKind.SHARP, 4) == 61
    assert midi_from_name("G", AccidentalKind.FLAT, 4) == 66
    assert midi_from_name("A", AccidentalKind.NONE, 0) == 21
    with pytest.raises(InvalidPitch):
        midi_from_name("G", AccidentalKind.SHARP, 9)
