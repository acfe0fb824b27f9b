"""Tests for the click command line interface."""

import json
from pathlib import Path

from click.testing import CliRunner

from staffline import __version__
from staffline.cli import main


def test_version() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_resolve_midi_number() -> None:
    result = CliRunner().invoke(main, ["resolve", "60"])
    assert result.exit_code == 0
    assert "Staff line : 5.5" in result.output
    assert "Ledger     : 5\n" in result.output


def test_resolve_flat_spelling_and_key() -> None:
    result = CliRunner().invoke(main, ["resolve", "63", "--accidental", "flat", "--key", "Bb"])
    assert result.exit_code == 0
    assert "Eb4" in result.output
    assert "Staff line : 4.5" in result.output
    assert "Bb major  [2.5, 1]" in result.output


def test_resolve_note_name_on_bass() -> None:
    result = CliRunner().invoke(main, ["resolve", "C4", "--clef", "bass"])
    assert result.exit_code == 0
    assert "Staff line : -0.5" in result.output
    assert "Ledger     : -1" in result.output


def test_resolve_invalid_pitch_exits_with_error() -> None:
    result = CliRunner().invoke(main, ["resolve", "200"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_resolve_unknown_key_exits_with_error() -> None:
    result = CliRunner().invoke(main, ["resolve", "60", "--key", "H"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_engrave_text_with_measures() -> None:
    result = CliRunner().invoke(main, ["engrave", "C4", "C#4", "C4", "|", "C4"])
    assert result.exit_code == 0
    assert "Measure 1" in result.output
    assert "Measure 2" in result.output
    assert result.output.count("♮") == 1


def test_engrave_json_output() -> None:
    result = CliRunner().invoke(
        main, ["engrave", "F4", "F#4|F#4", "--key", "D", "--format", "json", "--title", "Demo"]
    )
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["title"] == "Demo"
    assert payload["key"] == "D major"
    accidentals = [
        [note["accidental"] for note in measure["notes"]] for measure in payload["measures"]
    ]
    assert accidentals == [["natural", "sharp"], [None]]


def test_engrave_minor_key() -> None:
    result = CliRunner().invoke(main, ["engrave", "G4", "--key", "E", "--mode", "minor", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["key"] == "G major"


def test_engrave_writes_output_file(tmp_path: Path) -> None:
    output = tmp_path / "staff.json"
    result = CliRunner().invoke(main, ["engrave", "C4", "--format", "json", "-o", str(output)])
    assert result.exit_code == 0
    assert "Done!" in result.output
    assert json.loads(output.read_text(encoding="utf-8"))["clef"] == "treble"


def test_engrave_with_style_file(tmp_path: Path) -> None:
    style = tmp_path / "style.yaml"
    style.write_text("spatium: 5\n", encoding="utf-8")
    result = CliRunner().invoke(main, ["engrave", "E4", "--format", "json", "--style", str(style)])
    assert result.exit_code == 0
    assert json.loads(result.output)["measures"][0]["notes"][0]["y"] == 22.5


def test_engrave_bad_style_exits_with_error(tmp_path: Path) -> None:
    style = tmp_path / "style.yaml"
    style.write_text("colour: red\n", encoding="utf-8")
    result = CliRunner().invoke(main, ["engrave", "E4", "--style", str(style)])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_engrave_bad_note_exits_with_error() -> None:
    result = CliRunner().invoke(main, ["engrave", "H4"])
    assert result.exit_code == 1
    assert "ERROR" in result.output


def test_melody_lists_examples() -> None:
    result = CliRunner().invoke(main, ["melody"])
    assert result.exit_code == 0
    assert "melody_001" in result.output
    assert "3/4" in result.output


def test_melody_engraves_example() -> None:
    result = CliRunner().invoke(main, ["melody", "melody_003", "--format", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["title"] == "D-flat Major Exercise"


def test_melody_unknown_id() -> None:
    result = CliRunner().invoke(main, ["melody", "nope"])
    assert result.exit_code == 1
    assert "Unknown melody" in result.output


def test_keyboard_lists_keys() -> None:
    result = CliRunner().invoke(main, ["keyboard", "--clef", "bass", "--flats"])
    assert result.exit_code == 0
    assert "C2 - B4" in result.output
    assert "Db2" in result.output
