"""Engraving style: spacing constants in spatium units, optionally overridden from YAML."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class EngravingStyle:
    """
    Layout constants for turning staff lines into drawing coordinates.

    All distances except ``spatium`` are in spatium units (the distance
    between two staff lines). ``spatium`` itself is in output units (pixels).
    """

    spatium: float = 10.0
    staff_margin: float = 2.0
    clef_width: float = 3.0
    clef_margin: float = 1.0
    keysig_accidental_distance: float = 0.8
    keysig_margin: float = 0.5
    note_spacing: float = 4.0
    accidental_offset: float = 1.2
    ledger_line_width: float = 1.728
    staff_line_thickness: float = 0.08
    ledger_line_thickness: float = 0.1

    def __post_init__(self) -> None:
        if self.spatium <= 0:
            raise ValueError(f"spatium must be positive, got {self.spatium}.")

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Style file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Style file {path} must contain a mapping, got {type(data).__name__}.")
    # Accept either a flat mapping or one nested under "engraving".
    section = data.get("engraving", data)
    if not isinstance(section, dict):
        raise ValueError(f"'engraving' in {path} must be a mapping.")
    return section


def load_style(path: str | Path | None = None, base: EngravingStyle | None = None) -> EngravingStyle:
    """
    Load an :class:`EngravingStyle`, applying overrides from a YAML file.

    Args:
        path: YAML file with style keys. ``None`` returns ``base`` unchanged.
        base: Style the overrides are applied to. Defaults to the built-in style.

    Raises:
        ValueError: For unknown keys or non-numeric values.
        OSError:    If the file cannot be read.
    """
    style = base if base is not None else EngravingStyle()
    if path is None:
        return style

    overrides = _read_yaml(Path(path))
    known = {f.name for f in fields(EngravingStyle)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown style keys: {', '.join(unknown)}. Use any of: {', '.join(sorted(known))}.")

    values: dict[str, float] = {}
    for name, value in overrides.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Style key '{name}' must be a number, got {value!r}.")
        values[name] = float(value)
    return replace(style, **values)
