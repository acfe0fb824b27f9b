"""Renderer implementations for engraved staff output formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict

from staffline.models import EngravedNote, StaffDocument


def _format_lines(lines: list[float]) -> str:
    return ", ".join(f"{line:g}" for line in lines) if lines else "-"


class StaffRenderer(ABC):
    """Abstract staff renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, document: StaffDocument) -> str:
        """Render a staff document into a file content string."""


class TextTableRenderer(StaffRenderer):
    """Render a staff document as a plain-text table, one row per note."""

    _HEADER = f"{'#':>3}  {'Note':<6} {'Line':>5}  {'Acc':<3}  {'Ledger':<14} {'x':>7} {'y':>7}"

    @property
    def default_extension(self) -> str:
        return ".txt"

    def _row(self, index: int, note: EngravedNote) -> str:
        name = note.name + ("~" if note.tied else "")
        return (
            f"{index:>3}  {name:<6} {note.staff_line:>5g}  {note.glyph or '-':<3}  "
            f"{_format_lines(note.ledger_lines):<14} {note.x:>7.1f} {note.y:>7.1f}"
        )

    def render(self, document: StaffDocument) -> str:
        lines: list[str] = []
        if document.title:
            lines.append(document.title)
            lines.append("=" * len(document.title))
        lines.append(f"Clef: {document.clef}    Key: {document.key}")
        lines.append(f"Key signature lines: {_format_lines(document.key_signature_lines)}")

        index = 1
        for measure in document.measures:
            lines.append("")
            lines.append(f"Measure {measure.number}")
            lines.append(self._HEADER)
            for note in measure.notes:
                lines.append(self._row(index, note))
                index += 1
        return "\n".join(lines) + "\n"


class JsonRenderer(StaffRenderer):
    """Render a staff document as JSON for downstream painters."""

    def __init__(self, indent: int | None = 2) -> None:
        self.indent = indent

    @property
    def default_extension(self) -> str:
        return ".json"

    def render(self, document: StaffDocument) -> str:
        return json.dumps(asdict(document), indent=self.indent, ensure_ascii=False) + "\n"


RENDERERS: dict[str, type[StaffRenderer]] = {
    "text": TextTableRenderer,
    "json": JsonRenderer,
}


def build_renderer(output_format: str) -> StaffRenderer:
    """
    Return a renderer for ``output_format``.

    Raises:
        ValueError: If the format is not supported.
    """
    normalized = output_format.strip().lower()
    if normalized not in RENDERERS:
        supported = ", ".join(sorted(RENDERERS))
        raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
    return RENDERERS[normalized]()
