"""Engraver: turns measures of notes into a positioned StaffDocument."""

from __future__ import annotations

import logging

from staffline.clefs import Clef
from staffline.config import EngravingStyle
from staffline.ledger import ledger_lines
from staffline.melody import MelodyProfile
from staffline.models import EngravedMeasure, EngravedNote, Note, StaffDocument
from staffline.resolver import StaffPositionResolver, resolver_for
from staffline.theory import AccidentalKind, KeySignature
from staffline.tracker import KeyTracker

logger = logging.getLogger(__name__)


def staff_line_to_y(staff_line: float, spatium: float, staff_top: float = 0.0) -> float:
    """
    Vertical drawing coordinate of a staff line.

    Line 0 sits at ``staff_top`` and every whole staff position adds one
    spatium going down the page.
    """
    return staff_top + staff_line * spatium


class Engraver:
    """
    Engrave notes on a single staff.

    Each call to :meth:`engrave_measures` owns the engraver's tracker for the
    whole pass: the tracker is reset at the start of every measure, and tie
    marks are dropped when the measure ends. Engravers are cheap; use one per
    staff.
    """

    def __init__(
        self,
        clef: Clef,
        key: KeySignature | None = None,
        style: EngravingStyle | None = None,
        title: str = "",
    ) -> None:
        self.clef = clef
        self.key = key if key is not None else KeySignature()
        self.style = style if style is not None else EngravingStyle()
        self.title = title
        self.resolver: StaffPositionResolver = resolver_for(clef)
        self.tracker = KeyTracker(self.key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _keysig_width(self) -> float:
        count = self.key.accidental_count
        if count == 0:
            return 0.0
        return count * self.style.keysig_accidental_distance + self.style.keysig_margin

    def _first_note_x(self) -> float:
        """Horizontal position of the first note, in spatium units."""
        style = self.style
        return style.staff_margin + style.clef_width + style.clef_margin + self._keysig_width()

    def _engrave_note(self, note: Note, x: float) -> EngravedNote:
        staff_line = self.resolver.resolve(note.pitch, note.accidental)
        drawn = self.tracker.process(note)
        spatium = self.style.spatium
        return EngravedNote(
            pitch=note.pitch,
            name=note.name,
            staff_line=staff_line,
            ledger_lines=[] if note.is_rest else ledger_lines(staff_line),
            accidental=None if drawn == AccidentalKind.NONE else drawn.value,
            glyph=drawn.glyph,
            x=x * spatium,
            y=staff_line_to_y(staff_line, spatium),
            tied=note.tied,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def key_signature_lines(self) -> list[float]:
        return self.resolver.key_signature_lines(self.key)

    def engrave_measures(self, measures: list[list[Note]]) -> StaffDocument:
        """
        Engrave ``measures`` left to right.

        Raises:
            InvalidPitch: If a note's pitch is outside [-1, 127].
        """
        x = self._first_note_x()
        engraved: list[EngravedMeasure] = []
        for number, notes in enumerate(measures, start=1):
            self.tracker.reset()
            measure_notes: list[EngravedNote] = []
            for note in notes:
                measure_notes.append(self._engrave_note(note, x))
                x += self.style.note_spacing
            self.tracker.clear_tied_notes()
            engraved.append(EngravedMeasure(number=number, notes=measure_notes))

        logger.info(
            "Engraved %d measure(s) on %s clef in %s",
            len(engraved), self.clef.value, self.key.name,
        )
        return StaffDocument(
            title=self.title,
            clef=self.clef.value,
            key=self.key.name,
            key_signature_lines=self.key_signature_lines(),
            measures=engraved,
        )

    def engrave(self, notes: list[Note]) -> StaffDocument:
        """Engrave ``notes`` as a single measure."""
        return self.engrave_measures([notes])


def engrave_melody(profile: MelodyProfile, style: EngravingStyle | None = None) -> StaffDocument:
    """Engrave an example or user melody using its own clef, key and meter."""
    engraver = Engraver(profile.clef, profile.key_signature(), style=style, title=profile.name)
    return engraver.engrave_measures(profile.measures())
