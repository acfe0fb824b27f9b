"""KeyTracker: decides which accidentals a measure needs drawn."""

from __future__ import annotations

import logging

from staffline.models import Note
from staffline.theory import AccidentalKind, KeySignature, natural_pitch_class

logger = logging.getLogger(__name__)


class KeyTracker:
    """
    Per-measure accidental memory for one staff.

    The tracker holds, for every pitch class, the accidental currently in
    effect. Entries live at the pitch class of each letter's natural (C=0,
    D=2, ... B=11), so C and C# share an entry and an earlier C# is
    remembered when a later C arrives. Black-key pitch classes always read
    ``NONE``.

    Lifecycle
    ---------
    ``reset`` at the start of every measure (and on a key change), then for
    each note in left-to-right order call ``needs_accidental`` /
    ``accidental_to_draw`` followed by exactly one ``update``. ``process``
    does both. Call ``clear_tied_notes`` at the end of the measure.

    A tracker belongs to exactly one rendering pass; independent staves need
    independent trackers.
    """

    def __init__(self, key: KeySignature | None = None) -> None:
        self.key: KeySignature = key if key is not None else KeySignature()
        self._state: dict[int, AccidentalKind] = {}
        self._tied: set[int] = set()
        self.reset(self.key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _home(self, letter: str) -> AccidentalKind:
        """Accidental a letter carries when nothing in the measure altered it."""
        return self.key.polarity if self.key.affects(letter) else AccidentalKind.NONE

    def _is_continuation(self, note: Note) -> bool:
        return note.pitch in self._tied

    def _decide(self, note: Note) -> AccidentalKind | None:
        """Accidental to draw for ``note``, or None when nothing is drawn."""
        if note.is_rest or self._is_continuation(note):
            return None

        letter = note.letter
        current = self._state[natural_pitch_class(letter)]
        explicit = note.accidental

        if self.key.affects(letter):
            polarity = self.key.polarity
            if explicit == polarity:
                # Restate the signature only after the letter was altered.
                return explicit if current != polarity else None
            return AccidentalKind.NATURAL if explicit == AccidentalKind.NONE else explicit

        if explicit != AccidentalKind.NONE:
            return explicit
        if current != AccidentalKind.NONE:
            return AccidentalKind.NATURAL
        return None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> dict[int, AccidentalKind]:
        """Copy of the pitch class -> accidental map."""
        return dict(self._state)

    @property
    def tied_pitches(self) -> frozenset[int]:
        return frozenset(self._tied)

    def reset(self, key: KeySignature | None = None) -> None:
        """Start a new measure, optionally under a new key signature."""
        if key is not None:
            self.key = key
        self._state = {pitch_class: AccidentalKind.NONE for pitch_class in range(12)}
        for letter in self.key.affected_letters:
            self._state[natural_pitch_class(letter)] = self.key.polarity
        self._tied.clear()
        logger.debug("tracker reset to %s", self.key.name)

    def needs_accidental(self, note: Note) -> bool:
        """True when an accidental glyph must be drawn for ``note``. Read-only."""
        return self._decide(note) is not None

    def accidental_to_draw(self, note: Note) -> AccidentalKind:
        """
        Accidental glyph for ``note``.

        ``NATURAL`` when an accidental is needed but the note carries none;
        otherwise the note's own accidental.
        """
        decision = self._decide(note)
        return decision if decision is not None else note.accidental

    def update(self, note: Note) -> None:
        """Record ``note`` as the latest word on its letter for this measure."""
        if note.is_rest:
            return

        continuation = self._is_continuation(note)
        # A tie only reaches the next note; anything played in between ends it.
        self._tied = {note.pitch} if note.tied else set()
        if continuation:
            return

        letter = note.letter
        explicit = note.accidental
        effective = explicit
        if explicit in (AccidentalKind.NONE, AccidentalKind.NATURAL):
            effective = AccidentalKind.NATURAL
            if self._home(letter) == AccidentalKind.NONE:
                effective = AccidentalKind.NONE
        self._state[natural_pitch_class(letter)] = effective

    def process(self, note: Note) -> AccidentalKind:
        """Decide and update in one step; returns the glyph or ``NONE``."""
        decision = self._decide(note)
        self.update(note)
        drawn = decision if decision is not None else AccidentalKind.NONE
        logger.debug("tracker: %s (%s) -> %s", note.name, note.accidental.value, drawn.value)
        return drawn

    def mark_tied(self, note: Note) -> None:
        """Mark ``note``'s pitch as tied into the note that follows it."""
        if not note.is_rest:
            self._tied.add(note.pitch)

    def clear_tied_notes(self) -> None:
        """Drop all tie marks; called at the end of a measure."""
        self._tied.clear()
