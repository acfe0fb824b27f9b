"""StaffPositionResolver: maps a MIDI pitch on a clef to a staff-line coordinate."""

from __future__ import annotations

import logging
import math
from functools import lru_cache

import numpy as np

from staffline.clefs import Clef, ClefTable, clef_table
from staffline.theory import (
    MIDI_MAX,
    MIDI_MIN,
    REST,
    AccidentalKind,
    KeySignature,
    diatonic_step,
    natural_of,
    validate_pitch,
)

logger = logging.getLogger(__name__)

#: Staff positions per semitone when only one anchor neighbour is known.
EXTRAPOLATION_STEP = 0.5


class StaffPositionResolver:
    """
    Resolve staff lines for one clef.

    Algorithm overview
    ------------------
    1. **Rest** - pitch -1 sits on the clef's middle line; the pitch tables
       are never consulted.

    2. **Enharmonic override** - a ``(pitch, accidental)`` pair whose
       accidental alters an anchor letter returns that letter's line: Cb4 (59,
       ``flat``) sits on C4's line and E#4 (65, ``sharp``) on E4's.

    3. **Anchor** - unaltered pitches listed in the clef's reference table
       return the tabulated line unchanged.

    4. **Interpolation** - between two anchors the line follows the local
       positions-per-semitone; outside the table it extrapolates at a fixed
       0.5 positions per semitone.

    5. **Drift correction** - staff position is diatonic, so the raw estimate
       is moved onto the grid of the spelled letter. Inside the table this
       snaps a black key to its letter's line or space; beyond it, it removes
       the half-position drift gained for every octave section without a
       black key (E-F, B-C).

    Construction fails with :class:`~staffline.errors.UnresolvedClef` for a
    clef without a reference table.
    """

    def __init__(self, clef: Clef) -> None:
        self.clef = clef
        self.table: ClefTable = clef_table(clef)
        self._pitches = np.fromiter(self.table.anchors.keys(), dtype=int)
        self._lines = np.fromiter(self.table.anchors.values(), dtype=float)
        self._overrides = self._build_overrides()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_overrides(self) -> dict[tuple[int, AccidentalKind], float]:
        overrides: dict[tuple[int, AccidentalKind], float] = {}
        altered = [kind for kind in AccidentalKind if kind.offset]
        for natural, line in self.table.anchors.items():
            for kind in altered:
                pitch = natural + kind.offset
                if MIDI_MIN <= pitch <= MIDI_MAX:
                    overrides[(pitch, kind)] = line
        return overrides

    def _interpolate(self, pitch: int, accidental: AccidentalKind, idx: int) -> float:
        lower_pitch, upper_pitch = int(self._pitches[idx - 1]), int(self._pitches[idx])
        lower_line, upper_line = float(self._lines[idx - 1]), float(self._lines[idx])

        per_semitone = abs(lower_line - upper_line) / (upper_pitch - lower_pitch)
        raw = lower_line - (pitch - lower_pitch) * per_semitone

        # Sharps share the lower letter's line, flats the upper one's.
        if accidental.prefers_flats:
            line = math.floor(raw * 2) / 2
        else:
            line = math.ceil(raw * 2) / 2
        logger.debug(
            "%s: MIDI %d between %d (%.1f) and %d (%.1f): raw %.2f -> %.1f",
            self.clef.value, pitch, lower_pitch, lower_line, upper_pitch, upper_line, raw, line,
        )
        return line

    def _extrapolate(self, pitch: int, accidental: AccidentalKind, edge_idx: int) -> float:
        edge_pitch = int(self._pitches[edge_idx])
        edge_line = float(self._lines[edge_idx])

        semitones = pitch - edge_pitch
        raw = edge_line - semitones * EXTRAPOLATION_STEP

        steps = diatonic_step(pitch, accidental) - diatonic_step(edge_pitch)
        drift = (semitones - steps) * EXTRAPOLATION_STEP
        line = raw + drift
        logger.debug(
            "%s: MIDI %d beyond anchor %d (%.1f): raw %.1f, drift correction %+.1f",
            self.clef.value, pitch, edge_pitch, edge_line, raw, drift,
        )
        return line

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def rest_line(self) -> float:
        return self.table.rest_line

    def resolve(self, pitch: int, accidental: AccidentalKind | None = None) -> float:
        """
        Return the staff line for ``pitch`` spelled with ``accidental``.

        Raises:
            InvalidPitch: If ``pitch`` is outside [-1, 127].
        """
        validate_pitch(pitch)
        if pitch == REST:
            return self.rest_line

        kind = accidental if accidental is not None else AccidentalKind.NONE
        override = self._overrides.get((pitch, kind))
        if override is not None:
            logger.debug("%s: enharmonic override %s for MIDI %d", self.clef.value, kind.value, pitch)
            return override

        if not kind.offset:
            exact = self.table.anchors.get(pitch)
            if exact is not None:
                return exact

        # A letter spelled beyond the table extrapolates from the nearer edge.
        natural = natural_of(pitch, kind)
        first, last = int(self._pitches[0]), int(self._pitches[-1])
        idx = int(np.searchsorted(self._pitches, pitch))
        if 0 < idx < len(self._pitches) and first <= natural <= last:
            return self._interpolate(pitch, kind, idx)
        if natural < first or (idx == 0 and natural <= last):
            return self._extrapolate(pitch, kind, 0)
        return self._extrapolate(pitch, kind, len(self._pitches) - 1)

    def key_signature_lines(self, key: KeySignature) -> list[float]:
        """Staff lines of the key-signature glyphs, in the order they are written."""
        pitches = self.table.sharp_signature if key.is_sharp else self.table.flat_signature
        return [self.resolve(pitch) for pitch in pitches[: key.accidental_count]]


@lru_cache(maxsize=None)
def resolver_for(clef: Clef) -> StaffPositionResolver:
    """Shared, read-only resolver for ``clef``."""
    return StaffPositionResolver(clef)


def resolve_staff_line(clef: Clef, pitch: int, accidental: AccidentalKind | None = None) -> float:
    """Staff line of ``pitch`` on ``clef``; see :class:`StaffPositionResolver`."""
    return resolver_for(clef).resolve(pitch, accidental)


def key_signature_lines(key: KeySignature, clef: Clef) -> list[float]:
    """Staff lines where the glyphs of ``key`` are drawn on ``clef``."""
    return resolver_for(clef).key_signature_lines(key)
