"""Ledger lines for notes resolved outside the five-line staff."""

from __future__ import annotations

import math

STAFF_TOP = 0.0
STAFF_BOTTOM = 4.0


def needs_ledger_line(staff_line: float) -> bool:
    """True when ``staff_line`` lies above line 0 or below line 4."""
    return staff_line < STAFF_TOP or staff_line > STAFF_BOTTOM


def ledger_lines(staff_line: float) -> list[float]:
    """
    Whole-line positions of the ledger lines a note at ``staff_line`` needs.

    Lines start at the first integer beyond the staff (-1 above, 5 below) and
    step outward by 1.0. Below the staff they stop at the nearest line at or
    above the note, so 4.5 needs none and 5.5 hangs from line 5. Above the
    staff they run to the line at or above the note, so -0.5 gets line -1.

    Examples:
        ``ledger_lines(4.5)``  -> ``[]``
        ``ledger_lines(5.5)``  -> ``[5.0]``
        ``ledger_lines(6.0)``  -> ``[5.0, 6.0]``
        ``ledger_lines(-0.5)`` -> ``[-1.0]``
        ``ledger_lines(-1.5)`` -> ``[-1.0, -2.0]``
    """
    if staff_line > STAFF_BOTTOM:
        last = math.floor(staff_line)
        return [float(line) for line in range(int(STAFF_BOTTOM) + 1, last + 1)]
    if staff_line < STAFF_TOP:
        last = math.floor(staff_line)
        return [float(line) for line in range(int(STAFF_TOP) - 1, last - 1, -1)]
    return []
