"""pipemaze.classifier
======================

Interior/exterior classification with a row-wise even-odd scan.

Each row is read left to right while counting how many times the loop crosses
the scan line. A vertical pipe is one crossing. A horizontal run is entered and
left through two bends, each counted once; when the run leaves on the opposite
side it came in from (``L``...``7`` or ``F``...``J``) the loop really crosses the
line once, so one of the two counts is taken back. When it leaves on the same
side (``L``...``J`` or ``F``...``7``) the two counts cancel out in parity on
their own. Horizontal pipes never count. Any tile off the loop is inside
exactly when the running count is odd.

The "which bend opened the current run" memory is a small explicit state
machine, see :func:`advance_corner`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

import numpy as np

from .errors import EntryStateError
from .grid_utils import unpad
from .types import Maze, Tile

logger = logging.getLogger(__name__)


class CellClass(IntEnum):
    """Per-cell classification stored in the array from :func:`classify_cells`."""

    PADDING = -1
    LOOP = 0
    INTERIOR = 1
    EXTERIOR = 2


# ---------------------------------------------------------------------------
# Corner memory
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NoPendingCorner:
    """No horizontal run is open."""


@dataclass(frozen=True)
class PendingCorner:
    """A horizontal run was opened by ``kind`` (``BEND_NE`` or ``BEND_SE``)."""

    kind: Tile


CornerState = Union[NoPendingCorner, PendingCorner]

NO_CORNER = NoPendingCorner()

# Bend that closes a run on the opposite side from the bend that opened it.
_CROSSING_CLOSERS = {
    Tile.BEND_NE: Tile.BEND_SW,
    Tile.BEND_SE: Tile.BEND_NW,
}


def advance_corner(state: CornerState, tile: Tile) -> Tuple[CornerState, int]:
    """Feed one loop ``tile`` into the corner memory.

    Returns the next state and the correction to add to the crossing count
    (``-1`` when ``tile`` closes a run opened by its crossing partner, ``0``
    otherwise).
    """

    if tile in _CROSSING_CLOSERS:
        return PendingCorner(tile), 0
    if tile is Tile.HORIZONTAL:
        return state, 0
    if isinstance(state, PendingCorner) and _CROSSING_CLOSERS[state.kind] is tile:
        return NO_CORNER, -1
    return NO_CORNER, 0


# ---------------------------------------------------------------------------
# Scan
# ---------------------------------------------------------------------------
def _require_resolved(maze: Maze) -> None:
    if not maze.entry_resolved:
        raise EntryStateError(
            "Entry shape must be resolved before classification",
            {"row": maze.entry[0] - 1, "col": maze.entry[1] - 1},
        )


def classify_cells(maze: Maze, membership: np.ndarray) -> np.ndarray:
    """Classify every cell of the padded grid.

    Parameters
    ----------
    maze:
        Maze whose entry has been resolved.
    membership:
        Loop membership from :func:`pipemaze.tracer.trace_loop`.

    Returns
    -------
    numpy.ndarray
        ``int8`` array shaped like the padded grid holding :class:`CellClass`
        values; the padding ring is ``CellClass.PADDING``.

    Raises
    ------
    EntryStateError
        The entry still acts as a wildcard.
    """

    _require_resolved(maze)
    rows, cols = maze.shape
    classes = np.full((rows, cols), CellClass.PADDING, dtype=np.int8)
    for r in range(1, rows - 1):
        crossings = 0
        corner: CornerState = NO_CORNER
        for c in range(1, cols - 1):
            if membership[r, c]:
                tile = maze.tiles[r][c]
                if tile is not Tile.HORIZONTAL:
                    crossings += 1
                corner, correction = advance_corner(corner, tile)
                crossings += correction
                classes[r, c] = CellClass.LOOP
            elif crossings % 2:
                classes[r, c] = CellClass.INTERIOR
            else:
                classes[r, c] = CellClass.EXTERIOR
    return classes


def class_counts(classes: np.ndarray) -> dict:
    """Count loop, interior and exterior cells in a classification array."""

    inner = unpad(classes)
    counts = {
        kind.name.lower(): int(np.count_nonzero(inner == kind))
        for kind in (CellClass.LOOP, CellClass.INTERIOR, CellClass.EXTERIOR)
    }
    logger.info("%d tiles are enclosed by the loop", counts["interior"])
    return counts


def count_interior(maze: Maze, membership: np.ndarray) -> int:
    """Number of non-loop tiles enclosed by the loop."""

    return class_counts(classify_cells(maze, membership))["interior"]


__all__ = [
    "CellClass",
    "CornerState",
    "NO_CORNER",
    "NoPendingCorner",
    "PendingCorner",
    "advance_corner",
    "class_counts",
    "classify_cells",
    "count_interior",
]
