"""pipemaze.entry
=================

Entry shape resolution. During the walk the ``S`` tile is a wildcard that
connects in all four directions; the parity scan cannot work with that, so
once the loop is known the entry is frozen to the one real tile whose two
connectors match its loop neighbours.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .constants import ENTRY_PROBE_ORDER
from .errors import AmbiguousEntryShapeError, EntryStateError
from .types import Direction, Maze, Resolved, Tile

logger = logging.getLogger(__name__)


def entry_connections(maze: Maze, membership: np.ndarray) -> Tuple[Direction, ...]:
    """Directions from the entry towards loop neighbours that point back at it.

    Neighbours are probed in :data:`ENTRY_PROBE_ORDER`, the same order the
    tracer uses for its first step.
    """

    found = []
    for direction in ENTRY_PROBE_ORDER:
        neighbour = direction.step(maze.entry)
        if membership[neighbour] and maze.tile_at(neighbour).connects(direction.opposite):
            found.append(direction)
    return tuple(found)


def resolve_entry(maze: Maze, membership: np.ndarray) -> Tile:
    """Replace the wildcard entry with its real shape.

    The inferred tile is written into ``maze.tiles`` and ``maze.entry_state``
    moves from ``Unresolved`` to ``Resolved``.

    Raises
    ------
    EntryStateError
        The entry was already resolved.
    AmbiguousEntryShapeError
        Not exactly two loop neighbours connect to the entry.
    """

    if maze.entry_resolved:
        raise EntryStateError(
            "Entry shape already resolved",
            {"shape": maze.entry_state.shape.name},
        )
    directions = entry_connections(maze, membership)
    if len(directions) != 2:
        raise AmbiguousEntryShapeError(
            f"Cannot infer entry shape from {len(directions)} connecting loop neighbours",
            {
                "row": maze.entry[0] - 1,
                "col": maze.entry[1] - 1,
                "directions": "".join(d.value for d in directions) or "none",
            },
        )
    shape = Tile.shape_for(frozenset(directions))
    row, col = maze.entry
    maze.tiles[row][col] = shape
    maze.entry_state = Resolved(shape)
    logger.debug("Entry resolved to %s (%r)", shape.name, shape.symbol)
    return shape


__all__ = ["entry_connections", "resolve_entry"]
