"""pipemaze.tracer
==================

Loop discovery. The walker leaves the entry tile through its first connecting
neighbour and keeps following pipes until it is back on the entry. Along the
way it marks every tile it enters as part of the loop and records the step at
which it got there.

The walk never needs bounds checks because the loader pads the grid with a
ring of ground tiles: a pipe pointing off the edge leads onto ground, which
does not connect back and is reported as a malformed loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .constants import ENTRY_PROBE_ORDER
from .errors import AmbiguousEntryShapeError, MalformedLoopError
from .types import Coord, Direction, Maze

logger = logging.getLogger(__name__)


@dataclass
class LoopTrace:
    """Result of walking the loop once.

    Attributes
    ----------
    steps:
        Number of moves needed to return to the entry, i.e. the perimeter.
    membership:
        Boolean array shaped like the padded grid; ``True`` exactly on loop
        cells, entry included.
    distances:
        Step index at which each loop cell was entered (entry is ``0``);
        ``-1`` for cells off the loop.
    first_direction:
        Direction of the first move out of the entry.
    last_direction:
        Direction of the final move back onto the entry.
    """

    steps: int
    membership: np.ndarray
    distances: np.ndarray
    first_direction: Direction
    last_direction: Direction

    @property
    def farthest_distance(self) -> int:
        return self.steps // 2

    @property
    def entry_directions(self) -> Tuple[Direction, Direction]:
        """The two sides of the entry the walk actually used."""

        return self.first_direction, self.last_direction.opposite

    @property
    def loop_length(self) -> int:
        return int(self.membership.sum())


def connecting_neighbours(maze: Maze, position: Coord) -> Tuple[Direction, ...]:
    """Directions from ``position`` whose neighbour has a pipe pointing back.

    Neighbours are tested in :data:`ENTRY_PROBE_ORDER`, so the first element is
    always the direction the walk starts in.
    """

    return tuple(
        direction
        for direction in ENTRY_PROBE_ORDER
        if maze.tile_at(direction.step(position)).connects(direction.opposite)
    )


def first_step(maze: Maze) -> Direction:
    """Pick the direction of the first move out of the entry.

    Raises
    ------
    AmbiguousEntryShapeError
        The entry does not have exactly two neighbours pointing at it.
    """

    candidates = connecting_neighbours(maze, maze.entry)
    if len(candidates) != 2:
        raise AmbiguousEntryShapeError(
            f"Entry must have exactly two connecting neighbours, found {len(candidates)}",
            {
                "row": maze.entry[0] - 1,
                "col": maze.entry[1] - 1,
                "directions": "".join(d.value for d in candidates) or "none",
            },
        )
    return candidates[0]


def next_direction(maze: Maze, position: Coord, heading: Direction, steps: int) -> Direction:
    """Direction to leave ``position`` by after arriving while moving ``heading``.

    Raises
    ------
    MalformedLoopError
        The tile at ``position`` does not accept a pipe coming in from
        ``heading`` or has no single way out.
    """

    tile = maze.tile_at(position)
    out = tile.exit_for(heading.opposite)
    if out is Direction.NONE:
        raise MalformedLoopError(
            f"No connection available on {tile.symbol!r} when moving {heading.name.lower()}",
            {"row": position[0] - 1, "col": position[1] - 1, "steps": steps},
        )
    return out


def trace_loop(maze: Maze) -> LoopTrace:
    """Walk the loop from the entry back to itself.

    Returns
    -------
    LoopTrace
        Step count, loop membership, per-cell step indices and the two entry
        directions used by the walk.

    Raises
    ------
    AmbiguousEntryShapeError
        The entry's neighbourhood does not describe exactly one pipe in and
        one pipe out.
    MalformedLoopError
        The walk hits a tile that does not continue the pipe, or revisits a
        tile other than the entry.
    """

    membership = np.zeros(maze.shape, dtype=bool)
    distances = np.full(maze.shape, -1, dtype=np.int64)
    membership[maze.entry] = True
    distances[maze.entry] = 0

    position = maze.entry
    heading = Direction.NONE
    first = Direction.NONE
    steps = 0
    while True:
        logger.debug("Currently at row %d, column %d", position[0] - 1, position[1] - 1)
        if heading is Direction.NONE:
            heading = first = first_step(maze)
        else:
            heading = next_direction(maze, position, heading, steps)
        position = heading.step(position)
        steps += 1

        if position == maze.entry:
            break
        if membership[position]:
            raise MalformedLoopError(
                "Walk revisited a tile before returning to the entry",
                {"row": position[0] - 1, "col": position[1] - 1, "steps": steps},
            )
        membership[position] = True
        distances[position] = steps

    logger.info(
        "Loop closed after %d steps; farthest point is %d steps away",
        steps,
        steps // 2,
    )
    return LoopTrace(
        steps=steps,
        membership=membership,
        distances=distances,
        first_direction=first,
        last_direction=heading,
    )


__all__ = [
    "LoopTrace",
    "connecting_neighbours",
    "first_step",
    "next_direction",
    "trace_loop",
]
