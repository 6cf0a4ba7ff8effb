"""pipemaze.encoders
=====================

Textual encoding helpers for classified mazes. The box-drawing encoder
produces the diagnostic view: loop tiles become line glyphs and every other
tile shows whether the parity scan put it inside or outside the loop. It is
not needed for the answers themselves; it exists so a human can eyeball what
the solver saw.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from .classifier import CellClass
from .constants import BOX_GLYPHS, EXTERIOR_MARKER, INTERIOR_MARKER
from .types import Maze, Tile


class MazeEncoder(Protocol):
    """Interface for components that turn a classified maze into text."""

    def to_text(self, maze: Maze, classes: np.ndarray) -> str:
        """Serialise the unpadded part of ``maze``."""


class BoxDrawingEncoder:
    """Diagnostic view: box glyphs on the loop, markers everywhere else.

    Parameters
    ----------
    interior_marker:
        Character used for ground enclosed by the loop.
    exterior_marker:
        Character used for ground outside the loop.
    """

    def __init__(
        self,
        interior_marker: str = INTERIOR_MARKER,
        exterior_marker: str = EXTERIOR_MARKER,
    ) -> None:
        self.interior_marker = interior_marker
        self.exterior_marker = exterior_marker

    def glyph(self, tile: Tile, kind: int) -> str:
        if kind == CellClass.LOOP:
            return BOX_GLYPHS.get(tile, tile.symbol)
        if kind == CellClass.INTERIOR:
            return self.interior_marker
        return self.exterior_marker

    def to_text(self, maze: Maze, classes: np.ndarray) -> str:
        rows, cols = maze.shape
        return "\n".join(
            "".join(self.glyph(maze.tiles[r][c], int(classes[r, c])) for c in range(1, cols - 1))
            for r in range(1, rows - 1)
        )


def render_maze(
    maze: Maze,
    classes: np.ndarray,
    interior_marker: str = INTERIOR_MARKER,
    exterior_marker: str = EXTERIOR_MARKER,
) -> str:
    """Render ``maze`` with :class:`BoxDrawingEncoder`."""

    encoder: MazeEncoder = BoxDrawingEncoder(interior_marker, exterior_marker)
    return encoder.to_text(maze, classes)


__all__ = [
    "BoxDrawingEncoder",
    "MazeEncoder",
    "render_maze",
]
