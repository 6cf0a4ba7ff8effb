"""pipemaze.constants
=====================

Fixed values the solver stages agree on: the order in which the entry's
neighbours are probed, the ground symbol used for padding, the box-drawing
glyphs and markers of the diagnostic view, the built-in sample maze and the
default failure-log path.
"""

from __future__ import annotations

from .types import Direction, Tile

FAIL_LOG = "malformed_mazes.jsonl"

# Entry neighbours are probed in this order both when choosing the first step
# of the walk and when inferring the entry's real shape.
ENTRY_PROBE_ORDER = (Direction.WEST, Direction.NORTH, Direction.EAST, Direction.SOUTH)

PAD_SYMBOL = Tile.GROUND.symbol

BOX_GLYPHS = {
    Tile.VERTICAL: "│",
    Tile.HORIZONTAL: "─",
    Tile.BEND_NE: "└",
    Tile.BEND_NW: "┘",
    Tile.BEND_SW: "┐",
    Tile.BEND_SE: "┌",
}

INTERIOR_MARKER = "I"
EXTERIOR_MARKER = "O"

SAMPLE_MAZE = "\n".join(
    [
        "..F7.",
        ".FJ|.",
        "SJ.L7",
        "|F--J",
        "LJ...",
    ]
)

__all__ = [
    "BOX_GLYPHS",
    "ENTRY_PROBE_ORDER",
    "EXTERIOR_MARKER",
    "FAIL_LOG",
    "INTERIOR_MARKER",
    "PAD_SYMBOL",
    "SAMPLE_MAZE",
]
