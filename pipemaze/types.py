"""pipemaze.types
==================

Foundational data structures shared by every stage of the pipe-maze solver:
the compass directions, the closed set of tile variants, the explicit entry
state and the padded maze container itself. Keeping them in one module means
the loader, tracer, resolver and classifier all agree on a single canonical
representation of a tile and of "which way does this pipe go".

Apart from a handful of small lookup helpers attached to the enums, the module
is definitions-only so importing it never triggers runtime side effects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Tuple, Union

# ---------------------------------------------------------------------------
# Coordinates
# ---------------------------------------------------------------------------
Coord = Tuple[int, int]
"""``(row, column)`` position inside the padded grid."""


class Direction(Enum):
    """Cardinal travel directions plus the ``NONE`` start-of-walk sentinel."""

    NORTH = "N"
    SOUTH = "S"
    EAST = "E"
    WEST = "W"
    NONE = "-"

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def offset(self) -> Coord:
        """Row/column delta for one step in this direction."""

        return _OFFSETS[self]

    def step(self, position: Coord) -> Coord:
        d_row, d_col = self.offset
        return position[0] + d_row, position[1] + d_col


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
    Direction.NONE: Direction.NONE,
}

_OFFSETS = {
    Direction.NORTH: (-1, 0),
    Direction.SOUTH: (1, 0),
    Direction.EAST: (0, 1),
    Direction.WEST: (0, -1),
    Direction.NONE: (0, 0),
}

CARDINALS: Tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
)


class Tile(Enum):
    """Closed set of tile variants.

    Each member carries its input symbol and the fixed set of directions it
    connects. Asking whether a tile connects a direction is therefore a plain
    membership test against static data instead of a combination of flags.
    ``ENTRY`` is the wildcard start tile; it connects everything until the
    resolver replaces it with its real shape.
    """

    ENTRY = ("S", frozenset(CARDINALS))
    VERTICAL = ("|", frozenset({Direction.NORTH, Direction.SOUTH}))
    HORIZONTAL = ("-", frozenset({Direction.EAST, Direction.WEST}))
    BEND_NE = ("L", frozenset({Direction.NORTH, Direction.EAST}))
    BEND_NW = ("J", frozenset({Direction.NORTH, Direction.WEST}))
    BEND_SW = ("7", frozenset({Direction.SOUTH, Direction.WEST}))
    BEND_SE = ("F", frozenset({Direction.SOUTH, Direction.EAST}))
    GROUND = (".", frozenset())

    def __init__(self, symbol: str, connectors: FrozenSet[Direction]) -> None:
        self.symbol = symbol
        self.connectors = connectors

    def connects(self, direction: Direction) -> bool:
        return direction in self.connectors

    def exit_for(self, entered_from: Direction) -> Direction:
        """Return the connector opposite ``entered_from``.

        ``entered_from`` is the side of the tile the walker came in through.
        Returns ``Direction.NONE`` when the tile does not accept that side or
        has no single other side to leave by (``GROUND`` and ``ENTRY``).
        """

        if self is Tile.ENTRY or entered_from not in self.connectors:
            return Direction.NONE
        others = [d for d in self.connectors if d is not entered_from]
        return others[0] if len(others) == 1 else Direction.NONE

    @classmethod
    def from_symbol(cls, symbol: str) -> "Tile":
        """Look up the tile for ``symbol``; raises ``KeyError`` if unknown."""

        return _BY_SYMBOL[symbol]

    @classmethod
    def shape_for(cls, directions: FrozenSet[Direction]) -> "Tile":
        """Return the unique non-entry tile connecting exactly ``directions``."""

        return _BY_CONNECTORS[frozenset(directions)]


_BY_SYMBOL = {tile.symbol: tile for tile in Tile}
_BY_CONNECTORS = {
    tile.connectors: tile
    for tile in Tile
    if tile is not Tile.ENTRY and tile is not Tile.GROUND
}

TileGrid = List[List[Tile]]


# ---------------------------------------------------------------------------
# Entry state
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Unresolved:
    """Entry still acts as a four-way wildcard."""


@dataclass(frozen=True)
class Resolved:
    """Entry has been frozen to its real two-connector shape."""

    shape: Tile


EntryState = Union[Unresolved, Resolved]


@dataclass
class Maze:
    """Padded tile grid together with the entry tile's location and state.

    Parameters
    ----------
    tiles:
        Row-major grid of tiles. The outermost ring is always ``GROUND`` so
        every cell visited by the walker has four addressable neighbours.
    entry:
        Padded ``(row, column)`` of the ``S`` tile.
    entry_state:
        ``Unresolved()`` after loading; ``Resolved(shape)`` once the resolver
        has inferred the real shape and written it into ``tiles``.
    """

    tiles: TileGrid
    entry: Coord
    entry_state: EntryState = field(default_factory=Unresolved)

    @property
    def shape(self) -> Tuple[int, int]:
        """``(rows, columns)`` including the padding ring."""

        return len(self.tiles), len(self.tiles[0]) if self.tiles else 0

    @property
    def inner_shape(self) -> Tuple[int, int]:
        """``(rows, columns)`` of the original, unpadded input."""

        rows, cols = self.shape
        return max(0, rows - 2), max(0, cols - 2)

    def tile_at(self, position: Coord) -> Tile:
        return self.tiles[position[0]][position[1]]

    @property
    def entry_resolved(self) -> bool:
        return isinstance(self.entry_state, Resolved)


__all__ = [
    "CARDINALS",
    "Coord",
    "Direction",
    "EntryState",
    "Maze",
    "Resolved",
    "Tile",
    "TileGrid",
    "Unresolved",
]
