"""pipemaze.grid_utils
======================

Loading helpers that turn raw puzzle text into a padded :class:`Maze`.

The loader validates every character up front, so no traversal ever starts
on a grid containing unknown symbols, then surrounds the grid with a one-cell
ring of ground tiles. With that ring in place the tracer and the resolver can
look at any neighbour of a real cell without bounds checks.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

import numpy as np

from .constants import PAD_SYMBOL
from .errors import (
    EmptyGridError,
    InvalidTileSymbolError,
    MultipleEntriesError,
    NoEntryFoundError,
    RaggedGridError,
)
from .types import Coord, Maze, Tile, TileGrid

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Text -> symbol array
# ---------------------------------------------------------------------------
def split_rows(text: str) -> List[str]:
    """Split ``text`` into grid rows.

    Trailing whitespace (including ``\\r`` from Windows line endings) is
    removed and blank lines are dropped, so a trailing newline at the end of
    an input file does not produce an empty row.
    """

    return [line.rstrip() for line in text.splitlines() if line.strip()]


def dims(rows: List[str]) -> Tuple[int, int]:
    """Return ``(height, width)`` of ``rows``; empty input gives ``(0, 0)``."""

    if not rows:
        return 0, 0
    return len(rows), len(rows[0])


def to_symbol_array(rows: List[str]) -> np.ndarray:
    """Validate ``rows`` and return them as a ``(height, width)`` array of symbols.

    Raises
    ------
    EmptyGridError
        ``rows`` is empty.
    RaggedGridError
        Rows differ in length.
    InvalidTileSymbolError
        A character is not one of ``| - L J 7 F S .``. The context reports the
        unpadded row and column of the first offending character.
    """

    height, width = dims(rows)
    if height == 0 or width == 0:
        raise EmptyGridError("Input contains no grid rows")
    for r, row in enumerate(rows):
        if len(row) != width:
            raise RaggedGridError(
                "Grid rows must all have the same length",
                {"row": r, "expected": width, "found": len(row)},
            )
        for c, symbol in enumerate(row):
            try:
                Tile.from_symbol(symbol)
            except KeyError:
                raise InvalidTileSymbolError(
                    f"Unrecognised tile symbol {symbol!r}",
                    {"row": r, "col": c},
                ) from None
    return np.array([list(row) for row in rows], dtype="<U1")


def pad_symbols(symbols: np.ndarray) -> np.ndarray:
    """Surround ``symbols`` with a one-cell ring of ground."""

    return np.pad(symbols, 1, mode="constant", constant_values=PAD_SYMBOL)


# ---------------------------------------------------------------------------
# Symbol array -> maze
# ---------------------------------------------------------------------------
def to_tiles(symbols: np.ndarray) -> TileGrid:
    return [[Tile.from_symbol(str(symbol)) for symbol in row] for row in symbols]


def find_entry(tiles: TileGrid) -> Coord:
    """Return the coordinate of the single entry tile.

    Raises
    ------
    NoEntryFoundError
        The grid has no ``S``.
    MultipleEntriesError
        The grid has more than one ``S``.
    """

    found = [
        (r, c)
        for r, row in enumerate(tiles)
        for c, tile in enumerate(row)
        if tile is Tile.ENTRY
    ]
    if not found:
        raise NoEntryFoundError("Grid has no entry tile 'S'")
    if len(found) > 1:
        raise MultipleEntriesError(
            "Grid has more than one entry tile 'S'",
            {"count": len(found), "first": found[0], "second": found[1]},
        )
    return found[0]


def load_maze(text: str) -> Maze:
    """Parse puzzle ``text`` into a padded :class:`Maze`."""

    symbols = to_symbol_array(split_rows(text))
    tiles = to_tiles(pad_symbols(symbols))
    entry = find_entry(tiles)
    logger.debug(
        "Loaded %dx%d grid, entry at row %d, column %d",
        symbols.shape[0],
        symbols.shape[1],
        entry[0] - 1,
        entry[1] - 1,
    )
    return Maze(tiles=tiles, entry=entry)


def read_maze_text(path: str | Path) -> str:
    """Read ``path`` as UTF-8 text.

    Bytes that do not decode are reported as an unrecognised tile symbol, with
    the byte offset in the context, rather than as a ``UnicodeDecodeError``.
    ``OSError`` from opening the file propagates unchanged.
    """

    data = Path(path).read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidTileSymbolError(
            "Input is not valid UTF-8 text",
            {"offset": exc.start, "byte": f"0x{data[exc.start]:02x}"},
        ) from None


def load_maze_file(path: str | Path) -> Maze:
    """Read ``path`` and parse it with :func:`load_maze`."""

    return load_maze(read_maze_text(path))


def unpad(array: np.ndarray) -> np.ndarray:
    """Strip the one-cell padding ring from a per-cell array."""

    return array[1:-1, 1:-1]


__all__ = [
    "dims",
    "find_entry",
    "load_maze",
    "load_maze_file",
    "pad_symbols",
    "read_maze_text",
    "split_rows",
    "to_symbol_array",
    "to_tiles",
    "unpad",
]
