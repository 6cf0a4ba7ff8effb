"""pipemaze.errors
==================

Exception hierarchy for the solver. Every failure is fatal for the run: the
core raises at the point of detection and the CLI decides how to present it.
Each error carries an optional ``context`` mapping that is appended to its
string form as ``key=value`` pairs, which keeps messages short while still
pointing at the offending row and column.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional


def _format_context(context: Optional[Mapping[str, Any]]) -> str:
    if not context:
        return ""
    parts = []
    for key, value in context.items():
        text = str(value)
        if len(text) > 60:
            text = text[:57] + "..."
        parts.append(f"{key}={text}")
    return " | " + ", ".join(parts)


class PipeMazeError(Exception):
    """Base class for all solver errors.

    Parameters
    ----------
    message:
        Human-readable description.
    context:
        Extra fields rendered after the message, e.g. ``{"row": 3, "col": 7}``.
    """

    def __init__(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self.context = dict(context) if context else None
        super().__init__(message)

    def __str__(self) -> str:
        return super().__str__() + _format_context(self.context)


class GridFormatError(PipeMazeError):
    """The input text does not describe a usable grid."""


class InvalidTileSymbolError(GridFormatError):
    """A character outside ``| - L J 7 F S .`` was found while loading."""


class RaggedGridError(GridFormatError):
    """Rows of the input have different lengths."""


class EmptyGridError(GridFormatError):
    """The input contains no rows."""


class NoEntryFoundError(GridFormatError):
    """No ``S`` tile exists in the grid."""


class MultipleEntriesError(GridFormatError):
    """More than one ``S`` tile exists in the grid."""


class LoopError(PipeMazeError):
    """The tiles around the entry do not form a single simple loop."""


class MalformedLoopError(LoopError):
    """The walk reached a tile that does not continue the pipe."""


class AmbiguousEntryShapeError(LoopError):
    """The entry does not have exactly two connecting neighbours."""


class EntryStateError(PipeMazeError):
    """The entry was resolved twice, or used unresolved where a shape is needed."""


__all__ = [
    "AmbiguousEntryShapeError",
    "EmptyGridError",
    "EntryStateError",
    "GridFormatError",
    "InvalidTileSymbolError",
    "LoopError",
    "MalformedLoopError",
    "MultipleEntriesError",
    "NoEntryFoundError",
    "PipeMazeError",
    "RaggedGridError",
]
