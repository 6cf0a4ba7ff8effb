"""pipemaze.solver
==================

High-level orchestration: load the grid, walk the loop, freeze the entry's
shape, classify the remaining tiles and bundle everything into a
:class:`MazeReport`. The stages always run in that order because each one
depends on state the previous one produced (loop membership, the resolved
entry tile).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

from .classifier import class_counts, classify_cells
from .constants import EXTERIOR_MARKER, FAIL_LOG, INTERIOR_MARKER
from .encoders import render_maze
from .entry import resolve_entry
from .grid_utils import load_maze, load_maze_file
from .tracer import LoopTrace, trace_loop
from .types import Maze, Tile


@dataclass
class SolveConfig:
    """Configuration knobs for a solver run."""

    part: int = 1
    verbose: bool = False
    render: bool = False
    interior_marker: str = INTERIOR_MARKER
    exterior_marker: str = EXTERIOR_MARKER
    fail_log: Optional[str] = FAIL_LOG

    def __post_init__(self) -> None:
        if self.part not in (1, 2):
            raise ValueError(f"part must be 1 or 2, got {self.part!r}")
        for name in ("interior_marker", "exterior_marker"):
            marker = getattr(self, name)
            if len(marker) != 1:
                raise ValueError(f"{name} must be a single character, got {marker!r}")
        if self.interior_marker == self.exterior_marker:
            raise ValueError("interior and exterior markers must differ")

    @property
    def classify(self) -> bool:
        """Whether the run needs the interior classification."""

        return self.part == 2 or self.render


@dataclass
class MazeReport:
    """Answers and bookkeeping from one solver run."""

    farthest_distance: int
    loop_length: int
    entry_shape: Tile
    interior_count: Optional[int] = None
    exterior_count: Optional[int] = None
    rendering: Optional[str] = None


def solve_maze(
    maze: Maze,
    cfg: Optional[SolveConfig] = None,
) -> tuple[MazeReport, LoopTrace, Optional[np.ndarray]]:
    """Run the full pipeline on an already loaded ``maze``.

    Returns the report, the loop trace and, when classification ran, the
    per-cell class array. Any :class:`pipemaze.errors.PipeMazeError` raised by
    a stage propagates unchanged.
    """

    cfg = cfg or SolveConfig()
    trace = trace_loop(maze)
    shape = resolve_entry(maze, trace.membership)
    report = MazeReport(
        farthest_distance=trace.farthest_distance,
        loop_length=trace.steps,
        entry_shape=shape,
    )
    classes = None
    if cfg.classify:
        classes = classify_cells(maze, trace.membership)
        counts = class_counts(classes)
        report.interior_count = counts["interior"]
        report.exterior_count = counts["exterior"]
        if cfg.render:
            report.rendering = render_maze(
                maze,
                classes,
                interior_marker=cfg.interior_marker,
                exterior_marker=cfg.exterior_marker,
            )
    return report, trace, classes


def solve_text(text: str, cfg: Optional[SolveConfig] = None) -> MazeReport:
    """Load ``text`` and solve it; see :func:`solve_maze`."""

    report, _, _ = solve_maze(load_maze(text), cfg)
    return report


def solve_file(path: str | Path, cfg: Optional[SolveConfig] = None) -> MazeReport:
    """Read ``path`` and solve it; see :func:`solve_maze`."""

    report, _, _ = solve_maze(load_maze_file(path), cfg)
    return report


__all__ = ["MazeReport", "SolveConfig", "solve_file", "solve_maze", "solve_text"]
