"""pipemaze.cli
===============

Command-line entry point. Reads a maze from ``--open`` (or falls back to the
built-in sample), runs the solver and prints the answers. Every solver error
is reported on stderr, appended to the failure log and turned into exit
status 1; there is no retry since the computation is deterministic.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .constants import EXTERIOR_MARKER, FAIL_LOG, INTERIOR_MARKER, SAMPLE_MAZE
from .errors import PipeMazeError
from .grid_utils import read_maze_text
from .logging_utils import configure_logging, log_failure
from .solver import SolveConfig, solve_text

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "pipemaze",
        description=(
            "Find the closed pipe loop through the entry tile 'S', report how far "
            "its farthest tile is from the entry and, with --part2, how many tiles "
            "it encloses."
        ),
    )
    parser.add_argument(
        "-o",
        "--open",
        dest="path",
        default=None,
        help="Input file path; the built-in sample maze is used when omitted",
    )
    parser.add_argument("--part2", action="store_true", help="Also count the tiles enclosed by the loop")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every tile visited by the loop walk")
    parser.add_argument("--render", action="store_true", help="Print the maze with box-drawing glyphs")
    parser.add_argument("--interior-marker", default=INTERIOR_MARKER, help="Glyph for enclosed ground in --render")
    parser.add_argument("--exterior-marker", default=EXTERIOR_MARKER, help="Glyph for outside ground in --render")
    parser.add_argument("--fail-log", default=FAIL_LOG, help="JSONL file receiving one entry per failed run")
    parser.add_argument("--no-fail-log", dest="fail_log", action="store_const", const=None)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments, execute the solver and return the exit status."""

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = SolveConfig(
            part=2 if args.part2 else 1,
            verbose=args.verbose,
            render=args.render,
            interior_marker=args.interior_marker,
            exterior_marker=args.exterior_marker,
            fail_log=args.fail_log,
        )
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(cfg.verbose)

    try:
        if args.path is None:
            print("No input file given, using the sample maze")
            text = SAMPLE_MAZE
        else:
            text = read_maze_text(args.path)
        report = solve_text(text, cfg)
    except OSError as exc:
        print(f"Failed to read {args.path}: {exc}", file=sys.stderr)
        return 1
    except PipeMazeError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        if cfg.fail_log:
            log_failure(args.path, exc, cfg.fail_log)
        return 1

    print(f"It took {report.farthest_distance} steps to get as far away as possible")
    if cfg.part == 2:
        print(f"The loop encloses {report.interior_count} tiles")
    if report.rendering is not None:
        print(report.rendering)
    logger.debug("Entry resolved to %r, loop length %d", report.entry_shape.symbol, report.loop_length)
    return 0


__all__ = ["build_parser", "main"]
