from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numpy as np
import pytest

import pipemaze.solver as solver_module
from pipemaze.classifier import (
    NO_CORNER,
    CellClass,
    PendingCorner,
    advance_corner,
    class_counts,
    classify_cells,
    count_interior,
)
from pipemaze.encoders import BoxDrawingEncoder, MazeEncoder, render_maze
from pipemaze.entry import entry_connections, resolve_entry
from pipemaze.errors import (
    AmbiguousEntryShapeError,
    EmptyGridError,
    EntryStateError,
    InvalidTileSymbolError,
    MalformedLoopError,
    MultipleEntriesError,
    NoEntryFoundError,
    PipeMazeError,
    RaggedGridError,
)
from pipemaze.grid_utils import load_maze, load_maze_file, read_maze_text, split_rows
from pipemaze.solver import SolveConfig, solve_file, solve_maze, solve_text
from pipemaze.tracer import connecting_neighbours, trace_loop
from pipemaze.types import Direction, Maze, Resolved, Tile, Unresolved


SCENARIO_A = """\
..F7.
.FJ|.
SJ.L7
|F--J
LJ...
"""

SCENARIO_B = """\
FF7FSF7F7F7F7F7F---7
L|LJ||||||||||||F--J
FL-7LJLJ||||||LJL-77
F--JF--7||LJLJ7F7FJ-
L---JF-JLJ.||-FJLJJ7
|F|F-JF---7F7-L7L|7|
|FFJF7L7F-JF7|JL---7
7-L-JL7||F7|L7F-7F7|
L.L7LFJ|||||FJL7||LJ
L7JLJL-JLJLJL--JLJ.L
"""

SIMPLE_SQUARE = """\
-L|F7
7S-7|
L|7||
-L-J|
L|-JF
"""

ENCLOSED_POCKETS = """\
...........
.S-------7.
.|F-----7|.
.||.....||.
.||.....||.
.|L-7.F-J|.
.|..|.|..|.
.L--J.L--J.
...........
"""

SQUEEZED_POCKETS = """\
..........
.S------7.
.|F----7|.
.||....||.
.||....||.
.|L-7F-J|.
.|..||..|.
.L--JL--J.
..........
"""

LARGER_EXAMPLE = """\
.F----7F7F7F7F-7....
.|F--7||||||||FJ....
.||.FJ||||||||L7....
FJL7L7LJLJ||LJ.L-7..
L--J.L7...LJS7F-7L7.
....F-J..F7FJ|L7L7L7
....L7.F7||L7|.L7L7|
.....|FJLJ|FJ|F7|.LJ
....FJL-7.||.||||...
....L---J.LJ.LJLJ...
"""

TINY_LOOP = "S7\nLJ\n"

# The stray '-' west of the entry also points at it.
THREE_WAY_ENTRY = """\
.....
.F-7.
-S.|.
.L-J.
.....
"""


def traced(text: str):
    maze = load_maze(text)
    return maze, trace_loop(maze)


def resolved(text: str):
    maze, trace = traced(text)
    resolve_entry(maze, trace.membership)
    return maze, trace


# ---------------------------------------------------------------------------
# Tiles and directions
# ---------------------------------------------------------------------------
def test_tile_symbols_and_connectors():
    assert Tile.from_symbol("L") is Tile.BEND_NE
    assert Tile.from_symbol("7") is Tile.BEND_SW
    assert Tile.BEND_NE.connectors == {Direction.NORTH, Direction.EAST}
    assert Tile.GROUND.connectors == frozenset()
    assert all(Tile.ENTRY.connects(d) for d in (Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST))
    with pytest.raises(KeyError):
        Tile.from_symbol("X")


def test_tile_exit_for():
    assert Tile.VERTICAL.exit_for(Direction.NORTH) is Direction.SOUTH
    assert Tile.BEND_SE.exit_for(Direction.EAST) is Direction.SOUTH
    assert Tile.HORIZONTAL.exit_for(Direction.NORTH) is Direction.NONE
    assert Tile.GROUND.exit_for(Direction.WEST) is Direction.NONE
    assert Tile.ENTRY.exit_for(Direction.WEST) is Direction.NONE


def test_shape_for_pairs():
    assert Tile.shape_for(frozenset({Direction.NORTH, Direction.SOUTH})) is Tile.VERTICAL
    assert Tile.shape_for(frozenset({Direction.WEST, Direction.EAST})) is Tile.HORIZONTAL
    assert Tile.shape_for(frozenset({Direction.SOUTH, Direction.WEST})) is Tile.BEND_SW
    assert Tile.shape_for(frozenset({Direction.NORTH, Direction.WEST})) is Tile.BEND_NW


def test_direction_opposite_and_step():
    assert Direction.WEST.opposite is Direction.EAST
    assert Direction.NONE.opposite is Direction.NONE
    assert Direction.NORTH.step((3, 3)) == (2, 3)
    assert Direction.EAST.step((3, 3)) == (3, 4)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------
def test_load_pads_grid_and_finds_entry():
    maze = load_maze(SCENARIO_A)
    assert maze.shape == (7, 7)
    assert maze.inner_shape == (5, 5)
    assert maze.entry == (3, 1)
    assert isinstance(maze.entry_state, Unresolved)
    assert all(tile is Tile.GROUND for tile in maze.tiles[0])
    assert all(row[0] is Tile.GROUND and row[-1] is Tile.GROUND for row in maze.tiles)


def test_split_rows_drops_blank_lines_and_trailing_whitespace():
    assert split_rows("S7  \r\nLJ\n\n") == ["S7", "LJ"]


def test_invalid_symbol_rejected_before_tracing(monkeypatch):
    def fail_trace(maze):
        raise AssertionError("tracer must not run")

    monkeypatch.setattr(solver_module, "trace_loop", fail_trace)
    with pytest.raises(InvalidTileSymbolError) as excinfo:
        solve_text("..F7.\n.FJ|.\nSJ.X7\n|F--J\nLJ...\n")
    assert excinfo.value.context == {"row": 2, "col": 3}
    assert "row=2" in str(excinfo.value)


@pytest.mark.parametrize(
    "text, error",
    [
        ("F7\nLJ\n", NoEntryFoundError),
        ("S7\nSJ\n", MultipleEntriesError),
        ("S7\nL\n", RaggedGridError),
        ("", EmptyGridError),
        ("\n\n", EmptyGridError),
    ],
)
def test_grid_format_errors(text, error):
    with pytest.raises(error):
        load_maze(text)


def test_read_maze_text_rejects_undecodable_bytes(tmp_path: Path):
    path = tmp_path / "maze.txt"
    path.write_bytes(b"S7\nL\xffJ\n")
    with pytest.raises(InvalidTileSymbolError) as excinfo:
        load_maze_file(path)
    assert excinfo.value.context == {"offset": 4, "byte": "0xff"}


def test_read_maze_text_keeps_crlf_rows(tmp_path: Path):
    path = tmp_path / "maze.txt"
    path.write_bytes(b"S7\r\nLJ\r\n")
    assert split_rows(read_maze_text(path)) == ["S7", "LJ"]
    assert load_maze_file(path).entry == (1, 1)


def test_errors_share_base_class():
    with pytest.raises(PipeMazeError):
        load_maze("F7\nLJ\n")


# ---------------------------------------------------------------------------
# Loop tracing
# ---------------------------------------------------------------------------
def test_scenario_a_farthest_distance():
    maze, trace = traced(SCENARIO_A)
    assert trace.steps == 16
    assert trace.farthest_distance == 8
    assert trace.loop_length == 16


def test_simple_square_with_clutter():
    _, trace = traced(SIMPLE_SQUARE)
    assert trace.farthest_distance == 4
    assert trace.loop_length == 8


def test_tiny_loop():
    maze, trace = traced(TINY_LOOP)
    assert trace.steps == 4
    assert trace.farthest_distance == 2
    assert trace.first_direction is Direction.EAST
    assert trace.last_direction is Direction.NORTH


@pytest.mark.parametrize("text", [SCENARIO_A, SCENARIO_B, SIMPLE_SQUARE, LARGER_EXAMPLE, TINY_LOOP])
def test_half_perimeter_is_eccentricity(text):
    _, trace = traced(text)
    assert trace.steps % 2 == 0
    distances = trace.distances[trace.membership]
    eccentricity = int(np.max(np.minimum(distances, trace.steps - distances)))
    assert eccentricity == trace.farthest_distance
    assert trace.loop_length == trace.steps


def test_membership_marks_only_loop_cells():
    maze, trace = traced(SIMPLE_SQUARE)
    marked = {tuple(int(v) for v in pos) for pos in np.argwhere(trace.membership)}
    expected = {(r, c) for r in (2, 3, 4) for c in (2, 3, 4) if (r, c) != (3, 3)}
    assert marked == expected
    assert trace.distances[maze.entry] == 0
    assert trace.distances[1, 1] == -1


def test_first_step_follows_probe_order():
    maze = load_maze(SCENARIO_A)
    assert connecting_neighbours(maze, maze.entry) == (Direction.EAST, Direction.SOUTH)
    assert trace_loop(maze).first_direction is Direction.EAST


def test_three_connecting_neighbours_are_ambiguous():
    with pytest.raises(AmbiguousEntryShapeError) as excinfo:
        traced(THREE_WAY_ENTRY)
    assert excinfo.value.context["directions"] == "WNS"


def test_broken_pipe_is_malformed():
    with pytest.raises(MalformedLoopError) as excinfo:
        traced("S-7\n|.|\nL-.\n")
    assert excinfo.value.context["row"] == 2
    assert excinfo.value.context["col"] == 2


def test_pipe_leading_off_the_edge_is_malformed():
    with pytest.raises(MalformedLoopError):
        traced("S-\n|.\n")


# ---------------------------------------------------------------------------
# Entry resolution
# ---------------------------------------------------------------------------
def test_resolve_entry_matches_traversal():
    maze, trace = traced(SCENARIO_A)
    shape = resolve_entry(maze, trace.membership)
    assert shape is Tile.BEND_SE
    assert maze.entry_state == Resolved(Tile.BEND_SE)
    assert maze.tile_at(maze.entry) is Tile.BEND_SE
    directions = entry_connections(maze, trace.membership)
    assert set(directions) == set(trace.entry_directions)
    assert set(directions) == shape.connectors


def test_resolve_entry_scenario_b():
    maze, _ = resolved(SCENARIO_B)
    assert maze.entry_state.shape is Tile.BEND_SW


def test_resolve_entry_twice_is_rejected():
    maze, trace = resolved(TINY_LOOP)
    with pytest.raises(EntryStateError):
        resolve_entry(maze, trace.membership)


def test_resolve_entry_needs_two_loop_neighbours():
    maze, trace = traced(TINY_LOOP)
    membership = trace.membership.copy()
    membership[2, 1] = False
    with pytest.raises(AmbiguousEntryShapeError):
        resolve_entry(maze, membership)
    assert isinstance(maze.entry_state, Unresolved)


# ---------------------------------------------------------------------------
# Corner memory
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "state, tile, expected_state, correction",
    [
        (NO_CORNER, Tile.BEND_NE, PendingCorner(Tile.BEND_NE), 0),
        (NO_CORNER, Tile.BEND_SE, PendingCorner(Tile.BEND_SE), 0),
        (PendingCorner(Tile.BEND_NE), Tile.HORIZONTAL, PendingCorner(Tile.BEND_NE), 0),
        (PendingCorner(Tile.BEND_NE), Tile.BEND_SW, NO_CORNER, -1),
        (PendingCorner(Tile.BEND_SE), Tile.BEND_NW, NO_CORNER, -1),
        (PendingCorner(Tile.BEND_NE), Tile.BEND_NW, NO_CORNER, 0),
        (PendingCorner(Tile.BEND_SE), Tile.BEND_SW, NO_CORNER, 0),
        (NO_CORNER, Tile.VERTICAL, NO_CORNER, 0),
        (NO_CORNER, Tile.BEND_SW, NO_CORNER, 0),
    ],
)
def test_advance_corner(state, tile, expected_state, correction):
    assert advance_corner(state, tile) == (expected_state, correction)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "text, interior",
    [
        (SCENARIO_B, 10),
        (ENCLOSED_POCKETS, 4),
        (SQUEEZED_POCKETS, 4),
        (LARGER_EXAMPLE, 8),
        (SCENARIO_A, 1),
        (TINY_LOOP, 0),
    ],
)
def test_interior_counts(text, interior):
    maze, trace = resolved(text)
    assert count_interior(maze, trace.membership) == interior


@pytest.mark.parametrize("text", [SCENARIO_A, SCENARIO_B, LARGER_EXAMPLE, SIMPLE_SQUARE])
def test_class_counts_cover_every_tile(text):
    maze, trace = resolved(text)
    counts = class_counts(classify_cells(maze, trace.membership))
    rows, cols = maze.inner_shape
    assert counts["interior"] + counts["loop"] + counts["exterior"] == rows * cols
    assert counts["loop"] == trace.loop_length


def test_classification_is_idempotent():
    maze, trace = resolved(SCENARIO_B)
    first = classify_cells(maze, trace.membership)
    second = classify_cells(maze, trace.membership)
    assert np.array_equal(first, second)
    assert count_interior(maze, trace.membership) == count_interior(maze, trace.membership)


def test_padding_is_marked():
    maze, trace = resolved(TINY_LOOP)
    classes = classify_cells(maze, trace.membership)
    assert classes[0, 0] == CellClass.PADDING
    assert classes[1, 1] == CellClass.LOOP


def test_classifier_requires_resolved_entry():
    maze, trace = traced(SCENARIO_A)
    with pytest.raises(EntryStateError):
        classify_cells(maze, trace.membership)


def test_non_loop_pipes_count_as_ground():
    maze, trace = resolved(SCENARIO_B)
    classes = classify_cells(maze, trace.membership)
    interior_tiles = {maze.tiles[r][c] for r, c in np.argwhere(classes == CellClass.INTERIOR)}
    assert interior_tiles - {Tile.GROUND}


# ---------------------------------------------------------------------------
# Rendering and solver facade
# ---------------------------------------------------------------------------
def test_render_scenario_a():
    maze, trace = resolved(SCENARIO_A)
    classes = classify_cells(maze, trace.membership)
    assert render_maze(maze, classes).splitlines() == [
        "OO┌┐O",
        "O┌┘│O",
        "┌┘I└┐",
        "│┌──┘",
        "└┘OOO",
    ]


def test_box_drawing_encoder_matches_render_maze():
    maze, trace = resolved(SCENARIO_A)
    classes = classify_cells(maze, trace.membership)
    encoder: MazeEncoder = BoxDrawingEncoder(interior_marker="#", exterior_marker=" ")
    assert encoder.to_text(maze, classes) == render_maze(maze, classes, "#", " ")
    assert encoder.glyph(Tile.BEND_SE, CellClass.LOOP) == "┌"


def test_solve_text_reports_both_answers():
    report = solve_text(SCENARIO_B, SolveConfig(part=2))
    assert report.interior_count == 10
    assert report.loop_length == 2 * report.farthest_distance
    assert report.entry_shape is Tile.BEND_SW
    assert report.rendering is None


def test_solve_part_one_skips_classification():
    report = solve_text(SCENARIO_A)
    assert report.farthest_distance == 8
    assert report.interior_count is None


def test_solve_maze_render_with_custom_markers():
    maze = load_maze(SCENARIO_A)
    report, trace, classes = solve_maze(maze, SolveConfig(render=True, interior_marker="#", exterior_marker=" "))
    assert classes is not None
    assert report.rendering.splitlines()[2] == "┌┘#└┐"
    assert report.exterior_count == 8
    assert isinstance(maze, Maze) and maze.entry_resolved


@pytest.mark.parametrize(
    "kwargs",
    [
        {"part": 3},
        {"interior_marker": "II"},
        {"interior_marker": "x", "exterior_marker": "x"},
    ],
)
def test_solve_config_validation(kwargs):
    with pytest.raises(ValueError):
        SolveConfig(**kwargs)


def test_solve_file(tmp_path: Path):
    path = tmp_path / "maze.txt"
    path.write_text(LARGER_EXAMPLE)
    report = solve_file(path, SolveConfig(part=2))
    assert report.interior_count == 8
    assert report.entry_shape is Tile.BEND_SE


def test_enclosed_count_logged_once(caplog):
    with caplog.at_level(logging.INFO, logger="pipemaze"):
        solve_text(SCENARIO_B, SolveConfig(part=2))
    enclosed = [record for record in caplog.records if "enclosed by the loop" in record.getMessage()]
    assert len(enclosed) == 1
    assert enclosed[0].name == "pipemaze.classifier"
    assert enclosed[0].getMessage() == "10 tiles are enclosed by the loop"
