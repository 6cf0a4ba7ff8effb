"""Public package interface for pipemaze."""

from .cli import main
from .solver import MazeReport, SolveConfig, solve_file, solve_maze, solve_text

__all__ = ["MazeReport", "SolveConfig", "main", "solve_file", "solve_maze", "solve_text"]
