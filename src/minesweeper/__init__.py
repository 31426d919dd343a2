"""
Minesweeper rules engine.

Provides grid construction, lazy mine placement, flood-fill revealing,
flag accounting, elapsed-time tracking and win/loss detection.
"""
from .cell import Cell, CellState
from .difficulty import BEGINNER, CUSTOM, EXPERT, INTERMEDIATE, PRESETS, Difficulty
from .errors import InvalidDifficultyError, MinesweeperError, UnknownDifficultyError
from .grid import Grid, GridPhase
from .observable import Computed, Observable
from .session import Game
from .timer import GameTimer, ManualTimer, RepeatingTimer, format_elapsed

__all__ = [
    "Cell",
    "CellState",
    "Grid",
    "GridPhase",
    "Game",
    "Difficulty",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "CUSTOM",
    "PRESETS",
    "MinesweeperError",
    "InvalidDifficultyError",
    "UnknownDifficultyError",
    "Observable",
    "Computed",
    "GameTimer",
    "ManualTimer",
    "RepeatingTimer",
    "format_elapsed",
]
