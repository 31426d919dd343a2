"""
Difficulty configuration for a Minesweeper game.

The grid trusts whatever difficulty it is handed; bounds are checked here,
by whoever builds the difficulty, before a grid is created.
"""
import math
from dataclasses import dataclass
from typing import Dict

from .errors import InvalidDifficultyError, UnknownDifficultyError


# ============================================================================
# Constants
# ============================================================================

MIN_SIZE = 5
MAX_SIZE = 45
MIN_MINES = 2

# Custom boards may be filled with mines up to this share of the cells
MAX_MINE_DENSITY = 0.95


# ============================================================================
# Difficulty Data Class
# ============================================================================

@dataclass(frozen=True)
class Difficulty:
    """
    Board dimensions and mine count for one game.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        mines: Number of mines requested.
        name: Display name of the difficulty.
    """

    width: int = 8
    height: int = 8
    mines: int = 10
    name: str = "Custom"

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def safe_cells(self) -> int:
        """Number of cells without a mine."""
        return self.cell_count - self.mines

    @property
    def max_mines(self) -> int:
        """Largest mine count offered for a board of this size."""
        return math.floor(self.cell_count * MAX_MINE_DENSITY)

    def validate(self) -> "Difficulty":
        """
        Ensure the difficulty describes a playable board.

        Returns:
            The difficulty itself, so calls can be chained.

        Raises:
            InvalidDifficultyError: If a dimension or the mine count is
                out of bounds.
        """
        for label, size in (("width", self.width), ("height", self.height)):
            if not MIN_SIZE <= size <= MAX_SIZE:
                raise InvalidDifficultyError(
                    f"Board {label} must be between {MIN_SIZE} and {MAX_SIZE}, "
                    f"got {size}"
                )
        if self.mines < MIN_MINES:
            raise InvalidDifficultyError(
                f"Need at least {MIN_MINES} mines, got {self.mines}"
            )
        if self.cell_count <= self.mines + 1:
            raise InvalidDifficultyError(
                f"Too many mines for a {self.width}x{self.height} board "
                f"(max {self.cell_count - 2})"
            )
        return self

    @classmethod
    def custom(cls, width: int, height: int, mines: int) -> "Difficulty":
        """
        Build a validated custom difficulty.

        The mine count is lowered to ``max_mines`` when it exceeds it.
        """
        difficulty = cls(width, height, mines, "Custom")
        if mines > difficulty.max_mines:
            difficulty = cls(width, height, difficulty.max_mines, "Custom")
        return difficulty.validate()

    @classmethod
    def preset(cls, name: str) -> "Difficulty":
        """
        Look up a preset by name, ignoring case.

        Raises:
            UnknownDifficultyError: If there is no such preset.
        """
        try:
            return PRESETS[name.strip().lower()]
        except KeyError:
            known = ", ".join(preset.name for preset in PRESETS.values())
            raise UnknownDifficultyError(
                f"Unknown difficulty {name!r} (choose from {known})"
            ) from None

    def __str__(self) -> str:
        return f"{self.name} ({self.width}x{self.height}, {self.mines} mines)"


# Preset difficulty levels
BEGINNER = Difficulty(8, 8, 10, "Beginner")
INTERMEDIATE = Difficulty(16, 16, 40, "Intermediate")
EXPERT = Difficulty(30, 16, 99, "Expert")
CUSTOM = Difficulty(20, 20, 50, "Custom")

PRESETS: Dict[str, Difficulty] = {
    preset.name.lower(): preset
    for preset in (BEGINNER, INTERMEDIATE, EXPERT, CUSTOM)
}
