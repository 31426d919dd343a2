"""
Cell module for Minesweeper game.

Represents individual cells on the game board with their state
(hidden/revealed/flagged) and content (mine/number). A cell decides whether
an action applies to it; anything that touches other cells or game-wide
counters is delegated to the owning grid.
"""
import logging
import weakref
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Dict, Optional

from .observable import Observable, Subscribable, Unsubscribe

if TYPE_CHECKING:
    from .grid import Grid

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# Observation values for renderers and agents
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_MINE = 9


# ============================================================================
# Cell Class
# ============================================================================

class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        x: Column index.
        y: Row index.
        is_mine: Whether this cell contains a mine. Assigned once, when the
            grid places its mines.
    """

    def __init__(self, x: int, y: int, grid: "Grid") -> None:
        self.x = x
        self.y = y
        self.is_mine = False
        self._grid_ref = weakref.ref(grid)
        self._state: Observable[CellState] = Observable(CellState.HIDDEN)
        self._adjacent_mines: Observable[int] = Observable(0)
        self._observables: Dict[str, Subscribable] = {
            "state": self._state,
            "adjacent_mines": self._adjacent_mines,
        }

    # ========================================================================
    # Player Actions
    # ========================================================================

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Revealing a mine ends the game. Revealing a cell with no adjacent
        mines opens the surrounding region.

        Returns:
            True if the cell was revealed, False if the action did not
            apply (game over, already revealed, or flagged).
        """
        grid = self._owning_grid()
        if grid is None:
            return False

        with grid.lock:
            if grid.is_game_over or self.is_revealed or self.is_flagged:
                return False

            grid.mouse_down = False

            if self.is_mine:
                grid.reveal_mines()
                return True

            self._set_state(CellState.REVEALED)
            # The first reveal places the mines, so read adjacency only after this
            grid.increment_revealed()

            if self.adjacent_mines == 0:
                grid.reveal_adjacent_cells(self)
            return True

    def flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if the flag was toggled, False if the cell is revealed or
            the game is over.
        """
        grid = self._owning_grid()
        if grid is None:
            return False

        with grid.lock:
            if grid.is_game_over or self.is_revealed:
                return False

            grid.mouse_down = False

            if self.is_flagged:
                grid.remove_flag()
                self._set_state(CellState.HIDDEN)
            else:
                grid.use_flag()
                self._set_state(CellState.FLAGGED)
            return True

    def set_mouse_held(self, held: bool) -> None:
        """Report a press (True) or release (False) over this cell."""
        grid = self._owning_grid()
        if grid is None:
            return
        with grid.lock:
            if held and not self.is_hidden:
                return
            grid.mouse_down = held

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def state(self) -> CellState:
        return self._state.value

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self._state.value == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self._state.value == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self._state.value == CellState.FLAGGED

    @property
    def adjacent_mines(self) -> int:
        """Count of mines in neighbouring cells (0-8)."""
        return self._adjacent_mines.value

    def subscribe(self, field: str, callback: Callable) -> Unsubscribe:
        """
        Observe ``"state"`` or ``"adjacent_mines"``.

        Raises:
            KeyError: For any other field name.
        """
        try:
            observable = self._observables[field]
        except KeyError:
            raise KeyError(f"Cell has no observable field {field!r}") from None
        return observable.subscribe(callback)

    def to_observation(self) -> int:
        """
        Convert cell to observation value.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.is_hidden:
            return OBS_HIDDEN
        if self.is_flagged:
            return OBS_FLAGGED
        if self.is_mine:
            return OBS_MINE
        return self.adjacent_mines

    # ========================================================================
    # Grid Hooks
    # ========================================================================

    def _set_state(self, state: CellState) -> None:
        self._state.value = state

    def _set_adjacent_mines(self, count: int) -> None:
        self._adjacent_mines.value = count

    def _owning_grid(self) -> Optional["Grid"]:
        """The owning grid, or None once it has been garbage collected."""
        grid = self._grid_ref()
        if grid is None:
            logger.debug("Ignoring action on %r: its grid no longer exists", self)
        return grid

    def __repr__(self) -> str:
        mine = ", mine" if self.is_mine else ""
        return f"Cell(x={self.x}, y={self.y}, {self.state.name}{mine})"
