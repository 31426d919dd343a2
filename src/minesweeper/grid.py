"""
Grid module for Minesweeper game.

Implements the game grid with lazy mine placement, adjacency counting,
flood-fill revealing, flag accounting, the elapsed-time timer and
win/lose detection. The grid is the only owner of game-wide state; cells
call into it for every effect that reaches beyond themselves.
"""
import logging
import random
import threading
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState
from .difficulty import Difficulty
from .geometry import chunk, in_bounds, index_of, neighbour_coordinates
from .observable import Computed, Observable, Subscribable, Unsubscribe
from .timer import GameTimer, RepeatingTimer, TimerFactory, format_elapsed

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class GridPhase(Enum):
    """Lifecycle of a grid. OVER is terminal."""

    UNPLACED = auto()
    ACTIVE = auto()
    OVER = auto()


TICK_INTERVAL = 1.0

# Cells besides the first click that mine placement always leaves open
SAFE_MARGIN = 2


# ============================================================================
# Grid Class
# ============================================================================

class Grid:
    """
    Minesweeper game grid.

    Cells exist from construction but mines are placed on the first reveal,
    among the cells still hidden, so the first click is always safe. The
    grid can be used as a context manager to guarantee its timer is
    cancelled.

    Args:
        difficulty: Board size and requested mine count. Not validated.
        rng: Source of randomness for mine placement; anything with a
            ``sample(population, k)`` method.
        timer_factory: Builds the elapsed-time ticker from an interval and
            a callback.
    """

    def __init__(
        self,
        difficulty: Difficulty,
        rng: Optional[Any] = None,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.difficulty = difficulty
        self.width = difficulty.width
        self.height = difficulty.height
        self._rng = rng if rng is not None else random.Random()
        self._timer_factory = timer_factory or RepeatingTimer
        self._timer: Optional[GameTimer] = None
        # Serializes timer ticks with player actions
        self.lock = threading.RLock()

        self.initialized = False
        self.won_game = False
        self.total_revealed = 0

        self._used_flags: Observable[int] = Observable(0)
        self._seconds_played: Observable[int] = Observable(0)
        self._is_game_over: Observable[bool] = Observable(False)
        self._mouse_down: Observable[bool] = Observable(False)
        self._mine_count: Observable[int] = Observable(difficulty.mines)
        self._flags_remaining: Computed[int] = Computed(
            lambda: self._mine_count.value - self._used_flags.value,
            self._mine_count,
            self._used_flags,
        )
        self._time_string: Computed[str] = Computed(
            lambda: format_elapsed(self._seconds_played.value),
            self._seconds_played,
        )
        self._observables: Dict[str, Subscribable] = {
            "used_flags": self._used_flags,
            "seconds_played": self._seconds_played,
            "is_game_over": self._is_game_over,
            "mouse_down": self._mouse_down,
            "mine_count": self._mine_count,
            "flags_remaining": self._flags_remaining,
            "time_string": self._time_string,
        }

        self._cells: Tuple[Cell, ...] = self._create_cells()
        self._rows: List[List[Cell]] = chunk(self._cells, self.width)
        logger.debug(
            "Created %dx%d grid (%d mines requested)",
            self.width, self.height, difficulty.mines,
        )

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _create_cells(self) -> Tuple[Cell, ...]:
        """Create the row-major cells, all hidden and mine-free."""
        return tuple(
            Cell(x, y, self)
            for y in range(self.height)
            for x in range(self.width)
        )

    def init(self) -> None:
        """
        Place mines, count adjacencies and start the timer.

        Runs once, on the first reveal. Placement must precede counting,
        and both must precede the first cell's flood-fill decision.
        """
        if self.initialized:
            return
        self._assign_mines()
        self._compute_adjacencies()
        self.initialized = True
        self._start_timer()

    def _assign_mines(self) -> None:
        """Place mines at random among the cells that are still hidden."""
        candidates = [cell for cell in self._cells if not cell.is_revealed]
        requested = self.difficulty.mines
        count = max(0, min(requested, len(candidates) - SAFE_MARGIN))
        for cell in self._rng.sample(candidates, count):
            cell.is_mine = True

        if count < requested:
            logger.warning(
                "Placed %d of %d requested mines to keep %d cells safe",
                count, requested, SAFE_MARGIN,
            )
        else:
            logger.debug("Placed %d mines", count)
        self._mine_count.value = count

    def _compute_adjacencies(self) -> None:
        """Count neighbouring mines for every cell, mines included."""
        for cell in self._cells:
            count = sum(1 for neighbour in self.neighbours(cell) if neighbour.is_mine)
            cell._set_adjacent_mines(count)

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def cell_at(self, x: int, y: int) -> Optional[Cell]:
        """
        Get cell at (x, y), or None if out of bounds.

        The cell does not keep the grid alive; ``Grid(d).cell_at(0, 0)``
        returns a cell whose actions do nothing once the grid is collected.
        """
        if not in_bounds(x, y, self.width, self.height):
            return None
        return self._cells[index_of(x, y, self.width)]

    def neighbours(self, cell: Cell) -> List[Cell]:
        """In-bounds cells surrounding ``cell``."""
        return [
            self._cells[index_of(x, y, self.width)]
            for x, y in neighbour_coordinates(cell.x, cell.y, self.width, self.height)
        ]

    # ========================================================================
    # Game Mechanics (Mid-level)
    # ========================================================================

    def increment_revealed(self) -> None:
        """
        Count one newly revealed safe cell.

        Initializes the grid on the first call, then ends the game as a win
        once every safe cell is revealed.
        """
        self.total_revealed += 1

        if not self.initialized:
            self.init()

        if not self.is_game_over and self.total_revealed == self.safe_cell_count:
            self.auto_flag()
            self.game_over(True)

    def reveal_adjacent_cells(self, origin: Cell) -> int:
        """
        Flood-fill outward from a revealed cell with no adjacent mines.

        Opens the connected zero region around ``origin`` plus its border of
        numbered cells. Flags on opened cells are removed. Each cell is
        processed at most once.

        Returns:
            Number of cells newly revealed.
        """
        visited = {origin}
        stack = [origin]
        opened = 0

        while stack:
            current = stack.pop()
            for neighbour in self.neighbours(current):
                if neighbour in visited:
                    continue
                visited.add(neighbour)

                if neighbour.adjacent_mines == 0:
                    stack.append(neighbour)

                if neighbour.is_revealed:
                    continue
                if neighbour.is_flagged:
                    self.remove_flag()
                neighbour._set_state(CellState.REVEALED)
                opened += 1
                self.increment_revealed()

        logger.debug("Flood-fill from (%d, %d) opened %d cells", origin.x, origin.y, opened)
        return opened

    def reveal_mines(self) -> None:
        """Reveal every mine and end the game as a loss."""
        for cell in self._cells:
            if not cell.is_mine or cell.is_revealed:
                continue
            if cell.is_flagged:
                self.remove_flag()
            cell._set_state(CellState.REVEALED)
            self.total_revealed += 1
        self.game_over(False)

    def auto_flag(self) -> None:
        """Flag every mine that is not flagged yet."""
        for cell in self._cells:
            if cell.is_mine and cell.is_hidden:
                cell._set_state(CellState.FLAGGED)
                self.use_flag()

    def use_flag(self) -> None:
        self._used_flags.value += 1

    def remove_flag(self) -> None:
        self._used_flags.value -= 1

    def game_over(self, won: bool) -> None:
        """Enter the terminal state. Later calls are ignored."""
        with self.lock:
            if self.is_game_over:
                return
            self.won_game = won
            self._stop_timer()
            logger.debug("Game over: %s after %ds", "won" if won else "lost", self.seconds_played)
            self._is_game_over.value = True

    # ========================================================================
    # Timer
    # ========================================================================

    def tick(self) -> None:
        """
        Timer callback: one more second played.

        Runs under the grid lock, so a tick never lands in the middle of a
        reveal or flag, and a tick delivered after game over is dropped.
        """
        with self.lock:
            if self.is_game_over:
                return
            self._seconds_played.value += 1

    def _start_timer(self) -> None:
        self._timer = self._timer_factory(TICK_INTERVAL, self.tick)
        self._timer.start()

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def close(self) -> None:
        """Cancel the timer. Call when discarding the grid."""
        with self.lock:
            self._stop_timer()

    def __enter__(self) -> "Grid":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def cells(self) -> Tuple[Cell, ...]:
        """
        All cells in row-major order.

        Cells only hold a weak reference to their grid: keep the grid alive
        for as long as its cells are used, or their actions become no-ops.
        """
        return self._cells

    @property
    def rows(self) -> List[List[Cell]]:
        """Cells chunked into rows, indexed ``rows[y][x]``."""
        return self._rows

    @property
    def phase(self) -> GridPhase:
        if self.is_game_over:
            return GridPhase.OVER
        if self.initialized:
            return GridPhase.ACTIVE
        return GridPhase.UNPLACED

    @property
    def mine_count(self) -> int:
        """Mines actually placed once initialized, otherwise the requested count."""
        return self._mine_count.value

    @property
    def safe_cell_count(self) -> int:
        return self.width * self.height - self.mine_count

    @property
    def used_flags(self) -> int:
        return self._used_flags.value

    @property
    def flags_remaining(self) -> int:
        """Mines minus flags placed; negative when over-flagged."""
        return self._flags_remaining.value

    @property
    def seconds_played(self) -> int:
        return self._seconds_played.value

    @property
    def time_string(self) -> str:
        return self._time_string.value

    @property
    def is_game_over(self) -> bool:
        return self._is_game_over.value

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and self._timer.is_running

    @property
    def mouse_down(self) -> bool:
        """True while the pointer is held on a hidden cell."""
        return self._mouse_down.value

    @mouse_down.setter
    def mouse_down(self, held: bool) -> None:
        self._mouse_down.value = held

    def subscribe(self, field: str, callback: Callable) -> Unsubscribe:
        """
        Observe a grid field.

        Fields: ``used_flags``, ``seconds_played``, ``is_game_over``,
        ``mouse_down``, ``mine_count``, ``flags_remaining``,
        ``time_string``.

        Raises:
            KeyError: For any other field name.
        """
        try:
            observable = self._observables[field]
        except KeyError:
            raise KeyError(f"Grid has no observable field {field!r}") from None
        return observable.subscribe(callback)

    def get_observation(self) -> np.ndarray:
        """
        Get grid state as a numpy array, indexed ``[y, x]``.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for cell in self._cells:
            obs[cell.y, cell.x] = cell.to_observation()
        return obs

    def get_mine_mask(self) -> np.ndarray:
        """Boolean array, indexed ``[y, x]``, True where a mine is placed."""
        mask = np.zeros((self.height, self.width), dtype=bool)
        for cell in self._cells:
            mask[cell.y, cell.x] = cell.is_mine
        return mask

    def hidden_cells(self) -> List[Cell]:
        """Cells that are neither revealed nor flagged."""
        return [cell for cell in self._cells if cell.is_hidden]

    def __repr__(self) -> str:
        return (
            f"Grid({self.width}x{self.height}, mines={self.mine_count}, "
            f"phase={self.phase.name})"
        )
