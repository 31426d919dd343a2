"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Difficulty, Game, Grid, ManualTimer


# ============================================================================
# Helpers
# ============================================================================

class FixedSampler:
    """Random source stand-in that always picks the given (x, y) positions."""

    def __init__(self, positions: Iterable[Tuple[int, int]]) -> None:
        self.positions = set(positions)
        self.calls: List[Tuple[int, int]] = []

    def sample(self, population: Sequence, k: int) -> list:
        self.calls.append((len(population), k))
        chosen = [cell for cell in population if (cell.x, cell.y) in self.positions]
        return chosen[:k]


class TimerRecorder:
    """Timer factory that keeps every ManualTimer it builds."""

    def __init__(self) -> None:
        self.timers: List[ManualTimer] = []

    def __call__(self, interval: float, callback) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


def make_grid(
    width: int = 5,
    height: int = 5,
    mines: int = 2,
    mine_positions: Iterable[Tuple[int, int]] = (),
    timers: TimerRecorder = None,
) -> Grid:
    """Grid with deterministic mine placement and manual ticks."""
    return Grid(
        Difficulty(width, height, mines),
        rng=FixedSampler(mine_positions),
        timer_factory=timers if timers is not None else TimerRecorder(),
    )


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def timers() -> TimerRecorder:
    """Collects the timers created by a grid."""
    return TimerRecorder()


@pytest.fixture
def corner_grid(timers: TimerRecorder) -> Grid:
    """5x5 grid whose two mines will land on (0, 0) and (4, 4)."""
    return make_grid(5, 5, 2, [(0, 0), (4, 4)], timers)


@pytest.fixture
def wall_grid(timers: TimerRecorder) -> Grid:
    """5x5 grid with a full column of mines at x=2 splitting the board."""
    return make_grid(5, 5, 5, [(2, y) for y in range(5)], timers)


@pytest.fixture
def empty_grid(timers: TimerRecorder) -> Grid:
    """Grid with no mines for cascade testing."""
    return make_grid(5, 5, 0, [], timers)


@pytest.fixture
def random_grid(timers: TimerRecorder) -> Grid:
    """Beginner-sized grid with real random placement."""
    return Grid(Difficulty(8, 8, 10), timer_factory=timers)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def game(timers: TimerRecorder) -> Game:
    """Session on a corner-mined 5x5 board."""
    return Game(
        Difficulty(5, 5, 2, "Tiny"),
        rng_factory=lambda: FixedSampler([(0, 0), (4, 4)]),
        timer_factory=timers,
    )
