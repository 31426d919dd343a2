"""
Game session: difficulty selection and grid lifecycle.

A session owns at most one grid at a time. Starting, resetting or hard
resetting always closes the previous grid first so its timer never outlives
it.
"""
import logging
from functools import partial
from typing import Any, Callable, List, Optional, Union

from .difficulty import BEGINNER, Difficulty
from .grid import Grid
from .timer import TimerFactory

logger = logging.getLogger(__name__)

GameOverCallback = Callable[[bool], None]


class Game:
    """
    One player's sequence of games at a selected difficulty.

    Args:
        difficulty: Initial selection, a Difficulty or a preset name.
        rng_factory: Called once per grid to build its random source.
        timer_factory: Passed through to every grid.
    """

    def __init__(
        self,
        difficulty: Union[Difficulty, str] = BEGINNER,
        rng_factory: Optional[Callable[[], Any]] = None,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.selected_difficulty = BEGINNER
        self.select_difficulty(difficulty)
        self.started = False
        self.grid: Optional[Grid] = None
        self.last_result: Optional[bool] = None
        self.games_played = 0
        self.games_won = 0
        self._rng_factory = rng_factory
        self._timer_factory = timer_factory
        self._game_over_callbacks: List[GameOverCallback] = []

    def select_difficulty(self, difficulty: Union[Difficulty, str]) -> Difficulty:
        """
        Choose the difficulty for the next ``start``.

        Raises:
            UnknownDifficultyError: If given an unknown preset name.
        """
        if isinstance(difficulty, str):
            difficulty = Difficulty.preset(difficulty)
        self.selected_difficulty = difficulty
        return difficulty

    def start(self) -> Grid:
        """
        Start a new game at the selected difficulty.

        Raises:
            InvalidDifficultyError: If the selected difficulty is not
                playable. The current grid is left untouched.
        """
        difficulty = self.selected_difficulty.validate()
        self._discard_grid()

        rng = self._rng_factory() if self._rng_factory else None
        grid = Grid(difficulty, rng=rng, timer_factory=self._timer_factory)
        grid.subscribe("is_game_over", partial(self._on_game_over, grid))
        self.grid = grid
        self.started = True
        self.last_result = None
        logger.info("Started a new game! Difficulty: %s", difficulty)
        return grid

    def reset(self) -> Grid:
        """Throw away the current grid and start again."""
        return self.start()

    def hard_reset(self) -> None:
        """Throw away the current grid and return to difficulty selection."""
        self._discard_grid()
        self.started = False

    def subscribe_game_over(self, callback: GameOverCallback) -> Callable[[], None]:
        """
        Call ``callback(won)`` whenever a grid of this session ends.

        Returns:
            A function that removes the callback again.
        """
        self._game_over_callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._game_over_callbacks:
                self._game_over_callbacks.remove(callback)

        return unsubscribe

    @property
    def win_rate(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.games_won / self.games_played

    def _discard_grid(self) -> None:
        if self.grid is not None:
            self.grid.close()
            self.grid = None

    def _on_game_over(self, grid: Grid, over: bool) -> None:
        # Ignore grids that were replaced before they finished
        if not over or grid is not self.grid:
            return
        won = grid.won_game
        self.last_result = won
        self.games_played += 1
        if won:
            self.games_won += 1
        logger.info("%s (%s)", "Congratulations!" if won else "Game over!", grid.time_string)
        for callback in list(self._game_over_callbacks):
            callback(won)
