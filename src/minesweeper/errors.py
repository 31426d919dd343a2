"""
Exceptions raised by the configuration layer.

The game core itself never raises: invalid actions are no-ops and a mine
reveal is an ordinary loss.
"""


class MinesweeperError(Exception):
    """Base class for all package errors."""


class InvalidDifficultyError(MinesweeperError, ValueError):
    """Difficulty parameters are outside the playable bounds."""


class UnknownDifficultyError(MinesweeperError, KeyError):
    """No preset difficulty with the requested name."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""
