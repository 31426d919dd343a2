"""
Elapsed-time tickers for a running game.

A grid starts one ticker when its mines are placed and cancels it when the
game ends or the grid is closed. ``RepeatingTimer`` ticks on a background
thread; ``ManualTimer`` ticks only when the host calls ``fire``, which suits
event loops that deliver their own periodic callbacks, and tests.
"""
import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class GameTimer(Protocol):
    """Periodic ticker started once and cancelled at most once."""

    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...

    @property
    def is_running(self) -> bool:
        ...


TimerFactory = Callable[[float, TickCallback], GameTimer]


# ============================================================================
# Thread-backed Timer
# ============================================================================

class RepeatingTimer:
    """
    Call ``callback`` every ``interval`` seconds on a daemon thread.

    Cancelling is idempotent and safe from inside the callback.
    """

    def __init__(self, interval: float, callback: TickCallback) -> None:
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        self.interval = interval
        self.callback = callback
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start ticking. Starting twice is a no-op."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name="minesweeper-timer", daemon=True
        )
        self._thread.start()
        logger.debug("Timer started (interval=%ss)", self.interval)

    def cancel(self) -> None:
        """Stop ticking."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        logger.debug("Timer cancelled")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stopped.is_set()

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.callback()


# ============================================================================
# Caller-driven Timer
# ============================================================================

class ManualTimer:
    """Ticker advanced explicitly by the host with ``fire``."""

    def __init__(self, interval: float, callback: TickCallback) -> None:
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def is_running(self) -> bool:
        return self.started and not self.cancelled

    def fire(self, ticks: int = 1) -> int:
        """
        Deliver up to ``ticks`` ticks.

        Returns:
            Number of ticks actually delivered (0 unless running).
        """
        delivered = 0
        for _ in range(ticks):
            if not self.is_running:
                break
            self.callback()
            delivered += 1
        return delivered


# ============================================================================
# Formatting
# ============================================================================

def format_elapsed(seconds: int) -> str:
    """Format a second count as zero-padded HH:MM:SS."""
    hours, remainder = divmod(seconds, 3600)
    minutes, remaining_seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{remaining_seconds:02d}"
