"""
Unit tests for game timers and elapsed-time formatting.
"""
import threading

import pytest
from minesweeper import ManualTimer, RepeatingTimer, format_elapsed


class TestManualTimer:
    """Test the caller-driven timer."""

    def test_fire_before_start_does_nothing(self) -> None:
        ticks = []
        timer = ManualTimer(1.0, lambda: ticks.append(1))
        assert timer.fire() == 0
        assert ticks == []

    def test_fire_delivers_ticks_while_running(self) -> None:
        ticks = []
        timer = ManualTimer(1.0, lambda: ticks.append(1))
        timer.start()
        assert timer.fire(4) == 4
        assert len(ticks) == 4
        assert timer.is_running is True

    def test_cancel_from_callback_stops_remaining_ticks(self) -> None:
        ticks = []
        timer = None

        def on_tick() -> None:
            ticks.append(1)
            if len(ticks) == 2:
                timer.cancel()

        timer = ManualTimer(1.0, on_tick)
        timer.start()
        assert timer.fire(5) == 2
        assert timer.is_running is False


class TestRepeatingTimer:
    """Test the thread-backed timer."""

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError, match="must be positive"):
            RepeatingTimer(0, lambda: None)

    def test_ticks_until_cancelled(self) -> None:
        ticked = threading.Event()
        ticks = []

        def on_tick() -> None:
            ticks.append(1)
            if len(ticks) >= 3:
                ticked.set()

        timer = RepeatingTimer(0.01, on_tick)
        timer.start()
        try:
            assert ticked.wait(5.0) is True
        finally:
            timer.cancel()
        assert timer.is_running is False
        assert len(ticks) >= 3

    def test_not_running_before_start(self) -> None:
        assert RepeatingTimer(1.0, lambda: None).is_running is False

    def test_cancel_is_idempotent(self) -> None:
        timer = RepeatingTimer(1.0, lambda: None)
        timer.start()
        timer.cancel()
        timer.cancel()
        assert timer.is_running is False

    def test_start_twice_keeps_one_thread(self) -> None:
        timer = RepeatingTimer(1.0, lambda: None)
        timer.start()
        thread = timer._thread
        timer.start()
        assert timer._thread is thread
        timer.cancel()


class TestFormatElapsed:
    """Test HH:MM:SS formatting."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (0, "00:00:00"),
            (9, "00:00:09"),
            (61, "00:01:01"),
            (3599, "00:59:59"),
            (3600, "01:00:00"),
            (90061, "25:01:01"),
        ],
    )
    def test_format(self, seconds: int, expected: str) -> None:
        assert format_elapsed(seconds) == expected
