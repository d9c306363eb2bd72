"""
Progress reporting for long spectrum calculations.

The analyst reports how far through the sample buffer it is via a
ProgressSink. Reporting is cosmetic: results never depend on it.
"""
from typing import Callable, Protocol


class ProgressSink(Protocol):
    """Receiver of calculation progress."""

    def set_range(self, total: int) -> None: ...

    def set_value(self, current: int) -> None: ...

    def reset(self) -> None: ...


class NullProgress:
    """Progress sink that ignores everything."""

    def set_range(self, total: int) -> None:
        pass

    def set_value(self, current: int) -> None:
        pass

    def reset(self) -> None:
        pass


class SteppedProgress:
    """
    Coarse progress gauge.

    Splits the range into a fixed number of steps and only calls back when
    a new step is reached, so a calculation over thousands of windows does
    not flood the receiver (typically a Qt signal crossing threads).

    Usage:
        gauge = SteppedProgress(lambda percent: bar.setValue(percent))
        analyst.calculate(..., progress=gauge)
    """

    def __init__(self, callback: Callable[[int], None], steps: int = 50):
        """
        Args:
            callback: Called with the completed percentage (0-100)
            steps: Number of distinct positions the gauge can show
        """
        if steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")
        self.callback = callback
        self.steps = steps
        self._range = 0
        self._last = -1

    @property
    def active(self) -> bool:
        return self._range > 0

    def set_range(self, total: int) -> None:
        self._range = max(0, int(total))
        self._last = -1

    def set_value(self, current: int) -> None:
        if self._range <= 0:
            return
        step = min(self.steps, int(current) * self.steps // self._range)
        if step > self._last:
            self._last = step
            self.callback(step * 100 // self.steps)

    def reset(self) -> None:
        self._range = 0
        self._last = -1
