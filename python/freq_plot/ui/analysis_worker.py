"""
Non-blocking spectrum calculation worker.

Runs SpectrumAnalyst.calculate() in a background thread so a large window
size over a long selection does not freeze the interface, and relays the
analyst's progress as coarse percentage signals.
"""
import os
import threading
import time
from PyQt6.QtCore import QThread, pyqtSignal

from freq_plot.analysis import (
    Algorithm,
    DEFAULT_WINDOW_FUNCTION,
    SpectrumAnalyst,
    SteppedProgress,
)

DEBUG = os.environ.get("FREQPLOT_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}


def _debug_log(message: str) -> None:
    if DEBUG:
        print(message)


class AnalysisWorker(QThread):
    """
    Worker thread for one spectrum calculation.

    The analyst is handed over for the duration of the run; callers must not
    query it until finished or failed has been emitted.
    """

    # Signals
    step_progress = pyqtSignal(str, int)  # (step_name, percentage)
    finished = pyqtSignal(dict)            # Emits calculation summary
    failed = pyqtSignal(str)               # Emits error message

    def __init__(self, samples, sample_rate, algorithm=Algorithm.SPECTRUM,
                 window_func=DEFAULT_WINDOW_FUNCTION, window_size=1024, analyst=None):
        """
        Initialize analysis worker.

        Args:
            samples: Mono float32 NumPy array (e.g. SelectionBuffer.samples)
            sample_rate: Sample rate in Hz
            algorithm: Algorithm to run
            window_func: Window function catalog index
            window_size: Frame length in samples
            analyst: SpectrumAnalyst to fill (a new one if None)
        """
        super().__init__()
        self.samples = samples
        self.sample_rate = sample_rate
        self.algorithm = algorithm
        self.window_func = window_func
        self.window_size = window_size
        self.analyst = analyst if analyst is not None else SpectrumAnalyst()
        self._start_time = None
        self._stop_event = threading.Event()

    def stop(self):
        """
        Request cancellation.

        Only honoured before the calculation starts; a running
        calculation always completes.
        """
        self._stop_event.set()

    def _should_stop(self) -> bool:
        return self._stop_event.is_set()

    def _on_progress(self, percent: int) -> None:
        self.step_progress.emit("Calculating...", percent)

    def run(self):
        """
        Run the calculation in the background thread.

        Called by QThread.start(). Emits step_progress while windows are
        consumed, then finished with the result summary or failed with the
        analyst's message.
        """
        self._start_time = time.time()

        try:
            if self._should_stop():
                return

            self.step_progress.emit("Calculating...", 0)
            result = self.analyst.calculate(
                self.algorithm,
                self.window_func,
                self.window_size,
                self.sample_rate,
                self.samples,
                progress=SteppedProgress(self._on_progress),
            )

            if not result.success:
                self.failed.emit(result.message)
                return

            elapsed = time.time() - self._start_time
            self.step_progress.emit("Complete!", 100)
            _debug_log(f"[WORKER] {self.analyst.algorithm.display_name} took {elapsed:.2f}s")

            self.finished.emit({
                'algorithm': int(self.analyst.algorithm),
                'y_min': result.y_min,
                'y_max': result.y_max,
                'windows': result.windows,
                'processed_size': self.analyst.processed_size,
                'elapsed_s': elapsed,
            })

        except Exception as e:
            # Catch any unexpected errors
            self.failed.emit(str(e))

    def estimated_windows(self) -> int:
        """Number of overlapped windows the calculation will process."""
        hop = max(1, int(self.window_size) // 2)
        if len(self.samples) < self.window_size:
            return 0
        return (len(self.samples) - int(self.window_size)) // hop + 1
