"""
Spectrum analyst: windowed FFT analysis of a block of audio.

Turns a fully buffered block of samples into one processed curve, either a
power spectrum in dB (frequency domain) or one of the autocorrelation /
cepstrum variants (lag domain), and answers queries against that curve:
the value over an arbitrary frequency or lag range, and the local maximum
nearest a given position.

Frames of `window_size` samples are taken with 50% overlap, windowed,
transformed and summed; the sum is then post-processed according to the
selected algorithm. Each algorithm is a small strategy object, so the
windowing loop is shared and every post-processing rule can be tested on
its own.

References:
    Tolonen, T. and Karjalainen, M. (2000). A computationally efficient
    multipitch analysis model. IEEE Trans. Speech and Audio Processing.
"""
import math
import os
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional

import numpy as np

from .cubic import NO_MAXIMUM, cubic_interpolate, cubic_maximize
from .progress import NullProgress, ProgressSink
from .transforms import inverse_real_fft, power_spectrum, real_fft
from .windows import is_valid_window_func, window_coefficients

DEBUG = os.environ.get("FREQPLOT_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}

MIN_WINDOW_SIZE = 32
MAX_WINDOW_SIZE = 65536

# Window sizes offered to users (the engine accepts any size in range)
WINDOW_SIZE_CHOICES = (128, 256, 512, 1024, 2048, 4096, 8192, 16384, 32768, 65536)

# Cepstrum power floor, relative to window_size^2 (full-scale amplitude 1.0)
CEPSTRUM_POWER_FLOOR = 1e-20

# Edge bins left out of the cepstrum's reported min/max
CEPSTRUM_IGNORED_BINS = 4


def _debug_log(message: str) -> None:
    if DEBUG:
        print(message)


class Algorithm(IntEnum):
    """Analysis modes. Values are the persisted choice indexes."""
    SPECTRUM = 0
    AUTOCORRELATION = 1
    CUBE_ROOT_AUTOCORRELATION = 2
    ENHANCED_AUTOCORRELATION = 3
    CEPSTRUM = 4

    @property
    def display_name(self) -> str:
        return _ALGORITHM_NAMES[self]

    @property
    def is_frequency_domain(self) -> bool:
        """True when the curve is indexed by frequency rather than lag."""
        return self is Algorithm.SPECTRUM


_ALGORITHM_NAMES = {
    Algorithm.SPECTRUM: "Spectrum",
    Algorithm.AUTOCORRELATION: "Standard Autocorrelation",
    Algorithm.CUBE_ROOT_AUTOCORRELATION: "Cuberoot Autocorrelation",
    Algorithm.ENHANCED_AUTOCORRELATION: "Enhanced Autocorrelation",
    Algorithm.CEPSTRUM: "Cepstrum",
}

_ALGORITHM_VALUES = frozenset(int(member) for member in Algorithm)


class AnalysisFailure(Enum):
    """Why a calculation produced no curve."""
    INVALID_PARAMETERS = "invalid_parameters"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass
class AnalysisRequest:
    """Parameters of one calculation. `samples` is borrowed, not copied."""
    algorithm: Algorithm
    window_func: int
    window_size: int
    sample_rate: float
    samples: np.ndarray

    @property
    def sample_count(self) -> int:
        return len(self.samples)


@dataclass
class CalculationResult:
    """Outcome of SpectrumAnalyst.calculate()."""
    success: bool
    y_min: float = 0.0
    y_max: float = 0.0
    windows: int = 0
    failure: Optional[AnalysisFailure] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.success


def min_max(values, ignore: int = 0) -> tuple[float, float]:
    """
    Minimum and maximum of a curve, optionally skipping edge bins.

    Args:
        values: 1-D array
        ignore: Number of bins to skip at each end

    Returns:
        (y_min, y_max)
    """
    values = np.asarray(values)
    if ignore > 0 and len(values) > 2 * ignore:
        values = values[ignore:len(values) - ignore]
    return float(np.min(values)), float(np.max(values))


def prune_peaks(curve: np.ndarray) -> np.ndarray:
    """
    Peak pruning for the enhanced autocorrelation (in place).

    Clips the curve at zero, subtracts a time-stretched (factor 2, linearly
    interpolated) copy of the clipped curve from itself and clips again.
    This removes the repeated peaks at multiples of the true period.

    Args:
        curve: Writable 1-D float array

    Returns:
        The same array
    """
    np.maximum(curve, 0.0, out=curve)
    clipped = curve.copy()

    size = len(clipped)
    index = np.arange(size)
    lower = clipped[index // 2]
    upper = clipped[np.minimum(index // 2 + 1, size - 1)]
    stretched = np.where(index % 2 == 0, lower, (lower + upper) / 2.0)

    curve -= stretched
    np.maximum(curve, 0.0, out=curve)
    return curve


class SpectrumStrategy:
    """Power spectrum in dB, scaled so a full-scale sine reads 0 dB."""
    algorithm = Algorithm.SPECTRUM

    def transform(self, frame):
        return power_spectrum(frame)

    def post_process(self, curve, windows, normalization):
        scale = normalization / windows
        with np.errstate(divide="ignore"):
            curve[:] = 10.0 * np.log10(curve * scale)
        return min_max(curve)


class AutocorrelationStrategy:
    """
    Autocorrelation via Wiener-Khinchin: FFT of the compressed power
    spectrum. The standard variant compresses with a square root.
    """
    algorithm = Algorithm.AUTOCORRELATION

    def compress(self, power):
        return np.sqrt(power)

    def transform(self, frame):
        real, imag = real_fft(frame)
        power = real * real + imag * imag
        correlation, _ = real_fft(self.compress(power))
        return correlation[:len(frame) // 2]

    def post_process(self, curve, windows, normalization):
        curve /= windows
        return min_max(curve)


class CubeRootAutocorrelationStrategy(AutocorrelationStrategy):
    """Autocorrelation with cube-root compression (Tolonen & Karjalainen)."""
    algorithm = Algorithm.CUBE_ROOT_AUTOCORRELATION

    def compress(self, power):
        return np.cbrt(power)


class EnhancedAutocorrelationStrategy(CubeRootAutocorrelationStrategy):
    """Cube-root autocorrelation followed by peak pruning."""
    algorithm = Algorithm.ENHANCED_AUTOCORRELATION

    def post_process(self, curve, windows, normalization):
        curve /= windows
        prune_peaks(curve)
        return min_max(curve)


class CepstrumStrategy:
    """Real cepstrum: inverse FFT of the log power spectrum."""
    algorithm = Algorithm.CEPSTRUM

    def transform(self, frame):
        n = len(frame)
        real, imag = real_fft(frame)
        power = real * real + imag * imag
        floor = CEPSTRUM_POWER_FLOOR * n * n
        log_power = np.log(np.maximum(power, floor))
        return inverse_real_fft(log_power)[:n // 2]

    def post_process(self, curve, windows, normalization):
        curve /= windows
        # Edge bins are unstable; keep them in the curve, not in the scale
        return min_max(curve, ignore=CEPSTRUM_IGNORED_BINS)


_STRATEGIES = {
    Algorithm.SPECTRUM: SpectrumStrategy(),
    Algorithm.AUTOCORRELATION: AutocorrelationStrategy(),
    Algorithm.CUBE_ROOT_AUTOCORRELATION: CubeRootAutocorrelationStrategy(),
    Algorithm.ENHANCED_AUTOCORRELATION: EnhancedAutocorrelationStrategy(),
    Algorithm.CEPSTRUM: CepstrumStrategy(),
}


def strategy_for(algorithm):
    """Transform/post-processing strategy of an algorithm."""
    return _STRATEGIES[Algorithm(algorithm)]


def _is_index(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _validate(algorithm, window_func, window_size, sample_rate) -> Optional[str]:
    """Return a description of the first invalid parameter, or None."""
    if not _is_index(window_size) or not MIN_WINDOW_SIZE <= window_size <= MAX_WINDOW_SIZE:
        return (
            f"Window size must be between {MIN_WINDOW_SIZE} and "
            f"{MAX_WINDOW_SIZE}, got {window_size!r}"
        )
    if not _is_index(algorithm) or int(algorithm) not in _ALGORITHM_VALUES:
        return f"Unknown algorithm: {algorithm!r}"
    if not is_valid_window_func(window_func):
        return f"Unknown window function: {window_func!r}"
    try:
        rate = float(sample_rate)
    except (TypeError, ValueError):
        return f"Invalid sample rate: {sample_rate!r}"
    if not math.isfinite(rate) or rate <= 0.0:
        return f"Sample rate must be positive, got {sample_rate!r}"
    return None


class SpectrumAnalyst:
    """
    Owns the processed curve of the most recent calculation.

    Not thread-safe: a calculation must not overlap another calculation or
    a query on the same instance.

    Usage:
        analyst = SpectrumAnalyst()
        result = analyst.calculate(Algorithm.SPECTRUM, 3, 1024, 44100, audio)
        if result:
            level_db = analyst.processed_value(990.0, 1010.0)
            peak_hz, peak_db = analyst.find_peak(1000.0)
    """

    def __init__(self):
        self._clear()

    def _clear(self):
        self._processed = np.zeros(0, dtype=np.float32)
        self._algorithm = Algorithm.SPECTRUM
        self._sample_rate = 0.0
        self._window_size = 0

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def processed_size(self) -> int:
        """Number of meaningful bins: window_size / 2, or 0 without a curve."""
        return len(self._processed) // 2

    @property
    def processed(self) -> np.ndarray:
        """Read-only view of the meaningful half of the curve."""
        view = self._processed[:self.processed_size]
        view.flags.writeable = False
        return view

    def _fail(self, failure, message):
        _debug_log(f"[ANALYST] calculate failed ({failure.value}): {message}")
        return CalculationResult(success=False, failure=failure, message=message)

    def calculate_request(self, request: AnalysisRequest,
                          progress: Optional[ProgressSink] = None) -> CalculationResult:
        """Run calculate() with the parameters bundled in `request`."""
        return self.calculate(
            request.algorithm,
            request.window_func,
            request.window_size,
            request.sample_rate,
            request.samples,
            progress=progress,
        )

    def calculate(self, algorithm, window_func, window_size, sample_rate, samples,
                  progress: Optional[ProgressSink] = None) -> CalculationResult:
        """
        Compute the processed curve, replacing any previous one.

        The previous curve is discarded first, so a failed call leaves the
        analyst without a curve.

        Args:
            algorithm: Algorithm (or its integer value)
            window_func: Index into the window function catalog
            window_size: Frame length in samples, 32..65536
            sample_rate: Sample rate in Hz
            samples: 1-D array of samples; its length is the sample count
            progress: Optional sink told how many samples have been consumed

        Returns:
            CalculationResult with the min/max of the curve for scale
            calibration, or a failure (INVALID_PARAMETERS or
            INSUFFICIENT_DATA) and a message.
        """
        self._clear()

        problem = _validate(algorithm, window_func, window_size, sample_rate)
        if problem:
            return self._fail(AnalysisFailure.INVALID_PARAMETERS, problem)

        data = np.asarray(samples, dtype=np.float32)
        if data.ndim != 1:
            return self._fail(
                AnalysisFailure.INVALID_PARAMETERS,
                f"Samples must be one-dimensional, got shape {data.shape}",
            )
        if len(data) < window_size:
            return self._fail(
                AnalysisFailure.INSUFFICIENT_DATA,
                f"Not enough data selected: need {window_size} samples, got {len(data)}",
            )

        algorithm = Algorithm(algorithm)
        window_size = int(window_size)
        sample_rate = float(sample_rate)
        strategy = strategy_for(algorithm)
        progress = progress if progress is not None else NullProgress()

        window = window_coefficients(window_func, window_size)

        # Scale so that an amplitude of 1.0 in the time domain reads 0 dB
        window_sum = float(np.sum(window, dtype=np.float64))
        if window_sum > 0:
            normalization = 4.0 / (window_sum * window_sum)
        else:
            normalization = 1.0

        half = window_size // 2
        accumulated = np.zeros(half, dtype=np.float64)

        progress.set_range(len(data))
        start = 0
        windows = 0
        while start + window_size <= len(data):
            frame = window * data[start:start + window_size]
            accumulated += strategy.transform(frame)
            progress.set_value(start)
            start += half
            windows += 1
        progress.reset()

        if windows == 0:
            return self._fail(AnalysisFailure.INSUFFICIENT_DATA, "No complete window in data")

        y_min, y_max = strategy.post_process(accumulated, windows, normalization)

        processed = np.zeros(window_size, dtype=np.float32)
        processed[:half] = accumulated

        self._processed = processed
        self._algorithm = algorithm
        self._sample_rate = sample_rate
        self._window_size = window_size

        _debug_log(
            f"[ANALYST] {algorithm.display_name}: size={window_size}, "
            f"rate={sample_rate:g}, windows={windows}, "
            f"min={y_min:.3f}, max={y_max:.3f}"
        )

        return CalculationResult(
            success=True,
            y_min=y_min,
            y_max=y_max,
            windows=windows,
            message="ok",
        )

    def position_to_bin(self, position: float) -> float:
        """Convert a frequency (Hz, Spectrum) or lag (s) to a curve index."""
        if self._algorithm is Algorithm.SPECTRUM:
            return position * self._window_size / self._sample_rate
        return position * self._sample_rate

    def bin_to_position(self, index: float) -> float:
        """Convert a (fractional) curve index to frequency (Hz) or lag (s)."""
        if self._algorithm is Algorithm.SPECTRUM:
            return index * self._sample_rate / self._window_size
        return index / self._sample_rate

    def processed_value(self, start: float, end: float) -> float:
        """
        Curve value over a frequency (Spectrum) or lag range.

        Ranges narrower than one bin are read by cubic interpolation at the
        range midpoint; wider ranges average the curve over the range,
        weighting partially covered edge bins by their coverage.

        Returns:
            value: Curve value, or 0.0 without a curve
        """
        size = self.processed_size
        if size == 0:
            return 0.0

        curve = self._processed
        bin0 = self.position_to_bin(start)
        bin1 = self.position_to_bin(end)
        binwidth = bin1 - bin0

        if binwidth < 1.0:
            binmid = (bin0 + bin1) / 2.0
            ibin = int(binmid) - 1
            if ibin < 1:
                ibin = 1
            if ibin >= size - 3:
                ibin = max(0, size - 4)
            return cubic_interpolate(
                curve[ibin], curve[ibin + 1], curve[ibin + 2], curve[ibin + 3],
                binmid - ibin,
            )

        bin0 = min(max(bin0, 0.0), size - 1.0)
        bin1 = min(max(bin1, 0.0), size - 1.0)
        first = int(bin0)
        last = int(bin1)

        value = 0.0
        if last > first:
            value += float(curve[first]) * (first + 1 - bin0)
        value += float(np.sum(curve[first + 1:last], dtype=np.float64))
        value += float(curve[last]) * (bin1 - last)

        return value / binwidth

    def find_peak(self, position: float) -> tuple[float, float]:
        """
        Local maximum of the curve nearest to `position`.

        Maxima are visited in increasing bin order and refined by a cubic
        fit; the search ends at the first maximum that is both the closest
        so far and beyond `position`.

        Args:
            position: Frequency in Hz (Spectrum) or lag in seconds

        Returns:
            (peak_position, peak_value), or (0.0, 0.0) if the curve has no
            local maximum
        """
        best_peak = 0.0
        best_value = 0.0
        size = self.processed_size
        if size <= 1:
            return best_peak, best_value

        curve = self._processed[:size]
        rising = curve[1:] > curve[:-1]  # rising[k]: curve[k + 1] > curve[k]

        bins = np.arange(3, size - 1)
        if bins.size == 0:
            return best_peak, best_value
        now_up = rising[bins - 1]
        was_up = rising[bins - 2]
        # The first comparison is carried over from bins 0 and 1
        was_up[0] = rising[0]

        best_dist = math.inf
        for peak_bin in bins[was_up & ~now_up]:
            left = int(peak_bin) - 2
            x, value = cubic_maximize(
                curve[left], curve[left + 1], curve[left + 2], curve[left + 3]
            )
            if x == NO_MAXIMUM:
                continue

            peak = self.bin_to_position(left + x)
            dist = abs(peak - position)
            if dist < best_dist:
                best_peak = peak
                best_dist = dist
                best_value = value
                if peak > position:
                    break

        return best_peak, best_value
