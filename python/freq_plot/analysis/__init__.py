"""
Spectral analysis for the frequency plot.

Provides the window function catalog, FFT kernels, cubic peak
interpolation, the spectrum analyst engine with its curve queries, and
helpers for gathering audio and presenting the results.
"""
from .windows import (
    WINDOW_FUNCTIONS,
    DEFAULT_WINDOW_FUNCTION,
    num_window_funcs,
    window_func_name,
    window_func_index,
    window_coefficients,
    apply_window_func,
)
from .transforms import (
    power_spectrum,
    real_fft,
    inverse_real_fft,
)
from .cubic import (
    NO_MAXIMUM,
    cubic_interpolate,
    cubic_maximize,
)
from .progress import (
    ProgressSink,
    NullProgress,
    SteppedProgress,
)
from .analyst import (
    Algorithm,
    AnalysisFailure,
    AnalysisRequest,
    CalculationResult,
    SpectrumAnalyst,
    MIN_WINDOW_SIZE,
    MAX_WINDOW_SIZE,
    WINDOW_SIZE_CHOICES,
    strategy_for,
)
from .selection import (
    MAX_ANALYSIS_SAMPLES,
    SampleRateMismatchError,
    SelectionBuffer,
    mix_selection,
)
from .readout import (
    calibrate_y_range,
    plot_x_range,
    freq_to_midi_note,
    pitch_name,
    format_cursor,
    format_peak,
)

__all__ = [
    # Window functions
    'WINDOW_FUNCTIONS',
    'DEFAULT_WINDOW_FUNCTION',
    'num_window_funcs',
    'window_func_name',
    'window_func_index',
    'window_coefficients',
    'apply_window_func',
    # Transforms
    'power_spectrum',
    'real_fft',
    'inverse_real_fft',
    # Cubic interpolation
    'NO_MAXIMUM',
    'cubic_interpolate',
    'cubic_maximize',
    # Progress
    'ProgressSink',
    'NullProgress',
    'SteppedProgress',
    # Engine
    'Algorithm',
    'AnalysisFailure',
    'AnalysisRequest',
    'CalculationResult',
    'SpectrumAnalyst',
    'MIN_WINDOW_SIZE',
    'MAX_WINDOW_SIZE',
    'WINDOW_SIZE_CHOICES',
    'strategy_for',
    # Selection
    'MAX_ANALYSIS_SAMPLES',
    'SampleRateMismatchError',
    'SelectionBuffer',
    'mix_selection',
    # Readout
    'calibrate_y_range',
    'plot_x_range',
    'freq_to_midi_note',
    'pitch_name',
    'format_cursor',
    'format_peak',
]
