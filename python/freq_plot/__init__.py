"""
FreqPlot - Frequency analysis of audio selections

Computes spectra, autocorrelations and cepstra of a block of samples and
answers value and peak queries for plotting.
"""

__version__ = "1.0.0"

from .analysis import (
    Algorithm,
    AnalysisFailure,
    AnalysisRequest,
    CalculationResult,
    SpectrumAnalyst,
)

__all__ = [
    "Algorithm",
    "AnalysisFailure",
    "AnalysisRequest",
    "CalculationResult",
    "SpectrumAnalyst",
]

# Also export config utilities
from .config import (
    AnalysisSettings,
    SettingsValidationError,
    save_settings,
    load_settings,
)
