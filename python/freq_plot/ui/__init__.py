"""FreqPlot UI components"""

from .analysis_worker import AnalysisWorker

__all__ = [
    "AnalysisWorker",
]
