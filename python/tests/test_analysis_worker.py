"""Tests for the background analysis worker (run synchronously)."""

import numpy as np

from freq_plot.analysis import Algorithm, SpectrumAnalyst
from freq_plot.ui.analysis_worker import AnalysisWorker


def _connect(worker):
    events = {"progress": [], "finished": [], "failed": []}
    worker.step_progress.connect(lambda name, percent: events["progress"].append((name, percent)))
    worker.finished.connect(lambda summary: events["finished"].append(summary))
    worker.failed.connect(lambda message: events["failed"].append(message))
    return events


def test_worker_emits_summary(qapp, sine):
    analyst = SpectrumAnalyst()
    worker = AnalysisWorker(sine(1000.0, duration=0.5), 44100, window_size=1024, analyst=analyst)
    events = _connect(worker)

    worker.run()

    assert events["failed"] == []
    assert len(events["finished"]) == 1
    summary = events["finished"][0]
    assert summary["algorithm"] == int(Algorithm.SPECTRUM)
    assert summary["processed_size"] == 512
    assert summary["windows"] == worker.estimated_windows() == 42
    assert summary["y_max"] > summary["y_min"]
    assert summary["elapsed_s"] >= 0.0
    assert analyst.processed_size == 512


def test_worker_progress_is_monotonic_and_completes(qapp, harmonic_tone):
    worker = AnalysisWorker(harmonic_tone(220.0, duration=2.0), 8000,
                            algorithm=Algorithm.ENHANCED_AUTOCORRELATION, window_size=256)
    events = _connect(worker)

    worker.run()

    percents = [percent for _, percent in events["progress"]]
    assert percents[0] == 0
    assert percents == sorted(percents)
    assert events["progress"][-1] == ("Complete!", 100)
    assert len(events["finished"]) == 1


def test_worker_reports_insufficient_data(qapp):
    worker = AnalysisWorker(np.zeros(100, dtype=np.float32), 44100, window_size=1024)
    events = _connect(worker)

    worker.run()

    assert events["finished"] == []
    assert len(events["failed"]) == 1
    assert "Not enough data" in events["failed"][0]
    assert worker.estimated_windows() == 0


def test_worker_reports_invalid_parameters(qapp):
    worker = AnalysisWorker(np.zeros(4096, dtype=np.float32), 0, window_size=1024)
    events = _connect(worker)

    worker.run()

    assert events["finished"] == []
    assert "Sample rate" in events["failed"][0]


def test_stopped_worker_does_nothing(qapp, sine):
    worker = AnalysisWorker(sine(440.0), 44100)
    events = _connect(worker)

    worker.stop()
    worker.run()

    assert events == {"progress": [], "finished": [], "failed": []}
    assert worker.analyst.processed_size == 0
