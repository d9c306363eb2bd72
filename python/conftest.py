"""Shared pytest fixtures for FreqPlot tests."""

import os

import numpy as np
import pytest


# Run Qt tests headlessly by default.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    """Provide a single QCoreApplication instance for worker tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app
    app.processEvents()


@pytest.fixture
def sine():
    """Factory for a full-scale sine wave as float32."""
    def _make(freq, sample_rate=44100, duration=1.0, amplitude=1.0):
        n = int(sample_rate * duration)
        t = np.arange(n, dtype=np.float64) / float(sample_rate)
        return (amplitude * np.sin(2.0 * np.pi * freq * t)).astype(np.float32)
    return _make


@pytest.fixture
def harmonic_tone():
    """Factory for a tone made of equal-amplitude harmonics of f0."""
    def _make(f0, sample_rate=8000, duration=1.0, harmonics=5):
        n = int(sample_rate * duration)
        t = np.arange(n, dtype=np.float64) / float(sample_rate)
        tone = sum(np.sin(2.0 * np.pi * f0 * k * t) for k in range(1, harmonics + 1))
        return (0.8 * tone / harmonics).astype(np.float32)
    return _make
