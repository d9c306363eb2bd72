"""
Gathering the block of audio handed to the spectrum analyst.

All selected tracks are summed into one mono buffer. The first track sets
the sample rate and length; very long selections are cut to a fixed
maximum so a single calculation stays bounded.
"""
import os
from dataclasses import dataclass

import numpy as np

DEBUG = os.environ.get("FREQPLOT_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}

# 10 * 2^20 samples (about 4 minutes at 44.1 kHz)
MAX_ANALYSIS_SAMPLES = 10485760


def _debug_log(message: str) -> None:
    if DEBUG:
        print(message)


class SampleRateMismatchError(ValueError):
    """Raised when the selected tracks do not share one sample rate."""
    pass


@dataclass
class SelectionBuffer:
    """Mixed-down selection ready for analysis."""
    samples: np.ndarray     # float32, mono
    sample_rate: float      # 0.0 when nothing was selected
    track_count: int
    truncated: bool = False
    warning: str = ""       # User-facing note when truncated

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return len(self.samples) / self.sample_rate


def mix_selection(channels, sample_rates, max_samples: int = MAX_ANALYSIS_SAMPLES) -> SelectionBuffer:
    """
    Sum selected tracks into one buffer.

    Args:
        channels: Sequence of 1-D sample arrays, one per selected track
        sample_rates: Sample rate of each track (Hz)
        max_samples: Length cap for the mixed buffer

    Returns:
        SelectionBuffer. Later tracks shorter than the first are zero-padded,
        longer ones are cut to the first track's length.

    Raises:
        SampleRateMismatchError: if tracks have different sample rates
        ValueError: if channels and sample_rates differ in length
    """
    channels = list(channels)
    sample_rates = list(sample_rates)
    if len(channels) != len(sample_rates):
        raise ValueError(
            f"Got {len(channels)} tracks but {len(sample_rates)} sample rates"
        )

    if not channels:
        return SelectionBuffer(
            samples=np.zeros(0, dtype=np.float32),
            sample_rate=0.0,
            track_count=0,
        )

    rate = float(sample_rates[0])
    for other in sample_rates[1:]:
        if float(other) != rate:
            raise SampleRateMismatchError(
                "To plot the spectrum, all selected tracks must be the same sample rate."
            )

    first = np.asarray(channels[0], dtype=np.float32).ravel()
    length = len(first)
    truncated = length > max_samples
    if truncated:
        length = max_samples

    mixed = first[:length].copy()
    for channel in channels[1:]:
        data = np.asarray(channel, dtype=np.float32).ravel()[:length]
        mixed[:len(data)] += data

    warning = ""
    if truncated:
        warning = (
            "Too much audio was selected. Only the first "
            f"{(length / rate if rate > 0 else 0.0):.1f} seconds of audio will be analyzed."
        )
        _debug_log(f"[SELECTION] truncated {len(first)} -> {length} samples")

    return SelectionBuffer(
        samples=mixed,
        sample_rate=rate,
        track_count=len(channels),
        truncated=truncated,
        warning=warning,
    )
