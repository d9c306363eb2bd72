"""
Numeric helpers for presenting a processed curve.

Scale calibration of the reported min/max, the axis range of a curve and
the cursor/peak readout strings (with musical pitch names) shown next to
the plot.
"""
import math

import numpy as np

from .analyst import Algorithm

# Smallest dB range a spectrum scale may show
MIN_DB_RANGE = 90.0

PITCH_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


def calibrate_y_range(algorithm, y_min, y_max, db_range=MIN_DB_RANGE):
    """
    Adjust a calculation's min/max into a displayable vertical range.

    Spectrum levels are limited to `db_range` below 0 dB (never less than
    90 dB) and given half a dB of headroom. Other algorithms pass through.

    Returns:
        (y_min, y_max)
    """
    if Algorithm(algorithm) is not Algorithm.SPECTRUM:
        return y_min, y_max

    db_range = max(float(db_range), MIN_DB_RANGE)
    if y_min < -db_range:
        y_min = -db_range
    if y_max <= -db_range:
        # Everything is out of range, but still show a scale
        y_max = -db_range + 10.0
    else:
        y_max += 0.5
    return y_min, y_max


def plot_x_range(algorithm, sample_rate, window_size, processed_size):
    """
    Horizontal extent of a curve.

    Returns:
        (x_min, x_max): first non-DC bin to Nyquist in Hz for Spectrum,
        zero to the longest lag in seconds otherwise
    """
    if Algorithm(algorithm) is Algorithm.SPECTRUM:
        return sample_rate / window_size, sample_rate / 2.0
    return 0.0, processed_size / sample_rate


def freq_to_midi_note(freq: float) -> float:
    """Fractional MIDI note number of a frequency (A4 = 440 Hz = 69)."""
    return 69.0 + 12.0 * math.log2(freq / 440.0)


def pitch_name(midi_note: float) -> str:
    """Nearest note name with octave, e.g. 69.2 -> "A4"."""
    note = int(np.floor(midi_note + 0.5))
    return f"{PITCH_NAMES[note % 12]}{note // 12 - 1}"


def _pitch_of(freq):
    if freq <= 0.0 or not math.isfinite(freq):
        return "-"
    return pitch_name(freq_to_midi_note(freq))


def _rounded(value):
    # Adds 0.5 then truncates toward zero; -inf (silent bins) prints as-is
    if not math.isfinite(value):
        return str(value)
    return str(int(value + 0.5))


def format_cursor(algorithm, position, value) -> str:
    """
    Readout for the curve value under the cursor.

    Spectrum: "1000 Hz (B5) = -3 dB". Lag domain:
    "0.0023 sec (440 Hz) (A4) = 0.125000", or "" for a non-positive lag.
    """
    if Algorithm(algorithm) is Algorithm.SPECTRUM:
        return f"{int(position + 0.5)} Hz ({_pitch_of(position)}) = {_rounded(value)} dB"
    if position <= 0.0:
        return ""
    freq = 1.0 / position
    return f"{position:.4f} sec ({int(freq + 0.5)} Hz) ({_pitch_of(freq)}) = {value:f}"


def format_peak(algorithm, position, value) -> str:
    """Readout for the peak found near the cursor (see format_cursor)."""
    if Algorithm(algorithm) is Algorithm.SPECTRUM:
        return f"{int(position + 0.5)} Hz ({_pitch_of(position)}) = {value:.1f} dB"
    if position <= 0.0:
        return ""
    freq = 1.0 / position
    return f"{position:.4f} sec ({int(freq + 0.5)} Hz) ({_pitch_of(freq)}) = {value:.3f}"
