"""CLI for freq_plot -- analyze a WAV file and print the curve summary.

Usage:
    freq-plot voice.wav
    freq-plot voice.wav --algorithm enhanced-autocorrelation --size 2048 --peak 0.005
    python3 -m freq_plot voice.wav --window blackman-harris --range 900 1100
"""

from __future__ import annotations

import argparse
import sys

import numpy as np
from scipy.io import wavfile

from freq_plot import __version__
from freq_plot.analysis import (
    Algorithm,
    DEFAULT_WINDOW_FUNCTION,
    SampleRateMismatchError,
    SpectrumAnalyst,
    WINDOW_FUNCTIONS,
    calibrate_y_range,
    format_cursor,
    format_peak,
    mix_selection,
    window_func_index,
)
from freq_plot.analysis.readout import MIN_DB_RANGE

# =============================================================================
# Constant mappings (CLI string -> library constant)
# =============================================================================

ALGORITHM_MAP = {
    "spectrum": Algorithm.SPECTRUM,
    "autocorrelation": Algorithm.AUTOCORRELATION,
    "cuberoot-autocorrelation": Algorithm.CUBE_ROOT_AUTOCORRELATION,
    "enhanced-autocorrelation": Algorithm.ENHANCED_AUTOCORRELATION,
    "cepstrum": Algorithm.CEPSTRUM,
}

WINDOW_NAMES = [name.lower() for name, _ in WINDOW_FUNCTIONS]


# =============================================================================
# Audio input
# =============================================================================


def read_wav(path: str) -> tuple[list[np.ndarray], float]:
    """Read a WAV file into one float32 array per channel (full scale 1.0).

    Integer PCM is scaled by its type range (24-bit arrives left-aligned in
    int32); IEEE float data is passed through.
    """
    rate, data = wavfile.read(path)

    if data.dtype == np.uint8:
        data = (data.astype(np.float32) - 128.0) / 128.0
    elif data.dtype.kind == "i":
        data = data.astype(np.float32) / float(-np.iinfo(data.dtype).min)
    elif data.dtype.kind == "f":
        data = data.astype(np.float32)
    else:
        raise ValueError(f"Unsupported sample format: {data.dtype}")

    if data.ndim == 1:
        return [data], float(rate)
    return [data[:, ch] for ch in range(data.shape[1])], float(rate)


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="freq-plot",
        description="Spectrum, autocorrelation and cepstrum analysis of a WAV file",
    )
    parser.add_argument("input", help="Input WAV file (all channels are summed)")
    parser.add_argument(
        "--algorithm", "-a",
        choices=sorted(ALGORITHM_MAP),
        default="spectrum",
        help="Analysis algorithm (default: spectrum)",
    )
    parser.add_argument(
        "--window", "-w",
        default=WINDOW_NAMES[DEFAULT_WINDOW_FUNCTION],
        help=f"Window function: {', '.join(WINDOW_NAMES)} (default: hann)",
    )
    parser.add_argument(
        "--size", "-s",
        type=int,
        default=1024,
        help="Window size in samples, 32-65536 (default: 1024)",
    )
    parser.add_argument(
        "--peak",
        type=float,
        metavar="POSITION",
        help="Report the peak nearest POSITION (Hz for spectrum, seconds otherwise)",
    )
    parser.add_argument(
        "--range",
        type=float,
        nargs=2,
        metavar=("START", "END"),
        help="Report the curve value over START..END (Hz or seconds)",
    )
    parser.add_argument(
        "--db-range",
        type=float,
        default=MIN_DB_RANGE,
        help="Depth of the dB scale for spectrum min/max (default: 90)",
    )
    parser.add_argument("--version", action="version", version=f"freq-plot {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        window_func = window_func_index(args.window)
    except KeyError:
        parser.error(f"unknown window function: {args.window}")
    algorithm = ALGORITHM_MAP[args.algorithm]

    try:
        channels, rate = read_wav(args.input)
        selection = mix_selection(channels, [rate] * len(channels))
    except (OSError, ValueError, SampleRateMismatchError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if selection.warning:
        print(f"Warning: {selection.warning}", file=sys.stderr)

    analyst = SpectrumAnalyst()
    result = analyst.calculate(
        algorithm, window_func, args.size, selection.sample_rate, selection.samples
    )
    if not result:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    y_min, y_max = calibrate_y_range(algorithm, result.y_min, result.y_max, args.db_range)

    print(f"Algorithm:  {algorithm.display_name}")
    print(f"Window:     {WINDOW_FUNCTIONS[window_func][0]}, {args.size} samples")
    print(f"Windows:    {result.windows}")
    print(f"Bins:       {analyst.processed_size}")
    print(f"Range:      {y_min:.3f} .. {y_max:.3f}")

    if args.range:
        start, end = args.range
        value = analyst.processed_value(start, end)
        print(f"Value:      {format_cursor(algorithm, (start + end) / 2.0, value)}")

    if args.peak is not None:
        position, value = analyst.find_peak(args.peak)
        print(f"Peak:       {format_peak(algorithm, position, value)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
