"""
Window function catalog for spectral analysis.

Indexed catalog of the tapers offered by the frequency plot. The index of
each entry is stable (it is what settings persist), so new windows must only
ever be appended.
"""
from functools import partial

import numpy as np
from scipy.signal import windows


def _rectangular(length):
    return np.ones(length)


def _welch(length):
    # Parabolic taper, zero at both ends
    if length < 2:
        return np.ones(length)
    half = (length - 1) / 2.0
    n = np.arange(length, dtype=np.float64)
    return 1.0 - ((n - half) / half) ** 2


def _gaussian(length, a):
    if length < 2:
        return np.ones(length)
    return windows.gaussian(length, std=(length - 1) / (2.0 * a), sym=True)


WINDOW_FUNCTIONS = (
    ("Rectangular", _rectangular),
    ("Bartlett", partial(windows.bartlett, sym=True)),
    ("Hamming", partial(windows.hamming, sym=True)),
    ("Hann", partial(windows.hann, sym=True)),
    ("Blackman", partial(windows.blackman, sym=True)),
    ("Blackman-Harris", partial(windows.blackmanharris, sym=True)),
    ("Welch", _welch),
    ("Gaussian(a=2.5)", partial(_gaussian, a=2.5)),
    ("Gaussian(a=3.5)", partial(_gaussian, a=3.5)),
    ("Gaussian(a=4.5)", partial(_gaussian, a=4.5)),
)

DEFAULT_WINDOW_FUNCTION = 3  # Hann


def num_window_funcs() -> int:
    """Number of entries in the catalog."""
    return len(WINDOW_FUNCTIONS)


def is_valid_window_func(index) -> bool:
    """True if index addresses a catalog entry (bools are rejected)."""
    if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
        return False
    return 0 <= index < len(WINDOW_FUNCTIONS)


def window_func_name(index: int) -> str:
    """
    Display name of a window function.

    Raises:
        IndexError: if index is outside the catalog
    """
    if not is_valid_window_func(index):
        raise IndexError(f"Unknown window function index: {index!r}")
    return WINDOW_FUNCTIONS[index][0]


def window_func_index(name: str) -> int:
    """
    Reverse lookup of a window function by name.

    Matching ignores case, spaces, hyphens and underscores, so "hann",
    "Blackman Harris" and "blackman_harris" all resolve.

    Raises:
        KeyError: if no window has that name
    """
    def _normalize(text):
        return "".join(ch for ch in str(text).lower() if ch not in " -_")

    wanted = _normalize(name)
    for index, (display, _) in enumerate(WINDOW_FUNCTIONS):
        if _normalize(display) == wanted:
            return index
    raise KeyError(f"Unknown window function: {name!r}")


def window_coefficients(index: int, length: int) -> np.ndarray:
    """
    Build the taper for a window of `length` samples.

    Equivalent to applying the window function to an all-ones
    (rectangular) buffer.

    Args:
        index: Catalog index
        length: Window length in samples

    Returns:
        coefficients: float32 array of `length` values
    """
    if not is_valid_window_func(index):
        raise IndexError(f"Unknown window function index: {index!r}")
    builder = WINDOW_FUNCTIONS[index][1]
    return np.asarray(builder(int(length)), dtype=np.float32)


def apply_window_func(index: int, buffer: np.ndarray) -> np.ndarray:
    """
    Multiply `buffer` in place by the selected taper.

    Args:
        index: Catalog index
        buffer: Writable float array; its length sets the window length

    Returns:
        The same buffer, for chaining
    """
    buffer *= window_coefficients(index, len(buffer))
    return buffer
