"""
FFT kernels used by the spectrum analyst.

Thin wrappers over scipy.fft with the conventions the analyst relies on:
forward transforms are unnormalized, inverse transforms scale by 1/N, and
spectra of real frames are handed around as full-length (mirrored) arrays.
"""
import numpy as np
from scipy import fft


def power_spectrum(frame):
    """
    Power (magnitude squared) of each frequency bin.

    Args:
        frame: Real time-domain frame of N samples

    Returns:
        power: float64 array of N/2 bins (DC up to, excluding, Nyquist)
    """
    frame = np.asarray(frame, dtype=np.float64)
    spectrum = fft.rfft(frame)
    half = len(frame) // 2
    return (spectrum.real[:half] ** 2) + (spectrum.imag[:half] ** 2)


def real_fft(frame):
    """
    Forward FFT of a real frame.

    Args:
        frame: Real time-domain frame of N samples

    Returns:
        real, imag: float64 arrays of N values each. Bins above N/2 hold
        the conjugate mirror of the lower half.
    """
    spectrum = fft.fft(np.asarray(frame, dtype=np.float64))
    return spectrum.real, spectrum.imag


def inverse_real_fft(real, imag=None):
    """
    Inverse FFT of a conjugate-symmetric spectrum.

    Only bins 0..N/2 of the inputs are read; the upper half is implied by
    symmetry. A missing imaginary part is treated as zero.

    Args:
        real: Real part of the spectrum, N values
        imag: Imaginary part of the spectrum, N values, or None

    Returns:
        frame: float64 array of N time-domain samples
    """
    real = np.asarray(real, dtype=np.float64)
    n = len(real)
    half = n // 2 + 1
    if imag is None:
        spectrum = real[:half].astype(np.complex128)
    else:
        spectrum = real[:half] + 1j * np.asarray(imag, dtype=np.float64)[:half]
    return fft.irfft(spectrum, n=n)
