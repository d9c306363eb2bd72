"""Tests for the window function catalog and FFT kernels."""

import numpy as np
import pytest

from freq_plot.analysis import windows
from freq_plot.analysis.transforms import inverse_real_fft, power_spectrum, real_fft


def test_catalog_names_and_order():
    assert windows.num_window_funcs() == 10
    assert windows.window_func_name(0) == "Rectangular"
    assert windows.window_func_name(3) == "Hann"
    assert windows.window_func_name(9) == "Gaussian(a=4.5)"
    assert windows.window_func_name(windows.DEFAULT_WINDOW_FUNCTION) == "Hann"


@pytest.mark.parametrize("bad", [-1, 10, 2.0, True, None])
def test_catalog_rejects_unknown_index(bad):
    assert not windows.is_valid_window_func(bad)
    with pytest.raises(IndexError):
        windows.window_func_name(bad)


def test_window_func_index_lookup():
    assert windows.window_func_index("hann") == 3
    assert windows.window_func_index("Blackman Harris") == 5
    assert windows.window_func_index("blackman_harris") == 5
    assert windows.window_func_index("gaussian(a=3.5)") == 8
    with pytest.raises(KeyError):
        windows.window_func_index("kaiser")


@pytest.mark.parametrize("index", range(10))
def test_every_window_is_a_bounded_taper(index):
    coeffs = windows.window_coefficients(index, 256)
    assert coeffs.dtype == np.float32
    assert coeffs.shape == (256,)
    assert np.all(np.isfinite(coeffs))
    assert np.all(coeffs >= -1e-6)
    assert np.max(coeffs) <= 1.0 + 1e-6
    assert np.sum(coeffs) > 0
    # Symmetric
    np.testing.assert_allclose(coeffs, coeffs[::-1], atol=1e-6)


def test_rectangular_and_hann_shapes():
    np.testing.assert_array_equal(windows.window_coefficients(0, 32), np.ones(32, dtype=np.float32))

    hann = windows.window_coefficients(3, 65)
    assert hann[0] == pytest.approx(0.0, abs=1e-7)
    assert hann[-1] == pytest.approx(0.0, abs=1e-7)
    assert hann[32] == pytest.approx(1.0)


def test_welch_is_parabolic():
    welch = windows.window_coefficients(6, 5)
    np.testing.assert_allclose(welch, [0.0, 0.75, 1.0, 0.75, 0.0], atol=1e-7)


def test_apply_window_func_in_place():
    buffer = np.ones(64, dtype=np.float32)
    result = windows.apply_window_func(4, buffer)
    assert result is buffer
    np.testing.assert_allclose(buffer, windows.window_coefficients(4, 64))


def test_power_spectrum_of_bin_centred_cosine():
    n = 64
    k = np.arange(n)
    frame = np.cos(2.0 * np.pi * 5 * k / n)

    power = power_spectrum(frame)

    assert power.shape == (32,)
    assert power[5] == pytest.approx((n / 2) ** 2)
    mask = np.ones(32, dtype=bool)
    mask[5] = False
    assert np.max(power[mask]) < 1e-12


def test_real_fft_returns_mirrored_halves():
    rng = np.random.default_rng(4242)
    frame = rng.normal(size=128)

    real, imag = real_fft(frame)
    expected = np.fft.fft(frame)

    np.testing.assert_allclose(real, expected.real, atol=1e-9)
    np.testing.assert_allclose(imag, expected.imag, atol=1e-9)
    for k in range(1, 64):
        assert real[128 - k] == pytest.approx(real[k])
        assert imag[128 - k] == pytest.approx(-imag[k])


def test_inverse_real_fft_round_trip():
    rng = np.random.default_rng(4243)
    frame = rng.normal(size=256)

    real, imag = real_fft(frame)
    np.testing.assert_allclose(inverse_real_fft(real, imag), frame, atol=1e-9)


def test_inverse_real_fft_of_constant_is_impulse():
    out = inverse_real_fft(np.full(64, 3.0))
    assert out[0] == pytest.approx(3.0)
    assert np.max(np.abs(out[1:])) < 1e-12
