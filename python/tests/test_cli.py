"""Tests for the freq-plot command line."""

import re
import wave

import numpy as np
import pytest
from scipy.io import wavfile

from freq_plot import cli


def _write_wav(path, channels, sample_rate=8000, width=2):
    """Write float channels (full scale 1.0) as a PCM WAV file."""
    frames = np.stack(channels, axis=1)
    if width == 1:
        raw = (np.round(frames * 127.0) + 128).astype(np.uint8).tobytes()
    elif width == 2:
        raw = np.round(frames * 32767.0).astype("<i2").tobytes()
    elif width == 3:
        ints = np.round(frames * 8388607.0).astype("<i4")
        raw = ints.view(np.uint8).reshape(-1, 4)[:, :3].tobytes()
    else:
        raw = np.round(frames * 2147483647.0).astype("<i4").tobytes()
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(len(channels))
        wav_file.setsampwidth(width)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(raw)
    return path


def _tone(freq, sample_rate=8000, duration=1.0, amplitude=0.5):
    t = np.arange(int(sample_rate * duration)) / float(sample_rate)
    return amplitude * np.sin(2.0 * np.pi * freq * t)


def test_read_wav_scales_to_full_scale(tmp_path):
    path = _write_wav(tmp_path / "tone.wav", [_tone(500.0), -_tone(500.0)])

    channels, rate = cli.read_wav(str(path))

    assert rate == 8000.0
    assert len(channels) == 2
    assert channels[0].dtype == np.float32
    assert np.max(np.abs(channels[0])) == pytest.approx(0.5, abs=1e-3)
    np.testing.assert_allclose(channels[0], -channels[1], atol=1e-4)


def test_read_wav_32_bit(tmp_path):
    path = _write_wav(tmp_path / "tone32.wav", [_tone(500.0)], width=4)
    channels, _ = cli.read_wav(str(path))
    np.testing.assert_allclose(channels[0], _tone(500.0), atol=1e-6)


def test_read_wav_24_bit(tmp_path):
    path = _write_wav(tmp_path / "tone24.wav", [_tone(500.0)], width=3)
    channels, rate = cli.read_wav(str(path))
    assert rate == 8000.0
    np.testing.assert_allclose(channels[0], _tone(500.0), atol=1e-6)


def test_read_wav_8_bit(tmp_path):
    path = _write_wav(tmp_path / "tone8.wav", [_tone(500.0)], width=1)
    channels, _ = cli.read_wav(str(path))
    np.testing.assert_allclose(channels[0], _tone(500.0), atol=1.5 / 128)


def test_read_wav_float(tmp_path):
    tone = _tone(500.0).astype(np.float32)
    stereo = np.stack([tone, -tone], axis=1)
    path = tmp_path / "float.wav"
    wavfile.write(str(path), 8000, stereo)

    channels, rate = cli.read_wav(str(path))

    assert rate == 8000.0
    assert len(channels) == 2
    np.testing.assert_array_equal(channels[0], tone)
    np.testing.assert_array_equal(channels[1], -tone)


def test_float_wav_runs_analysis(tmp_path, capsys):
    path = tmp_path / "float.wav"
    wavfile.write(str(path), 8000, _tone(1000.0).astype(np.float32))

    assert cli.main([str(path), "--size", "256"]) == 0
    assert "Bins:       128" in capsys.readouterr().out


def test_spectrum_summary_with_peak_and_range(tmp_path, capsys):
    path = _write_wav(tmp_path / "tone.wav", [_tone(1010.0)])

    code = cli.main([str(path), "--size", "256", "--peak", "990", "--range", "900", "1100"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Algorithm:  Spectrum" in out
    assert "Window:     Hann, 256 samples" in out
    assert "Windows:    61" in out
    assert "Bins:       128" in out
    assert "Value:      1000 Hz (B5) =" in out
    match = re.search(r"Peak:       (\d+) Hz \([A-G]#?\d\) = (-?\d+\.\d) dB", out)
    assert match is not None
    assert abs(int(match.group(1)) - 1010) <= 8000 / 256
    # Half-scale tone reads about -6 dB
    assert -10.0 < float(match.group(2)) < 0.0


def test_autocorrelation_peak_in_seconds(tmp_path, capsys):
    tone = sum(_tone(200.0 * k, amplitude=0.1) for k in range(1, 6))
    path = _write_wav(tmp_path / "harmonic.wav", [tone])

    code = cli.main([str(path), "-a", "enhanced-autocorrelation", "-s", "1024", "--peak", "0.005"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Algorithm:  Enhanced Autocorrelation" in out
    assert "Peak:       0.0050 sec (200 Hz) (G3) =" in out


def test_short_file_fails(tmp_path, capsys):
    path = _write_wav(tmp_path / "short.wav", [_tone(500.0, duration=0.01)])

    code = cli.main([str(path), "--size", "1024"])

    assert code == 1
    assert "Not enough data" in capsys.readouterr().err


def test_missing_file_fails(tmp_path, capsys):
    code = cli.main([str(tmp_path / "nowhere.wav")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_unknown_window_is_a_usage_error(tmp_path):
    path = _write_wav(tmp_path / "tone.wav", [_tone(500.0)])
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(path), "--window", "kaiser"])
    assert excinfo.value.code == 2


def test_window_names_are_accepted(tmp_path, capsys):
    path = _write_wav(tmp_path / "tone.wav", [_tone(500.0)])

    code = cli.main([str(path), "-w", "blackman-harris", "-a", "cepstrum", "-s", "512"])

    assert code == 0
    assert "Window:     Blackman-Harris, 512 samples" in capsys.readouterr().out
