import math

import numpy as np
import pytest

from phasm.template import (
    K,
    R_MAX_FACTOR,
    R_MIN_FACTOR,
    DetectedPeak,
    TemplatePeak,
    detect_template,
    embed_template,
    estimate_transform,
    generate_template_peaks,
)

KEY_A = bytes([11]) * 32
KEY_B = bytes([22]) * 32


def _synthetic_spectrum(width, height):
    y, x = np.mgrid[0:height, 0:width].astype(np.float64)
    pixels = 128.0 + 50.0 * np.sin(x * 0.1) * np.cos(y * 0.05)
    return np.fft.fft2(pixels).astype(np.complex64)


def test_generate_deterministic():
    p1 = generate_template_peaks(KEY_A, 256, 256)
    p2 = generate_template_peaks(KEY_A, 256, 256)
    assert len(p1) == K
    assert [(p.u, p.v) for p in p1] == [(p.u, p.v) for p in p2]


def test_different_keys_differ():
    p1 = generate_template_peaks(KEY_A, 256, 256)
    p2 = generate_template_peaks(KEY_B, 256, 256)
    assert any(abs(a.u - b.u) > 1e-10 or abs(a.v - b.v) > 1e-10 for a, b in zip(p1, p2))


def test_peaks_in_mid_frequency_band():
    w = h = 256
    r_min = R_MIN_FACTOR * min(w, h)
    r_max = R_MAX_FACTOR * min(w, h)
    for peak in generate_template_peaks(KEY_A, w, h):
        r = math.hypot(peak.u, peak.v)
        assert r_min - 0.01 <= r <= r_max + 0.01
        assert peak.amplitude == 0.0


def test_embed_detect_roundtrip():
    width = height = 128
    spectrum = _synthetic_spectrum(width, height)
    peaks = generate_template_peaks(KEY_A, width, height)
    embed_template(spectrum, peaks)
    detected = detect_template(spectrum, peaks)
    assert len(detected) >= K // 2
    assert all(d.confidence >= 3.0 for d in detected)


def test_embedding_keeps_hermitian_symmetry():
    width = height = 64
    spectrum = _synthetic_spectrum(width, height)
    embed_template(spectrum, generate_template_peaks(KEY_B, width, height))
    restored = np.fft.ifft2(spectrum.astype(np.complex128))
    assert np.max(np.abs(restored.imag)) < 1e-3


def test_embedding_changes_spectrum_at_peak():
    width = height = 64
    spectrum = np.zeros((height, width), dtype=np.complex64)
    peak = TemplatePeak(u=5.0, v=3.0)
    embed_template(spectrum, [peak])
    # Zero spectrum: local magnitude floors at 1.0, phase defaults to 1+0j.
    assert spectrum[32 + 3, 32 + 5] == pytest.approx(0.4, abs=1e-6)
    assert spectrum[(64 - 35) % 64, (64 - 37) % 64] == pytest.approx(0.4, abs=1e-6)


def test_embed_rejects_real_array():
    with pytest.raises(TypeError):
        embed_template(np.zeros((8, 8)), [TemplatePeak(1.0, 1.0)])


def test_out_of_bounds_peaks_are_skipped():
    spectrum = np.zeros((16, 16), dtype=np.complex64)
    embed_template(spectrum, [TemplatePeak(u=100.0, v=0.0)])
    assert np.count_nonzero(spectrum) == 0
    assert detect_template(spectrum, [TemplatePeak(u=100.0, v=0.0)]) == []


def _ring(count, radius, transform):
    peaks = []
    for i in range(count):
        a = i * math.tau / count
        u = radius * math.cos(a)
        v = radius * math.sin(a)
        u2, v2 = transform(u, v)
        peaks.append(DetectedPeak(u, v, u2, v2, 10.0))
    return peaks


def test_transform_estimation_identity():
    t = estimate_transform(_ring(16, 20.0, lambda u, v: (u, v)))
    assert abs(t.rotation_rad) < 0.01
    assert abs(t.scale - 1.0) < 0.01


def test_transform_estimation_rotation():
    angle = math.radians(15.0)
    c, s = math.cos(angle), math.sin(angle)
    t = estimate_transform(_ring(20, 25.0, lambda u, v: (u * c - v * s, u * s + v * c)))
    assert abs(t.rotation_rad - angle) < 0.01
    assert abs(t.scale - 1.0) < 0.01


def test_transform_estimation_scale():
    t = estimate_transform(_ring(16, 20.0, lambda u, v: (u * 0.8, v * 0.8)))
    assert abs(t.rotation_rad) < 0.01
    assert abs(t.scale - 0.8) < 0.01


def test_too_few_peaks_returns_none():
    detected = [DetectedPeak(i, i, i, i, 10.0) for i in range(3)]
    assert estimate_transform(detected) is None


def test_peaks_at_origin_return_none():
    detected = [DetectedPeak(0.0, 0.0, 1.0, 1.0, 10.0) for _ in range(10)]
    assert estimate_transform(detected) is None


def test_bad_key_length_raises():
    with pytest.raises(ValueError):
        generate_template_peaks(b"short", 64, 64)