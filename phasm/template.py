"""DFT template generation, embedding, detection and transform estimation.

K=32 peaks at key-derived positions are added to the magnitude of a 2D
spectrum. They survive rotation, scaling and cropping and let a decoder
estimate and undo the geometric transform.

A spectrum is a 2D complex numpy array of shape ``(height, width)``,
indexed as ``spectrum[v, u]``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from phasm.resample import AffineTransform
from phasm.spreading import ChaCha20Rng

K = 32
"""Number of template peaks."""

ALPHA = 0.4
"""Embedding strength relative to the local magnitude."""

R_MIN_FACTOR = 0.05
"""Minimum peak radius as a fraction of the smaller dimension."""

R_MAX_FACTOR = 0.25
"""Maximum peak radius as a fraction of the smaller dimension."""

DETECTION_THRESHOLD = 3.0
"""Minimum confidence, in noise standard deviations, for a detection."""

MIN_PEAKS_FOR_ESTIMATION = 8
"""Fewest detected peaks needed to estimate a transform."""

SEARCH_RADIUS = 5
"""Half-width in bins of the neighbourhood searched for each peak."""


@dataclass
class TemplatePeak:
    """A template peak position in centered frequency coordinates."""

    u: float
    v: float
    amplitude: float = 0.0


@dataclass
class DetectedPeak:
    """A detected peak with its expected and actual positions."""

    expected_u: float
    expected_v: float
    detected_u: float
    detected_v: float
    confidence: float


def _round(x):
    if x >= 0:
        return int(math.floor(x + 0.5))
    return -int(math.floor(-x + 0.5))


def _check_spectrum(spectrum):
    if not isinstance(spectrum, np.ndarray) or spectrum.ndim != 2:
        raise TypeError("spectrum must be a 2D numpy array")
    if not np.iscomplexobj(spectrum):
        raise TypeError("spectrum must have a complex dtype")


def generate_template_peaks(key, width, height):
    """Generate K peak positions in the mid-frequency band from a 32-byte key."""
    rng = ChaCha20Rng(key)
    min_dim = float(min(width, height))
    r_min = R_MIN_FACTOR * min_dim
    r_max = R_MAX_FACTOR * min_dim

    peaks = []
    for _ in range(K):
        angle = rng.gen_range(0.0, math.tau)
        radius = rng.gen_range(r_min, r_max)
        peaks.append(TemplatePeak(u=radius * math.cos(angle), v=radius * math.sin(angle)))
    return peaks


def _local_mean_magnitude(spectrum, u, v):
    h, w = spectrum.shape
    total = 0.0
    count = 0
    for dv in (-1, 0, 1):
        for du in (-1, 0, 1):
            nu = u + du
            nv = v + dv
            if 0 <= nu < w and 0 <= nv < h:
                c = spectrum[nv, nu]
                total += math.hypot(float(c.real), float(c.imag))
                count += 1
    return np.float32(total / count) if count else np.float32(1.0)


def _unit_phase(c):
    norm = np.float32(math.hypot(float(c.real), float(c.imag)))
    if norm > 1e-6:
        return complex(np.float32(c.real) / norm, np.float32(c.imag) / norm)
    return complex(1.0, 0.0)


def embed_template(spectrum, peaks):
    """Add template peaks to ``spectrum`` in place.

    Each peak adds ``ALPHA * local_magnitude`` along the existing phase and
    the same amount at the conjugate position, keeping Hermitian symmetry
    so the inverse transform stays real.
    """
    _check_spectrum(spectrum)
    h, w = spectrum.shape
    cx = w / 2.0
    cy = h / 2.0

    for peak in peaks:
        su = _round(cx + peak.u)
        sv = _round(cy + peak.v)
        if not (0 <= su < w and 0 <= sv < h):
            continue

        local_mag = _local_mean_magnitude(spectrum, su, sv)
        add_mag = np.float32(ALPHA) * np.float32(max(local_mag, np.float32(1.0)))

        spectrum[sv, su] += _unit_phase(spectrum[sv, su]) * float(add_mag)

        cu = (w - su) % w
        cv = (h - sv) % h
        if (cv, cu) != (sv, su):
            spectrum[cv, cu] += _unit_phase(spectrum[cv, cu]) * float(add_mag)


def detect_template(spectrum, peaks):
    """Search the neighbourhood of each expected peak for a strong maximum.

    Confidence is ``(peak - noise_mean) / noise_std`` with noise taken from
    the search window outside the central 3x3 bins. Peaks whose confidence
    reaches :data:`DETECTION_THRESHOLD` are returned.
    """
    _check_spectrum(spectrum)
    h, w = spectrum.shape
    cx = w / 2.0
    cy = h / 2.0
    magnitudes = np.abs(spectrum).astype(np.float32)

    detected = []
    for peak in peaks:
        su = _round(cx + peak.u)
        sv = _round(cy + peak.v)
        if not (0 <= su < w and 0 <= sv < h):
            continue

        best_mag = 0.0
        best_u, best_v = su, sv
        noise_sum = 0.0
        noise_sq_sum = 0.0
        noise_count = 0

        for dv in range(-SEARCH_RADIUS, SEARCH_RADIUS + 1):
            nv = sv + dv
            if not 0 <= nv < h:
                continue
            for du in range(-SEARCH_RADIUS, SEARCH_RADIUS + 1):
                nu = su + du
                if not 0 <= nu < w:
                    continue
                mag = float(magnitudes[nv, nu])
                if mag > best_mag:
                    best_mag = mag
                    best_u, best_v = nu, nv
                if abs(du) > 1 or abs(dv) > 1:
                    noise_sum += mag
                    noise_sq_sum += mag * mag
                    noise_count += 1

        if noise_count < 2:
            continue

        noise_mean = noise_sum / noise_count
        noise_var = noise_sq_sum / noise_count - noise_mean * noise_mean
        noise_std = max(math.sqrt(max(noise_var, 0.0)), 1e-12)
        confidence = (best_mag - noise_mean) / noise_std

        if confidence >= DETECTION_THRESHOLD:
            detected.append(
                DetectedPeak(
                    expected_u=peak.u,
                    expected_v=peak.v,
                    detected_u=best_u - cx,
                    detected_v=best_v - cy,
                    confidence=confidence,
                )
            )
    return detected


def estimate_transform(detected):
    """Least-squares rotation and scale from expected/detected peak pairs.

    Returns ``None`` when fewer than :data:`MIN_PEAKS_FOR_ESTIMATION` peaks
    are given or their expected positions are all at the origin.
    """
    if len(detected) < MIN_PEAKS_FOR_ESTIMATION:
        return None

    num_a = 0.0
    num_b = 0.0
    denom = 0.0
    for peak in detected:
        u, v = peak.expected_u, peak.expected_v
        u2, v2 = peak.detected_u, peak.detected_v
        num_a += u * u2 + v * v2
        num_b += u * v2 - v * u2
        denom += u * u + v * v

    if denom < 1e-12:
        return None

    a = num_a / denom
    b = num_b / denom
    return AffineTransform(rotation_rad=math.atan2(b, a), scale=math.sqrt(a * a + b * b))