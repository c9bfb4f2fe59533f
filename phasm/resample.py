"""Bilinear resampling for undoing geometric transforms.

Each output pixel is mapped back through the inverse of an estimated
rotation and scale, then bilinearly interpolated from the four nearest
source pixels.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

OUT_OF_BOUNDS_VALUE = 128.0
"""Value (mid-gray) used for samples that fall outside the source image."""


@dataclass
class AffineTransform:
    """Rotation (radians) and uniform scale about the image center."""

    rotation_rad: float
    scale: float


def _as_flat_image(pixels, width, height):
    image = np.asarray(pixels, dtype=np.float64).reshape(-1)
    if image.size != width * height:
        raise ValueError(
            f"expected {width * height} pixels for a {width}x{height} image, got {image.size}"
        )
    return image


def resample_bilinear(pixels, src_w, src_h, transform, dst_w, dst_h):
    """Resample an image through the inverse of ``transform``.

    ``pixels`` holds ``src_w * src_h`` values in row-major order. Returns a
    flat float64 array of ``dst_w * dst_h`` values. Samples whose source
    neighbours fall outside the image use mid-gray (128.0).
    """
    if min(src_w, src_h, dst_w, dst_h) < 0:
        raise ValueError("image dimensions must not be negative")
    source = _as_flat_image(pixels, src_w, src_h)

    sin_t = math.sin(transform.rotation_rad)
    cos_t = math.cos(transform.rotation_rad)
    inv_scale = 1.0 / transform.scale if abs(transform.scale) > 1e-12 else 1.0

    src_cx = src_w / 2.0
    src_cy = src_h / 2.0
    dst_cx = dst_w / 2.0
    dst_cy = dst_h / 2.0

    dy, dx = np.meshgrid(
        np.arange(dst_h, dtype=np.float64), np.arange(dst_w, dtype=np.float64), indexing="ij"
    )
    x = dx - dst_cx
    y = dy - dst_cy

    xr = x * cos_t + y * sin_t
    yr = -x * sin_t + y * cos_t

    sx = xr * inv_scale + src_cx
    sy = yr * inv_scale + src_cy

    return _bilinear_sample(source, src_w, src_h, sx, sy).reshape(-1)


def _bilinear_sample(source, width, height, x, y):
    x0 = np.floor(x).astype(np.int64)
    y0 = np.floor(y).astype(np.int64)
    x1 = x0 + 1
    y1 = y0 + 1

    fx = x - x0
    fy = y - y0

    def fetch(px, py):
        inside = (px >= 0) & (px < width) & (py >= 0) & (py < height)
        values = np.full(px.shape, OUT_OF_BOUNDS_VALUE, dtype=np.float64)
        values[inside] = source[py[inside] * width + px[inside]]
        return values

    v00 = fetch(x0, y0)
    v10 = fetch(x1, y0)
    v01 = fetch(x0, y1)
    v11 = fetch(x1, y1)

    return (
        v00 * (1.0 - fx) * (1.0 - fy)
        + v10 * fx * (1.0 - fy)
        + v01 * (1.0 - fx) * fy
        + v11 * fx * fy
    )