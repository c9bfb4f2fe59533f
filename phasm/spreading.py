"""Spreading vector generation for STDM embedding.

Includes a ChaCha20 stream generator whose output matches the common
seedable ChaCha20 RNG (20 rounds, 64-bit block counter, zero stream id).
"""

from __future__ import annotations

import math
import struct

import numpy as np

SPREAD_LEN = 8
"""Number of DCT coefficients per embedding unit."""

_CONSTANTS = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
_BLOCKS_PER_REFILL = 4
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _rotl(value, bits):
    return (value << np.uint32(bits)) | (value >> np.uint32(32 - bits))


def _quarter_round(x, a, b, c, d):
    x[a] = x[a] + x[b]
    x[d] = _rotl(x[d] ^ x[a], 16)
    x[c] = x[c] + x[d]
    x[b] = _rotl(x[b] ^ x[c], 12)
    x[a] = x[a] + x[b]
    x[d] = _rotl(x[d] ^ x[a], 8)
    x[c] = x[c] + x[d]
    x[b] = _rotl(x[b] ^ x[c], 7)


class ChaCha20Rng:
    """Deterministic ChaCha20 random number generator seeded by 32 bytes."""

    def __init__(self, seed):
        seed = bytes(seed)
        if len(seed) != 32:
            raise ValueError("ChaCha20 seed must be exactly 32 bytes")
        self._key = struct.unpack("<8I", seed)
        self._counter = 0
        self._buffer = []
        self._index = 0

    def _refill(self):
        counters = [(self._counter + k) & _MASK64 for k in range(_BLOCKS_PER_REFILL)]
        n = _BLOCKS_PER_REFILL

        def const(word):
            return np.full(n, word, dtype=np.uint32)

        initial = [const(w) for w in _CONSTANTS]
        initial += [const(w) for w in self._key]
        initial.append(np.array([c & _MASK32 for c in counters], dtype=np.uint32))
        initial.append(np.array([c >> 32 for c in counters], dtype=np.uint32))
        initial.append(const(0))
        initial.append(const(0))

        x = [word.copy() for word in initial]
        for _ in range(10):
            _quarter_round(x, 0, 4, 8, 12)
            _quarter_round(x, 1, 5, 9, 13)
            _quarter_round(x, 2, 6, 10, 14)
            _quarter_round(x, 3, 7, 11, 15)
            _quarter_round(x, 0, 5, 10, 15)
            _quarter_round(x, 1, 6, 11, 12)
            _quarter_round(x, 2, 7, 8, 13)
            _quarter_round(x, 3, 4, 9, 14)

        words = np.stack([x[k] + initial[k] for k in range(16)], axis=1)
        self._buffer = [int(w) for w in words.reshape(-1)]
        self._index = 0
        self._counter = (self._counter + n) & _MASK64

    def next_u32(self):
        """Return the next 32-bit word of the key stream."""
        if self._index >= len(self._buffer):
            self._refill()
        word = self._buffer[self._index]
        self._index += 1
        return word

    def next_u64(self):
        """Return the next 64-bit value (low word first)."""
        low = self.next_u32()
        high = self.next_u32()
        return (high << 32) | low

    def gen_range(self, low, high):
        """Return a uniformly distributed float in ``[low, high)``."""
        low = float(low)
        high = float(high)
        if not low < high:
            raise ValueError("gen_range requires low < high")
        scale = high - low
        if not math.isfinite(scale):
            raise OverflowError("gen_range: range overflow")
        while True:
            fraction = (self.next_u64() >> 12) * 2.0**-52
            result = fraction * scale + low
            if result < high:
                return result
            scale = math.nextafter(scale, 0.0)


def generate_spreading_vectors(seed, count):
    """Generate ``count`` unit-norm spreading vectors of length :data:`SPREAD_LEN`.

    Returns a float64 array of shape ``(count, SPREAD_LEN)``. Components are
    drawn uniformly from ``[-1, 1)`` and each vector is then normalized.
    """
    rng = ChaCha20Rng(seed)
    vectors = np.empty((count, SPREAD_LEN), dtype=np.float64)
    for row in vectors:
        values = [rng.gen_range(-1.0, 1.0) for _ in range(SPREAD_LEN)]
        squares = 0.0
        for value in values:
            squares += value * value
        norm = math.sqrt(squares)
        if norm > 1e-10:
            values = [value / norm for value in values]
        else:
            values[0] = 1.0
        row[:] = values
    return vectors