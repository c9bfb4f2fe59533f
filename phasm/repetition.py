"""Repetition coding with soft majority voting.

Several copies of an RS-encoded bit stream are laid out one after another
across the embedding units. On extraction the log-likelihood ratios of all
copies of a bit are summed and the sign of the sum decides the bit.
"""

from __future__ import annotations

from dataclasses import dataclass

MAX_REPETITION = 255
"""Largest repetition factor (it has to fit in one byte)."""


def compute_r(rs_bit_count, num_units):
    """Repetition factor for ``rs_bit_count`` bits spread over ``num_units`` units.

    The factor is made odd for clean majority voting where possible, is capped
    at :data:`MAX_REPETITION`, and is 1 when no odd factor of at least 3 fits.
    """
    if rs_bit_count == 0:
        return 1
    r = min(num_units // rs_bit_count, MAX_REPETITION)
    if r >= 3:
        r_odd = r | 1
        if r_odd * rs_bit_count <= num_units:
            return r_odd
        return max(r - 1, 1)
    if r >= 2:
        return 3 if 3 * rs_bit_count <= num_units else 1
    return 1


def repetition_encode(rs_bits, num_units):
    """Lay out copies of ``rs_bits`` sequentially across ``num_units`` positions.

    Copy ``j`` starts at offset ``j * len(rs_bits)``; positions left over are
    zero. Returns ``(output_bits, r)`` where ``r`` is the repetition factor.
    """
    bits = list(rs_bits)
    r = compute_r(len(bits), num_units)
    output = (bits * r)[:num_units]
    output.extend([0] * (num_units - len(output)))
    return output, r


@dataclass
class RepetitionQuality:
    """Signal statistics gathered while voting.

    ``avg_abs_llr_per_copy`` is the mean over bit positions of
    ``|sum of LLRs over copies| / r``, which is independent of ``r``.
    """

    avg_abs_llr_per_copy: float


def _vote(llrs, rs_bit_count):
    """Yield the summed LLR of every bit position and return the copy count."""
    values = list(llrs)
    r = len(values) // rs_bit_count
    totals = []
    for i in range(rs_bit_count):
        totals.append(sum(values[i:r * rs_bit_count:rs_bit_count], 0.0))
    return totals, r


def repetition_decode_soft(llrs, rs_bit_count):
    """Soft majority vote: a non-negative LLR sum gives bit 0, a negative one bit 1."""
    bits, _ = repetition_decode_soft_with_quality(llrs, rs_bit_count)
    return bits


def repetition_decode_soft_with_quality(llrs, rs_bit_count):
    """Soft majority vote that also reports the average per-copy |LLR|.

    Returns ``(bits, RepetitionQuality)``.
    """
    if rs_bit_count == 0:
        return [], RepetitionQuality(avg_abs_llr_per_copy=0.0)

    totals, r = _vote(llrs, rs_bit_count)
    bits = [0 if total >= 0.0 else 1 for total in totals]
    if r > 0:
        sum_per_copy = sum((abs(total) / r for total in totals), 0.0)
    else:
        sum_per_copy = 0.0
    return bits, RepetitionQuality(avg_abs_llr_per_copy=sum_per_copy / rs_bit_count)