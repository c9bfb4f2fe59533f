# phasm

Building blocks for hiding data in the DCT coefficients of JPEG images:
embedding cost maps, coefficient selection, deterministic spreading vectors,
DFT template peaks for geometric recovery, bilinear resampling and
repetition coding with soft majority voting.

All functions work on numpy arrays and plain Python values. A DCT grid is an
integer array of shape `(blocks_tall, blocks_wide, 8, 8)`; a quantization
table is 64 steps in natural (row-major) order.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `phasm.cost` | `CostMap(blocks_wide, blocks_tall)`: float32 costs per coefficient, stored in `costs` with shape `(blocks_tall, blocks_wide, 8, 8)`; every position starts at `WET_COST` (infinity). Methods `get`, `set` (both raise `IndexError` outside the map) and `total_blocks`. |
| `phasm.uerd` | `compute_uerd(grid, qt)`: block-energy cost; textured blocks and higher frequencies cost less. DC and zero AC coefficients stay wet. |
| `phasm.wavelet` | db8 filters (`HPDF`, `lpdf()`), `mirror_index`, `filter_rows`, `filter_cols` and `compute_three_subbands(pixels)` returning a `ThreeSubbands` (`lh`, `hl`, `hh`, `width`, `height`). |
| `phasm.uniward` | `compute_uniward(grid, qt)`: J-UNIWARD costs. Also `idct_block`, `decompress_to_pixels` and `precompute_basis_functions`. DC and zero AC coefficients stay wet. |
| `phasm.capacity` | `estimate_capacity(grid, qt)`: conservative plaintext capacity in bytes, from the count of AC positions with finite J-UNIWARD cost, divided by 5, minus a 50-byte frame overhead, capped at 65535; 0 if too small. |
| `phasm.selection` | `compute_stability_map(grid, qt)`: AC positions with zigzag index 1..15 get cost `1.0`, all others stay wet. `qt` is ignored. |
| `phasm.spreading` | `ChaCha20Rng(seed)` with `next_u32`, `next_u64`, `gen_range(low, high)`; `generate_spreading_vectors(seed, count)` returns a `(count, 8)` float64 array of unit-norm vectors. |
| `phasm.template` | `TemplatePeak`, `DetectedPeak`, `generate_template_peaks(key, width, height)` (32 peaks from a 32-byte key), `embed_template(spectrum, peaks)` (in place), `detect_template(spectrum, peaks)`, `estimate_transform(detected)`. A spectrum is a 2D complex numpy array indexed `[v, u]`. |
| `phasm.resample` | `AffineTransform(rotation_rad, scale)` and `resample_bilinear(pixels, src_w, src_h, transform, dst_w, dst_h)`, returning a flat float64 array; samples outside the source use 128.0. |
| `phasm.repetition` | `compute_r`, `repetition_encode`, `repetition_decode_soft`, `repetition_decode_soft_with_quality` with `RepetitionQuality`. |

## Examples

Deterministic spreading vectors from a 32-byte seed:

```python
from phasm.spreading import generate_spreading_vectors

vectors = generate_spreading_vectors(bytes(32), 4)
# vectors.shape == (4, 8); every row has unit Euclidean norm
```

Repetition coding with soft majority voting:

```python
from phasm.repetition import repetition_encode, repetition_decode_soft

bits = [0, 1, 1, 0, 1, 0, 0, 1]
encoded, r = repetition_encode(bits, 100)          # r == 11
llrs = [5.0 if b == 0 else -5.0 for b in encoded[: r * len(bits)]]
assert repetition_decode_soft(llrs, len(bits)) == bits
```

Estimating a geometric transform from matched template peaks:

```python
from phasm.template import DetectedPeak, estimate_transform

peaks = [DetectedPeak(u, v, 0.8 * u, 0.8 * v, 10.0)
         for u, v in [(20, 0), (0, 20), (-20, 0), (0, -20),
                      (14, 14), (-14, 14), (14, -14), (-14, -14)]]
transform = estimate_transform(peaks)
# transform.scale is about 0.8, transform.rotation_rad about 0.0
```

## What this package does not do

- It does not read or write JPEG files. Coefficient grids, quantization
  tables and pixel arrays have to come from a JPEG codec of your choice.
- It has no complete encode or decode pipeline: no payload framing,
  encryption, error-correcting codes, syndrome coding or STDM embedding.
  It supplies the pieces such a pipeline is built from.
- It does not compute FFTs; `embed_template` and `detect_template` work on a
  spectrum you supply (for example from `numpy.fft.fft2`).
- There is no command-line tool.