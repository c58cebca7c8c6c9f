"""
FIPS 140-2 power-up statistical tests on a single 20,000-bit sample.

Each check returns a dictionary in the same shape as the NIST tests, with the
measured value in 'statistics' instead of a p-value.
"""

from typing import Final

import numpy as np

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.services.nist.bits import BinaryInput, to_bits

SAMPLE_BITS: Final[int] = 20_000

MONOBIT_BOUNDS: Final[tuple[int, int]] = (9726, 10274)
POKER_BOUNDS: Final[tuple[float, float]] = (2.16, 46.17)
POKER_SEGMENTS: Final[int] = 5000
# Accepted counts of runs of length 1..5 and 6+, applied to runs of zeros and of ones
RUN_BOUNDS: Final[tuple[tuple[int, int], ...]] = (
    (2315, 2685),
    (1114, 1386),
    (527, 723),
    (240, 384),
    (103, 209),
    (103, 209),
)
LONG_RUN_LENGTH: Final[int] = 26


def _sample(binary_data: BinaryInput) -> np.ndarray:
    bits = to_bits(binary_data)
    if len(bits) != SAMPLE_BITS:
        raise PreconditionViolation(f'FIPS 140-2 tests need exactly {SAMPLE_BITS} bits, got {len(bits)}')
    return bits


def run_lengths(bits: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Lengths of the maximal runs of identical bits and the bit value of each run"""
    boundaries = np.flatnonzero(bits[1:] != bits[:-1]) + 1
    starts = np.concatenate(([0], boundaries))
    ends = np.concatenate((boundaries, [len(bits)]))
    return ends - starts, bits[starts]


def monobit(binary_data: BinaryInput) -> dict:
    bits = _sample(binary_data)
    ones = int(bits.sum())
    low, high = MONOBIT_BOUNDS
    return {'success': low <= ones <= high, 'statistics': {'ones': ones, 'bounds': [low, high]}}


def poker(binary_data: BinaryInput) -> dict:
    bits = _sample(binary_data).astype(np.int64)
    segments = bits.reshape(POKER_SEGMENTS, 4) @ np.array([8, 4, 2, 1])
    frequencies = np.bincount(segments, minlength=16)
    x = 16.0 / POKER_SEGMENTS * float(np.sum(frequencies * frequencies)) - POKER_SEGMENTS
    low, high = POKER_BOUNDS
    return {
        'success': low < x < high,
        'statistics': {'x': x, 'frequencies': frequencies.tolist(), 'bounds': [low, high]},
    }


def runs(binary_data: BinaryInput) -> dict:
    bits = _sample(binary_data)
    lengths, values = run_lengths(bits)
    categories = np.minimum(lengths, len(RUN_BOUNDS)) - 1

    counts = {bit: np.bincount(categories[values == bit], minlength=len(RUN_BOUNDS)).tolist() for bit in (0, 1)}
    failures = [
        f'{bit}-runs[len={index + 1}]={counts[bit][index]} not in {low}-{high}'
        for bit in (0, 1)
        for index, (low, high) in enumerate(RUN_BOUNDS)
        if not low <= counts[bit][index] <= high
    ]
    return {
        'success': not failures,
        'statistics': {'zero_runs': counts[0], 'one_runs': counts[1], 'failures': failures},
    }


def long_run(binary_data: BinaryInput) -> dict:
    bits = _sample(binary_data)
    lengths, _ = run_lengths(bits)
    longest = int(lengths.max())
    return {'success': longest < LONG_RUN_LENGTH, 'statistics': {'longest_run': longest, 'limit': LONG_RUN_LENGTH}}
