import numpy as np
import pytest

from rng_audit.services.nist.kernels import count_overlapping_patterns, longest_runs_per_block
from rng_audit.services.nist.tests.binary_matrix_rank_test import compute_rank
from rng_audit.services.nist.tests.linear_complexity_test import linear_complexity


def bits(text: str) -> np.ndarray:
    return np.array([int(c) for c in text], dtype=np.uint8)


@pytest.mark.parametrize(
    ('sequence', 'expected'),
    [
        ('10000000', 1),
        ('10101010', 2),
        ('00000000', 0),
        ('00000001', 8),
        ('1101011110001', 4),
    ],
)
def test_linear_complexity(sequence, expected):
    assert linear_complexity(bits(sequence)) == expected


def test_linear_complexity_of_empty_block():
    assert linear_complexity(np.zeros(0, dtype=np.uint8)) == 0


def test_rank_of_identity():
    assert compute_rank(np.eye(32, dtype=np.uint8)) == 32


def test_rank_of_repeated_row():
    matrix = np.tile(bits('10110' * 6 + '11'), (32, 1))
    assert compute_rank(matrix) == 1


def test_rank_of_zero_matrix():
    assert compute_rank(np.zeros((32, 32), dtype=np.uint8)) == 0


def test_rank_over_gf2_differs_from_real_rank():
    # third row is the XOR of the first two
    matrix = np.array([[1, 1, 0], [0, 1, 1], [1, 0, 1]], dtype=np.uint8)
    assert compute_rank(matrix) == 2


def test_overlapping_patterns_wrap_around():
    counts = count_overlapping_patterns(bits('0011011101'), 3)
    assert counts.tolist() == [0, 1, 1, 2, 1, 2, 2, 1]
    assert counts.sum() == 10


def test_overlapping_patterns_single_bit():
    assert count_overlapping_patterns(bits('0011011101'), 1).tolist() == [4, 6]


def test_longest_runs_per_block_ignores_partial_block():
    sequence = bits('11011100' + '00000001' + '1111')
    assert longest_runs_per_block(sequence, 8).tolist() == [3, 1]
