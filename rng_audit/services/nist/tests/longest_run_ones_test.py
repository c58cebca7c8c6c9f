from dataclasses import dataclass

import numpy as np

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.services.nist.bits import BinaryInput
from rng_audit.services.nist.kernels import longest_runs_per_block
from rng_audit.services.nist.special import chi_square, igamc
from rng_audit.services.nist.tests.base import NistTest

MIN_SEQUENCE_LENGTH = 128


@dataclass(frozen=True)
class BlockConfig:
    """Category table for one block length"""

    K: int  # Number of degrees of freedom
    M: int  # Block length
    V: tuple[int, ...]  # Values for run length categories
    pi: tuple[float, ...]  # Theoretical probabilities


BLOCK_CONFIGS: dict[int, BlockConfig] = {
    8: BlockConfig(K=3, M=8, V=(1, 2, 3, 4), pi=(0.21484375, 0.3671875, 0.23046875, 0.1875)),
    128: BlockConfig(
        K=5,
        M=128,
        V=(4, 5, 6, 7, 8, 9),
        pi=(0.1174035788, 0.242955959, 0.249363483, 0.17517706, 0.102701071, 0.112398847),
    ),
    10000: BlockConfig(
        K=6,
        M=10000,
        V=(10, 11, 12, 13, 14, 15, 16),
        pi=(0.0882, 0.2092, 0.2483, 0.1933, 0.1208, 0.0675, 0.0727),
    ),
}


def block_size_for_length(n: int) -> int:
    """NIST block length for a sequence of n bits"""
    if n < MIN_SEQUENCE_LENGTH:
        raise PreconditionViolation(f'Sequence length {n} is too short (minimum {MIN_SEQUENCE_LENGTH})')
    if n < 6272:  # noqa
        return 8
    if n < 750000:  # noqa
        return 128
    return 10000


class LongestRunsTest(NistTest):
    """
    Implementation of NIST's Longest Runs of Ones in a Block Test

    This test focuses on the longest run of ones within M-bit blocks. The purpose of
    this test is to determine whether the length of the longest run of ones within
    the tested sequence is consistent with the length of the longest run of ones that
    would be expected in a random sequence.
    """

    name = 'Longest Runs of Ones Test'

    def __init__(self, block_size: int | None = None, significance_level: float = 0.01):
        """
        Initialize the Longest Runs Test

        Args:
            block_size: One of 8, 128 or 10000. Default picks it from the sequence length
            significance_level: The significance level. Default is 0.01 (1%)
        """
        super().__init__(significance_level)
        if block_size is not None and block_size not in BLOCK_CONFIGS:
            raise PreconditionViolation(f'Block size must be one of {sorted(BLOCK_CONFIGS)}, got {block_size}')
        self.block_size = block_size

    def _count_frequencies(self, sequence: np.ndarray, config: BlockConfig) -> tuple[np.ndarray, int]:
        """Bucket each block's longest run into the table's categories"""
        longest = longest_runs_per_block(sequence, config.M)
        clipped = np.clip(longest, config.V[0], config.V[-1]) - config.V[0]
        nu = np.bincount(clipped, minlength=config.K + 1)
        return nu, len(longest)

    def test(self, binary_data: BinaryInput) -> dict:
        """
        Run the Longest Runs Test

        Args:
            binary_data: The sequence to test

        Returns:
            dict: A dictionary containing:
                - 'success': Boolean indicating if the test was passed
                - 'p_value': The p-value of the test
                - 'statistics': Additional test statistics
        """
        sequence = self._convert_to_binary_list(binary_data)
        n = len(sequence)

        M = self.block_size if self.block_size is not None else block_size_for_length(n)
        config = BLOCK_CONFIGS[M]
        if n < M:
            raise PreconditionViolation(f'Input sequence length ({n}) is too short for block size {M}')

        nu, N = self._count_frequencies(sequence, config)

        expected = [p * N for p in config.pi]
        chi_squared = chi_square(nu.tolist(), expected)
        p_value = igamc(config.K / 2.0, chi_squared / 2.0)

        stats = {
            'n': n,
            'block_size': config.M,
            'num_blocks': N,
            'discarded_bits': n - N * config.M,
            'chi_squared': chi_squared,
            'degrees_of_freedom': config.K,
            'frequencies': nu.tolist(),
            'expected_frequencies': expected,
            'run_length_categories': list(config.V),
        }
        return self._result(p_value, stats)
