import math

import numpy as np

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.services.nist.bits import BinaryInput
from rng_audit.services.nist.kernels import count_overlapping_patterns
from rng_audit.services.nist.special import igamc
from rng_audit.services.nist.tests.base import NistTest


def phi(sequence: np.ndarray, m: int) -> float:
    """Sum of (c/n) * ln(c/n) over the wraparound m-bit pattern counts c"""
    if m <= 0:
        return 0.0
    n = len(sequence)
    counts = count_overlapping_patterns(sequence, m)
    frequencies = counts[counts > 0] / n
    return float(np.sum(frequencies * np.log(frequencies)))


class ApproximateEntropyTest(NistTest):
    """
    Implementation of NIST's Approximate Entropy Test

    The focus of this test is the frequency of all possible overlapping m-bit patterns
    across the entire sequence. The purpose of the test is to compare the frequency of
    overlapping blocks of two consecutive/adjacent lengths (m and m+1) against the
    expected result for a random sequence.
    """

    name = 'Approximate Entropy Test'

    def __init__(self, block_length: int = 2, significance_level: float = 0.01):
        """
        Initialize the Approximate Entropy Test

        Args:
            block_length: The length m of each block. Default is 2
            significance_level: The significance level. Default is 0.01 (1%)
        """
        super().__init__(significance_level)
        if block_length < 1:
            raise PreconditionViolation(f'Block length must be at least 1, got {block_length}')
        self.block_length = block_length

    def test(self, binary_data: BinaryInput) -> dict:
        """
        Run the Approximate Entropy Test

        Args:
            binary_data: The sequence to test

        Returns:
            dict: Test results containing:
                - success: Boolean indicating if test was passed
                - p_value: The calculated p-value
                - statistics: Additional test statistics
        """
        sequence = self._convert_to_binary_list(binary_data)
        n = len(sequence)
        m = self.block_length

        # NIST requires m < floor(log2 n) - 5
        limit = int(math.log2(n)) - 5 if n > 0 else 0
        if m >= limit:
            raise PreconditionViolation(f'Block length {m} is too large for {n} bits (must be below {limit})')

        phi_m = phi(sequence, m)
        phi_m_plus_1 = phi(sequence, m + 1)
        apen = phi_m - phi_m_plus_1
        chi_squared = 2.0 * n * (math.log(2) - apen)
        p_value = igamc(2 ** (m - 1), chi_squared / 2.0)

        stats = {
            'n': n,
            'm': m,
            'chi_squared': chi_squared,
            'phi_m': phi_m,
            'phi_m_plus_1': phi_m_plus_1,
            'apen': apen,
        }
        return self._result(p_value, stats)
