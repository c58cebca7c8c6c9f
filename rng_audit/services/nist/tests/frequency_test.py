import math

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.services.nist.bits import BinaryInput
from rng_audit.services.nist.special import erfc
from rng_audit.services.nist.tests.base import NistTest


class FrequencyTest(NistTest):
    """
    Implementation of NIST's Frequency (Monobit) Test

    The focus of the test is the proportion of zeroes and ones for the entire sequence.
    The purpose of this test is to determine whether the number of ones and zeros in a
    sequence are approximately the same as would be expected for a truly random sequence.
    """

    name = 'Frequency (Monobit) Test'

    def test(self, binary_data: BinaryInput) -> dict:
        sequence = self._convert_to_binary_list(binary_data)
        n = len(sequence)
        if n == 0:
            raise PreconditionViolation('Frequency test needs a non-empty sequence')

        ones = int(sequence.sum())
        partial_sum = 2 * ones - n
        s_obs = abs(partial_sum) / math.sqrt(n)
        p_value = erfc(s_obs / math.sqrt(2))

        stats = {
            'n': n,
            'ones_count': ones,
            'zeros_count': n - ones,
            'partial_sum': partial_sum,
            's_obs': s_obs,
        }
        return self._result(p_value, stats)
