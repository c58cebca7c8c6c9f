from rng_audit.services.nist.tests.approximate_entropy_test import ApproximateEntropyTest
from rng_audit.services.nist.tests.base import NistTest
from rng_audit.services.nist.tests.binary_matrix_rank_test import BinaryMatrixRankTest
from rng_audit.services.nist.tests.block_frequency_test import BlockFrequencyTest
from rng_audit.services.nist.tests.cumulative_sums_test import CumulativeSumsTest
from rng_audit.services.nist.tests.discrete_fourier_transform_test import DiscreteFourierTransformTest
from rng_audit.services.nist.tests.frequency_test import FrequencyTest
from rng_audit.services.nist.tests.linear_complexity_test import LinearComplexityTest
from rng_audit.services.nist.tests.longest_run_ones_test import LongestRunsTest
from rng_audit.services.nist.tests.runs_test import RunsTest
from rng_audit.services.nist.tests.serial_test import SerialTest
from rng_audit.services.nist.tests.universal_test import UniversalTest

__all__ = [
    'ApproximateEntropyTest',
    'BinaryMatrixRankTest',
    'BlockFrequencyTest',
    'CumulativeSumsTest',
    'DiscreteFourierTransformTest',
    'FrequencyTest',
    'LinearComplexityTest',
    'LongestRunsTest',
    'NistTest',
    'RunsTest',
    'SerialTest',
    'UniversalTest',
]
