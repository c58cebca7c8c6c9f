from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass

from rng_audit.core.exceptions import GenerationError, PreconditionViolation, UnknownTestError
from rng_audit.core.logger import get_logger
from rng_audit.integrations.entropy import RandomByteSource
from rng_audit.services.nist.analysis import analyze
from rng_audit.services.nist.bits import BinaryInput, bytes_to_bits, to_bits
from rng_audit.services.nist.config import TestConfig
from rng_audit.services.nist.models import MultiSequenceResult, NistRunReport, SequenceTestResult
from rng_audit.services.nist.tests import (
    ApproximateEntropyTest,
    BinaryMatrixRankTest,
    BlockFrequencyTest,
    CumulativeSumsTest,
    DiscreteFourierTransformTest,
    FrequencyTest,
    LinearComplexityTest,
    LongestRunsTest,
    NistTest,
    RunsTest,
    SerialTest,
    UniversalTest,
)
from rng_audit.services.nist.tests.discrete_fourier_transform_test import dft_length

logger = get_logger(__name__)

BLOCK_SIZE = 128


def _full_length(config: TestConfig) -> int:
    return config.sequence_length


@dataclass(frozen=True)
class TestPlan:
    """How to build a test for a configuration and how many bits each sequence feeds it"""

    __test__ = False

    factory: Callable[[TestConfig], NistTest]
    bits: Callable[[TestConfig], int] = _full_length
    default: bool = True


TEST_PLANS: dict[str, TestPlan] = {
    'frequency': TestPlan(lambda c: FrequencyTest(significance_level=c.significance_level)),
    'block_frequency': TestPlan(
        lambda c: BlockFrequencyTest(block_size=BLOCK_SIZE, significance_level=c.significance_level)
    ),
    'runs': TestPlan(lambda c: RunsTest(significance_level=c.significance_level)),
    'longest_runs': TestPlan(lambda c: LongestRunsTest(significance_level=c.significance_level)),
    'matrix_rank': TestPlan(lambda c: BinaryMatrixRankTest(significance_level=c.significance_level)),
    'cumulative_sums': TestPlan(lambda c: CumulativeSumsTest(significance_level=c.significance_level)),
    'dft': TestPlan(
        lambda c: DiscreteFourierTransformTest(significance_level=c.significance_level),
        bits=lambda c: dft_length(c.sequence_length, c.dft_max_bits),
    ),
    'approximate_entropy': TestPlan(lambda c: ApproximateEntropyTest(significance_level=c.significance_level)),
    'serial': TestPlan(lambda c: SerialTest(significance_level=c.significance_level)),
    'linear_complexity': TestPlan(
        lambda c: LinearComplexityTest(significance_level=c.significance_level),
        default=False,
    ),
    'universal': TestPlan(lambda c: UniversalTest(significance_level=c.significance_level)),
}


def available_tests(include_uncalibrated: bool = False) -> list[str]:
    return [name for name, plan in TEST_PLANS.items() if plan.default or include_uncalibrated]


def _plan(test_name: str) -> TestPlan:
    try:
        return TEST_PLANS[test_name]
    except KeyError:
        raise UnknownTestError(test_name, list(TEST_PLANS)) from None


class NistService:
    """
    Runs NIST tests over many independently generated sequences

    Every trial draws fresh bytes from the source, so trials never share a buffer and
    run in parallel on a thread pool. A source that is not thread-safe is only called
    from the calling thread; only the statistics are computed in the pool.
    """

    def __init__(self, source: RandomByteSource, config: TestConfig, max_workers: int | None = None) -> None:
        self.source = source
        self.config = config
        self.max_workers = max_workers

    def _generate(self, n_bytes: int) -> bytes:
        data = self.source.generate(n_bytes)
        if len(data) != n_bytes:
            raise GenerationError(f'Source returned {len(data)} bytes, {n_bytes} requested')
        return data

    @staticmethod
    def _run_trial(test_name: str, test: NistTest, data: bytes) -> SequenceTestResult:
        result = test.test(bytes_to_bits(data))
        return SequenceTestResult(test_name=test_name, p_value=result['p_value'], statistics=result['statistics'])

    def _generate_and_run(self, test_name: str, test: NistTest, n_bytes: int) -> SequenceTestResult:
        return self._run_trial(test_name, test, self._generate(n_bytes))

    def run_trials(self, test_name: str) -> list[SequenceTestResult]:
        """
        Run one test over `sequence_count` fresh sequences

        Raises:
            UnknownTestError: test_name is not registered
            GenerationError: the source failed; remaining trials are cancelled
        """
        plan = _plan(test_name)
        test = plan.factory(self.config)
        n_bytes = plan.bits(self.config) // 8
        if n_bytes <= 0:
            raise PreconditionViolation(f'{test_name} would receive no bits with {self.config}')

        futures: list[Future[SequenceTestResult]] = []
        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix=f'nist-{test_name}') as executor:
            try:
                for _ in range(self.config.sequence_count):
                    if self.source.thread_safe:
                        futures.append(executor.submit(self._generate_and_run, test_name, test, n_bytes))
                    else:
                        futures.append(executor.submit(self._run_trial, test_name, test, self._generate(n_bytes)))
                return [future.result() for future in futures]
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _attempt(self, test_name: str) -> MultiSequenceResult:
        trials = self.run_trials(test_name)
        return analyze(test_name, [trial.p_value for trial in trials], self.config)

    def run(self, test_name: str, retry: bool = True) -> NistRunReport:
        """
        Multi-sequence run of one test, repeated once on failure when `retry` is set

        Both attempts are kept in the report; the verdict is the retry's.
        """
        plan = _plan(test_name)
        sequence_length = plan.bits(self.config) // 8 * 8
        logger.info(
            f'NIST {test_name} started',
            sequences=self.config.sequence_count,
            sequence_length=sequence_length,
        )

        if not plan.default:
            logger.warning(f'NIST {test_name} is not calibrated against the reference suite, treat its verdict with care')

        first = self._attempt(test_name)
        retry_attempt = None
        if not first.passed and retry:
            logger.warning(
                f'NIST {test_name} failed, retrying once',
                proportion_passing=first.proportion_passing,
                expected_range=first.expected_passing_range,
                uniformity_p_value=first.uniformity_p_value,
            )
            retry_attempt = self._attempt(test_name)

        report = NistRunReport(
            test_name=test_name,
            sequence_length=sequence_length,
            first_attempt=first,
            retry_attempt=retry_attempt,
        )
        logger.info(f'NIST {test_name} finished', passed=report.passed, retried=report.retried)
        return report

    def run_suite(self, test_names: Iterable[str] | None = None, retry: bool = True) -> dict[str, NistRunReport]:
        names = list(test_names) if test_names is not None else available_tests()
        for name in names:
            _plan(name)
        return {name: self.run(name, retry=retry) for name in names}


def check_sequence(
    binary_data: BinaryInput,
    included_tests: Iterable[str] | None = None,
    significance_level: float = 0.01,
) -> dict[str, dict]:
    """
    Run the single-sequence battery on one sequence

    A test whose length or parameter requirements the sequence does not meet is
    reported with `success: False` and its error message instead of a p-value.
    """
    sequence = to_bits(binary_data)
    n = len(sequence)
    names = list(included_tests) if included_tests is not None else available_tests()
    config = TestConfig(significance_level=significance_level, sequence_length=max(8, n - n % 8))

    results: dict[str, dict] = {}
    for test_name in names:
        plan = _plan(test_name)
        test = plan.factory(config)
        # tests with a custom bit budget (the DFT) only see that prefix
        limit = n if plan.bits is _full_length else plan.bits(config)
        try:
            results[test_name] = test.test(sequence[:limit])
        except PreconditionViolation as e:
            logger.debug(f'{test_name} skipped: {e}')
            results[test_name] = {'success': False, 'error': str(e)}
    return results
