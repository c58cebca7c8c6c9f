from collections.abc import Callable
from typing import Final

from pydantic import BaseModel, ConfigDict, computed_field

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.core.logger import get_logger
from rng_audit.integrations.entropy import RandomByteSource
from rng_audit.services.fips import checks
from rng_audit.services.nist.bits import bytes_to_bits

logger = get_logger(__name__)

DEFAULT_ITERATIONS: Final[int] = 5

FIPS_CHECKS: dict[str, Callable[..., dict]] = {
    'monobit': checks.monobit,
    'poker': checks.poker,
    'runs': checks.runs,
    'long_run': checks.long_run,
}


class FipsCheckResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    test_name: str
    iterations: tuple[dict, ...]
    required_passes: int

    @computed_field
    @property
    def passes(self) -> int:
        return sum(1 for iteration in self.iterations if iteration['success'])

    @computed_field
    @property
    def passed(self) -> bool:
        return self.passes >= self.required_passes


class FipsReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    checks: dict[str, FipsCheckResult]

    @computed_field
    @property
    def compliant(self) -> bool:
        return all(result.passed for result in self.checks.values())


def required_passes(test_name: str, iterations: int) -> int:
    """A long run is never tolerated; the other checks need a majority"""
    if test_name == 'long_run':
        return iterations
    return iterations // 2 + 1


class FipsService:
    """Repeats each FIPS 140-2 check on fresh 20,000-bit samples"""

    def __init__(self, source: RandomByteSource) -> None:
        self.source = source

    def _sample(self) -> bytes:
        return self.source.generate(checks.SAMPLE_BITS // 8)

    def evaluate(self, iterations: int = DEFAULT_ITERATIONS) -> FipsReport:
        if iterations < 1:
            raise PreconditionViolation(f'At least one iteration is required, got {iterations}')

        results = {}
        for test_name, check in FIPS_CHECKS.items():
            outcomes = tuple(check(bytes_to_bits(self._sample())) for _ in range(iterations))
            results[test_name] = FipsCheckResult(
                test_name=test_name,
                iterations=outcomes,
                required_passes=required_passes(test_name, iterations),
            )
            logger.info(
                f'FIPS 140-2 {test_name}: {results[test_name].passes}/{iterations} passed',
                passed=results[test_name].passed,
            )

        return FipsReport(checks=results)


def format_fips_report(report: FipsReport) -> str:
    lines = ['\nFIPS 140-2 STATISTICAL TESTS', '-' * 45]
    for test_name, result in report.checks.items():
        status = 'PASS' if result.passed else 'FAIL'
        lines.append(f'{test_name:<10} {result.passes}/{len(result.iterations)} (need {result.required_passes})  {status}')
    lines.extend(['-' * 45, f'{"COMPLIANT" if report.compliant else "NON-COMPLIANT"}\n'])
    return '\n'.join(lines)
