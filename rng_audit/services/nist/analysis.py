import math
from collections.abc import Sequence

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.services.nist.config import TestConfig
from rng_audit.services.nist.models import MultiSequenceResult
from rng_audit.services.nist.special import chi_square, igamc


def p_value_histogram(p_values: Sequence[float], bins: int = 10) -> list[int]:
    """Counts of p-values in equal-width bins over [0, 1); 1.0 falls into the last bin"""
    counts = [0] * bins
    for p in p_values:
        counts[min(int(p * bins), bins - 1)] += 1
    return counts


def analyze(test_name: str, p_values: Sequence[float], config: TestConfig | None = None) -> MultiSequenceResult:
    """
    Judge the p-values of independent sequences the way NIST SP 800-22 section 4.2 does

    Args:
        test_name: Name reported in the result
        p_values: One p-value per sequence; the list is the whole population
        config: Significance level, bin count and uniformity threshold. Default TestConfig()

    Returns:
        MultiSequenceResult: proportion passing, its accepted range, uniformity p-value
        and histogram

    Raises:
        PreconditionViolation: on an empty list or a p-value outside [0, 1]
    """
    config = config or TestConfig()

    if len(p_values) == 0:
        raise PreconditionViolation(f'No p-values to analyze for {test_name}')
    for index, p in enumerate(p_values):
        if math.isnan(p) or not 0.0 <= p <= 1.0:
            raise PreconditionViolation(f'P-value #{index} = {p} for {test_name} is outside [0, 1]')

    m = len(p_values)
    passing = sum(1 for p in p_values if p >= config.significance_level)

    bins = config.uniformity_bins
    histogram = p_value_histogram(p_values, bins)
    chi_squared = chi_square(histogram, [m / bins] * bins)
    uniformity_p_value = igamc((bins - 1) / 2.0, chi_squared / 2.0)

    return MultiSequenceResult(
        test_name=test_name,
        p_values=tuple(float(p) for p in p_values),
        significance_level=config.significance_level,
        proportion_passing=passing,
        expected_passing_range=config.expected_passing_range(m),
        uniformity_chi_squared=chi_squared,
        uniformity_p_value=uniformity_p_value,
        uniformity_min_p_value=config.uniformity_min_p_value,
        histogram=tuple(histogram),
    )
