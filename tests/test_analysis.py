"""Proportion and uniformity judgement over the p-values of many sequences."""

import math

import numpy as np
import pytest

from rng_audit.core.exceptions import PreconditionViolation
from rng_audit.services.nist.analysis import analyze, p_value_histogram
from rng_audit.services.nist.config import TestConfig


def evenly_spaced(m: int) -> list[float]:
    return [(i + 0.5) / m for i in range(m)]


def test_evenly_spaced_p_values_pass():
    result = analyze('frequency', evenly_spaced(100), TestConfig(sequence_count=100))
    assert result.histogram == (10,) * 10
    assert result.uniformity_chi_squared == pytest.approx(0.0)
    assert result.uniformity_p_value == pytest.approx(1.0)
    assert result.proportion_passing == 99
    assert result.expected_passing_range == (97, 100)
    assert result.passed is True


def test_identical_p_values_fail_uniformity():
    result = analyze('frequency', [0.5] * 100)
    assert result.proportion_passed is True
    assert result.uniformity_chi_squared == pytest.approx(900.0)
    assert result.uniformity_passed is False
    assert result.passed is False


def test_too_many_small_p_values_fail_proportion():
    p_values = [0.005] * 10 + [0.01 + 0.99 * p for p in evenly_spaced(90)]
    result = analyze('runs', p_values)
    assert result.proportion_passing == 90
    assert result.proportion_passed is False
    assert result.passed is False


def test_p_value_of_one_goes_to_last_bin():
    assert p_value_histogram([1.0, 0.0, 0.95, 0.1]) == [1, 1, 0, 0, 0, 0, 0, 0, 0, 2]


@pytest.mark.parametrize('p_values', [[], [0.5, 1.5], [-0.1], [0.3, math.nan]])
def test_invalid_p_values_are_rejected(p_values):
    with pytest.raises(PreconditionViolation):
        analyze('frequency', p_values)


def test_expected_passing_range():
    assert TestConfig(sequence_count=100).expected_passing_range() == (97, 100)
    assert TestConfig(sequence_count=55).expected_passing_range() == (53, 55)
    assert TestConfig().expected_passing_range(1000) == (981, 999)


def test_result_counts_sequences():
    result = analyze('serial', evenly_spaced(20))
    assert result.sequence_count == 20
    assert len(result.p_values) == 20


def test_uniform_p_values_usually_pass():
    rng = np.random.default_rng(2024)
    config = TestConfig(sequence_count=100)
    passed = sum(analyze('sim', rng.uniform(size=100).tolist(), config).passed for _ in range(200))
    assert passed >= 180
