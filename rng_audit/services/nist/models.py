from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field


class SequenceTestResult(BaseModel):
    """Outcome of one test on one sequence"""

    model_config = ConfigDict(frozen=True)

    test_name: str
    p_value: float = Field(ge=0.0, le=1.0)
    statistics: dict[str, Any] = Field(default_factory=dict)


class MultiSequenceResult(BaseModel):
    """Proportion and uniformity verdict over the p-values of many sequences"""

    model_config = ConfigDict(frozen=True)

    test_name: str
    p_values: tuple[float, ...]
    significance_level: float
    proportion_passing: int
    expected_passing_range: tuple[int, int]
    uniformity_chi_squared: float
    uniformity_p_value: float
    uniformity_min_p_value: float
    histogram: tuple[int, ...]

    @computed_field
    @property
    def sequence_count(self) -> int:
        return len(self.p_values)

    @computed_field
    @property
    def proportion_passed(self) -> bool:
        lower, upper = self.expected_passing_range
        return lower <= self.proportion_passing <= upper

    @computed_field
    @property
    def uniformity_passed(self) -> bool:
        return self.uniformity_p_value >= self.uniformity_min_p_value

    @computed_field
    @property
    def passed(self) -> bool:
        return self.proportion_passed and self.uniformity_passed


class NistRunReport(BaseModel):
    """Multi-sequence run of one test, with the retry attempt when the first one failed"""

    model_config = ConfigDict(frozen=True)

    test_name: str
    sequence_length: int
    first_attempt: MultiSequenceResult
    retry_attempt: MultiSequenceResult | None = None

    @computed_field
    @property
    def final(self) -> MultiSequenceResult:
        return self.retry_attempt if self.retry_attempt is not None else self.first_attempt

    @computed_field
    @property
    def sequence_count(self) -> int:
        return self.final.sequence_count

    @computed_field
    @property
    def retried(self) -> bool:
        return self.retry_attempt is not None

    @computed_field
    @property
    def passed(self) -> bool:
        return self.final.passed
