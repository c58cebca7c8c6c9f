import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TestMode(StrEnum):
    __test__ = False

    QUICK = 'quick'
    STANDARD = 'standard'
    COMPREHENSIVE = 'comprehensive'


# (sequence count, sequence length in bits)
MODE_PARAMETERS: dict[TestMode, tuple[int, int]] = {
    TestMode.QUICK: (55, 100_000),
    TestMode.STANDARD: (100, 1_000_000),
    TestMode.COMPREHENSIVE: (1000, 1_000_000),
}


class TestConfig(BaseModel):
    """
    Parameters of one multi-sequence run

    Immutable and passed explicitly to the orchestrator, so several configurations
    can be used side by side.
    """

    __test__ = False

    model_config = ConfigDict(frozen=True)

    sequence_count: int = Field(55, ge=1)
    sequence_length: int = Field(100_000, ge=8)
    significance_level: float = Field(0.01, gt=0, lt=1)
    uniformity_bins: int = Field(10, ge=2)
    uniformity_min_p_value: float = Field(1e-4, ge=0, le=1)
    dft_max_bits: int = Field(16384, ge=8)
    mode: TestMode | None = None

    @model_validator(mode='after')
    def _check_byte_aligned(self) -> 'TestConfig':
        if self.sequence_length % 8 != 0:
            raise ValueError(f'sequence_length must be a multiple of 8, got {self.sequence_length}')
        return self

    @classmethod
    def for_mode(cls, mode: TestMode | str, **overrides) -> 'TestConfig':
        """Preset for a named mode; keyword overrides replace individual fields"""
        mode = TestMode(mode)
        sequence_count, sequence_length = MODE_PARAMETERS[mode]
        params = {'sequence_count': sequence_count, 'sequence_length': sequence_length, 'mode': mode}
        params.update(overrides)
        return cls(**params)

    @property
    def sequence_bytes(self) -> int:
        return self.sequence_length // 8

    def proportion_confidence_interval(self, sequence_count: int | None = None) -> tuple[float, float]:
        """p̂ ± 3 * sqrt(p̂(1 - p̂) / m) with p̂ = 1 - α"""
        m = sequence_count if sequence_count is not None else self.sequence_count
        p_hat = 1.0 - self.significance_level
        margin = 3.0 * math.sqrt(p_hat * (1.0 - p_hat) / m)
        return p_hat - margin, p_hat + margin

    def expected_passing_range(self, sequence_count: int | None = None) -> tuple[int, int]:
        """Integer range of passing sequences accepted by the proportion test"""
        m = sequence_count if sequence_count is not None else self.sequence_count
        lower, upper = self.proportion_confidence_interval(m)
        return max(0, math.ceil(lower * m)), min(m, math.floor(upper * m))
