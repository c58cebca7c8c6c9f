from typing import Annotated, Literal

from fastapi import Query
from pydantic import BaseModel, Field

from rng_audit.services.nist.config import TestMode
from rng_audit.services.nist.models import NistRunReport

NistTestType = Literal[
    'frequency',
    'block_frequency',
    'runs',
    'longest_runs',
    'matrix_rank',
    'cumulative_sums',
    'dft',
    'approximate_entropy',
    'serial',
    'linear_complexity',
    'universal',
]

DEFAULT_NIST_TESTS: list[NistTestType] = [
    'frequency',
    'block_frequency',
    'runs',
    'longest_runs',
    'matrix_rank',
    'cumulative_sums',
    'dft',
    'approximate_entropy',
    'serial',
    'universal',
]


class NistRequestSchema(BaseModel):
    sequence: str | None = Field(None, description='Binary string of 0 and 1')
    included_tests: list[NistTestType] = Field(default_factory=lambda: DEFAULT_NIST_TESTS.copy())
    significance_level: float = Field(0.01, gt=0, lt=1)


NIST_REQ_SCHEMA = Annotated[NistRequestSchema, Query()]


class NistValidateRequestSchema(BaseModel):
    mode: TestMode | None = Field(None, description='Preset; defaults to the configured NIST_TEST_MODE')
    included_tests: list[NistTestType] = Field(default_factory=lambda: DEFAULT_NIST_TESTS.copy())
    sequence_count: int | None = Field(None, ge=1, le=1000)
    sequence_length: int | None = Field(None, ge=8, le=1_000_000, multiple_of=8)
    retry: bool | None = None
    seed: str | None = Field(None, description='Replay with the deterministic BLAKE2b source')


class NistValidateResponseSchema(BaseModel):
    passed: bool
    reports: dict[str, NistRunReport]
