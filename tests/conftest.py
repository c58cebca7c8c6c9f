import numpy as np
import pytest

from rng_audit.integrations.entropy import Blake2bCounterSource
from rng_audit.services.nist.bits import bytes_to_bits


@pytest.fixture
def seeded_source():
    return Blake2bCounterSource('rng-audit-tests')


@pytest.fixture
def random_bits():
    """Deterministic pseudo-random bits: random_bits(n_bits, seed)"""

    def make(n_bits: int, seed: str = 'rng-audit') -> np.ndarray:
        return bytes_to_bits(Blake2bCounterSource(seed).generate(n_bits // 8))

    return make
