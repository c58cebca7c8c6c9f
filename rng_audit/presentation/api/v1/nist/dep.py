from collections.abc import Callable
from typing import Annotated

from fastapi import Depends

from rng_audit.integrations.entropy import Blake2bCounterSource, RandomByteSource, SystemRandomSource

SourceFactory = Callable[[str | None], RandomByteSource]


def make_source(seed: str | None) -> RandomByteSource:
    if seed:
        return Blake2bCounterSource(seed)
    return SystemRandomSource()


async def get_source_factory() -> SourceFactory:
    return make_source


SOURCE_FACTORY_DEP = Annotated[SourceFactory, Depends(get_source_factory)]
