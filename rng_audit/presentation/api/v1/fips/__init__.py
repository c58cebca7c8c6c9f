from rng_audit.presentation.api.v1.fips.router import fips_router

__all__ = [
    'fips_router',
]
