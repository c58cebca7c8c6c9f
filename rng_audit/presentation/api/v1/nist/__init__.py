from rng_audit.presentation.api.v1.nist.router import nist_router

__all__ = [
    'nist_router',
]
