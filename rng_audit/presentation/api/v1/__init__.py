from fastapi import APIRouter

from rng_audit.presentation.api.v1.fips import fips_router
from rng_audit.presentation.api.v1.nist import nist_router

v1_router = APIRouter(prefix='/v1')
v1_router.include_router(nist_router)
v1_router.include_router(fips_router)

__all__ = [
    'v1_router',
]
