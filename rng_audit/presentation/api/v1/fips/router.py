from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from rng_audit.presentation.api.v1.fips.models import FipsRequestSchema
from rng_audit.presentation.api.v1.nist.dep import SOURCE_FACTORY_DEP
from rng_audit.services.fips.service import FipsReport, FipsService

fips_router = APIRouter(prefix='/fips', tags=['Fips'])


@fips_router.post('/check')
async def fips_check_source(body: FipsRequestSchema, source_factory: SOURCE_FACTORY_DEP) -> FipsReport:
    service = FipsService(source_factory(body.seed))
    return await run_in_threadpool(service.evaluate, body.iterations)
