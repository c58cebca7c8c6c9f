from fastapi import APIRouter, File, HTTPException, UploadFile
from starlette.concurrency import run_in_threadpool

from rng_audit.core.config import env_config
from rng_audit.presentation.api.v1.nist.dep import SOURCE_FACTORY_DEP
from rng_audit.presentation.api.v1.nist.models import (
    NIST_REQ_SCHEMA,
    NistValidateRequestSchema,
    NistValidateResponseSchema,
)
from rng_audit.services.nist.config import TestConfig
from rng_audit.services.nist.service import NistService, check_sequence

nist_router = APIRouter(prefix='/nist', tags=['Nist'])


@nist_router.post('/check')
async def nist_check_sequence(
    params: NIST_REQ_SCHEMA,
    file: UploadFile = File(default=None),  # noqa
) -> dict[str, dict]:
    sequence: str | bytes | None = params.sequence
    if file is not None:
        file_sequence = await file.read()
        if file_sequence:
            sequence = file_sequence

    if not sequence:
        raise HTTPException(400, 'No sequence or file uploaded')

    return await run_in_threadpool(
        check_sequence,
        sequence,
        included_tests=params.included_tests,
        significance_level=params.significance_level,
    )


@nist_router.post('/validate')
async def nist_validate_source(
    body: NistValidateRequestSchema,
    source_factory: SOURCE_FACTORY_DEP,
) -> NistValidateResponseSchema:
    overrides = {}
    if body.sequence_count is not None:
        overrides['sequence_count'] = body.sequence_count
    if body.sequence_length is not None:
        overrides['sequence_length'] = body.sequence_length
    config = TestConfig.for_mode(body.mode or env_config.NIST_TEST_MODE, **overrides)

    service = NistService(source_factory(body.seed), config, max_workers=env_config.NIST_MAX_WORKERS)
    retry = env_config.NIST_RETRY if body.retry is None else body.retry
    reports = await run_in_threadpool(service.run_suite, body.included_tests, retry)

    return NistValidateResponseSchema(
        passed=all(report.passed for report in reports.values()),
        reports=reports,
    )
