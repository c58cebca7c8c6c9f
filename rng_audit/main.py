from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rng_audit.core.config import env_config
from rng_audit.core.logger import get_logger
from rng_audit.presentation.api.v1 import v1_router
from rng_audit.presentation.middlewares.logging import RequestLoggingMiddleware
from rng_audit.services.fips.service import FIPS_CHECKS
from rng_audit.services.nist.service import TEST_PLANS, available_tests

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(
    _app: FastAPI,
) -> AsyncGenerator[None]:
    base_url: str = f'http://{env_config.APP_HOST}:{env_config.APP_PORT}'
    logger.info(f'App started on {base_url}')
    logger.info(f'See Swagger for mode info: {base_url}/docs')
    logger.info(
        'NIST defaults',
        mode=env_config.NIST_TEST_MODE,
        retry=env_config.NIST_RETRY,
        max_workers=env_config.NIST_MAX_WORKERS,
    )
    yield
    logger.warning('Stopping app...')


app = FastAPI(title=env_config.APP_NAME, debug=env_config.DEBUG, lifespan=lifespan)
app.add_middleware(RequestLoggingMiddleware)
app.include_router(v1_router)


@app.get('/health')
async def health() -> dict:
    return {
        'status': 'ok',
        'nist_mode': env_config.NIST_TEST_MODE,
        'nist_tests': available_tests(include_uncalibrated=True),
        'uncalibrated': [name for name, plan in TEST_PLANS.items() if not plan.default],
        'fips_checks': list(FIPS_CHECKS),
    }


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(app, host=env_config.APP_HOST, port=env_config.APP_PORT, log_level=50)
