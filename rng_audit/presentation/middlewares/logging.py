import time
import uuid
from collections.abc import Callable
from typing import Any, Final, Literal

import structlog
from fastapi import HTTPException, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.middleware.base import BaseHTTPMiddleware

from rng_audit.core.exceptions import GenerationError
from rng_audit.core.logger import get_logger

logger = get_logger(__name__)

# Uploaded sequences and binary-string queries can be megabytes long
MAX_LOGGED_BODY: Final[int] = 512


def error_response(e: Exception) -> JSONResponse:
    """
    Map an exception escaping a route to a JSON error response

    HTTPException keeps its status, a failing byte source is 503, malformed input
    (any ValueError, PreconditionViolation included) is 400, anything else is 500.
    """
    if isinstance(e, HTTPException):
        return JSONResponse(status_code=e.status_code, content={'detail': e.detail})
    if isinstance(e, GenerationError):
        return JSONResponse(status_code=503, content={'detail': str(e)})
    if isinstance(e, ValueError):
        return JSONResponse(status_code=400, content={'detail': str(e)})
    return JSONResponse(status_code=500, content={'detail': 'Internal server error'})


def _truncate(text: str) -> str:
    if len(text) <= MAX_LOGGED_BODY:
        return text
    return f'{text[:MAX_LOGGED_BODY]}... ({len(text)} chars)'


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.
    The request's trace id is bound to the structlog context, so log lines from the
    test engine carry it too.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        context = await self.get_context(request)
        structlog.contextvars.bind_contextvars(trace_id=context['trace_id'])
        await logger.ainfo(f'Request started on {request.method} {request.url.path}', context=context)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            response = error_response(e)
            await self.create_final_log('failed', request, context, start_time, response.status_code, e)
        else:
            context['response_size'] = self.get_response_size(response)
            await self.create_final_log('successful', request, context, start_time, response.status_code)
        finally:
            structlog.contextvars.unbind_contextvars('trace_id')

        response.headers['X-TRACE-ID'] = context['trace_id']
        response.headers['X-PROCESS-TIME'] = context['process_time']
        return response

    @staticmethod
    def get_response_size(response: Response | StreamingResponse) -> int:
        if isinstance(response, StreamingResponse):
            return -1
        content_length = response.headers.get('Content-Length')
        return int(content_length) if content_length else -1

    @staticmethod
    async def create_final_log(  # noqa: PLR0913
        msg: Literal['successful', 'failed'],
        request: Request,
        context: dict,
        start_time: float,
        status: int,
        e: Exception | None = None,
    ) -> None:
        context['process_time'] = f'{time.perf_counter() - start_time:.4f}'
        context['response_status'] = status

        if msg == 'successful':
            await logger.ainfo(f'Request completed {request.method} {request.url.path}', context=context)
        elif status < 500:  # noqa: PLR2004
            await logger.awarning(f'Request rejected {request.method} {request.url.path}', context=context, error=str(e))
        else:
            await logger.aerror(f'Request failed {request.method} {request.url.path}', context=context, exc_info=e)

    @staticmethod
    async def get_context(request: Request) -> dict[str, Any]:
        content_type = request.headers.get('Content-Type', '')
        if 'multipart/form-data' in content_type:
            body = 'Not available for multipart/form-data'
        else:
            body = _truncate((await request.body()).decode(errors='replace'))

        client = request.client
        return {
            'trace_id': str(uuid.uuid4()),
            'client': {
                'ip_address': client.host if client else None,
                'port': client.port if client else None,
                'user-agent': request.headers.get('User-Agent'),
            },
            'request': {'body': body, 'query': _truncate(str(request.query_params))},
        }
