import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

TRACE_HEADER = "X-Trace-ID"
MAX_TRACE_ID_LENGTH = 64


def _incoming_trace_id(request: Request) -> str | None:
    value = (request.headers.get(TRACE_HEADER) or "").strip()
    if not value or len(value) > MAX_TRACE_ID_LENGTH:
        return None
    return value


class TraceIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        trace_id = _incoming_trace_id(request) or str(uuid.uuid4())
        request.state.trace_id = trace_id
        request.state.user_id = None
        response: Response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response
