# orgpanel/middleware/logging.py
from fastapi import Request
from uuid import uuid4
import time

from orgpanel.core.logger import bind_request_id, get_logger, unbind_request_id

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


async def add_request_id_middleware(request: Request, call_next):
    """
    Tag every request with an id and log its outcome.

    An id sent by a proxy in X-Request-ID is reused so log lines can be
    joined across hops. Client and server errors are logged at WARNING.
    Every log line written while the request runs carries the same id.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
    request.state.request_id = request_id
    token = bind_request_id(request_id)

    try:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        line = f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.0f}ms)"
        if response.status_code >= 400:
            logger.warning(line)
        else:
            logger.info(line)
    finally:
        unbind_request_id(token)

    response.headers[REQUEST_ID_HEADER] = request_id
    return response
