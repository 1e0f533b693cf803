import logging
import time
import uuid
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .metrics import HTTP_LATENCY, HTTP_REQUESTS

_log = logging.getLogger("fereai.http")


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Request id + latency for every non-excluded path.

    - Adds/propagates x-request-id
    - Records HTTP_REQUESTS / HTTP_LATENCY
    """

    def __init__(self, app, exclude_paths=("/metrics", "/healthz")):
        super().__init__(app)
        self.exclude_paths = set(exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable):
        path = request.scope.get("path", "")
        method = request.method
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()
        tracked = not any(path.startswith(p) for p in self.exclude_paths)

        request.state.request_id = req_id
        if tracked:
            _log.info("[%s] -> %s %s", req_id, method, path)

        try:
            response: Response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            if tracked:
                HTTP_LATENCY.labels(path=path, method=method).observe(duration)
                HTTP_REQUESTS.labels(path=path, method=method, status="500").inc()
                _log.exception("[%s] !! %s %s failed in %.3fs", req_id, method, path, duration)
            raise

        duration = time.perf_counter() - start
        if tracked:
            HTTP_LATENCY.labels(path=path, method=method).observe(duration)
            HTTP_REQUESTS.labels(path=path, method=method, status=str(response.status_code)).inc()
            _log.info("[%s] <- %s %s %s in %.3fs", req_id, method, path, response.status_code, duration)

        # echo request id for clients
        response.headers["x-request-id"] = req_id
        return response
