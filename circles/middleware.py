"""HTTP metrics middleware."""
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from circles.metrics import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION_SECONDS,
    HTTP_REQUESTS_IN_PROGRESS,
    HTTP_REQUEST_SIZE_BYTES,
    HTTP_RESPONSE_SIZE_BYTES,
)


def _declared_size(headers) -> Optional[int]:
    value = headers.get("content-length")
    if value and value.isdigit():
        return int(value)
    return None


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Record request counts, latency and sizes per route.

    Requests are labelled with the matched route template
    (/v1/events/{event_id}) so document ids never become label values.
    Health check and scrape endpoints are not recorded.
    """

    SKIP_PATHS = frozenset({"/metrics", "/health", "/ping"})

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        method = request.method
        # The route is only known after routing; until then use the raw path
        raw_endpoint = self._collapse_ids(request.url.path)

        request_size = _declared_size(request.headers)
        if request_size is not None:
            HTTP_REQUEST_SIZE_BYTES.labels(method=method, endpoint=raw_endpoint).observe(request_size)

        in_progress = HTTP_REQUESTS_IN_PROGRESS.labels(method=method, endpoint=raw_endpoint)
        in_progress.inc()
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            in_progress.dec()
            endpoint = self._route_template(request) or raw_endpoint
            HTTP_REQUEST_DURATION_SECONDS.labels(method=method, endpoint=endpoint).observe(
                time.perf_counter() - started
            )
            HTTP_REQUESTS_TOTAL.labels(
                method=method, endpoint=endpoint, status_code=str(status_code)
            ).inc()

        response_size = _declared_size(response.headers)
        if response_size is not None:
            HTTP_RESPONSE_SIZE_BYTES.labels(method=method, endpoint=endpoint).observe(response_size)

        return response

    @staticmethod
    def _route_template(request: Request) -> Optional[str]:
        return getattr(request.scope.get("route"), "path", None)

    @staticmethod
    def _collapse_ids(path: str) -> str:
        """Replace id-looking path segments with {id}."""
        segments = path.strip("/").split("/")
        return "/" + "/".join("{id}" if _looks_like_id(s) else s for s in segments)


def _looks_like_id(segment: str) -> bool:
    # Generated document ids, or long numeric ids
    if len(segment) >= 20 and segment.replace("-", "").isalnum():
        return True
    return segment.isdigit() and len(segment) >= 5
