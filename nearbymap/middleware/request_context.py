from starlette.middleware.base import BaseHTTPMiddleware
import uuid, time, logging

from nearbymap.core.metrics import record_sample

logger = logging.getLogger(__name__)

# Latency bucket for requests that matched no route
UNMATCHED_ROUTE = "unmatched"

def route_key(request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE

class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            # the router fills in scope["route"] while handling the request
            record_sample(route_key(request), (time.perf_counter() - start) * 1000.0)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms:.2f}ms",
            extra={"request_id": request_id, "duration_ms": duration_ms},
        )
        response.headers["X-Request-ID"] = request_id
        return response
