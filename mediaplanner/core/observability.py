# mediaplanner/core/observability.py
import time
import uuid
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from prometheus_client import Counter
from mediaplanner.core.logging import get_logger

log = get_logger("obs")

# Domain counters; /metrics is exposed by the instrumentator on the default registry.
RECOMMENDATIONS = Counter(
    "planner_recommendations_total",
    "Recommendations produced",
    ["strategy", "outcome_id"],
)
LLM_CALLS = Counter(
    "planner_llm_calls_total",
    "Calls to the generative-text provider",
    ["outcome"],
)
CSV_MAPPINGS = Counter(
    "planner_csv_mappings_total",
    "CSV header mappings computed",
    ["platform"],
)

class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start = time.perf_counter()

        # Make request id accessible downstream
        request.state.request_id = req_id

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "-"

        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers["x-request-id"] = req_id
            return response
        except Exception:
            # No body logging, only safe metadata
            log.exception(
                "unhandled_error",
                extra={"req_id": req_id, "method": method, "path": path, "client_ip": client_ip},
            )
            raise
        finally:
            dur = time.perf_counter() - start
            log.info(
                "http_request",
                extra={
                    "req_id": req_id,
                    "method": method,
                    "path": path,
                    "status": status,
                    "duration_ms": round(dur * 1000, 2),
                    "client_ip": client_ip,
                },
            )
