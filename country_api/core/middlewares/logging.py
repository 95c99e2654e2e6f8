import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)

from country_api.core.logging import get_logger, request_id_var

logger = get_logger("api_logger")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request, tagged with a generated request id."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                process_time = time.perf_counter() - start_time
                logger.error(
                    f"{request.method} {request.url.path} | Failed | Time={process_time:.3f}s | Error={e!s}"
                )
                raise

            process_time = time.perf_counter() - start_time
            logger.info(
                f"{request.method} {request.url.path} | Status={response.status_code} | Time={process_time:.3f}s"
            )
        finally:
            request_id_var.reset(token)

        response.headers["X-Process-Time"] = f"{process_time:.6f}"
        response.headers["X-Request-ID"] = request_id
        return response
