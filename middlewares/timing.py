import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

LATENCY_HEADER = "X-Latency-Ms"

class TimingMiddleware(BaseHTTPMiddleware):
    """응답 헤더에 처리 시간(ms)을 붙이고 debug 로그로 남김"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = int((time.perf_counter() - start) * 1000)
        response.headers[LATENCY_HEADER] = str(latency_ms)
        logger.debug(f"{request.method} {request.url.path} {response.status_code} {latency_ms}ms")
        return response
