import time

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.logger import logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Registra cada request como 'METHOD path - IP - status - ms'."""

    async def dispatch(self, request, call_next):
        inicio = time.perf_counter()
        response = await call_next(request)
        duracion_ms = (time.perf_counter() - inicio) * 1000

        ip = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        if not ip and request.client:
            ip = request.client.host

        logger.info(
            f"{request.method} {request.url.path} - {ip or '-'} - "
            f"{response.status_code} - {duracion_ms:.1f}ms"
        )
        return response


def setup_middleware(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)
