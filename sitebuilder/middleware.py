import logging
import random
import re
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import API_VERSION
from .logging_config import trace_id_var

logger = logging.getLogger("sitebuilder.http")

_TENANT_PATH_RE = re.compile(r"/tenants/([^/]+)")


def tenant_from_path(path: str) -> Optional[str]:
    match = _TENANT_PATH_RE.search(path)
    return match.group(1) if match else None


class TracingMiddleware(BaseHTTPMiddleware):
    """Request tracing and structured access logging"""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.log_config = getattr(logging, '_config', {
            "exclude_paths": ["/api/health"],
            "sample_rate": 1.0
        })

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate or reuse trace ID
        trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        trace_id_var.set(trace_id)

        client_ip = request.client.host if request.client else "unknown"
        tenant_id = tenant_from_path(request.url.path) or "unknown"
        start_time = time.time()

        try:
            response = await call_next(request)
            latency_ms = round((time.time() - start_time) * 1000, 2)

            self._log_request(
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                latency_ms=latency_ms,
                client_ip=client_ip,
                tenant_id=tenant_id,
            )

            response.headers["X-Request-ID"] = trace_id
            return response

        except Exception as e:
            latency_ms = round((time.time() - start_time) * 1000, 2)
            logger.error(f"Request failed: {str(e)}", extra={
                "method": request.method,
                "path": request.url.path,
                "status": 500,
                "latency_ms": latency_ms,
                "client_ip": client_ip,
                "tenant_id": tenant_id,
            })
            raise
        finally:
            trace_id_var.set(None)

    def _log_request(self, method: str, path: str, status: int, latency_ms: float,
                     client_ip: str, tenant_id: str):
        """Log HTTP request with structured data and sampling"""

        if path in self.log_config["exclude_paths"]:
            return

        extra = {
            "method": method,
            "path": path,
            "status": status,
            "latency_ms": latency_ms,
            "client_ip": client_ip,
            "tenant_id": tenant_id,
        }

        # Always log errors
        if status >= 400:
            log_level = logging.ERROR if status >= 500 else logging.WARNING
            logger.log(log_level, "HTTP Request", extra=extra)
            return

        # Sample successful requests
        if random.random() > self.log_config["sample_rate"]:
            return

        logger.info("HTTP Request", extra=extra)


class ApiVersionHeaderMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-API-Version"] = API_VERSION
        return response
