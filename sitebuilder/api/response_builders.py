"""
Response builders for the uniform JSON envelope.

Success: ``{"success": true, "data": ..., "message"?: ..., "meta": {...}}``
Error:   ``{"success": false, "error": ..., "details"?: ..., "meta": {...}}``
"""
import functools
import logging
import math
from typing import Any, Dict, List, Optional

from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from ..config import IS_PRODUCTION
from ..errors import ApiError
from ..utils.dates import utcnow

logger = logging.getLogger(__name__)


def _envelope(body: Dict[str, Any], status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body["meta"] = {"timestamp": utcnow().isoformat()}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)


def success_response(data: Any = None, message: Optional[str] = None, status_code: int = 200) -> JSONResponse:
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return _envelope(body, status_code)


def created_response(data: Any, message: Optional[str] = None) -> JSONResponse:
    return success_response(data, message=message, status_code=201)


def no_content_response() -> Response:
    return Response(status_code=204)


def error_response(error: str, status_code: int = 500, details: Any = None,
                   headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return _envelope(body, status_code, headers=headers)


def validation_error_response(errors: List[Dict[str, str]]) -> JSONResponse:
    """Build 400 Bad Request response carrying per-field errors"""
    return error_response("Validation failed", 400, details=errors)


def not_found_response(resource: str) -> JSONResponse:
    return error_response(f"{resource} not found", 404)


def unauthorized_response(message: str = "Authentication required") -> JSONResponse:
    return error_response(message, 401)


def forbidden_response(message: str = "Access denied") -> JSONResponse:
    return error_response(message, 403)


def conflict_response(message: str) -> JSONResponse:
    return error_response(message, 409)


def rate_limit_response(message: str, retry_after: Optional[str] = None) -> JSONResponse:
    headers = {"Retry-After": str(retry_after)} if retry_after else None
    return error_response(message, 429, headers=headers)


def paginated_response(items: List[Any], page: int, limit: int, total: int) -> JSONResponse:
    total_pages = math.ceil(total / limit) if limit else 0
    return success_response({
        "items": items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
    })


def api_error_response(exc: ApiError) -> JSONResponse:
    return error_response(exc.message, exc.status_code, details=exc.details)


def api_boundary(context: str):
    """Route decorator turning escaped exceptions into error envelopes.

    ``context`` is the operator-facing message used for unexpected failures,
    e.g. ``"Failed to create API key"``.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except ApiError as exc:
                return api_error_response(exc)
            except IntegrityError as exc:
                logger.warning("%s: integrity error", context, extra={"error": str(exc.orig)})
                return conflict_response(f"{context}: resource already exists")
            except Exception as exc:
                logger.exception(context)
                message = context if IS_PRODUCTION else f"{context}: {exc}"
                return error_response(message, 500)
        return wrapper
    return decorator
