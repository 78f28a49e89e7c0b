"""
Request body and query parsing for routes that validate input themselves.

Each helper returns either the parsed schema instance or a 400 validation
envelope the route returns as-is.
"""
import json
from typing import Type, Union

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..schemas.base import validate_payload
from .response_builders import validation_error_response

Parsed = Union[BaseModel, JSONResponse]


async def read_json_body(request: Request, optional: bool = False):
    """Return the decoded JSON body, or a validation response"""
    raw = await request.body()
    if not raw.strip():
        if optional:
            return {}
        return validation_error_response([{"field": "body", "message": "Request body is required"}])
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return validation_error_response([{"field": "body", "message": "Invalid JSON"}])


async def parse_body(request: Request, schema: Type[BaseModel], optional: bool = False) -> Parsed:
    data = await read_json_body(request, optional=optional)
    if isinstance(data, JSONResponse):
        return data
    model, errors = validate_payload(schema, data)
    if errors:
        return validation_error_response(errors)
    return model


def parse_query(request: Request, schema: Type[BaseModel]) -> Parsed:
    model, errors = validate_payload(schema, dict(request.query_params))
    if errors:
        return validation_error_response(errors)
    return model
