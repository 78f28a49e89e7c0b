"""
Envelope builders, the route boundary and app-level behaviour
"""
import asyncio
import json

from sqlalchemy.exc import IntegrityError

from sitebuilder.api.response_builders import (
    api_boundary, created_response, error_response, no_content_response, not_found_response,
    paginated_response, rate_limit_response, success_response, validation_error_response,
)
from sitebuilder.errors import ConflictError, NotFoundError


def body(response):
    return json.loads(response.body)


def test_success_envelope():
    r = success_response({"a": 1}, message="done")
    payload = body(r)
    assert r.status_code == 200
    assert payload["success"] is True
    assert payload["data"] == {"a": 1}
    assert payload["message"] == "done"
    assert "timestamp" in payload["meta"]


def test_created_and_no_content():
    assert created_response({"id": "1"}).status_code == 201
    r = no_content_response()
    assert r.status_code == 204
    assert r.body == b""


def test_error_envelopes():
    payload = body(error_response("boom", 500))
    assert payload["success"] is False
    assert payload["error"] == "boom"
    assert "details" not in payload

    r = validation_error_response([{"field": "name", "message": "required"}])
    assert r.status_code == 400
    assert body(r)["details"] == [{"field": "name", "message": "required"}]

    r = not_found_response("Page")
    assert r.status_code == 404
    assert body(r)["error"] == "Page not found"

    r = rate_limit_response("slow down", "30")
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "30"


def test_paginated_envelope():
    payload = body(paginated_response([1, 2], page=2, limit=2, total=5))
    assert payload["data"]["items"] == [1, 2]
    assert payload["data"]["pagination"] == {
        "page": 2, "limit": 2, "total": 5, "totalPages": 3, "hasNext": True, "hasPrev": True,
    }


def test_paginated_empty():
    pagination = body(paginated_response([], page=1, limit=20, total=0))["data"]["pagination"]
    assert pagination["totalPages"] == 0
    assert pagination["hasNext"] is False


def run(coro):
    return asyncio.run(coro)


def test_boundary_renders_api_errors():
    @api_boundary("Failed to do the thing")
    async def missing():
        raise NotFoundError("Widget")

    @api_boundary("Failed to do the thing")
    async def clash():
        raise ConflictError("Widget already exists")

    r = run(missing())
    assert r.status_code == 404
    assert body(r)["error"] == "Widget not found"
    assert run(clash()).status_code == 409


def test_boundary_maps_integrity_error_to_conflict():
    @api_boundary("Failed to save")
    async def dup():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    assert run(dup()).status_code == 409


def test_boundary_turns_unknown_errors_into_500():
    @api_boundary("Failed to save")
    async def broken():
        raise RuntimeError("disk on fire")

    r = run(broken())
    assert r.status_code == 500
    assert body(r)["error"] == "Failed to save: disk on fire"


def test_health_is_public(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    assert r.json()["service"] == "sitebuilder-api"
    assert "X-API-Version" in r.headers
    assert "X-Request-ID" in r.headers


def test_request_id_is_echoed(client):
    r = client.get("/api/health", headers={"X-Request-ID": "trace-123"})
    assert r.headers["X-Request-ID"] == "trace-123"
