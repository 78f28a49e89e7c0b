"""
API key issuance, listing and maintenance
"""
import re

from sitebuilder.models import ApiKey, AuditLog
from sitebuilder.utils.crypto import hash_token

SECRET_RE = re.compile(r"^sn_test_[0-9a-f]{64}$")


def keys_url(tenant_key):
    return f"/api/tenants/{tenant_key}/api-keys"


def create(client, seed, headers, **overrides):
    body = {"name": "Deploy key", "permissions": ["read:seo", "write:seo"]}
    body.update(overrides)
    return client.post(keys_url(seed["tenant_key"]), json=body, headers=headers)


def test_create_returns_secret_once(client, seed, admin_headers, session_factory):
    r = create(client, seed, admin_headers)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "API key created successfully. Save the key - it will not be shown again."

    data = body["data"]
    assert SECRET_RE.match(data["key"])
    assert data["keyPrefix"] == data["key"][:12]
    assert data["rateLimit"] == 1000
    assert data["permissions"] == ["read:seo", "write:seo"]
    assert data["isActive"] is True
    assert "keyHash" not in data

    with session_factory() as db:
        row = db.query(ApiKey).one()
        assert row.key_hash == hash_token(data["key"])
        assert row.key_hash != data["key"]
        assert row.created_by.startswith("operator:")


def test_list_never_contains_secret(client, seed, admin_headers):
    secret = create(client, seed, admin_headers).json()["data"]["key"]

    r = client.get(keys_url(seed["tenant_key"]), headers=admin_headers)
    assert r.status_code == 200
    assert secret not in r.text

    data = r.json()["data"]
    assert data["pagination"] == {
        "page": 1, "limit": 20, "total": 1, "totalPages": 1, "hasNext": False, "hasPrev": False,
    }
    item = data["items"][0]
    assert item["name"] == "Deploy key"
    assert item["keyPrefix"] == secret[:12]
    assert "key" not in item


def test_create_audits_without_secret(client, seed, admin_headers, session_factory):
    secret = create(client, seed, admin_headers).json()["data"]["key"]
    with session_factory() as db:
        entry = db.query(AuditLog).filter(AuditLog.action == "apiKey.create").one()
        assert entry.tenant_id == seed["tenant_key"]
        assert entry.details == {
            "name": "Deploy key",
            "keyPrefix": secret[:12],
            "permissions": ["read:seo", "write:seo"],
        }
        assert secret not in str(entry.to_dict())


def test_create_validation_error(client, seed, admin_headers):
    r = create(client, seed, admin_headers, name="", permissions=[])
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    assert {d["field"] for d in body["details"]} == {"name", "permissions"}


def test_create_invalid_json(client, seed, admin_headers):
    r = client.post(keys_url(seed["tenant_key"]), content=b"{not json", headers={
        **admin_headers, "Content-Type": "application/json",
    })
    assert r.status_code == 400
    assert r.json()["details"] == [{"field": "body", "message": "Invalid JSON"}]


def test_unknown_tenant_is_404(client, seed, admin_headers):
    r = client.post(keys_url("0b7f6a52-0000-4000-8000-000000000000"),
                    json={"name": "x", "permissions": ["read:seo"]}, headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Tenant not found"


def test_tenant_key_needs_admin_permission(client, seed, make_key):
    r = client.get(keys_url(seed["tenant_key"]), headers=make_key(["read:seo", "write:seo"]))
    assert r.status_code == 403

    r = client.get(keys_url(seed["tenant_key"]), headers=make_key(["admin:all"]))
    assert r.status_code == 200


def test_list_filters_and_paginates(client, seed, admin_headers):
    for i in range(3):
        create(client, seed, admin_headers, name=f"key {i}")
    first = client.get(keys_url(seed["tenant_key"]), headers=admin_headers).json()["data"]["items"][0]
    client.patch(f"{keys_url(seed['tenant_key'])}/{first['id']}", json={"isActive": False}, headers=admin_headers)

    active = client.get(keys_url(seed["tenant_key"]), params={"isActive": "true"}, headers=admin_headers).json()
    assert active["data"]["pagination"]["total"] == 2

    inactive = client.get(keys_url(seed["tenant_key"]), params={"isActive": "false"}, headers=admin_headers).json()
    assert [k["id"] for k in inactive["data"]["items"]] == [first["id"]]

    page = client.get(keys_url(seed["tenant_key"]),
                      params={"page": 2, "limit": 2, "sort": "name", "order": "asc"},
                      headers=admin_headers).json()["data"]
    assert [k["name"] for k in page["items"]] == ["key 2"]
    assert page["pagination"]["hasPrev"] is True
    assert page["pagination"]["hasNext"] is False
    assert page["pagination"]["totalPages"] == 2


def test_list_bad_pagination(client, seed, admin_headers):
    r = client.get(keys_url(seed["tenant_key"]), params={"limit": 0}, headers=admin_headers)
    assert r.status_code == 400


def test_update_and_delete(client, seed, admin_headers, session_factory):
    key_id = create(client, seed, admin_headers).json()["data"]["id"]
    url = f"{keys_url(seed['tenant_key'])}/{key_id}"

    r = client.patch(url, json={"name": "Renamed", "rateLimit": 50}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Renamed"
    assert r.json()["data"]["rateLimit"] == 50

    r = client.delete(url, headers=admin_headers)
    assert r.status_code == 204
    assert r.content == b""

    r = client.delete(url, headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["error"] == "API key not found"

    with session_factory() as db:
        actions = [a for (a,) in db.query(AuditLog.action).order_by(AuditLog.id)]
        assert actions == ["apiKey.create", "apiKey.update", "apiKey.delete"]


def test_issued_key_authenticates(client, seed, admin_headers):
    secret = create(client, seed, admin_headers, permissions=["read:seo"]).json()["data"]["key"]
    r = client.get(f"/api/tenants/{seed['tenant_key']}/pages/{seed['page_id']}/seo",
                   headers={"Authorization": f"Bearer {secret}"})
    assert r.status_code == 404
    assert r.json()["error"] == "SEO metadata not found"
