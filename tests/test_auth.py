"""
Auth/tenant guard outcomes, exercised through tenant-scoped routes
"""
from datetime import timedelta

from sitebuilder.auth import CallerIdentity, has_permission
from sitebuilder.models import ApiKey
from sitebuilder.utils.dates import utcnow


def seo_url(seed, tenant_key=None, page_id=None):
    return f"/api/tenants/{tenant_key or seed['tenant_key']}/pages/{page_id or seed['page_id']}/seo"


def test_missing_credentials_rejected(client, seed):
    r = client.get(seo_url(seed))
    assert r.status_code == 401
    body = r.json()
    assert body["success"] is False
    assert body["error"] == "Authentication required"


def test_unknown_key_rejected(client, seed):
    r = client.get(seo_url(seed), headers={"Authorization": "Bearer sn_test_" + "0" * 64})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid or expired API key"


def test_operator_key_accepted_in_all_header_forms(client, seed):
    for headers in (
        {"Authorization": "Bearer TEST_OPERATOR_KEY"},
        {"Authorization": "TEST_OPERATOR_KEY"},
        {"X-API-Key": "TEST_OPERATOR_KEY"},
        {"Authorization": "Bearer ops-key-1"},
    ):
        r = client.get(seo_url(seed), headers=headers)
        # authorized; metadata simply does not exist yet
        assert r.status_code == 404, headers
        assert r.json()["error"] == "SEO metadata not found"


def test_tenant_key_cannot_reach_other_tenant(client, seed, make_key):
    headers = make_key(["read:seo"])
    r = client.get(seo_url(seed, tenant_key=seed["other_tenant_key"], page_id=seed["other_page_id"]), headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Access denied to this tenant"


def test_missing_permission_rejected(client, seed, make_key):
    headers = make_key(["read:pages"])
    r = client.get(seo_url(seed), headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "Insufficient permissions"


def test_auth_runs_before_page_lookup(client, seed):
    r = client.get(seo_url(seed, page_id="does-not-exist"))
    assert r.status_code == 401


def test_inactive_key_rejected(client, seed, make_key, session_factory):
    headers = make_key(["read:seo"])
    with session_factory() as db:
        db.query(ApiKey).update({ApiKey.is_active: False})
        db.commit()
    r = client.get(seo_url(seed), headers=headers)
    assert r.status_code == 401


def test_expired_key_rejected(client, seed, make_key, session_factory):
    headers = make_key(["read:seo"])
    with session_factory() as db:
        db.query(ApiKey).update({ApiKey.expires_at: utcnow() - timedelta(minutes=1)})
        db.commit()
    r = client.get(seo_url(seed), headers=headers)
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid or expired API key"


def test_key_use_is_stamped(client, seed, make_key, session_factory):
    headers = make_key(["read:seo"])
    client.get(seo_url(seed), headers=headers)
    with session_factory() as db:
        key = db.query(ApiKey).one()
        assert key.last_used_at is not None


def test_permission_rules():
    caller = CallerIdentity(id="apikey:1", role="api_key", tenant_key="t", permissions=("read:seo", "write:*"))
    assert has_permission(caller, "read:seo")
    assert has_permission(caller, "write:pages")
    assert not has_permission(caller, "delete:pages")

    admin = CallerIdentity(id="apikey:2", role="api_key", tenant_key="t", permissions=("admin:all",))
    assert has_permission(admin, "delete:webhooks")

    operator = CallerIdentity(id="operator:x", role="super_admin")
    assert has_permission(operator, "anything:at-all")


def test_dev_key_disabled_unless_enabled(monkeypatch):
    import importlib

    from sitebuilder import config
    from sitebuilder.auth import keys

    monkeypatch.delenv("ALLOW_DEV_KEYS")
    monkeypatch.setenv("ENVIRONMENT", "development")
    try:
        importlib.reload(config)
        assert config.ALLOW_DEV_KEYS is False
    finally:
        monkeypatch.undo()
        importlib.reload(config)

    monkeypatch.setattr(keys, "ALLOW_DEV_KEYS", False)
    assert "TEST_OPERATOR_KEY" not in keys.get_operator_keys()
    assert "ops-key-1" in keys.get_operator_keys()
