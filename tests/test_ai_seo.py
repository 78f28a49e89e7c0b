"""
AI SEO routes: /api/ai/seo and /api/ai/seo-optimize
"""
from sitebuilder.errors import ProviderAuthError, ProviderError, ProviderRateLimitError
from sitebuilder.models import AuditLog

CONTENT = (
    "Acme Woodworks builds solid oak tables, chairs and shelving by hand in a small "
    "workshop. Every piece is made to order and finished with natural oils."
)


def suggest_body(seed, **overrides):
    body = {"content": CONTENT, "currentTitle": "Home", "tenantId": seed["tenant_key"]}
    body.update(overrides)
    return body


def optimize_body(seed, **overrides):
    body = {"content": "Short page copy", "tenantId": seed["tenant_key"]}
    body.update(overrides)
    return body


def test_seo_returns_current_and_suggested(client, seed, admin_headers, fake_ai):
    r = client.post("/api/ai/seo", json=suggest_body(seed, targetKeywords=["oak"], businessType="furniture"),
                    headers=admin_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "SEO suggestions generated successfully"
    data = body["data"]
    assert data["current"] == {"title": "Home"}
    assert data["suggestions"] == {
        "metaTitle": fake_ai.suggestion.metaTitle,
        "metaDescription": fake_ai.suggestion.metaDescription,
        "keywords": fake_ai.suggestion.keywords,
        "improvements": fake_ai.suggestion.suggestions,
    }
    assert data["metadata"] == {"model": "gpt-4o-mini"}

    call = fake_ai.calls[0]
    assert call["target_keywords"] == ["oak"]
    assert call["business_type"] == "furniture"
    assert call["model"] is None


def test_seo_short_content_is_400_naming_content(client, seed, admin_headers, fake_ai):
    r = client.post("/api/ai/seo", json=suggest_body(seed, content="ten chars!"), headers=admin_headers)
    assert r.status_code == 400
    assert [d["field"] for d in r.json()["details"]] == ["content"]
    assert fake_ai.calls == []


def test_seo_validates_before_auth(client, seed, fake_ai):
    r = client.post("/api/ai/seo", json={"content": "x"})
    assert r.status_code == 400


def test_seo_requires_tenant_access(client, seed, make_key, fake_ai):
    headers = make_key(["write:seo"])
    r = client.post("/api/ai/seo", json=suggest_body(seed, tenantId=seed["other_tenant_key"]), headers=headers)
    assert r.status_code == 403
    assert fake_ai.calls == []


def test_seo_model_override_is_reported_and_audited(client, seed, admin_headers, session_factory):
    r = client.post("/api/ai/seo", json=suggest_body(seed, model="gpt-4o"), headers=admin_headers)
    assert r.json()["data"]["metadata"]["model"] == "gpt-4o"

    with session_factory() as db:
        entry = db.query(AuditLog).one()
        assert entry.action == "ai_seo.generate"
        assert entry.tenant_id == seed["tenant_key"]
        assert entry.details["model"] == "gpt-4o"
        assert entry.details["contentLength"] == len(CONTENT)
        assert entry.details["keywordCount"] == 3


def test_provider_auth_failure_maps_to_500(client, seed, admin_headers, fake_ai, session_factory):
    fake_ai.error = ProviderAuthError("bad key", status_code=401)
    for path, body in (("/api/ai/seo", suggest_body(seed)), ("/api/ai/seo-optimize", optimize_body(seed))):
        r = client.post(path, json=body, headers=admin_headers)
        assert r.status_code == 500
        assert r.json() == {
            "success": False,
            "error": "AI service authentication failed. Please check OPENAI_API_KEY.",
            "meta": r.json()["meta"],
        }
    with session_factory() as db:
        assert db.query(AuditLog).count() == 0


def test_provider_rate_limit_passes_through(client, seed, admin_headers, fake_ai):
    fake_ai.error = ProviderRateLimitError("slow down", retry_after="20")
    for path, body in (("/api/ai/seo", suggest_body(seed)), ("/api/ai/seo-optimize", optimize_body(seed))):
        r = client.post(path, json=body, headers=admin_headers)
        assert r.status_code == 429
        assert r.json()["error"] == "AI service rate limit exceeded. Please try again later."
        assert r.headers["Retry-After"] == "20"


def test_other_provider_failure_is_generic_500(client, seed, admin_headers, fake_ai):
    fake_ai.error = ProviderError("upstream exploded", status_code=502)
    r = client.post("/api/ai/seo-optimize", json=optimize_body(seed), headers=admin_headers)
    assert r.status_code == 500
    assert r.json()["error"].startswith("Failed to optimize SEO")


def test_optimize_response_shape(client, seed, admin_headers, fake_ai, session_factory):
    r = client.post("/api/ai/seo-optimize", json=optimize_body(seed, title="Home", keywords=["oak", "tables"]),
                    headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["message"] == "SEO optimization completed successfully"
    data = r.json()["data"]
    s = data["suggestions"]
    assert s["metaTitle"] == {"current": "Home", "suggestions": [fake_ai.suggestion.metaTitle]}
    assert s["metaDescription"] == {"suggestions": [fake_ai.suggestion.metaDescription]}
    assert s["keywords"] == {"current": ["oak", "tables"], "suggestions": fake_ai.suggestion.keywords}
    assert s["improvements"] == [
        {"aspect": "general", "recommended": text, "priority": "medium"}
        for text in fake_ai.suggestion.suggestions
    ]
    assert data["metadata"]["contentLength"] == len("Short page copy")
    assert data["metadata"]["model"] == "gpt-4o-mini"
    assert "timestamp" in data["metadata"]

    with session_factory() as db:
        entry = db.query(AuditLog).one()
        assert entry.action == "ai_seo_optimize.generate"
        assert entry.details == {"contentLength": len("Short page copy"), "model": "gpt-4o-mini"}


def test_optimize_without_title_passes_empty_title(client, seed, admin_headers, fake_ai):
    r = client.post("/api/ai/seo-optimize", json=optimize_body(seed), headers=admin_headers)
    assert r.status_code == 200
    assert fake_ai.calls[0]["current_title"] == ""
    assert r.json()["data"]["suggestions"]["keywords"]["current"] == []


def test_optimize_keyword_cap(client, seed, admin_headers):
    r = client.post("/api/ai/seo-optimize", json=optimize_body(seed, keywords=[str(i) for i in range(11)]),
                    headers=admin_headers)
    assert r.status_code == 400
    assert [d["field"] for d in r.json()["details"]] == ["keywords"]


def test_models_listing(client, seed, admin_headers):
    assert client.get("/api/ai/models").status_code == 401

    r = client.get("/api/ai/models", headers=admin_headers)
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["currentModel"] == "gpt-4o-mini"
    assert "gpt-4o" in data["availableModels"]
    assert set(data["info"]) == set(data["availableModels"])


def test_optimize_rejects_braced_tenant_id(client, seed, admin_headers, fake_ai, session_factory):
    braced = "{" + seed["tenant_key"].replace("-", "") + "}"
    r = client.post("/api/ai/seo-optimize", json=optimize_body(seed, tenantId=braced), headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["details"] == [{"field": "tenantId", "message": "Invalid tenant ID"}]
    assert fake_ai.calls == []
    with session_factory() as db:
        assert db.query(AuditLog).count() == 0
