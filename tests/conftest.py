# tests/conftest.py
import os

# Must be set before sitebuilder.config is imported
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALLOW_DEV_KEYS"] = "true"
os.environ["DEV_ADMIN_KEY"] = "TEST_OPERATOR_KEY"
os.environ["ADMIN_KEYS"] = "ops-key-1"
os.environ["OPENAI_API_KEY"] = ""
os.environ["LOG_FORMAT"] = "text"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sitebuilder.db import Base, get_db
from sitebuilder.main import app
from sitebuilder.models import Page, Tenant
from sitebuilder.services.ai import AVAILABLE_MODELS, SeoSuggestion, get_ai_service
from sitebuilder.services.apikeys import create_api_key
from sitebuilder.utils.dates import utcnow

OPERATOR_KEY = "TEST_OPERATOR_KEY"
TENANT_KEY = "3f1c2a9e-7b44-4c1e-9a53-2d6f0b8e1a01"
OTHER_TENANT_KEY = "8d2e4b10-5c6a-4f7e-b1d2-9e0f3a4b5c02"


class FakeAIService:
    """Stands in for the provider client; records calls, returns a fixed suggestion"""

    def __init__(self):
        self.calls = []
        self.error = None
        self.suggestion = SeoSuggestion(
            metaTitle="Handmade Oak Furniture | Acme Woodworks",
            metaDescription="Solid oak tables and chairs built to order in our workshop.",
            keywords=["oak furniture", "handmade tables", "custom chairs"],
            suggestions=["Add alt text to product images", "Use one H1 per page"],
        )

    def get_default_model(self):
        return "gpt-4o-mini"

    def get_available_models(self):
        return list(AVAILABLE_MODELS)

    async def enhance_seo(self, content, current_title, target_keywords=None, business_type=None, model=None):
        self.calls.append({
            "content": content,
            "current_title": current_title,
            "target_keywords": target_keywords,
            "business_type": business_type,
            "model": model,
        })
        if self.error is not None:
            raise self.error
        return self.suggestion


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def seed(session_factory):
    """Two tenants, a live page and a soft-deleted page on the first one"""
    with session_factory() as db:
        tenant = Tenant(tenant_key=TENANT_KEY, name="Acme Woodworks")
        other = Tenant(tenant_key=OTHER_TENANT_KEY, name="Globex")
        page = Page(title="Home", slug="home")
        deleted = Page(title="Old Promo", slug="old-promo", deleted_at=utcnow())
        tenant.pages.extend([page, deleted])
        other_page = Page(title="Globex Home", slug="home")
        other.pages.append(other_page)
        db.add_all([tenant, other])
        db.commit()
        return {
            "tenant_key": TENANT_KEY,
            "tenant_id": tenant.id,
            "other_tenant_key": OTHER_TENANT_KEY,
            "page_id": page.id,
            "deleted_page_id": deleted.id,
            "other_page_id": other_page.id,
        }


@pytest.fixture
def fake_ai():
    return FakeAIService()


@pytest.fixture
def client(session_factory, fake_ai):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_service] = lambda: fake_ai
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {OPERATOR_KEY}"}


@pytest.fixture
def make_key(session_factory, seed):
    """Issue a tenant API key and return request headers carrying it"""
    def _make(permissions, tenant_key=TENANT_KEY, **kwargs):
        with session_factory() as db:
            tenant = db.query(Tenant).filter(Tenant.tenant_key == tenant_key).one()
            _, secret = create_api_key(db, tenant, name="test key", permissions=permissions,
                                       created_by="pytest", **kwargs)
        return {"X-API-Key": secret}
    return _make
