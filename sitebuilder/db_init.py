import logging
from threading import Lock

from .config import SEED_DEMO_TENANT
from .db import init_db, session_scope
from .models.tenant import Page, Tenant

log = logging.getLogger(__name__)

DEMO_TENANT_KEY = "00000000-0000-4000-8000-000000000001"

_initialized = False
_init_lock = Lock()


def _seed_demo_tenant() -> None:
    with session_scope() as db:
        if db.query(Tenant).filter(Tenant.tenant_key == DEMO_TENANT_KEY).count():
            return
        tenant = Tenant(tenant_key=DEMO_TENANT_KEY, name="Demo Tenant")
        tenant.pages.append(Page(title="Home", slug="home"))
        db.add(tenant)
        log.info("DB_INIT: seeded demo tenant %s", DEMO_TENANT_KEY)


def init_schema_and_seed() -> None:
    """Create tables and optional demo data. Safe to call more than once."""
    global _initialized
    if _initialized:
        return
    with _init_lock:
        if _initialized:
            return
        init_db()
        if SEED_DEMO_TENANT:
            _seed_demo_tenant()
        _initialized = True
