"""
Tenant API key issuance, lookup and maintenance.

A secret looks like ``sn_test_<64 hex>``; only its SHA-256 digest and the
first ``KEY_PREFIX_LENGTH`` characters are stored.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..config import API_KEY_DEFAULT_RATE_LIMIT, IS_PRODUCTION
from ..errors import NotFoundError
from ..models.apikey import ApiKey
from ..models.tenant import Tenant
from ..utils.crypto import hash_token, random_hex, tokens_match
from ..utils.dates import ensure_utc, utcnow

logger = logging.getLogger(__name__)

KEY_PREFIX_LENGTH = 12

SORT_COLUMNS = {
    "createdAt": ApiKey.created_at,
    "name": ApiKey.name,
    "lastUsedAt": ApiKey.last_used_at,
}


def generate_secret() -> str:
    env = "live" if IS_PRODUCTION else "test"
    return f"sn_{env}_{random_hex(32)}"


def create_api_key(
    db: Session,
    tenant: Tenant,
    name: str,
    permissions: Iterable[str],
    created_by: Optional[str],
    rate_limit: Optional[int] = None,
    expires_at: Optional[datetime] = None,
) -> Tuple[ApiKey, str]:
    """Persist a new key and return it together with the one-time secret"""
    secret = generate_secret()
    key = ApiKey(
        tenant_id=tenant.id,
        name=name,
        key_hash=hash_token(secret),
        key_prefix=secret[:KEY_PREFIX_LENGTH],
        permissions=list(permissions),
        rate_limit=rate_limit if rate_limit is not None else API_KEY_DEFAULT_RATE_LIMIT,
        expires_at=expires_at,
        is_active=True,
        created_by=created_by,
    )
    db.add(key)
    db.commit()
    db.refresh(key)
    logger.info("API key created", extra={"key_id": key.id, "key_prefix": key.key_prefix})
    return key, secret


def list_api_keys(
    db: Session,
    tenant: Tenant,
    *,
    is_active: Optional[bool] = None,
    page: int = 1,
    limit: int = 20,
    sort: str = "createdAt",
    order: str = "desc",
) -> Tuple[List[ApiKey], int]:
    query = db.query(ApiKey).filter(ApiKey.tenant_id == tenant.id)
    if is_active is not None:
        query = query.filter(ApiKey.is_active == is_active)
    total = query.count()

    column = SORT_COLUMNS.get(sort, ApiKey.created_at)
    ordering = column.asc() if order == "asc" else column.desc()
    rows = query.order_by(ordering, ApiKey.id).offset((page - 1) * limit).limit(limit).all()
    return rows, total


def get_api_key(db: Session, tenant: Tenant, key_id: str) -> ApiKey:
    key = db.query(ApiKey).filter(ApiKey.id == key_id, ApiKey.tenant_id == tenant.id).one_or_none()
    if key is None:
        raise NotFoundError("API key")
    return key


def update_api_key(db: Session, key: ApiKey, changes: Dict[str, Any]) -> ApiKey:
    for field, value in changes.items():
        setattr(key, field, value)
    db.commit()
    db.refresh(key)
    return key


def delete_api_key(db: Session, key: ApiKey) -> None:
    db.delete(key)
    db.commit()


def resolve_api_key(db: Session, secret: str) -> Optional[ApiKey]:
    """Find the active, unexpired key matching ``secret`` and stamp its use"""
    if not secret or len(secret) <= KEY_PREFIX_LENGTH:
        return None
    candidates = (
        db.query(ApiKey)
        .filter(ApiKey.key_prefix == secret[:KEY_PREFIX_LENGTH], ApiKey.is_active.is_(True))
        .all()
    )
    for key in candidates:
        if not tokens_match(secret, key.key_hash):
            continue
        if key.expires_at is not None and ensure_utc(key.expires_at) <= utcnow():
            logger.warning("API key expired", extra={"key_id": key.id})
            return None
        key.last_used_at = utcnow()
        db.commit()
        return key
    return None
