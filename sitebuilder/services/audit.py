"""
Audit Service

Appends "who did what to which resource" entries. Writes go through their own
session on the caller's engine, after the primary change has been committed;
a failed audit write is logged and dropped.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request
from sqlalchemy.orm import Session

from ..models.audit_log import AuditLog

logger = logging.getLogger(__name__)

REDACT_FIELDS = ("password", "token", "secret", "apikey", "key_hash", "privatekey", "creditcard", "ssn")


def redact_sensitive_data(data: Any) -> Any:
    """Recursively redact sensitive keys from an audit payload"""
    if isinstance(data, dict):
        redacted = {}
        for key, value in data.items():
            normalized = str(key).lower().replace("-", "").replace("_", "")
            if any(sensitive.replace("_", "") in normalized for sensitive in REDACT_FIELDS):
                redacted[key] = "[REDACTED]"
            else:
                redacted[key] = redact_sensitive_data(value)
        return redacted
    elif isinstance(data, list):
        return [redact_sensitive_data(item) for item in data]
    else:
        return data


def get_client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else None
    return ip[:45] if ip else None


def get_user_agent(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    ua = request.headers.get("user-agent")
    return ua[:1000] if ua else None


def log_audit(
    db: Session,
    *,
    actor_id: Optional[str],
    tenant_id: Optional[str],
    action: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    old_value: Optional[Dict[str, Any]] = None,
    new_value: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> None:
    """Log an action to the audit trail"""

    audit_db = Session(bind=db.get_bind())
    try:
        entry = AuditLog(
            actor_id=actor_id,
            tenant_id=tenant_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            old_value=redact_sensitive_data(old_value) if old_value else None,
            new_value=redact_sensitive_data(new_value) if new_value else None,
            details=redact_sensitive_data(metadata) if metadata else None,
            ip_address=get_client_ip(request),
            user_agent=get_user_agent(request),
        )
        audit_db.add(entry)
        audit_db.commit()

        logger.info("Audit log: %s performed %s on %s %s", actor_id, action, resource_type, resource_id)

    except Exception as e:
        logger.error("Failed to write audit log for %s: %s", action, e)
        audit_db.rollback()
    finally:
        audit_db.close()


def log_create(db: Session, *, resource_type: str, resource_id: str,
               new_value: Optional[Dict[str, Any]] = None, **kwargs) -> None:
    log_audit(db, action=f"{resource_type}.create", resource_type=resource_type,
              resource_id=resource_id, new_value=new_value, **kwargs)


def log_update(db: Session, *, resource_type: str, resource_id: str,
               old_value: Dict[str, Any], new_value: Dict[str, Any], **kwargs) -> None:
    log_audit(db, action=f"{resource_type}.update", resource_type=resource_type,
              resource_id=resource_id, old_value=old_value, new_value=new_value, **kwargs)


def log_delete(db: Session, *, resource_type: str, resource_id: str,
               old_value: Optional[Dict[str, Any]] = None, **kwargs) -> None:
    log_audit(db, action=f"{resource_type}.delete", resource_type=resource_type,
              resource_id=resource_id, old_value=old_value, **kwargs)


def log_action(db: Session, action: str, **kwargs) -> None:
    log_audit(db, action=action, **kwargs)


def list_audit_logs(
    db: Session,
    tenant_id: str,
    *,
    user_id: Optional[str] = None,
    action: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[AuditLog], int]:
    """Page through a tenant's audit trail, newest first"""
    query = db.query(AuditLog).filter(AuditLog.tenant_id == tenant_id)
    if user_id:
        query = query.filter(AuditLog.actor_id == user_id)
    if action:
        query = query.filter(AuditLog.action == action)
    if resource_type:
        query = query.filter(AuditLog.resource_type == resource_type)
    if resource_id:
        query = query.filter(AuditLog.resource_id == resource_id)
    if start_date:
        query = query.filter(AuditLog.created_at >= start_date)
    if end_date:
        query = query.filter(AuditLog.created_at <= end_date)

    total = query.count()
    rows = (
        query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return rows, total
