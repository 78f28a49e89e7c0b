from datetime import datetime

from .base import PAGINATION_FIELDS, bounded_str, build_schema

AuditQuery = build_schema(
    "AuditQuery",
    {
        "user_id": (bounded_str(1, 255), None),
        "action": (bounded_str(1, 100), None),
        "resource_type": (bounded_str(1, 100), None),
        "resource_id": (bounded_str(1, 255), None),
        "start_date": (datetime, None),
        "end_date": (datetime, None),
        **PAGINATION_FIELDS,
    },
)
