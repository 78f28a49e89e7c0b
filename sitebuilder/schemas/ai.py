"""
Request schemas for the AI SEO routes.

``/ai/seo`` and ``/ai/seo-optimize`` accept different bodies; both share the
tenant and model fields.
"""
from typing import Annotated, List

from pydantic import Field

from .base import bounded_str, build_schema, uuid_string

AI_COMMON_FIELDS = {
    "tenant_id": (uuid_string("Invalid tenant ID"), ...),
    "model": (bounded_str(1, 100), None),
}

SeoSuggestRequest = build_schema(
    "SeoSuggestRequest",
    {
        "content": (bounded_str(50, 5000), ...),
        "current_title": (bounded_str(1, 200), ...),
        "target_keywords": (List[str], None),
        "business_type": (bounded_str(max_length=100), None),
    },
    extra=AI_COMMON_FIELDS,
)

SeoOptimizeRequest = build_schema(
    "SeoOptimizeRequest",
    {
        "content": (bounded_str(1, 10000), ...),
        "title": (bounded_str(max_length=255), None),
        "keywords": (Annotated[List[str], Field(max_length=10)], None),
    },
    extra=AI_COMMON_FIELDS,
)
