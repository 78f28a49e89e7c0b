from typing import Any, Dict, Literal

from .base import HttpUrlStr, bounded_str, build_schema

TwitterCard = Literal["summary", "summary_large_image", "app", "player"]

SEO_FIELDS = {
    "meta_title": (bounded_str(1, 70), None),
    "meta_description": (bounded_str(max_length=160), None),
    "keywords": (bounded_str(max_length=255), None),
    "canonical_url": (HttpUrlStr, None),
    "og_title": (bounded_str(max_length=70), None),
    "og_description": (bounded_str(max_length=160), None),
    "og_image": (HttpUrlStr, None),
    "twitter_card": (TwitterCard, None),
    "twitter_title": (bounded_str(max_length=70), None),
    "twitter_description": (bounded_str(max_length=160), None),
    "twitter_image": (HttpUrlStr, None),
    "schema_markup": (Dict[str, Any], None),
    "robots": (bounded_str(max_length=100), None),
}

# Every field may be omitted or sent as null
UpsertSeoMetadata = build_schema("UpsertSeoMetadata", SEO_FIELDS, optional_all=True)
