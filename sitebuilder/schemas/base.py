"""
Schema building and validation helpers.

Every request schema is generated from a field-constraint table
``{python_name: (annotated_type, default)}``. Constraints live in the
``Annotated`` metadata of each type, so a table can be turned into a create
schema, an all-optional update schema or an extended variant without
restating a single bound.

Validation never raises for bad input: :func:`validate_payload` returns
either the parsed model or a list of ``{"field", "message"}`` errors keyed by
the camelCase wire name.
"""
import re
import uuid
from datetime import datetime
from typing import Annotated, Any, Dict, Iterable, List, Optional, Tuple, Type
from urllib.parse import urlparse

from pydantic import (
    AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, create_model,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from ..utils.dates import ensure_utc, utcnow

FieldTable = Dict[str, Tuple[Any, Any]]
FieldErrors = List[Dict[str, str]]


class ApiSchema(BaseModel):
    """Base for request schemas: camelCase on the wire, unknown keys dropped."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def build_schema(
    name: str,
    table: FieldTable,
    *,
    required: Optional[Iterable[str]] = None,
    optional_all: bool = False,
    extra: Optional[FieldTable] = None,
    doc: Optional[str] = None,
) -> Type[ApiSchema]:
    """Build a schema class from a field-constraint table.

    ``required`` forces the named fields to be required, ``optional_all``
    relaxes every field to optional with a ``None`` default, ``extra`` adds
    fields on top of ``table``.
    """
    required = set(required or ())
    fields: Dict[str, Any] = {}
    merged = dict(table)
    merged.update(extra or {})
    for field_name, (annotation, default) in merged.items():
        if optional_all:
            fields[field_name] = (Optional[annotation], None)
        elif field_name in required:
            fields[field_name] = (annotation, ...)
        else:
            fields[field_name] = (annotation, default)
    model = create_model(name, __base__=ApiSchema, **fields)
    if doc:
        model.__doc__ = doc
    return model


def format_errors(exc: ValidationError) -> FieldErrors:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return errors


def validate_payload(schema: Type[BaseModel], data: Any) -> Tuple[Optional[BaseModel], FieldErrors]:
    """Validate raw input against ``schema``.

    Returns ``(model, [])`` on success and ``(None, errors)`` otherwise.
    """
    if not isinstance(data, dict):
        return None, [{"field": "body", "message": "Expected a JSON object"}]
    try:
        return schema.model_validate(data), []
    except ValidationError as exc:
        return None, format_errors(exc)


# ---------------------------------------------------------------------------
# Shared constrained types
# ---------------------------------------------------------------------------

def uuid_string(message: str = "Invalid UUID"):
    def _check(value: str) -> str:
        try:
            canonical = str(uuid.UUID(value))
        except ValueError:
            raise PydanticCustomError("uuid", message) from None
        if canonical != value.lower():
            raise PydanticCustomError("uuid", message)
        return canonical
    return Annotated[str, AfterValidator(_check)]


def _future(value: datetime) -> datetime:
    value = ensure_utc(value)
    if value <= utcnow():
        raise PydanticCustomError("future_datetime", "Expiration date must be in the future")
    return value


def _http_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise PydanticCustomError("url", "Invalid URL format")
    return value


_CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")

def _currency(value: str) -> str:
    if not _CURRENCY_RE.match(value):
        raise PydanticCustomError("currency", "Currency must be 3-letter code (e.g., USD)")
    return value.upper()


def _query_flag(value: Any) -> Any:
    # query strings only ever say "true" when they mean it
    if isinstance(value, str):
        return value == "true"
    return value


def unique_items(message: str):
    def _check(values: list) -> list:
        if len(set(values)) != len(values):
            raise PydanticCustomError("unique_items", message)
        return values
    return AfterValidator(_check)


def bounded_str(min_length: Optional[int] = None, max_length: Optional[int] = None):
    return Annotated[str, Field(min_length=min_length, max_length=max_length)]


FutureDatetime = Annotated[datetime, AfterValidator(_future)]
HttpUrlStr = Annotated[str, Field(max_length=255), AfterValidator(_http_url)]
Currency = Annotated[str, AfterValidator(_currency)]
QueryFlag = Annotated[bool, BeforeValidator(_query_flag)]

PAGINATION_FIELDS: FieldTable = {
    "page": (Annotated[int, Field(ge=1)], 1),
    "limit": (Annotated[int, Field(ge=1, le=100)], 20),
}
