"""Single-pass input validation that reports every offending field."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sweetshop.core.errors import FieldError, ValidationError
from sweetshop.schemas.sweets import SweetSearch

# FastAPI prefixes error locations with where the value came from.
_REQUEST_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})

# Wire names of search filters, keyed by SweetSearch attribute.
SEARCH_FIELD_NAMES = {
    "name": "name",
    "category": "category",
    "min_price": "minPrice",
    "max_price": "maxPrice",
}


def _field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if len(parts) > 1 and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or "body"


def field_errors_from_pydantic(errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    """Convert pydantic/FastAPI error dicts (loc, msg, ...) into FieldErrors."""
    return [FieldError(field=_field_name(e.get("loc", ())), message=e.get("msg", "Invalid value")) for e in errors]


def check_search(search: SweetSearch) -> SweetSearch:
    """Cross-field rules for search filters that per-field constraints cannot express."""
    errors: list[FieldError] = []
    if (
        search.min_price is not None
        and search.max_price is not None
        and search.min_price > search.max_price
    ):
        errors.append(
            FieldError(
                field=SEARCH_FIELD_NAMES["min_price"],
                message="minPrice must not be greater than maxPrice",
            )
        )
    if errors:
        raise ValidationError(errors, message="Invalid search parameters")
    return search
