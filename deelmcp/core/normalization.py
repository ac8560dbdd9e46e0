"""Helpers for the inconsistent response shapes of the Deel API.

The request pipeline only guarantees the outer `{data, page?}` envelope. The
shape of `data`, the pagination convention and the wrapping of individual
fields vary by endpoint family; these helpers cover the recurring patterns so
tool handlers do not each re-implement them.

Shape variants:
    - `data` is a list of records (list endpoints)
    - `data` is a single record (detail endpoints)
    - `data` is a wrapper object with its own list under `rows`
    - fields wrapped as `{currentValue, formattedCurrentValue, label, type}`

Pagination variants (see `PaginationStyle`):
    - `page.cursor`              -> next request sends `cursor`
    - `page.after_cursor`        -> next request sends `after_cursor`
    - `page.offset`/`page.limit` -> next request sends `offset`
    - `data.has_more`/`data.next_cursor` (wrapper objects) -> `cursor`
    - top-level `has_next_page`/`next` outside `page` -> `cursor`
"""

import enum
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from deelmcp.domain.models.common import Envelope, ParamValue, QueryParams

if TYPE_CHECKING:
    from deelmcp.infrastructure.http.deel_client import DeelApiClient

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
DEFAULT_MAX_PAGES = 50

class PaginationStyle(enum.Enum):
    """How an endpoint family signals that more results exist."""
    CURSOR = "cursor"
    AFTER_CURSOR = "after_cursor"
    OFFSET = "offset"
    NEXT_CURSOR = "next_cursor"
    NEXT = "next"

# --- Record extraction ---

def extract_records(envelope: Optional[Mapping[str, Any]], key: str = "rows") -> List[Any]:
    """Returns the records in an envelope regardless of how `data` is shaped.

    A list is returned as-is, a wrapper object yields its nested `key` list,
    any other object is treated as a single record, and a missing `data`
    yields an empty list.
    """
    if not envelope:
        return []
    data = envelope.get("data")
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        nested = data.get(key)
        if isinstance(nested, list):
            return nested
        return [data]
    return [data]

def pick(record: Optional[Mapping[str, Any]], *keys: str, default: Any = NOT_AVAILABLE) -> Any:
    """Returns the value of the first key that is present and not null."""
    if not record:
        return default
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default

# --- Field unwrapping ---

def _is_wrapped(field: Any, key: str) -> bool:
    return isinstance(field, dict) and key in field

def field_value(field: Any, default: str = NOT_AVAILABLE) -> str:
    """Unwraps `currentValue` from a wrapped field, else treats it as a scalar."""
    if _is_wrapped(field, "currentValue"):
        field = field["currentValue"]
    return default if field is None else str(field)

def formatted_value(field: Any, default: str = NOT_AVAILABLE) -> str:
    """Unwraps `formattedCurrentValue` from a wrapped field, else treats it as a scalar."""
    if _is_wrapped(field, "formattedCurrentValue"):
        field = field["formattedCurrentValue"]
    return default if field is None else str(field)

def field_label(field: Any, fallback: str) -> str:
    """Returns a wrapped field's `label`, or `fallback` for raw scalars."""
    if _is_wrapped(field, "label") and field["label"] is not None:
        return str(field["label"])
    return fallback

# --- Pagination ---

def _page(envelope: Mapping[str, Any]) -> Mapping[str, Any]:
    page = envelope.get("page")
    return page if isinstance(page, dict) else {}

def continuation_token(envelope: Mapping[str, Any], style: PaginationStyle) -> Optional[str]:
    """Returns the token for the next page, or None at end of sequence.

    Only meaningful for the cursor-like styles; OFFSET pagination is handled
    by `next_page_params`.
    """
    token: Any = None
    if style is PaginationStyle.CURSOR:
        token = _page(envelope).get("cursor")
    elif style is PaginationStyle.AFTER_CURSOR:
        token = _page(envelope).get("after_cursor")
    elif style is PaginationStyle.NEXT_CURSOR:
        data = envelope.get("data")
        if isinstance(data, dict) and data.get("has_more"):
            token = data.get("next_cursor")
    elif style is PaginationStyle.NEXT:
        if envelope.get("has_next_page", True):
            token = envelope.get("next")
    return str(token) if token not in (None, "") else None

def next_page_params(
    envelope: Mapping[str, Any],
    style: PaginationStyle,
    params: Optional[QueryParams] = None,
) -> Optional[Dict[str, ParamValue]]:
    """Builds the query parameters for the page after `envelope`.

    Returns None when the envelope is the last page.
    """
    next_params: Dict[str, ParamValue] = dict(params or {})

    if style is PaginationStyle.OFFSET:
        records = extract_records(envelope)
        if not records:
            return None
        page = _page(envelope)
        offset = int(pick(page, "offset", default=next_params.get("offset") or 0))
        limit = pick(page, "limit", default=next_params.get("limit"))
        total = pick(page, "total", "total_rows", default=None)
        new_offset = offset + len(records)
        if total is not None and new_offset >= int(total):
            return None
        if total is None and limit is not None and len(records) < int(limit):
            return None
        next_params["offset"] = new_offset
        return next_params

    token = continuation_token(envelope, style)
    if token is None:
        return None
    param_name = "after_cursor" if style is PaginationStyle.AFTER_CURSOR else "cursor"
    next_params[param_name] = token
    return next_params

async def fetch_all(
    client: "DeelApiClient",
    path: str,
    params: Optional[QueryParams] = None,
    style: PaginationStyle = PaginationStyle.CURSOR,
    max_pages: int = DEFAULT_MAX_PAGES,
    records_key: str = "rows",
) -> List[Any]:
    """Follows an endpoint's pagination and returns every record.

    Stops at the first page without a continuation, or after `max_pages`.
    """
    records: List[Any] = []
    page_params: Optional[Dict[str, ParamValue]] = dict(params or {})
    pages = 0
    while page_params is not None and pages < max_pages:
        envelope: Envelope = await client.request(path, page_params)
        records.extend(extract_records(envelope, records_key))
        pages += 1
        page_params = next_page_params(envelope, style, page_params)
    if page_params is not None:
        logger.warning(f"Stopped paging {path} after {max_pages} pages; more results remain.")
    return records
