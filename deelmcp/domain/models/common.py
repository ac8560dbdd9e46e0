"""Defines common Value Objects used across the request pipeline.

These objects represent simple values like cache keys, API paths and the
JSON envelope returned by the Deel REST API.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, NewType, Optional, Union

from typing_extensions import NotRequired, TypedDict

# === Core Value Objects ===

CacheKey = NewType("CacheKey", str)      # Fully resolved request URL

# Query parameter values; None means "omit the parameter"
ParamValue = Union[str, int, float, bool, None]
QueryParams = Mapping[str, ParamValue]

# --- Structured Data ---

class PageInfo(TypedDict, total=False):
    """Pagination block returned next to `data` by list endpoints."""
    cursor: str
    after_cursor: str
    total_rows: int
    total: int
    offset: int
    limit: int

class Envelope(TypedDict):
    """The outer `{data, page?}` JSON structure every pipeline call returns.

    Only the outer keys are guaranteed; the shape of `data` varies by endpoint.
    """
    data: Any
    page: NotRequired[PageInfo]

@dataclass(frozen=True)
class RequestDescriptor:
    """An immutable description of one GET call: path plus query parameters."""
    path: str
    params: Dict[str, ParamValue] = field(default_factory=dict)

    @classmethod
    def build(cls, path: str, params: Optional[QueryParams] = None) -> "RequestDescriptor":
        # Drop undefined values up front so they never reach the query string
        defined = {k: v for k, v in (params or {}).items() if v is not None}
        return cls(path=path, params=defined)
