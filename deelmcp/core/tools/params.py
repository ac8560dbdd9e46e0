"""Shared parameter declarations for tool handlers.

The pydantic `Field` metadata doubles as argument validation and as the
parameter descriptions advertised to the agent.
"""

from typing import Optional
from urllib.parse import quote

from pydantic import Field
from typing_extensions import Annotated

Limit = Annotated[Optional[Annotated[int, Field(ge=1, le=99)]], Field(description="Results per page (max 99)")]
Offset = Annotated[Optional[Annotated[int, Field(ge=0)]], Field(description="Offset for pagination")]
Cursor = Annotated[Optional[str], Field(description="Cursor for pagination (from previous response)")]
AfterCursor = Annotated[Optional[str], Field(description="Cursor for pagination")]
DateFilter = Annotated[Optional[str], Field(description="Date (YYYY-MM-DD)")]

WorkerId = Annotated[str, Field(min_length=1, description="The unique Deel worker ID")]
ContractId = Annotated[str, Field(min_length=1, description="The unique Deel contract ID (e.g. '3yjd75w')")]

def path_segment(value: str) -> str:
    """Percent-encodes a caller-supplied ID so it stays one URL path segment.

    Slashes, '?' and '#' are escaped; a bare '.' or '..' is escaped too so the
    URL normalizer cannot treat it as a dot segment.
    """
    encoded = quote(str(value), safe="")
    if encoded in (".", ".."):
        return encoded.replace(".", "%2E")
    return encoded
