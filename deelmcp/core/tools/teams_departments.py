"""Team, department and manager listings.

All three endpoints share the same `page.after_cursor` pagination, so they
are built from one template.
"""

from typing import Any, Callable, Mapping

from deelmcp.core.normalization import PaginationStyle, continuation_token, extract_records, pick
from deelmcp.core.tools.params import AfterCursor, Limit
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

RowFormatter = Callable[[Mapping[str, Any]], str]

def _format_team(t: Mapping[str, Any]) -> str:
    return (
        f"- {pick(t, 'name', default='Unnamed')} (ID: {pick(t, 'id')}) | "
        f"Members: {pick(t, 'member_count', 'members_count')}"
    )

def _format_department(d: Mapping[str, Any]) -> str:
    return f"- {pick(d, 'name', default='Unnamed')} (ID: {pick(d, 'id')})"

def _format_manager(m: Mapping[str, Any]) -> str:
    return (
        f"- {pick(m, 'name', 'full_name', default='Unnamed')} (ID: {pick(m, 'id')}) | "
        f"Email: {pick(m, 'email')} | Direct Reports: {pick(m, 'direct_reports_count')}"
    )

def _register_listing(
    registry: ToolRegistry,
    client: DeelApiClient,
    name: str,
    description: str,
    path: str,
    noun: str,
    formatter: RowFormatter,
) -> None:

    @registry.tool(name, description)
    async def list_items(limit: Limit = None, after_cursor: AfterCursor = None) -> ToolResult:
        res = await client.request(path, {"limit": limit, "after_cursor": after_cursor or None})
        items = extract_records(res)
        if not items:
            return success(f"No {noun}s found.")
        lines = [f"Found {len(items)} {noun}(s):", ""]
        lines.extend(formatter(item) for item in items)
        next_cursor = continuation_token(res, PaginationStyle.AFTER_CURSOR)
        if next_cursor:
            lines += ["", f"[More results - use after_cursor: \"{next_cursor}\"]"]
        return success("\n".join(lines))

def register_team_department_tools(registry: ToolRegistry, client: DeelApiClient) -> None:
    _register_listing(
        registry, client, "deel_list_teams",
        "List all teams in the organization.",
        "/teams", "team", _format_team,
    )
    _register_listing(
        registry, client, "deel_list_departments",
        "List all departments in the organization.",
        "/departments", "department", _format_department,
    )
    _register_listing(
        registry, client, "deel_list_managers",
        "List all managers in the organization with their reporting structure.",
        "/managers", "manager", _format_manager,
    )
