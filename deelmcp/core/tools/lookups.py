"""Reference-data lookups: countries, currencies, job titles and similar."""

from typing import Any, Callable, Optional

from pydantic import Field
from typing_extensions import Annotated

from deelmcp.core.normalization import PaginationStyle, continuation_token, extract_records, pick
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

def _format_time_off_type(t: Any) -> str:
    return f"- {t if isinstance(t, str) else pick(t, 'name')}"

# name, description, path, empty message, count label, row formatter
STATIC_LOOKUPS = (
    (
        "deel_lookup_countries",
        "Get the list of countries supported by Deel with their codes and names.",
        "/lookups/countries", "No countries data available.", "supported countries",
        lambda c: f"- {pick(c, 'name')} ({pick(c, 'code', 'iso_code')})",
    ),
    (
        "deel_lookup_currencies",
        "Get the list of currencies supported by Deel with their codes.",
        "/lookups/currencies", "No currencies data available.", "supported currencies",
        lambda c: f"- {pick(c, 'name', 'code')} ({pick(c, 'code')})",
    ),
    (
        "deel_lookup_seniorities",
        "Get the list of seniority levels (e.g. junior, mid, senior, lead).",
        "/lookups/seniorities", "No seniority data available.", "seniority levels",
        lambda s: f"- {pick(s, 'name', 'label')} (ID: {pick(s, 'id')})",
    ),
    (
        "deel_list_adjustment_categories",
        "List available adjustment categories for payroll adjustments (e.g. Train, Flight, Internet, Bonus).",
        "/adjustments/categories", "No adjustment categories found.", "adjustment categories",
        lambda c: f"- {pick(c, 'name')} (ID: {pick(c, 'id')}) | Unit: {pick(c, 'unit_type')}",
    ),
    (
        "deel_list_webhook_event_types",
        "List available webhook event types that can be subscribed to, with descriptions and example payloads.",
        "/webhooks/events/types", "No webhook event types found.", "webhook event types",
        lambda t: f"- {pick(t, 'name')} ({pick(t, 'module_label', 'module_name')})"
                  + (f"\n  {t['description']}" if t.get("description") else ""),
    ),
    (
        "deel_lookup_time_off_types",
        "Get the list of time off types (e.g. vacation, sick leave, personal).",
        "/lookups/time-off-types", "No time off type data available.", "time off types",
        _format_time_off_type,
    ),
)

def _register_static_lookup(
    registry: ToolRegistry,
    client: DeelApiClient,
    name: str,
    description: str,
    path: str,
    empty_message: str,
    label: str,
    formatter: Callable[[Any], str],
) -> None:

    @registry.tool(name, description)
    async def lookup() -> ToolResult:
        items = extract_records(await client.request(path))
        if not items:
            return success(empty_message)
        lines = [f"{len(items)} {label}:", ""]
        lines.extend(formatter(item) for item in items)
        return success("\n".join(lines))

def register_lookup_tools(registry: ToolRegistry, client: DeelApiClient) -> None:
    for name, description, path, empty_message, label, formatter in STATIC_LOOKUPS:
        _register_static_lookup(registry, client, name, description, path, empty_message, label, formatter)

    @registry.tool(
        "deel_lookup_job_titles",
        "Browse available job titles on Deel. Returns 99 titles per page with cursor-based pagination. "
        "Use the cursor from a previous response to get the next page.",
    )
    async def lookup_job_titles(
        cursor: Annotated[
            Optional[str], Field(description="Pagination cursor from previous response to get next page")
        ] = None,
    ) -> ToolResult:
        res = await client.request("/lookups/job-titles", {"cursor": cursor or None})
        titles = extract_records(res)
        if not titles:
            return success("No job titles data available.")
        lines = [f"{len(titles)} job titles:", ""]
        for t in titles:
            lines.append(f"- {pick(t, 'name', 'title')} (ID: {pick(t, 'id')})")
        next_cursor = continuation_token(res, PaginationStyle.CURSOR)
        if next_cursor:
            lines += ["", f"[More results available - use cursor: \"{next_cursor}\"]"]
        return success("\n".join(lines))
