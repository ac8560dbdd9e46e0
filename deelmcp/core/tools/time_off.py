"""Time-off request and entitlement tools."""

import json
from typing import Literal, Optional

from pydantic import Field
from typing_extensions import Annotated

from deelmcp.core.normalization import PaginationStyle, continuation_token, extract_records, pick
from deelmcp.core.tools.params import AfterCursor, Limit, WorkerId, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

TimeOffStatus = Literal["approved", "pending", "declined", "cancelled"]

def register_time_off_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_list_time_off_requests",
        "List time off requests across the organization, with optional filtering by contract or status.",
    )
    async def list_time_off_requests(
        contract_id: Annotated[Optional[str], Field(description="Filter by contract ID")] = None,
        status: Annotated[Optional[TimeOffStatus], Field(description="Filter by request status")] = None,
        limit: Limit = None,
        after_cursor: AfterCursor = None,
    ) -> ToolResult:
        res = await client.request("/time-off", {
            "contract_id": contract_id or None,
            "status": status,
            "limit": limit,
            "after_cursor": after_cursor or None,
        })
        requests = extract_records(res)
        if not requests:
            return success("No time off requests found.")

        lines = [f"Found {len(requests)} time off request(s):", ""]
        for r in requests:
            lines.append(
                f"- {pick(r, 'type', default='Time Off')} | "
                f"{pick(r, 'start_date')} to {pick(r, 'end_date')}"
            )
            lines.append(
                f"  Worker: {pick(r, 'worker_name', 'employee_name')} | "
                f"Status: {pick(r, 'status')} | Days: {pick(r, 'days', 'duration')}"
            )
            lines.append("")
        next_cursor = continuation_token(res, PaginationStyle.AFTER_CURSOR)
        if next_cursor:
            lines.append(f"[More results - use after_cursor: \"{next_cursor}\"]")
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_time_off_entitlements",
        "Get time off entitlements (available days/hours) for a specific worker.",
    )
    async def get_time_off_entitlements(worker_id: WorkerId) -> ToolResult:
        res = await client.request(f"/workers/{path_segment(worker_id)}/time-off/entitlements")
        data = res.get("data")
        if isinstance(data, list):
            if not data:
                return success(f"No time off entitlements found for worker {worker_id}.")
            lines = [f"Time off entitlements for worker {worker_id}:", ""]
            for e in data:
                lines.append(
                    f"- {pick(e, 'type', 'name', default='Entitlement')}: "
                    f"{pick(e, 'balance', 'remaining')} days remaining "
                    f"(Total: {pick(e, 'total', 'allowance')})"
                )
            return success("\n".join(lines))
        return success(f"Time off entitlements for worker {worker_id}:\n{json.dumps(data, indent=2)}")
