"""People tools: worker profiles and custom fields."""

from typing import Any, Dict, List, Optional

from deelmcp.core.normalization import extract_records, pick
from deelmcp.core.tools.params import WorkerId, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

def _work_email(emails: Optional[List[Dict[str, Any]]]) -> str:
    """Prefers the work address, then the primary one, then whatever is first."""
    if not emails:
        return "N/A"
    for wanted in ("work", "primary"):
        for email in emails:
            if email.get("type") == wanted and email.get("value"):
                return email["value"]
    return emails[0].get("value") or "N/A"

def register_people_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_get_person",
        "Get detailed information about a specific worker/employee by their worker ID, "
        "including personal details, employment type, and contract status.",
    )
    async def get_person(worker_id: WorkerId) -> ToolResult:
        res = await client.request(f"/people/{path_segment(worker_id)}")
        p = res.get("data") or {}

        department = p.get("department") or {}
        manager = p.get("direct_manager")
        manager_info = (
            f"{pick(manager, 'display_name')} ({manager.get('work_email') or ''})" if manager else "N/A"
        )
        lines = [
            f"Name: {pick(p, 'full_name', 'first_name')}",
            f"ID: {pick(p, 'id', default=worker_id)}",
            f"Email: {_work_email(p.get('emails'))}",
            f"Country: {pick(p, 'country')}",
            f"Hiring Type: {pick(p, 'hiring_type')}",
            f"Hiring Status: {pick(p, 'hiring_status')}",
            f"Start Date: {pick(p, 'start_date')}",
            f"Job Title: {pick(p, 'job_title')}",
            f"Department: {pick(department, 'name')}",
            f"Seniority: {pick(p, 'seniority')}",
            f"Manager: {manager_info}",
        ]

        employments = p.get("employments") or []
        payment = employments[0].get("payment") if employments else None
        if payment:
            lines.append(
                f"Compensation: {pick(payment, 'rate')} {payment.get('currency') or ''} "
                f"({pick(payment, 'scale')})"
            )
        return success("\n".join(lines))

    @registry.tool(
        "deel_list_people_custom_fields",
        "Fetch custom fields defined for people in the organization.",
    )
    async def list_people_custom_fields() -> ToolResult:
        fields = extract_records(await client.request("/people/custom_fields"))
        if not fields:
            return success("No custom fields defined for people.")
        lines = [f"Found {len(fields)} custom field(s):", ""]
        for f in fields:
            lines.append(
                f"- {pick(f, 'label', 'name', default='Unnamed')} (ID: {pick(f, 'id')}) | "
                f"Type: {pick(f, 'type')} | Required: {pick(f, 'required', default=False)}"
            )
        return success("\n".join(lines))
