"""Contract tools: listings, details, adjustments and timesheets."""

from typing import List, Literal, Optional

from pydantic import Field
from typing_extensions import Annotated

from deelmcp.core.normalization import extract_records, pick
from deelmcp.core.tools.params import ContractId, Cursor, Limit, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

ContractType = Literal["ongoing", "milestone", "pay_as_you_go", "eor", "gp"]
ContractStatus = Literal[
    "in_progress", "new", "processing", "waiting_for_input", "under_review", "cancelled",
]

def register_contract_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_list_contracts",
        "List all contracts in the organization with optional filtering. Returns contract "
        "type, status, worker info, and compensation details.",
    )
    async def list_contracts(
        contract_type: Annotated[Optional[ContractType], Field(description="Filter by contract type")] = None,
        status: Annotated[Optional[ContractStatus], Field(description="Filter by contract status")] = None,
        limit: Limit = None,
        cursor: Cursor = None,
    ) -> ToolResult:
        res = await client.request("/contracts", {
            "contract_type": contract_type,
            "statuses[]": status,
            "limit": limit,
            "cursor": cursor or None,
        })
        contracts = extract_records(res)
        if not contracts:
            return success("No contracts found matching the specified criteria.")

        lines = [f"Found {len(contracts)} contract(s):", ""]
        for c in contracts:
            worker = c.get("worker")
            invitations = c.get("invitations") or {}
            lines.append(f"- {pick(c, 'title', default='Untitled')}")
            lines.append(f"  ID: {pick(c, 'id')} | Type: {pick(c, 'type')} | Status: {pick(c, 'status')}")
            if worker:
                line = f"  Worker: {pick(worker, 'full_name', 'name')} ({pick(worker, 'email')})"
                if worker.get("id"):
                    line += f" [Worker ID: {worker['id']}]"
                lines.append(line)
            elif invitations.get("worker_email"):
                lines.append(f"  Worker email: {invitations['worker_email']}")
            if c.get("created_at"):
                lines.append(f"  Created: {c['created_at']}")
            if c.get("termination_date"):
                lines.append(f"  Termination: {c['termination_date']}")
            lines.append("")

        page = res.get("page") or {}
        if page.get("cursor"):
            lines.append(
                f"[More results available - use cursor: \"{page['cursor']}\" | "
                f"Total: {pick(page, 'total_rows')}]"
            )
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_contract",
        "Get full details for a single contract, including compensation/salary, employment "
        "details, job title, and worker info. Use this to see salary data that is not "
        "included in the contract list.",
    )
    async def get_contract(contract_id: ContractId) -> ToolResult:
        res = await client.request(f"/contracts/{path_segment(contract_id)}")
        c = res.get("data") or {}
        lines: List[str] = [
            f"Contract: {pick(c, 'title', default='Untitled')}",
            f"ID: {pick(c, 'id')} | Type: {pick(c, 'type')} | Status: {pick(c, 'status')}",
        ]

        worker = c.get("worker")
        if worker:
            lines.append(f"Worker: {pick(worker, 'full_name')} ({pick(worker, 'email')}) [ID: {pick(worker, 'id')}]")
            if worker.get("country"):
                lines.append(f"Country: {worker['country']}")

        comp = c.get("compensation_details")
        if comp:
            lines += [
                "",
                "Compensation:",
                f"  Amount: {pick(comp, 'amount')} {comp.get('currency_code') or ''}".rstrip(),
                f"  Scale: {pick(comp, 'scale', 'frequency')}",
            ]
            if comp.get("first_payment_date"):
                lines.append(f"  First payment: {comp['first_payment_date']}")
            if comp.get("gross_annual_salary"):
                lines.append(f"  Gross annual salary: {comp['gross_annual_salary']}")
        else:
            lines += ["", "Compensation: Not available for this contract type."]

        for key, label in (
            ("job_title", "Job title"),
            ("employment_type", "Employment type"),
            ("start_date", "Start date"),
            ("termination_date", "Termination date"),
        ):
            if c.get(key):
                lines.append(f"{label}: {c[key]}")

        employment = c.get("employment_details")
        if employment:
            lines += ["", "Employment details:"]
            for key, label in (("type", "Type"), ("days_per_week", "Days/week"), ("hours_per_day", "Hours/day")):
                if employment.get(key):
                    lines.append(f"  {label}: {employment[key]}")

        legal_entity = (c.get("client") or {}).get("legal_entity")
        if legal_entity:
            lines.append(f"Legal entity: {pick(legal_entity, 'name')} ({pick(legal_entity, 'id')})")

        return success("\n".join(lines))

    @registry.tool(
        "deel_get_contract_adjustments",
        "Get compensation adjustments for a specific contract, including salary changes and "
        "bonuses. Note: many contracts may have no adjustments if no salary changes have been made.",
    )
    async def get_contract_adjustments(contract_id: ContractId) -> ToolResult:
        adjustments = extract_records(await client.request(f"/contracts/{path_segment(contract_id)}/adjustments"))
        if not adjustments:
            return success(
                f"No adjustments found for contract {contract_id}. This is normal if no salary "
                "changes, bonuses, or compensation modifications have been recorded for this contract."
            )
        lines = [f"Found {len(adjustments)} adjustment(s) for contract {contract_id}:", ""]
        for a in adjustments:
            lines.append(
                f"- {pick(a, 'description', 'type', default='Adjustment')} | "
                f"Amount: {pick(a, 'amount')} {a.get('currency') or ''} | "
                f"Date: {pick(a, 'date', 'created_at')}"
            )
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_contract_timesheets",
        "Get timesheets submitted for a specific contract, including hours worked and approval status.",
    )
    async def get_contract_timesheets(
        contract_id: ContractId,
        limit: Limit = None,
        cursor: Cursor = None,
    ) -> ToolResult:
        res = await client.request(
            f"/contracts/{path_segment(contract_id)}/timesheets",
            {"limit": limit, "cursor": cursor or None},
        )
        timesheets = extract_records(res)
        if not timesheets:
            return success(f"No timesheets found for contract {contract_id}.")
        lines = [f"Found {len(timesheets)} timesheet(s) for contract {contract_id}:", ""]
        for t in timesheets:
            lines.append(
                f"- {pick(t, 'description', default='Timesheet')} | Hours: {pick(t, 'quantity', 'hours')} | "
                f"Status: {pick(t, 'status')} | Date: {pick(t, 'date_submitted', 'created_at')}"
            )
        cursor_next = (res.get("page") or {}).get("cursor")
        if cursor_next:
            lines += ["", f"[More results - use cursor: \"{cursor_next}\"]"]
        return success("\n".join(lines))
