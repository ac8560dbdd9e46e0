"""Global payroll tools: reports, gross-to-net, payslips and bank accounts."""

import json
from typing import Any, Dict, List

from pydantic import Field
from typing_extensions import Annotated

from deelmcp.core.normalization import (
    NOT_AVAILABLE,
    extract_records,
    field_label,
    field_value,
    formatted_value,
    pick,
)
from deelmcp.core.tools.params import Cursor, Limit, WorkerId, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

# Amounts that mean "nothing deducted" in gross-to-net rows
ZERO_AMOUNTS = {NOT_AVAILABLE, "$0.00", "0"}

def _date_only(value: Any) -> str:
    return str(value)[:10] if value else ""

def _deductions(row: Dict[str, Any]) -> List[str]:
    """Collects non-zero employee deductions (`ee*` fields and `taxPaid`)."""
    found = []
    for key, field in row.items():
        if key.startswith("ee") or key == "taxPaid":
            amount = formatted_value(field)
            if amount not in ZERO_AMOUNTS:
                found.append(f"{field_label(field, key)}: {amount}")
    return found

def register_payroll_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_get_payroll_reports",
        "Get payroll event reports for a legal entity, showing payroll runs and their status.",
    )
    async def get_payroll_reports(
        legal_entity_id: Annotated[
            str, Field(min_length=1, description="Legal entity ID (use deel_list_legal_entities to find)")
        ],
    ) -> ToolResult:
        reports = extract_records(await client.request(f"/gp/legal-entities/{path_segment(legal_entity_id)}/reports"))
        if not reports:
            return success(f"No payroll reports found for legal entity {legal_entity_id}.")
        lines = [f"Found {len(reports)} payroll report(s):", ""]
        for r in reports:
            start, end = _date_only(r.get("start_date")), _date_only(r.get("end_date"))
            period = f"{start} to {end}" if start and end else NOT_AVAILABLE
            line = f"- Report ID: {pick(r, 'id')} | Period: {period} | Status: {pick(r, 'status')}"
            lock_date = _date_only(r.get("lock_date"))
            if lock_date:
                line += f" | Lock date: {lock_date}"
            lines.append(line)
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_gross_to_net",
        "Get gross to net calculation breakdown for a payroll report, showing base salary, "
        "deductions, taxes, and net pay per worker. Only CLOSED reports have data; "
        "OPEN/LOCKED reports return empty.",
    )
    async def get_gross_to_net(
        gp_report_id: Annotated[
            str,
            Field(min_length=1, description="Global payroll report ID (use deel_get_payroll_reports to find CLOSED reports)"),
        ],
    ) -> ToolResult:
        res = await client.request(f"/gp/reports/{path_segment(gp_report_id)}/gross_to_net")
        data = res.get("data")
        if not isinstance(data, list):
            return success(f"Gross-to-net for report {gp_report_id}:\n{json.dumps(data, indent=2)}")
        if not data:
            return success(
                f"No gross-to-net data found for report {gp_report_id}. This report may be OPEN "
                "or LOCKED; only CLOSED reports contain payroll data."
            )

        lines = [f"Gross-to-net breakdown for report {gp_report_id} ({len(data)} worker(s)):", ""]
        for row in data:
            base_salary = row.get("baseSalary")
            if base_salary is None:
                base_salary = row.get("monthlyGrossSalaryRegularWork")
            lines.append(f"- {field_value(row.get('employeeName'))} ({field_value(row.get('jobTitle'))})")
            lines.append(
                f"  Contract: {field_value(row.get('contractId'))} | "
                f"Dept: {field_value(row.get('employeeDepartment'))} | "
                f"Currency: {field_value(row.get('originalCurrency'))}"
            )
            lines.append(
                f"  Base salary: {formatted_value(base_salary)} | "
                f"Gross: {formatted_value(row.get('grossPay'))} | "
                f"Net: {formatted_value(row.get('netPay'))} | "
                f"Employer cost: {formatted_value(row.get('employerCost'))}"
            )
            deductions = _deductions(row)
            if deductions:
                lines.append(f"  Deductions: {', '.join(deductions)}")
            lines.append("")
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_worker_payslips",
        "Get payslips for a specific worker, showing historical salary payments.",
    )
    async def get_worker_payslips(
        worker_id: WorkerId,
        limit: Limit = None,
        cursor: Cursor = None,
    ) -> ToolResult:
        res = await client.request(
            f"/gp/workers/{path_segment(worker_id)}/payslips",
            {"limit": limit, "cursor": cursor or None},
        )
        payslips = extract_records(res)
        if not payslips:
            return success(f"No payslips found for worker {worker_id}.")
        lines = [f"Found {len(payslips)} payslip(s) for worker {worker_id}:", ""]
        for p in payslips:
            lines.append(
                f"- Period: {pick(p, 'period', 'pay_period')} | Gross: {pick(p, 'gross_pay')} | "
                f"Net: {pick(p, 'net_pay')} | Status: {pick(p, 'status')}"
            )
        next_cursor = (res.get("page") or {}).get("cursor")
        if next_cursor:
            lines += ["", f"[More results - use cursor: \"{next_cursor}\"]"]
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_worker_banks",
        "Get bank account details on file for a specific worker.",
    )
    async def get_worker_banks(worker_id: WorkerId) -> ToolResult:
        banks = extract_records(await client.request(f"/gp/workers/{path_segment(worker_id)}/banks"))
        if not banks:
            return success(f"No bank accounts found for worker {worker_id}.")
        lines = [f"Found {len(banks)} bank account(s) for worker {worker_id}:", ""]
        for b in banks:
            account = str(pick(b, "account_number", "iban", default=""))
            lines.append(
                f"- {pick(b, 'bank_name', default='Bank')} | Account: ***{account[-4:]} | "
                f"Currency: {pick(b, 'currency')} | Primary: {pick(b, 'is_primary')}"
            )
        return success("\n".join(lines))
