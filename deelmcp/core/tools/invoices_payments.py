"""Invoice and payment tools.

`/payments` wraps its rows in `data.rows` and paginates with
`data.has_more`/`data.next_cursor`, unlike the other list endpoints.
"""

from typing import List, Optional

from pydantic import Field
from typing_extensions import Annotated

from deelmcp.core.normalization import (
    PaginationStyle,
    continuation_token,
    extract_records,
    pick,
)
from deelmcp.core.tools.params import Cursor, DateFilter, Limit, Offset, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

BREAKDOWN_COMPONENTS = (
    "work", "bonus", "expenses", "commissions", "deductions",
    "overtime", "pro_rata", "others", "processing_fee", "adjustment",
)
ZERO_AMOUNTS = {"0.00", "0"}

def register_invoice_payment_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_list_invoices",
        "List paid invoices (worker salary invoices) with optional date and entity filtering.",
    )
    async def list_invoices(
        issued_from_date: DateFilter = None,
        issued_to_date: DateFilter = None,
        limit: Limit = None,
        offset: Offset = None,
    ) -> ToolResult:
        invoices = extract_records(await client.request("/invoices", {
            "issued_from_date": issued_from_date or None,
            "issued_to_date": issued_to_date or None,
            "limit": limit,
            "offset": offset or None,
        }))
        if not invoices:
            return success("No invoices found matching the criteria.")

        lines = [f"Found {len(invoices)} invoice(s):", ""]
        for inv in invoices:
            label = pick(inv, "label", default=f"Invoice #{inv.get('id')}")
            lines.append(
                f"- {label} | Amount: {pick(inv, 'amount')} {inv.get('currency') or ''} "
                f"(Total: {pick(inv, 'total')})"
            )
            lines.append(
                f"  Status: {pick(inv, 'status')} | Created: {pick(inv, 'created_at')} | "
                f"Paid: {pick(inv, 'paid_at')}"
            )
            details: List[str] = []
            if inv.get("contract_id"):
                details.append(f"Contract: {inv['contract_id']}")
            if inv.get("recipient_legal_entity_id"):
                details.append(f"Legal entity: {inv['recipient_legal_entity_id']}")
            if inv.get("deel_fee") and inv["deel_fee"] != "0.00":
                details.append(f"Deel fee: {inv['deel_fee']}")
            if inv.get("is_overdue"):
                details.append("OVERDUE")
            if inv.get("due_date"):
                details.append(f"Due: {inv['due_date']}")
            if details:
                lines.append(f"  {' | '.join(details)}")
            lines.append("")
        return success("\n".join(lines))

    @registry.tool(
        "deel_list_deel_invoices",
        "List Deel fee invoices: the invoices Deel charges your organization for their services.",
    )
    async def list_deel_invoices(limit: Limit = None, offset: Offset = None) -> ToolResult:
        invoices = extract_records(
            await client.request("/invoices/deel", {"limit": limit, "offset": offset or None})
        )
        if not invoices:
            return success("No Deel fee invoices found.")
        lines = [f"Found {len(invoices)} Deel fee invoice(s):", ""]
        for inv in invoices:
            lines.append(
                f"- Invoice #{pick(inv, 'number', 'id')} | Amount: {pick(inv, 'amount', 'total')} "
                f"{inv.get('currency') or ''} | Date: {pick(inv, 'issued_date', 'date')} | "
                f"Status: {pick(inv, 'status')}"
            )
        return success("\n".join(lines))

    @registry.tool(
        "deel_list_payments",
        "List payment receipts with optional date and currency filtering.",
    )
    async def list_payments(
        date_from: DateFilter = None,
        date_to: DateFilter = None,
        currencies: Annotated[Optional[str], Field(description="Currency code filter (e.g. EUR, USD)")] = None,
        limit: Limit = None,
        cursor: Cursor = None,
    ) -> ToolResult:
        res = await client.request("/payments", {
            "date_from": date_from or None,
            "date_to": date_to or None,
            "currencies": currencies or None,
            "limit": limit,
            "cursor": cursor or None,
        })
        rows = extract_records(res, "rows")
        rows = [r for r in rows if isinstance(r, dict) and "id" in r]
        if not rows:
            return success("No payments found matching the criteria.")

        lines = [f"Found {len(rows)} payment(s):", ""]
        for p in rows:
            method = p.get("payment_method") or {}
            worker_names = ", ".join(str(pick(w, "name", default="Unknown")) for w in p.get("workers") or [])
            lines.append(
                f"- {pick(p, 'label', default='Payment')} (ID: {p['id']}) | "
                f"Total: {pick(p, 'total')} {p.get('payment_currency') or ''}"
            )
            lines.append(
                f"  Status: {pick(p, 'status')} | Method: {pick(method, 'type')} | Paid: {pick(p, 'paid_at')}"
            )
            if worker_names:
                lines.append(f"  Workers: {worker_names}")
            lines.append(f"  [Use ID \"{p['id']}\" with deel_get_payment_breakdown for details]")
            lines.append("")

        next_cursor = continuation_token(res, PaginationStyle.NEXT_CURSOR)
        if next_cursor:
            lines.append(f"[More results available - use cursor: \"{next_cursor}\"]")
        return success("\n".join(lines))

    @registry.tool(
        "deel_get_payment_breakdown",
        "Get the detailed breakdown of a specific payment, showing per-worker amounts with "
        "component breakdown (work, bonus, expenses, deductions, etc.). Use the payment ID from "
        "deel_list_payments (the hash ID, not the REC- label). Note: Global Payroll payments "
        "show the Deel payroll entity as the payee; use deel_get_gross_to_net for per-worker GP breakdown.",
    )
    async def get_payment_breakdown(
        payment_id: Annotated[
            str,
            Field(min_length=1, description="The unique payment ID (hash format from list_payments, e.g. '8gpu7JRY5bq8r4b83FmBB')"),
        ],
    ) -> ToolResult:
        res = await client.request(f"/payments/{path_segment(payment_id)}/breakdown")
        items = res.get("data")
        if not isinstance(items, list) or not items:
            return success(f"No breakdown items found for payment {payment_id}.")

        lines = [f"Payment {payment_id} breakdown ({len(items)} item(s)):", ""]
        for item in items:
            email = item.get("contractor_email")
            name = pick(item, "contractor_employee_name", default="Unknown")
            lines.append(
                f"- {name}{f' ({email})' if email else ''} | "
                f"Total: {pick(item, 'total')} {item.get('currency') or ''}"
            )
            components = [
                f"{key}: {item[key]}" for key in BREAKDOWN_COMPONENTS
                if item.get(key) and str(item[key]) not in ZERO_AMOUNTS
            ]
            if components:
                lines.append(f"  Components: {', '.join(components)}")
            details = []
            if item.get("contract_country"):
                details.append(f"Country: {item['contract_country']}")
            if item.get("payment_date"):
                details.append(f"Paid: {str(item['payment_date'])[:10]}")
            if details and item.get("contract_type"):
                details.append(f"Type: {item['contract_type']}")
            if details:
                lines.append(f"  {' | '.join(details)}")
            lines.append("")
        return success("\n".join(lines))
