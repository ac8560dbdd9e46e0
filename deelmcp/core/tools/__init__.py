"""Read-only Deel query tools.

`build_registry` wires every tool module against one shared client.
"""

from deelmcp.core.tools.benefits import register_benefit_tools
from deelmcp.core.tools.contracts import register_contract_tools
from deelmcp.core.tools.documents import register_document_tools
from deelmcp.core.tools.invoices_payments import register_invoice_payment_tools
from deelmcp.core.tools.lookups import register_lookup_tools
from deelmcp.core.tools.organization import register_organization_tools
from deelmcp.core.tools.payroll import register_payroll_tools
from deelmcp.core.tools.people import register_people_tools
from deelmcp.core.tools.registry import ToolRegistry, ToolResult
from deelmcp.core.tools.teams_departments import register_team_department_tools
from deelmcp.core.tools.time_off import register_time_off_tools
from deelmcp.infrastructure.http.deel_client import DeelApiClient

REGISTRATIONS = (
    register_organization_tools,
    register_people_tools,
    register_contract_tools,
    register_payroll_tools,
    register_invoice_payment_tools,
    register_time_off_tools,
    register_team_department_tools,
    register_benefit_tools,
    register_document_tools,
    register_lookup_tools,
)

def build_registry(client: DeelApiClient) -> ToolRegistry:
    registry = ToolRegistry()
    for register in REGISTRATIONS:
        register(registry, client)
    return registry

__all__ = ["ToolRegistry", "ToolResult", "build_registry"]
