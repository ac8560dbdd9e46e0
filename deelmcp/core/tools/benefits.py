"""EOR benefits and country hiring guide tools."""

import json
from typing import Any, List, Mapping

from pydantic import Field
from typing_extensions import Annotated

from deelmcp.core.normalization import pick
from deelmcp.core.tools.params import ContractId, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

CountryCode = Annotated[
    str,
    Field(min_length=2, max_length=2, description="ISO 2-letter country code (e.g. 'DE', 'GB', 'BR', 'DK')"),
]

def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}

def format_country_guide(country: str, d: Mapping[str, Any]) -> str:
    """Renders the `/eor/validations/{country}` payload as a readable guide."""
    lines: List[str] = [f"EOR Hiring Guide for {country}:", ""]
    lines.append(f"Currency: {pick(d, 'currency')}")
    if d.get("hiring_guide_country_name"):
        lines.append(f"Country: {d['hiring_guide_country_name']}")
    if d.get("start_date_buffer"):
        lines.append(f"Start date buffer: {d['start_date_buffer']} days")

    salary = _section(d, "salary")
    if salary:
        lines += ["", "Salary:",
                  f"  Min: {pick(salary, 'min')} | Max: {pick(salary, 'max')} | "
                  f"Frequency: {pick(salary, 'frequency')}"]

    holiday = _section(d, "holiday")
    if holiday:
        lines += ["", "Holiday:",
                  f"  Min: {pick(holiday, 'min')} days | Max: {pick(holiday, 'max')} | "
                  f"Most common: {pick(holiday, 'mostCommon')}"]

    sick_days = _section(d, "sick_days")
    if sick_days:
        lines.append(f"Sick days: Min {pick(sick_days, 'min')} | Max {pick(sick_days, 'max')}")

    probation = _section(d, "probation")
    if probation:
        lines += ["", "Probation:",
                  f"  Min: {pick(probation, 'min', default=0)} | Max: {pick(probation, 'max')} "
                  f"{pick(probation, 'timeUnit', default='days')}"]

    schedule = _section(d, "work_schedule")
    if schedule:
        lines += ["", "Work schedule:"]
        days = _section(schedule, "days")
        hours = _section(schedule, "hours")
        if days:
            lines.append(f"  Days/week: min {pick(days, 'min')}, max {pick(days, 'max')}")
        if hours:
            lines.append(f"  Hours/day: min {pick(hours, 'min')}, max {pick(hours, 'max')}")

    definite = _section(d, "definite_contract")
    if definite:
        lines += ["", f"Definite contract: {pick(definite, 'type')}"]
    return "\n".join(lines)

def register_benefit_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_get_eor_benefits",
        "Get benefits information for an EOR (Employer of Record) contract, including health, "
        "dental, and other benefits.",
    )
    async def get_eor_benefits(contract_id: ContractId) -> ToolResult:
        res = await client.request(f"/eor/{path_segment(contract_id)}/benefits")
        data = res.get("data")
        if isinstance(data, list):
            if not data:
                return success(f"No benefits found for EOR contract {contract_id}.")
            lines = [f"Benefits for EOR contract {contract_id}:", ""]
            for b in data:
                lines.append(f"- {pick(b, 'name', 'type', default='Benefit')}: {pick(b, 'description')}")
                if b.get("provider"):
                    lines.append(f"  Provider: {b['provider']}")
                if b.get("cost"):
                    lines.append(f"  Cost: {b['cost']} {b.get('currency') or ''}".rstrip())
            return success("\n".join(lines))
        return success(f"Benefits for EOR contract {contract_id}:\n{json.dumps(data, indent=2)}")

    @registry.tool(
        "deel_get_eor_country_guide",
        "Get EOR hiring compliance guide for a specific country, including salary ranges, "
        "holiday/sick day minimums, probation rules, work schedule requirements, and currency.",
    )
    async def get_eor_country_guide(country_code: CountryCode) -> ToolResult:
        country = country_code.upper()
        res = await client.request(f"/eor/validations/{path_segment(country)}")
        data = res.get("data")
        return success(format_country_guide(country, data if isinstance(data, dict) else {}))
