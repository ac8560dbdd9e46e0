"""Organization and legal-entity tools."""

from deelmcp.core.normalization import extract_records, pick
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

def register_organization_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_get_organization",
        "Get details about your Deel organization including name, type, and configuration.",
    )
    async def get_organization() -> ToolResult:
        orgs = extract_records(await client.request("/organizations"))
        if not orgs:
            return success("No organization data found.")
        org = orgs[0]
        return success(f"Organization: {pick(org, 'name')}\nID: {pick(org, 'id')}")

    @registry.tool(
        "deel_list_legal_entities",
        "List all legal entities in the organization. Legal entities represent your "
        "company's registered businesses in different jurisdictions.",
    )
    async def list_legal_entities() -> ToolResult:
        entities = extract_records(await client.request("/legal-entities"))
        if not entities:
            return success("No legal entities found.")
        lines = [f"Found {len(entities)} legal entity(ies):", ""]
        for e in entities:
            lines.append(
                f"- {pick(e, 'name', default='Unnamed')} (ID: {pick(e, 'id')}) | "
                f"Country: {pick(e, 'country')} | Type: {pick(e, 'entity_type')}"
            )
        return success("\n".join(lines))
