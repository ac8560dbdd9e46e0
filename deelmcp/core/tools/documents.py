"""Worker document metadata."""

from deelmcp.core.normalization import extract_records, pick
from deelmcp.core.tools.params import WorkerId, path_segment
from deelmcp.core.tools.registry import ToolRegistry, ToolResult, success
from deelmcp.infrastructure.http.deel_client import DeelApiClient

def register_document_tools(registry: ToolRegistry, client: DeelApiClient) -> None:

    @registry.tool(
        "deel_list_worker_documents",
        "List documents associated with a specific worker (contracts, tax forms, etc.). "
        "Returns metadata only, not file contents.",
    )
    async def list_worker_documents(worker_id: WorkerId) -> ToolResult:
        docs = extract_records(await client.request(f"/workers/{path_segment(worker_id)}/documents"))
        if not docs:
            return success(f"No documents found for worker {worker_id}.")
        lines = [f"Found {len(docs)} document(s) for worker {worker_id}:", ""]
        for d in docs:
            lines.append(f"- {pick(d, 'title', 'name', default='Untitled')} (ID: {pick(d, 'id')})")
            lines.append(f"  Type: {pick(d, 'type', 'category')} | Created: {pick(d, 'created_at')}")
            lines.append("")
        return success("\n".join(lines))
