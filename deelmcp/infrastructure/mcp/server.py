"""FastMCP adapter for the tool registry.

Each registered tool is re-exposed as a FastMCP tool with the same name,
description and parameter schema. Error results are raised as `ToolError`
so the protocol response carries the error flag. Logging stays on stderr;
stdout is the protocol channel.
"""

import inspect
import logging
from typing import Any, Callable, Coroutine

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from deelmcp.core.tools.registry import ToolRegistry, ToolSpec

logger = logging.getLogger(__name__)

SERVER_NAME = "deel"

def _as_protocol_tool(spec: ToolSpec) -> Callable[..., Coroutine[Any, Any, str]]:
    """Wraps a registry handler in a text-returning function FastMCP can introspect."""

    async def call_tool(**kwargs: Any) -> str:
        logger.info(f"Tool call: {spec.name}")
        result = await spec.handler(**kwargs)
        if result.is_error:
            raise ToolError(result.text)
        return result.text

    # FastMCP builds the input schema from the signature; parameters are made
    # keyword-only so arguments always arrive by name.
    parameters = [
        param.replace(kind=inspect.Parameter.KEYWORD_ONLY)
        for param in spec.parameters.values()
    ]
    call_tool.__name__ = spec.name
    call_tool.__qualname__ = spec.name
    call_tool.__doc__ = spec.description
    call_tool.__signature__ = inspect.Signature(parameters, return_annotation=str)  # type: ignore[attr-defined]
    call_tool.__annotations__ = {param.name: param.annotation for param in parameters}
    call_tool.__annotations__["return"] = str
    return call_tool

def build_server(registry: ToolRegistry, name: str = SERVER_NAME) -> FastMCP:
    """Creates a FastMCP server exposing every tool in `registry`."""
    server = FastMCP(name=name)
    for spec in registry:
        server.tool(name=spec.name, description=spec.description)(_as_protocol_tool(spec))
    logger.info(f"Registered {len(registry)} tools on server '{name}'")
    return server

async def run_stdio(server: FastMCP) -> None:
    """Serves `server` over stdin/stdout until the client disconnects."""
    logger.info(f"{server.name} MCP server running on stdio")
    await server.run_async(transport="stdio")
