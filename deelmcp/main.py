"""Main entry point for the deelmcp application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler or the
stdio tool server.
"""

import asyncio
import logging
from typing import Any, Coroutine, Dict, List, Optional, TypeVar

import typer
from rich.console import Console
from typing_extensions import Annotated

from deelmcp import __version__

# --- Core Layer ---
from deelmcp.core.command_handler import CommandHandler
from deelmcp.core.tools import build_registry
from deelmcp.domain.errors import ConfigurationError
from deelmcp.domain.interfaces.user_interface import UserInterface

# --- Infrastructure Layer ---
from deelmcp.infrastructure.cache.caching_service import InMemoryCache
from deelmcp.infrastructure.cli.display import ConsoleDisplay
from deelmcp.infrastructure.config.settings import (
    get_api_token,
    get_base_url,
    get_cache_ttl_seconds,
    get_config,
    get_http_timeout_seconds,
    get_max_attempts,
    get_rate_limit,
    load_configuration,
)
from deelmcp.infrastructure.http.deel_client import DeelApiClient
from deelmcp.infrastructure.mcp.server import build_server, run_stdio
from deelmcp.infrastructure.monitoring.logger_setup import parse_log_level, setup_logging
from deelmcp.infrastructure.resilience.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# --- Dependency Injection Container (Manual) ---

def create_dependencies(ui: Optional[UserInterface] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the application.

    This acts as the Composition Root.

    Raises:
        ConfigurationError: If the API token is not configured.
    """
    # 1. Load Configuration First, then logging
    load_configuration()
    setup_logging(
        log_level=parse_log_level(get_config('deel_log_level', 'INFO')),
        log_file=get_config('deel_log_file'),
    )
    logger.info("Configuration and logging initialized.")

    dependencies: Dict[str, Any] = {'ui': ui or ConsoleDisplay()}

    # 2. Infrastructure Adapters
    max_requests, time_window = get_rate_limit()
    dependencies['cache_service'] = InMemoryCache(ttl=get_cache_ttl_seconds())
    dependencies['rate_limiter'] = RateLimiter(max_requests=max_requests, time_window=time_window)
    dependencies['client'] = DeelApiClient(
        api_token=get_api_token(),
        base_url=get_base_url(),
        cache=dependencies['cache_service'],
        rate_limiter=dependencies['rate_limiter'],
        max_attempts=get_max_attempts(),
        timeout=get_http_timeout_seconds(),
    )

    # 3. Core
    dependencies['registry'] = build_registry(dependencies['client'])
    dependencies['command_handler'] = CommandHandler(
        registry=dependencies['registry'],
        ui=dependencies['ui'],
    )
    logger.info(f"All dependencies initialized ({len(dependencies['registry'])} tools).")
    return dependencies

def _load_dependencies(ui: UserInterface) -> Dict[str, Any]:
    try:
        return create_dependencies(ui)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        ui.display_error(str(e))
        raise typer.Exit(code=1)

# --- Helper for Running Async Commands ---

def run_async(client: DeelApiClient, coro: Coroutine[Any, Any, T]) -> T:
    """Runs `coro` to completion, closing the client's HTTP pool on the same loop."""
    async def runner() -> T:
        async with client:
            return await coro
    return asyncio.run(runner())

# --- Typer App Definition ---
app = typer.Typer(
    name="deelmcp",
    help="Read-only Deel HR/payroll tools: stdio tool server and command line.",
    add_completion=False,
)

def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"deelmcp {__version__}")
        raise typer.Exit()

@app.callback()
def main_callback(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = None,
):
    """Deel tools for conversational agents."""

@app.command()
def serve():
    """Serve every tool over stdio for an MCP client."""
    # stdout carries the protocol; user-facing messages go to stderr
    ui = ConsoleDisplay(Console(stderr=True))
    deps = _load_dependencies(ui)
    server = build_server(deps['registry'])
    run_async(deps['client'], run_stdio(server))

def _parse_arguments(pairs: List[str]) -> Dict[str, str]:
    arguments: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--arg")
        arguments[key.strip()] = value
    return arguments

@app.command()
def call(
    tool: Annotated[str, typer.Argument(help="Tool name, e.g. deel_list_contracts.")],
    arg: Annotated[
        Optional[List[str]],
        typer.Option("--arg", "-a", help="Tool argument as key=value; repeatable."),
    ] = None,
):
    """Invoke a single tool and print its result."""
    arguments = _parse_arguments(arg or [])
    deps = _load_dependencies(ConsoleDisplay())
    handler: CommandHandler = deps['command_handler']
    if not run_async(deps['client'], handler.handle_call(tool, arguments)):
        raise typer.Exit(code=1)

@app.command(name="list-tools")
def list_tools_command():
    """List the registered tools and their parameters."""
    deps = _load_dependencies(ConsoleDisplay())
    handler: CommandHandler = deps['command_handler']
    handler.handle_list_tools()
    asyncio.run(deps['client'].aclose())

@app.command()
def smoke():
    """Run every tool that needs no arguments against the live API."""
    deps = _load_dependencies(ConsoleDisplay())
    handler: CommandHandler = deps['command_handler']
    report = run_async(deps['client'], handler.handle_smoke())
    if report.failed:
        raise typer.Exit(code=1)

# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
