"""Tool registry: the seam between tool handlers and their transports.

Handlers are plain async functions registered with `ToolRegistry.tool`. The
registry validates arguments with pydantic, converts every failure into an
error `ToolResult`, and lets the stdio server and the CLI share one set of
handlers.
"""

import functools
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping, Optional

from pydantic import ValidationError, validate_call

from deelmcp.domain.errors import DeelError

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable["ToolResult"]]

@dataclass(frozen=True)
class ToolResult:
    """Text returned to the agent; `is_error` marks a failed call."""
    text: str
    is_error: bool = False

def success(text: str) -> ToolResult:
    return ToolResult(text=text)

def error(message: str) -> ToolResult:
    return ToolResult(text=f"Error: {message}", is_error=True)

class UnknownToolError(KeyError):
    """Raised when a tool name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"

@dataclass(frozen=True)
class ToolSpec:
    """A registered tool: its public name, description and guarded handler."""
    name: str
    description: str
    handler: ToolHandler

    @property
    def parameters(self) -> Mapping[str, inspect.Parameter]:
        return inspect.signature(self.handler).parameters

    @property
    def required_parameters(self) -> List[str]:
        return [
            name for name, param in self.parameters.items()
            if param.default is inspect.Parameter.empty
        ]

class ToolRegistry:
    """Ordered collection of read-only tools."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolSpec] = {}

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def tool(self, name: str, description: str) -> Callable[[ToolHandler], ToolHandler]:
        """Decorator registering an async handler under `name`.

        The registered handler never raises: invalid arguments, pipeline errors
        and unexpected failures all come back as error results.
        """
        def decorator(fn: ToolHandler) -> ToolHandler:
            if name in self._tools:
                raise ValueError(f"Tool already registered: {name}")
            validated = validate_call(fn)

            @functools.wraps(fn)
            async def handler(*args: Any, **kwargs: Any) -> ToolResult:
                try:
                    return await validated(*args, **kwargs)
                except ValidationError as e:
                    logger.info(f"Invalid arguments for {name}: {e}")
                    return error(f"Invalid arguments for {name}: {e}")
                except DeelError as e:
                    logger.warning(f"Tool {name} failed: {e}")
                    return error(str(e))
                except Exception as e:
                    logger.error(f"Unexpected error in tool {name}: {e}", exc_info=True)
                    return error(f"Unexpected error: {e}")

            self._tools[name] = ToolSpec(name=name, description=description, handler=handler)
            return handler
        return decorator

    def get(self, name: str) -> ToolSpec:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    async def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Runs a tool by name with keyword arguments."""
        spec = self.get(name)
        logger.debug(f"Invoking tool {name} with {dict(arguments or {})}")
        return await spec.handler(**dict(arguments or {}))
