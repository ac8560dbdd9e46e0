"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), runs them against the
tool registry and presents the results through the UserInterface.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from deelmcp.core.tools.registry import ToolRegistry, UnknownToolError
from deelmcp.domain.interfaces.user_interface import UserInterface

logger = logging.getLogger(__name__)

# Characters of each smoke-test result shown in the summary table
SMOKE_EXCERPT_LENGTH = 80

@dataclass
class SmokeReport:
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed

class CommandHandler:
    """Handles incoming commands and delegates to the tool registry."""

    def __init__(self, registry: ToolRegistry, ui: UserInterface):
        self.registry = registry
        self.ui = ui

    async def handle_call(self, tool_name: str, arguments: Optional[Mapping[str, Any]] = None) -> bool:
        """Handles the 'call' command. Returns False if the tool reported an error."""
        logger.info(f"Handling 'call' command for tool: {tool_name}")
        try:
            result = await self.registry.invoke(tool_name, arguments)
        except UnknownToolError as e:
            self.ui.display_error(f"{e}. Run 'list-tools' to see the available tools.")
            return False

        if result.is_error:
            self.ui.display_error(result.text)
            return False
        self.ui.display_output(result.text, title=tool_name)
        return True

    def handle_list_tools(self) -> None:
        """Handles the 'list-tools' command."""
        rows = [
            [spec.name, ", ".join(spec.parameters) or "-", spec.description]
            for spec in self.registry
        ]
        self.ui.display_table(f"{len(rows)} Deel tools", ["Tool", "Parameters", "Description"], rows)

    async def handle_smoke(self) -> SmokeReport:
        """Runs every tool that takes no required arguments and reports PASS/FAIL.

        Tools needing IDs are skipped; they are exercised through 'call'.
        """
        report = SmokeReport()
        rows: List[List[str]] = []
        for spec in self.registry:
            if spec.required_parameters:
                logger.debug(f"Smoke test skipping {spec.name}: requires {spec.required_parameters}")
                report.skipped += 1
                continue
            result = await spec.handler()
            first_line = result.text.splitlines()[0] if result.text else ""
            if result.is_error:
                report.failed += 1
                rows.append([spec.name, "FAIL", first_line[:SMOKE_EXCERPT_LENGTH]])
            else:
                report.passed += 1
                rows.append([spec.name, "PASS", first_line[:SMOKE_EXCERPT_LENGTH]])

        self.ui.display_table("Endpoint smoke test", ["Tool", "Status", "Result"], rows)
        summary = f"Results: {report.passed} passed, {report.failed} failed (total {report.total})"
        if report.failed:
            self.ui.display_error(summary)
        else:
            self.ui.display_info(summary)
        if report.skipped:
            self.ui.display_warning(
                f"Skipped {report.skipped} tool(s) that require arguments; run them with 'call'."
            )
        return report
