import asyncio

import httpx
import pytest

from deelmcp.core.command_handler import CommandHandler
from deelmcp.core.tools import build_registry

@pytest.fixture
def command_handler(client, mock_ui):
    """Fixture to create CommandHandler over the full registry with a mocked UI."""
    return CommandHandler(registry=build_registry(client), ui=mock_ui)

def test_handle_call_displays_output(command_handler, mock_ui, fake_api):
    fake_api.add("/organizations", {"data": [{"id": "org-1", "name": "Acme"}]})
    assert asyncio.run(command_handler.handle_call("deel_get_organization")) is True
    mock_ui.display_output.assert_called_once_with(
        "Organization: Acme\nID: org-1", title="deel_get_organization"
    )
    mock_ui.display_error.assert_not_called()

def test_handle_call_passes_arguments(command_handler, fake_api):
    fake_api.add("/people/w1", {"data": {"id": "w1", "full_name": "Ada"}})
    asyncio.run(command_handler.handle_call("deel_get_person", {"worker_id": "w1"}))
    assert fake_api.paths() == ["/rest/v2/people/w1"]

def test_handle_call_error_result(command_handler, mock_ui, fake_api):
    fake_api.add("/organizations", lambda request: httpx.Response(401, json={"message": "Invalid token"}))
    assert asyncio.run(command_handler.handle_call("deel_get_organization")) is False
    mock_ui.display_error.assert_called_once_with("Error: Deel API error 401: Invalid token")
    mock_ui.display_output.assert_not_called()

def test_handle_call_unknown_tool(command_handler, mock_ui):
    assert asyncio.run(command_handler.handle_call("deel_delete_everything")) is False
    message = mock_ui.display_error.call_args[0][0]
    assert "Unknown tool: deel_delete_everything" in message

def test_handle_list_tools(command_handler, mock_ui):
    command_handler.handle_list_tools()
    title, columns, rows = mock_ui.display_table.call_args[0]
    assert columns == ["Tool", "Parameters", "Description"]
    assert len(rows) == len(command_handler.registry)
    by_name = {row[0]: row for row in rows}
    assert by_name["deel_get_organization"][1] == "-"
    assert by_name["deel_get_person"][1] == "worker_id"

def test_handle_smoke_runs_only_argument_free_tools(command_handler, mock_ui, fake_api):
    fake_api.add("/organizations", {"data": [{"id": "org-1", "name": "Acme"}]})
    report = asyncio.run(command_handler.handle_smoke())

    no_arg_tools = [spec.name for spec in command_handler.registry if not spec.required_parameters]
    assert report.total == len(no_arg_tools)
    assert report.passed == 1
    assert report.failed == report.total - 1
    person_paths = [path for path in fake_api.paths() if path.startswith("/rest/v2/people")]
    assert person_paths == ["/rest/v2/people/custom_fields"]

    rows = mock_ui.display_table.call_args[0][2]
    statuses = {row[0]: row[1] for row in rows}
    assert statuses["deel_get_organization"] == "PASS"
    assert statuses["deel_list_teams"] == "FAIL"
    mock_ui.display_error.assert_called_once()

def test_handle_smoke_all_passing(client, mock_ui, fake_api):
    fake_api.default = {"data": []}
    handler = CommandHandler(registry=build_registry(client), ui=mock_ui)
    report = asyncio.run(handler.handle_smoke())
    assert report.failed == 0
    mock_ui.display_info.assert_called_once()

def test_handle_smoke_warns_about_skipped_tools(command_handler, mock_ui, fake_api):
    fake_api.default = {"data": []}
    report = asyncio.run(command_handler.handle_smoke())

    needs_args = [spec.name for spec in command_handler.registry if spec.required_parameters]
    assert report.skipped == len(needs_args) > 0
    message = mock_ui.display_warning.call_args[0][0]
    assert f"Skipped {len(needs_args)} tool(s)" in message
    mock_ui.display_warning.assert_called_once()
