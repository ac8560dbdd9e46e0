import httpx
import pytest
from typer.testing import CliRunner

from deelmcp import __version__
from deelmcp.infrastructure.cli.display import ConsoleDisplay
from deelmcp.infrastructure.config.settings import set_config_for_testing
from deelmcp.infrastructure.http.deel_client import DeelApiClient
from deelmcp.infrastructure.resilience.rate_limiter import RateLimiter
from deelmcp.main import app, create_dependencies

@pytest.fixture
def mock_console_display(mocker):
    """Mocks the ConsoleDisplay to capture output easily."""
    mock = mocker.MagicMock(spec=ConsoleDisplay)
    mocker.patch("deelmcp.main.ConsoleDisplay", return_value=mock)
    return mock

@pytest.fixture
def app_env(tmp_path, monkeypatch, mocker, fake_api, clock):
    """Runs the CLI against the fake API with a configured token."""
    monkeypatch.chdir(tmp_path)
    mocker.patch("deelmcp.main.setup_logging")
    set_config_for_testing({"deel_api_token": "cli-token", "deel_api_base_url": "https://api.test.deel/rest/v2"})

    def client_factory(**kwargs):
        return DeelApiClient(
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(fake_api)),
            sleep=clock.sleep,
            **kwargs,
        )

    mocker.patch("deelmcp.main.DeelApiClient", side_effect=client_factory)
    mocker.patch(
        "deelmcp.main.RateLimiter",
        side_effect=lambda **kwargs: RateLimiter(clock=clock, sleep=clock.sleep, **kwargs),
    )
    return fake_api

def test_version(runner: CliRunner):
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout

def test_call_command_flow(runner, app_env, mock_console_display):
    app_env.add("/people/w1", {"data": {"id": "w1", "full_name": "Ada Lovelace"}})
    result = runner.invoke(app, ["call", "deel_get_person", "--arg", "worker_id=w1"])
    assert result.exit_code == 0, result.stdout
    text = mock_console_display.display_output.call_args[0][0]
    assert "Name: Ada Lovelace" in text
    assert app_env.requests[0].headers["Authorization"] == "Bearer cli-token"
    mock_console_display.display_error.assert_not_called()

def test_call_command_coerces_numeric_arguments(runner, app_env, mock_console_display):
    app_env.add("/teams", {"data": []})
    result = runner.invoke(app, ["call", "deel_list_teams", "-a", "limit=5"])
    assert result.exit_code == 0
    assert app_env.requests[0].url.params["limit"] == "5"

def test_call_command_error_exits_non_zero(runner, app_env, mock_console_display):
    result = runner.invoke(app, ["call", "deel_get_person", "--arg", "worker_id=ghost"])
    assert result.exit_code == 1
    mock_console_display.display_error.assert_called_once()
    assert "404" in mock_console_display.display_error.call_args[0][0]

def test_call_command_rejects_malformed_argument(runner, app_env, mock_console_display):
    result = runner.invoke(app, ["call", "deel_get_person", "--arg", "worker_id"])
    assert result.exit_code == 2
    assert app_env.requests == []

def test_missing_token_is_fatal(runner, tmp_path, monkeypatch, mocker, mock_console_display):
    monkeypatch.chdir(tmp_path)
    mocker.patch("deelmcp.main.setup_logging")
    result = runner.invoke(app, ["list-tools"])
    assert result.exit_code == 1
    message = mock_console_display.display_error.call_args[0][0]
    assert "DEEL_API_TOKEN" in message

def test_list_tools_command(runner, app_env, mock_console_display):
    result = runner.invoke(app, ["list-tools"])
    assert result.exit_code == 0
    title, columns, rows = mock_console_display.display_table.call_args[0]
    assert any(row[0] == "deel_list_contracts" for row in rows)

def test_smoke_command_reports_failures(runner, app_env, mock_console_display):
    app_env.add("/organizations", {"data": [{"id": "org-1", "name": "Acme"}]})
    result = runner.invoke(app, ["smoke"])
    assert result.exit_code == 1

def test_smoke_command_all_pass(runner, app_env, mock_console_display):
    app_env.default = {"data": []}
    result = runner.invoke(app, ["smoke"])
    assert result.exit_code == 0
    mock_console_display.display_info.assert_called_once()

def test_serve_builds_server_and_runs_stdio(runner, app_env, mock_console_display, mocker):
    run_stdio = mocker.patch("deelmcp.main.run_stdio", new_callable=mocker.AsyncMock)
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 0
    server = run_stdio.call_args[0][0]
    assert server.name == "deel"

def test_serve_without_token_exits(runner, tmp_path, monkeypatch, mocker, mock_console_display):
    monkeypatch.chdir(tmp_path)
    mocker.patch("deelmcp.main.setup_logging")
    run_stdio = mocker.patch("deelmcp.main.run_stdio", new_callable=mocker.AsyncMock)
    result = runner.invoke(app, ["serve"])
    assert result.exit_code == 1
    run_stdio.assert_not_called()

def test_create_dependencies_wires_configuration(tmp_path, monkeypatch, mocker, mock_ui):
    monkeypatch.chdir(tmp_path)
    mocker.patch("deelmcp.main.setup_logging")
    set_config_for_testing({
        "deel_api_token": "t",
        "deel_api_base_url": "https://sandbox.example/rest/v2",
        "deel_rate_limit_max_requests": 2,
        "deel_cache_ttl_seconds": 60,
        "deel_max_attempts": 4,
    })
    deps = create_dependencies(mock_ui)
    assert deps["client"].base_url == "https://sandbox.example/rest/v2"
    assert deps["client"].max_attempts == 4
    assert deps["rate_limiter"].max_requests == 2
    assert deps["cache_service"].ttl == 60
    assert deps["client"].cache is deps["cache_service"]
    assert len(deps["registry"]) == 31
    assert deps["command_handler"].ui is mock_ui
