"""CLI tests — config file redirected to a temp dir, backend mocked."""

import json

import httpx
import pytest
from click.testing import CliRunner

from specifythat import AsyncSpecifyThat
from specifythat.cli import main as cli_main
from specifythat.cli.interview import compose_ideation_description


@pytest.fixture(autouse=True)
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(cli_main, "CONFIG_FILE", path)
    return path


def test_check_json_gibberish():
    result = CliRunner().invoke(cli_main.main, ["check", "asdfasdf", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["gibberish"] is True
    assert data["sanitized"] == "asdfasdf"


def test_check_json_with_question_rules():
    result = CliRunner().invoke(cli_main.main, ["check", "*Acme*", "-q", "2", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["sanitized"] == "\\*Acme\\*"
    assert data["sanitized_name"] == "Acme"
    assert data["validation_error"] == "Must be at least 20 characters"


def test_check_unknown_question():
    result = CliRunner().invoke(cli_main.main, ["check", "hello", "-q", "99"])
    assert result.exit_code != 0


def test_check_table_output():
    result = CliRunner().invoke(cli_main.main, ["check", "This app helps freelancers track invoices"])
    assert result.exit_code == 0
    assert "meaningful" in result.output


def test_config_set_and_show(config_file):
    runner = CliRunner()
    result = runner.invoke(cli_main.main, ["config", "set-url", "http://localhost:3000/"])
    assert result.exit_code == 0
    assert json.loads(config_file.read_text()) == {"base_url": "http://localhost:3000"}

    result = runner.invoke(cli_main.main, ["config", "show"])
    assert "http://localhost:3000" in result.output

    runner.invoke(cli_main.main, ["config", "reset"])
    assert json.loads(config_file.read_text()) == {}


def test_feedback_sends(monkeypatch):
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True})

    monkeypatch.setattr(cli_main, "_get_client",
                        lambda base_url=None: AsyncSpecifyThat(transport=httpx.MockTransport(handler)))
    result = CliRunner().invoke(cli_main.main, ["feedback", "Great tool"])
    assert result.exit_code == 0
    assert "Feedback sent" in result.output
    assert calls[0]["feedback"] == "Great tool"
    assert calls[0]["userAgent"] == "specifythat-cli"


def test_feedback_failure_exits_nonzero(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Failed to send feedback"})

    monkeypatch.setattr(cli_main, "_get_client",
                        lambda base_url=None: AsyncSpecifyThat(transport=httpx.MockTransport(handler)))
    result = CliRunner().invoke(cli_main.main, ["feedback", "Great tool"])
    assert result.exit_code == 1
    assert "Failed to send feedback" in result.output


def test_compose_ideation_description():
    description = compose_ideation_description({
        "problem": "Freelancers lose track of unpaid invoices.",
        "audience": "independent designers",
        "today": "use spreadsheets",
        "better": "remind clients automatically",
    })
    assert description == (
        "Freelancers lose track of unpaid invoices. This is for independent designers. "
        "Today they use spreadsheets. The project should remind clients automatically."
    )
