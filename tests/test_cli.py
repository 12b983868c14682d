"""Tests for the waypoint command-line interface."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from waypoint.cli import app

if TYPE_CHECKING:
    from pathlib import Path

runner = CliRunner()

CONFIG = """\
locale = "nl-nl"

[[routes]]
name = "blog"
pattern = '/blog[/{page}/:page<\\d+>]'
view = "blog.html"

[[routes]]
name = "search"
pattern = 'GET|POST /search?q=&page=<\\d+>'

[[tasks]]
name = "import"
command = "import feed <id> [<limit>]"
script = "import.py"

[[tasks]]
name = "broken"
command = "export <id"

[translations.nl]
page = "pagina"
"""


@pytest.fixture
def config(tmp_path: Path) -> str:
    path = tmp_path / "waypoint.toml"
    path.write_text(CONFIG, encoding="utf-8")
    return str(path)


# =====================================================================
# routes
# =====================================================================


def test_routes(config: str) -> None:
    result = runner.invoke(app, ["routes", "--config", config])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].split() == ["blog", "GET", "/blog[/{page}/:page]"]
    assert lines[1].split() == ["search", "GET|POST", "/search?q&page"]


def test_routes_empty(tmp_path: Path) -> None:
    path = tmp_path / "waypoint.json"
    path.write_text("{}", encoding="utf-8")
    result = runner.invoke(app, ["routes", "-c", str(path)])
    assert result.exit_code == 0
    assert "No routes defined." in result.output


def test_missing_config(tmp_path: Path) -> None:
    result = runner.invoke(app, ["routes", "-c", str(tmp_path / "nope.toml")])
    assert result.exit_code == 1
    assert "Error: Cannot read configuration file" in result.output


# =====================================================================
# match
# =====================================================================


def test_match(config: str) -> None:
    result = runner.invoke(app, ["match", "/blog/pagina/4", "-c", config])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"route": "blog", "view": "blog.html", "captures": {"page": "4"}}


def test_match_with_query_and_method(config: str) -> None:
    result = runner.invoke(app, ["match", "/search?q=shoes", "--method", "post", "-c", config])
    assert result.exit_code == 0
    assert json.loads(result.output)["captures"] == {"q": "shoes", "page": None}


def test_match_with_locale(config: str) -> None:
    result = runner.invoke(app, ["match", "/blog/page/4", "--locale", "en", "-c", config])
    assert result.exit_code == 0
    assert json.loads(result.output)["route"] == "blog"


def test_no_match(config: str) -> None:
    result = runner.invoke(app, ["match", "/search?utm=x", "-c", config])
    assert result.exit_code == 1
    assert "Error: no route matches GET /search?utm=x" in result.output


# =====================================================================
# assemble
# =====================================================================


def test_assemble(config: str) -> None:
    result = runner.invoke(app, ["assemble", "blog", "-p", "page=2", "-c", config])
    assert result.exit_code == 0
    assert result.output.strip() == "/blog/pagina/2"


def test_assemble_from_matched(config: str) -> None:
    result = runner.invoke(app, ["assemble", "--from", "/search?q=shoes&page=2", "-p", "page=3", "-c", config])
    assert result.exit_code == 0
    assert result.output.strip() == "/search?q=shoes&page=3"


def test_assemble_without_reuse(config: str) -> None:
    args = ["assemble", "search", "--from", "/search?q=shoes&page=2", "--no-reuse", "-c", config]
    result = runner.invoke(app, args)
    assert result.exit_code == 0
    assert result.output.strip() == "/search"


def test_assemble_error(config: str) -> None:
    result = runner.invoke(app, ["assemble", "search", "-p", "page=x", "-c", config])
    assert result.exit_code == 1
    assert 'Error: Value "x" for query string parameter "page"' in result.output


def test_assemble_bad_parameter(config: str) -> None:
    result = runner.invoke(app, ["assemble", "blog", "-p", "page", "-c", config])
    assert result.exit_code == 1
    assert "key=value" in result.output


def test_assemble_without_name_or_match(config: str) -> None:
    result = runner.invoke(app, ["assemble", "-c", config])
    assert result.exit_code == 1
    assert "Route without name can only be assembled" in result.output


# =====================================================================
# tasks
# =====================================================================


def test_tasks_usage(config: str) -> None:
    result = runner.invoke(app, ["tasks", "-c", config])
    assert result.exit_code == 0
    assert "Tasks (command <required> [<optional>]):" in result.output
    assert " - import feed <id> [<limit>]" in result.output
    assert "No task found" not in result.output


def test_tasks_parse(config: str) -> None:
    result = runner.invoke(app, ["tasks", "-c", config, "import", "feed", "7"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"task": "import", "script": "import.py", "parsed": {"id": "7"}}


def test_tasks_unknown_command(config: str) -> None:
    result = runner.invoke(app, ["tasks", "-c", config, "process", "queue"])
    assert result.exit_code == 1
    assert "No task found for command." in result.output
    assert "\033[31m" not in result.output


def test_tasks_malformed_command(config: str) -> None:
    result = runner.invoke(app, ["tasks", "-c", config, "export", "7"])
    assert result.exit_code == 1
    assert 'Error: Failed to parse command of task "broken"' in result.output
