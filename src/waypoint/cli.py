"""Waypoint command-line interface powered by Typer."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from waypoint import __version__
from waypoint.app import Waypoint
from waypoint.config import load_config
from waypoint.errors import WaypointError

app = typer.Typer(name="waypoint", add_completion=False, no_args_is_help=True)

ConfigOption = Annotated[
    Path,
    typer.Option("--config", "-c", help="Route and task configuration file (.toml or .json)."),
]
LocaleOption = Annotated[str | None, typer.Option(help="Locale for translatable route text.")]


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(1)


def _load(config: Path) -> Waypoint:
    try:
        return Waypoint.from_config(load_config(config))
    except WaypointError as exc:
        _fail(str(exc))


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _parse_params(pairs: list[str]) -> dict[str, str]:
    """Turn ``key=value`` strings into a dict."""
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            _fail(f"parameter {pair!r} is not in key=value form.")
        params[key] = value
    return params


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log routing decisions to stderr.")] = False,
) -> None:
    """Match, assemble and inspect compact route and task definitions."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@app.command()
def routes(config: ConfigOption = Path("waypoint.toml")) -> None:
    """List the compiled routes in registration order."""
    waypoint = _load(config)
    if not waypoint.router.routes:
        typer.echo("No routes defined.")
        return
    for route in waypoint.router:
        methods = "|".join(sorted(route.methods))
        query = ""
        if route.restricted:
            query = "?" + ("&".join(route.query_constraints) or "!")
        typer.echo(f"{route.name:<20} {methods:<12} {route.pattern}{query}")


@app.command()
def match(
    target: Annotated[str, typer.Argument(help="URL path with optional query string.")],
    config: ConfigOption = Path("waypoint.toml"),
    method: Annotated[str, typer.Option(help="HTTP method.")] = "GET",
    locale: LocaleOption = None,
) -> None:
    """Find the route that admits TARGET and print its captures."""
    waypoint = _load(config)
    try:
        result = waypoint.dispatch(target, method, locale)
    except WaypointError as exc:
        _fail(str(exc))
    if result is None:
        _fail(f"no route matches {method.upper()} {target}")
    _echo_json({"route": result.route.name, "view": result.route.view, "captures": result.captures})


@app.command()
def assemble(
    name: Annotated[str | None, typer.Argument(help="Route name; omit to reuse the route matched by --from.")] = None,
    param: Annotated[list[str] | None, typer.Option("--param", "-p", help="Parameter as key=value.")] = None,
    source: Annotated[str | None, typer.Option("--from", help="Match this URL first and reuse its captures.")] = None,
    reuse: Annotated[bool, typer.Option("--reuse/--no-reuse", help="Reuse captures of the matched route.")] = True,
    config: ConfigOption = Path("waypoint.toml"),
    locale: LocaleOption = None,
) -> None:
    """Build the URL for a route from parameters."""
    waypoint = _load(config)
    params = _parse_params(param or [])
    try:
        if source is not None and waypoint.dispatch(source, "GET", locale) is None:
            _fail(f"no route matches GET {source}")
        typer.echo(waypoint.assemble(name, params, reuse=reuse, locale=locale))
    except WaypointError as exc:
        _fail(str(exc))


@app.command(context_settings={"ignore_unknown_options": True})
def tasks(
    arguments: Annotated[list[str] | None, typer.Argument(help="Command words and parameters.")] = None,
    config: ConfigOption = Path("waypoint.toml"),
) -> None:
    """Parse ARGUMENTS against the configured tasks, or show usage."""
    waypoint = _load(config)
    argv = ["waypoint", *(arguments or [])]
    try:
        result = waypoint.parse(argv)
    except WaypointError as exc:
        _fail(str(exc))

    if result is None:
        typer.echo(waypoint.tasks.usage(argv, version=__version__, color=sys.stdout.isatty()), nl=False)
        if len(argv) > 1:
            raise typer.Exit(1)
        return
    _echo_json({"task": result.task.name, "script": result.task.script, "parsed": result.parsed})
