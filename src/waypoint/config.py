"""Route and task configuration files.

A configuration file is JSON or TOML::

    locale = "nl-nl"

    [[routes]]
    name = "blog"
    pattern = "/blog[/{page}/:page<\\d+>]"

    [[tasks]]
    name = "import"
    command = "import feed <id> [<limit>]"

    [translations.nl]
    page = "pagina"
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from waypoint.errors import ConfigurationError

logger = logging.getLogger("waypoint.config")


class RouteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    pattern: str
    view: str | None = None


class TaskConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    command: str = Field(min_length=1)
    script: str | None = None


class WaypointConfig(BaseModel):
    """Everything needed to build a :class:`~waypoint.app.Waypoint`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    locale: str | None = None
    routes: list[RouteConfig] = Field(default_factory=list)
    tasks: list[TaskConfig] = Field(default_factory=list)
    translations: dict[str, dict[str, str]] = Field(default_factory=dict)


def load_config(path: str | Path) -> WaypointConfig:
    """Read and validate one configuration file.

    The format follows the suffix: ``.toml`` or ``.json``. Any read, parse
    or validation failure raises :class:`ConfigurationError`.
    """
    file = Path(path)
    try:
        raw = file.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read configuration file {str(file)!r}: {exc.strerror or exc}"
        raise ConfigurationError(msg) from exc

    try:
        if file.suffix == ".toml":
            data = tomllib.loads(raw)
        elif file.suffix == ".json":
            data = json.loads(raw)
        else:
            msg = f"Unsupported configuration format {file.suffix!r}; use .toml or .json"
            raise ConfigurationError(msg)
        config = WaypointConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, ValidationError) as exc:
        msg = f"Invalid configuration file {str(file)!r}:\n{exc}"
        raise ConfigurationError(msg) from exc

    logger.debug("Loaded %d routes and %d tasks from %s", len(config.routes), len(config.tasks), file)
    return config
