"""Command-line tasks: the argument-vector analogue of routes.

A task command is a space-separated list of tokens::

    import feed <id> [<limit>]

Bare words must be given literally, ``<name>`` needs a non-empty argument
and ``[<name>]`` captures an argument only when one is given.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from waypoint.errors import MalformedTaskToken, UnknownTask

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger("waypoint.tasks")

_WORD_RE = re.compile(r"^[a-z][\w.:-]*$", re.IGNORECASE)
_REQUIRED_RE = re.compile(r"^<(?P<name>[a-z]\w*)>$", re.IGNORECASE)
_OPTIONAL_RE = re.compile(r"^\[<(?P<name>[a-z]\w*)>\]$", re.IGNORECASE)

_RED = "\033[31m"
_RESET = "\033[0m"


@dataclass(frozen=True, slots=True)
class Task:
    """A registered task. ``script`` and ``handler`` are passed through untouched."""

    name: str
    command: str
    tokens: tuple[str, ...]
    script: str | None = None
    handler: Any = None


@dataclass(frozen=True, slots=True)
class ParsedTask:
    """Result of a successful parse; optional parameters not given are absent."""

    task: Task
    parsed: dict[str, str]


class TaskRegistry:
    """Named tasks with first-match-wins parsing in registration order."""

    __slots__ = ("_tasks",)

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def add(self, name: str, command: str, script: str | None = None, handler: Any = None) -> Task:
        """Register a task. An existing task with *name* is replaced."""
        task = Task(name=name, command=command, tokens=tuple(command.split()), script=script, handler=handler)
        self._tasks[name] = task
        logger.debug("Registered task %r: %s", name, command)
        return task

    def get(self, name: str) -> Task | None:
        return self._tasks.get(name)

    def __getitem__(self, name: str) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            raise UnknownTask(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    def parse(self, argv: Sequence[str]) -> ParsedTask | None:
        """Match *argv* (program name first) against the registered tasks.

        Returns ``None`` when no task matches. Raises
        :class:`MalformedTaskToken` when a task that is tried holds an
        invalid token.
        """
        arguments = list(argv[1:])
        for task in self._tasks.values():
            parsed = _parse_task(task, arguments)
            if parsed is not None:
                logger.debug("Parsed %r as task %r", " ".join(arguments), task.name)
                return ParsedTask(task=task, parsed=parsed)

        logger.debug("No task matches %r", " ".join(arguments))
        return None

    def usage(self, argv: Sequence[str] = (), *, version: str = "", color: bool = True) -> str:
        """Console help listing every task command.

        A "no task found" notice is included when *argv* carries arguments
        beyond the program name.
        """
        banner = f"Waypoint Console (version {version})" if version else "Waypoint Console"
        lines = [banner, ""]
        if len(argv) > 1:
            notice = "No task found for command."
            lines += [f"{_RED}{notice}{_RESET}" if color else notice, ""]
        if self._tasks:
            lines.append("Tasks (command <required> [<optional>]):")
            lines += [f" - {task.command}" for task in self._tasks.values()]
        else:
            lines.append("No tasks available.")
        lines.append("")
        return "\n".join(lines) + "\n"


def _parse_task(task: Task, arguments: list[str]) -> dict[str, str] | None:
    if len(arguments) > len(task.tokens):
        return None

    parsed: dict[str, str] = {}
    for index, token in enumerate(task.tokens):
        argument = arguments[index] if index < len(arguments) else None

        if _WORD_RE.match(token):
            if token != argument:
                return None
            continue

        m = _REQUIRED_RE.match(token)
        if m is not None:
            if not argument:
                return None
            parsed[m["name"]] = argument
            continue

        m = _OPTIONAL_RE.match(token)
        if m is not None:
            if argument:
                parsed[m["name"]] = argument
            continue

        raise MalformedTaskToken(token, task.name)
    return parsed
