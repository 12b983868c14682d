"""Waypoint exception hierarchy.

Shared by the router, assembler, task parser and CLI so every module
raises and catches the same types. "No route matched" is not an error:
matching and parsing return ``None`` for that.
"""

from __future__ import annotations


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a configuration file cannot be read or validated."""


class InvalidRoutePattern(WaypointError):
    """A route skeleton the matcher or assembler cannot interpret.

    Reported when the route is matched or assembled, not when it is
    registered.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}.")


class UnknownRoute(WaypointError, LookupError):  # noqa: N818
    """No route is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f'No route found with name "{name}". Please check the name of the route '
            "or give a new route with the same name."
        )


class NoMatchedRoute(WaypointError):  # noqa: N818
    """A route without name was assembled while nothing is matched."""

    def __init__(self) -> None:
        super().__init__("Route without name can only be assembled when a route is matched.")


class UnknownTask(WaypointError, LookupError):  # noqa: N818
    """No task is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'No task found with name "{name}".')


class MissingRequiredParameter(WaypointError):
    """A placeholder outside any optional group has no value."""

    def __init__(self, parameter: str, route: str) -> None:
        self.parameter = parameter
        self.route = route
        super().__init__(
            f'Required parameter "{parameter}" for route name "{route}" is missing. '
            "Please give the required parameter or change the route URL."
        )


class ConstraintViolation(WaypointError):  # noqa: N818
    """A value does not fully match the constraint declared for it.

    Carries the value, parameter name, constraint and route name, and
    whether the parameter belongs to the query string.
    """

    def __init__(
        self,
        value: str,
        parameter: str,
        constraint: str,
        route: str,
        *,
        query: bool = False,
    ) -> None:
        self.value = value
        self.parameter = parameter
        self.constraint = constraint
        self.route = route
        self.query = query
        kind = "query string parameter" if query else "parameter"
        super().__init__(
            f'Value "{value}" for {kind} "{parameter}" is not allowed by constraint '
            f'"{constraint}" for route with name "{route}". Please give a valid value.'
        )


class MalformedTaskToken(WaypointError):
    """A task command holds a token that is not a word, ``<name>`` or ``[<name>]``."""

    def __init__(self, token: str, task: str) -> None:
        self.token = token
        self.task = task
        super().__init__(
            f'Failed to parse command of task "{task}". Part "{token}" is not a valid '
            'static word "word", a required parameter "<parameter>" or an optional '
            'parameter "[<parameter>]".'
        )
