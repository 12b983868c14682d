"""Compact route and task notation with matching and URL assembly."""

__version__ = "0.2.0"

from waypoint.app import Waypoint
from waypoint.errors import (
    ConfigurationError,
    ConstraintViolation,
    InvalidRoutePattern,
    MalformedTaskToken,
    MissingRequiredParameter,
    NoMatchedRoute,
    UnknownRoute,
    UnknownTask,
    WaypointError,
)
from waypoint.routing import Route, RouteMatch, Router, compile_route
from waypoint.tasks import ParsedTask, Task, TaskRegistry
from waypoint.translation import Translator

__all__ = [
    "ConfigurationError",
    "ConstraintViolation",
    "InvalidRoutePattern",
    "MalformedTaskToken",
    "MissingRequiredParameter",
    "NoMatchedRoute",
    "ParsedTask",
    "Route",
    "RouteMatch",
    "Router",
    "Task",
    "TaskRegistry",
    "Translator",
    "UnknownRoute",
    "UnknownTask",
    "Waypoint",
    "WaypointError",
    "compile_route",
]
