"""URL assembly: the inverse of route matching.

Optional groups are rendered innermost first. A group is dropped when one
of its own placeholders has no value. Every supplied value is checked
against its constraint, and a value substituted in the path is consumed so
it is not repeated in the query string. A name used more than once is
substituted with the same value each time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from waypoint.errors import ConstraintViolation, MissingRequiredParameter
from waypoint.pattern import (
    DEFAULT_CONSTRAINT,
    Literal,
    OptionalGroup,
    Placeholder,
    Wildcard,
    full_match,
    parse_pattern,
    placeholder_names,
    resolve_translations,
)
from waypoint.query import render_query, resolve_fields

if TYPE_CHECKING:
    from waypoint._types import Translate
    from waypoint.pattern import Node
    from waypoint.routing import Route

# Rendered text, or a placeholder still waiting for its value.
_Part = str | Placeholder


def assemble_route(route: Route[Any], parameters: dict[str, Any], translate: Translate) -> str:
    """Build the URL for *route* from *parameters*."""
    nodes = resolve_translations(parse_pattern(route.pattern), translate)
    working = dict(parameters)

    # Substituted path values by name, shared by every occurrence of a name.
    values: dict[str, str] = {}
    path_parts: list[str] = []
    for part in _render_children(route, nodes, working, values):
        if isinstance(part, str):
            path_parts.append(part)
            continue
        if part.name not in values:
            value = working.pop(part.name, None)
            if value is None:
                raise MissingRequiredParameter(part.name, route.name)
            values[part.name] = _checked(route, part.name, value)
        path_parts.append(values[part.name])
    path = "".join(path_parts)

    remaining = {name: str(value) for name, value in working.items() if value is not None}
    query = render_query(resolve_fields(route.query_constraints, translate), remaining, route.name)
    return f"{path}?{query}" if query else path


def _render_children(
    route: Route[Any], nodes: tuple[Node, ...], working: dict[str, Any], values: dict[str, str]
) -> list[_Part]:
    parts: list[_Part] = []
    for node in nodes:
        if isinstance(node, Literal):
            parts.append(node.text)
        elif isinstance(node, Wildcard):
            continue
        elif isinstance(node, OptionalGroup):
            parts.append(_render_optional(route, node, working, values))
        else:
            parts.append(node)
    return parts


def _render_optional(
    route: Route[Any], group: OptionalGroup, working: dict[str, Any], values: dict[str, str]
) -> str:
    parts = _render_children(route, group.children, working, values)

    # Every supplied value is checked, even when the group is dropped afterwards.
    checked: dict[str, str] = {}
    missing = False
    for name in placeholder_names(tuple(part for part in parts if isinstance(part, Placeholder))):
        if name in values:
            continue
        value = working.get(name)
        if value is None:
            missing = True
        else:
            checked[name] = _checked(route, name, value)
    if missing:
        return ""

    for name in checked:
        del working[name]
    values.update(checked)
    return "".join(part if isinstance(part, str) else values[part.name] for part in parts)


def _checked(route: Route[Any], name: str, value: Any) -> str:
    text = str(value)
    constraint = route.path_constraints.get(name, DEFAULT_CONSTRAINT)
    if not full_match(constraint, text):
        raise ConstraintViolation(text, name, constraint, route.name)
    return text
