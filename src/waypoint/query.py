"""Query-string section of a route pattern.

``/products?page=<\\d+>&search=&latest`` declares three query parameters;
``/products?`` and ``/products?!`` declare none and forbid any query string.
A declared name written as ``{text}`` is translatable: its capture name is
``text`` and its key on the wire is the translation of ``text``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, urlencode

from waypoint.errors import ConstraintViolation
from waypoint.pattern import full_match

if TYPE_CHECKING:
    from collections.abc import Mapping

    from waypoint._types import Captures, Translate

ANY_VALUE = ".*"

# A "&" inside a <constraint> is part of the constraint, not a separator.
_SPLIT_RE = re.compile(r"&(?![^<>]*>)")
_PARAM_RE = re.compile(r"^(?P<name>[^=]+)(?:=(?:<(?P<constraint>[^>]+)>)?)?$")
_TRANSLATABLE_RE = re.compile(r"^\{(?P<text>[^{}]+)\}$")


@dataclass(frozen=True, slots=True)
class QueryField:
    """A declared query parameter after translation."""

    name: str
    key: str
    constraint: str


def compile_query(spec: str | None) -> tuple[bool, dict[str, str]]:
    """Compile the part after ``?`` into ``(restricted, constraints)``.

    ``None`` (no ``?`` at all) leaves the route unrestricted.
    """
    if spec is None:
        return False, {}

    spec = spec.strip()
    if not spec or spec == "!":
        return True, {}

    constraints: dict[str, str] = {}
    for token in _SPLIT_RE.split(spec):
        m = _PARAM_RE.match(token.strip())
        if m is not None:
            constraints[m["name"]] = m["constraint"] or ANY_VALUE
    return True, constraints


def resolve_fields(constraints: Mapping[str, str], translate: Translate) -> list[QueryField]:
    fields: list[QueryField] = []
    for declared, constraint in constraints.items():
        m = _TRANSLATABLE_RE.match(declared)
        if m is None:
            fields.append(QueryField(declared, declared, constraint))
        else:
            fields.append(QueryField(m["text"], translate(m["text"]), constraint))
    return fields


def admit_query(fields: list[QueryField], query: str) -> Captures | None:
    """Validate a raw query string against the declared *fields*.

    Returns the query captures (every declared name, ``None`` when not
    supplied) or ``None`` when an undeclared key or a value failing its
    constraint is present.
    """
    by_key = {field.key: field for field in fields}
    captures: Captures = dict.fromkeys((field.name for field in fields), None)

    for key, value in parse_qsl(query, keep_blank_values=True):
        field = by_key.get(key)
        if field is None or not full_match(field.constraint, value, ignore_case=True):
            return None
        captures[field.name] = value.strip()
    return captures


def render_query(fields: list[QueryField], parameters: Mapping[str, str], route: str) -> str:
    """Render the declared fields present in *parameters* as a query string.

    Raises :class:`ConstraintViolation` for a value its constraint rejects.
    """
    pairs: list[tuple[str, str]] = []
    for field in fields:
        if field.name not in parameters:
            continue
        value = parameters[field.name]
        if not full_match(field.constraint, value, ignore_case=True):
            raise ConstraintViolation(value, field.name, field.constraint, route, query=True)
        pairs.append((field.key, value))
    return urlencode(pairs)
