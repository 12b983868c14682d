"""Route skeleton AST.

A skeleton such as ``/blog[/{page}/:page]*`` is parsed once into a tuple of
tagged nodes. Matching and assembly both walk the same nodes, so the
parameters a pattern captures are exactly the parameters it consumes.

Nodes::

    Literal("/blog")         plain text, escaped when turned into a regex
    Placeholder("page")      ``:page``
    OptionalGroup((...))     ``[...]``, arbitrarily nested
    Wildcard()               ``*``
    Translatable("page")     ``{page}``, replaced by its translation
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from waypoint.errors import InvalidRoutePattern

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from waypoint._types import Translate

DEFAULT_CONSTRAINT = r"[^/]+"

_NAME_RE = re.compile(r"[a-z]\w*", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Literal:
    text: str


@dataclass(frozen=True, slots=True)
class Placeholder:
    name: str


@dataclass(frozen=True, slots=True)
class Wildcard:
    pass


@dataclass(frozen=True, slots=True)
class Translatable:
    text: str


@dataclass(frozen=True, slots=True)
class OptionalGroup:
    children: tuple[Node, ...]


Node = Literal | Placeholder | Wildcard | Translatable | OptionalGroup


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------


@lru_cache(maxsize=512)
def parse_pattern(pattern: str) -> tuple[Node, ...]:
    """Parse a route skeleton into nodes.

    Raises :class:`InvalidRoutePattern` for unbalanced brackets or an
    unterminated ``{``.
    """
    nodes, _ = _parse_nodes(pattern, 0, depth=0)
    return nodes


def _parse_nodes(pattern: str, pos: int, *, depth: int) -> tuple[tuple[Node, ...], int]:
    nodes: list[Node] = []
    text: list[str] = []

    def flush() -> None:
        if text:
            nodes.append(Literal("".join(text)))
            text.clear()

    while pos < len(pattern):
        char = pattern[pos]

        if char == "[":
            flush()
            children, pos = _parse_nodes(pattern, pos + 1, depth=depth + 1)
            nodes.append(OptionalGroup(children))
            continue

        if char == "]":
            if depth == 0:
                raise InvalidRoutePattern(pattern, f"unexpected ']' at position {pos}")
            flush()
            return tuple(nodes), pos + 1

        if char == "*":
            flush()
            nodes.append(Wildcard())
            pos += 1
            continue

        if char == "{":
            end = pattern.find("}", pos + 1)
            inner = pattern[pos + 1 : end]
            if end == -1 or not inner or "{" in inner:
                raise InvalidRoutePattern(pattern, f"unterminated '{{' at position {pos}")
            flush()
            nodes.append(Translatable(inner))
            pos = end + 1
            continue

        if char == ":":
            m = _NAME_RE.match(pattern, pos + 1)
            if m is not None:
                flush()
                nodes.append(Placeholder(m.group()))
                pos = m.end()
                continue

        text.append(char)
        pos += 1

    if depth > 0:
        raise InvalidRoutePattern(pattern, "missing ']'")
    flush()
    return tuple(nodes), pos


def resolve_translations(
    nodes: tuple[Node, ...],
    translate: Translate,
    *,
    _active: frozenset[str] = frozenset(),
) -> tuple[Node, ...]:
    """Replace every ``{text}`` node with the parse of its translation.

    A translation may contain further markers, which are resolved in turn.
    A translation that leads back to a text being resolved is a cycle and
    raises :class:`InvalidRoutePattern`.
    """
    resolved: list[Node] = []
    for node in nodes:
        if isinstance(node, Translatable):
            if node.text in _active:
                raise InvalidRoutePattern(f"{{{node.text}}}", "translation refers back to itself")
            translated = parse_pattern(translate(node.text))
            resolved.extend(resolve_translations(translated, translate, _active=_active | {node.text}))
        elif isinstance(node, OptionalGroup):
            resolved.append(OptionalGroup(resolve_translations(node.children, translate, _active=_active)))
        else:
            resolved.append(node)
    return tuple(resolved)


# ------------------------------------------------------------------
# Walkers
# ------------------------------------------------------------------


def iter_placeholders(nodes: tuple[Node, ...]) -> Iterator[Placeholder]:
    """Yield placeholders depth-first, in source order."""
    for node in nodes:
        if isinstance(node, Placeholder):
            yield node
        elif isinstance(node, OptionalGroup):
            yield from iter_placeholders(node.children)


def placeholder_names(nodes: tuple[Node, ...]) -> list[str]:
    """Ordered, de-duplicated parameter names of a resolved pattern."""
    return list(dict.fromkeys(p.name for p in iter_placeholders(nodes)))


def to_regex(nodes: tuple[Node, ...], constraints: Mapping[str, str], _seen: set[str] | None = None) -> str:
    """Build an (unanchored) regular expression from resolved nodes.

    Placeholders become named groups bounded by their constraint; a repeated
    placeholder must repeat the first value. Optional groups become
    ``(?:...)?``.
    """
    seen = set() if _seen is None else _seen
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, Literal):
            parts.append(re.escape(node.text))
        elif isinstance(node, Placeholder):
            if node.name in seen:
                parts.append(f"(?P={node.name})")
            else:
                seen.add(node.name)
                parts.append(f"(?P<{node.name}>{constraints.get(node.name, DEFAULT_CONSTRAINT)})")
        elif isinstance(node, Wildcard):
            parts.append(".*")
        elif isinstance(node, OptionalGroup):
            parts.append(f"(?:{to_regex(node.children, constraints, seen)})?")
        else:
            msg = f"Unresolved translatable text {{{node.text}}}"
            raise TypeError(msg)
    return "".join(parts)


@lru_cache(maxsize=512)
def _compile(regex: str) -> re.Pattern[str]:
    return re.compile(regex)


def compile_regex(pattern: str, nodes: tuple[Node, ...], constraints: Mapping[str, str]) -> re.Pattern[str]:
    """Compile resolved *nodes* of *pattern* into a regex for full matching."""
    try:
        return _compile(to_regex(nodes, constraints))
    except re.error as exc:
        raise InvalidRoutePattern(pattern, str(exc)) from exc


def full_match(constraint: str, value: str, *, ignore_case: bool = False) -> bool:
    """Return whether *value* matches *constraint* as a whole."""
    flags = re.IGNORECASE if ignore_case else 0
    try:
        return re.fullmatch(constraint, value, flags) is not None
    except re.error as exc:
        raise InvalidRoutePattern(constraint, str(exc)) from exc
