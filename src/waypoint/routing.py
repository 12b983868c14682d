"""Route compilation and first-match-wins matching.

A route is written in a compact notation::

    GET|POST /blog/:slug<[a-z-]+>[/comments[/:page<\\d+>]]?sort=&limit=<\\d+>

The method prefix, constraint annotations and query section are extracted
when the route is registered; the remaining skeleton is parsed into nodes
(see :mod:`waypoint.pattern`) when it is matched or assembled.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from waypoint.assembly import assemble_route
from waypoint.errors import NoMatchedRoute, UnknownRoute
from waypoint.pattern import DEFAULT_CONSTRAINT, compile_regex, parse_pattern, resolve_translations
from waypoint.query import admit_query, compile_query, resolve_fields
from waypoint.translation import Translator

if TYPE_CHECKING:
    from collections.abc import Iterator

    from waypoint._types import Captures, Parameters, Translate

logger = logging.getLogger("waypoint.routing")

H = TypeVar("H")

_METHODS_RE = re.compile(r"^\s*(?P<methods>[a-z]+(?:\s*\|\s*[a-z]+)*)\s+", re.IGNORECASE)
_CONSTRAINT_RE = re.compile(r":(?P<name>[a-z]\w*)(?:<(?P<constraint>[^>]+)>)?", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Route(Generic[H]):
    """A compiled route definition.

    ``view`` and ``handler`` belong to the caller and are passed through
    untouched.
    """

    name: str
    pattern: str
    raw: str = ""
    methods: frozenset[str] = frozenset({"GET"})
    path_constraints: dict[str, str] = field(default_factory=dict)
    query_constraints: dict[str, str] = field(default_factory=dict)
    restricted: bool = False
    view: Any = None
    handler: H | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route[Any]
    captures: Captures


def compile_route(name: str, raw: str, view: Any = None, handler: H | None = None) -> Route[H]:
    """Compile the route notation *raw* into a :class:`Route`.

    Compilation is pure: the same input always gives an equal route.
    Malformed skeletons are only reported when matched or assembled.
    """
    methods = frozenset({"GET"})
    pattern = raw

    m = _METHODS_RE.match(pattern)
    if m is not None:
        methods = frozenset(part.strip().upper() for part in m["methods"].split("|"))
        pattern = pattern[m.end() :]

    path_constraints: dict[str, str] = {}

    def strip_constraint(m: re.Match[str]) -> str:
        path_constraints[m["name"]] = m["constraint"] or DEFAULT_CONSTRAINT
        return ":" + m["name"]

    pattern = _CONSTRAINT_RE.sub(strip_constraint, pattern)

    path, separator, query_spec = pattern.partition("?")
    restricted, query_constraints = compile_query(query_spec if separator else None)

    return Route(
        name=name,
        pattern=path,
        raw=raw,
        methods=methods,
        path_constraints=path_constraints,
        query_constraints=query_constraints,
        restricted=restricted,
        view=view,
        handler=handler,
    )


def split_target(target: str) -> tuple[str, str]:
    """Split a request target into ``(path, query)``, dropping any fragment."""
    path, _, query = target.split("#", 1)[0].partition("?")
    return path, query


class Router:
    """Named routes with first-match-wins lookup in registration order.

    Parameters
    ----------
    translator:
        Resolves ``{text}`` markers. Its ``locale`` is the fallback when
        :meth:`match` or :meth:`assemble` get none.
    """

    __slots__ = ("_routes", "translator")

    def __init__(self, translator: Translator | None = None) -> None:
        self.translator = translator or Translator()
        self._routes: dict[str, Route[Any]] = {}

    def add(self, name: str, pattern: str, view: Any = None, handler: Any = None) -> Route[Any]:
        """Compile and register a route. An existing route with *name* is replaced."""
        route = compile_route(name, pattern, view, handler)
        self._routes[name] = route
        logger.debug("Registered route %r: %s %s", name, "|".join(sorted(route.methods)), route.pattern)
        return route

    def get(self, name: str) -> Route[Any] | None:
        return self._routes.get(name)

    def __getitem__(self, name: str) -> Route[Any]:
        try:
            return self._routes[name]
        except KeyError:
            raise UnknownRoute(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __iter__(self) -> Iterator[Route[Any]]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    @property
    def routes(self) -> list[Route[Any]]:
        return list(self._routes.values())

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match(self, target: str, method: str, locale: str | None = None) -> RouteMatch | None:
        """Return the first route admitting *target*, or ``None``.

        *target* is a URL path with an optional query string. Restricted
        routes also validate the query string; unrestricted routes ignore it.
        """
        path, query = split_target(target)
        method = method.upper()
        translate = self.translator.bind(locale)

        for route in self._routes.values():
            if method not in route.methods:
                continue
            captures = _match_route(route, path, query, translate)
            if captures is not None:
                logger.debug("Matched %s %s to route %r", method, target, route.name)
                return RouteMatch(route=route, captures=captures)

        logger.debug("No route matches %s %s", method, target)
        return None

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------

    def assemble(
        self,
        name: str | None = None,
        parameters: Parameters | None = None,
        *,
        matched: RouteMatch | None = None,
        reuse: bool = True,
        locale: str | None = None,
    ) -> str:
        """Build the URL of route *name* (or of the *matched* route).

        With *reuse*, the captures of *matched* seed the parameters and
        *parameters* are laid over them.

        Raises :class:`UnknownRoute`, :class:`NoMatchedRoute`,
        :class:`MissingRequiredParameter` or :class:`ConstraintViolation`.
        """
        if name is None:
            if matched is None:
                raise NoMatchedRoute
            route = matched.route
        else:
            route = self[name]

        merged: dict[str, Any] = {}
        if reuse and matched is not None:
            merged.update(matched.captures)
        merged.update(parameters or {})

        return assemble_route(route, merged, self.translator.bind(locale))


def _match_route(route: Route[Any], path: str, query: str, translate: Translate) -> Captures | None:
    nodes = resolve_translations(parse_pattern(route.pattern), translate)
    m = compile_regex(route.pattern, nodes, route.path_constraints).fullmatch(path)
    if m is None:
        return None

    captures: Captures = m.groupdict()
    if route.restricted:
        query_captures = admit_query(resolve_fields(route.query_constraints, translate), query)
        if query_captures is None:
            return None
        captures.update(query_captures)
    return captures
