"""Waypoint application: routes, tasks and translations in one place."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from waypoint.routing import Router
from waypoint.tasks import TaskRegistry
from waypoint.translation import Translator

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from waypoint._types import Parameters, Translations
    from waypoint.config import WaypointConfig
    from waypoint.routing import Route, RouteMatch
    from waypoint.tasks import ParsedTask, Task


class Waypoint:
    """Owns a :class:`Router`, a :class:`TaskRegistry` and a :class:`Translator`.

    Parameters
    ----------
    locale:
        Default locale for ``{text}`` markers when matching and assembling.
    translations:
        ``locale -> {text: translation}`` mappings.

    The route found by the last successful :meth:`dispatch` is kept as
    :attr:`matched`; :meth:`assemble` reuses it.
    """

    def __init__(self, *, locale: str | None = None, translations: Translations | None = None) -> None:
        self.translator = Translator(translations, locale=locale)
        self.router = Router(self.translator)
        self.tasks = TaskRegistry()
        self.matched: RouteMatch | None = None

    @classmethod
    def from_config(cls, config: WaypointConfig) -> Waypoint:
        app = cls(locale=config.locale, translations=config.translations)
        for route in config.routes:
            app.add_route(route.name, route.pattern, view=route.view)
        for task in config.tasks:
            app.add_task(task.name, task.command, script=task.script)
        return app

    @property
    def locale(self) -> str | None:
        return self.translator.locale

    @locale.setter
    def locale(self, value: str | None) -> None:
        self.translator.locale = value

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def add_route(self, name: str, pattern: str, *, view: Any = None, handler: Any = None) -> Route[Any]:
        return self.router.add(name, pattern, view, handler)

    def route(self, name: str, pattern: str, *, view: Any = None) -> Callable[..., Any]:
        """Decorator registering the decorated function as the route handler."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.router.add(name, pattern, view, handler)
            return handler

        return decorator

    def _method_route(self, method: str, name: str, path: str, view: Any) -> Callable[..., Any]:
        return self.route(name, f"{method} {path}", view=view)

    def get(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("GET", name, path, view)

    def post(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("POST", name, path, view)

    def put(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("PUT", name, path, view)

    def delete(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("DELETE", name, path, view)

    def patch(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("PATCH", name, path, view)

    def options(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("OPTIONS", name, path, view)

    def head(self, name: str, path: str, *, view: Any = None) -> Callable[..., Any]:
        return self._method_route("HEAD", name, path, view)

    # ------------------------------------------------------------------
    # Task registration
    # ------------------------------------------------------------------

    def add_task(self, name: str, command: str, *, script: str | None = None, handler: Any = None) -> Task:
        return self.tasks.add(name, command, script, handler)

    def task(self, name: str, command: str, *, script: str | None = None) -> Callable[..., Any]:
        """Decorator registering the decorated function as the task handler."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.tasks.add(name, command, script, handler)
            return handler

        return decorator

    # ------------------------------------------------------------------
    # Matching, assembly and parsing
    # ------------------------------------------------------------------

    def dispatch(self, target: str, method: str = "GET", locale: str | None = None) -> RouteMatch | None:
        """Match *target* and remember the result as :attr:`matched`.

        A failed match leaves the previous :attr:`matched` in place.
        """
        result = self.router.match(target, method, locale)
        if result is not None:
            self.matched = result
        return result

    def assemble(
        self,
        name: str | None = None,
        parameters: Parameters | None = None,
        reuse: bool = True,
        locale: str | None = None,
    ) -> str:
        """Assemble route *name*, or the matched route when *name* is omitted."""
        return self.router.assemble(name, parameters, matched=self.matched, reuse=reuse, locale=locale)

    def parse(self, argv: Sequence[str]) -> ParsedTask | None:
        return self.tasks.parse(argv)

    def translate(self, text: str, locale: str | None = None) -> str:
        return self.translator.translate(text, locale)
