"""Ordered route table with first-match-wins lookup.

Routes are appended during setup and scanned linearly at request time.
Registration order is the only priority: a later route whose pattern
overlaps an earlier one is shadowed, silently.
"""

from wren.routing.route import Route, RouteMatch


class Router:
    """Insertion-ordered route table.

    Usage::

        router = Router()
        router.add(Route("GET", PathMatcher.compile("/users/{id}"), handler))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Append a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes.append(route)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes in registration order."""
        return tuple(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, or ``None``."""
        for route in self._routes:
            if route.method != method:
                continue
            captures = route.matcher.match(path)
            if captures is not None:
                return RouteMatch(route=route, captures=captures)
        return None

    def __len__(self) -> int:
        return len(self._routes)
