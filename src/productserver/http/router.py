"""
=============================================================================
PREFIX ROUTER
=============================================================================

Routes a request by testing the literal start of its text against an
ordered table of "<METHOD> <prefix>" strings. The first match wins.

=============================================================================
THE PRODUCT ROUTE TABLE
=============================================================================

    ┌───┬──────────────────────────┬───────────────────────────────────────┐
    │ # │ Match text               │ Handler                               │
    ├───┼──────────────────────────┼───────────────────────────────────────┤
    │ 1 │ POST /products           │ create                                │
    │ 2 │ GET /products/           │ read one           ◄── must precede 3 │
    │ 3 │ GET /products            │ read all                              │
    │ 4 │ GET /price/              │ read below price threshold            │
    │ 5 │ PUT /products/           │ update                                │
    │ 6 │ DELETE /products/        │ delete                                │
    │ - │ (no match)               │ 404 "404 Not found"                   │
    └───┴──────────────────────────┴───────────────────────────────────────┘

"GET /products" is a prefix of "GET /products/7", so if route 3 came first
every single-record GET would be answered with the full list.

=============================================================================
SHADOWING CHECK
=============================================================================

The table does not rely on callers getting registration order right. When a
route is added, its match text is compared against every route already in
the table:

    existing "GET /products"    new "GET /products/"
    "GET /products/".startswith("GET /products")  →  RouteShadowedError

The narrower route can never be reached in that order, so registration
fails loudly instead of silently misrouting.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, List, Optional
import logging

from .request import HTTPRequest
from .response import HTTPResponse, not_found


logger = logging.getLogger(__name__)


# Handler: takes a request, returns a response
Handler = Callable[[HTTPRequest], HTTPResponse]


class RouteShadowedError(ValueError):
    """A route was registered after a broader route that always matches first."""


@dataclass(frozen=True)
class Route:
    """
    One row of the route table.

        Route(method="GET", prefix="/products/", handler=get_product, name="read_one")
    """

    method: str
    prefix: str
    handler: Handler
    name: Optional[str] = None

    @property
    def match_text(self) -> str:
        """Literal start a request must have, e.g. "GET /products/"."""
        return f"{self.method} {self.prefix}"

    def matches(self, text: str) -> bool:
        return text.startswith(self.match_text)


class Router:
    """
    Ordered, first-match-wins prefix router.

    Usage:
        router = Router()

        @router.get("/products/", name="read_one")
        def get_product(request):
            ...

        @router.get("/products", name="read_all")
        def list_products(request):
            ...

        response = router.handle(request)
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        method: str,
        prefix: str,
        handler: Handler,
        name: Optional[str] = None,
    ) -> Route:
        """
        Append a route to the table.

        Raises:
            RouteShadowedError: An earlier route's match text is a prefix
                                of this one's, so this route could never match.
        """
        route = Route(method=method.upper(), prefix=prefix, handler=handler, name=name)

        for existing in self._routes:
            if route.match_text.startswith(existing.match_text):
                raise RouteShadowedError(
                    f"Route {route.match_text!r} is shadowed by earlier route "
                    f"{existing.match_text!r}; register the narrower route first"
                )

        self._routes.append(route)
        logger.debug(f"Registered route {route.match_text!r} ({name or handler.__name__})")
        return route

    def route(self, method: str, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route()."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(method, prefix, handler, name)
            return handler
        return decorator

    def get(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route("GET", prefix, name)

    def post(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route("POST", prefix, name)

    def put(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route("PUT", prefix, name)

    def delete(self, prefix: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route("DELETE", prefix, name)

    # =========================================================================
    # MATCHING
    # =========================================================================

    def match(self, text: str) -> Optional[Route]:
        """First route whose match text starts the request text, or None."""
        for route in self._routes:
            if route.matches(text):
                return route
        return None

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Dispatch to the matching handler, or answer 404."""
        route = self.match(request.text)
        if route is None:
            return not_found("404 Not found")
        return route.handler(request)

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def routes(self) -> List[Route]:
        """Registered routes in precedence order."""
        return list(self._routes)

    def describe_routes(self) -> str:
        """
        Printable route table, logged at startup.

            Registered Routes:
            ------------------------------------------------------------
              1. POST     /products            create
              2. GET      /products/           read_one
            ------------------------------------------------------------
        """
        lines = ["Registered Routes:", "-" * 60]
        for position, route in enumerate(self._routes, start=1):
            label = route.name or route.handler.__name__
            lines.append(f"  {position}. {route.method:8} {route.prefix:20} {label}")
        lines.append("-" * 60)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._routes)
