"""Map inbound paths onto gateway handlers."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .exchanges import ExchangeId


class RouteKind(str, Enum):
    PROXY = "proxy"
    HEALTH = "health"
    MEXC_TEST = "mexc_test"
    MEXC_SERVER_TIME = "mexc_server_time"
    METRICS = "metrics"


@dataclass(frozen=True)
class Route:
    prefix: str
    kind: RouteKind
    exchange: ExchangeId | None = None
    methods: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_proxy(self) -> bool:
        return self.kind is RouteKind.PROXY


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    upstream_path: str

    @property
    def kind(self) -> RouteKind:
        return self.route.kind

    @property
    def exchange(self) -> ExchangeId | None:
        return self.route.exchange


ROUTES: tuple[Route, ...] = (
    Route("/mexc", RouteKind.PROXY, ExchangeId.MEXC),
    Route("/bingx", RouteKind.PROXY, ExchangeId.BINGX),
    Route("/bitget", RouteKind.PROXY, ExchangeId.BITGET),
    Route("/health", RouteKind.HEALTH, methods=frozenset({"GET"})),
    Route("/metrics", RouteKind.METRICS, methods=frozenset({"GET"})),
    Route("/api/mexc/test", RouteKind.MEXC_TEST, methods=frozenset({"GET"})),
    Route("/mexc/_server_time", RouteKind.MEXC_SERVER_TIME, methods=frozenset({"GET"})),
)

# Longest prefix first so ``/mexc/_server_time`` wins over ``/mexc``.
_ORDERED_ROUTES = tuple(sorted(ROUTES, key=lambda route: len(route.prefix), reverse=True))


def _matches(path: str, route: Route) -> bool:
    if path == route.prefix:
        return True
    if route.is_proxy:
        return path.startswith(route.prefix + "/")
    # Diagnostic routes own their exact path only, with an optional trailing slash.
    return path == route.prefix + "/"


def match_route(path: str) -> RouteMatch | None:
    """Return the route owning *path* by longest-prefix match on segment boundaries.

    The remainder after the prefix is the upstream path; an empty remainder
    maps to ``/``. Paths below a diagnostic route fall through to the
    exchange prefix that contains them, so ``/mexc/_server_time/x`` is proxied
    to MEXC.
    """

    for route in _ORDERED_ROUTES:
        if _matches(path, route):
            return RouteMatch(route=route, upstream_path=path[len(route.prefix):] or "/")
    return None


__all__ = ["ROUTES", "Route", "RouteKind", "RouteMatch", "match_route"]
