"""Tests for frontdoor.routing — ordered, literal path matching."""

import pytest

from frontdoor.errors import NotFound
from frontdoor.routing.route import Route
from frontdoor.routing.router import Router, parse_pattern


def _handler() -> str:
    return "ok"


def _router(*routes: Route) -> Router:
    router = Router()
    for route in routes:
        router.add(route)
    router.compile()
    return router


class TestParsePattern:
    def test_prefix(self) -> None:
        assert parse_pattern("/static/") == (None, "/static/", False)

    def test_exact(self) -> None:
        assert parse_pattern("/favicon.ico") == (None, "/favicon.ico", True)

    def test_host_qualified(self) -> None:
        assert parse_pattern("Build.Example.org/") == ("build.example.org", "/", False)

    def test_host_with_path(self) -> None:
        assert parse_pattern("build.example.org/status") == ("build.example.org", "/status", True)


class TestRouteMatches:
    def test_exact_only_matches_itself(self) -> None:
        route = Route("/code", _handler)
        assert route.matches("/code")
        assert not route.matches("/code/")

    def test_prefix_matches_subtree(self) -> None:
        route = Route("/static/", _handler, exact=False)
        assert route.matches("/static/")
        assert route.matches("/static/css/site.css")
        assert not route.matches("/staticx")


class TestPrecedence:
    def test_longest_prefix_wins(self) -> None:
        short = Route("/r/", _handler, exact=False, name="short", rank=0)
        long = Route("/r/admin/", _handler, exact=False, name="long", rank=1)
        router = _router(short, long)
        assert router.match("/r/admin/x").route.name == "long"
        assert router.match("/r/1234").route.name == "short"

    def test_exact_beats_prefix(self) -> None:
        prefix = Route("/code/", _handler, exact=False, name="prefix", rank=0)
        exact = Route("/code/", _handler, exact=True, name="exact", rank=1)
        router = _router(prefix, exact)
        assert router.match("/code/").route.name == "exact"
        assert router.match("/code/gitweb.css").route.name == "prefix"

    def test_registration_order_breaks_ties(self) -> None:
        first = Route("/pkg/", _handler, exact=False, name="first", rank=0)
        second = Route("/pkg/", _handler, exact=False, name="second", rank=1)
        router = _router(second, first)
        assert router.match("/pkg/fmt").route.name == "first"

    def test_host_route_beats_general(self) -> None:
        general = Route("/static/", _handler, exact=False, name="general", rank=0)
        hosted = Route("/", _handler, exact=False, host="build.example.org", name="hosted", rank=1)
        router = _router(general, hosted)
        assert router.match("/static/x", "build.example.org").route.name == "hosted"
        assert router.match("/static/x", "example.org").route.name == "general"

    def test_host_match_ignores_port_and_case(self) -> None:
        hosted = Route("/", _handler, exact=False, host="build.example.org", name="hosted")
        router = _router(hosted)
        assert router.match("/", "Build.Example.org:8080").route.name == "hosted"

    def test_routes_listed_in_registration_order(self) -> None:
        a = Route("/a", _handler, rank=0)
        b = Route("/b/long/", _handler, exact=False, rank=1)
        router = _router(a, b)
        assert [r.pattern for r in router.routes] == ["/a", "/b/long/"]


class TestMatchMisses:
    def test_no_match_raises_not_found(self) -> None:
        router = _router(Route("/issue/", _handler, exact=False))
        with pytest.raises(NotFound):
            router.match("/nothing")

    def test_missing_slash_redirects(self) -> None:
        router = _router(Route("/r/", _handler, exact=False))
        match = router.match("/r")
        assert match.redirect_slash is True

    def test_exact_route_preferred_over_slash_redirect(self) -> None:
        router = _router(
            Route("/code", _handler, name="exact", rank=0),
            Route("/code/", _handler, exact=False, name="tree", rank=1),
        )
        match = router.match("/code")
        assert match.redirect_slash is False
        assert match.route.name == "exact"

    def test_add_after_compile_fails(self) -> None:
        router = _router()
        with pytest.raises(RuntimeError):
            router.add(Route("/x", _handler))
