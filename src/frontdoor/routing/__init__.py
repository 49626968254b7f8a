"""Routing — ordered dispatch table with first-match semantics.

Routes are registered during setup in a fixed order and compiled into
an immutable lookup structure when the app freezes.
"""

from frontdoor.routing.route import Route, RouteMatch
from frontdoor.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
