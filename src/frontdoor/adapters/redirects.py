"""Redirect-only adapters."""

import re

from frontdoor.errors import BadRequest
from frontdoor.http.request import Request
from frontdoor.http.response import Redirect


class RedirectTo:
    """Answer every request with a fixed redirect."""

    __slots__ = ("_status", "_url")

    def __init__(self, url: str, status: int = 302) -> None:
        self._url = url
        self._status = status

    def __call__(self, request: Request) -> Redirect:
        return Redirect(self._url, status=self._status)


_ISSUE_PATH = re.compile(r"/issue/([0-9]+)")


class IssueRedirect:
    """Send ``/issue/<digits>`` to the external issue tracker.

    *tracker_url* is the tracker URL up to and including ``id=``; the
    issue number is appended. Anything that is not a pure-digit id is
    a 400.
    """

    __slots__ = ("_tracker_url",)

    def __init__(self, tracker_url: str) -> None:
        self._tracker_url = tracker_url

    def __call__(self, request: Request) -> Redirect:
        m = _ISSUE_PATH.fullmatch(request.path)
        if m is None:
            raise BadRequest()
        return Redirect(self._tracker_url + m.group(1))
