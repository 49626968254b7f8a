"""Diagnostic endpoints."""

import logging

import anyio

from frontdoor.http.request import Request
from frontdoor.http.response import Response

logger = logging.getLogger("frontdoor.server")


def first_inet_address(output: str) -> str:
    """Pull the first IPv4 address out of ``ip -f inet addr show`` output.

    Returns "" when the output holds no ``inet <addr>/<prefix>`` entry.
    """
    _, found, rest = output.partition("inet ")
    if not found:
        return ""
    address, found, _ = rest.partition("/")
    return address if found else ""


class InterfaceAddress:
    """Report the IPv4 address of a network interface as plain text.

    The body is empty when the command fails or the interface has no
    IPv4 address.
    """

    __slots__ = ("_interface",)

    def __init__(self, interface: str = "eth0") -> None:
        self._interface = interface

    def command(self) -> list[str]:
        return ["ip", "-f", "inet", "addr", "show", "dev", self._interface]

    async def __call__(self, request: Request) -> Response:
        try:
            result = await anyio.run_process(self.command(), check=False)
        except OSError as exc:
            logger.warning("%s: %s", " ".join(self.command()), exc)
            output = ""
        else:
            output = result.stdout.decode("utf-8", "replace")
        return Response(
            body=first_inet_address(output),
            content_type="text/plain; charset=utf-8",
        )
