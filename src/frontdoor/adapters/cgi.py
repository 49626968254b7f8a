"""CGI/1.1 adapter.

Runs an external program per request: the request is mapped onto the
program's environment and stdin, the program's header block becomes
the response status and headers, and the rest of stdout is streamed
back as the body.
"""

import logging
import os
import subprocess
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import anyio
from anyio.abc import ByteSendStream, Process
from anyio.streams.buffered import BufferedByteReceiveStream

from frontdoor._internal.invoke import invoke
from frontdoor.http.request import Request
from frontdoor.http.response import Response, StreamingResponse, plain_text

logger = logging.getLogger("frontdoor.cgi")

MAX_HEADER_LINE = 4096
INHERITED_ENV = ("PATH", "LD_LIBRARY_PATH")
DEFAULT_PATH = "/bin:/usr/bin:/usr/ucb:/usr/bsd:/usr/local/bin"


class CGIError(Exception):
    """The program failed before producing a usable header block."""


def _split_host(host: str, tls: bool) -> tuple[str, str]:
    default_port = "443" if tls else "80"
    if host.startswith("["):
        name, _, rest = host.partition("]")
        port = rest.lstrip(":")
        return name + "]", port or default_port
    name, sep, port = host.rpartition(":")
    if sep and port.isdigit():
        return name, port
    return host, default_port


def build_environ(
    request: Request,
    *,
    script: str,
    root: str = "/",
    extra: dict[str, str] | None = None,
) -> dict[str, str]:
    """Map *request* onto a CGI/1.1 environment.

    ``PATH_INFO`` is the request path with *root* removed; *extra*
    entries are applied last and win over everything else.
    """
    path_info = request.path
    if root != "/" and path_info.startswith(root):
        path_info = path_info[len(root) :]

    server_name, server_port = _split_host(request.host, request.is_tls)
    env = {
        "SERVER_SOFTWARE": "frontdoor",
        "SERVER_NAME": server_name,
        "SERVER_PROTOCOL": f"HTTP/{request.http_version}",
        "HTTP_HOST": request.host,
        "GATEWAY_INTERFACE": "CGI/1.1",
        "REQUEST_METHOD": request.method,
        "QUERY_STRING": request.query_string,
        "REQUEST_URI": request.request_uri,
        "PATH_INFO": path_info,
        "SCRIPT_NAME": root,
        "SCRIPT_FILENAME": script,
        "SERVER_PORT": server_port,
    }
    if request.client is not None:
        env["REMOTE_ADDR"] = request.client[0]
        env["REMOTE_HOST"] = request.client[0]
        env["REMOTE_PORT"] = str(request.client[1])
    if request.is_tls:
        env["HTTPS"] = "on"

    for name, value in request.headers.items_decoded():
        if name == "proxy":
            continue
        key = "HTTP_" + name.upper().replace("-", "_")
        if key in env:
            env[key] = f"{env[key]}, {value}"
        else:
            env[key] = value

    if request.content_length:
        env["CONTENT_LENGTH"] = str(request.content_length)
    if request.content_type:
        env["CONTENT_TYPE"] = request.content_type

    for name in INHERITED_ENV:
        value = os.environ.get(name)
        if value:
            env[name] = value
    env.setdefault("PATH", DEFAULT_PATH)

    if extra:
        env.update(extra)
    return env


def parse_header_block(lines: list[str]) -> tuple[int, list[tuple[str, str]]]:
    """Turn CGI header lines into ``(status, headers)``.

    ``Status:`` sets the status and is not forwarded. A ``Location``
    without a status means 302. Raises CGIError when neither
    ``Content-Type`` nor ``Location`` is present.
    """
    status = 0
    headers: list[tuple[str, str]] = []
    for line in lines:
        name, sep, value = line.partition(":")
        if not sep:
            logger.warning("cgi: bogus header line: %s", line)
            continue
        name, value = name.strip(), value.strip()
        if name.lower() == "status":
            code = value[:3]
            if not code.isdigit():
                msg = f"bogus status (short): {value!r}"
                raise CGIError(msg)
            status = int(code)
            continue
        headers.append((name, value))

    names = {name.lower() for name, _ in headers}
    if status == 0 and "location" in names:
        status = 302
    if "content-type" not in names and "location" not in names:
        msg = "missing required Content-Type in headers"
        raise CGIError(msg)
    return status or 200, headers


class CGIHandler:
    """Adapter running *script* as a CGI program.

    The program runs with its own directory as the working directory.
    *env* is overlaid on the per-request environment. Failing to start
    the program, an exit before a complete header block, or a header
    block without ``Content-Type`` is logged and answered with 500.

    Usage::

        gitweb = CGIHandler(config.gitweb_script, root="/code/", env=config.gitweb_env())
    """

    __slots__ = ("_env", "_root", "_script")

    def __init__(
        self,
        script: str | Path,
        *,
        root: str = "/",
        env: dict[str, str] | None = None,
    ) -> None:
        self._script = str(script)
        self._root = root or "/"
        self._env = dict(env or {})

    @property
    def script(self) -> str:
        return self._script

    async def __call__(self, request: Request) -> StreamingResponse | Response:
        environ = build_environ(request, script=self._script, root=self._root, extra=self._env)
        body = await request.body()

        try:
            process = await anyio.open_process(
                [self._script],
                env=environ,
                cwd=os.path.dirname(self._script) or ".",
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=None,
            )
        except OSError as exc:
            logger.error("cgi: failed to start %s: %s", self._script, exc)
            return plain_text("Internal Server Error", 500)

        try:
            status, headers, reader, early = await self._start(process, body)
        except (CGIError, anyio.BrokenResourceError) as exc:
            logger.error("cgi: %s: %s", self._script, exc)
            await process.aclose()
            return plain_text("Internal Server Error", 500)
        except BaseException:
            await process.aclose()
            raise

        return StreamingResponse(
            chunks=_relay(reader, process, early),
            status=status,
            content_type=None,
            headers=tuple(headers),
        )

    async def _start(
        self, process: Process, body: bytes
    ) -> tuple[int, list[tuple[str, str]], BufferedByteReceiveStream, list[bytes]]:
        """Write *body* to the program while reading its header block.

        stdin is fed from its own task. Output the program writes before
        it has consumed all of stdin is collected into the returned
        ``early`` chunks, so neither side can stall on a full pipe.
        """
        if process.stdin is None or process.stdout is None:
            msg = "program started without stdio pipes"
            raise CGIError(msg)

        stdin = process.stdin
        reader = BufferedByteReceiveStream(process.stdout)
        fed = anyio.Event()
        failure: Exception | None = None
        status = 0
        headers: list[tuple[str, str]] = []
        early: list[bytes] = []

        async with anyio.create_task_group() as tg:
            tg.start_soon(_feed, stdin, body, fed)
            try:
                status, headers = parse_header_block(await self._read_header_lines(reader))
                early = await _drain_until(reader, fed)
            except (CGIError, anyio.BrokenResourceError) as exc:
                failure = exc
                tg.cancel_scope.cancel()

        if failure is not None:
            raise failure
        return status, headers, reader, early

    @staticmethod
    async def _read_header_lines(reader: BufferedByteReceiveStream) -> list[str]:
        lines: list[str] = []
        while True:
            try:
                raw = await reader.receive_until(b"\n", MAX_HEADER_LINE)
            except anyio.IncompleteRead:
                # Program exited (or closed stdout) before the blank line.
                msg = "no headers"
                raise CGIError(msg) from None
            except anyio.DelimiterNotFound:
                msg = "long header line"
                raise CGIError(msg) from None
            line = raw.rstrip(b"\r").decode("latin-1")
            if not line:
                break
            lines.append(line)
        if not lines:
            msg = "no headers"
            raise CGIError(msg)
        return lines


async def _feed(stdin: ByteSendStream, body: bytes, fed: anyio.Event) -> None:
    try:
        if body:
            await stdin.send(body)
    except (anyio.BrokenResourceError, anyio.ClosedResourceError):
        # The program exited or closed stdin without reading the body.
        logger.debug("cgi: program did not read the whole request body")
    finally:
        with anyio.CancelScope(shield=True):
            await stdin.aclose()
        fed.set()


async def _drain_until(reader: BufferedByteReceiveStream, fed: anyio.Event) -> list[bytes]:
    """Collect program output until the request body is fully written."""
    early: list[bytes] = []
    if fed.is_set():
        return early

    async def drain() -> None:
        try:
            while True:
                early.append(await reader.receive())
        except anyio.EndOfStream:
            pass

    async with anyio.create_task_group() as tg:
        tg.start_soon(drain)
        await fed.wait()
        tg.cancel_scope.cancel()
    return early


async def _relay(
    reader: BufferedByteReceiveStream, process: Process, early: list[bytes]
) -> AsyncIterator[bytes]:
    try:
        for chunk in early:
            yield chunk
        while True:
            try:
                yield await reader.receive()
            except anyio.EndOfStream:
                break
    finally:
        await process.aclose()
        if process.returncode:
            logger.warning("cgi: program exited with status %s", process.returncode)

class ScriptOrAssets:
    """Serve the CGI program at the mount root and static assets below it.

    Exactly ``/code/`` runs the program; ``/code/gitweb.css`` and the
    like come from the asset directory.
    """

    __slots__ = ("_assets", "_root", "_script")

    def __init__(
        self, script: Callable[..., Any], assets: Callable[..., Any], *, root: str
    ) -> None:
        self._script = script
        self._assets = assets
        self._root = root

    async def __call__(self, request: Request) -> Any:
        if request.path == self._root:
            return await invoke(self._script, request)
        return await invoke(self._assets, request)
