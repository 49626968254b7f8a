"""Production listeners.

Starts one pounce ASGI server for plaintext HTTP and, when configured,
a second one terminating TLS. Both serve the same live App object.
"""

from __future__ import annotations

import _thread
import logging
import threading
from typing import TYPE_CHECKING, Any

from frontdoor.config import split_addr

if TYPE_CHECKING:
    from frontdoor.app import App

logger = logging.getLogger("frontdoor.server")


def _server(app: App, addr: str, *, certfile: str | None = None, keyfile: str | None = None) -> Any:
    from pounce.config import ServerConfig
    from pounce.server import Server

    host, port = split_addr(addr)
    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        keep_alive_timeout=app.config.read_timeout,
        request_timeout=app.config.write_timeout,
        ssl_certfile=certfile,
        ssl_keyfile=keyfile,
    )
    return Server(config, app)


def _run_tls(server: Any, addr: str, failures: list[BaseException]) -> None:
    try:
        server.run()
    except Exception as exc:
        logger.exception("TLS listener on %s failed", addr)
        failures.append(exc)
        # Stops the plaintext listener; serve() reports the failure.
        _thread.interrupt_main()


def serve(app: App) -> None:
    """Serve *app* on the configured listeners until interrupted.

    The TLS listener runs in a daemon thread; the plaintext listener
    owns the main thread so signal handling stays with it. If the TLS
    listener dies, the plaintext one is stopped and ``OSError`` is raised.
    """
    config = app.config
    failures: list[BaseException] = []

    if config.https_enabled:
        tls = _server(
            app,
            config.https_addr,
            certfile=config.tls_cert_file,
            keyfile=config.tls_key_file,
        )
        logger.info("Starting TLS server on %s", config.https_addr)
        threading.Thread(
            target=_run_tls,
            args=(tls, config.https_addr, failures),
            name="frontdoor-https",
            daemon=True,
        ).start()

    logger.info("Listening on %s", config.http_addr)
    try:
        _server(app, config.http_addr).run()
    except KeyboardInterrupt:
        if not failures:
            raise

    if failures:
        msg = f"TLS listener on {config.https_addr} failed: {failures[0]}"
        raise OSError(msg) from failures[0]
