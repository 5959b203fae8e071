"""
=============================================================================
THREADED WSGI SERVER
=============================================================================

A thin layer over wsgiref for running serverkit apps without an external
server. Each request gets its own thread (socketserver.ThreadingMixIn);
serverkit adds no scheduling of its own on top of that.

    make_server(config, app)          run(config, app)
    ─────────────────────────►        ─────────────────────────►
    bound, not serving yet            serve_forever() until Ctrl+C

For production, hand the same WSGI app to gunicorn, waitress or uWSGI
instead; nothing in serverkit.http depends on this module.
=============================================================================
"""

import logging
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer
from wsgiref.simple_server import make_server as _make_wsgi_server

from .config import ServerConfig
from .middleware.logging import WSGIApp

logger = logging.getLogger("serverkit.server")


class ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    """wsgiref server handling each request in its own thread."""

    daemon_threads = True


class LoggingRequestHandler(WSGIRequestHandler):
    """Send wsgiref's own messages to logging instead of stderr."""

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for command-line use."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("serverkit").setLevel(numeric_level)


def make_server(config: ServerConfig, app: WSGIApp) -> ThreadingWSGIServer:
    """Bind a threaded WSGI server for ``app`` (port 0 picks a free port)."""
    config.validate()

    server = _make_wsgi_server(
        config.host,
        config.port,
        app,
        server_class=ThreadingWSGIServer,
        handler_class=LoggingRequestHandler,
    )
    return server


def run(config: ServerConfig, app: WSGIApp) -> None:
    """Serve ``app`` until interrupted."""
    server = make_server(config, app)
    host, port = server.server_address[:2]
    logger.info(f"Listening on http://{host}:{port}")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    finally:
        server.server_close()
        logger.info("Server stopped")
