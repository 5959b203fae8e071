"""
=============================================================================
EXAMPLE APPLICATION
=============================================================================

A small site showing the helpers working together:

    GET  /           index.html rendered from the template set (gzip if
                     the client accepts it), 404 page for unknown paths
    GET  /redirect   302 back to /
    GET  /api        {"Message": "<current message>"}
    PUT  /api        replace the message with the request body

Paths are matched exactly; anything not listed falls through to the "/"
handler, which answers with the simple HTML 404 page.
=============================================================================
"""

import threading
from typing import Any, Callable, Iterable, Optional

from ..assets import TemplateSet
from ..http import (
    ErrorHandler,
    HandlerBuilder,
    HandlerError,
    Request,
    Response,
    handle_404_simple_html,
    new_html_response,
    new_json_response,
    new_redirect_response,
)


class MessageStore:
    """The one piece of mutable state behind /api, shared by all threads."""

    def __init__(self, message: str = "Hello"):
        self._message = message
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._message

    def set(self, message: str) -> None:
        with self._lock:
            self._message = message


def create_app(
    templates: TemplateSet,
    error_handler: Optional[ErrorHandler] = None,
    store: Optional[MessageStore] = None,
) -> Callable[[dict, Callable[..., Any]], Iterable[bytes]]:
    """Build the example WSGI app around an already loaded template set."""
    builder = HandlerBuilder(error_handler=error_handler)
    store = store or MessageStore()

    def index(request: Request) -> Response:
        if request.path != "/":
            return handle_404_simple_html(request)

        res = new_html_response(200)
        res.allow_compression(request)
        try:
            templates.render_to(res, "index.html", [
                "This is an example",
                "for serverkit",
            ])
        except Exception as e:
            raise HandlerError(f"Rendering index.html failed: {e}") from e
        return res

    def redirect(request: Request) -> Response:
        return new_redirect_response(False, "/")

    def api(request: Request) -> Response:
        if request.method == "PUT":
            try:
                store.set(request.body.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise HandlerError(f"Message must be UTF-8: {e}", status_code=400) from e
            return new_json_response(200, {"Updated": True})

        return new_json_response(200, {"Message": store.get()})

    routes = {
        "/redirect": builder.new_handler(redirect),
        "/api": builder.new_handler(api),
    }
    fallback = builder.new_handler(index)

    def app(environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        handler = routes.get(environ.get("PATH_INFO") or "/", fallback)
        return handler(environ, start_response)

    return app
