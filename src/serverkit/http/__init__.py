"""
=============================================================================
HTTP HELPERS
=============================================================================

Boilerplate reduction for WSGI request handlers.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSES (response.py)                                             │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Buffered responses with typed constructors                          │
    │                                                                      │
    │   new_plain_text_response(200)     text/plain; charset=utf-8        │
    │   new_html_response(200)           text/html; charset=utf-8         │
    │   new_json_response(200, data)     application/json; charset=utf-8  │
    │   new_redirect_response(False, "/")  302 + Location + fallback page │
    │   handle_404_plain / handle_404_simple_html                         │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HANDLER ADAPTER (handler.py)                                        │
    │ ─────────────────────────────────────────────────────────────────── │
    │ (Request) -> Response   ──new_handler()──►   WSGI application       │
    │                                                                      │
    │   HandlerError        expected failure, routed to the error handler │
    │   other exceptions    unexpected fault, same route                  │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ TRANSPORT (request.py, writer.py)                                   │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Request built from the WSGI environ, ResponseWriter on top of       │
    │ start_response() with a single commit point                         │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .request import Request, RequestBodyError
from .writer import ResponseWriter
from .response import (
    Response,
    new_response,
    new_plain_text_response,
    new_html_response,
    new_json_response,
    new_redirect_response,
    handle_404_plain,
    handle_404_simple_html,
    simple_html_page,
)
from .handler import (
    HandlerBuilder,
    GenericHandler,
    HandlerError,
    BusinessError,
    UnexpectedFault,
    Failure,
    ErrorHandler,
    plain_text_error_handler,
    simple_html_error_handler,
)
from .status_codes import HTTPStatus, status_line

__all__ = [
    # Transport
    "Request",
    "RequestBodyError",
    "ResponseWriter",

    # Responses
    "Response",
    "new_response",
    "new_plain_text_response",
    "new_html_response",
    "new_json_response",
    "new_redirect_response",
    "handle_404_plain",
    "handle_404_simple_html",
    "simple_html_page",

    # Handler adapter
    "HandlerBuilder",
    "GenericHandler",
    "HandlerError",
    "BusinessError",
    "UnexpectedFault",
    "Failure",
    "ErrorHandler",
    "plain_text_error_handler",
    "simple_html_error_handler",

    # Status codes
    "HTTPStatus",
    "status_line",
]
