"""
=============================================================================
GENERIC HANDLER ADAPTER
=============================================================================

Turns a business function

    def index(request: Request) -> Response: ...

into a WSGI application with centralized error handling.

=============================================================================
PER-REQUEST PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   environ ──► Request ──► business function                          │
    │                                │                                     │
    │          ┌─────────────────────┼──────────────────────┐              │
    │          │                     │                      │              │
    │   raises HandlerError    raises anything else     returns Response   │
    │          │                     │                      │              │
    │    BusinessError         UnexpectedFault      response.write_response│
    │          │                     │                      │              │
    │          │                     │              ┌───────┴───────┐      │
    │          │                     │              ok          raises     │
    │          │                     │              │              │       │
    │          ▼                     ▼              ▼              ▼       │
    │     error_handler(writer, failure)          done    error_handler    │
    │                                                     (UnexpectedFault)│
    └─────────────────────────────────────────────────────────────────────┘

Exactly one of the paths runs for every request, so the client sees either
the rendered response or an error page, never both and never neither.

A failed flush is the one messy case: the status line and some of the body
may already be committed when the error handler runs. The handler cannot
undo that; it simply writes what it can.

=============================================================================
FAILURE VALUES
=============================================================================

Error handlers receive a Failure, which is one of:

    BusinessError    - the business function raised HandlerError on purpose
    UnexpectedFault  - anything else went wrong (a bug, a broken flush)

Both carry the original exception as .error and a .status to render, and
str(failure) == str(failure.error). A handler that doesn't care about the
difference can treat them uniformly; one that does can use isinstance().

MemoryError, KeyboardInterrupt and SystemExit are not converted into
failures. They terminate the request the hard way.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Union

from jinja2 import Environment

from .request import Request
from .response import Response
from .status_codes import HTTPStatus
from .writer import ResponseWriter, StartResponse

logger = logging.getLogger("serverkit.handler")


class HandlerError(Exception):
    """
    Raised by business functions to report an expected failure.

    Carries the HTTP status the error page should use:

        if not user:
            raise HandlerError(f"No user {user_id}", status_code=404)
    """

    def __init__(self, message: str, status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class BusinessError:
    """A HandlerError raised by the business function."""

    error: BaseException

    @property
    def status(self) -> int:
        return int(getattr(self.error, "status_code", HTTPStatus.INTERNAL_SERVER_ERROR))

    def __str__(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class UnexpectedFault:
    """Any other exception raised while producing or writing the response."""

    error: BaseException

    @property
    def status(self) -> int:
        return int(HTTPStatus.INTERNAL_SERVER_ERROR)

    def __str__(self) -> str:
        return str(self.error)


Failure = Union[BusinessError, UnexpectedFault]
ErrorHandler = Callable[[ResponseWriter, Failure], None]
HandleFunc = Callable[[Request], Response]


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def plain_text_error_handler(writer: ResponseWriter, failure: Failure) -> None:
    """
    Render the failure as plain text. This is the default error handler.

        HTTP 500
        Content-Type: text/plain; charset=utf-8

        Error:
        <error message>
    """
    writer.headers["Content-Type"] = "text/plain; charset=utf-8"
    writer.write_header(failure.status)
    writer.write("Error:\n")
    writer.write(f"{failure}\n")


_error_page = Environment(autoescape=True).from_string(
    '<!DOCTYPE html><html><head><title>Error</title><meta charset="utf-8"></head>'
    "<body><h1>Error</h1><p>{{ error }}</p></body></html>"
)


def simple_html_error_handler(writer: ResponseWriter, failure: Failure) -> None:
    """Render the failure as a minimal HTML page. The message is escaped."""
    writer.headers["Content-Type"] = "text/html; charset=utf-8"
    writer.write_header(failure.status)
    writer.write(_error_page.render(error=str(failure)))


# =============================================================================
# ADAPTER
# =============================================================================

@dataclass
class HandlerBuilder:
    """
    Holds the defaults for new handlers.

        builder = HandlerBuilder(error_handler=simple_html_error_handler)
        index = builder.new_handler(index_func)   # a WSGI app

    Without an error_handler, plain_text_error_handler is used.
    """

    error_handler: Optional[ErrorHandler] = None

    def new_handler(self, handle_func: HandleFunc) -> "GenericHandler":
        return GenericHandler(
            handle_func,
            self.error_handler or plain_text_error_handler,
        )


class GenericHandler:
    """
    WSGI application wrapping one business function.

    Holds nothing but the two function references, so a single instance
    can serve concurrent requests from a threaded server.
    """

    def __init__(self, handle_func: HandleFunc, error_handler: ErrorHandler):
        self.handle_func = handle_func
        self.error_handler = error_handler

    def __call__(self, environ: dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        request = Request.from_environ(environ)
        writer = ResponseWriter(start_response)
        self.serve(writer, request)
        return writer.chunks

    def serve(self, writer: ResponseWriter, request: Request) -> None:
        """Run the business function and write its response or an error."""
        outcome = self.run(request)

        if isinstance(outcome, (BusinessError, UnexpectedFault)):
            self.error_handler(writer, outcome)
            return

        try:
            outcome.write_response(writer)
        except MemoryError:
            raise
        except Exception as e:
            logger.exception(
                "Writing response for %s %s failed", request.method, request.path
            )
            if not writer.committed:
                # Nothing sent yet: the error page gets a clean header set
                writer.clear_headers()
            self.error_handler(writer, UnexpectedFault(e))

    def run(self, request: Request) -> Union[Response, Failure]:
        """
        Call the business function and classify its outcome.

        Returns the Response on success, otherwise the Failure to render.
        """
        try:
            response = self.handle_func(request)
        except HandlerError as e:
            logger.warning("%s %s: %s", request.method, request.path, e)
            return BusinessError(e)
        except MemoryError:
            raise
        except Exception as e:
            logger.exception(
                "Unhandled %s in handler for %s %s",
                type(e).__name__, request.method, request.path,
            )
            return UnexpectedFault(e)

        if response is None:
            logger.error("Handler for %s %s returned no response", request.method, request.path)
            return UnexpectedFault(TypeError("handler returned no response"))

        return response
