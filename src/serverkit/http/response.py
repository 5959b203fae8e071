"""
=============================================================================
BUFFERED HTTP RESPONSES
=============================================================================

A Response is an HTTP response that has NOT been sent yet. Business
functions create one, append to its body, tweak its headers, and return
it. The handler adapter then flushes it to the transport exactly once.

=============================================================================
RESPONSE LIFECYCLE
=============================================================================

    new_html_response(200)     res.write(...)          res.write_response(w)
    ─────────────────────►   ─────────────────►   ─────────────────────────►
    status, content type      body, headers,          Content-Type
    isText flag               compression,            Content-Encoding
                              cache headers           custom headers
                                                      status (commit)
                                                      body (gzip or raw)

The body is only an append-only buffer until the flush. Nothing reaches the
client before write_response() is called, which is what lets the handler
adapter render an error page INSTEAD of a half-written success page.

=============================================================================
FLUSH ORDER
=============================================================================

    1. Content-Type         "<type>; charset=utf-8" for text, verbatim else
    2. Content-Encoding     "gzip", only when compression was allowed
    3. Custom headers       set (replace) one by one, in insertion order
    4. Status line          commit point on the transport
    5. Body                 through a GzipFile, or raw bytes

Calling write_response() twice is not supported: the transport accepts the
status line only once.

=============================================================================
"""

import dataclasses
import gzip
import io
import json
from typing import Any, Union

from markupsafe import escape

from .request import Request
from .status_codes import HTTPStatus
from .writer import ResponseWriter


# Set programmatically at flush time; never part of the custom header map.
RESERVED_HEADERS = frozenset({"content-type", "content-encoding"})


class Response:
    """
    A not-yet-flushed HTTP response.

    Response is file-like on the write side, so anything that writes text
    into a stream works with it:

        res = new_plain_text_response(200)
        print("Hello", file=res)
        res.write(b"raw bytes too\\n")
    """

    def __init__(self, status: int, content_type: str, is_text: bool):
        self.status = status
        self.content_type = content_type
        self.is_text = is_text
        self.headers: dict[str, str] = {}
        self.compress = False
        self._content = io.BytesIO()

    # =========================================================================
    # BODY
    # =========================================================================

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> int:
        """Append data to the body. Strings are encoded as UTF-8."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        return self._content.write(data)

    def flush(self) -> None:
        """File-like no-op; the body is sent by write_response()."""

    @property
    def body(self) -> bytes:
        """The uncompressed body buffered so far."""
        return self._content.getvalue()

    # =========================================================================
    # HEADERS
    # =========================================================================

    def set_header(self, name: str, value: str) -> None:
        """
        Set a custom header, replacing any earlier value for the same name.

        Names compare case-insensitively, like on the transport. The first
        spelling used for a name is kept.

        Raises:
            ValueError: For Content-Type and Content-Encoding, which are
                        derived from the response itself at flush time.
        """
        key = name.lower()
        if key in RESERVED_HEADERS:
            raise ValueError(f"{name} is set when the response is written")

        for existing in self.headers:
            if existing.lower() == key:
                self.headers[existing] = value
                return
        self.headers[name] = value

    def disable_caching(self) -> None:
        """Tell browsers and proxies not to cache this response."""
        self.set_header("Cache-Control", "no-cache, no-store, must-revalidate")
        self.set_header("Pragma", "no-cache")  # HTTP/1.0 caches
        self.set_header("Expires", "0")

    def allow_compression(self, request: Request) -> None:
        """
        Gzip the body if the client advertises gzip support.

        Compression is opt-in per response: this only looks at the
        request's Accept-Encoding header, it never inspects the body.
        """
        self.compress = "gzip" in request.get_header("accept-encoding")

    # =========================================================================
    # FLUSH
    # =========================================================================

    def write_response(self, writer: ResponseWriter) -> None:
        """
        Send status, headers and body to the transport.

        Errors raised by the writer propagate to the caller; by then the
        status line may already be committed.
        """
        if self.is_text:
            writer.headers["Content-Type"] = f"{self.content_type}; charset=utf-8"
        else:
            writer.headers["Content-Type"] = self.content_type

        if self.compress:
            writer.headers["Content-Encoding"] = "gzip"

        for name, value in self.headers.items():
            writer.headers[name] = value

        writer.write_header(self.status)

        if self.compress:
            # Closing the GzipFile writes the trailer (CRC + size).
            with gzip.GzipFile(fileobj=writer, mode="wb") as gz:
                gz.write(self.body)
        else:
            writer.write(self.body)

    def __repr__(self) -> str:
        return (
            f"<Response {self.status} {self.content_type} "
            f"{len(self.body)} bytes{' gzip' if self.compress else ''}>"
        )


# =============================================================================
# CONSTRUCTORS
# =============================================================================
#
# Each constructor returns a Response with the content type preset and an
# empty (or pre-filled) body, ready for the business function to append to.
#
#     res = new_html_response(200)
#     templates.render_to(res, "index.html", items)
#     return res
#
# =============================================================================

def new_response(status: int, content_type: str, is_text: bool) -> Response:
    return Response(status, content_type, is_text)


def new_plain_text_response(status: int) -> Response:
    """text/plain; charset=utf-8"""
    return new_response(status, "text/plain", True)


def new_html_response(status: int) -> Response:
    """text/html; charset=utf-8"""
    return new_response(status, "text/html", True)


def new_json_response(status: int, data: Any) -> Response:
    """
    Create a JSON response with ``data`` pretty-printed as its body.

    Dataclass instances are serialized as their fields. Anything json can't
    encode (sets, NaN, arbitrary objects) raises TypeError/ValueError right
    here: passing such a value is a programming error, not a request error.
    """
    content = json.dumps(
        data,
        indent=2,
        ensure_ascii=False,
        allow_nan=False,
        default=_json_default,
    )

    res = new_response(status, "application/json", True)
    res.write(content)
    return res


def new_redirect_response(permanent: bool, location: str) -> Response:
    """
    Create a 301 (permanent) or 302 (temporary) redirect to ``location``.

    The body is a fallback page for clients that don't follow the Location
    header on their own.
    """
    status = HTTPStatus.MOVED_PERMANENTLY if permanent else HTTPStatus.FOUND

    res = new_html_response(int(status))
    res.set_header("Location", location)
    print(simple_html_page("Redirect", (
        "You see this Text because your browser cannot handle this redirect. "
        "Please click the following link to go to the destination: "
        f'<a href="{escape(location)}">Go to destination</a>'
    )), file=res)
    return res


# =============================================================================
# CANNED PAGES
# =============================================================================

def handle_404_plain(request: Request) -> Response:
    """Plain text 404 page."""
    res = new_plain_text_response(HTTPStatus.NOT_FOUND)
    print("Error 404: Not found", file=res)
    return res


def handle_404_simple_html(request: Request) -> Response:
    """Minimal HTML 404 page."""
    res = new_html_response(HTTPStatus.NOT_FOUND)
    print(simple_html_page(
        "Error 404: Not Found",
        "The resource was not found on this server.",
    ), file=res)
    return res


def simple_html_page(title: str, content: Any) -> str:
    """
    Render the minimal page used by the canned responses.

    ``content`` is inserted as-is (it may contain markup); ``title`` is
    escaped.
    """
    title = escape(title)
    return (
        f"<!DOCTYPE html><html><head><title>{title}</title>"
        f'<meta charset="utf-8"></head>'
        f"<body><h1>{title}</h1><p>{content}</p></body></html>"
    )


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
