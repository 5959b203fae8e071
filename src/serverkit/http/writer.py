"""
=============================================================================
RESPONSE WRITER
=============================================================================

The transport side of a request: a small writer that sits between our
Response objects and WSGI's start_response().

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      WRITER LIFECYCLE                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   headers["X"] = "y"      write_header(200)        write(b"...")    │
    │   ───────────────────►   ──────────────────►   ──────────────────►  │
    │   mutable header set      COMMIT POINT            body chunks       │
    │                           start_response()        (app iterable)    │
    │                           called exactly once                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

After the commit point the status line and headers are fixed. A second
write_header() is ignored (and logged), and header changes no longer reach
the client. This is the same contract the handler adapter relies on when it
has to render an error after a failed flush.
=============================================================================
"""

import logging
from typing import Any, Callable, Optional, Union
from wsgiref.headers import Headers

from .status_codes import status_line

logger = logging.getLogger("serverkit.handler")

StartResponse = Callable[..., Any]


class ResponseWriter:
    """
    Writes one response to a WSGI start_response callable.

    Usage:
        writer = ResponseWriter(start_response)
        writer.headers["Content-Type"] = "text/plain; charset=utf-8"
        writer.write_header(200)
        writer.write(b"hello")
        return writer.chunks   # handed back to the WSGI server
    """

    def __init__(self, start_response: StartResponse):
        self.headers = Headers([])
        self.status: Optional[int] = None
        self.chunks: list[bytes] = []
        self._start_response = start_response

    @property
    def committed(self) -> bool:
        """True once the status line and headers have been handed over."""
        return self.status is not None

    def clear_headers(self) -> None:
        """Drop every header set so far. Only useful before the commit point."""
        self.headers = Headers([])

    def write_header(self, status: int) -> None:
        """
        Commit the status line and the current headers.

        Only the first call has an effect.
        """
        if self.committed:
            logger.warning(
                "Superfluous write_header(%s) call, status %s already sent",
                status, self.status,
            )
            return

        line = status_line(status)
        self.status = int(status)
        self._start_response(line, self.headers.items())

    def write(self, data: Union[bytes, bytearray, memoryview, str]) -> int:
        """Append body data, committing status 200 first if needed."""
        if not self.committed:
            self.write_header(200)

        if isinstance(data, str):
            data = data.encode("utf-8")
        chunk = bytes(data)
        self.chunks.append(chunk)
        return len(chunk)

    def flush(self) -> None:
        """Nothing is buffered beyond the chunk list; present for file-likes."""

    @property
    def body(self) -> bytes:
        """Everything written so far."""
        return b"".join(self.chunks)
