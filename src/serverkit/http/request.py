"""
=============================================================================
REQUEST VIEW OVER A WSGI ENVIRON
=============================================================================

The host server has already parsed the request line and headers; all we do
here is lift the interesting parts of the WSGI environ into a dataclass
that business functions can read comfortably.

    WSGI server                  Request                    Business function
    parses socket   ──environ──►  dataclass   ──passed──►   def index(request):
                                                                ...

Header names follow the CGI convention inside the environ
(HTTP_ACCEPT_ENCODING, CONTENT_TYPE). We turn them back into lowercase
dash-separated names ("accept-encoding"), since header names are
case-insensitive per RFC 7230.
=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import parse_qs
import json


class RequestBodyError(Exception):
    """Raised when the request body cannot be decoded as requested."""


@dataclass
class Request:
    """
    Represents one inbound request handed to a business function.

    Attributes:
        method:         HTTP method (GET, POST, PUT, ...)
        path:           Request path without query string
        headers:        Header mapping with lowercase keys
        query_params:   "?a=1&a=2" → {"a": ["1", "2"]}
        body:           Raw request body bytes
        client_address: (ip, port) of the peer, as far as WSGI tells us
        environ:        The original WSGI environ
    """

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    client_address: tuple[str, int] = ("", 0)
    environ: Dict[str, Any] = field(default_factory=dict, repr=False)

    _body_json: Optional[Any] = field(default=None, repr=False)

    @classmethod
    def from_environ(cls, environ: Dict[str, Any]) -> "Request":
        """
        Build a Request from a WSGI environ.

        The body is read eagerly, bounded by CONTENT_LENGTH. A missing or
        malformed CONTENT_LENGTH means "no body", as PEP 3333 allows.
        """
        headers: Dict[str, str] = {}
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers[key[5:].replace("_", "-").lower()] = value
        if environ.get("CONTENT_TYPE"):
            headers["content-type"] = environ["CONTENT_TYPE"]
        if environ.get("CONTENT_LENGTH"):
            headers["content-length"] = environ["CONTENT_LENGTH"]

        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0

        body = b""
        stream = environ.get("wsgi.input")
        if length > 0 and stream is not None:
            body = stream.read(length)

        try:
            port = int(environ.get("REMOTE_PORT") or 0)
        except ValueError:
            port = 0

        return cls(
            method=environ.get("REQUEST_METHOD", "GET").upper(),
            path=environ.get("PATH_INFO") or "/",
            headers=headers,
            query_params=parse_qs(environ.get("QUERY_STRING", "")),
            body=body,
            client_address=(environ.get("REMOTE_ADDR", ""), port),
            environ=environ,
        )

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type without parameters ("application/json")."""
        ct = self.headers.get("content-type", "")
        return ct.split(";")[0].strip().lower() or None

    @property
    def content_length(self) -> int:
        try:
            return int(self.headers.get("content-length", 0))
        except ValueError:
            return 0

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def json(self) -> Any:
        """
        Parse the request body as JSON (cached after the first access).

        Raises:
            RequestBodyError: If the body is not valid UTF-8 JSON.
        """
        if self._body_json is None and self.body:
            try:
                self._body_json = json.loads(self.body.decode("utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise RequestBodyError(f"Invalid JSON body: {e}") from e
        return self._body_json

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter, or default."""
        values = self.query_params.get(name, [])
        return values[0] if values else default

    def get_query_list(self, name: str) -> list[str]:
        return self.query_params.get(name, [])
