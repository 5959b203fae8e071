"""
pytest configuration and fixtures.
"""

import io
import threading
from pathlib import Path
from typing import Callable, Generator, Optional
from wsgiref.util import setup_testing_defaults
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from serverkit.http import Request, ResponseWriter


class StartResponseRecorder:
    """Stands in for the WSGI server's start_response."""

    def __init__(self):
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []

    def __call__(self, status: str, headers: list, exc_info=None):
        self.calls.append((status, list(headers)))
        return lambda data: None

    @property
    def status(self) -> Optional[str]:
        return self.calls[-1][0] if self.calls else None

    @property
    def status_code(self) -> Optional[int]:
        return int(self.status.split(" ", 1)[0]) if self.status else None

    @property
    def headers(self) -> dict[str, str]:
        """Headers of the committed response, by lowercase name."""
        if not self.calls:
            return {}
        return {name.lower(): value for name, value in self.calls[-1][1]}


def build_environ(
    method: str = "GET",
    path: str = "/",
    query: str = "",
    headers: Optional[dict[str, str]] = None,
    body: bytes = b"",
) -> dict:
    """A complete WSGI environ for the given request."""
    environ = {
        "REQUEST_METHOD": method,
        "PATH_INFO": path,
        "QUERY_STRING": query,
        "REMOTE_ADDR": "127.0.0.1",
        "wsgi.input": io.BytesIO(body),
    }
    if body:
        environ["CONTENT_LENGTH"] = str(len(body))
    for name, value in (headers or {}).items():
        key = name.upper().replace("-", "_")
        if key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
            environ[key] = value
        else:
            environ[f"HTTP_{key}"] = value
    setup_testing_defaults(environ)
    return environ


@pytest.fixture
def make_environ() -> Callable[..., dict]:
    return build_environ


@pytest.fixture
def make_request() -> Callable[..., Request]:
    """Factory for Request objects built the same way the adapter builds them."""
    def factory(**kwargs) -> Request:
        return Request.from_environ(build_environ(**kwargs))
    return factory


@pytest.fixture
def start_response() -> StartResponseRecorder:
    return StartResponseRecorder()


@pytest.fixture
def writer(start_response: StartResponseRecorder) -> ResponseWriter:
    return ResponseWriter(start_response)


@pytest.fixture
def template_dir(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write {name: content} into a fresh directory and return it."""
    def factory(files: dict[str, str]) -> Path:
        root = tmp_path / "templates"
        root.mkdir()
        for name, content in files.items():
            (root / name).write_text(content, encoding="utf-8")
        return root
    return factory


class LiveServer:
    """A serverkit server running in a background thread."""

    def __init__(self, app):
        from serverkit.config import ServerConfig
        from serverkit.server import make_server

        self.server = make_server(ServerConfig(host="127.0.0.1", port=0), app)
        self.port = self.server.server_address[1]
        self._thread: Optional[threading.Thread] = None

    def start(self):
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._thread.start()

    def stop(self):
        self.server.shutdown()
        self.server.server_close()
        if self._thread:
            self._thread.join(timeout=5.0)


@pytest.fixture
def live_server() -> Generator[Callable[..., LiveServer], None, None]:
    """Start a server for a WSGI app; stopped after the test."""
    servers: list[LiveServer] = []

    def factory(app) -> LiveServer:
        server = LiveServer(app)
        server.start()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.stop()
