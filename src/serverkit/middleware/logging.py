"""
=============================================================================
ACCESS LOGGING
=============================================================================

A WSGI wrapper that logs one line per request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │   WSGI server ──► AccessLogMiddleware ──► app (GenericHandler, ...)  │
    │                         │                                            │
    │                   start timer, wrap start_response                   │
    │                   capture status, count body bytes                   │
    │                   emit RequestLog                                    │
    └─────────────────────────────────────────────────────────────────────┘

Text output follows the Apache combined log layout, so the usual log
analyzers can read it:

    127.0.0.1 - - [19/Oct/2026:12:00:00 +0000] "GET /api" 200 27 0.42ms

JSON output is one object per line, for log aggregators.

Every response gets an X-Request-ID header with the ID used in the log
line, so a client can quote it when reporting a problem.
=============================================================================
"""

import time
import json
import uuid
import logging
from typing import Any, Callable, Iterable, Optional
from dataclasses import dataclass, asdict

logger = logging.getLogger("serverkit.access")

WSGIApp = Callable[[dict, Callable[..., Any]], Iterable[bytes]]


@dataclass
class RequestLog:
    """One access log entry."""

    request_id: str
    method: str
    path: str
    query: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 2)
        return data

    def to_text(self) -> str:
        path = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class AccessLogMiddleware:
    """
    Log every request passing through a WSGI app.

        app = AccessLogMiddleware(app, log_format="json", skip_paths=["/health"])
    """

    def __init__(
        self,
        app: WSGIApp,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        if log_format not in ("text", "json"):
            raise ValueError(f"Unknown log format: {log_format!r}")

        self.app = app
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, environ: dict, start_response: Callable[..., Any]) -> Iterable[bytes]:
        # First 8 characters of a UUID4
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()
        status_holder: list[str] = []

        def logging_start_response(status: str, headers: list, exc_info: Any = None):
            status_holder.append(status)
            if self.include_request_id:
                headers = list(headers) + [("X-Request-ID", request_id)]
            if exc_info is not None:
                return start_response(status, headers, exc_info)
            return start_response(status, headers)

        method = environ.get("REQUEST_METHOD", "GET")
        path = environ.get("PATH_INFO") or "/"

        try:
            result = self.app(environ, logging_start_response)
            try:
                chunks = list(result)
            finally:
                # PEP 3333: close() must be called if the iterable has one
                if hasattr(result, "close"):
                    result.close()
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"Request failed: {method} {path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        if path not in self.skip_paths:
            status_code = int(status_holder[-1].split(" ", 1)[0]) if status_holder else 0
            entry = RequestLog(
                request_id=request_id,
                method=method,
                path=path,
                query=environ.get("QUERY_STRING", ""),
                client_ip=environ.get("REMOTE_ADDR", "-"),
                user_agent=environ.get("HTTP_USER_AGENT") or "-",
                status_code=status_code,
                content_length=sum(len(chunk) for chunk in chunks),
                duration_ms=duration_ms,
                timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            )
            if self.log_format == "json":
                logger.log(self.log_level, json.dumps(entry.to_dict()))
            else:
                logger.log(self.log_level, entry.to_text())

        return chunks
