"""
WSGI middleware shipped with serverkit.
"""

from .logging import AccessLogMiddleware, RequestLog

__all__ = ["AccessLogMiddleware", "RequestLog"]
