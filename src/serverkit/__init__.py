"""
=============================================================================
SERVERKIT - Helpers for WSGI Web Applications
=============================================================================

A small convenience layer on top of WSGI. It does not route, schedule or
parse HTTP itself; it removes the boilerplate around those:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   1. RESPONSE HELPERS (serverkit.http)                              │
    │      - Plain text, HTML, JSON and redirect responses                │
    │      - Opt-in gzip, cache-disabling headers, canned 404 pages       │
    │                                                                      │
    │   2. HANDLER ADAPTER (serverkit.http)                               │
    │      - (Request) -> Response functions as WSGI apps                 │
    │      - One place where errors become error pages                    │
    │                                                                      │
    │   3. TEMPLATE LOADER (serverkit.assets)                             │
    │      - A directory of files as one set of named Jinja2 templates    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    serverkit/
    ├── __init__.py          # This file
    ├── __main__.py          # CLI entry point (python -m serverkit)
    ├── config.py            # ServerConfig dataclass
    ├── server.py            # Threaded wsgiref server for the CLI
    ├── http/
    │   ├── request.py       # Request view of a WSGI environ
    │   ├── writer.py        # ResponseWriter over start_response
    │   ├── response.py      # Buffered Response + constructors
    │   ├── handler.py       # Handler adapter and error handlers
    │   └── status_codes.py  # Status codes and WSGI status lines
    ├── assets/
    │   └── templates.py     # Template loader
    ├── middleware/
    │   └── logging.py       # Access log WSGI middleware
    └── example/             # Example site and its templates

=============================================================================
QUICK START
=============================================================================

    from serverkit.http import HandlerBuilder, HandlerError, new_json_response

    builder = HandlerBuilder()

    def user(request):
        user_id = request.get_query("id")
        if not user_id:
            raise HandlerError("id is required", status_code=400)
        return new_json_response(200, {"id": user_id})

    application = builder.new_handler(user)   # hand to any WSGI server

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig

__all__ = ["ServerConfig", "__version__"]
