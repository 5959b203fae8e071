"""
=============================================================================
SERVERKIT CLI ENTRY POINT
=============================================================================

Runs the example site on the built-in threaded WSGI server.

    # Run with defaults (localhost:8080, bundled templates)
    python -m serverkit

    # Own templates, plain text error pages
    python -m serverkit --templates ./template --error-pages plain

    # Listen on all interfaces, JSON access log
    python -m serverkit --host 0.0.0.0 --log-format json

Unset options fall back to the SERVERKIT_* environment variables, then to
the ServerConfig defaults.
=============================================================================
"""

import argparse
import logging
import sys

from . import __version__
from .assets import TemplateLoadError, parse_root_templates
from .config import ERROR_PAGE_FORMATS, LOG_FORMATS, LOG_LEVELS, ServerConfig
from .example import BUNDLED_TEMPLATES, create_app
from .http import plain_text_error_handler, simple_html_error_handler
from .middleware import AccessLogMiddleware
from .server import run, setup_logging

logger = logging.getLogger("serverkit")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serverkit",
        description="Example web server built with serverkit",
    )

    parser.add_argument("--host", "-H", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, help="Port to listen on (default: 8080)")
    parser.add_argument(
        "--templates", "-t",
        dest="template_dir",
        help="Directory with HTML templates (default: bundled example templates)",
    )
    parser.add_argument(
        "--error-pages",
        choices=ERROR_PAGE_FORMATS,
        help="How errors are rendered (default: html)",
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        help="Access log format (default: text)",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"serverkit {__version__}",
    )
    return parser


def load_config(argv=None) -> ServerConfig:
    """Environment first, then command-line overrides."""
    args = build_parser().parse_args(argv)
    config = ServerConfig.from_env()

    for name in ("host", "port", "template_dir", "error_pages", "log_level", "log_format"):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)

    config.validate()
    return config


def main(argv=None) -> int:
    try:
        config = load_config(argv)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)

    logger.info("Parsing templates")
    try:
        templates = parse_root_templates(config.template_dir or BUNDLED_TEMPLATES)
    except TemplateLoadError as e:
        logger.error(f"Could not load templates: {e}")
        return 1

    if config.error_pages == "html":
        error_handler = simple_html_error_handler
    else:
        error_handler = plain_text_error_handler

    logger.info("Setting up HTTP handlers")
    app = AccessLogMiddleware(
        create_app(templates, error_handler=error_handler),
        log_format=config.log_format,
    )

    try:
        run(config, app)
    except OSError as e:
        logger.error(f"Server error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
