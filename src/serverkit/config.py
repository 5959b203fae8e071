"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Settings for the bundled example server.

    Priority (highest to lowest):

    1. Command-line arguments     python -m serverkit --port 3000
    2. Environment variables      SERVERKIT_PORT=3000 python -m serverkit
    3. Defaults in this dataclass

Validation happens once, at startup, so a typo in the environment fails
the launch instead of the first request.
=============================================================================
"""

import os
from dataclasses import dataclass
from typing import Optional

ERROR_PAGE_FORMATS = ("html", "plain")
LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ServerConfig:
    """
    Configuration for the example server.

    Development:
        ServerConfig(log_level="DEBUG", template_dir="./template")

    Containers:
        ServerConfig(host="0.0.0.0", log_format="json")
    """

    host: str = "127.0.0.1"
    """Interface to bind to. "0.0.0.0" listens on all interfaces."""

    port: int = 8080
    """Port to listen on. 0 lets the OS pick a free one."""

    template_dir: Optional[str] = None
    """
    Directory with the HTML templates. None uses the templates bundled
    with serverkit.example.
    """

    error_pages: str = "html"
    """"html" renders errors as a small HTML page, "plain" as text."""

    log_level: str = "INFO"

    log_format: str = "text"
    """Access log format: 'text' (Apache style) or 'json'."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        SERVERKIT_HOST          Server host (default: 127.0.0.1)
        SERVERKIT_PORT          Server port (default: 8080)
        SERVERKIT_TEMPLATE_DIR  Template directory (default: bundled)
        SERVERKIT_ERROR_PAGES   html | plain (default: html)
        SERVERKIT_LOG_LEVEL     Logging level (default: INFO)
        SERVERKIT_LOG_FORMAT    text | json (default: text)
        """
        return cls(
            host=os.getenv("SERVERKIT_HOST", "127.0.0.1"),
            port=int(os.getenv("SERVERKIT_PORT", "8080")),
            template_dir=os.getenv("SERVERKIT_TEMPLATE_DIR") or None,
            error_pages=os.getenv("SERVERKIT_ERROR_PAGES", "html"),
            log_level=os.getenv("SERVERKIT_LOG_LEVEL", "INFO"),
            log_format=os.getenv("SERVERKIT_LOG_FORMAT", "text"),
        )

    def validate(self) -> None:
        """
        Raises:
            ValueError: On the first invalid setting.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.error_pages not in ERROR_PAGE_FORMATS:
            raise ValueError(
                f"error_pages must be one of {', '.join(ERROR_PAGE_FORMATS)}"
            )

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
