"""
Example site built on serverkit, also used by ``python -m serverkit``.
"""

from importlib.resources import files

from .app import MessageStore, create_app

# Templates shipped inside the package
BUNDLED_TEMPLATES = files(__name__) / "templates"

__all__ = ["BUNDLED_TEMPLATES", "MessageStore", "create_app"]
