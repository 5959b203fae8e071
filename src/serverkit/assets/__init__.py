"""
Static assets: named HTML templates loaded from a directory or package.
"""

from .templates import (
    TemplateSet,
    TemplateLoadError,
    parse_root_templates,
    parse_templates,
)

__all__ = [
    "TemplateSet",
    "TemplateLoadError",
    "parse_root_templates",
    "parse_templates",
]
