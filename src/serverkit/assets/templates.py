"""
=============================================================================
TEMPLATE LOADER
=============================================================================

Loads a directory of files into one set of named HTML templates.

    templates/                       TemplateSet
    ├── index.html     ──parse──►    "index.html"  → <Template>
    ├── error.html                   "error.html"  → <Template>
    └── layout.html                  "layout.html" → <Template>

The file name IS the template name, so templates can include or extend
each other by the same names they have on disk:

    {% extends "layout.html" %}

The source can be anything that behaves like an importlib.resources
Traversable: a pathlib.Path on disk, importlib.resources.files() for
templates shipped inside a package, or a zipfile.Path.

Loading happens once, at startup. Every template is compiled as it is
read, and any failure (missing file, unreadable file, bad syntax, unknown
filter) aborts the whole load with TemplateLoadError so the server never
starts with half its templates. The finished set is never
modified again and can be shared by all request threads.
=============================================================================
"""

import logging
import os
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, Iterable, Union

from jinja2 import DictLoader, Environment, Template, TemplateError

logger = logging.getLogger("serverkit.templates")

FileSystem = Union[Traversable, str, os.PathLike]


class TemplateLoadError(Exception):
    """
    Raised when a template cannot be opened, read or parsed.

    The original exception is chained as __cause__.
    """

    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name


class TemplateSet:
    """
    An immutable collection of compiled templates, looked up by name.

    Each template receives the render argument as ``data``:

        {# index.html #}
        <ul>{% for item in data %}<li>{{ item }}</li>{% endfor %}</ul>

        templates.render("index.html", ["one", "two"])

    Every template is compiled up front; an invalid one raises
    TemplateLoadError here rather than on first render.
    """

    def __init__(self, sources: dict[str, str]):
        sources = dict(sources)
        env = _new_environment(sources)
        for name in sources:
            _compile(env, name)
        self._env = env
        self._names = tuple(sources)

    @classmethod
    def _from_environment(cls, env: Environment, names: Iterable[str]) -> "TemplateSet":
        """Wrap an environment whose templates are already compiled."""
        templates = cls.__new__(cls)
        templates._env = env
        templates._names = tuple(names)
        return templates

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def get_template(self, name: str) -> Template:
        """
        Raises:
            jinja2.TemplateNotFound: For names outside the set.
        """
        return self._env.get_template(name)

    def render(self, name: str, data: Any = None, **context: Any) -> str:
        return self.get_template(name).render(data=data, **context)

    def render_to(self, stream: Any, name: str, data: Any = None, **context: Any) -> None:
        """
        Render into anything with a write(str) method, e.g. a Response:

            res = new_html_response(200)
            templates.render_to(res, "index.html", items)
        """
        for chunk in self.get_template(name).generate(data=data, **context):
            stream.write(chunk)


def parse_root_templates(fs: FileSystem) -> TemplateSet:
    """
    Parse every entry at the root of ``fs`` as a template.

    Entries are taken in name order. Subdirectories are not skipped; like
    any other unreadable entry, they make the load fail.
    """
    root = _as_traversable(fs)
    try:
        names = sorted(entry.name for entry in root.iterdir())
    except OSError as e:
        raise TemplateLoadError(str(fs), f"cannot list directory ({e})") from e

    return parse_templates(root, names)


def parse_templates(fs: FileSystem, names: Iterable[str]) -> TemplateSet:
    """
    Parse and compile the named files in ``fs`` into one TemplateSet.

    Stops at the first failure; nothing is returned in that case.

    Raises:
        TemplateLoadError: If a file cannot be opened, read, decoded as
                           UTF-8, parsed or compiled (unknown filters and
                           tests are compile errors).
    """
    root = _as_traversable(fs)
    sources: dict[str, str] = {}
    # The loader reads from ``sources``, so each file is visible to the
    # environment as soon as it has been read.
    env = _new_environment(sources)

    for name in names:
        try:
            with (root / name).open("rb") as f:
                source = f.read().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(name, f"cannot read template ({e})") from e

        sources[name] = source
        _compile(env, name)
        logger.debug("Parsed template %s", name)

    logger.info("Loaded %d templates", len(sources))
    return TemplateSet._from_environment(env, sources)


def _new_environment(sources: dict[str, str]) -> Environment:
    # cache_size=-1: compiled templates are never evicted
    return Environment(
        loader=DictLoader(sources),
        autoescape=True,
        keep_trailing_newline=True,
        cache_size=-1,
    )


def _compile(env: Environment, name: str) -> None:
    try:
        env.get_template(name)
    except TemplateError as e:
        raise TemplateLoadError(name, f"invalid template ({e})") from e


def _as_traversable(fs: FileSystem) -> Traversable:
    if isinstance(fs, (str, os.PathLike)):
        return Path(fs)
    return fs
