"""Inline tag handlers.

RestTaglet ({@doc.restlet ...}) embeds live XML responses of the REST
service into the documentation. ValueTaglet ({@value ...}) renders a
constant the way documentation generators do, minus the quotation marks
around string values.

A tag handler exposes ``name`` and ``render(tag)``. Returning None means
"no output for this tag".
"""
import html
import sys
from dataclasses import dataclass
from html.entities import codepoint2name
from pathlib import Path
from typing import Callable, Optional, Protocol

from .config import Settings, load_settings
from .constants import ConstantRegistry, default_registry, split_path, to_text
from .errors import StructuredError
from .executor import RestExecutor
from .logging import logger
from .parameters import parse

STATUS_EXCEPTION = -1


@dataclass(frozen=True)
class SourcePosition:
    file: Optional[Path]
    line: int
    column: int

    def __str__(self) -> str:
        path = self.file.resolve() if self.file is not None else "<string>"
        return f"File: {path}, line: {self.line}, column: {self.column}"


@dataclass(frozen=True)
class Tag:
    name: str
    text: str
    position: SourcePosition


class Taglet(Protocol):
    name: str

    def render(self, tag: Tag) -> Optional[str]:
        """Return the HTML replacing ``tag``, or None to leave it as is."""
        ...


def escape_html4(text: str) -> str:
    """Escape ``text`` for HTML 4.

    Markup characters and both quotation marks are escaped; characters
    outside ASCII become named entities where HTML 4 has one, numeric
    references otherwise.
    """
    out = []
    for c in html.escape(text, quote=True):
        code = ord(c)
        if code < 0x80:
            out.append(c)
        elif code in codepoint2name:
            out.append(f"&{codepoint2name[code]};")
        else:
            out.append(f"&#{code};")
    return "".join(out)


class RestTaglet:
    """Retrieves example XML from the REST service for {@doc.restlet ...}.

    Any failure aborts the whole process with exit status -1, because a
    documentation build would otherwise silently go on without the
    content. With ``abort_on_error=False`` an error marker is returned
    in place of the content instead.

    Args:
        settings: Configuration (default: read from the environment per tag)
        registry: Constants available to attribute values
        session_factory: Creates the HTTP session of each executor
        abort_on_error: Exit the process on failure (default: True)
    """
    name = "doc.restlet"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: ConstantRegistry = default_registry,
        session_factory: Optional[Callable[[], object]] = None,
        abort_on_error: bool = True
    ):
        self._settings = settings
        self._registry = registry
        self._session_factory = session_factory
        self.abort_on_error = abort_on_error

    def _create_executor(self) -> RestExecutor:
        settings = self._settings if self._settings is not None else load_settings()
        session = self._session_factory() if self._session_factory is not None else None
        return RestExecutor(settings, session=session)

    def retrieve_content(self, text: str) -> Optional[str]:
        with self._create_executor() as executor:
            spec = parse(text, self._registry)
            if spec is None:
                logger.warning("No parameters in tag: %s", text)
                return None
            return executor.retrieve_content(spec)

    def render(self, tag: Tag) -> Optional[str]:
        try:
            content = self.retrieve_content(tag.text)
        except Exception as ex:
            # the tag position may be off by a few lines, but it gives a hint where to look
            logger.error("Aborting on exception. %s", tag.position, exc_info=ex)
            if self.abort_on_error:
                sys.exit(STATUS_EXCEPTION)
            return f'<pre class="restlet-error">{escape_html4(str(ex))}</pre>'

        if content is None or not content.strip():
            logger.warning("Failed to retrieve content.")
            return None
        return f"<pre>{escape_html4(content)}</pre>"


def strip_value_quotes(value: str) -> str:
    """Remove the quotation marks around a rendered value: ``a>"value"</a`` -> ``a>value</a``."""
    return value.replace('>"', ">").replace('"<', "<")


def render_value(path: str, value: object) -> str:
    """Default rendering of a constant reference, linking to its declaration."""
    type_path, member = split_path(path)
    href = f"{type_path.replace('.', '/')}.html#{member}"
    text = escape_html4(to_text(value))
    if isinstance(value, str):
        text = f'"{text}"'
    return f'<code><a href="{escape_html4(href)}">{text}</a></code>'


class ValueTaglet:
    """{@value package.Type#CONSTANT} without the quotes around strings.

    Unresolvable references are logged with their position and the tag is
    left in place.
    """
    name = "value"

    def __init__(self, registry: ConstantRegistry = default_registry):
        self._registry = registry

    def render(self, tag: Tag) -> Optional[str]:
        path = tag.text.strip()
        if not path:
            logger.warning("No constant given for value tag. %s", tag.position)
            return None
        try:
            value = self._registry.lookup(path)
        except StructuredError as ex:
            logger.error("Failed to resolve value %s. %s", path, tag.position, exc_info=ex)
            return None
        return strip_value_quotes(render_value(path, value))
