"""Expands inline tags in documentation sources before generation.

Inline tags look like ``{@name body}``; braces inside the body must be
balanced. Tags without a registered taglet, tags whose taglet returns
None, and unterminated tags are copied to the output unchanged.

Example:
    >>> pre = Preprocessor([ValueTaglet(registry)])
    >>> pre.process_text("Service {@value myapp.Service#NAME}.")
    'Service <code><a href="myapp/Service.html#NAME">health</a></code>.'
"""
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .logging import logger
from .taglets import SourcePosition, Tag, Taglet

TAG_OPEN = "{@"


def _scan(text: str, start: int) -> Optional[int]:
    """Index of the ``}`` closing the tag opened at ``start``, or None."""
    depth = 0
    for i in range(start, len(text)):
        c = text[i]
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def _position(text: str, index: int, file: Optional[Path]) -> SourcePosition:
    line = text.count("\n", 0, index) + 1
    column = index - (text.rfind("\n", 0, index) + 1) + 1
    return SourcePosition(file=file, line=line, column=column)


def find_tags(text: str, file: Optional[Path] = None) -> Iterator[Tuple[int, int, Tag]]:
    """Yield ``(start, end, tag)`` for every inline tag in ``text``.

    ``text[start:end]`` is the whole tag including its braces.
    """
    index = text.find(TAG_OPEN)
    while index != -1:
        end = _scan(text, index)
        if end is None:
            logger.warning("Unterminated inline tag. %s", _position(text, index, file))
            index = text.find(TAG_OPEN, index + len(TAG_OPEN))
            continue
        inner = text[index + len(TAG_OPEN):end]
        parts = inner.split(None, 1)
        name = parts[0] if parts else ""
        body = parts[1] if len(parts) > 1 else ""
        yield index, end + 1, Tag(name=name, text=body, position=_position(text, index, file))
        index = text.find(TAG_OPEN, end + 1)


class Preprocessor:
    """Replaces inline tags handled by ``taglets`` with their rendered HTML."""

    def __init__(self, taglets: Iterable[Taglet]):
        self._taglets: Dict[str, Taglet] = {t.name: t for t in taglets}

    def process_text(self, text: str, file: Optional[Path] = None) -> str:
        out = []
        last = 0
        for start, end, tag in find_tags(text, file):
            taglet = self._taglets.get(tag.name)
            if taglet is None:
                continue
            rendered = taglet.render(tag)
            if rendered is None:
                continue
            out.append(text[last:start])
            out.append(rendered)
            last = end
        out.append(text[last:])
        return "".join(out)

    def process_file(self, path: Path, output_dir: Optional[Path] = None, root: Optional[Path] = None) -> Path:
        """Expand the tags of ``path`` and write the result.

        Args:
            path: Source file (UTF-8)
            output_dir: Where to write the result (default: overwrite ``path``)
            root: Directory the output layout is relative to (default: the
                parent of ``path``)

        Returns:
            Path of the written file
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        result = self.process_text(text, path)

        if output_dir is None:
            target = path
        else:
            base = Path(root) if root is not None else path.parent
            target = Path(output_dir) / path.resolve().relative_to(base.resolve())
            target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result, encoding="utf-8")
        logger.info("Processed %s -> %s", path, target)
        return target
