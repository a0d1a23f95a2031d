"""README narrative rendering.

A directory's ``README.md`` is parsed as CommonMark and rendered to HTML.
Relative image and link destinations are rebased onto the document-serving
URL space so that ``![](img.png)`` in ``HR/README.md`` resolves to
``/docs/HR/img.png``.

Rendering never raises: any failure degrades to the escaped raw text.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

import structlog
from markdown_it import MarkdownIt

from docsrv.models.sections import DOCS_BASE

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

    from markdown_it.token import Token

    from docsrv.scanner import DiagnosticsSink

log = structlog.get_logger()

# Token type -> attribute holding its destination reference.
_DESTINATION_ATTRS: dict[str, str] = {
    "image": "src",
    "link_open": "href",
}

_ABSOLUTE_SCHEMES = ("http://", "https://")


# Raw HTML is escaped rather than passed through: READMEs are untrusted.
_MD = MarkdownIt("commonmark", {"html": False})


def is_relative_reference(reference: str) -> bool:
    """Return True if ``reference`` is neither an absolute path nor an http(s) URL."""
    if reference.lower().startswith(_ABSOLUTE_SCHEMES):
        return False
    return not reference.startswith("/")


def rebase_reference(reference: str, section_path: str, docs_base: str = DOCS_BASE) -> str:
    if is_relative_reference(reference):
        return f"{docs_base}/{section_path}/{reference}"
    return reference


def _walk(tokens: Sequence[Token]) -> Iterator[Token]:
    for token in tokens:
        yield token
        if token.children:
            yield from _walk(token.children)


def _render(content: bytes, section_path: str, docs_base: str) -> str:
    text = content.decode("utf-8", errors="replace")
    env: dict[str, object] = {}
    tokens = _MD.parse(text, env)

    for token in _walk(tokens):
        attr = _DESTINATION_ATTRS.get(token.type)
        if attr is None:
            continue
        destination = token.attrGet(attr)
        if destination is None:
            continue
        token.attrSet(attr, rebase_reference(str(destination), section_path, docs_base))

    return _MD.renderer.render(tokens, _MD.options, env)


def _escaped(content: bytes) -> str:
    return html.escape(content.decode("utf-8", errors="replace"))


def render_readme(content: bytes, section_path: str, *, docs_base: str = DOCS_BASE) -> str:
    """Render README markup to HTML with relative references rebased.

    Returns the HTML-escaped raw input if parsing or rendering fails.
    """
    try:
        return _render(content, section_path, docs_base)
    except Exception:
        return _escaped(content)


def load_readme(
    path: Path,
    section_path: str,
    *,
    docs_base: str = DOCS_BASE,
    sink: DiagnosticsSink | None = None,
) -> str:
    """Read and render the README at ``path``.

    An unreadable file yields ``""``; a render failure yields escaped text.
    Both are reported to ``sink`` and never raised.
    """
    sink = sink if sink is not None else log
    try:
        content = path.read_bytes()
    except OSError as exc:
        sink.warning("narrative_read_error", path=str(path), section=section_path, error=str(exc))
        return ""

    try:
        return _render(content, section_path, docs_base)
    except Exception as exc:
        sink.warning(
            "narrative_render_error", path=str(path), section=section_path, error=repr(exc)
        )
        return _escaped(content)
