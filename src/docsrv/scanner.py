"""Document tree scanner.

Walks the document root once and groups files into sections:

* ``.pdf`` files directly under the root go to the "General" section.
* Every subdirectory (any depth) holding at least one ``.pdf`` or a
  ``README.md`` becomes its own section named by its root-relative path,
  e.g. ``"HR/2025"``. Sections list only their direct children; nothing is
  aggregated across directory levels.
* Anything else is invisible to the index.

Only an inaccessible root is fatal. Every other failure is reported to the
diagnostics sink and the affected entry is skipped.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

import structlog

from docsrv.errors import RootUnavailableError
from docsrv.models.sections import DOCS_BASE, GENERAL_SECTION, Document, Section
from docsrv.narrative import load_readme

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

log = structlog.get_logger()

_PDF_SUFFIX = ".pdf"
_README_NAME = "readme.md"


class DiagnosticsSink(Protocol):
    """Receives recoverable errors. Any structlog logger satisfies it."""

    def warning(self, event: str, *args: Any, **kw: Any) -> Any: ...


@dataclass
class _Bucket:
    """Per-directory accumulator filled during the walk."""

    documents: list[Document] = field(default_factory=list)
    readme: Path | None = None


def check_root(root: Path) -> None:
    """Raise ``RootUnavailableError`` unless ``root`` is a stat-able directory."""
    try:
        st = root.stat()
    except OSError as exc:
        raise RootUnavailableError(root, exc.strerror or str(exc)) from exc
    if not stat.S_ISDIR(st.st_mode):
        raise RootUnavailableError(root, "not a directory")


def _iter_files(root: Path, sink: DiagnosticsSink) -> Iterator[tuple[str, os.DirEntry[str]]]:
    """Yield ``(relative_dir, entry)`` for every file under ``root``.

    ``relative_dir`` uses forward slashes and is ``""`` for the root itself.
    Directory symlinks are not followed.
    """
    pending = [""]
    while pending:
        rel_dir = pending.pop()
        directory = root / rel_dir if rel_dir else root
        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as exc:
            if not rel_dir:
                raise RootUnavailableError(root, exc.strerror or str(exc)) from exc
            sink.warning("entry_access_error", path=str(directory), error=str(exc))
            continue

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                sink.warning("entry_access_error", path=entry.path, error=str(exc))
                continue

            if is_dir:
                pending.append(f"{rel_dir}/{entry.name}" if rel_dir else entry.name)
            elif is_file:
                yield rel_dir, entry


def _sorted_documents(documents: Iterable[Document]) -> tuple[Document, ...]:
    # Original name breaks ties between names differing only in case.
    return tuple(sorted(documents, key=lambda d: (d.name.lower(), d.name)))


def scan(
    root: Path | str,
    *,
    docs_base: str = DOCS_BASE,
    general_label: str = GENERAL_SECTION,
    sink: DiagnosticsSink | None = None,
) -> tuple[Section, ...]:
    """Scan ``root`` and return its sections, General first, then by path."""
    root = Path(root)
    sink = sink if sink is not None else log
    check_root(root)

    general: list[Document] = []
    buckets: dict[str, _Bucket] = {}

    for rel_dir, entry in _iter_files(root, sink):
        lower_name = entry.name.lower()

        if not rel_dir:
            if lower_name.endswith(_PDF_SUFFIX):
                general.append(Document(name=entry.name, url=f"{docs_base}/{entry.name}"))
            continue

        bucket = buckets.get(rel_dir)
        if bucket is None:
            bucket = buckets[rel_dir] = _Bucket()

        if lower_name.endswith(_PDF_SUFFIX):
            bucket.documents.append(
                Document(name=entry.name, url=f"{docs_base}/{rel_dir}/{entry.name}")
            )
        elif lower_name == _README_NAME:
            # Several case variants: the smallest name wins.
            if bucket.readme is None or entry.name < bucket.readme.name:
                bucket.readme = Path(entry.path)

    sections: list[Section] = []
    if general:
        sections.append(Section(name=general_label, documents=_sorted_documents(general)))

    for rel_dir in sorted(buckets):
        bucket = buckets[rel_dir]
        readme = ""
        if bucket.readme is not None:
            readme = load_readme(bucket.readme, rel_dir, docs_base=docs_base, sink=sink)
        section = Section(
            name=rel_dir, documents=_sorted_documents(bucket.documents), readme=readme
        )
        if section.has_content:
            sections.append(section)

    return tuple(sections)
