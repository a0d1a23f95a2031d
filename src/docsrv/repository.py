"""TTL-cached access to the scanned section list.

The cache is a single immutable snapshot ``(stamp, sections, cached_at)``
that is only ever replaced as a whole. Readers load the reference without
locking; refreshes are serialized by one lock and re-validate freshness
after acquiring it (double-checked), so at most one scan runs at a time and
a burst of callers on an expired cache triggers exactly one scan.

A failed refresh leaves the previous snapshot in place and propagates the
error to the caller that attempted it. The next caller retries.
"""

from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from docsrv.errors import RootUnavailableError
from docsrv.models.sections import DOCS_BASE, GENERAL_SECTION
from docsrv.scanner import check_root, scan

if TYPE_CHECKING:
    from collections.abc import Callable

    from docsrv.models.sections import Section
    from docsrv.scanner import DiagnosticsSink

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class _Snapshot:
    stamp: float  # clock() reading taken after the scan finished
    sections: tuple[Section, ...]
    cached_at: datetime


class DocRepository:
    """Section list for one document root, memoized for ``ttl``."""

    def __init__(
        self,
        root: Path | str,
        ttl: timedelta | float,
        *,
        docs_base: str = DOCS_BASE,
        general_label: str = GENERAL_SECTION,
        clock: Callable[[], float] = time.monotonic,
        sink: DiagnosticsSink | None = None,
    ) -> None:
        ttl_seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        if ttl_seconds < 0:
            raise ValueError(f"ttl must not be negative, got {ttl!r}")

        self._root = Path(root)
        self._ttl = ttl_seconds
        self._docs_base = docs_base
        self._general_label = general_label
        self._clock = clock
        self._sink = sink
        self._lock = threading.Lock()
        self._snapshot: _Snapshot | None = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self._ttl)

    @property
    def cached_at(self) -> datetime | None:
        """Wall-clock time of the last successful refresh, if any."""
        snapshot = self._snapshot
        return snapshot.cached_at if snapshot is not None else None

    def _is_fresh(self, snapshot: _Snapshot | None) -> bool:
        return snapshot is not None and self._clock() - snapshot.stamp < self._ttl

    def get_sections(self) -> tuple[Section, ...]:
        """Return the current sections, rescanning if the cache has expired.

        The returned tuple is shared between callers and must not be mutated.
        Raises ``RootUnavailableError`` only when a refresh is attempted and
        the root cannot be statted.
        """
        snapshot = self._snapshot
        if self._is_fresh(snapshot):
            return snapshot.sections  # type: ignore[union-attr]

        with self._lock:
            # Another caller may have refreshed while we waited for the lock.
            snapshot = self._snapshot
            if self._is_fresh(snapshot):
                return snapshot.sections  # type: ignore[union-attr]
            return self._refresh()

    async def get_sections_async(self) -> tuple[Section, ...]:
        """``get_sections`` for async callers; the scan runs in a worker thread."""
        return await asyncio.to_thread(self.get_sections)

    def is_healthy(self) -> bool:
        """Return True if the root is currently reachable. Does not touch the cache."""
        try:
            check_root(self._root)
        except RootUnavailableError:
            return False
        return True

    def _refresh(self) -> tuple[Section, ...]:
        """Scan and publish a new snapshot. Must be called with ``_lock`` held."""
        started = time.perf_counter()
        try:
            sections = scan(
                self._root,
                docs_base=self._docs_base,
                general_label=self._general_label,
                sink=self._sink,
            )
        except RootUnavailableError as exc:
            log.warning(
                "sections_refresh_failed",
                root=str(self._root),
                error=exc.message,
                cached=self._snapshot is not None,
            )
            raise

        self._snapshot = _Snapshot(
            stamp=self._clock(),
            sections=sections,
            cached_at=datetime.now(UTC),
        )
        log.info(
            "sections_refreshed",
            root=str(self._root),
            sections=len(sections),
            documents=sum(len(s.documents) for s in sections),
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return sections
