"""Integration test fixtures.

Provides a DocRepository wired from Settings against the shared on-disk
tree (``docs_root`` from tests/conftest.py).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docsrv.config import Settings

if TYPE_CHECKING:
    from pathlib import Path

    from docsrv.repository import DocRepository


@pytest.fixture()
def repo(docs_root: Path) -> DocRepository:
    """Repository with a long TTL, built the way the service builds it."""
    return Settings(docs_dir=str(docs_root), cache_ttl="1h").build_repository()
