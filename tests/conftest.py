"""Shared fixtures: on-disk document trees."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import structlog

if TYPE_CHECKING:
    from pathlib import Path


def write(path: Path, content: bytes | str = b"%PDF-1.4") -> Path:
    """Create ``path`` (and parents) with ``content``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    return path


@pytest.fixture()
def write_file():
    """Return the ``write(path, content)`` helper."""
    return write


@pytest.fixture()
def docs_root(tmp_path: Path) -> Path:
    """root.pdf, HR/{hiring.pdf,README.md}, HR/2025/{plan.pdf,README.md}."""
    root = tmp_path / "docs"
    write(root / "root.pdf")
    write(root / "HR" / "hiring.pdf")
    write(root / "HR" / "README.md", "# HR Section")
    write(root / "HR" / "2025" / "plan.pdf")
    write(root / "HR" / "2025" / "README.md", "# HR 2025")
    return root


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()
