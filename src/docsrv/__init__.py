"""Hierarchical section index for a directory of PDF documents."""

from __future__ import annotations

from docsrv.errors import DocsrvError, ErrorCode, RootUnavailableError
from docsrv.models import DOCS_BASE, GENERAL_SECTION, Document, Section
from docsrv.narrative import render_readme
from docsrv.repository import DocRepository
from docsrv.scanner import scan

__all__ = [
    "DOCS_BASE",
    "GENERAL_SECTION",
    "DocRepository",
    "Document",
    "DocsrvError",
    "ErrorCode",
    "RootUnavailableError",
    "Section",
    "render_readme",
    "scan",
]
