from __future__ import annotations

from docsrv.models.sections import DOCS_BASE, GENERAL_SECTION, Document, Section

__all__ = [
    "DOCS_BASE",
    "GENERAL_SECTION",
    "Document",
    "Section",
]
