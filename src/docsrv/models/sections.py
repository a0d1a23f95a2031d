from __future__ import annotations

from pydantic import BaseModel, ConfigDict

DOCS_BASE = "/docs"
GENERAL_SECTION = "General"


class Document(BaseModel):
    """Single servable file listed in a section."""

    model_config = ConfigDict(frozen=True)

    name: str  # Base name, case preserved
    url: str  # "/docs/<slash path>"


class Section(BaseModel):
    """Group of documents shown together, plus optional README narrative."""

    model_config = ConfigDict(frozen=True)

    name: str  # "General" or root-relative directory path ("HR/2025")
    documents: tuple[Document, ...] = ()
    readme: str = ""  # Rendered HTML

    @property
    def has_content(self) -> bool:
        return bool(self.documents) or bool(self.readme)
