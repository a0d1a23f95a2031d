"""Error envelope shared by the core and its callers.

Only conditions that must reach a caller are modelled as exceptions.
Per-entry walk failures, unreadable READMEs and markup render failures are
recovered where they happen and reported as structured log events
(``entry_access_error``, ``narrative_read_error``, ``narrative_render_error``).
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class ErrorCode(StrEnum):
    ROOT_UNAVAILABLE = "ROOT_UNAVAILABLE"


class DocsrvError(Exception):
    """Base error carrying a machine-readable code."""

    def __init__(self, code: ErrorCode, message: str, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code.value,
            "message": self.message,
            "recoverable": self.recoverable,
        }


class RootUnavailableError(DocsrvError):
    """The document root cannot be statted or is not a directory."""

    def __init__(self, root: Path | str, reason: str) -> None:
        super().__init__(
            ErrorCode.ROOT_UNAVAILABLE,
            f"could not stat docs directory {str(root)!r}: {reason}",
            # The next refresh may find the directory again.
            recoverable=True,
        )
        self.root = Path(root)
