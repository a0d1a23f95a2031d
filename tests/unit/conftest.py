"""Unit-specific fixtures (test doubles for the clock and diagnostics sink)."""

from __future__ import annotations

from typing import Any

import pytest


class RecordingSink:
    """Diagnostics sink that keeps every reported event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def warning(self, event: str, *args: Any, **kw: Any) -> None:
        self.events.append((event, kw))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
