"""Append-only sinks for one orchestration invocation."""

from __future__ import annotations

from collections.abc import Iterable

from siteagent.schemas import ActionResult, TraceEntry, TraceKind


class ExecutionTrace:
    """Ordered log of trace entries. Entries are never mutated or removed."""

    def __init__(self) -> None:
        self._entries: list[TraceEntry] = []

    def append(self, kind: TraceKind, message: str) -> TraceEntry:
        """Append a new entry and return it."""
        entry = TraceEntry(kind=kind, message=message)
        self._entries.append(entry)
        return entry

    def extend(self, entries: Iterable[TraceEntry]) -> None:
        """Append already-built entries, preserving their order."""
        self._entries.extend(entries)

    def info(self, message: str) -> TraceEntry:
        return self.append(TraceKind.INFO, message)

    def warning(self, message: str) -> TraceEntry:
        return self.append(TraceKind.WARNING, message)

    def error(self, message: str) -> TraceEntry:
        return self.append(TraceKind.ERROR, message)

    def entries(self) -> list[TraceEntry]:
        """Return a copy of all entries in emission order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class ResultAggregator:
    """Collects one ActionResult per dispatched action."""

    def __init__(self) -> None:
        self._results: list[ActionResult] = []

    def append(self, result: ActionResult) -> None:
        self._results.append(result)

    def results(self) -> list[ActionResult]:
        """Return a copy of all results in dispatch order."""
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)
