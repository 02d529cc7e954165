from __future__ import annotations

from dataclasses import dataclass

from indexer.domain.entities.events import EventKind


@dataclass(frozen=True)
class ProcessEventOutput:
    kind: EventKind
    pool_key: str
    block_number: int
    log_index: int
    applied: bool
    records_written: int = 0
    reason: str | None = None


@dataclass(frozen=True)
class DispatchBatchOutput:
    results: list[ProcessEventOutput]

    @property
    def applied_count(self) -> int:
        return sum(1 for result in self.results if result.applied)

    @property
    def skipped_count(self) -> int:
        return len(self.results) - self.applied_count
