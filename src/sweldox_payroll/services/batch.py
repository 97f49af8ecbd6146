"""Batch run outcomes and summary."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID


class BatchItemStatus(str, Enum):
    """Outcome of one employee's attempt in a batch run.

    Every attempt starts PENDING and ends in exactly one terminal state;
    there are no retries within a run.
    """

    PENDING = "pending"
    CREATED = "created"
    SKIPPED_EXISTING = "skipped_existing"
    SKIPPED_FAILED = "skipped_failed"


TERMINAL_STATUSES = frozenset(
    {
        BatchItemStatus.CREATED,
        BatchItemStatus.SKIPPED_EXISTING,
        BatchItemStatus.SKIPPED_FAILED,
    }
)


@dataclass(frozen=True)
class BatchItemResult:
    """Result for one employee."""

    employee_id: int
    status: BatchItemStatus
    payroll_id: UUID | None = None
    reason: str | None = None

    @classmethod
    def created(cls, employee_id: int, payroll_id: UUID | None) -> BatchItemResult:
        return cls(employee_id, BatchItemStatus.CREATED, payroll_id=payroll_id)

    @classmethod
    def existing(cls, employee_id: int, reason: str) -> BatchItemResult:
        return cls(employee_id, BatchItemStatus.SKIPPED_EXISTING, reason=reason)

    @classmethod
    def failed(cls, employee_id: int, reason: str) -> BatchItemResult:
        return cls(employee_id, BatchItemStatus.SKIPPED_FAILED, reason=reason)


@dataclass
class BatchRunSummary:
    """Collected outcomes of a batch run.

    Only SKIPPED_FAILED items count against the skip budget; an existing
    payroll is an expected outcome of re-running a period.
    """

    period_start: date
    period_end: date
    pay_date: date
    results: list[BatchItemResult] = field(default_factory=list)
    cancelled: bool = False
    aborted: bool = False
    _counts: Counter[BatchItemStatus] = field(default_factory=Counter, init=False, repr=False)

    def __post_init__(self) -> None:
        self._counts.update(r.status for r in self.results)

    def record(self, result: BatchItemResult) -> None:
        if result.status not in TERMINAL_STATUSES:
            raise ValueError(f"Cannot record non-terminal status '{result.status.value}'")
        self.results.append(result)
        self._counts[result.status] += 1

    def _count(self, status: BatchItemStatus) -> int:
        return self._counts[status]

    @property
    def created_count(self) -> int:
        return self._count(BatchItemStatus.CREATED)

    @property
    def existing_count(self) -> int:
        return self._count(BatchItemStatus.SKIPPED_EXISTING)

    @property
    def failed_count(self) -> int:
        return self._count(BatchItemStatus.SKIPPED_FAILED)

    @property
    def skipped_count(self) -> int:
        return self.existing_count + self.failed_count

    @property
    def processed_count(self) -> int:
        return len(self.results)

    def exceeds_skip_limit(self, skip_limit: int) -> bool:
        return self.failed_count > skip_limit

    def skips(self) -> list[BatchItemResult]:
        """Skipped items with their reasons."""
        return [r for r in self.results if r.status != BatchItemStatus.CREATED]
