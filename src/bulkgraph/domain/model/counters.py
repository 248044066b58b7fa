"""Per-task write counters and their run-level aggregate."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from bulkgraph.domain.model.enums import WriteCounter


@dataclass(slots=True)
class WriteCounters:
    """Accumulates :class:`WriteCounter` values for one task attempt.

    A fresh instance belongs to exactly one task; the orchestrator folds it
    into the run aggregate with :meth:`merge` once the task completes.
    """

    values: Counter[WriteCounter] = field(default_factory=Counter[WriteCounter])

    def increment(self, counter: WriteCounter, amount: int = 1) -> None:
        self.values[counter] += amount

    def __getitem__(self, counter: WriteCounter) -> int:
        return self.values[counter]

    def merge(self, other: WriteCounters) -> None:
        self.values.update(other.values)

    def as_dict(self) -> dict[str, int]:
        """Return every counter, including zeros, keyed by its name."""

        return {counter.value: self.values[counter] for counter in WriteCounter}
