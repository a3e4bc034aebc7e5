"""Merge entries that share a description into counted aggregates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from mucoverage.models import Entry

# Decides whether a (code_system, values) pair is carried into an aggregate.
CodeFilter = Callable[[str, list[str]], bool]


class DescriptionMismatch(ValueError):
    """Raised when aggregates with different descriptions are merged."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Only entries with the same description can be merged: "
            f"{expected!r} != {actual!r}"
        )


@dataclass
class AggregatedEntry:
    """One or more entries with the same description, counted and code-unioned."""

    description: str
    count: int = 1
    codes: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_entry(
        cls, entry: Entry | AggregatedEntry, keep: CodeFilter | None = None
    ) -> AggregatedEntry:
        """Snapshot an entry. The codes map and its value lists are copied.

        If keep is given, only the code systems it accepts are copied.
        """
        codes = {}
        for system, values in entry.codes.items():
            values = list(values)
            if keep is None or keep(system, values):
                codes[system] = values
        return cls(
            description=entry.description,
            count=getattr(entry, "count", 1),
            codes=codes,
        )

    def merge(self, other: AggregatedEntry) -> None:
        """Fold other into this aggregate.

        Counts are summed and each code system's values become the union of
        both sides. Value order after a union is not defined.
        """
        if other.description != self.description:
            raise DescriptionMismatch(self.description, other.description)
        self.count += other.count
        for system, values in other.codes.items():
            existing = self.codes.get(system, [])
            self.codes[system] = list(set(existing).union(values))

    def has_codes(self) -> bool:
        return len(self.codes) > 0

    def listing(self) -> dict:
        """Return the listing record: count, plus sorted codes when present."""
        if self.has_codes():
            return {
                "count": self.count,
                "codes": {system: sorted(values) for system, values in self.codes.items()},
            }
        return {"count": self.count}


def aggregate_by_description(
    entries: Iterable[Entry | AggregatedEntry],
    keep: CodeFilter | None = None,
) -> dict[str, AggregatedEntry]:
    """Fold entries into a description -> AggregatedEntry map.

    The first occurrence of a description creates the aggregate; later ones
    are merged into it. Keys keep first-seen order.
    """
    by_description: dict[str, AggregatedEntry] = {}
    for entry in entries:
        aggregate = AggregatedEntry.from_entry(entry, keep=keep)
        if aggregate.description in by_description:
            by_description[aggregate.description].merge(aggregate)
        else:
            by_description[aggregate.description] = aggregate
    return by_description
