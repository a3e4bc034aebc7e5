"""Coverage statistics for a single patient summary section.

Entries added to a section are classified as unusable (no valid code),
meaningful-use coded (at least one valid code from a system on the
section's allow-list), or alien coded (valid codes, but only from systems
off the allow-list). An entry with both MU and alien codes counts as MU.
"""

from __future__ import annotations

import sys
from collections import Counter
from typing import Iterable

from mucoverage.aggregate import aggregate_by_description
from mucoverage.models import Classification, Entry
from mucoverage.validation import any_valid


def classify_codes(
    codes: dict[str, list[str]], allow_list: Iterable[str], strict: bool = False
) -> tuple[Classification, set[str], set[str], list[str]]:
    """Classify a codes map against an allow-list.

    Returns (classification, mu_systems, alien_systems, rejected_systems).
    The two sets hold the systems that had at least one valid value;
    rejected_systems lists, in order, the systems that had none. Each
    system's values are checked once.
    """
    allowed = set(allow_list)
    mu_systems: set[str] = set()
    alien_systems: set[str] = set()
    rejected_systems: list[str] = []
    for system, values in codes.items():
        if not any_valid(system, values, strict=strict):
            rejected_systems.append(system)
            continue
        if system in allowed:
            mu_systems.add(system)
        else:
            alien_systems.add(system)

    had_any_valid_code = bool(mu_systems or alien_systems)
    had_mu_code = bool(mu_systems)
    if not had_any_valid_code:
        return Classification.UNUSABLE, mu_systems, alien_systems, rejected_systems
    if had_mu_code:
        return Classification.MEANINGFUL_USE, mu_systems, alien_systems, rejected_systems
    return Classification.ALIEN, mu_systems, alien_systems, rejected_systems


class PatientSummarySection:
    """Classified entries and code-system usage for one named section."""

    def __init__(
        self,
        name: str,
        allow_list: Iterable[str],
        strict: bool = False,
        verbose: bool = False,
    ):
        self.name = name
        self.allow_list: tuple[str, ...] = tuple(allow_list)
        self.strict = strict
        self.verbose = verbose
        self.all_entries: list[Entry] = []
        self.unusable_entries: list[Entry] = []
        self.mu_entries: list[Entry] = []
        self.alien_entries: list[Entry] = []
        self.mu_systems_seen: set[str] = set()
        self.alien_systems_seen: set[str] = set()
        self.invalid_code_systems: Counter[str] = Counter()

    def __repr__(self) -> str:
        return (
            f"PatientSummarySection({self.name!r}, entries={self.num_entries}, "
            f"mu={self.num_mu_entries}, alien={self.num_alien_entries}, "
            f"unusable={self.num_unusable_entries})"
        )

    # --- ingest ---

    def add_entry(self, entry: Entry) -> Classification:
        """Classify entry into one bucket and record the code systems it used."""
        classification, mu_systems, alien_systems, rejected = classify_codes(
            entry.codes, self.allow_list, strict=self.strict
        )
        for system in rejected:
            self.invalid_code_systems[system] += 1
            if self.verbose:
                print(
                    f"  {self.name}: no valid {system} code for '{entry.description}'",
                    file=sys.stderr,
                )
        self.mu_systems_seen |= mu_systems
        self.alien_systems_seen |= alien_systems

        if classification is Classification.UNUSABLE:
            self.unusable_entries.append(entry)
        elif classification is Classification.MEANINGFUL_USE:
            self.mu_entries.append(entry)
        else:
            self.alien_entries.append(entry)
        self.all_entries.append(entry)
        return classification

    def add_entries(self, entries: Iterable[Entry]) -> None:
        for entry in entries:
            self.add_entry(entry)

    def merge(self, other: PatientSummarySection) -> None:
        """Append other's entries after ours and union the seen code systems.

        Entries are not reclassified; other is assumed to share our allow-list.
        """
        self.all_entries.extend(other.all_entries)
        self.unusable_entries.extend(other.unusable_entries)
        self.mu_entries.extend(other.mu_entries)
        self.alien_entries.extend(other.alien_entries)
        self.mu_systems_seen |= other.mu_systems_seen
        self.alien_systems_seen |= other.alien_systems_seen
        self.invalid_code_systems.update(other.invalid_code_systems)

    # --- counts ---

    @property
    def num_entries(self) -> int:
        return self.num_unusable_entries + self.num_coded_entries

    @property
    def num_unusable_entries(self) -> int:
        return len(self.unusable_entries)

    @property
    def num_mu_entries(self) -> int:
        return len(self.mu_entries)

    @property
    def num_alien_entries(self) -> int:
        return len(self.alien_entries)

    @property
    def num_coded_entries(self) -> int:
        return self.num_mu_entries + self.num_alien_entries

    # --- reports ---

    def summary(self) -> dict:
        """Return entry counts and code-system usage keyed by section name."""
        return {
            self.name: {
                "entries": self.num_entries,
                "mu code systems": list(self.allow_list),
                "coded entries": self.num_coded_entries,
                "mu coded entries": self.num_mu_entries,
                "mu code systems in use": sorted(self.mu_systems_seen),
                "non-mu coded entries": self.num_alien_entries,
                "non-mu code systems in use": sorted(self.alien_systems_seen),
            }
        }

    def unique_mu_entries(self) -> dict:
        """Return MU entries merged by description, or {} if there are none."""
        if not self.mu_entries:
            return {}
        return self._listing(self.mu_entries)

    def unique_non_mu_entries(self) -> dict:
        """Return unusable then alien entries merged by description.

        An unusable and an alien entry with the same description end up in
        one aggregate; only the alien entry contributes codes to it.
        """
        if not self.unusable_entries and not self.alien_entries:
            return {}
        return self._listing(self.unusable_entries + self.alien_entries)

    def _listing(self, entries: list[Entry]) -> dict:
        aggregates = aggregate_by_description(entries, keep=self._has_valid_code)
        return {
            self.name: {
                "mucodesystems": list(self.allow_list),
                "entries": {desc: agg.listing() for desc, agg in aggregates.items()},
            }
        }

    def _has_valid_code(self, system: str, values: list[str]) -> bool:
        return any_valid(system, values, strict=self.strict)
