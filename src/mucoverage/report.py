"""Per-document patient summary reports and cross-document tallies.

A PatientSummaryReport holds one PatientSummarySection per configured
section. AnalysisResults counts, over many documents, how often each
section was present, coded, and meaningful-use compliant.
"""

from __future__ import annotations

from typing import Iterable

from mucoverage.config import SectionConfig, default_section_configs, get_section_configs
from mucoverage.models import Entry
from mucoverage.section import PatientSummarySection


class PatientSummaryReport:
    """The coverage sections of a single patient summary document."""

    def __init__(
        self,
        sections_config: list[SectionConfig] | None = None,
        strict: bool = False,
        verbose: bool = False,
    ):
        if sections_config is None:
            sections_config = default_section_configs()
        self.sections: dict[str, PatientSummarySection] = {
            sc.name: PatientSummarySection(
                sc.name, sc.mu_code_systems, strict=strict, verbose=verbose
            )
            for sc in sections_config
        }

    @classmethod
    def from_config(cls, config: dict, verbose: bool = False) -> PatientSummaryReport:
        """Build a report from a loaded config dict (see config.load_config)."""
        return cls(
            get_section_configs(config),
            strict=bool(config.get("validation", {}).get("strict", False)),
            verbose=verbose,
        )

    def section(self, name: str) -> PatientSummarySection:
        """Return the named section; raises KeyError if it isn't configured."""
        if name not in self.sections:
            raise KeyError(f"Unknown section '{name}'. Configured: {', '.join(self.sections)}")
        return self.sections[name]

    def add_entry(self, section_name: str, entry: Entry) -> None:
        self.section(section_name).add_entry(entry)

    def add_entries(self, section_name: str, entries: Iterable[Entry]) -> None:
        self.section(section_name).add_entries(entries)

    def merge(self, other: PatientSummaryReport) -> None:
        """Merge other's sections into ours, adopting sections we don't have."""
        for name, other_section in other.sections.items():
            if name in self.sections:
                self.sections[name].merge(other_section)
            else:
                adopted = PatientSummarySection(
                    name,
                    other_section.allow_list,
                    strict=other_section.strict,
                    verbose=other_section.verbose,
                )
                adopted.merge(other_section)
                self.sections[name] = adopted

    def summary(self) -> dict:
        """Return the summary of every section, keyed by section name."""
        results: dict = {}
        for section in self.sections.values():
            results.update(section.summary())
        return results

    def unique_mu_entries(self) -> dict:
        """Return deduplicated MU listings for sections that have MU entries."""
        results: dict = {}
        for section in self.sections.values():
            results.update(section.unique_mu_entries())
        return results

    def unique_non_mu_entries(self) -> dict:
        """Return deduplicated non-MU listings for sections that have any."""
        results: dict = {}
        for section in self.sections.values():
            results.update(section.unique_non_mu_entries())
        return results


class AnalysisResults:
    """Counts of documents with each section present, coded, and MU compliant."""

    def __init__(self, section_names: Iterable[str]):
        self.section_names: list[str] = list(section_names)
        self.number_files = 0
        self.file_validation = 0
        self.present: dict[str, int] = dict.fromkeys(self.section_names, 0)
        self.coded: dict[str, int] = dict.fromkeys(self.section_names, 0)
        self.mu_compliant: dict[str, int] = dict.fromkeys(self.section_names, 0)

    @classmethod
    def for_report(cls, report: PatientSummaryReport) -> AnalysisResults:
        return cls(report.sections.keys())

    def record(self, report: PatientSummaryReport) -> None:
        """Count one document's report. Sections not being tallied are ignored."""
        self.number_files += 1
        for name, section in report.sections.items():
            if name not in self.present:
                continue
            if section.all_entries:
                self.present[name] += 1
            if section.num_coded_entries > 0:
                self.coded[name] += 1
            if section.num_mu_entries > 0:
                self.mu_compliant[name] += 1

    def record_validation(self, passed: bool) -> None:
        """Count a document that passed (or failed) external schema validation."""
        if passed:
            self.file_validation += 1

    def as_dict(self) -> dict:
        """Return the tally as a flat dict, e.g. {"conditions_coded": 3, ...}."""
        results = {
            "number_files": self.number_files,
            "file_validation": self.file_validation,
        }
        for name in self.section_names:
            results[f"{name}_present"] = self.present[name]
            results[f"{name}_coded"] = self.coded[name]
            results[f"{name}_mu_compliant"] = self.mu_compliant[name]
        return results
