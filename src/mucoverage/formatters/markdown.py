"""Markdown output formatter for coverage statistics."""

from mucoverage.aggregate import AggregatedEntry
from mucoverage.report import AnalysisResults, PatientSummaryReport
from mucoverage.section import PatientSummarySection


class MarkdownWriter:
    """Builds markdown output incrementally."""

    def __init__(self):
        self._lines: list[str] = []

    def w(self, line: str = "") -> None:
        self._lines.append(line)

    def heading(self, text: str, level: int = 2) -> None:
        self.w(f"{'#' * level} {text}")
        self.w()

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        self.w("| " + " | ".join(headers) + " |")
        self.w("|" + "|".join("---" for _ in headers) + "|")
        for row in rows:
            self.w("| " + " | ".join(str(c) for c in row) + " |")
        self.w()

    def text(self) -> str:
        return "\n".join(self._lines)

    def write_to_file(self, filepath: str) -> int:
        content = self.text()
        with open(filepath, "w") as f:
            f.write(content)
        return len(self._lines)


def _systems(systems) -> str:
    return ", ".join(sorted(systems)) or "none"


def format_section(section: PatientSummarySection) -> str:
    """Format one section's counts and code-system usage."""
    md = MarkdownWriter()
    md.heading(f"Section {section.name}", level=3)
    md.w(f"- MU code systems: {', '.join(section.allow_list) or 'none'}")
    md.w(f"- Entries: {section.num_entries}, {section.num_coded_entries} coded")
    if section.num_alien_entries > 0:
        md.w(f"- Aliens: {section.num_alien_entries} ({_systems(section.alien_systems_seen)})")
    if section.num_mu_entries > 0:
        line = f"- MU: {section.num_mu_entries} ({_systems(section.mu_systems_seen)})"
        if section.alien_systems_seen:
            line += f" and {_systems(section.alien_systems_seen)}"
        md.w(line)
    return md.text()


def format_aggregate(aggregate: AggregatedEntry) -> str:
    """Format an aggregate: description, count, and codes per system."""
    md = MarkdownWriter()
    md.w(f"**{aggregate.description}** (count {aggregate.count})")
    for system, values in aggregate.codes.items():
        md.w(f"- {system}: {', '.join(sorted(values))}")
    return md.text()


def format_report(report: PatientSummaryReport, results: AnalysisResults | None = None) -> str:
    """Format a report's sections as a summary table, plus the tally if given."""
    md = MarkdownWriter()
    md.heading("Meaningful Use Coverage", level=1)

    rows = []
    for section in report.sections.values():
        rows.append([
            section.name,
            section.num_entries,
            section.num_coded_entries,
            section.num_mu_entries,
            section.num_alien_entries,
            _systems(section.mu_systems_seen),
            _systems(section.alien_systems_seen),
        ])
    md.heading("Sections")
    md.table(
        ["Section", "Entries", "Coded", "MU", "Non-MU", "MU Systems", "Non-MU Systems"],
        rows,
    )

    if results is not None:
        md.heading("Documents")
        md.w(f"*{results.number_files} documents analyzed, "
             f"{results.file_validation} passed validation.*")
        md.w()
        md.table(
            ["Section", "Present", "Coded", "MU Compliant"],
            [
                [name, results.present[name], results.coded[name], results.mu_compliant[name]]
                for name in results.section_names
            ],
        )

    return md.text()
