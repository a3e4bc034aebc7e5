"""Tests for mucoverage.formatters.markdown."""

from mucoverage.aggregate import AggregatedEntry
from mucoverage.config import SectionConfig
from mucoverage.formatters.markdown import (
    MarkdownWriter,
    format_aggregate,
    format_report,
    format_section,
)
from mucoverage.models import Entry
from mucoverage.report import AnalysisResults, PatientSummaryReport
from mucoverage.section import PatientSummarySection


class TestMarkdownWriter:
    def test_table(self):
        md = MarkdownWriter()
        md.table(["A", "B"], [[1, 2]])
        assert md.text() == "| A | B |\n|---|---|\n| 1 | 2 |\n"

    def test_write_to_file(self, tmp_path):
        md = MarkdownWriter()
        md.heading("Title", level=1)
        out = tmp_path / "out.md"
        assert md.write_to_file(str(out)) == 2
        assert out.read_text() == "# Title\n"


class TestFormatSection:
    def test_counts_and_systems(self):
        section = PatientSummarySection("conditions", ["ICD-9-CM"])
        section.add_entry(Entry(description="Fever", codes={"ICD-9-CM": ["780"], "LOINC": ["1"]}))
        section.add_entry(Entry(description="Rash", codes={"LOCAL": ["R"]}))
        text = format_section(section)
        assert "### Section conditions" in text
        assert "- MU code systems: ICD-9-CM" in text
        assert "- Entries: 2, 2 coded" in text
        assert "- Aliens: 1 (LOCAL, LOINC)" in text
        assert "- MU: 1 (ICD-9-CM) and LOCAL, LOINC" in text

    def test_empty_section(self):
        text = format_section(PatientSummarySection("results", ["LOINC"]))
        assert "- Entries: 0, 0 coded" in text
        assert "Aliens" not in text
        assert "- MU:" not in text


class TestFormatAggregate:
    def test_lists_codes(self):
        agg = AggregatedEntry(description="Fever", count=2, codes={"ICD-9-CM": ["781", "780"]})
        text = format_aggregate(agg)
        assert text.splitlines() == ["**Fever** (count 2)", "- ICD-9-CM: 780, 781"]


class TestFormatReport:
    def test_sections_table_and_tally(self):
        report = PatientSummaryReport([SectionConfig(name="results", mu_code_systems=["LOINC"])])
        report.add_entry("results", Entry(description="Glucose", codes={"LOINC": ["2345-7"]}))
        tally = AnalysisResults.for_report(report)
        tally.record(report)
        tally.record_validation(True)

        text = format_report(report, tally)
        assert "# Meaningful Use Coverage" in text
        assert "| results | 1 | 1 | 1 | 0 | LOINC | none |" in text
        assert "*1 documents analyzed, 1 passed validation.*" in text
        assert "| results | 1 | 1 | 1 |" in text

    def test_without_tally(self):
        text = format_report(PatientSummaryReport([SectionConfig(name="results")]))
        assert "Documents" not in text
