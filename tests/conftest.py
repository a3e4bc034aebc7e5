"""Shared test fixtures for mucoverage tests."""

import pytest

from mucoverage.models import Entry
from mucoverage.section import PatientSummarySection


@pytest.fixture
def conditions_section():
    """Section with ICD-9-CM, ICD-10-CM and SNOMED-CT on the allow-list."""
    return PatientSummarySection("conditions", ["ICD-9-CM", "ICD-10-CM", "SNOMED-CT"])


@pytest.fixture
def sample_entries():
    """One entry for each classification against the conditions allow-list."""
    return {
        "mu": Entry(description="Hypertension", codes={"ICD-9-CM": ["401.9"]}),
        "mixed": Entry(
            description="Diabetes",
            codes={"ICD-10-CM": ["E11.9"], "LOINC": ["4548-4"]},
        ),
        "alien": Entry(description="Fever", codes={"LOINC": ["8310-5"]}),
        "unusable": Entry(description="Headache", codes={"ICD-9-CM": ["headache"]}),
        "uncoded": Entry(description="Back pain"),
    }
