"""Syntactic validity checks for clinical code values."""

from __future__ import annotations

import re

# Patterns are applied with re.match, so they are always anchored at the
# start of the value. Fully anchored patterns end with \Z, which unlike $
# does not match before a trailing newline. Numeric systems accept any
# value starting with a digit.
CODE_PATTERNS: dict[str, re.Pattern[str]] = {
    "SNOMED-CT": re.compile(r"\d+"),
    "ICD-9-CM": re.compile(r"([EV])?\d{2,3}(\.\d{1,2})?\Z"),
    "ICD-10-CM": re.compile(r"[A-Z]\d{2}(\.\d)?\Z"),
    "RxNorm": re.compile(r"\d+"),
    "CPT": re.compile(r"\d{4}[A-Z0-9]\Z"),
    "LOINC": re.compile(r"\d+"),
}


def is_known_code_system(code_system: str) -> bool:
    """Return True if there is a validation pattern for code_system."""
    return code_system in CODE_PATTERNS


def is_valid(code_system: str, value, strict: bool = False) -> bool:
    """Check whether value looks like a valid code in code_system.

    Code systems without a pattern are reported valid, so that codes from
    systems we know nothing about still count as coded data. Pass
    strict=True to reject them instead.
    """
    pattern = CODE_PATTERNS.get(code_system)
    if pattern is None:
        return not strict
    if value is None:
        return False
    return pattern.match(str(value)) is not None


def any_valid(code_system: str, values, strict: bool = False) -> bool:
    """Return True if at least one of values is valid for code_system."""
    return any(is_valid(code_system, v, strict=strict) for v in values)
