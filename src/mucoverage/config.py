"""Configuration management for mucoverage.

Handles loading and generating TOML config files that set the
meaningful-use code systems for each patient summary section.
"""

from __future__ import annotations

import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONFIG_PATH = "mucoverage.toml"

# Code systems accepted as meaningful use for each C32/CCR section
DEFAULT_MU_CODE_SYSTEMS: dict[str, list[str]] = {
    "allergies": ["RxNorm", "SNOMED-CT"],
    "care_goals": ["SNOMED-CT"],
    "conditions": ["SNOMED-CT", "ICD-9-CM", "ICD-10-CM"],
    "encounters": ["CPT"],
    "immunizations": ["RxNorm"],
    "lab_results": ["LOINC"],
    "medical_equipment": ["SNOMED-CT"],
    "medications": ["RxNorm"],
    "procedures": ["CPT", "ICD-9-CM", "ICD-10-CM", "SNOMED-CT"],
    "social_history": ["SNOMED-CT"],
    "vital_signs": ["LOINC", "SNOMED-CT"],
}

DEFAULT_CONFIG_TEMPLATE = """\
# mucoverage configuration
# Edit freely.
#
# Each [sections.<name>] table sets the code systems that count as
# meaningful use for that patient summary section.
#   mu_code_systems = Code system names, as reported by the document parser

{section_stanzas}

[validation]
# Reject codes from systems without a known validation pattern
strict = false
"""


@dataclass
class SectionConfig:
    """One patient summary section and its meaningful-use code systems."""

    name: str
    mu_code_systems: list[str] = field(default_factory=list)


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from a TOML file.

    Returns a dict with:
    - sections: list of SectionConfig instances
    - validation: dict with the "strict" flag

    Falls back to defaults if the config file doesn't exist. Sections named
    in the file replace the default for that name; others keep the default.
    Raises ValueError if mu_code_systems is not an array of strings or
    strict is not a boolean.
    """
    path = Path(config_path)
    if not path.exists():
        print(
            f"Warning: Config file '{config_path}' not found, using defaults. "
            f"Call mucoverage.config.generate_config() to write an editable copy.",
            file=sys.stderr,
        )
        return _default_config()

    with open(path, "rb") as f:
        raw = tomllib.load(f)

    config = _default_config()

    if "sections" in raw:
        by_name = {s.name: s for s in config["sections"]}
        for name, table in raw["sections"].items():
            if "mu_code_systems" not in table:
                continue
            systems = table["mu_code_systems"]
            if not isinstance(systems, list) or not all(isinstance(s, str) for s in systems):
                raise ValueError(
                    f"sections.{name}.mu_code_systems must be an array of strings, "
                    f"got {systems!r}"
                )
            by_name[name] = SectionConfig(name=name, mu_code_systems=list(systems))
        config["sections"] = list(by_name.values())

    if "validation" in raw:
        config["validation"].update(raw["validation"])
        if not isinstance(config["validation"]["strict"], bool):
            raise ValueError(
                f"validation.strict must be true or false, got {config['validation']['strict']!r}"
            )

    return config


def get_section_configs(config: dict) -> list[SectionConfig]:
    """Return list of configured sections with their allow-lists."""
    return config.get("sections", [])


def _default_config() -> dict:
    """Return default configuration."""
    return {
        "sections": [
            SectionConfig(name=name, mu_code_systems=list(systems))
            for name, systems in DEFAULT_MU_CODE_SYSTEMS.items()
        ],
        "validation": {
            "strict": False,
        },
    }


def default_section_configs() -> list[SectionConfig]:
    """Return the built-in section allow-lists."""
    return get_section_configs(_default_config())


def _format_section_stanza(name: str, systems: list[str]) -> str:
    """Format a single [sections.<name>] TOML stanza."""
    systems_str = ", ".join(f'"{s}"' for s in systems)
    return f"[sections.{name}]\nmu_code_systems = [{systems_str}]"


def generate_config(config_path: str = DEFAULT_CONFIG_PATH) -> str:
    """Write a config file holding the default section allow-lists.

    Returns the path of the written config file.
    """
    stanzas = [
        _format_section_stanza(name, systems) for name, systems in DEFAULT_MU_CODE_SYSTEMS.items()
    ]
    content = DEFAULT_CONFIG_TEMPLATE.format(section_stanzas="\n\n".join(stanzas))
    Path(config_path).write_text(content)
    return config_path
