"""Data model for entries fed to the coverage statistics.

An Entry is produced by an external document parser. The statistics code
only reads entries; it never changes their codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Classification(Enum):
    """Bucket an entry lands in once its codes have been checked."""

    UNUSABLE = "unusable"
    MEANINGFUL_USE = "mu"
    ALIEN = "alien"


@dataclass
class Entry:
    """A single clinical observation from a patient summary section."""

    description: str = ""
    codes: dict[str, list[str]] = field(default_factory=dict)  # code system -> values

    def add_code(self, value, code_system: str) -> None:
        """Record a code value under a code system, keeping arrival order."""
        self.codes.setdefault(code_system, []).append(str(value))
