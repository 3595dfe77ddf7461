"""
QA Check Data Models
Request-scoped entities of a single QA run
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Translation:
    """A single localized string submitted for a QA check."""
    id: int
    text: str
    source_string_id: int


@dataclass(frozen=True)
class StringConstraint:
    """Maximum rendered width of a source string and the font to measure it with."""
    string_id: int
    max_width_pixels: Optional[int]
    font: str = "Arial"
    font_size: int = 16

    @property
    def is_constrained(self) -> bool:
        return self.max_width_pixels is not None


@dataclass(frozen=True)
class Verdict:
    """Pass/fail outcome for one translation."""
    translation_id: int
    passed: bool
    message: Optional[str] = None
