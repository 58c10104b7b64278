"""
Core data models for PDF Outline Extractor.

Every model is a frozen dataclass: each extraction run derives them once and
never mutates them afterwards.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


MAX_HEADING_LEVEL = 6


@dataclass(frozen=True)
class TextFragment:
    """
    One positioned run of text as emitted by the document parser.

    ``origin_y`` grows towards the top of the page (PDF user space), so the
    first line of a page has the largest value.
    """
    text: str
    origin_x: float
    origin_y: float
    height: float
    font_name: str = ""


@dataclass(frozen=True)
class Line:
    """
    Fragments sharing a quantized vertical position on one page.
    """
    text: str
    x: float
    y: float
    height: float
    font_name: str
    page: int
    language: Optional[str] = None  # script/language tag, when a detector supplied one

    def is_empty(self) -> bool:
        """Check if the line carries no text."""
        return not self.text


@dataclass(frozen=True)
class FontStat:
    """Characters observed at one rounded line height across the document."""
    size: float
    weighted_count: int


@dataclass(frozen=True)
class FontProfile:
    """
    Result of font size profiling.

    ``heading_sizes`` is sorted in descending order; its index is the heading
    rank used for level assignment.
    """
    body_size: float
    heading_sizes: Tuple[float, ...]
    stats: Tuple[FontStat, ...] = ()


@dataclass(frozen=True)
class Heading:
    """A classified heading. ``level`` runs from 1 (H1) to 6 (H6)."""
    text: str
    level: int
    page: int

    def __post_init__(self):
        if not 1 <= self.level <= MAX_HEADING_LEVEL:
            raise ValueError(f"Heading level must be between 1 and {MAX_HEADING_LEVEL}, got {self.level}")

    @property
    def label(self) -> str:
        """Level label used in the JSON output ("H1" .. "H6")."""
        return f"H{self.level}"

    @property
    def key(self) -> Tuple[str, int]:
        """Identity used for duplicate detection."""
        return (self.text, self.page)

    def to_json_dict(self) -> Dict[str, Any]:
        return {'level': self.label, 'text': self.text, 'page': self.page}


@dataclass(frozen=True)
class Outline:
    """
    Represents the complete structure of a processed PDF document.
    """
    title: str
    headings: Tuple[Heading, ...] = field(default_factory=tuple)

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary matching the output schema."""
        return {
            'title': self.title,
            'outline': [heading.to_json_dict() for heading in self.headings]
        }

    def is_empty(self) -> bool:
        """Check if the outline has neither a title nor headings."""
        return not self.title and not self.headings
