"""
Configuration for PDF Outline Extractor.

Adjust these values to fine-tune line grouping, title detection and heading
classification. The defaults reproduce the behaviour the heuristics were
tuned with.
"""

from dataclasses import dataclass, replace
from typing import Optional

# Vertical quantization step used to group fragments into lines (points)
LINE_GROUPING_TOLERANCE = 1.0

# Lines whose height differs from the largest by less than this join the title
TITLE_HEIGHT_TOLERANCE = 1.0

# Number of opening pages searched for the title
TITLE_PAGES = 2

# Body size assumed when no line qualifies for the font profile
DEFAULT_BODY_SIZE = 12.0

# Lines must be longer than this to count towards the font profile
MIN_PROFILE_TEXT_LENGTH = 2

# Lines this short (or shorter) are never headings
MIN_HEADING_LENGTH = 3

# Deeper ranks saturate at this level
MAX_HEADING_LEVEL = 6

BACKENDS = ("pymupdf", "pdfplumber")
STRATEGIES = ("font-rank", "font-cluster", "numbering", "combined")


@dataclass(frozen=True)
class ExtractorConfig:
    """Tunable parameters of one extraction run."""
    line_grouping_tolerance: float = LINE_GROUPING_TOLERANCE
    title_height_tolerance: float = TITLE_HEIGHT_TOLERANCE
    title_pages: int = TITLE_PAGES
    default_body_size: float = DEFAULT_BODY_SIZE
    min_profile_text_length: int = MIN_PROFILE_TEXT_LENGTH
    min_heading_length: int = MIN_HEADING_LENGTH
    max_heading_level: int = MAX_HEADING_LEVEL
    page_workers: int = 1
    backend: str = "pymupdf"
    strategy: str = "font-rank"
    language: Optional[str] = None
    max_file_size_mb: float = 50.0

    def validate(self) -> "ExtractorConfig":
        """
        Check the configuration for values the pipeline cannot work with.

        Returns:
            The configuration itself, so calls can be chained

        Raises:
            ValueError: If any parameter is out of range
        """
        if self.line_grouping_tolerance <= 0:
            raise ValueError(f"line_grouping_tolerance must be positive, got {self.line_grouping_tolerance}")
        if self.title_height_tolerance <= 0:
            raise ValueError(f"title_height_tolerance must be positive, got {self.title_height_tolerance}")
        if self.title_pages < 1:
            raise ValueError(f"title_pages must be at least 1, got {self.title_pages}")
        if self.default_body_size <= 0:
            raise ValueError(f"default_body_size must be positive, got {self.default_body_size}")
        if not 1 <= self.max_heading_level <= MAX_HEADING_LEVEL:
            raise ValueError(f"max_heading_level must be between 1 and {MAX_HEADING_LEVEL}, "
                             f"got {self.max_heading_level}")
        if self.page_workers < 1:
            raise ValueError(f"page_workers must be at least 1, got {self.page_workers}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{self.backend}', expected one of {BACKENDS}")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown strategy '{self.strategy}', expected one of {STRATEGIES}")
        if self.max_file_size_mb <= 0:
            raise ValueError(f"max_file_size_mb must be positive, got {self.max_file_size_mb}")
        return self

    def with_overrides(self, **overrides) -> "ExtractorConfig":
        """Return a copy with the given non-None values replaced."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)


DEFAULT_CONFIG = ExtractorConfig()
