"""
PDF Outline Extractor.

Infers a document title and heading outline from the typography and
geometry of positioned text.
"""

from .config import ExtractorConfig
from .data_models import FontProfile, FontStat, Heading, Line, Outline, TextFragment
from .extractor import OutlineExtractor
from .heading_level_classifier import (
    ClassificationContext,
    ClassificationStrategy,
    CompositeStrategy,
    FontClusterStrategy,
    FontRankStrategy,
    NumberingPatternStrategy,
    create_strategy,
)
from .logging_config import (
    EmptyExtractionError,
    InvalidInputError,
    JSONOutputError,
    NoStructureFoundError,
    PDFExtractionError,
    PDFProcessingError,
)

__version__ = "0.1.0"

__all__ = [
    "ClassificationContext",
    "ClassificationStrategy",
    "CompositeStrategy",
    "EmptyExtractionError",
    "ExtractorConfig",
    "FontClusterStrategy",
    "FontProfile",
    "FontRankStrategy",
    "FontStat",
    "Heading",
    "InvalidInputError",
    "JSONOutputError",
    "Line",
    "NoStructureFoundError",
    "NumberingPatternStrategy",
    "Outline",
    "OutlineExtractor",
    "PDFExtractionError",
    "PDFProcessingError",
    "TextFragment",
    "create_strategy",
]
