"""
PDF outline extraction pipeline.

Orchestrates the stages for one document:
fragments -> lines -> font profile + title -> headings -> outline.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .cluster import build_font_profile
from .config import DEFAULT_CONFIG, ExtractorConfig
from .data_models import Outline
from .heading_level_classifier import ClassificationStrategy, create_strategy
from .line_assembler import assemble_document_lines
from .logging_config import EmptyExtractionError, NoStructureFoundError
from .outline import build_outline
from .pdf_extractor import FragmentSource, RawFragment, build_page_fragments, create_fragment_source
from .title_extractor import TitleExtractor

logger = logging.getLogger(__name__)


class OutlineExtractor:
    """
    Extracts a title and heading outline from positioned text.

    The extractor holds only configuration; every call is an independent
    single-pass run and no state is kept between documents.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None,
                 strategy: Optional[ClassificationStrategy] = None,
                 fragment_source: Optional[FragmentSource] = None):
        """
        Initialize the extractor.

        Args:
            config: Extraction parameters (defaults when omitted)
            strategy: Heading classification strategy; built from
                ``config.strategy`` when omitted
            fragment_source: PDF reader; built from ``config.backend`` when
                omitted
        """
        self.config = (config or DEFAULT_CONFIG).validate()
        self.strategy = strategy or create_strategy(
            self.config.strategy,
            min_heading_length=self.config.min_heading_length,
            max_level=self.config.max_heading_level,
        )
        self._fragment_source = fragment_source
        self.title_extractor = TitleExtractor(
            title_pages=self.config.title_pages,
            height_tolerance=self.config.title_height_tolerance,
        )

    @property
    def fragment_source(self) -> FragmentSource:
        if self._fragment_source is None:
            self._fragment_source = create_fragment_source(self.config.backend)
        return self._fragment_source

    def extract_from_pdf(self, pdf_path: Union[str, Path]) -> Outline:
        """
        Extract the outline of a PDF file.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            Document outline

        Raises:
            PDFExtractionError: If the PDF cannot be read
            EmptyExtractionError: If no text was found
            NoStructureFoundError: If neither title nor headings were found
        """
        pages = self.fragment_source.read_pages(pdf_path)
        return self.extract_from_pages(pages)

    def extract_from_pages(self, pages: Sequence[Iterable[RawFragment]],
                           language: Optional[str] = None) -> Outline:
        """
        Extract the outline from fragments grouped by page.

        Args:
            pages: Fragments of each page, first page first. Fragments may be
                TextFragments or mappings; malformed ones are skipped.
            language: Document language tag, overriding the configured one

        Returns:
            Document outline

        Raises:
            EmptyExtractionError: If no fragment was retrieved from any page
            NoStructureFoundError: If neither title nor headings were found
        """
        fragments = [build_page_fragments(raw, page) for page, raw in enumerate(pages, start=1)]
        if not any(fragments):
            raise EmptyExtractionError(
                "Could not extract any text from this document. It may be an image-only PDF."
            )

        lines = assemble_document_lines(
            fragments,
            tolerance=self.config.line_grouping_tolerance,
            max_workers=self.config.page_workers,
        )

        title_lines, title = self.title_extractor.extract(lines)
        profile = build_font_profile(
            lines,
            min_text_length=self.config.min_profile_text_length,
            default_body_size=self.config.default_body_size,
        )

        outline = build_outline(
            lines,
            title,
            profile.heading_sizes,
            strategy=self.strategy,
            body_size=profile.body_size,
            language=language or self.config.language,
        )

        # A document that is nothing but its title has no structure either
        title_is_whole_document = len(title_lines) == len(lines)
        if outline.is_empty() or (not outline.headings and title_is_whole_document):
            raise NoStructureFoundError(
                "Could not extract a title or any headings. "
                "The document might be empty, an image, or corrupted."
            )

        logger.info(f"Extracted outline: title='{outline.title}', {len(outline.headings)} headings")
        return outline
