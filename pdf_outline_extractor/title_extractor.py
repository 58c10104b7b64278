"""
Title extraction module for PDF documents.

The title is taken to be the text set in the largest glyphs on the opening
pages. Lines of (almost) the same height are joined so that titles wrapped
over several lines are reassembled.
"""

import logging
from typing import List, Sequence, Tuple

from .config import TITLE_HEIGHT_TOLERANCE, TITLE_PAGES
from .data_models import Line

logger = logging.getLogger(__name__)


class TitleExtractor:
    """
    Visual prominence title extraction.

    Attributes:
        title_pages: Only lines on pages 1..title_pages are considered
        height_tolerance: Lines within this distance of the largest height
            are part of the title
    """

    def __init__(self, title_pages: int = TITLE_PAGES,
                 height_tolerance: float = TITLE_HEIGHT_TOLERANCE):
        self.title_pages = title_pages
        self.height_tolerance = height_tolerance

    def select_title_lines(self, lines: Sequence[Line]) -> List[Line]:
        """
        Pick the lines that make up the title.

        Args:
            lines: Document-ordered lines

        Returns:
            Title lines ordered top to bottom (descending y)
        """
        opening_lines = [line for line in lines if line.page <= self.title_pages]
        if not opening_lines:
            return []

        max_height = max(line.height for line in opening_lines)
        title_lines = [
            line for line in opening_lines
            if abs(line.height - max_height) < self.height_tolerance
        ]
        # Ordered by y alone, across the opening pages
        title_lines.sort(key=lambda line: line.y, reverse=True)

        logger.debug(f"Selected {len(title_lines)} title lines at height {max_height}")
        return title_lines

    def extract(self, lines: Sequence[Line]) -> Tuple[List[Line], str]:
        """
        Select the title lines and join them into the title.

        Args:
            lines: Document-ordered lines

        Returns:
            Tuple of (title lines top to bottom, title text). The title is an
            empty string when the opening pages have no lines.
        """
        title_lines = self.select_title_lines(lines)
        title = ' '.join(line.text for line in title_lines)
        if title:
            logger.info(f"Extracted title: '{title}'")
        else:
            logger.info("No title found on the opening pages")
        return title_lines, title
