"""
Outline assembly module.

This module handles:
- Running the heading classifier over every line in document order
- Removing headings repeated with identical text on the same page
- Building the final Outline
"""

import logging
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .data_models import Heading, Line, Outline
from .heading_level_classifier import ClassificationContext, ClassificationStrategy, FontRankStrategy

logger = logging.getLogger(__name__)


def classify_lines(lines: Iterable[Line], strategy: ClassificationStrategy,
                   context: ClassificationContext) -> List[Heading]:
    """
    Classify each line and collect the accepted headings.

    Args:
        lines: Document-ordered lines (page ascending, then y descending)
        strategy: Heading classification strategy
        context: Document-level classification context

    Returns:
        Headings in document order, duplicates included
    """
    headings = []
    for line in lines:
        level = strategy.classify(line, context)
        if level is None:
            continue
        headings.append(Heading(text=line.text, level=level, page=line.page))
        logger.debug(f"Classified '{line.text[:50]}' on page {line.page} as H{level}")
    return headings


def deduplicate_headings(headings: Iterable[Heading]) -> List[Heading]:
    """
    Drop headings whose (text, page) pair was already seen.

    The same heading text on different pages is kept; only exact repeats on
    one page (e.g. text drawn twice) collapse into the first occurrence.

    Args:
        headings: Headings in document order

    Returns:
        Headings with later duplicates removed, order preserved
    """
    seen: Set[Tuple[str, int]] = set()
    unique = []
    for heading in headings:
        if heading.key in seen:
            logger.debug(f"Dropping duplicate heading '{heading.text[:50]}' on page {heading.page}")
            continue
        seen.add(heading.key)
        unique.append(heading)
    return unique


def build_outline(lines: Sequence[Line], title: str, heading_sizes: Sequence[float],
                  strategy: Optional[ClassificationStrategy] = None,
                  body_size: Optional[float] = None,
                  language: Optional[str] = None) -> Outline:
    """
    Assemble the document outline.

    Args:
        lines: Document-ordered lines
        title: Extracted document title
        heading_sizes: Heading sizes in descending order
        strategy: Classification strategy (font rank when omitted)
        body_size: Body text size, for strategies that consult it
        language: Document language tag, if known

    Returns:
        Outline with deduplicated headings in document order
    """
    strategy = strategy or FontRankStrategy()
    context = ClassificationContext(
        title=title,
        heading_sizes=tuple(heading_sizes),
        body_size=body_size,
        language=language,
    )

    candidates = classify_lines(lines, strategy, context)
    headings = deduplicate_headings(candidates)

    logger.info(f"Outline built with {len(headings)} headings "
                f"({len(candidates) - len(headings)} duplicates removed)")
    return Outline(title=title, headings=tuple(headings))
