"""
Line assembly module for PDF outline extraction.

This module groups the positioned text fragments of a page into visual lines
by quantizing their vertical origin, and merges the independent per-page
results into one document-ordered line list.
"""

import logging
import math
import re
import unicodedata
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Sequence

from .data_models import Line, TextFragment

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r'\s+')


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with ties going up (700.5 -> 701).

    Python's round() rounds ties to even, which would split fragments the
    layout treats as one line.
    """
    return int(math.floor(value + 0.5))


def quantize(value: float, tolerance: float = 1.0) -> float:
    """
    Snap a coordinate to the nearest multiple of ``tolerance``.

    Args:
        value: Coordinate to quantize
        tolerance: Quantization step (1.0 snaps to whole points)

    Returns:
        Quantized coordinate as a float
    """
    return float(round_half_up(value / tolerance) * tolerance)


def normalize_line_text(text: str) -> str:
    """
    Canonicalize line text.

    Applies NFC normalization, collapses whitespace runs into single spaces,
    drops control and format characters (zero-width spaces and the like) and
    trims. Lines that only differ in Unicode composition end up identical.
    """
    cleaned = ''.join(
        char for char in unicodedata.normalize('NFC', text)
        if char.isspace() or not unicodedata.category(char).startswith('C')
    )
    return _WHITESPACE_RE.sub(' ', cleaned).strip()


def assemble_page_lines(fragments: Iterable[TextFragment], page: int,
                        tolerance: float = 1.0) -> List[Line]:
    """
    Group the fragments of one page into lines.

    Fragments whose vertical origin quantizes to the same value form one
    line. Inside a line fragments are ordered left to right and joined with
    a single space; the first fragment supplies the line's x, height and font,
    even when its own text is blank. Lines left without text are dropped.

    Args:
        fragments: Text fragments of a single page
        page: 1-based page number
        tolerance: Vertical quantization step

    Returns:
        Lines of the page sorted top to bottom (descending y)
    """
    groups: Dict[float, List[TextFragment]] = {}
    for fragment in fragments:
        y = quantize(fragment.origin_y, tolerance)
        groups.setdefault(y, []).append(fragment)

    if not groups:
        logger.debug(f"Page {page} has no fragments")
        return []

    lines = []
    for y, group in groups.items():
        # sorted() is stable, fragments at equal x keep their stream order
        ordered = sorted(group, key=lambda f: f.origin_x)
        first = ordered[0]
        line = Line(
            text=normalize_line_text(' '.join(f.text for f in ordered)),
            x=first.origin_x,
            y=float(y),
            height=first.height,
            font_name=first.font_name,
            page=page,
        )
        if line.is_empty():
            logger.debug(f"Dropping blank line at y={y} on page {page}")
            continue
        lines.append(line)

    lines.sort(key=lambda line: line.y, reverse=True)
    logger.debug(f"Assembled {len(lines)} lines on page {page}")
    return lines


def merge_page_lines(page_results: Iterable[Sequence[Line]]) -> List[Line]:
    """
    Concatenate independent per-page line lists in page order.

    Args:
        page_results: One line list per page, already in page order

    Returns:
        Document-ordered line list
    """
    merged: List[Line] = []
    for page_lines in page_results:
        merged.extend(page_lines)
    return merged


def assemble_document_lines(pages: Sequence[Sequence[TextFragment]],
                            tolerance: float = 1.0,
                            max_workers: int = 1) -> List[Line]:
    """
    Assemble the lines of a whole document.

    Pages share no state, so with ``max_workers > 1`` they are assembled on
    a thread pool; ``Executor.map`` yields results in submission order, which
    keeps the merge in page order.

    Args:
        pages: Fragments per page, first page first
        tolerance: Vertical quantization step
        max_workers: Number of worker threads for page assembly

    Returns:
        Document-ordered line list (page ascending, then y descending)
    """
    page_numbers = range(1, len(pages) + 1)

    if max_workers > 1 and len(pages) > 1:
        logger.debug(f"Assembling {len(pages)} pages with {max_workers} workers")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            page_results = list(executor.map(
                lambda args: assemble_page_lines(args[0], args[1], tolerance),
                zip(pages, page_numbers)
            ))
    else:
        page_results = [
            assemble_page_lines(fragments, page, tolerance)
            for fragments, page in zip(pages, page_numbers)
        ]

    lines = merge_page_lines(page_results)
    logger.info(f"Assembled {len(lines)} lines from {len(pages)} pages")
    return lines
