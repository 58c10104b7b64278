"""
Text fragment sources for PDF outline extraction.

A fragment source reads a document and returns, per page, the positioned
text fragments the outline core works from. Two PDF backends are provided
(PyMuPDF and pdfplumber), plus a loader for fragment files produced by any
other parser. Malformed fragments are skipped with a warning; only failure
to read the document as a whole is fatal.
"""

import json
import logging
import math
from abc import ABC, abstractmethod
from numbers import Real
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Union

import fitz  # PyMuPDF
import pdfplumber

from .data_models import TextFragment
from .logging_config import InvalidInputError, PDFExtractionError

logger = logging.getLogger(__name__)

RawFragment = Union[TextFragment, Mapping[str, Any]]


def _require_number(raw: Mapping[str, Any], *keys: str) -> float:
    """Fetch the first present key as a finite number."""
    for key in keys:
        if key in raw and raw[key] is not None:
            value = raw[key]
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidInputError(f"Fragment field '{key}' is not a number: {value!r}")
            value = float(value)
            if not math.isfinite(value):
                raise InvalidInputError(f"Fragment field '{key}' is not finite: {value!r}")
            return value
    raise InvalidInputError(f"Fragment is missing '{keys[0]}'")


def coerce_fragment(raw: RawFragment) -> TextFragment:
    """
    Validate one fragment and convert it to a TextFragment.

    Mappings may use either the model's field names (``origin_x``,
    ``origin_y``, ``font_name``) or the short forms ``x``, ``y`` and
    ``fontName``.

    Args:
        raw: TextFragment or mapping describing a fragment

    Returns:
        Validated TextFragment

    Raises:
        InvalidInputError: If the fragment does not have the expected shape
    """
    if isinstance(raw, TextFragment):
        raw = {
            'text': raw.text,
            'origin_x': raw.origin_x,
            'origin_y': raw.origin_y,
            'height': raw.height,
            'font_name': raw.font_name,
        }
    elif not isinstance(raw, Mapping):
        raise InvalidInputError(f"Fragment must be a mapping, got {type(raw).__name__}")

    text = raw.get('text')
    if not isinstance(text, str):
        raise InvalidInputError(f"Fragment text must be a string, got {type(text).__name__}")

    font_name = raw.get('font_name', raw.get('fontName', ''))
    if font_name is None:
        font_name = ''

    return TextFragment(
        text=text,
        origin_x=_require_number(raw, 'origin_x', 'x'),
        origin_y=_require_number(raw, 'origin_y', 'y'),
        height=_require_number(raw, 'height'),
        font_name=str(font_name),
    )


def build_page_fragments(raw_fragments: Iterable[RawFragment], page: int) -> List[TextFragment]:
    """
    Validate the fragments of one page, skipping malformed ones.

    Args:
        raw_fragments: Fragments as produced by a parser
        page: 1-based page number, for log messages

    Returns:
        Valid fragments in their original order. Blank fragments are kept;
        they still position and size the line they belong to.
    """
    fragments = []
    skipped = 0
    for raw in raw_fragments:
        try:
            fragment = coerce_fragment(raw)
        except InvalidInputError as e:
            skipped += 1
            logger.warning(f"Skipping invalid fragment on page {page}: {e}")
            continue
        fragments.append(fragment)

    if skipped:
        logger.warning(f"Skipped {skipped} invalid fragments on page {page}")
    return fragments


class FragmentSource(ABC):
    """Reads a document into per-page text fragments."""

    supported_extensions = {'.pdf'}

    def read_pages(self, pdf_path: Union[str, Path]) -> List[List[TextFragment]]:
        """
        Extract the text fragments of every page.

        Args:
            pdf_path: Path to the document

        Returns:
            One fragment list per page, first page first

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file type is not supported
            PDFExtractionError: If the document cannot be read
        """
        pdf_path = Path(pdf_path)

        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

        if pdf_path.suffix.lower() not in self.supported_extensions:
            raise ValueError(f"Unsupported file type: {pdf_path.suffix}")

        logger.info(f"Extracting text fragments from {pdf_path} with {type(self).__name__}")
        try:
            raw_pages = self._read_raw_pages(pdf_path)
        except Exception as e:
            raise PDFExtractionError(f"Could not read {pdf_path.name}: {e}") from e

        pages = [build_page_fragments(raw, page) for page, raw in enumerate(raw_pages, start=1)]
        logger.info(f"Extracted {sum(len(p) for p in pages)} fragments from {len(pages)} pages")
        return pages

    @abstractmethod
    def _read_raw_pages(self, pdf_path: Path) -> List[List[RawFragment]]:
        """Return the unvalidated fragments of each page."""


class PyMuPDFFragmentSource(FragmentSource):
    """
    Fragment source built on PyMuPDF text spans.

    Span origins are baseline points in top-down page coordinates; they are
    flipped so that y grows towards the top of the page.
    """

    def _read_raw_pages(self, pdf_path: Path) -> List[List[RawFragment]]:
        pages = []
        with fitz.open(str(pdf_path)) as doc:
            for page in doc:
                page_height = page.rect.height
                fragments = []
                for block in page.get_text("dict")["blocks"]:
                    if "lines" not in block:
                        continue  # Skip image blocks
                    for line in block["lines"]:
                        for span in line["spans"]:
                            origin_x, origin_y = span["origin"]
                            fragments.append({
                                'text': span.get("text", ""),
                                'origin_x': origin_x,
                                'origin_y': page_height - origin_y,
                                'height': span.get("size"),
                                'font_name': span.get("font", ""),
                            })
                pages.append(fragments)
        return pages


class PdfPlumberFragmentSource(FragmentSource):
    """
    Fragment source built on pdfplumber words.

    The bottom of each word box stands in for its baseline.
    """

    def __init__(self, x_tolerance: float = 3, y_tolerance: float = 3):
        self.x_tolerance = x_tolerance
        self.y_tolerance = y_tolerance

    def _read_raw_pages(self, pdf_path: Path) -> List[List[RawFragment]]:
        pages = []
        with pdfplumber.open(str(pdf_path)) as pdf:
            for page in pdf.pages:
                words = page.extract_words(
                    x_tolerance=self.x_tolerance,
                    y_tolerance=self.y_tolerance,
                    keep_blank_chars=False,
                    use_text_flow=False,
                    extra_attrs=['fontname', 'size']
                )
                pages.append([
                    {
                        'text': word['text'],
                        'origin_x': word['x0'],
                        'origin_y': float(page.height) - word['bottom'],
                        'height': word.get('size'),
                        'font_name': word.get('fontname', ''),
                    }
                    for word in words
                ])
        return pages


def load_fragment_file(path: Union[str, Path]) -> List[List[TextFragment]]:
    """
    Load pages of fragments from a JSON file.

    Accepted layouts are ``{"pages": [[fragment, ...], ...]}`` or a bare list
    of pages.

    Args:
        path: Path to the JSON file

    Returns:
        One validated fragment list per page

    Raises:
        PDFExtractionError: If the file is not valid JSON or has the wrong layout
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PDFExtractionError(f"Could not read fragment file {path.name}: {e}") from e

    if isinstance(data, Mapping):
        data = data.get('pages')
    if not isinstance(data, list) or not all(isinstance(page, list) for page in data):
        raise PDFExtractionError(f"Fragment file {path.name} must contain a list of pages")

    logger.info(f"Loaded {len(data)} pages of fragments from {path}")
    return [build_page_fragments(raw, page) for page, raw in enumerate(data, start=1)]


def create_fragment_source(backend: str = "pymupdf") -> FragmentSource:
    """
    Factory function to create a fragment source.

    Args:
        backend: "pymupdf" or "pdfplumber"

    Returns:
        FragmentSource instance
    """
    if backend == "pymupdf":
        return PyMuPDFFragmentSource()
    if backend == "pdfplumber":
        return PdfPlumberFragmentSource()
    raise ValueError(f"Unknown fragment backend: {backend}")
