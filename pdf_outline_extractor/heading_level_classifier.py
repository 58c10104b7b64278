"""
Heading level classifier module for PDF outline extraction.

This module decides whether a line is a heading and at which level. Each
decision rule is a strategy with a ``classify(line, context)`` method, so
strategies can be swapped or chained without touching line or outline
assembly:

- FontRankStrategy: rank of the line's height among the heading sizes
  (rank 0 -> H1, ..., rank 5 and deeper -> H6)
- FontClusterStrategy: K-means groups of heading sizes
- NumberingPatternStrategy: depth of section numbering (1., 1.1, 1.1.1) and
  CJK chapter markers
- CompositeStrategy: first strategy that assigns a level wins

Deeper nesting than H6 collapses into H6.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .cluster import cluster_heading_sizes
from .config import MAX_HEADING_LEVEL, MIN_HEADING_LENGTH
from .data_models import Line
from .line_assembler import round_half_up

logger = logging.getLogger(__name__)

_PAGE_NUMBER_RE = re.compile(r'^\d+$', re.ASCII)

CJK_LANGUAGES = {'zh', 'ja', 'ko'}


@dataclass(frozen=True)
class ClassificationContext:
    """Document-level information a strategy may consult."""
    title: str
    heading_sizes: Tuple[float, ...]
    body_size: Optional[float] = None
    language: Optional[str] = None


class ClassificationStrategy(ABC):
    """
    Base class for heading classification strategies.

    Subclasses implement ``_assign_level``; the textual exclusion rules are
    applied here for all of them.
    """

    name = "base"

    def __init__(self, min_heading_length: int = MIN_HEADING_LENGTH,
                 max_level: int = MAX_HEADING_LEVEL):
        self.min_heading_length = min_heading_length
        self.max_level = max_level

    def classify(self, line: Line, context: ClassificationContext) -> Optional[int]:
        """
        Classify a line.

        Args:
            line: Line to classify
            context: Document-level classification context

        Returns:
            Heading level (1..max_level), or None if the line is not a heading
        """
        level = self._assign_level(line, context)
        if level is None:
            return None

        if self.is_excluded(line, context):
            logger.debug(f"Excluded heading candidate '{line.text[:50]}' on page {line.page}")
            return None

        return min(level, self.max_level)

    def is_excluded(self, line: Line, context: ClassificationContext) -> bool:
        """
        Textual guards against geometric false positives.

        Short fragments, bare page numbers and repetitions of the title are
        never headings.
        """
        text = line.text
        if len(text) <= self.min_heading_length:
            return True
        if _PAGE_NUMBER_RE.match(text):
            return True
        if text.lower() == context.title.lower():
            return True
        return False

    @abstractmethod
    def _assign_level(self, line: Line, context: ClassificationContext) -> Optional[int]:
        """Return the raw level for a line, or None."""


class FontRankStrategy(ClassificationStrategy):
    """Level from the rank of the line's rounded height among heading sizes."""

    name = "font-rank"

    def _assign_level(self, line: Line, context: ClassificationContext) -> Optional[int]:
        if not line.height:
            return None
        rounded_height = round_half_up(line.height)
        try:
            rank = context.heading_sizes.index(rounded_height)
        except ValueError:
            return None
        return rank + 1


class FontClusterStrategy(ClassificationStrategy):
    """Level from the K-means cluster the line's heading size falls into."""

    name = "font-cluster"

    def __init__(self, min_heading_length: int = MIN_HEADING_LENGTH,
                 max_level: int = MAX_HEADING_LEVEL):
        super().__init__(min_heading_length, max_level)
        self._levels_cache: Dict[Tuple[float, ...], Dict[float, int]] = {}

    def _size_levels(self, heading_sizes: Tuple[float, ...]) -> Dict[float, int]:
        if heading_sizes not in self._levels_cache:
            self._levels_cache[heading_sizes] = cluster_heading_sizes(heading_sizes, self.max_level)
        return self._levels_cache[heading_sizes]

    def _assign_level(self, line: Line, context: ClassificationContext) -> Optional[int]:
        if not line.height or not context.heading_sizes:
            return None
        size_levels = self._size_levels(tuple(context.heading_sizes))
        return size_levels.get(float(round_half_up(line.height)))


class NumberingPatternStrategy(ClassificationStrategy):
    """
    Level from explicit section numbering.

    ``1 Introduction`` and ``1. Introduction`` are H1, ``2.1 Scope`` is H2,
    ``2.1.3 Limits`` is H3 and so on. For Chinese, Japanese and Korean text
    ``第N章`` (chapter) is H1 and ``第N節`` (section) is H2. Only lines set
    larger than body text, or in a bold face, qualify; numbered list items
    in running text stay out.
    """

    name = "numbering"

    def __init__(self, min_heading_length: int = MIN_HEADING_LENGTH,
                 max_level: int = MAX_HEADING_LEVEL):
        super().__init__(min_heading_length, max_level)
        self.decimal_pattern = re.compile(r'^(\d+(?:\.\d+)*)\.?\s+\S')
        self.cjk_patterns = [
            (re.compile(r'^第[0-9０-９一二三四五六七八九十百千]+章'), 1),
            (re.compile(r'^第[0-9０-９一二三四五六七八九十百千]+[節节]'), 2),
        ]
        self.bold_indicators = ('bold', 'black', 'heavy', 'demi', 'semibold')

    def _is_prominent(self, line: Line, context: ClassificationContext) -> bool:
        """Larger than body text, or bold."""
        font_name = line.font_name.lower()
        if any(indicator in font_name for indicator in self.bold_indicators):
            return True
        if context.body_size is None:
            return True
        return bool(line.height) and round_half_up(line.height) > context.body_size

    def _assign_level(self, line: Line, context: ClassificationContext) -> Optional[int]:
        if not self._is_prominent(line, context):
            return None

        text = line.text
        match = self.decimal_pattern.match(text)
        if match:
            return len(match.group(1).split('.'))

        language = line.language or context.language
        if language and language.split('-')[0].lower() in CJK_LANGUAGES:
            for pattern, level in self.cjk_patterns:
                if pattern.match(text):
                    return level

        return None


class CompositeStrategy(ClassificationStrategy):
    """Chain of strategies; the first one that assigns a level wins."""

    name = "combined"

    def __init__(self, strategies: Sequence[ClassificationStrategy]):
        if not strategies:
            raise ValueError("CompositeStrategy needs at least one strategy")
        super().__init__(
            min(s.min_heading_length for s in strategies),
            max(s.max_level for s in strategies),
        )
        self.strategies: List[ClassificationStrategy] = list(strategies)

    def classify(self, line: Line, context: ClassificationContext) -> Optional[int]:
        for strategy in self.strategies:
            level = strategy.classify(line, context)
            if level is not None:
                return level
        return None

    def _assign_level(self, line: Line, context: ClassificationContext) -> Optional[int]:
        return self.classify(line, context)


def create_strategy(name: str = "font-rank",
                    min_heading_length: int = MIN_HEADING_LENGTH,
                    max_level: int = MAX_HEADING_LEVEL) -> ClassificationStrategy:
    """
    Factory function to create a classification strategy by name.

    Args:
        name: One of "font-rank", "font-cluster", "numbering", "combined"
        min_heading_length: Lines this short or shorter are never headings
        max_level: Deepest level produced

    Returns:
        Configured strategy instance

    Raises:
        ValueError: If the name is unknown
    """
    if name == FontRankStrategy.name:
        return FontRankStrategy(min_heading_length, max_level)
    if name == FontClusterStrategy.name:
        return FontClusterStrategy(min_heading_length, max_level)
    if name == NumberingPatternStrategy.name:
        return NumberingPatternStrategy(min_heading_length, max_level)
    if name == CompositeStrategy.name:
        return CompositeStrategy([
            NumberingPatternStrategy(min_heading_length, max_level),
            FontRankStrategy(min_heading_length, max_level),
        ])
    raise ValueError(f"Unknown classification strategy: {name}")
