"""
Tests for outline assembly.
"""

from pdf_outline_extractor.data_models import Heading, Line, Outline
from pdf_outline_extractor.heading_level_classifier import (
    ClassificationContext,
    FontRankStrategy,
    NumberingPatternStrategy,
)
from pdf_outline_extractor.outline import build_outline, classify_lines, deduplicate_headings


def line(text, height, page=1, y=500.0):
    return Line(text=text, x=72.0, y=y, height=height, font_name="Helvetica", page=page)


class TestDeduplicateHeadings:
    """Removal of repeated (text, page) pairs."""

    def test_same_page_duplicates_collapse_to_first(self):
        """Test that the first of two equal headings wins."""
        headings = [
            Heading("Introduction", 1, 1),
            Heading("Scope", 2, 1),
            Heading("Introduction", 2, 1),
        ]

        assert deduplicate_headings(headings) == [
            Heading("Introduction", 1, 1),
            Heading("Scope", 2, 1),
        ]

    def test_same_text_on_different_pages_kept(self):
        """Test that equal text on other pages is kept."""
        headings = [Heading("Summary", 1, 2), Heading("Summary", 1, 5)]

        assert deduplicate_headings(headings) == headings

    def test_empty(self):
        """Test deduplicating nothing."""
        assert deduplicate_headings([]) == []


class TestClassifyLines:
    """Classification over the document."""

    def test_document_order_preserved(self):
        """Test that headings keep document order."""
        lines = [
            line("Chapter One", 18.0, page=1, y=700),
            line("Body text of chapter one", 12.0, page=1, y=650),
            line("Section A", 14.0, page=1, y=600),
            line("Chapter Two", 18.0, page=2, y=700),
        ]
        context = ClassificationContext(title="Book", heading_sizes=(18.0, 14.0))

        headings = classify_lines(lines, FontRankStrategy(), context)

        assert headings == [
            Heading("Chapter One", 1, 1),
            Heading("Section A", 2, 1),
            Heading("Chapter Two", 1, 2),
        ]


class TestBuildOutline:
    """End-to-end outline assembly."""

    def setup_method(self):
        self.lines = [
            line("Annual Report", 24.0, page=1, y=750),
            line("Overview", 18.0, page=1, y=700),
            line("Overview", 18.0, page=1, y=699),
            line("The year in numbers and words.", 12.0, page=1, y=650),
            line("7", 18.0, page=1, y=40),
            line("Overview", 18.0, page=2, y=700),
            line("Outlook", 16.0, page=2, y=600),
        ]

    def test_build_outline(self):
        """Test outline assembly with deduplication and exclusions."""
        outline = build_outline(self.lines, "Annual Report", [24.0, 18.0, 16.0])

        assert outline == Outline(
            title="Annual Report",
            headings=(
                Heading("Overview", 2, 1),
                Heading("Overview", 2, 2),
                Heading("Outlook", 3, 2),
            ),
        )

    def test_custom_strategy(self):
        """Test building an outline with another strategy."""
        lines = [line("1.2 Method", 14.0), line("Method", 14.0)]

        outline = build_outline(lines, "", [14.0], strategy=NumberingPatternStrategy(), body_size=12.0)

        assert outline.headings == (Heading("1.2 Method", 2, 1),)

    def test_no_headings(self):
        """Test an outline without headings."""
        outline = build_outline([line("Plain text only", 12.0)], "Plain text only", [])

        assert outline.headings == ()
        assert outline.to_json_dict() == {'title': "Plain text only", 'outline': []}

    def test_json_dict_uses_level_labels(self):
        """Test level labels in the JSON form."""
        outline = build_outline(self.lines, "Annual Report", [24.0, 18.0, 16.0])

        assert outline.to_json_dict()['outline'][0] == {'level': 'H2', 'text': 'Overview', 'page': 1}
