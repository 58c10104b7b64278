"""
Unit tests for the line assembly module.
"""

import pytest

from pdf_outline_extractor.data_models import Line, TextFragment
from pdf_outline_extractor.line_assembler import (
    assemble_document_lines,
    assemble_page_lines,
    merge_page_lines,
    normalize_line_text,
    quantize,
    round_half_up,
)


def fragment(text, x, y, height=12.0, font="Helvetica"):
    return TextFragment(text=text, origin_x=x, origin_y=y, height=height, font_name=font)


class TestRounding:
    """Quantization helpers."""

    def test_round_half_up_ties_go_up(self):
        """Test that ties round up instead of to even."""
        assert round_half_up(700.5) == 701
        assert round_half_up(701.5) == 702
        assert round_half_up(700.49) == 700
        assert round_half_up(-0.5) == 0

    def test_quantize_default_step(self):
        """Test quantization to whole points."""
        assert quantize(699.6) == 700.0
        assert quantize(700.4) == 700.0

    def test_quantize_coarser_step(self):
        """Test quantization with a step larger than one point."""
        assert quantize(701.0, tolerance=4.0) == 700.0
        assert quantize(703.0, tolerance=4.0) == 704.0

    def test_normalize_line_text(self):
        """Test whitespace collapsing and trimming."""
        assert normalize_line_text("  Hello \t  World \n") == "Hello World"
        assert normalize_line_text("") == ""

    def test_normalize_line_text_canonical_form(self):
        """Test NFC composition and removal of format characters."""
        assert normalize_line_text("Cafe\u0301 Menu") == "Caf\u00e9 Menu"
        assert normalize_line_text("Intro\u200bduction") == "Introduction"
        assert normalize_line_text("A \u200b B") == "A B"


class TestAssemblePageLines:
    """Grouping fragments of one page into lines."""

    def test_fragments_on_same_line_merge_left_to_right(self):
        """Test joining fragments of one baseline in x order."""
        fragments = [
            fragment("World", 60, 700, height=20),
            fragment("Hello", 10, 700, height=20),
        ]

        lines = assemble_page_lines(fragments, page=1)

        assert lines == [Line(text="Hello World", x=10, y=700.0, height=20, font_name="Helvetica", page=1)]

    def test_rounding_groups_nearby_baselines(self):
        """Test that baselines rounding to the same value share a line."""
        fragments = [
            fragment("Hello", 10, 699.7),
            fragment("World", 60, 700.4),
        ]

        lines = assemble_page_lines(fragments, page=3)

        assert len(lines) == 1
        assert lines[0].text == "Hello World"
        assert lines[0].y == 700.0
        assert lines[0].page == 3

    def test_lines_sorted_top_to_bottom(self):
        """Test that lines come out in descending y."""
        fragments = [
            fragment("bottom", 10, 100),
            fragment("top", 10, 700),
            fragment("middle", 10, 400),
        ]

        lines = assemble_page_lines(fragments, page=1)

        assert [line.text for line in lines] == ["top", "middle", "bottom"]
        assert all(a.y >= b.y for a, b in zip(lines, lines[1:]))

    def test_first_fragment_supplies_height_and_font(self):
        """Test that the leftmost fragment defines the line attributes."""
        fragments = [
            fragment("body", 80, 500, height=10, font="Times"),
            fragment("1.", 20, 500, height=14, font="Times-Bold"),
        ]

        line = assemble_page_lines(fragments, page=1)[0]

        assert line.text == "1. body"
        assert line.x == 20
        assert line.height == 14
        assert line.font_name == "Times-Bold"

    def test_whitespace_collapsed_and_trimmed(self):
        """Test whitespace handling in joined line text."""
        fragments = [
            fragment("  Annual ", 10, 300),
            fragment("   Report  ", 50, 300),
        ]

        assert assemble_page_lines(fragments, page=1)[0].text == "Annual Report"

    def test_blank_leftmost_fragment_supplies_attributes(self):
        """Test that a leftmost blank fragment still sets x, height and font."""
        fragments = [
            fragment(" ", 5, 760, height=0, font="Space"),
            fragment("Title Here", 10, 760, height=20),
        ]

        line = assemble_page_lines(fragments, page=1)[0]

        assert line.text == "Title Here"
        assert line.x == 5
        assert line.height == 0
        assert line.font_name == "Space"

    def test_blank_lines_dropped(self):
        """Test that lines without visible text are dropped."""
        fragments = [fragment("   ", 10, 700), fragment("\u200b", 10, 650), fragment("Text", 10, 600)]

        assert [line.text for line in assemble_page_lines(fragments, page=1)] == ["Text"]

    def test_empty_input_yields_no_lines(self):
        """Test assembling a page without fragments."""
        assert assemble_page_lines([], page=1) == []

    def test_coarser_tolerance_merges_more(self):
        """Test that a larger quantization step merges nearby baselines."""
        fragments = [
            fragment("Hello", 10, 701),
            fragment("World", 60, 699),
        ]

        assert len(assemble_page_lines(fragments, page=1)) == 2
        assert len(assemble_page_lines(fragments, page=1, tolerance=4.0)) == 1


class TestDocumentAssembly:
    """Merging independent page results."""

    def setup_method(self):
        self.pages = [
            [fragment("Page one top", 10, 700), fragment("Page one bottom", 10, 100)],
            [],
            [fragment("Page three", 10, 500)],
            [fragment("Page four", 10, 300), fragment("Page four top", 10, 600)],
        ]

    def test_merge_page_lines_concatenates_in_order(self):
        """Test merging page results in page order."""
        first = [Line("a", 0, 10, 12, "F", 1)]
        second = [Line("b", 0, 20, 12, "F", 2)]

        assert merge_page_lines([first, second]) == first + second
        assert merge_page_lines([]) == []

    def test_pages_numbered_from_one(self):
        """Test page numbering, including empty pages."""
        lines = assemble_document_lines(self.pages)

        assert [(line.page, line.text) for line in lines] == [
            (1, "Page one top"),
            (1, "Page one bottom"),
            (3, "Page three"),
            (4, "Page four top"),
            (4, "Page four"),
        ]

    @pytest.mark.parametrize("workers", [2, 4, 8])
    def test_parallel_assembly_matches_sequential(self, workers):
        """Test that worker count does not change the result."""
        sequential = assemble_document_lines(self.pages, max_workers=1)
        parallel = assemble_document_lines(self.pages, max_workers=workers)

        assert parallel == sequential
