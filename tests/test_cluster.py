"""
Unit tests for the font size profiling module.
"""

import pytest

from pdf_outline_extractor.cluster import (
    build_font_profile,
    cluster_heading_sizes,
    collect_font_stats,
)
from pdf_outline_extractor.data_models import FontStat, Line


def line(text, height, page=1, y=500.0):
    return Line(text=text, x=72.0, y=y, height=height, font_name="Helvetica", page=page)


def test_body_and_heading_separation():
    """500 characters at 12pt and 40 at 18pt make 12 body and 18 a heading size."""
    lines = [line("x" * 50, 12.0) for _ in range(10)]
    lines += [line("y" * 20, 18.0), line("z" * 20, 18.0)]

    profile = build_font_profile(lines)

    assert profile.body_size == 12
    assert profile.heading_sizes == (18,)
    assert profile.stats == (FontStat(12.0, 500), FontStat(18.0, 40))


def test_weighting_by_characters_not_occurrences():
    """Test that sizes are weighted by character count."""
    # Many short heading lines, few long body lines
    lines = [line("Heading", 16.0) for _ in range(10)]
    lines += [line("b" * 400, 11.0)]

    profile = build_font_profile(lines)

    assert profile.body_size == 11
    assert profile.heading_sizes == (16,)


def test_heading_sizes_descending_and_above_body():
    """Test that only sizes above body text are heading sizes."""
    lines = [
        line("b" * 300, 10.0),
        line("small print", 8.0),
        line("Section", 14.0),
        line("Chapter", 20.0),
        line("Subsection", 12.2),
    ]

    profile = build_font_profile(lines)

    assert profile.body_size == 10
    assert profile.heading_sizes == (20, 14, 12)


def test_short_lines_and_missing_heights_ignored():
    """Test lines excluded from the profile."""
    lines = [
        line("ab", 30.0),       # too short
        line("Body text here", 12.0),
        line("No height", 0.0),
    ]

    stats = collect_font_stats(lines)

    assert stats == [FontStat(12.0, len("Body text here"))]


def test_heights_rounded_half_up():
    """Test that heights are bucketed after rounding half up."""
    stats = collect_font_stats([line("abc", 12.5), line("defg", 13.4)])

    assert stats == [FontStat(13.0, 7)]


def test_ties_prefer_smaller_size():
    """Test that equal counts pick the smaller size as body text."""
    lines = [line("aaaa", 18.0), line("bbbb", 12.0)]

    profile = build_font_profile(lines)

    assert profile.body_size == 12
    assert profile.heading_sizes == (18,)


def test_fallback_body_size_when_nothing_qualifies():
    """Test the default body size."""
    profile = build_font_profile([line("ab", 14.0)])

    assert profile.body_size == 12.0
    assert profile.heading_sizes == ()

    assert build_font_profile([], default_body_size=10.0).body_size == 10.0


def test_cluster_single_size():
    """Test clustering with one size or none."""
    assert cluster_heading_sizes([18.0]) == {18.0: 1}
    assert cluster_heading_sizes([]) == {}


def test_cluster_levels_follow_size_order():
    """Test that larger sizes never get deeper levels."""
    size_to_level = cluster_heading_sizes([24.0, 23.0, 16.0, 15.0, 13.0])

    assert size_to_level[24.0] == 1
    assert size_to_level[24.0] <= size_to_level[16.0] <= size_to_level[13.0]
    assert all(1 <= level <= 6 for level in size_to_level.values())


@pytest.mark.parametrize("max_levels", [1, 2, 3])
def test_cluster_respects_max_levels(max_levels):
    """Test the upper bound on the number of levels."""
    sizes = [40.0, 32.0, 26.0, 20.0, 17.0, 15.0, 14.0, 13.0]

    size_to_level = cluster_heading_sizes(sizes, max_levels=max_levels)

    assert max(size_to_level.values()) <= max_levels
    assert size_to_level[40.0] == 1
