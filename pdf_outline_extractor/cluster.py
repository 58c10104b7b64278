"""
Font size profiling module for PDF outline extraction.

This module builds the character-weighted histogram of line heights that
separates body text from heading sizes, and optionally groups heading sizes
into levels with K-means clustering.
"""

import logging
from typing import Dict, List, Sequence

import numpy as np
from sklearn.cluster import KMeans

from .config import DEFAULT_BODY_SIZE, MAX_HEADING_LEVEL, MIN_PROFILE_TEXT_LENGTH
from .data_models import FontProfile, FontStat, Line
from .line_assembler import round_half_up

logger = logging.getLogger(__name__)


def collect_font_stats(lines: Sequence[Line],
                       min_text_length: int = MIN_PROFILE_TEXT_LENGTH) -> List[FontStat]:
    """
    Accumulate character counts per rounded line height.

    Lines without a height, or with text of ``min_text_length`` characters
    or fewer, do not contribute.

    Args:
        lines: Document-ordered lines
        min_text_length: Lines must be longer than this to count

    Returns:
        Font statistics ranked by weighted count, descending. Equal counts
        keep ascending size order.
    """
    buckets: Dict[int, int] = {}
    for line in lines:
        if not line.height or len(line.text) <= min_text_length:
            continue
        size = round_half_up(line.height)
        buckets[size] = buckets.get(size, 0) + len(line.text)

    stats = [FontStat(size=float(size), weighted_count=count)
             for size, count in sorted(buckets.items())]
    stats.sort(key=lambda stat: stat.weighted_count, reverse=True)
    return stats


def build_font_profile(lines: Sequence[Line],
                       min_text_length: int = MIN_PROFILE_TEXT_LENGTH,
                       default_body_size: float = DEFAULT_BODY_SIZE) -> FontProfile:
    """
    Determine the body text size and the ranked heading sizes.

    The size carrying the most characters is body text; every other observed
    size strictly larger than it is a heading size.

    Args:
        lines: Document-ordered lines
        min_text_length: Lines must be longer than this to count
        default_body_size: Body size used when no line qualifies

    Returns:
        FontProfile with heading sizes in descending order
    """
    stats = collect_font_stats(lines, min_text_length)

    if not stats:
        logger.warning(f"No line qualified for font profiling, assuming body size {default_body_size}")
        return FontProfile(body_size=default_body_size, heading_sizes=())

    body_size = stats[0].size
    heading_sizes = sorted((stat.size for stat in stats if stat.size > body_size), reverse=True)

    logger.info(f"Font profile: body size {body_size}, heading sizes {heading_sizes}")
    logger.debug(f"Font statistics: {[(s.size, s.weighted_count) for s in stats]}")
    return FontProfile(body_size=body_size, heading_sizes=tuple(heading_sizes), stats=tuple(stats))


def cluster_heading_sizes(heading_sizes: Sequence[float],
                          max_levels: int = MAX_HEADING_LEVEL) -> Dict[float, int]:
    """
    Apply K-means clustering to heading sizes and assign level numbers.

    Sizes that are close together share a level, so a document with many
    near-identical heading sizes does not spread them over six levels.

    Args:
        heading_sizes: Distinct heading sizes
        max_levels: Maximum number of levels to produce

    Returns:
        Dictionary mapping heading size to level (1=largest)
    """
    unique_sizes = sorted(set(float(size) for size in heading_sizes), reverse=True)

    if len(unique_sizes) < 2:
        return {size: 1 for size in unique_sizes}

    k = _determine_optimal_clusters(unique_sizes, max_levels)
    logger.debug(f"Applying K-means clustering with K={k} for {len(unique_sizes)} heading sizes")

    try:
        sizes_array = np.array(unique_sizes).reshape(-1, 1)

        kmeans = KMeans(n_clusters=k, random_state=42, n_init=10, max_iter=100)
        cluster_labels = kmeans.fit_predict(sizes_array)
        centroids = kmeans.cluster_centers_.flatten()

        # Largest centroid becomes level 1
        sorted_centroid_indices = np.argsort(centroids)[::-1]
        centroid_to_level = {int(i): level + 1 for level, i in enumerate(sorted_centroid_indices)}

        size_to_level = {
            size: centroid_to_level[int(cluster_labels[i])]
            for i, size in enumerate(unique_sizes)
        }
        logger.debug(f"Heading size to level mapping: {size_to_level}")
        return size_to_level

    except ValueError as e:
        logger.error(f"K-means clustering failed: {e}")
        return _fallback_size_assignment(unique_sizes, max_levels)


def _determine_optimal_clusters(unique_sizes: List[float], max_levels: int) -> int:
    """
    Determine the number of clusters from gaps in the size distribution.

    Args:
        unique_sizes: Distinct sizes in descending order
        max_levels: Upper bound on the result

    Returns:
        Number of clusters (K)
    """
    unique_count = len(unique_sizes)
    if unique_count <= 2:
        return min(unique_count, max_levels)

    diffs = np.abs(np.diff(unique_sizes))
    relative = diffs / np.array(unique_sizes[:-1])

    abs_threshold = np.median(diffs) + 1.5 * np.std(diffs)
    rel_threshold = np.median(relative) + np.std(relative)
    significant_gaps = int(np.sum((diffs > abs_threshold) | (relative > rel_threshold)))

    # Every significant gap separates two groups; evenly spaced sizes get three
    if significant_gaps:
        optimal_k = min(unique_count, significant_gaps + 1)
    else:
        optimal_k = min(unique_count, 3)

    logger.debug(f"Heading size analysis: {unique_count} sizes, {significant_gaps} significant gaps")
    return min(optimal_k, max_levels)


def _fallback_size_assignment(unique_sizes: List[float], max_levels: int) -> Dict[float, int]:
    """Assign levels by raw size rank, saturating at ``max_levels``."""
    logger.warning("Using fallback size assignment based on raw font sizes")
    return {size: min(i + 1, max_levels) for i, size in enumerate(unique_sizes)}
