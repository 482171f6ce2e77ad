"""
Removal of overlapping hits of the same motif.

A motif scanner reports every window scoring above threshold, so a strong
site usually shows up as several overlapping hits. Only the locally best
scoring hit of each overlapping run is kept.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List

from .intervals import Site, sort_by_start

logger = logging.getLogger(__name__)


def filter_overlapping_sites(sites: Iterable[Site]) -> List[Site]:
    """Keep the highest scoring site of every run of overlapping sites.

    All sites are expected to share one ``pattern_id``. Sites are swept in
    start order; when the next site overlaps the currently retained one,
    the retained site is replaced only if the next site scores strictly
    higher, so ties favour the site with the lower start.

    Parameters
    ----------
    sites : iterable of Site
        Hits of a single motif, in any order.

    Returns
    -------
    list of Site
        Pairwise non-overlapping sites in start order.
    """
    ordered = sort_by_start(sites)
    if not ordered:
        return []

    filtered: List[Site] = []
    current = ordered[0]
    for site in ordered[1:]:
        if site.overlaps(current):
            if site.score > current.score:
                current = site
        else:
            filtered.append(current)
            current = site
    filtered.append(current)

    return filtered


def filter_overlapping_sites_by_pattern(sites: Iterable[Site]) -> List[Site]:
    """Apply :func:`filter_overlapping_sites` separately to each motif.

    Returns the surviving sites of all motifs ordered by
    ``(start, pattern_id)``.
    """
    by_pattern: Dict[str, List[Site]] = defaultdict(list)
    for site in sites:
        by_pattern[site.pattern_id].append(site)

    filtered: List[Site] = []
    for pattern_id, group in by_pattern.items():
        kept = filter_overlapping_sites(group)
        if len(kept) < len(group):
            logger.debug(
                "Filtered %d overlapping %s sites down to %d", len(group), pattern_id, len(kept)
            )
        filtered.extend(kept)

    return sorted(filtered, key=lambda s: (s.start, s.pattern_id))
