"""
Conservation level assignment.

Each hit is assigned the strictest conservation level at which it overlaps
a conserved region, together with the best conservation score among the
regions it overlaps at that level. Conserved regions of a stricter level
are a subset of those of a looser level, so levels are searched from
strictest to loosest and the search stops at the first level with a match.
"""

import logging
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from .exceptions import validate_numeric_param
from .intervals import ConservedRegion, Site

logger = logging.getLogger(__name__)

DEFAULT_MIN_OVERLAP = 1


def best_region_score(
    site: Site, regions: Sequence[ConservedRegion], min_overlap: int = DEFAULT_MIN_OVERLAP
) -> Optional[float]:
    """Best conservation score among regions overlapping ``site``.

    ``regions`` must be sorted by start. Returns None if no region overlaps
    the site by at least ``min_overlap`` bp at either edge.
    """
    best = None
    for region in regions:
        # sorted by start: nothing further along can overlap
        if region.start > site.end - min_overlap + 1:
            break
        if region.end >= site.start + min_overlap - 1:
            if best is None or region.conservation_score > best:
                best = region.conservation_score
    return best


def assign_conservation_level(
    site: Site,
    regions_by_level: Mapping[int, Sequence[ConservedRegion]],
    min_overlap: int = DEFAULT_MIN_OVERLAP,
) -> Optional[Site]:
    """Assign the highest conservation level supporting ``site``.

    Parameters
    ----------
    site : Site
        Hit in the same coordinate frame as the regions.
    regions_by_level : mapping of int to sequence of ConservedRegion
        Conserved regions of the owning gene, one list per level. Each
        list must already be sorted by start.
    min_overlap : int
        Minimum overlap in bp between site and region (default 1).

    Returns
    -------
    Site or None
        A copy of ``site`` carrying ``conservation_level`` and
        ``conservation_score``, or None if no level supports it.
    """
    validate_numeric_param(min_overlap, "min_overlap", min_val=1)

    for level in sorted(regions_by_level, reverse=True):
        score = best_region_score(site, regions_by_level[level], min_overlap)
        if score is not None:
            return replace(site, conservation_level=level, conservation_score=score)

    return None


def assign_conservation_levels(
    sites: Iterable[Site],
    regions_by_level: Mapping[int, Sequence[ConservedRegion]],
    min_overlap: int = DEFAULT_MIN_OVERLAP,
    log: Union[logging.Logger, logging.LoggerAdapter, None] = None,
) -> List[Site]:
    """Assign conservation levels to many sites, dropping unconserved ones.

    Each dropped site is logged as a warning on ``log`` (the module logger
    by default).
    """
    log = log or logger
    validate_numeric_param(min_overlap, "min_overlap", min_val=1)

    conserved = []
    for site in sites:
        assigned = assign_conservation_level(site, regions_by_level, min_overlap)
        if assigned is None:
            log.warning(
                "Site %s %d-%d overlaps no conserved region; dropped",
                site.pattern_id, site.start, site.end,
            )
            continue
        conserved.append(assigned)

    return conserved
