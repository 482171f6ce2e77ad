"""
Proximal site pairs for anchored co-occurrence analysis.

For an anchor TF (or cluster) every partner site lying within
``max_distance`` bp of an anchor site, without overlapping it, forms a
:class:`SitePair`. Each anchor occurrence is an independent event, so a
partner close to two anchor sites appears in two pairs.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .cluster_merge import MergeOptions, merge_cluster_sites
from .exceptions import validate_numeric_param
from .intervals import Site, SitePair, sort_by_start

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProximityOptions:
    """Options for the proximal pair search."""

    max_distance: int

    def __post_init__(self):
        validate_numeric_param(self.max_distance, "max_distance", min_val=0)


def site_distance(a: Site, b: Site) -> Optional[int]:
    """Number of bp strictly between two sites, or None if they overlap."""
    if a.overlaps(b):
        return None
    return max(b.start, a.start) - min(b.end, a.end) - 1


def find_proximal_pairs(
    anchors: Iterable[Site],
    partners: Iterable[Site],
    options: ProximityOptions,
) -> List[SitePair]:
    """Find anchor/partner pairs within ``options.max_distance`` bp.

    Args:
        anchors: Anchor sites of one gene or sequence
        partners: Candidate partner sites of the same gene or sequence
        options: Proximity options

    Returns:
        Site pairs ordered by anchor start, then partner start

    When anchor and partner share a ``pattern_id`` only partners to the
    right of the anchor are paired, so that a pair of sites from one
    population is counted once rather than once from each side.
    Overlapping sites are never paired.
    """
    ordered_partners = sort_by_start(partners)

    pairs = []
    for anchor in sort_by_start(anchors):
        for partner in ordered_partners:
            if partner.pattern_id == anchor.pattern_id and partner.start <= anchor.end:
                continue

            distance = site_distance(anchor, partner)
            if distance is None:
                continue

            if distance <= options.max_distance:
                pairs.append(SitePair(anchor=anchor, partner=partner, distance=distance))

    return pairs


def proximal_partners(pairs: Iterable[SitePair]) -> List[Site]:
    """Distinct partner sites of ``pairs`` in first-seen order."""
    seen = set()
    partners = []
    for pair in pairs:
        if pair.partner not in seen:
            seen.add(pair.partner)
            partners.append(pair.partner)
    return partners


def find_cluster_site_pairs(
    anchor_sites: Iterable[Site],
    anchor_cluster_id: str,
    sites: Iterable[Site],
    cluster_id: str,
    options: ProximityOptions,
    merge_options: Optional[MergeOptions] = None,
) -> List[SitePair]:
    """Merge anchor and partner hits by cluster, then pair the cluster sites."""
    merged_anchors = merge_cluster_sites(anchor_sites, anchor_cluster_id, merge_options)
    merged_sites = merge_cluster_sites(sites, cluster_id, merge_options)

    pairs = find_proximal_pairs(merged_anchors, merged_sites, options)
    logger.debug(
        "%d %s/%s cluster site pairs within %d bp",
        len(pairs), anchor_cluster_id, cluster_id, options.max_distance,
    )
    return pairs
