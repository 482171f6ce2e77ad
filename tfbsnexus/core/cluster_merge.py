"""
Cluster Site Merging

Hits of related motifs (a TF "cluster" or family) are consolidated into
cluster sites:

1. Normalize every hit to the + strand (strand has no meaning for a cluster)
2. Sort by start
3. Sweep, merging a hit into the current cluster site when it overlaps it
   or lies within ``gap_tolerance`` bp of its end
4. Label every merged site with the cluster id

The canonical merge predicate is overlap-or-1bp-adjacency
(``gap_tolerance=1``): ``next.start <= current.end + 1``. Set
``gap_tolerance=0`` for strict overlap.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping, Optional

from .exceptions import validate_numeric_param
from .intervals import Site, reverse_complement, sort_by_start

logger = logging.getLogger(__name__)

GAP_FILL = "N"


@dataclass(frozen=True)
class MergeOptions:
    """Options controlling the cluster merge sweep."""

    gap_tolerance: int = 1

    def __post_init__(self):
        validate_numeric_param(self.gap_tolerance, "gap_tolerance", min_val=0)


def to_plus_strand(site: Site) -> Site:
    """Return ``site`` on the + strand, reverse complementing its sequence."""
    if site.strand == -1:
        return replace(site, strand=1, sequence=reverse_complement(site.sequence))
    return site


def _extend(current: Site, site: Site) -> Site:
    """Merge ``site`` into ``current``, returning a new cluster site."""
    end = current.end
    sequence = current.sequence

    if site.end > current.end:
        offset = current.end - site.start + 1
        if current.sequence and site.sequence:
            if offset >= 0:
                sequence = current.sequence + site.sequence[offset:]
            else:
                # bases between the two sites are not known
                sequence = current.sequence + GAP_FILL * -offset + site.sequence
        else:
            sequence = ""
        end = site.end

    return replace(
        current,
        end=end,
        sequence=sequence,
        score=max(current.score, site.score),
        rel_score=max(current.rel_score, site.rel_score),
    )


def merge_cluster_sites(
    sites: Iterable[Site],
    cluster_id: str,
    options: Optional[MergeOptions] = None,
) -> List[Site]:
    """Merge the hits of one cluster into consolidated cluster sites.

    The caller must pre-group hits by cluster; this function does not
    group. A merged site spans the union of its members, its sequence is
    the members' sequences spliced at the overlap, and its ``score`` and
    ``rel_score`` are the maxima over its members.

    Args:
        sites: Hits belonging to a single cluster, any strand, any order
        cluster_id: Identifier written to ``pattern_id`` of every output site
        options: Merge options (defaults to ``MergeOptions()``)

    Returns:
        Cluster sites in start order, all on the + strand
    """
    options = options or MergeOptions()

    ordered = sort_by_start(to_plus_strand(s) for s in sites)
    if not ordered:
        return []

    merged: List[Site] = []
    current = replace(ordered[0], pattern_id=cluster_id)
    for site in ordered[1:]:
        if site.start <= current.end + options.gap_tolerance:
            current = _extend(current, site)
        else:
            merged.append(current)
            current = replace(site, pattern_id=cluster_id)
    merged.append(current)

    return merged


def group_sites_by_cluster(
    sites: Iterable[Site], tf_to_cluster: Mapping[str, str]
) -> Dict[str, List[Site]]:
    """Group hits by the cluster their motif belongs to.

    Hits of motifs missing from ``tf_to_cluster`` are skipped.
    """
    groups: Dict[str, List[Site]] = defaultdict(list)
    unmapped = set()
    for site in sites:
        cluster_id = tf_to_cluster.get(site.pattern_id)
        if cluster_id is None:
            unmapped.add(site.pattern_id)
            continue
        groups[cluster_id].append(site)

    if unmapped:
        logger.debug(f"No cluster for motifs {sorted(unmapped)}; their sites were skipped")

    return dict(groups)


def merge_sites_by_cluster(
    sites: Iterable[Site],
    tf_to_cluster: Mapping[str, str],
    options: Optional[MergeOptions] = None,
) -> Dict[str, List[Site]]:
    """Group hits by cluster and merge each group.

    Returns:
        Mapping of cluster id to its merged cluster sites
    """
    return {
        cluster_id: merge_cluster_sites(group, cluster_id, options)
        for cluster_id, group in group_sites_by_cluster(sites, tf_to_cluster).items()
    }
