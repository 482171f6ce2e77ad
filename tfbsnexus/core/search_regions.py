"""
Promoter search regions.

A gene with several promoters (TSSs) gets one search window per promoter.
Windows are combined so that a hit falling in more than one promoter's
window is counted once, and conserved regions are clipped to the combined
windows before their length or GC content is aggregated.
"""

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from .exceptions import InvalidStrandError, validate_numeric_param
from .intervals import ConservedRegion, GenomicInterval, SearchRegion, Site, sort_by_start

if TYPE_CHECKING:
    from ..models.schemas import GeneRecord

logger = logging.getLogger(__name__)

# Windows separated by at most this many bp are combined
COMBINE_GAP = 1


def promoter_search_region(
    tss: int,
    gene_start: int,
    gene_end: int,
    strand: int,
    upstream_bp: Optional[int] = None,
    downstream_bp: Optional[int] = None,
    owner_id: str = "",
) -> Optional[SearchRegion]:
    """Derive the search window around one TSS, clamped to the gene.

    Without ``upstream_bp`` the window extends to the gene boundary on the
    upstream side; likewise for ``downstream_bp``.

    Raises
    ------
    InvalidStrandError
        If ``strand`` is not 1 or -1.

    Returns
    -------
    SearchRegion or None
        None when clamping leaves an empty window.
    """
    if upstream_bp is not None:
        validate_numeric_param(upstream_bp, "upstream_bp", min_val=0)
    if downstream_bp is not None:
        validate_numeric_param(downstream_bp, "downstream_bp", min_val=0)

    if strand == 1:
        start = gene_start if upstream_bp is None else max(gene_start, tss - upstream_bp)
        end = gene_end if downstream_bp is None else min(gene_end, tss + downstream_bp - 1)
    elif strand == -1:
        end = gene_end if upstream_bp is None else min(gene_end, tss + upstream_bp)
        start = gene_start if downstream_bp is None else max(gene_start, tss - downstream_bp + 1)
    else:
        raise InvalidStrandError(strand, context=f"gene {owner_id}" if owner_id else "gene")

    if start > end:
        logger.info(f"Search window for TSS {tss} lies outside gene {owner_id} bounds")
        return None

    return SearchRegion(start=start, end=end, strand=strand, owner_id=owner_id)


def combine_search_regions(regions: Iterable[SearchRegion]) -> List[SearchRegion]:
    """Combine overlapping or adjacent windows.

    The result is the minimal set of disjoint windows covering the same
    bases as the input, in start order.
    """
    ordered = sort_by_start(regions)
    if not ordered:
        return []

    combined: List[SearchRegion] = []
    current = ordered[0]
    for region in ordered[1:]:
        if region.start <= current.end + COMBINE_GAP:
            if region.end > current.end:
                current = replace(current, end=region.end)
        else:
            combined.append(current)
            current = region
    combined.append(current)

    return combined


def promoter_search_regions(
    gene: "GeneRecord",
    upstream_bp: Optional[int] = None,
    downstream_bp: Optional[int] = None,
    gene_frame: bool = False,
) -> List[SearchRegion]:
    """Derive and combine the search windows of all promoters of a gene.

    Args:
        gene: Gene record with boundaries, strand and promoters
        upstream_bp: Upstream extent from each TSS (None = to gene boundary)
        downstream_bp: Downstream extent from each TSS (None = to gene boundary)
        gene_frame: Return 1-based coordinates relative to the gene start

    Returns:
        Combined windows, empty if the gene has no promoters
    """
    windows = []
    for promoter in gene.promoters:
        window = promoter_search_region(
            promoter.tss,
            gene.start,
            gene.end,
            gene.strand,
            upstream_bp=upstream_bp,
            downstream_bp=downstream_bp,
            owner_id=gene.gene_id,
        )
        if window is not None:
            windows.append(window)

    combined = combine_search_regions(windows)

    if gene_frame:
        offset = gene.start - 1
        combined = [replace(w, start=w.start - offset, end=w.end - offset) for w in combined]

    return combined


def clip_to_search_regions(
    regions: Iterable[ConservedRegion], search_regions: Sequence[SearchRegion]
) -> List[ConservedRegion]:
    """Truncate conserved regions at the search window boundaries.

    A region spanning several windows yields one piece per window. The
    pieces keep the level, conservation score and GC content of the
    region they were cut from.
    """
    clipped = []
    for region in regions:
        for window in search_regions:
            if region.overlaps(window):
                clipped.append(
                    replace(
                        region,
                        start=max(region.start, window.start),
                        end=min(region.end, window.end),
                        sequence="",
                    )
                )
    return clipped


def filter_sites_by_search_regions(
    sites: Iterable[Site], search_regions: Sequence[SearchRegion]
) -> List[Site]:
    """Keep only sites lying completely within one of the windows."""
    return [s for s in sites if any(w.contains(s) for w in search_regions)]


def total_length(intervals: Iterable[GenomicInterval]) -> int:
    """Sum of interval lengths."""
    return sum(iv.length for iv in intervals)


def total_gc_content(regions: Iterable[ConservedRegion]) -> Optional[float]:
    """Length-weighted mean GC content of the regions that have one."""
    gc_bases = 0.0
    bases = 0
    for region in regions:
        if region.gc_content is None:
            continue
        gc_bases += region.gc_content * region.length
        bases += region.length

    if bases == 0:
        return None
    return gc_bases / bases
