"""
Per-gene TFBS analysis.

Runs the interval engine for one gene at a time:

1. Derive combined promoter search regions
2. Keep scanner hits inside the search regions
3. Filter overlapping hits per TF, or merge hits per TF cluster
4. Assign conservation levels and keep hits at the requested level
5. Optionally pair hits with nearby anchor hits
6. Aggregate conserved region length and GC content within the regions

Persistence and motif scanning are external collaborators described by
the protocols below.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .cluster_merge import MergeOptions, merge_sites_by_cluster
from .conservation import assign_conservation_levels
from .exceptions import MissingParameterError, validate_numeric_param
from .intervals import ConservedRegion, SearchRegion, Site, SitePair
from .overlap_filter import filter_overlapping_sites_by_pattern
from .proximity import ProximityOptions, find_proximal_pairs
from .search_regions import (
    clip_to_search_regions,
    filter_sites_by_search_regions,
    promoter_search_regions,
    total_gc_content,
    total_length,
)

if TYPE_CHECKING:
    from ..config import Settings
    from ..models.schemas import GeneRecord

logger = logging.getLogger(__name__)


# =============================================================================
# Collaborator protocols
# =============================================================================


class MotifHitSource(Protocol):
    """Supplies scored motif hits for a gene, in gene-frame coordinates."""

    def fetch_sites(self, gene_id: str, threshold: float) -> Sequence[Site]:
        ...


class ConservedRegionSource(Protocol):
    """Supplies a gene's conserved regions at one level, sorted by start."""

    def fetch_conserved_regions(self, gene_id: str, level: int) -> Sequence[ConservedRegion]:
        ...


class PromoterSource(Protocol):
    """Supplies gene boundaries, strand and promoters."""

    def fetch_gene(self, gene_id: str) -> Optional["GeneRecord"]:
        ...


# =============================================================================
# Configuration, context and results
# =============================================================================


@dataclass
class AnalysisConfig:
    """Parameters of a per-gene analysis.

    Setting ``tf_to_cluster`` switches to cluster mode (hits are merged per
    cluster rather than filtered per TF). Setting ``anchor_id`` switches on
    anchored analysis, which requires ``max_distance``.
    """

    threshold: float = 0.85
    upstream_bp: Optional[int] = 5000
    downstream_bp: Optional[int] = 5000
    conservation_level: int = 1
    min_conservation_overlap: int = 1
    merge: MergeOptions = field(default_factory=MergeOptions)
    tf_to_cluster: Optional[Dict[str, str]] = None
    anchor_id: Optional[str] = None
    max_distance: Optional[int] = None

    def __post_init__(self):
        validate_numeric_param(self.threshold, "threshold", min_val=0, max_val=1)
        validate_numeric_param(self.conservation_level, "conservation_level", min_val=1)
        validate_numeric_param(self.min_conservation_overlap, "min_conservation_overlap", min_val=1)

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides) -> "AnalysisConfig":
        """Build a config from settings defaults, with explicit overrides."""
        params = {
            "threshold": settings.default_threshold,
            "upstream_bp": settings.default_upstream_bp,
            "downstream_bp": settings.default_downstream_bp,
            "min_conservation_overlap": settings.min_conservation_overlap,
            "merge": MergeOptions(gap_tolerance=settings.gap_tolerance),
            "max_distance": settings.max_site_distance,
        }
        params.update(overrides)
        return cls(**params)

    @property
    def proximity(self) -> ProximityOptions:
        if self.max_distance is None:
            raise MissingParameterError("max_distance", context=f"anchored analysis of {self.anchor_id}")
        return ProximityOptions(max_distance=self.max_distance)


class GeneLoggerAdapter(logging.LoggerAdapter):
    """Prefix log messages with the gene being analyzed."""

    def process(self, msg, kwargs):
        return f"[gene {self.extra['gene_id']}] {msg}", kwargs


class AnalysisContext:
    """Per-gene state handed to every step of an analysis.

    Carries a logger bound to the gene id so log records from concurrent
    gene tasks can be told apart.
    """

    def __init__(self, gene_id: str, base_logger: Optional[logging.Logger] = None):
        self.gene_id = gene_id
        self.logger = GeneLoggerAdapter(base_logger or logger, {"gene_id": gene_id})


@dataclass
class GeneResult:
    """Outcome of analyzing one gene."""

    gene_id: str
    sites: List[Site] = field(default_factory=list)
    search_regions: List[SearchRegion] = field(default_factory=list)
    site_pairs: List[SitePair] = field(default_factory=list)
    conserved_length: int = 0
    gc_content: Optional[float] = None

    def counts(self) -> Dict[str, int]:
        """Number of retained sites per TF (or cluster)."""
        counts: Dict[str, int] = {}
        for site in self.sites:
            counts[site.pattern_id] = counts.get(site.pattern_id, 0) + 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gene_id": self.gene_id,
            "num_sites": len(self.sites),
            "num_site_pairs": len(self.site_pairs),
            "counts": self.counts(),
            "search_regions": [(r.start, r.end) for r in self.search_regions],
            "conserved_length": self.conserved_length,
            "gc_content": self.gc_content,
        }


# =============================================================================
# Analyzer
# =============================================================================


class GeneAnalyzer:
    """
    Analyze the putative TFBSs of individual genes.

    The analyzer holds only read-only collaborators, so one instance can
    serve concurrent gene tasks.
    """

    def __init__(
        self,
        hit_source: MotifHitSource,
        region_source: ConservedRegionSource,
        promoter_source: PromoterSource,
        conservation_levels: Sequence[int] = (1, 2, 3),
    ):
        self.hit_source = hit_source
        self.region_source = region_source
        self.promoter_source = promoter_source
        self.conservation_levels = sorted(conservation_levels)

    @classmethod
    def from_settings(
        cls,
        hit_source: MotifHitSource,
        region_source: ConservedRegionSource,
        promoter_source: PromoterSource,
        settings: "Settings",
    ) -> "GeneAnalyzer":
        return cls(hit_source, region_source, promoter_source, settings.conservation_levels)

    def analyze_gene(
        self,
        gene_id: str,
        config: AnalysisConfig,
        context: Optional[AnalysisContext] = None,
    ) -> GeneResult:
        """
        Run the full analysis for one gene.

        Args:
            gene_id: Gene identifier understood by the collaborators
            config: Analysis parameters
            context: Per-gene context (created if not given)

        Returns:
            GeneResult; empty when the gene or its data is absent

        Raises:
            ConfigurationError: For an unusable strand or a missing
                anchored-analysis parameter
        """
        context = context or AnalysisContext(gene_id)
        log = context.logger
        result = GeneResult(gene_id=gene_id)

        # fail before touching collaborators
        proximity = config.proximity if config.anchor_id else None

        gene = self.promoter_source.fetch_gene(gene_id)
        if gene is None:
            log.info("Gene not found; nothing to analyze")
            return result

        search_regions = promoter_search_regions(
            gene, config.upstream_bp, config.downstream_bp, gene_frame=True
        )
        if not search_regions:
            log.info("No promoter search regions")
            return result
        result.search_regions = search_regions

        regions_by_level = self._fetch_regions_by_level(gene_id)

        level_regions = clip_to_search_regions(
            regions_by_level.get(config.conservation_level, []), search_regions
        )
        result.conserved_length = total_length(level_regions)
        result.gc_content = total_gc_content(level_regions)

        sites = [
            s if s.owner_id else replace(s, owner_id=gene_id)
            for s in filter_sites_by_search_regions(
                self.hit_source.fetch_sites(gene_id, config.threshold), search_regions
            )
        ]
        if not sites:
            log.info("No TFBSs within the search regions")
            return result

        if config.tf_to_cluster:
            merged = merge_sites_by_cluster(sites, config.tf_to_cluster, config.merge)
            sites = sorted(
                (s for cluster_sites in merged.values() for s in cluster_sites),
                key=lambda s: (s.start, s.pattern_id),
            )
        else:
            sites = filter_overlapping_sites_by_pattern(sites)

        conserved = assign_conservation_levels(
            sites, regions_by_level, config.min_conservation_overlap, log=log
        )
        result.sites = [s for s in conserved if s.conservation_level >= config.conservation_level]
        log.debug(f"{len(result.sites)} of {len(sites)} sites conserved at level >= {config.conservation_level}")

        if proximity is not None:
            anchors = [s for s in result.sites if s.pattern_id == config.anchor_id]
            result.site_pairs = find_proximal_pairs(anchors, result.sites, proximity)

        return result

    def _fetch_regions_by_level(self, gene_id: str) -> Dict[int, List[ConservedRegion]]:
        regions_by_level: Dict[int, List[ConservedRegion]] = {}
        for level in self.conservation_levels:
            regions = self.region_source.fetch_conserved_regions(gene_id, level)
            if regions:
                regions_by_level[level] = list(regions)
        return regions_by_level


def group_regions_by_level(regions: Sequence[ConservedRegion]) -> Mapping[int, List[ConservedRegion]]:
    """Split a mixed list of conserved regions into start-sorted per-level lists."""
    by_level: Dict[int, List[ConservedRegion]] = {}
    for region in sorted(regions, key=lambda r: r.start):
        by_level.setdefault(region.conservation_level, []).append(region)
    return by_level
