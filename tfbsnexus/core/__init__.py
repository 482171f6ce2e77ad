"""
Core analysis modules for TFBSNexus.

Includes:
- Interval value types (sites, conserved regions, search regions)
- Overlap filtering and cluster merging of TFBSs
- Promoter search region derivation
- Conservation level assignment
- Proximal site pair detection
- Per-gene analysis and batch processing
"""

# Interval value types
from .intervals import (
    IntervalKind,
    GenomicInterval,
    Site,
    ConservedRegion,
    SearchRegion,
    SitePair,
    reverse_complement,
    gc_content,
    parse_strand,
    sort_by_start,
)

# Interval engine
from .overlap_filter import filter_overlapping_sites, filter_overlapping_sites_by_pattern
from .cluster_merge import (
    MergeOptions,
    merge_cluster_sites,
    group_sites_by_cluster,
    merge_sites_by_cluster,
    to_plus_strand,
)
from .search_regions import (
    promoter_search_region,
    combine_search_regions,
    promoter_search_regions,
    clip_to_search_regions,
    filter_sites_by_search_regions,
    total_length,
    total_gc_content,
)
from .conservation import assign_conservation_level, assign_conservation_levels
from .proximity import (
    ProximityOptions,
    site_distance,
    find_proximal_pairs,
    proximal_partners,
    find_cluster_site_pairs,
)

# Per-gene analysis and batch processing
from .analysis import (
    AnalysisConfig,
    AnalysisContext,
    GeneAnalyzer,
    GeneResult,
    group_regions_by_level,
)
from .batch_processor import BatchProcessor, BatchResult, GeneJob, JobStatus

# Tabular utilities
from .genomic_utils import (
    sites_to_dataframe,
    dataframe_to_sites,
    load_site_file,
    site_pairs_to_dataframe,
    counts_table,
)

from .exceptions import (
    TFBSNexusError,
    ValidationError,
    IntervalValidationError,
    ConfigurationError,
    InvalidStrandError,
    MissingParameterError,
)

__all__ = [
    # Intervals
    "IntervalKind",
    "GenomicInterval",
    "Site",
    "ConservedRegion",
    "SearchRegion",
    "SitePair",
    "reverse_complement",
    "gc_content",
    "parse_strand",
    "sort_by_start",
    # Engine
    "filter_overlapping_sites",
    "filter_overlapping_sites_by_pattern",
    "MergeOptions",
    "merge_cluster_sites",
    "group_sites_by_cluster",
    "merge_sites_by_cluster",
    "to_plus_strand",
    "promoter_search_region",
    "combine_search_regions",
    "promoter_search_regions",
    "clip_to_search_regions",
    "filter_sites_by_search_regions",
    "total_length",
    "total_gc_content",
    "assign_conservation_level",
    "assign_conservation_levels",
    "ProximityOptions",
    "site_distance",
    "find_proximal_pairs",
    "proximal_partners",
    "find_cluster_site_pairs",
    # Analysis
    "AnalysisConfig",
    "AnalysisContext",
    "GeneAnalyzer",
    "GeneResult",
    "group_regions_by_level",
    "BatchProcessor",
    "BatchResult",
    "GeneJob",
    "JobStatus",
    # Tables
    "sites_to_dataframe",
    "dataframe_to_sites",
    "load_site_file",
    "site_pairs_to_dataframe",
    "counts_table",
    # Errors
    "TFBSNexusError",
    "ValidationError",
    "IntervalValidationError",
    "ConfigurationError",
    "InvalidStrandError",
    "MissingParameterError",
]
