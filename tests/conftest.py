"""
Shared test fixtures for TFBSNexus test suite.
"""

import tempfile
from pathlib import Path

import pytest

from tfbsnexus.core.intervals import ConservedRegion, Site
from tfbsnexus.models.schemas import GeneRecord, PromoterRecord


def make_site(start, end, score=1.0, pattern_id="MA0001", strand=1, sequence="", **kwargs):
    """Build a Site with sensible defaults."""
    return Site(
        start=start,
        end=end,
        strand=strand,
        score=score,
        sequence=sequence,
        pattern_id=pattern_id,
        **kwargs,
    )


def make_region(start, end, level=1, score=0.5, **kwargs):
    """Build a ConservedRegion with sensible defaults."""
    return ConservedRegion(
        start=start,
        end=end,
        conservation_level=level,
        conservation_score=score,
        **kwargs,
    )


# ============================================================================
# In-memory collaborators
# ============================================================================


class InMemoryHitSource:
    """Motif hits keyed by gene; applies the rel_score threshold."""

    def __init__(self, sites_by_gene=None):
        self.sites_by_gene = sites_by_gene or {}

    def fetch_sites(self, gene_id, threshold):
        return [s for s in self.sites_by_gene.get(gene_id, []) if s.rel_score >= threshold]


class InMemoryRegionSource:
    """Conserved regions keyed by (gene, level)."""

    def __init__(self, regions=None):
        self.regions = regions or {}

    def fetch_conserved_regions(self, gene_id, level):
        return sorted(self.regions.get((gene_id, level), []), key=lambda r: r.start)


class InMemoryPromoterSource:
    """Gene records keyed by gene id."""

    def __init__(self, genes=None):
        self.genes = genes or {}

    def fetch_gene(self, gene_id):
        return self.genes.get(gene_id)


# ============================================================================
# Sites
# ============================================================================


@pytest.fixture
def overlapping_hits():
    """Three hits of one motif, the first two overlapping."""
    return [
        make_site(100, 120, score=5),
        make_site(115, 130, score=9),
        make_site(140, 145, score=3),
    ]


@pytest.fixture
def cluster_hits():
    """Hits of two motifs from one cluster."""
    return [
        make_site(10, 20, score=5, pattern_id="MA0001"),
        make_site(18, 30, score=9, pattern_id="MA0002"),
        make_site(45, 50, score=3, pattern_id="MA0001"),
    ]


# ============================================================================
# Genes
# ============================================================================


@pytest.fixture
def plus_gene():
    """A + strand gene with two nearby promoters."""
    return GeneRecord(
        gene_id="GENE1",
        symbol="ABC1",
        chrom="chr1",
        start=1001,
        end=20000,
        strand=1,
        promoters=[PromoterRecord(tss=2000), PromoterRecord(tss=2200)],
    )


@pytest.fixture
def minus_gene():
    """A - strand gene with one promoter."""
    return GeneRecord(
        gene_id="GENE2",
        start=1001,
        end=20000,
        strand="-",
        promoters=[PromoterRecord(tss=15000)],
    )


@pytest.fixture
def analysis_sources():
    """Collaborators for a small data set.

    GENE1 and GENE2 start at 1, so gene frame and genomic coordinates
    coincide. With 500 bp up/downstream the GENE1 window is [500, 1499] and
    the GENE2 window is [4500, 5499]. BAD has an unusable strand.
    """
    gene1 = GeneRecord(
        gene_id="GENE1",
        start=1,
        end=10000,
        strand=1,
        promoters=[PromoterRecord(tss=1000)],
    )
    gene2 = GeneRecord(
        gene_id="GENE2",
        start=1,
        end=10000,
        strand=1,
        promoters=[PromoterRecord(tss=5000)],
    )
    bad = GeneRecord(
        gene_id="BAD",
        start=1,
        end=10000,
        strand=0,
        promoters=[PromoterRecord(tss=1000)],
    )
    hits = {
        "GENE1": [
            # two overlapping hits of one TF
            make_site(600, 610, score=5, pattern_id="TF_A", rel_score=0.9),
            make_site(605, 615, score=8, pattern_id="TF_A", rel_score=0.9),
            # partner of TF_A nearby
            make_site(620, 625, score=4, pattern_id="TF_B", rel_score=0.9),
            # below threshold
            make_site(700, 710, score=4, pattern_id="TF_B", rel_score=0.5),
            # unconserved
            make_site(900, 905, score=4, pattern_id="TF_B", rel_score=0.9),
            # outside search region
            make_site(3000, 3010, score=7, pattern_id="TF_A", rel_score=0.95),
        ],
        "GENE2": [
            make_site(4800, 4810, score=6, pattern_id="TF_A", rel_score=0.9),
        ],
    }
    regions = {
        ("GENE1", 1): [make_region(550, 650, level=1, score=0.45, gc_content=0.5)],
        ("GENE1", 2): [make_region(600, 630, level=2, score=0.65)],
        ("GENE2", 1): [make_region(4700, 4900, level=1, score=0.5)],
    }
    return (
        InMemoryHitSource(hits),
        InMemoryRegionSource(regions),
        InMemoryPromoterSource({"GENE1": gene1, "GENE2": gene2, "BAD": bad}),
    )


# ============================================================================
# Temporary files
# ============================================================================


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that gets cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_hit_file(temp_dir):
    """A scanner hit table with non-standard column names."""
    path = temp_dir / "hits.tsv"
    path.write_text(
        "gene_id\ttf_id\tsite_start\tsite_end\tstrand\tabs_score\trel_score\tseq\n"
        "GENE1\tMA0001\t100\t105\t+\t8.5\t0.91\tACGTAC\n"
        "GENE1\tMA0002\t200\t203\t-\t6.1\t0.86\tGGCC\n"
        "GENE2\tMA0001\t50\t55\t+\t7.0\t0.88\tTTTAAA\n"
    )
    return path


@pytest.fixture
def empty_hit_file(temp_dir):
    """An empty hit table."""
    path = temp_dir / "empty.tsv"
    path.write_text("")
    return path
