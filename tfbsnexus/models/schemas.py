"""
Pydantic schemas for records supplied by external collaborators.

Defines schemas for:
- Motif scanner hits
- Conserved regions
- Genes and their promoters

Each record validates once at the boundary and converts into the frozen
interval types used by the core.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.intervals import STRAND_SYMBOLS, ConservedRegion, Site, parse_strand


# ============================================================================
# Motif hits
# ============================================================================


class MotifHitRecord(BaseModel):
    """A raw hit reported by the motif scanner."""

    start: int = Field(..., ge=1, description="1-based start")
    end: int = Field(..., ge=1, description="1-based inclusive end")
    strand: int = 1
    score: float
    rel_score: float = Field(..., ge=0, le=1)
    sequence: str = ""
    pattern_id: str = Field(..., description="Motif / TF identifier")

    @field_validator("strand", mode="before")
    @classmethod
    def check_strand(cls, v):
        return parse_strand(v)

    def to_site(self, owner_id: str = "") -> Site:
        return Site(
            start=self.start,
            end=self.end,
            strand=self.strand,
            score=self.score,
            rel_score=self.rel_score,
            sequence=self.sequence,
            pattern_id=self.pattern_id,
            owner_id=owner_id,
        )


# ============================================================================
# Conserved regions
# ============================================================================


class ConservedRegionRecord(BaseModel):
    """A persisted conserved region of a gene."""

    gene_id: str
    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)
    conservation_level: int = Field(..., ge=1)
    conservation: float = Field(..., description="Conservation score")
    gc_content: Optional[float] = Field(default=None, ge=0, le=1)

    def to_region(self) -> ConservedRegion:
        return ConservedRegion(
            start=self.start,
            end=self.end,
            owner_id=self.gene_id,
            conservation_level=self.conservation_level,
            conservation_score=self.conservation,
            gc_content=self.gc_content,
        )


# ============================================================================
# Genes
# ============================================================================


class PromoterRecord(BaseModel):
    """A transcription start site of a gene."""

    tss: int = Field(..., ge=1)
    ensembl_transcript_id: Optional[str] = None


class GeneRecord(BaseModel):
    """Gene boundaries, strand and promoters."""

    gene_id: str
    symbol: Optional[str] = None
    chrom: Optional[str] = None
    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)
    strand: int
    promoters: List[PromoterRecord] = Field(default_factory=list)

    # Unknown integer strands are kept; search region derivation rejects them
    # as a per-gene configuration error.
    @field_validator("strand", mode="before")
    @classmethod
    def map_strand_symbol(cls, v):
        if isinstance(v, str) and v.strip() in STRAND_SYMBOLS:
            return STRAND_SYMBOLS[v.strip()]
        return v

    @property
    def length(self) -> int:
        return self.end - self.start + 1
