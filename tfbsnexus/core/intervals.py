"""
Interval value types shared by the consolidation and proximity engine.

All coordinates are 1-based and inclusive, relative to a gene or sequence
frame. Intervals are frozen: every merge or annotation step builds a new
value with ``dataclasses.replace`` instead of mutating one in place.

Three interval kinds exist:

- :class:`Site`: a scored TFBS hit (or, after merging, a cluster site)
- :class:`ConservedRegion`: a region conserved at a discrete level
- :class:`SearchRegion`: an allowed promoter window
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Iterable, Optional

from .exceptions import IntervalValidationError

_COMPLEMENT = str.maketrans("acgtACGT", "tgcaTGCA")

VALID_STRANDS = (1, -1)

STRAND_SYMBOLS = {"+": 1, "-": -1, "1": 1, "-1": -1, "+1": 1}


def parse_strand(value) -> int:
    """Map a strand given as ``+``/``-`` or ``1``/``-1`` (str or int) to 1 or -1.

    Raises
    ------
    ValueError
        For any other value, e.g. ``0``, ``.`` or an empty string.
    """
    if isinstance(value, str):
        key = value.strip()
        if key in STRAND_SYMBOLS:
            return STRAND_SYMBOLS[key]
    elif value in VALID_STRANDS:
        return int(value)
    raise ValueError(f"Unrecognized strand: {value!r}")


class IntervalKind(Enum):
    """Tag identifying the kind of a genomic interval."""

    SITE = "site"
    CONSERVED_REGION = "conserved_region"
    SEARCH_REGION = "search_region"


def reverse_complement(seq: str) -> str:
    """Reverse complement a DNA sequence, preserving case.

    Characters other than A/C/G/T (e.g. ``N``) are kept as they are.
    """
    return seq[::-1].translate(_COMPLEMENT)


def gc_content(seq: str) -> float:
    """Fraction of G/C among the unambiguous bases of ``seq``."""
    seq = seq.upper()
    acgt = sum(seq.count(nt) for nt in "ACGT")
    if acgt == 0:
        return 0.0
    return (seq.count("G") + seq.count("C")) / acgt


@dataclass(frozen=True)
class GenomicInterval:
    """Base class for all interval kinds."""

    kind: ClassVar[Optional[IntervalKind]] = None

    start: int
    end: int
    strand: int = 1
    score: float = 0.0
    rel_score: float = 0.0
    sequence: str = ""
    pattern_id: str = ""
    owner_id: str = ""

    def __post_init__(self):
        if self.start > self.end:
            raise IntervalValidationError(
                f"Interval start {self.start} is greater than end {self.end}"
            )
        if self.strand not in VALID_STRANDS:
            raise IntervalValidationError(f"Invalid strand {self.strand!r}; expected 1 or -1")
        if self.sequence and len(self.sequence) != self.length:
            raise IntervalValidationError(
                f"Sequence length {len(self.sequence)} does not match interval "
                f"{self.start}-{self.end} (length {self.length})"
            )

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def overlaps(self, other: "GenomicInterval") -> bool:
        """True if the two intervals share at least one base."""
        return self.start <= other.end and self.end >= other.start

    def contains(self, other: "GenomicInterval") -> bool:
        return self.start <= other.start and self.end >= other.end

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["kind"] = self.kind.value if self.kind else None
        return d


@dataclass(frozen=True)
class Site(GenomicInterval):
    """A putative TFBS produced by a motif scanner or by a cluster merge."""

    kind: ClassVar[IntervalKind] = IntervalKind.SITE

    conservation_level: Optional[int] = None
    conservation_score: Optional[float] = None

    def __post_init__(self):
        super().__post_init__()
        if not 0.0 <= self.rel_score <= 1.0:
            raise IntervalValidationError(
                f"Relative score {self.rel_score} outside [0, 1] for site {self.pattern_id}"
            )

    @property
    def is_conserved(self) -> bool:
        return self.conservation_level is not None


@dataclass(frozen=True)
class ConservedRegion(GenomicInterval):
    """A region of a gene conserved at a given conservation level."""

    kind: ClassVar[IntervalKind] = IntervalKind.CONSERVED_REGION

    conservation_level: int = 1
    conservation_score: float = 0.0
    gc_content: Optional[float] = None

    def __post_init__(self):
        super().__post_init__()
        if self.conservation_level < 1:
            raise IntervalValidationError(
                f"Conservation level must be a positive integer, got {self.conservation_level}"
            )
        if self.gc_content is not None and not 0.0 <= self.gc_content <= 1.0:
            raise IntervalValidationError(f"GC content {self.gc_content} outside [0, 1]")


@dataclass(frozen=True)
class SearchRegion(GenomicInterval):
    """A promoter window within which hits are considered relevant."""

    kind: ClassVar[IntervalKind] = IntervalKind.SEARCH_REGION


@dataclass(frozen=True)
class SitePair:
    """An anchor site and a partner site lying within a bounded distance."""

    anchor: Site
    partner: Site
    distance: int

    def __post_init__(self):
        if self.distance < 0:
            raise IntervalValidationError(f"Site pair distance must be >= 0, got {self.distance}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "anchor": self.anchor.to_dict(),
            "partner": self.partner.to_dict(),
            "distance": self.distance,
        }


def sort_by_start(intervals: Iterable[GenomicInterval]) -> list:
    """Stable sort by start coordinate."""
    return sorted(intervals, key=lambda iv: iv.start)
