"""
Shared tabular utilities for TFBSNexus.

Converts between interval value types and pandas DataFrames, loads hit
tables written by motif scanners, and builds the per-gene count tables
consumed by downstream enrichment statistics.
"""

import io
import logging
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from .exceptions import ValidationError, validate_dataframe
from .intervals import Site, SitePair, parse_strand

logger = logging.getLogger(__name__)

# ============================================================================
# Column name detection
# ============================================================================

START_COLS = ["start", "site_start", "tfbs_start"]
END_COLS = ["end", "site_end", "tfbs_end"]
STRAND_COLS = ["strand", "orientation"]
SCORE_COLS = ["score", "abs_score", "raw_score"]
REL_SCORE_COLS = ["rel_score", "relative_score", "rel.score"]
SEQUENCE_COLS = ["sequence", "seq", "site_seq"]
PATTERN_COLS = ["pattern_id", "tf_id", "matrix_id", "motif_id", "cluster_id"]
OWNER_COLS = ["owner_id", "gene_id", "seq_id", "sequence_id"]

SITE_COLUMNS = [
    "owner_id", "pattern_id", "start", "end", "strand",
    "score", "rel_score", "sequence", "conservation_level", "conservation_score",
]


def detect_column(df: pd.DataFrame, candidates: List[str], required: bool = False) -> Optional[str]:
    """Find the first matching column name from a list of candidates.

    Parameters
    ----------
    df : pd.DataFrame
    candidates : list of str
        Column names to search for (case-insensitive).
    required : bool
        If True, raise ValueError when not found.

    Returns
    -------
    str or None
    """
    cols_lower = {c.lower(): c for c in df.columns}
    for cand in candidates:
        if cand.lower() in cols_lower:
            return cols_lower[cand.lower()]
    if required:
        raise ValueError(
            f"Could not find any of {candidates} in columns: {list(df.columns)}"
        )
    return None


def standardize_site_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename common hit-table column variants to standardized names.

    Produces columns: start, end, pattern_id (and optionally strand, score,
    rel_score, sequence, owner_id).
    """
    mapping = {}
    for std_name, candidates in [
        ("start", START_COLS),
        ("end", END_COLS),
        ("strand", STRAND_COLS),
        ("score", SCORE_COLS),
        ("rel_score", REL_SCORE_COLS),
        ("sequence", SEQUENCE_COLS),
        ("pattern_id", PATTERN_COLS),
        ("owner_id", OWNER_COLS),
    ]:
        col = detect_column(df, candidates)
        if col and col != std_name:
            mapping[col] = std_name
    return df.rename(columns=mapping)


# ============================================================================
# Site <-> DataFrame conversion
# ============================================================================


def sites_to_dataframe(sites: Iterable[Site]) -> pd.DataFrame:
    """Tabulate sites, one row per site."""
    rows = [
        {
            "owner_id": s.owner_id,
            "pattern_id": s.pattern_id,
            "start": s.start,
            "end": s.end,
            "strand": s.strand,
            "score": s.score,
            "rel_score": s.rel_score,
            "sequence": s.sequence,
            "conservation_level": s.conservation_level,
            "conservation_score": s.conservation_score,
        }
        for s in sites
    ]
    return pd.DataFrame(rows, columns=SITE_COLUMNS)


def dataframe_to_sites(df: pd.DataFrame) -> List[Site]:
    """Build sites from a standardized hit table.

    Strand may be given as +1/-1 or as "+"/"-"; any other strand value
    raises ValidationError. Missing optional columns get the Site defaults.
    """
    validate_dataframe(df, name="site table", required_columns=["start", "end", "pattern_id"])
    if df.empty:
        return []

    if "strand" in df.columns:
        try:
            strands = df["strand"].map(parse_strand).to_numpy()
        except ValueError as e:
            raise ValidationError(f"Invalid strand in site table: {e}") from e
    else:
        strands = np.ones(len(df), dtype=int)

    sites = []
    for i, row in enumerate(df.itertuples(index=False)):
        sites.append(
            Site(
                start=int(row.start),
                end=int(row.end),
                strand=int(strands[i]),
                score=float(getattr(row, "score", 0.0)),
                rel_score=float(getattr(row, "rel_score", 0.0)),
                sequence=str(getattr(row, "sequence", "") or ""),
                pattern_id=str(row.pattern_id),
                owner_id=str(getattr(row, "owner_id", "") or ""),
            )
        )
    return sites


def load_site_file(filepath_or_buffer, sep: str = "\t") -> List[Site]:
    """Load a scanner hit table (TSV/CSV with a header row) into sites."""
    if hasattr(filepath_or_buffer, "read"):
        content = filepath_or_buffer.read()
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        source = io.StringIO(content)
    else:
        source = str(filepath_or_buffer)

    try:
        df = pd.read_csv(source, sep=sep, comment="#", keep_default_na=False)
    except pd.errors.EmptyDataError:
        logger.info(f"No hits in {filepath_or_buffer}")
        return []

    return dataframe_to_sites(standardize_site_columns(df))


def site_pairs_to_dataframe(pairs: Iterable[SitePair]) -> pd.DataFrame:
    """Tabulate site pairs, one row per pair."""
    rows = [
        {
            "owner_id": p.anchor.owner_id,
            "anchor_id": p.anchor.pattern_id,
            "anchor_start": p.anchor.start,
            "anchor_end": p.anchor.end,
            "anchor_strand": p.anchor.strand,
            "anchor_score": p.anchor.score,
            "partner_id": p.partner.pattern_id,
            "partner_start": p.partner.start,
            "partner_end": p.partner.end,
            "partner_strand": p.partner.strand,
            "partner_score": p.partner.score,
            "distance": p.distance,
        }
        for p in pairs
    ]
    columns = [
        "owner_id", "anchor_id", "anchor_start", "anchor_end", "anchor_strand", "anchor_score",
        "partner_id", "partner_start", "partner_end", "partner_strand", "partner_score", "distance",
    ]
    return pd.DataFrame(rows, columns=columns)


# ============================================================================
# Aggregation
# ============================================================================


def counts_table(sites: Iterable[Site]) -> pd.DataFrame:
    """Per gene and pattern: number of sites and their total length.

    Returns
    -------
    pd.DataFrame
        Columns [owner_id, pattern_id, count, total_length], sorted by
        owner and pattern.
    """
    df = sites_to_dataframe(sites)
    if df.empty:
        return pd.DataFrame(columns=["owner_id", "pattern_id", "count", "total_length"])

    df["length"] = df["end"] - df["start"] + 1
    counts = (
        df.groupby(["owner_id", "pattern_id"])
        .agg(count=("start", "size"), total_length=("length", "sum"))
        .reset_index()
        .sort_values(["owner_id", "pattern_id"])
        .reset_index(drop=True)
    )
    return counts
