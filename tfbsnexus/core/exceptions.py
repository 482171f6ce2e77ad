"""
Custom exception classes for TFBSNexus.

Configuration errors are fatal for the gene being analyzed but not for a
batch; absence of data is never an exception.
"""


class TFBSNexusError(Exception):
    """Base exception for all TFBSNexus errors."""
    pass


# ============================================================================
# Data validation errors
# ============================================================================

class ValidationError(TFBSNexusError):
    """Raised when input data fails validation checks."""
    pass


class IntervalValidationError(ValidationError):
    """Raised when an interval is constructed with inconsistent fields."""
    pass


class MissingColumnError(ValidationError):
    """Raised when a required column is missing from a DataFrame."""

    def __init__(self, column: str, dataframe_name: str = "DataFrame", available: list = None):
        available_str = f" Available columns: {available}" if available else ""
        super().__init__(
            f"Required column '{column}' not found in {dataframe_name}.{available_str}"
        )
        self.column = column
        self.available = available


class EmptyDataError(ValidationError):
    """Raised when data is empty where it should not be."""

    def __init__(self, data_name: str = "data"):
        super().__init__(f"Empty {data_name} provided where non-empty data is required")
        self.data_name = data_name


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is out of valid range."""

    def __init__(self, param: str, value, valid_range: str = ""):
        msg = f"Invalid value for '{param}': {value}"
        if valid_range:
            msg += f". Expected: {valid_range}"
        super().__init__(msg)
        self.param = param
        self.value = value


# ============================================================================
# Configuration errors (fatal for one gene, not for the batch)
# ============================================================================

class ConfigurationError(ValidationError):
    """Raised when an analysis is configured with unusable input."""
    pass


class InvalidStrandError(ConfigurationError):
    """Raised when a strand value is neither +1 nor -1."""

    def __init__(self, strand, context: str = "gene"):
        super().__init__(f"Unrecognized strand {strand!r} for {context}; expected 1 or -1")
        self.strand = strand


class MissingParameterError(ConfigurationError):
    """Raised when a parameter required by the selected analysis is unset."""

    def __init__(self, param: str, context: str = "analysis"):
        super().__init__(f"Parameter '{param}' is required for {context}")
        self.param = param


# ============================================================================
# Analysis errors
# ============================================================================

class AnalysisError(TFBSNexusError):
    """Base class for analysis-specific errors."""
    pass


class GeneAnalysisError(AnalysisError):
    """Raised when the analysis of a single gene fails."""

    def __init__(self, gene_id: str, reason: str):
        super().__init__(f"Analysis of gene {gene_id} failed: {reason}")
        self.gene_id = gene_id
        self.reason = reason


# ============================================================================
# Validation helpers
# ============================================================================

def validate_dataframe(
    df,
    name: str = "DataFrame",
    required_columns: list = None,
    min_rows: int = 0,
) -> None:
    """Validate a DataFrame has expected shape and columns.

    Parameters
    ----------
    df : pd.DataFrame
        The DataFrame to validate.
    name : str
        Human-readable name for error messages.
    required_columns : list, optional
        Columns that must be present.
    min_rows : int
        Minimum number of rows required.

    Raises
    ------
    EmptyDataError
        If df is None or empty and min_rows > 0.
    MissingColumnError
        If a required column is missing.
    """
    import pandas as pd

    if df is None:
        raise EmptyDataError(name)

    if not isinstance(df, pd.DataFrame):
        raise ValidationError(f"Expected DataFrame for {name}, got {type(df).__name__}")

    if min_rows > 0 and len(df) < min_rows:
        if len(df) == 0:
            raise EmptyDataError(name)
        raise ValidationError(
            f"{name} has {len(df)} rows but at least {min_rows} are required"
        )

    if required_columns:
        for col in required_columns:
            if col not in df.columns:
                raise MissingColumnError(col, name, available=list(df.columns))


def validate_numeric_param(value, name: str, min_val=None, max_val=None) -> None:
    """Validate a numeric parameter is within acceptable bounds.

    Raises
    ------
    InvalidParameterError
        If the value is out of range.
    """
    if min_val is not None and value < min_val:
        raise InvalidParameterError(name, value, f">= {min_val}")
    if max_val is not None and value > max_val:
        raise InvalidParameterError(name, value, f"<= {max_val}")
