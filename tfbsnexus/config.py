"""
Configuration settings for TFBSNexus.

Holds the discrete analysis level tables (conservation, search region and
threshold levels) and runtime settings loaded from the environment.
"""

import logging
from typing import Dict, List, Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings


class LevelConfig:
    """Discrete analysis levels."""

    CONSERVATION_LEVELS = {
        1: {"name": "Bottom 30% of conserved regions", "min_conservation": 0.4},
        2: {"name": "Top 20% of conserved regions", "min_conservation": 0.6},
        3: {"name": "Top 10% of conserved regions", "min_conservation": 0.7},
    }

    # (upstream_bp, downstream_bp) around each TSS
    SEARCH_REGION_LEVELS = {
        1: (10000, 10000),
        2: (10000, 5000),
        3: (5000, 5000),
        4: (2000, 2000),
        5: (2000, 0),
    }

    # Minimum relative motif score
    THRESHOLD_LEVELS = {
        1: 0.75,
        2: 0.80,
        3: 0.85,
    }

    @classmethod
    def get_search_region(cls, level: int) -> Tuple[int, int]:
        """Get (upstream_bp, downstream_bp) for a search region level."""
        if level not in cls.SEARCH_REGION_LEVELS:
            raise ValueError(
                f"Unknown search region level: {level}. Known: {list(cls.SEARCH_REGION_LEVELS)}"
            )
        return cls.SEARCH_REGION_LEVELS[level]

    @classmethod
    def get_threshold(cls, level: int) -> float:
        """Get the relative score threshold for a threshold level."""
        if level not in cls.THRESHOLD_LEVELS:
            raise ValueError(f"Unknown threshold level: {level}. Known: {list(cls.THRESHOLD_LEVELS)}")
        return cls.THRESHOLD_LEVELS[level]

    @classmethod
    def get_conservation_level(cls, level: int) -> Dict:
        """Get the description of a conservation level."""
        if level not in cls.CONSERVATION_LEVELS:
            raise ValueError(
                f"Unknown conservation level: {level}. Known: {list(cls.CONSERVATION_LEVELS)}"
            )
        return cls.CONSERVATION_LEVELS[level]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "TFBSNexus"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Interval engine policy
    gap_tolerance: int = Field(default=1, ge=0, description="Max bp between merged cluster sites")
    min_conservation_overlap: int = Field(default=1, ge=1)
    max_site_distance: int = Field(default=100, ge=0)

    # Default analysis parameters
    default_threshold: float = Field(default=0.85, ge=0, le=1)
    default_upstream_bp: Optional[int] = 5000
    default_downstream_bp: Optional[int] = 5000
    conservation_levels: List[int] = Field(default_factory=lambda: sorted(LevelConfig.CONSERVATION_LEVELS))

    # Batch processing
    max_workers: int = Field(default=4, ge=1)
    batch_timeout: Optional[float] = Field(default=None, gt=0, description="Seconds before unfinished genes are abandoned")

    class Config:
        env_prefix = "TFBSNEXUS_"
        env_file = ".env"
        env_file_encoding = "utf-8"


def configure_logging(settings: "Settings") -> None:
    """Configure root logging from settings."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global settings instance
settings = Settings()
