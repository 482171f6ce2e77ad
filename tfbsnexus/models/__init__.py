"""Pydantic schemas for collaborator records."""

from .schemas import (
    MotifHitRecord,
    ConservedRegionRecord,
    PromoterRecord,
    GeneRecord,
)

__all__ = [
    "MotifHitRecord",
    "ConservedRegionRecord",
    "PromoterRecord",
    "GeneRecord",
]
