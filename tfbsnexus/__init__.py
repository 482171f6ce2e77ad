"""
TFBSNexus - Conserved TFBS Analysis Engine

Interval algebra over putative transcription factor binding sites:
overlap filtering, cluster merging, promoter search regions, conservation
assignment and proximal site pairs, run per gene and in parallel batches.
"""

__version__ = "0.1.0"
__author__ = "TFBSNexus Team"
