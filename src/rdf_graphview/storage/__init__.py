"""
rdf-graphview storage layer.

Position indexes and statistics backing the in-memory triple store.
"""

from rdf_graphview.storage.indexing import PositionIndex, IndexStats
from rdf_graphview.storage.statistics import (
    GraphStatistics,
    compute_statistics,
    degree_frame,
)

__all__ = [
    "PositionIndex",
    "IndexStats",
    "GraphStatistics",
    "compute_statistics",
    "degree_frame",
]
