"""
Store statistics computed over the polars triple view.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import polars as pl


@dataclass
class GraphStatistics:
    """Statistics for the triples held in a store."""
    triple_count: int = 0
    subject_count: int = 0
    predicate_count: int = 0
    object_count: int = 0
    literal_count: int = 0
    blank_node_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "triple_count": self.triple_count,
            "subject_count": self.subject_count,
            "predicate_count": self.predicate_count,
            "object_count": self.object_count,
            "literal_count": self.literal_count,
            "blank_node_count": self.blank_node_count,
        }


def compute_statistics(df: pl.DataFrame) -> GraphStatistics:
    """
    Compute statistics from a triple DataFrame.

    Args:
        df: DataFrame with subject, predicate, object and object_type columns

    Returns:
        GraphStatistics for the frame
    """
    if df.height == 0:
        return GraphStatistics()

    row = df.select(
        pl.len().alias("triples"),
        pl.col("subject").n_unique().alias("subjects"),
        pl.col("predicate").n_unique().alias("predicates"),
        pl.col("object").n_unique().alias("objects"),
        (pl.col("object_type") == "literal").sum().alias("literals"),
        (
            (pl.col("object_type") == "blank").sum()
            + pl.col("subject").str.starts_with("_:").sum()
        ).alias("blanks"),
    ).row(0, named=True)

    return GraphStatistics(
        triple_count=row["triples"],
        subject_count=row["subjects"],
        predicate_count=row["predicates"],
        object_count=row["objects"],
        literal_count=row["literals"],
        blank_node_count=row["blanks"],
    )


def degree_frame(df: pl.DataFrame) -> pl.DataFrame:
    """
    Count non-literal links per resource (as subject or as object).

    Returns:
        DataFrame with ``id`` and ``degree`` columns, highest degree first
    """
    links = df.filter(pl.col("object_type") != "literal")
    if links.height == 0:
        return pl.DataFrame(
            {"id": [], "degree": []},
            schema={"id": pl.Utf8, "degree": pl.UInt32},
        )
    ends = pl.concat([
        links.select(pl.col("subject").alias("id")),
        links.select(pl.col("object").alias("id")),
    ])
    return (
        ends.group_by("id")
        .agg(pl.len().cast(pl.UInt32).alias("degree"))
        .sort(["degree", "id"], descending=[True, False])
    )
