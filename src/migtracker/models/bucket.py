"""Bucket trend models."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from migtracker.models.progress import format_bytes
from migtracker.models.snapshot import BucketOrigin


class BucketPoint(BaseModel):
    """One observation in a bucket's time series."""

    timestamp: date
    origin: BucketOrigin
    object_count: int
    size_bytes: int


class BucketSummary(BaseModel):
    """Latest state of a bucket."""

    bucket_name: str
    origin: BucketOrigin
    latest_size: int
    latest_objects: int
    point_count: int

    @property
    def size_display(self) -> str:
        """Format latest size for display."""
        return format_bytes(self.latest_size)


class BucketTrends(BaseModel):
    """Per-bucket time series plus a summary row per bucket."""

    series: dict[str, list[BucketPoint]] = Field(default_factory=dict)
    summary: list[BucketSummary] = Field(default_factory=list)

    @property
    def timestamps(self) -> list[date]:
        """All sampled timestamps across buckets, ascending."""
        return sorted({p.timestamp for points in self.series.values() for p in points})

    def table(self, metric: Literal["size", "objects"] = "size") -> list[dict[str, object]]:
        """Chart-ready rows keyed by timestamp.

        A bucket not sampled at a timestamp has no key in that row; a missing
        cell means "not sampled", never zero. When one bucket has several
        observations on the same timestamp the last one in series order wins.
        """
        rows: dict[date, dict[str, object]] = {}
        for name, points in self.series.items():
            for point in points:
                row = rows.setdefault(point.timestamp, {"timestamp": point.timestamp})
                row[name] = point.size_bytes if metric == "size" else point.object_count
        return [rows[ts] for ts in sorted(rows)]
