"""Per-bucket size and object-count time series."""

import logging
from typing import Any

from migtracker.models.bucket import BucketPoint, BucketSummary, BucketTrends
from migtracker.models.snapshot import BucketSnapshot
from migtracker.services.boundary import parse_many

logger = logging.getLogger(__name__)


def build_bucket_trends(bucket_snapshots: Any) -> BucketTrends:
    """Group bucket snapshots by bucket name into ascending time series.

    Grouping is by name only, so a bucket seen under both origins stays one
    series; each point keeps its own origin. The summary row for a bucket
    describes its chronologically last point.
    """
    snapshots = parse_many(BucketSnapshot, bucket_snapshots, "bucket snapshots")

    grouped: dict[str, list[BucketSnapshot]] = {}
    for snapshot in snapshots:
        grouped.setdefault(snapshot.bucket_name, []).append(snapshot)

    trends = BucketTrends()
    for name in sorted(grouped):
        history = sorted(grouped[name], key=lambda s: s.timestamp)
        trends.series[name] = [
            BucketPoint(
                timestamp=s.timestamp,
                origin=s.origin,
                object_count=s.object_count,
                size_bytes=s.size_bytes,
            )
            for s in history
        ]
        last = history[-1]
        trends.summary.append(
            BucketSummary(
                bucket_name=name,
                origin=last.origin,
                latest_size=last.size_bytes,
                latest_objects=last.object_count,
                point_count=len(history),
            )
        )

    logger.debug(f"Built trends for {len(trends.series)} bucket(s) from {len(snapshots)} point(s)")
    return trends
